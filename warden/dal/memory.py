from __future__ import annotations

import itertools
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..models import Permission, Policy, Role, UserRecord


def _ordered(policies: Iterable[Policy], seq: Mapping[str, int]) -> List[Policy]:
    # priority DESC, then creation order
    return sorted(policies, key=lambda p: (-p.priority, p.created_at, seq.get(p.id, 0)))


class InMemoryPolicyStore:
    """
    Dict-backed policy repository for tests and single-process use.
    """
    def __init__(self, policies: Iterable[Policy] = ()) -> None:
        self._store: Dict[str, Policy] = {}
        self._seq: Dict[str, int] = {}
        self._counter = itertools.count()
        for p in policies:
            self._put(p)

    def _put(self, policy: Policy) -> Policy:
        if policy.id not in self._seq:
            self._seq[policy.id] = next(self._counter)
        self._store[policy.id] = policy
        return policy

    async def list_enabled_policies(self) -> List[Policy]:
        return _ordered((p for p in self._store.values() if p.enabled), self._seq)

    async def list_policies(self) -> List[Policy]:
        return _ordered(self._store.values(), self._seq)

    async def create(self, doc: Dict[str, Any]) -> Policy:
        now = Policy.now()
        data = {**doc, "created_at": now, "updated_at": now}
        data.setdefault("id", uuid.uuid4().hex)
        return self._put(Policy(**data))

    async def get(self, id: str) -> Optional[Policy]:
        return self._store.get(id)

    async def get_by_name(self, name: str) -> Optional[Policy]:
        return next((p for p in self._store.values() if p.name == name), None)

    async def update(self, *, id: str, patch: Dict[str, Any]) -> Optional[Policy]:
        current = self._store.get(id)
        if current is None:
            return None
        patch = {**patch, "updated_at": Policy.now()}
        updated = Policy(**{**current.model_dump(), **patch})
        return self._put(updated)

    async def delete(self, *, id: str) -> bool:
        self._seq.pop(id, None)
        return self._store.pop(id, None) is not None


class InMemoryRoleStore:
    """
    roles: role definitions; assignments: requester id -> role names.
    """
    def __init__(self, roles: Iterable[Role] = (), assignments: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        self._roles: Dict[str, Role] = {r.name: r for r in roles}
        self._assignments: Dict[str, List[str]] = {k: list(v) for k, v in (assignments or {}).items()}

    def assign(self, requester_id: str, role_names: Iterable[str]) -> None:
        self._assignments[requester_id] = list(role_names)

    async def get_roles_for_requester(self, requester_id: str) -> List[Role]:
        names = self._assignments.get(requester_id) or []
        return [self._roles[n] for n in names if n in self._roles]

    async def list_roles(self) -> List[Role]:
        return sorted(self._roles.values(), key=lambda r: r.name)


class InMemoryPermissionStore:
    def __init__(self, permissions: Iterable[Permission] = ()) -> None:
        self._permissions = list(permissions)

    async def list_permissions(self) -> List[Permission]:
        return sorted(self._permissions, key=lambda p: (p.resource, p.action))


class InMemoryUserStore:
    def __init__(self, users: Iterable[UserRecord] = ()) -> None:
        self._users: Dict[str, UserRecord] = {u.id: u for u in users}

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        return self._users.get(user_id)

    async def list_users(self) -> List[UserRecord]:
        return sorted(self._users.values(), key=lambda u: u.username)
