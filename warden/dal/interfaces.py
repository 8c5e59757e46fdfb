from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..models import Permission, Policy, Role, UserRecord


class PolicyStore(Protocol):
    async def list_enabled_policies(self) -> Sequence[Policy]:
        """Enabled policies only, ordered by priority DESC then created_at ASC."""
        ...

    async def list_policies(self) -> Sequence[Policy]:
        """Every policy, enabled or not, ordered by priority DESC then created_at ASC."""
        ...


class PolicyRepository(PolicyStore, Protocol):
    async def create(self, doc: Dict[str, Any]) -> Policy: ...

    async def get(self, id: str) -> Optional[Policy]: ...

    async def update(self, *, id: str, patch: Dict[str, Any]) -> Optional[Policy]: ...

    async def delete(self, *, id: str) -> bool: ...


class RoleStore(Protocol):
    async def get_roles_for_requester(self, requester_id: str) -> List[Role]: ...

    async def list_roles(self) -> List[Role]: ...


class PermissionStore(Protocol):
    async def list_permissions(self) -> List[Permission]:
        """Ordered by resource, action."""
        ...


class UserStore(Protocol):
    async def get_user(self, user_id: str) -> Optional[UserRecord]: ...

    async def list_users(self) -> List[UserRecord]: ...
