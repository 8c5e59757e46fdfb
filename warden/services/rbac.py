from __future__ import annotations

import logging
from typing import Collection, Set

from ..dal.interfaces import RoleStore

log = logging.getLogger("warden.rbac")


def has_rbac_permission(permissions: Collection[str], resource: str, action: str) -> bool:
    """
    Accepts "<resource>:<action>", "<resource>:*", "*:<action>" or "*:*".
    """
    return (
        f"{resource}:{action}" in permissions
        or f"{resource}:*" in permissions
        or f"*:{action}" in permissions
        or "*:*" in permissions
    )


class RbacFallback:
    """
    Legacy role -> permission-string lookup.

    Only consulted by the authorization gate after an ABAC denial, and never
    when the deployment runs ABAC-only. Kept so existing role grants keep
    working while their ABAC policies are written.
    """
    def __init__(self, role_store: RoleStore):
        self.role_store = role_store

    async def get_requester_permissions(self, requester_id: str) -> Set[str]:
        roles = await self.role_store.get_roles_for_requester(requester_id)
        permissions: Set[str] = set()
        for role in roles:
            permissions.update(role.permission_names)
        return permissions

    async def check_rbac_permission(self, requester_id: str, resource: str, action: str) -> bool:
        try:
            permissions = await self.get_requester_permissions(requester_id)
        except Exception:
            # fail closed
            log.exception("rbac lookup failed requester_id=%s resource=%s action=%s", requester_id, resource, action)
            return False
        return has_rbac_permission(permissions, resource, action)
