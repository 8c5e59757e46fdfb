from __future__ import annotations

from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from ..models import Permission
from ..settings import settings


def _derive_resource_action(name: str) -> tuple[str, str]:
    """
    Backward-compatible derivation from "resource:action" names.
    Examples:
      - "user:read" -> ("user", "read")
      - "audit" -> ("audit", "*")
    """
    if ":" not in name:
        return (name, "*")
    resource, action = name.split(":", 1)
    return (resource.strip() or "*", action.strip() or "*")


def _to_permission(d: Dict[str, Any]) -> Permission:
    d["_id"] = str(d["_id"])
    if not d.get("resource") or not d.get("action"):
        d["resource"], d["action"] = _derive_resource_action(d["name"])
    return Permission.model_validate(d)


class PermissionDAL:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db[settings.COL_PERMISSIONS]

    async def ensure_indexes(self) -> None:
        await self.col.create_index([("name", ASCENDING)], unique=True)
        await self.col.create_index([("resource", ASCENDING), ("action", ASCENDING)])

    async def list_permissions(self) -> List[Permission]:
        cur = self.col.find({}).sort([("resource", ASCENDING), ("action", ASCENDING)])
        return [_to_permission(d) async for d in cur]
