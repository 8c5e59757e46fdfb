from __future__ import annotations

from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from ..models import Role
from ..settings import settings


def _to_role(d: Dict[str, Any]) -> Role:
    d["_id"] = str(d["_id"])
    return Role.model_validate(d)


class RoleDAL:
    """
    Read side of the legacy RBAC catalogue.

    Role membership lives on the user document (`role_names`), so requester
    lookups go through the users collection first.
    """
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db[settings.COL_ROLES]
        self.users = db[settings.COL_USERS]

    async def ensure_indexes(self) -> None:
        await self.col.create_index([("name", ASCENDING)], unique=True)

    async def get_roles_for_requester(self, requester_id: str) -> List[Role]:
        from bson import ObjectId
        from bson.errors import InvalidId
        try:
            key: Any = ObjectId(requester_id)
        except InvalidId:
            key = requester_id
        user = await self.users.find_one({"_id": key}, {"role_names": 1})
        names = (user or {}).get("role_names") or []
        if not names:
            return []
        cur = self.col.find({"name": {"$in": list(set(names))}}).sort("name", ASCENDING)
        return [_to_role(d) async for d in cur]

    async def list_roles(self) -> List[Role]:
        cur = self.col.find({}).sort("name", ASCENDING)
        return [_to_role(d) async for d in cur]
