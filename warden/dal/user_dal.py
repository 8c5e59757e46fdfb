from __future__ import annotations

from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from ..models import UserRecord
from ..settings import settings


def _to_user(d: Dict[str, Any]) -> UserRecord:
    d["_id"] = str(d["_id"])
    return UserRecord.model_validate(d)


class UserDAL:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db[settings.COL_USERS]

    async def ensure_indexes(self) -> None:
        await self.col.create_index([("username", ASCENDING)], unique=True)

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        from bson import ObjectId
        from bson.errors import InvalidId
        try:
            key: Any = ObjectId(user_id)
        except InvalidId:
            key = user_id
        d = await self.col.find_one({"_id": key})
        if not d:
            return None
        return _to_user(d)

    async def list_users(self) -> List[UserRecord]:
        cur = self.col.find({}).sort("username", ASCENDING)
        return [_to_user(d) async for d in cur]
