from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..models import Policy
from ..settings import settings

_ORDER = [("priority", DESCENDING), ("created_at", ASCENDING)]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _to_policy(d: Dict[str, Any]) -> Policy:
    d["_id"] = str(d["_id"])
    return Policy.model_validate(d)


class PolicyDAL:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db[settings.COL_POLICIES]

    async def ensure_indexes(self) -> None:
        await self.col.create_index([("name", ASCENDING)], unique=True)
        await self.col.create_index([("enabled", ASCENDING), ("priority", DESCENDING), ("created_at", ASCENDING)])
        await self.col.create_index([("subject", ASCENDING)])

    async def create(self, doc: Dict[str, Any]) -> Policy:
        doc = dict(doc)
        doc["created_at"] = _now()
        doc["updated_at"] = _now()
        try:
            res = await self.col.insert_one(doc)
        except DuplicateKeyError:
            raise ValueError(f"Policy already exists: {doc.get('name')}")
        doc["_id"] = res.inserted_id
        return _to_policy(doc)

    async def get(self, id: str) -> Optional[Policy]:
        from bson import ObjectId
        from bson.errors import InvalidId
        try:
            oid = ObjectId(id)
        except InvalidId:
            return None
        d = await self.col.find_one({"_id": oid})
        if not d:
            return None
        return _to_policy(d)

    async def get_by_name(self, name: str) -> Optional[Policy]:
        d = await self.col.find_one({"name": name})
        if not d:
            return None
        return _to_policy(d)

    async def list_policies(self) -> List[Policy]:
        cur = self.col.find({}).sort(_ORDER)
        return [_to_policy(d) async for d in cur]

    async def list_enabled_policies(self) -> List[Policy]:
        cur = self.col.find({"enabled": True}).sort(_ORDER)
        return [_to_policy(d) async for d in cur]

    async def update(self, *, id: str, patch: Dict[str, Any]) -> Optional[Policy]:
        from bson import ObjectId
        from bson.errors import InvalidId
        try:
            oid = ObjectId(id)
        except InvalidId:
            return None
        patch = {**patch, "updated_at": _now()}
        r = await self.col.find_one_and_update(
            {"_id": oid},
            {"$set": patch},
            return_document=ReturnDocument.AFTER,
        )
        if not r:
            return None
        return _to_policy(r)

    async def delete(self, *, id: str) -> bool:
        from bson import ObjectId
        from bson.errors import InvalidId
        try:
            oid = ObjectId(id)
        except InvalidId:
            return False
        r = await self.col.delete_one({"_id": oid})
        return r.deleted_count == 1
