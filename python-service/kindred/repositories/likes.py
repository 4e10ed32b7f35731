"""Repository helpers for directed like records."""

from __future__ import annotations

import logging
from typing import Optional, Set

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from ..db.collections import LIKES_COLLECTION
from ..models.identifiers import like_key
from ..models.likes import LikeDocument

LOGGER = logging.getLogger("uvicorn.error")


class LikeRepository:
    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[LIKES_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def create_like(self, *, from_uid: str, to_uid: str, created_at: int) -> bool:
        """Insert the like; ``False`` when the pair was already liked."""

        doc = {
            "_id": like_key(from_uid, to_uid),
            "fromUid": from_uid,
            "toUid": to_uid,
            "createdAt": created_at,
        }
        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError:
            LOGGER.debug("Like %s already recorded", doc["_id"])
            return False
        return True

    async def get_like(self, from_uid: str, to_uid: str) -> Optional[LikeDocument]:
        doc = await self._collection.find_one({"_id": like_key(from_uid, to_uid)})
        return LikeDocument(**doc) if doc else None

    async def delete_by_id(self, like_id: str) -> bool:
        result = await self._collection.delete_one({"_id": like_id})
        return bool(result.deleted_count)

    async def liked_user_ids(self, from_uid: str) -> Set[str]:
        liked: Set[str] = set()
        async for doc in self._collection.find({"fromUid": from_uid}, projection={"toUid": 1}):
            to_uid = doc.get("toUid")
            if isinstance(to_uid, str) and to_uid:
                liked.add(to_uid)
        return liked


__all__ = ["LikeRepository"]
