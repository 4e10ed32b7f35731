"""Repository helpers for directed block records."""

from __future__ import annotations

import logging
from typing import Set

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from ..db.collections import BLOCKS_COLLECTION
from ..models.identifiers import block_key

LOGGER = logging.getLogger("uvicorn.error")


async def _collect(cursor, field: str) -> Set[str]:
    values: Set[str] = set()
    async for doc in cursor:
        value = doc.get(field)
        if isinstance(value, str) and value:
            values.add(value)
    return values


class BlockRepository:
    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[BLOCKS_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def create_block(self, *, blocker_uid: str, subject_uid: str, created_at: int) -> bool:
        """Insert the block; ``False`` when it already existed."""

        doc = {
            "_id": block_key(blocker_uid, subject_uid),
            "blockerUid": blocker_uid,
            "subjectUid": subject_uid,
            "createdAt": created_at,
        }
        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError:
            LOGGER.debug("Block %s already recorded", doc["_id"])
            return False
        return True

    async def exists(self, blocker_uid: str, subject_uid: str) -> bool:
        doc = await self._collection.find_one(
            {"_id": block_key(blocker_uid, subject_uid)},
            projection={"_id": 1},
        )
        return doc is not None

    async def is_blocked_either_way(self, user_a: str, user_b: str) -> bool:
        doc = await self._collection.find_one(
            {"_id": {"$in": [block_key(user_a, user_b), block_key(user_b, user_a)]}},
            projection={"_id": 1},
        )
        return doc is not None

    async def blocked_by(self, blocker_uid: str) -> Set[str]:
        """Users the given user has blocked."""
        cursor = self._collection.find({"blockerUid": blocker_uid}, projection={"subjectUid": 1})
        return await _collect(cursor, "subjectUid")

    async def blockers_of(self, subject_uid: str) -> Set[str]:
        """Users who blocked the given user (scans every blocker)."""
        cursor = self._collection.find({"subjectUid": subject_uid}, projection={"blockerUid": 1})
        return await _collect(cursor, "blockerUid")


__all__ = ["BlockRepository"]
