"""Repository helpers for profile persistence and the feed scan."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from ..db.collections import PROFILES_COLLECTION
from ..models.profile import ProfileDocument
from .exceptions import NotFoundRepositoryError

LOGGER = logging.getLogger("uvicorn.error")


class ProfileRepository:
    """MongoDB access layer for profile documents keyed by user id."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[PROFILES_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def get_by_user_id(self, user_id: str) -> Optional[ProfileDocument]:
        doc = await self._collection.find_one({"_id": user_id})
        return ProfileDocument(**doc) if doc else None

    async def exists(self, user_id: str) -> bool:
        doc = await self._collection.find_one({"_id": user_id}, projection={"_id": 1})
        return doc is not None

    async def upsert_profile(
        self,
        *,
        user_id: str,
        updates: Dict[str, Any],
        updated_at: int,
    ) -> ProfileDocument:
        """Create or update a profile.

        ``updatedAt`` is written with ``$max`` so a write carrying an older
        clock reading can never move a profile backwards in the feed order.
        """

        operations: Dict[str, Any] = {
            "$max": {"updatedAt": updated_at},
            "$setOnInsert": {"createdAt": updated_at},
        }
        if updates:
            operations["$set"] = updates
        doc = await self._collection.find_one_and_update(
            {"_id": user_id},
            operations,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        if not doc:  # pragma: no cover - defensive, Motor should return doc on upsert
            raise NotFoundRepositoryError("profile upsert failed")
        return ProfileDocument(**doc)

    async def scan_feed(self, *, before: Optional[int], batch_size: int) -> List[Dict[str, Any]]:
        """Return one raw batch of onboarded profiles, newest first.

        Only an equality prefilter and a range on the sort key are used, so a
        single-field ``updatedAt`` index is enough.
        """

        updated_filter: Dict[str, Any] = {"$gt": 0}
        if before is not None:
            updated_filter["$lt"] = before
        cursor = (
            self._collection.find({"onboardingCompleted": True, "updatedAt": updated_filter})
            .sort("updatedAt", DESCENDING)
            .limit(batch_size)
        )
        return await cursor.to_list(length=batch_size)


__all__ = ["ProfileRepository"]
