"""Repository helpers for match documents."""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..db.collections import MATCHES_COLLECTION
from ..models.identifiers import match_key, sorted_pair
from ..models.likes import MatchDocument
from .exceptions import DuplicateKeyRepositoryError

LOGGER = logging.getLogger("uvicorn.error")


class MatchRepository:
    """Matches are keyed by the sorted member pair, one document per pair."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = database[MATCHES_COLLECTION]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def create_if_absent(self, user_a: str, user_b: str, *, created_at: int) -> MatchDocument:
        """Insert the match for the pair; never overwrites an existing one."""

        doc = {
            "_id": match_key(user_a, user_b),
            "members": list(sorted_pair(user_a, user_b)),
            "createdAt": created_at,
            "lastActivityAt": created_at,
        }
        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise DuplicateKeyRepositoryError(f"match {doc['_id']} already exists") from exc
        return MatchDocument(**doc)

    async def get_by_id(self, match_id: str) -> Optional[MatchDocument]:
        doc = await self._collection.find_one({"_id": match_id})
        return MatchDocument(**doc) if doc else None

    async def delete_by_id(self, match_id: str) -> bool:
        result = await self._collection.delete_one({"_id": match_id})
        return bool(result.deleted_count)

    async def list_for_member(self, user_id: str) -> List[MatchDocument]:
        cursor = self._collection.find({"members": user_id}).sort("lastActivityAt", DESCENDING)
        return [MatchDocument(**doc) async for doc in cursor]

    async def partner_ids(self, user_id: str) -> Set[str]:
        partners: Set[str] = set()
        async for doc in self._collection.find({"members": user_id}, projection={"members": 1}):
            for member in doc.get("members") or []:
                if isinstance(member, str) and member and member != user_id:
                    partners.add(member)
        return partners

    async def touch(self, match_id: str, *, member_uid: str, at: int) -> Optional[MatchDocument]:
        """Advance ``lastActivityAt`` for a match the member belongs to."""

        doc = await self._collection.find_one_and_update(
            {"_id": match_id, "members": member_uid},
            {"$max": {"lastActivityAt": at}},
            return_document=ReturnDocument.AFTER,
        )
        return MatchDocument(**doc) if doc else None


__all__ = ["MatchRepository"]
