from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from .collections import (
    BLOCKS_COLLECTION,
    LIKES_COLLECTION,
    MATCHES_COLLECTION,
    PROFILES_COLLECTION,
)


async def ensure_profile_indexes(db: AsyncIOMotorDatabase) -> None:
    collection = db[PROFILES_COLLECTION]
    await collection.create_index([("updatedAt", DESCENDING)], name="profiles_updated_at_idx")
    await collection.create_index(
        [("onboardingCompleted", ASCENDING), ("updatedAt", DESCENDING)],
        name="profiles_onboarded_updated_at_idx",
    )


async def ensure_likes_indexes(db: AsyncIOMotorDatabase) -> None:
    collection = db[LIKES_COLLECTION]
    await collection.create_index(
        [("fromUid", ASCENDING), ("createdAt", DESCENDING)],
        name="likes_from_uid_idx",
    )
    await collection.create_index(
        [("toUid", ASCENDING), ("createdAt", DESCENDING)],
        name="likes_to_uid_idx",
    )


async def ensure_blocks_indexes(db: AsyncIOMotorDatabase) -> None:
    collection = db[BLOCKS_COLLECTION]
    await collection.create_index([("blockerUid", ASCENDING)], name="blocks_blocker_uid_idx")
    # "Who blocked me" lookups scan across every blocker
    await collection.create_index([("subjectUid", ASCENDING)], name="blocks_subject_uid_idx")


async def ensure_matches_indexes(db: AsyncIOMotorDatabase) -> None:
    collection = db[MATCHES_COLLECTION]
    await collection.create_index(
        [("members", ASCENDING), ("lastActivityAt", DESCENDING)],
        name="matches_members_idx",
    )


__all__ = [
    "ensure_blocks_indexes",
    "ensure_likes_indexes",
    "ensure_matches_indexes",
    "ensure_profile_indexes",
]
