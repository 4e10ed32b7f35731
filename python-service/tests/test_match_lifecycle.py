from __future__ import annotations

import asyncio

import pytest
from pymongo.errors import OperationFailure

from kindred.db.collections import LIKES_COLLECTION, MATCHES_COLLECTION
from kindred.repositories.blocks import BlockRepository
from kindred.repositories.likes import LikeRepository
from kindred.repositories.matches import MatchRepository
from kindred.services.match_lifecycle import get_match_lifecycle_service


async def _like(db, from_uid: str, to_uid: str) -> None:
    await LikeRepository(db).create_like(from_uid=from_uid, to_uid=to_uid, created_at=1)


async def _block(db, blocker_uid: str, subject_uid: str) -> None:
    await BlockRepository(db).create_block(blocker_uid=blocker_uid, subject_uid=subject_uid, created_at=1)


@pytest.mark.asyncio
async def test_one_sided_like_creates_no_match(db) -> None:
    await _like(db, "U1", "U2")

    result = await get_match_lifecycle_service().on_like_created("U1", "U2")

    assert result is None
    assert await db[MATCHES_COLLECTION].count_documents({}) == 0
    assert await db[LIKES_COLLECTION].count_documents({}) == 1


@pytest.mark.asyncio
async def test_reciprocal_like_creates_sorted_match_and_consumes_likes(db) -> None:
    service = get_match_lifecycle_service()
    await _like(db, "U2", "U1")
    assert await service.on_like_created("U2", "U1") is None

    await _like(db, "U1", "U2")
    match = await service.on_like_created("U1", "U2")

    assert match is not None
    assert match.id == "U1_U2"
    assert match.members == ["U1", "U2"]
    assert match.last_activity_at == match.created_at
    assert await db[MATCHES_COLLECTION].count_documents({}) == 1
    assert await db[LIKES_COLLECTION].count_documents({}) == 0


@pytest.mark.asyncio
async def test_racing_deliveries_produce_exactly_one_match(db) -> None:
    await _like(db, "alice", "bob")
    await _like(db, "bob", "alice")
    service = get_match_lifecycle_service()

    results = await asyncio.gather(
        service.on_like_created("alice", "bob"),
        service.on_like_created("bob", "alice"),
        service.on_like_created("alice", "bob"),
    )

    created = [result for result in results if result is not None]
    assert len(created) == 1
    stored = await db[MATCHES_COLLECTION].find({}).to_list(length=None)
    assert [doc["_id"] for doc in stored] == ["alice_bob"]
    assert await db[LIKES_COLLECTION].count_documents({}) == 0


@pytest.mark.asyncio
async def test_create_match_absorbs_existing_match(db) -> None:
    await MatchRepository(db).create_if_absent("U1", "U2", created_at=5)
    await _like(db, "U1", "U2")
    await _like(db, "U2", "U1")

    result = await get_match_lifecycle_service().create_match(
        "U2", "U1", like_ids=("U1_U2", "U2_U1")
    )

    assert result is None
    stored = await db[MATCHES_COLLECTION].find_one({"_id": "U1_U2"})
    assert stored["createdAt"] == 5
    assert await db[LIKES_COLLECTION].count_documents({}) == 0


@pytest.mark.asyncio
async def test_redelivered_like_after_match_is_noop(db) -> None:
    await _like(db, "U1", "U2")
    await _like(db, "U2", "U1")
    service = get_match_lifecycle_service()
    await service.on_like_created("U2", "U1")

    assert await service.on_like_created("U2", "U1") is None
    assert await service.on_like_created("U1", "U2") is None
    assert await db[MATCHES_COLLECTION].count_documents({}) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("pair", [("U1", "U1"), ("", "U2"), ("U1", "  "), (None, "U2")])
async def test_invalid_like_events_are_ignored(db, pair) -> None:
    assert await get_match_lifecycle_service().on_like_created(*pair) is None
    assert await db[MATCHES_COLLECTION].count_documents({}) == 0


@pytest.mark.asyncio
async def test_unexpected_create_failure_keeps_likes(db, monkeypatch: pytest.MonkeyPatch) -> None:
    await _like(db, "U1", "U2")
    await _like(db, "U2", "U1")

    async def _broken(self, user_a, user_b, *, created_at):
        raise OperationFailure("write concern timeout")

    monkeypatch.setattr(MatchRepository, "create_if_absent", _broken)

    assert await get_match_lifecycle_service().on_like_created("U1", "U2") is None
    assert await db[LIKES_COLLECTION].count_documents({}) == 2


@pytest.mark.asyncio
async def test_like_cleanup_failures_are_contained(db, monkeypatch: pytest.MonkeyPatch) -> None:
    await _like(db, "U1", "U2")
    await _like(db, "U2", "U1")
    original_delete = LikeRepository.delete_by_id

    async def _flaky_delete(self, like_id):
        if like_id == "U1_U2":
            raise OperationFailure("delete failed")
        return await original_delete(self, like_id)

    monkeypatch.setattr(LikeRepository, "delete_by_id", _flaky_delete)

    match = await get_match_lifecycle_service().on_like_created("U1", "U2")

    assert match is not None
    remaining = await db[LIKES_COLLECTION].find({}).to_list(length=None)
    assert [doc["_id"] for doc in remaining] == ["U1_U2"]


@pytest.mark.asyncio
async def test_block_removes_match_and_redelivery_is_noop(db) -> None:
    await MatchRepository(db).create_if_absent("U1", "U2", created_at=1)
    await _block(db, "U2", "U1")
    service = get_match_lifecycle_service()

    assert await service.on_block_created("U2", "U1") is True
    assert await db[MATCHES_COLLECTION].count_documents({}) == 0
    assert await service.on_block_created("U2", "U1") is False


@pytest.mark.asyncio
async def test_block_without_match_leaves_likes_standing(db) -> None:
    await _like(db, "U2", "U1")
    await _block(db, "U1", "U2")

    assert await get_match_lifecycle_service().on_block_created("U1", "U2") is False
    assert await db[LIKES_COLLECTION].count_documents({"_id": "U2_U1"}) == 1


@pytest.mark.asyncio
async def test_block_delete_failure_is_not_raised(db, monkeypatch: pytest.MonkeyPatch) -> None:
    await _block(db, "U1", "U2")

    async def _broken(self, match_id):
        raise OperationFailure("primary unavailable")

    monkeypatch.setattr(MatchRepository, "delete_by_id", _broken)

    assert await get_match_lifecycle_service().on_block_created("U1", "U2") is False


@pytest.mark.asyncio
async def test_block_event_without_block_record_keeps_match(db) -> None:
    await MatchRepository(db).create_if_absent("alice", "bob", created_at=1)
    await _block(db, "bob", "alice")

    assert await get_match_lifecycle_service().on_block_created("alice", "bob") is False
    assert await db[MATCHES_COLLECTION].count_documents({}) == 1


@pytest.mark.asyncio
async def test_ids_containing_separator_get_distinct_keys(db) -> None:
    likes = LikeRepository(db)
    assert await likes.create_like(from_uid="a", to_uid="b_c", created_at=1) is True
    assert await likes.create_like(from_uid="a_b", to_uid="c", created_at=2) is True
    await _like(db, "c", "a_b")

    service = get_match_lifecycle_service()
    assert await service.on_like_created("c", "a") is None
    match = await service.on_like_created("c", "a_b")

    assert match is not None
    assert match.members == ["a_b", "c"]
    remaining = await db[LIKES_COLLECTION].find({}).to_list(length=None)
    assert [(doc["fromUid"], doc["toUid"]) for doc in remaining] == [("a", "b_c")]
