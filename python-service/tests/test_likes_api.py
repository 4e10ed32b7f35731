from __future__ import annotations

import pytest

from kindred.db.collections import LIKES_COLLECTION


@pytest.mark.asyncio
async def test_like_match_block_round_trip(api_client, make_profile, auth_headers) -> None:
    await make_profile("U1", 10)
    await make_profile("U2", 20)

    first = await api_client.post("/api/likes", json={"targetUserId": "U2"}, headers=auth_headers("U1"))
    assert first.status_code == 200, first.text
    assert first.json() == {"status": "ok", "created": True, "isMatch": False}

    second = await api_client.post("/api/likes", json={"targetUserId": "U1"}, headers=auth_headers("U2"))
    assert second.status_code == 200, second.text
    assert second.json()["isMatch"] is True

    matches = await api_client.get("/api/matches", headers=auth_headers("U1"))
    assert matches.status_code == 200
    listed = matches.json()["matches"]
    assert [(m["matchId"], m["userId"]) for m in listed] == [("U1_U2", "U2")]

    feed = await api_client.get("/api/feed", headers=auth_headers("U1"))
    assert feed.json()["items"] == []

    block = await api_client.post("/api/blocks", json={"subjectUserId": "U2"}, headers=auth_headers("U1"))
    assert block.status_code == 200
    assert block.json() == {"status": "ok", "created": True}

    after = await api_client.get("/api/matches", headers=auth_headers("U1"))
    assert after.json()["matches"] == []

    repeat = await api_client.post("/api/blocks", json={"subjectUserId": "U2"}, headers=auth_headers("U1"))
    assert repeat.json()["created"] is False

    blocked = await api_client.get("/api/blocks", headers=auth_headers("U1"))
    assert blocked.json() == {"blocked": ["U2"]}


@pytest.mark.asyncio
async def test_duplicate_like_is_idempotent(api_client, db, make_profile, auth_headers) -> None:
    await make_profile("target", 10)

    for expected in (True, False):
        response = await api_client.post(
            "/api/likes", json={"targetUserId": "target"}, headers=auth_headers("fan")
        )
        assert response.status_code == 200
        assert response.json()["created"] is expected

    assert await db[LIKES_COLLECTION].count_documents({}) == 1


@pytest.mark.asyncio
async def test_like_validation(api_client, make_profile, auth_headers) -> None:
    await make_profile("me", 10)
    await make_profile("enemy", 20)

    self_like = await api_client.post("/api/likes", json={"targetUserId": "me"}, headers=auth_headers("me"))
    assert self_like.status_code == 400

    unknown = await api_client.post("/api/likes", json={"targetUserId": "ghost"}, headers=auth_headers("me"))
    assert unknown.status_code == 404

    blank = await api_client.post("/api/likes", json={"targetUserId": "  "}, headers=auth_headers("me"))
    assert blank.status_code == 422

    anonymous = await api_client.post("/api/likes", json={"targetUserId": "enemy"})
    assert anonymous.status_code == 401

    await api_client.post("/api/blocks", json={"subjectUserId": "me"}, headers=auth_headers("enemy"))
    blocked = await api_client.post("/api/likes", json={"targetUserId": "enemy"}, headers=auth_headers("me"))
    assert blocked.status_code == 403


@pytest.mark.asyncio
async def test_unlike_removes_pending_like(api_client, db, make_profile, auth_headers) -> None:
    await make_profile("crush", 10)
    await api_client.post("/api/likes", json={"targetUserId": "crush"}, headers=auth_headers("me"))

    removed = await api_client.delete("/api/likes/crush", headers=auth_headers("me"))
    assert removed.json() == {"status": "ok", "removed": True}
    assert await db[LIKES_COLLECTION].count_documents({}) == 0

    again = await api_client.delete("/api/likes/crush", headers=auth_headers("me"))
    assert again.json()["removed"] is False


@pytest.mark.asyncio
async def test_match_activity_is_member_only(api_client, make_profile, auth_headers) -> None:
    await make_profile("U1", 10)
    await make_profile("U2", 20)
    await api_client.post("/api/likes", json={"targetUserId": "U2"}, headers=auth_headers("U1"))
    await api_client.post("/api/likes", json={"targetUserId": "U1"}, headers=auth_headers("U2"))

    touched = await api_client.post("/api/matches/U1_U2/activity", headers=auth_headers("U2"))
    assert touched.status_code == 200, touched.text
    body = touched.json()
    assert body["userId"] == "U1"
    assert body["lastActivityAt"] >= body["createdAt"]

    outsider = await api_client.post("/api/matches/U1_U2/activity", headers=auth_headers("U3"))
    assert outsider.status_code == 404
