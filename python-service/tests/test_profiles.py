from __future__ import annotations

import pytest

from kindred.db.collections import PROFILES_COLLECTION
from kindred.services.profile_service import ProfileService


@pytest.mark.asyncio
async def test_owner_upserts_profile(api_client, db, auth_headers) -> None:
    response = await api_client.put(
        "/api/profiles/me",
        json={
            "displayName": "  Robin ",
            "bio": "Hello",
            "photos": ["https://cdn.test/a.jpg", "https://cdn.test/a.jpg", " "],
            "onboardingCompleted": True,
            "soberDate": "2021-05-01",
            "updatedAt": 1,
        },
        headers=auth_headers("robin"),
    )
    assert response.status_code == 200, response.text
    payload = response.json()
    assert payload["userId"] == "robin"
    assert payload["displayName"] == "Robin"
    assert payload["photos"] == ["https://cdn.test/a.jpg"]
    assert payload["soberDate"] == "2021-05-01"
    assert payload["updatedAt"] > 1

    stored = await db[PROFILES_COLLECTION].find_one({"_id": "robin"})
    assert stored["onboardingCompleted"] is True
    assert stored["createdAt"] == stored["updatedAt"]

    mine = await api_client.get("/api/profiles/me", headers=auth_headers("robin"))
    assert mine.json()["displayName"] == "Robin"


@pytest.mark.asyncio
async def test_updated_at_never_moves_backwards(api_client, db, auth_headers, monkeypatch) -> None:
    clock = iter([5_000, 4_000, 6_000])
    monkeypatch.setattr(ProfileService, "_now_ms", staticmethod(lambda: next(clock)))
    headers = auth_headers("sam")

    stamps = []
    for bio in ("one", "two", "three"):
        response = await api_client.put("/api/profiles/me", json={"bio": bio}, headers=headers)
        stamps.append(response.json()["updatedAt"])

    assert stamps == [5_000, 5_000, 6_000]
    stored = await db[PROFILES_COLLECTION].find_one({"_id": "sam"})
    assert stored["bio"] == "three"


@pytest.mark.asyncio
async def test_hidden_profile_is_not_public(api_client, make_profile, auth_headers) -> None:
    await make_profile("shy", 10, hideMode=True)
    await make_profile("open", 10)

    hidden = await api_client.get("/api/profiles/shy", headers=auth_headers("viewer"))
    assert hidden.status_code == 404

    visible = await api_client.get("/api/profiles/open", headers=auth_headers("viewer"))
    assert visible.status_code == 200
    assert visible.json()["userId"] == "open"

    missing = await api_client.get("/api/profiles/me", headers=auth_headers("viewer"))
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_operator_and_dotted_extras_are_dropped(api_client, db, auth_headers) -> None:
    response = await api_client.put(
        "/api/profiles/me",
        json={
            "photos": ["https://cdn.test/p.jpg"],
            "photos.0": "https://evil.test/x.jpg",
            "$rename": {"bio": "gone"},
            "pronouns": "they/them",
        },
        headers=auth_headers("kit"),
    )
    assert response.status_code == 200, response.text

    stored = await db[PROFILES_COLLECTION].find_one({"_id": "kit"})
    assert stored["photos"] == ["https://cdn.test/p.jpg"]
    assert stored["pronouns"] == "they/them"
    assert "photos.0" not in stored
    assert "$rename" not in stored
