from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from ..db import get_db
from ..models.profile import Profile, ProfileDocument, ProfileUpsert
from ..repositories.profile import ProfileRepository

PHOTO_LIMIT = 9

_RESERVED_FIELDS = ("_id", "userId", "createdAt", "updatedAt")


def _clean_str(value: Any, max_len: Optional[int] = None) -> Optional[str]:
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if max_len is not None and len(text) > max_len:
            text = text[:max_len]
        return text
    return None


def _normalize_photo_list(raw: Any, limit: int = PHOTO_LIMIT) -> List[str]:
    photos: List[str] = []
    if isinstance(raw, (list, tuple)):
        for entry in raw:
            cleaned = _clean_str(entry, max_len=512)
            if not cleaned or cleaned in photos:
                continue
            photos.append(cleaned)
            if len(photos) >= limit:
                break
    return photos


def to_public_profile(doc: ProfileDocument) -> Profile:
    data = doc.model_dump(by_alias=True)
    data["userId"] = data.pop("_id")
    data.pop("createdAt", None)
    return Profile(**data)


class ProfileService:
    """Owner-only profile writes and public reads."""

    def __init__(self, repository: ProfileRepository) -> None:
        self._repository = repository

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    async def get_profile(self, user_id: str) -> Optional[ProfileDocument]:
        if not user_id:
            return None
        return await self._repository.get_by_user_id(user_id)

    async def get_public_profile(self, user_id: str) -> Optional[Profile]:
        doc = await self.get_profile(user_id)
        if not doc or doc.hide_mode:
            return None
        return to_public_profile(doc)

    async def upsert_profile(self, user_id: str, payload: ProfileUpsert) -> ProfileDocument:
        updates = self._build_updates(payload)
        return await self._repository.upsert_profile(
            user_id=user_id,
            updates=updates,
            updated_at=self._now_ms(),
        )

    def _build_updates(self, payload: ProfileUpsert) -> Dict[str, Any]:
        updates: Dict[str, Any] = {}

        # Free-form extras first so the typed fields below always win
        for key, value in (payload.model_extra or {}).items():
            # Operator-like or dotted keys would address other fields
            if key in _RESERVED_FIELDS or key.startswith("$") or "." in key:
                continue
            updates[key] = value

        if payload.display_name is not None:
            updates["displayName"] = _clean_str(payload.display_name, max_len=80) or ""
        if payload.bio is not None:
            updates["bio"] = _clean_str(payload.bio, max_len=600) or ""
        if payload.photos is not None:
            updates["photos"] = _normalize_photo_list(payload.photos)
        if payload.onboarding_completed is not None:
            updates["onboardingCompleted"] = bool(payload.onboarding_completed)
        if payload.hide_mode is not None:
            updates["hideMode"] = bool(payload.hide_mode)

        return updates


def get_profile_service() -> ProfileService:
    return ProfileService(ProfileRepository(get_db()))


__all__ = ["ProfileService", "get_profile_service", "to_public_profile"]
