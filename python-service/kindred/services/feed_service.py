from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from pymongo.errors import AutoReconnect

from ..config import get_settings
from ..db import get_db
from ..models.feed import FeedCursor, FeedPage
from ..models.identifiers import clean_user_id
from ..models.profile import FeedProfile
from ..repositories.profile import ProfileRepository
from .errors import FeedQueryError, UnauthenticatedError
from .exclusion_service import ExclusionService, get_exclusion_service

LOGGER = logging.getLogger("uvicorn.error")


def _clean_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed:
            return trimmed
    return None


def _clean_photo_list(value: Any) -> List[str]:
    photos: List[str] = []
    if isinstance(value, (list, tuple)):
        for entry in value:
            cleaned = _clean_str(entry)
            if cleaned and cleaned not in photos:
                photos.append(cleaned)
    return photos


def _sort_value(doc: Dict[str, Any]) -> Optional[int]:
    value = doc.get("updatedAt")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def clamp_limit(limit: Optional[int], *, default: int = 25, maximum: int = 50) -> int:
    if limit is None:
        limit = default
    return max(1, min(maximum, int(limit)))


def to_feed_card(doc: Dict[str, Any], excluded: Set[str]) -> Optional[FeedProfile]:
    """Project a raw profile into a feed card, or ``None`` if ineligible."""

    user_id = doc.get("_id")
    if not isinstance(user_id, str) or not user_id or user_id in excluded:
        return None
    updated_at = _sort_value(doc)
    if updated_at is None:
        return None
    if doc.get("hideMode") or doc.get("onboardingCompleted") is not True:
        return None
    name = _clean_str(doc.get("displayName"))
    photos = _clean_photo_list(doc.get("photos"))
    if not name or not photos:
        return None
    bio = doc.get("bio")
    return FeedProfile(
        id=user_id,
        display_name=name,
        bio=bio if isinstance(bio, str) else "",
        photos=photos,
        sober_date=doc.get("soberDate"),
        updated_at=updated_at,
    )


class FeedService:
    """Serves pages of eligible profiles ordered by descending ``updatedAt``.

    Each round over-fetches ``limit * 3`` raw candidates (capped) and filters
    them in memory, so the store only needs a single-field sort index. The
    returned cursor is the sort value of the last *raw* candidate scanned,
    which keeps pagination moving regardless of how many candidates the
    filters dropped.
    """

    def __init__(
        self,
        profiles: ProfileRepository,
        exclusions: ExclusionService,
        *,
        default_limit: int = 25,
        max_limit: int = 50,
        overfetch_cap: int = 150,
        fill_rounds: int = 2,
        query_retries: int = 1,
    ) -> None:
        self._profiles = profiles
        self._exclusions = exclusions
        self._default_limit = default_limit
        self._max_limit = max_limit
        self._overfetch_cap = max(1, overfetch_cap)
        self._fill_rounds = max(0, min(2, fill_rounds))
        self._query_retries = max(0, query_retries)

    async def _scan(self, before: Optional[int], batch_size: int) -> List[Dict[str, Any]]:
        attempt = 0
        while True:
            try:
                return await self._profiles.scan_feed(before=before, batch_size=batch_size)
            except AutoReconnect as exc:
                if attempt >= self._query_retries:
                    LOGGER.exception("Feed scan failed after %s retries", attempt)
                    raise FeedQueryError(str(exc)) from exc
                attempt += 1
                LOGGER.warning("Feed scan interrupted (%s); retry %s", exc, attempt)
            except Exception as exc:
                LOGGER.exception("Feed scan failed: %s", exc)
                raise FeedQueryError(str(exc)) from exc

    async def get_feed(
        self,
        caller_id: str,
        *,
        limit: Optional[int] = None,
        cursor: Optional[int] = None,
    ) -> FeedPage:
        caller = clean_user_id(caller_id)
        if not caller:
            raise UnauthenticatedError("caller identity required")

        page_limit = clamp_limit(limit, default=self._default_limit, maximum=self._max_limit)
        batch_size = min(page_limit * 3, self._overfetch_cap)
        excluded = await self._exclusions.build_exclusion_set(caller)

        items: List[FeedProfile] = []
        next_cursor: Optional[int] = None
        before = cursor
        extra_rounds = 0

        while True:
            raw = await self._scan(before, batch_size)
            for doc in raw:
                card = to_feed_card(doc, excluded)
                if card is None:
                    continue
                items.append(card)
                if len(items) >= page_limit:
                    break

            last_value = _sort_value(raw[-1]) if raw else None
            if last_value is not None:
                next_cursor = last_value
                before = last_value
            batch_full = len(raw) == batch_size

            if len(items) >= page_limit or not batch_full or last_value is None:
                break
            if extra_rounds >= self._fill_rounds:
                break
            extra_rounds += 1

        return FeedPage(
            items=items,
            next_cursor=FeedCursor(updated_at=next_cursor) if next_cursor is not None else None,
            has_more=batch_full,
        )


def get_feed_service() -> FeedService:
    settings = get_settings()
    return FeedService(
        ProfileRepository(get_db()),
        get_exclusion_service(),
        default_limit=settings.feed_default_limit,
        max_limit=settings.feed_max_limit,
        overfetch_cap=settings.feed_overfetch_cap,
        fill_rounds=settings.feed_fill_rounds,
        query_retries=settings.feed_query_retries,
    )


__all__ = ["FeedService", "clamp_limit", "get_feed_service", "to_feed_card"]
