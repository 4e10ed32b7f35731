"""Reactive handlers turning like/block records into match lifecycle changes.

Handlers run once per created record, at least once, possibly concurrently
for the same pair. They keep no state of their own: the deterministic match
key plus the store's atomic insert is the only coordination, and every
"already exists" or "already gone" outcome is treated as success.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from ..db import get_db
from ..models.identifiers import clean_user_id, like_key, match_key
from ..models.likes import MatchDocument
from ..repositories.blocks import BlockRepository
from ..repositories.exceptions import DuplicateKeyRepositoryError
from ..repositories.likes import LikeRepository
from ..repositories.matches import MatchRepository

LOGGER = logging.getLogger("uvicorn.error")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _valid_pair(user_a: str, user_b: str) -> bool:
    return bool(user_a) and bool(user_b) and user_a != user_b


class MatchLifecycleService:
    def __init__(self, likes: LikeRepository, matches: MatchRepository, blocks: BlockRepository) -> None:
        self._likes = likes
        self._matches = matches
        self._blocks = blocks

    async def on_like_created(self, from_uid: str, to_uid: str) -> Optional[MatchDocument]:
        """Promote a like to a match when the mirrored like already exists."""

        liker = clean_user_id(from_uid)
        liked = clean_user_id(to_uid)
        if not _valid_pair(liker, liked):
            LOGGER.debug("Ignoring like event with invalid pair %r -> %r", from_uid, to_uid)
            return None

        try:
            reverse = await self._likes.get_like(liked, liker)
        except Exception as exc:
            LOGGER.error("Reciprocal like lookup failed for %s -> %s: %s", liker, liked, exc)
            return None
        if reverse is None or reverse.from_uid != liked or reverse.to_uid != liker:
            return None

        return await self.create_match(
            liker,
            liked,
            like_ids=(like_key(liker, liked), reverse.id),
        )

    async def create_match(
        self,
        user_a: str,
        user_b: str,
        *,
        like_ids: Iterable[str],
    ) -> Optional[MatchDocument]:
        """Create the pair's match if absent, then retire the consumed likes.

        Returns the new match, or ``None`` when another delivery already
        created it.
        """

        key = match_key(user_a, user_b)
        match: Optional[MatchDocument] = None
        try:
            match = await self._matches.create_if_absent(user_a, user_b, created_at=_now_ms())
            LOGGER.info("Match %s created", key)
        except DuplicateKeyRepositoryError:
            LOGGER.debug("Match %s already exists", key)
        except Exception as exc:
            # Keep the likes so a redelivered event can still produce the match
            LOGGER.error("Failed to create match %s: %s", key, exc)
            return None

        for like_id in like_ids:
            try:
                if not await self._likes.delete_by_id(like_id):
                    LOGGER.debug("Like %s already removed", like_id)
            except Exception as exc:
                LOGGER.error("Failed to delete consumed like %s: %s", like_id, exc)
        return match

    async def on_block_created(self, blocker_uid: str, subject_uid: str) -> bool:
        """Tear down the pair's match once the block record is confirmed.

        One-sided likes are left as is.
        """

        blocker = clean_user_id(blocker_uid)
        subject = clean_user_id(subject_uid)
        if not _valid_pair(blocker, subject):
            LOGGER.debug("Ignoring block event with invalid pair %r -> %r", blocker_uid, subject_uid)
            return False

        try:
            blocked = await self._blocks.exists(blocker, subject)
        except Exception as exc:
            LOGGER.error("Block lookup failed for %s -> %s: %s", blocker, subject, exc)
            return False
        if not blocked:
            LOGGER.warning("Ignoring block event without a block record %s -> %s", blocker, subject)
            return False

        key = match_key(blocker, subject)
        try:
            removed = await self._matches.delete_by_id(key)
        except Exception as exc:
            LOGGER.error("Failed to delete match %s after block: %s", key, exc)
            return False
        if removed:
            LOGGER.info("Match %s removed after block by %s", key, blocker)
        return removed


def get_match_lifecycle_service() -> MatchLifecycleService:
    db = get_db()
    return MatchLifecycleService(
        likes=LikeRepository(db),
        matches=MatchRepository(db),
        blocks=BlockRepository(db),
    )


__all__ = ["MatchLifecycleService", "get_match_lifecycle_service"]
