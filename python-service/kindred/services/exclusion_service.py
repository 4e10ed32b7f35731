"""Builds the set of user ids that must never appear in a caller's feed."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Set

from ..db import get_db
from ..models.identifiers import clean_user_id
from ..repositories.blocks import BlockRepository
from ..repositories.likes import LikeRepository
from ..repositories.matches import MatchRepository
from .errors import UnauthenticatedError

LOGGER = logging.getLogger("uvicorn.error")


async def _lookup_or_empty(
    label: str,
    caller_id: str,
    lookup: Callable[[str], Awaitable[Set[str]]],
) -> Set[str]:
    # A missing sub-set only makes the feed more permissive, never fails it
    try:
        return set(await lookup(caller_id))
    except Exception as exc:
        LOGGER.warning(
            "Exclusion lookup '%s' failed for %s; treating it as empty: %s",
            label,
            caller_id,
            exc,
        )
        return set()


class ExclusionService:
    def __init__(
        self,
        likes: LikeRepository,
        blocks: BlockRepository,
        matches: MatchRepository,
    ) -> None:
        self._likes = likes
        self._blocks = blocks
        self._matches = matches

    async def build_exclusion_set(self, caller_id: str) -> Set[str]:
        """Self, blocked, blocked-by, liked and matched ids for the caller."""

        caller = clean_user_id(caller_id)
        if not caller:
            raise UnauthenticatedError("caller identity required")

        blocked, blocked_me, liked, matched = await asyncio.gather(
            _lookup_or_empty("blocked", caller, self._blocks.blocked_by),
            _lookup_or_empty("blocked_by", caller, self._blocks.blockers_of),
            _lookup_or_empty("liked", caller, self._likes.liked_user_ids),
            _lookup_or_empty("matched", caller, self._matches.partner_ids),
        )
        excluded = blocked | blocked_me | liked | matched
        excluded.add(caller)
        return excluded


def get_exclusion_service() -> ExclusionService:
    db = get_db()
    return ExclusionService(
        likes=LikeRepository(db),
        blocks=BlockRepository(db),
        matches=MatchRepository(db),
    )


__all__ = ["ExclusionService", "get_exclusion_service"]
