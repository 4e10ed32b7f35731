from __future__ import annotations

import time
from typing import List, Optional, Tuple

from ..db import get_db
from ..models.identifiers import clean_user_id, match_key
from ..models.likes import MatchDocument, MatchSummary
from ..repositories.blocks import BlockRepository
from ..repositories.exceptions import NotFoundRepositoryError
from ..repositories.likes import LikeRepository
from ..repositories.matches import MatchRepository
from ..repositories.profile import ProfileRepository
from .triggers import emit_like_created


class LikesService:
    """Like write path plus the caller's view of their matches."""

    def __init__(
        self,
        likes: LikeRepository,
        matches: MatchRepository,
        blocks: BlockRepository,
        profiles: ProfileRepository,
    ) -> None:
        self._likes = likes
        self._matches = matches
        self._blocks = blocks
        self._profiles = profiles

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    async def record_like(self, liker_id: str, target_id: str) -> Tuple[bool, bool]:
        """Store the like and raise its trigger.

        Returns ``(created, is_match)``; ``is_match`` reflects the match
        state once the trigger has been handed off.
        """

        liker = clean_user_id(liker_id)
        target = clean_user_id(target_id)
        if not liker or not target:
            raise ValueError("target user required")
        if liker == target:
            raise ValueError("Users cannot like themselves")
        if not await self._profiles.exists(target):
            raise NotFoundRepositoryError("target user not found")
        if await self._blocks.is_blocked_either_way(liker, target):
            raise PermissionError("blocked")

        created = await self._likes.create_like(
            from_uid=liker,
            to_uid=target,
            created_at=self._now_ms(),
        )
        if created:
            await emit_like_created(liker, target)

        is_match = await self._matches.get_by_id(match_key(liker, target)) is not None
        return created, is_match

    async def remove_like(self, liker_id: str, target_id: str) -> bool:
        liker = clean_user_id(liker_id)
        target = clean_user_id(target_id)
        if not liker or not target or liker == target:
            return False
        like = await self._likes.get_like(liker, target)
        if like is None:
            return False
        return await self._likes.delete_by_id(like.id)

    async def list_matches(self, user_id: str) -> List[MatchSummary]:
        summaries: List[MatchSummary] = []
        for match in await self._matches.list_for_member(user_id):
            partner = next((m for m in match.members if m != user_id), None)
            if not partner:
                continue
            summaries.append(
                MatchSummary(
                    match_id=match.id,
                    user_id=partner,
                    created_at=match.created_at,
                    last_activity_at=match.last_activity_at,
                )
            )
        return summaries

    async def record_activity(self, user_id: str, match_id: str) -> Optional[MatchDocument]:
        return await self._matches.touch(match_id, member_uid=user_id, at=self._now_ms())


def get_likes_service() -> LikesService:
    db = get_db()
    return LikesService(
        likes=LikeRepository(db),
        matches=MatchRepository(db),
        blocks=BlockRepository(db),
        profiles=ProfileRepository(db),
    )


__all__ = ["LikesService", "get_likes_service"]
