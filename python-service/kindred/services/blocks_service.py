from __future__ import annotations

import time
from typing import List

from ..db import get_db
from ..models.identifiers import clean_user_id
from ..repositories.blocks import BlockRepository
from .triggers import emit_block_created


class BlocksService:
    def __init__(self, blocks: BlockRepository) -> None:
        self._blocks = blocks

    async def record_block(self, blocker_id: str, subject_id: str) -> bool:
        blocker = clean_user_id(blocker_id)
        subject = clean_user_id(subject_id)
        if not blocker or not subject:
            raise ValueError("subject user required")
        if blocker == subject:
            raise ValueError("Users cannot block themselves")

        created = await self._blocks.create_block(
            blocker_uid=blocker,
            subject_uid=subject,
            created_at=int(time.time() * 1000),
        )
        if created:
            await emit_block_created(blocker, subject)
        return created

    async def list_blocked(self, blocker_id: str) -> List[str]:
        return sorted(await self._blocks.blocked_by(blocker_id))


def get_blocks_service() -> BlocksService:
    return BlocksService(BlockRepository(get_db()))


__all__ = ["BlocksService", "get_blocks_service"]
