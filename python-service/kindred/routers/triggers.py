"""HTTP entry points for an external platform delivering record-created events."""

from __future__ import annotations

import hmac

from fastapi import APIRouter, Depends, Header, HTTPException, status

from ..config import get_settings
from ..models.events import BlockCreatedEvent, LikeCreatedEvent, TriggerAck
from ..services.match_lifecycle import MatchLifecycleService, get_match_lifecycle_service

router = APIRouter(prefix="/triggers", tags=["triggers"])


async def require_trigger_secret(x_trigger_secret: str = Header(default="")) -> None:
    expected = get_settings().trigger_secret
    if not expected:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="trigger endpoints are disabled")
    if not hmac.compare_digest(x_trigger_secret.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="invalid trigger secret")


@router.post("/like-created", response_model=TriggerAck, dependencies=[Depends(require_trigger_secret)])
async def like_created(
    event: LikeCreatedEvent,
    service: MatchLifecycleService = Depends(get_match_lifecycle_service),
) -> TriggerAck:
    await service.on_like_created(event.from_uid, event.to_uid)
    return TriggerAck()


@router.post("/block-created", response_model=TriggerAck, dependencies=[Depends(require_trigger_secret)])
async def block_created(
    event: BlockCreatedEvent,
    service: MatchLifecycleService = Depends(get_match_lifecycle_service),
) -> TriggerAck:
    await service.on_block_created(event.blocker_uid, event.subject_uid)
    return TriggerAck()


__all__ = ["router"]
