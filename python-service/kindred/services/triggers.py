"""Delivery of "record created" events to the match lifecycle handlers."""

from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import ValidationError

from .. import redis_bus
from ..config import get_settings
from ..models.events import BLOCK_CREATED, LIKE_CREATED, BlockCreatedEvent, LikeCreatedEvent
from .match_lifecycle import get_match_lifecycle_service

LOGGER = logging.getLogger("uvicorn.error")

LIKES_TOPIC = "likes"
BLOCKS_TOPIC = "blocks"
TRIGGER_TOPICS = (LIKES_TOPIC, BLOCKS_TOPIC)


async def trigger_stream_handler(topic: str, event: Dict[str, Any]) -> None:
    """Dispatch one event. Failures are logged and stay with this event."""

    kind = str(event.get("type") or "").lower()
    try:
        if kind == LIKE_CREATED:
            like = LikeCreatedEvent.model_validate(event)
            await get_match_lifecycle_service().on_like_created(like.from_uid, like.to_uid)
        elif kind == BLOCK_CREATED:
            block = BlockCreatedEvent.model_validate(event)
            await get_match_lifecycle_service().on_block_created(block.blocker_uid, block.subject_uid)
        else:
            LOGGER.debug("Ignoring event type %r on %s", kind, topic)
    except ValidationError as exc:
        LOGGER.warning("Malformed %s event on %s: %s", kind, topic, exc)
    except Exception as exc:
        LOGGER.error("Trigger handler for %s on %s failed: %s", kind, topic, exc)


async def emit(topic: str, event: Dict[str, Any]) -> None:
    """Publish on the Redis bus when enabled, otherwise deliver in-process."""

    if get_settings().redis_pubsub_enabled:
        if await redis_bus.publish(topic, event):
            return
        LOGGER.warning("Bus publish for %s failed; delivering in-process", topic)
    await trigger_stream_handler(topic, event)


async def emit_like_created(from_uid: str, to_uid: str) -> None:
    event = LikeCreatedEvent(from_uid=from_uid, to_uid=to_uid)
    await emit(LIKES_TOPIC, event.model_dump(by_alias=True))


async def emit_block_created(blocker_uid: str, subject_uid: str) -> None:
    event = BlockCreatedEvent(blocker_uid=blocker_uid, subject_uid=subject_uid)
    await emit(BLOCKS_TOPIC, event.model_dump(by_alias=True))


__all__ = [
    "BLOCKS_TOPIC",
    "LIKES_TOPIC",
    "TRIGGER_TOPICS",
    "emit",
    "emit_block_created",
    "emit_like_created",
    "trigger_stream_handler",
]
