import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

from redis.asyncio import Redis
from redis.asyncio.client import PubSub

from .config import get_settings

LOGGER = logging.getLogger("uvicorn.error")

_client: Optional[Redis] = None
_listener_task: Optional[asyncio.Task] = None
_pubsub: Optional[PubSub] = None


def channel_name(topic: str) -> str:
    prefix = (get_settings().redis_pubsub_prefix or "").strip()
    return f"{prefix}.{topic}" if prefix else topic


def topic_from_channel(channel: str) -> str:
    prefix = (get_settings().redis_pubsub_prefix or "").strip()
    if prefix and channel.startswith(f"{prefix}."):
        return channel[len(prefix) + 1:]
    return channel


def decode_message(message: Dict[str, Any]) -> Optional[tuple[str, Dict[str, Any]]]:
    """Return ``(topic, payload)`` for a pub/sub data message, else ``None``."""
    if message.get("type") != "message":
        return None
    raw_channel = message.get("channel")
    raw_data = message.get("data")
    try:
        channel = raw_channel.decode("utf-8") if isinstance(raw_channel, (bytes, bytearray)) else str(raw_channel)
        if isinstance(raw_data, (bytes, bytearray)):
            payload = json.loads(raw_data.decode("utf-8"))
        else:
            payload = json.loads(raw_data)
    except (TypeError, ValueError, UnicodeDecodeError) as exc:
        LOGGER.warning("Dropping undecodable bus message: %s", exc)
        return None
    if not isinstance(payload, dict):
        return None
    return topic_from_channel(channel), payload


async def _ensure_client() -> Optional[Redis]:
    global _client
    if _client is not None:
        return _client
    settings = get_settings()
    if not settings.redis_url:
        return None
    try:
        client = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=False,
        )
        await client.ping()
        _client = client
    except Exception as exc:
        LOGGER.error("Redis connection failed: %s", exc)
        _client = None
    return _client


async def publish(topic: str, event: Dict[str, Any]) -> bool:
    if not get_settings().redis_pubsub_enabled:
        return False
    client = await _ensure_client()
    if not client:
        return False
    try:
        payload = json.dumps(event, separators=(",", ":")).encode("utf-8")
        receivers = await client.publish(channel_name(topic), payload)
    except Exception as exc:
        LOGGER.error("Redis publish to %s failed: %s", topic, exc)
        return False
    # Pub/sub does not queue; with no subscriber the event is gone
    if not receivers:
        LOGGER.warning("Redis publish to %s reached no subscribers", topic)
        return False
    return True


async def start_consumer(
    handler: Callable[[str, Dict[str, Any]], Awaitable[None]],
    topics: Iterable[str],
) -> None:
    global _listener_task
    if _listener_task is not None:
        return
    if not get_settings().redis_pubsub_enabled:
        return
    client = await _ensure_client()
    if not client:
        return
    channels = [channel_name(name) for name in topics]

    async def _run() -> None:
        global _pubsub
        pubsub = client.pubsub()
        try:
            await pubsub.subscribe(*channels)
            _pubsub = pubsub
            async for message in pubsub.listen():
                decoded = decode_message(message)
                if decoded is None:
                    continue
                topic, payload = decoded
                # One bad event must not stop delivery of the next
                try:
                    await handler(topic, payload)
                except Exception as exc:
                    LOGGER.error("Bus handler failed for %s: %s", topic, exc)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            LOGGER.error("Redis listener stopped: %s", exc)
        finally:
            try:
                await pubsub.close()
            except Exception as exc:
                LOGGER.debug("Closing pubsub failed: %s", exc)
            _pubsub = None

    _listener_task = asyncio.create_task(_run())


async def stop() -> None:
    global _listener_task, _pubsub, _client
    if _listener_task is not None:
        _listener_task.cancel()
        try:
            await _listener_task
        except asyncio.CancelledError:
            pass
        _listener_task = None
    if _pubsub is not None:
        await _pubsub.close()
        _pubsub = None
    if _client is not None:
        await _client.close()
        _client = None
