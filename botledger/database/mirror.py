import json
import logging
import functools
from typing import Any, Dict, Optional

from redis.exceptions import RedisError

from ..exceptions import PersistenceError
from .timestamps import from_epoch_ms

logger = logging.getLogger(__name__)

SESSION_PREFIX = "botSessions"
DISPLAY_STATUS_PREFIX = "botDisplayStatus"


def session_key(bot_id) -> str:
    return f"{SESSION_PREFIX}:{bot_id}"


def display_status_key(bot_id) -> str:
    return f"{DISPLAY_STATUS_PREFIX}:{bot_id}"


def _redis_errors_as_persistence(func):
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except RedisError as e:
            raise PersistenceError(f"Mirror store {func.__name__} failed: {e}") from e
    return wrapper


class MirrorStore:
    """
    Redis mirror holding two derived views per bot:

    - ``botSessions:{bot_id}``: the live session metrics, a JSON document
      replaced wholesale on every publish
    - ``botDisplayStatus:{bot_id}``: a hash with status, is_active and
      last_status_update, merged field by field

    Timestamps are taken from the Redis server clock and stored as epoch
    milliseconds.
    """

    def __init__(self, redis_client):
        self.redis = redis_client

    async def _server_time_ms(self) -> int:
        seconds, microseconds = await self.redis.time()
        return int(seconds) * 1000 + int(microseconds) // 1000

    @_redis_errors_as_persistence
    async def ping(self) -> bool:
        return bool(await self.redis.ping())

    # =================== SESSION STATE ===================

    @_redis_errors_as_persistence
    async def set_session_state(self, bot_id, state: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the session document for a bot, stamping last_updated from the server clock"""
        document = {**state, "last_updated": await self._server_time_ms()}
        await self.redis.set(session_key(bot_id), json.dumps(document))
        return {**document, "last_updated": from_epoch_ms(document["last_updated"])}

    @_redis_errors_as_persistence
    async def get_session_state(self, bot_id) -> Optional[Dict[str, Any]]:
        raw = await self.redis.get(session_key(bot_id))
        if raw is None:
            return None
        document = json.loads(raw)
        document["last_updated"] = from_epoch_ms(document.get("last_updated"))
        return document

    # =================== DISPLAY STATUS ===================

    @_redis_errors_as_persistence
    async def merge_display_status(self, bot_id, status: str, is_active: bool) -> Dict[str, Any]:
        stamp = await self._server_time_ms()
        await self.redis.hset(
            display_status_key(bot_id),
            mapping={
                "status": status,
                "is_active": "true" if is_active else "false",
                "last_status_update": str(stamp),
            },
        )
        return {"status": status, "is_active": is_active, "last_status_update": from_epoch_ms(stamp)}

    @_redis_errors_as_persistence
    async def get_display_status(self, bot_id) -> Optional[Dict[str, Any]]:
        fields = await self.redis.hgetall(display_status_key(bot_id))
        if not fields:
            return None
        return {
            "status": fields.get("status"),
            "is_active": fields.get("is_active") == "true",
            "last_status_update": from_epoch_ms(fields.get("last_status_update")),
        }

    # =================== CLEANUP ===================

    @_redis_errors_as_persistence
    async def remove_bot(self, bot_id) -> int:
        """Delete both views of a bot along with any key nested under them"""
        keys = [session_key(bot_id), display_status_key(bot_id)]
        for prefix in (SESSION_PREFIX, DISPLAY_STATUS_PREFIX):
            async for key in self.redis.scan_iter(match=f"{prefix}:{bot_id}:*"):
                keys.append(key)
        removed = await self.redis.delete(*keys)
        logger.debug(f"Removed {removed} mirror keys for bot {bot_id}")
        return removed

    async def close(self) -> None:
        await self.redis.aclose()
