# src/infrastructure/database/redis/operations/publish.py
import json
from typing import Any, Dict

from redis.asyncio import Redis
from redis.exceptions import RedisError

from common.logging.logger import log_debug, log_error


async def publish(channel: str, payload: Dict[str, Any], redis: Redis) -> int:
    """Publish a JSON payload on a pub/sub channel; returns the number of receivers."""
    try:
        receivers = await redis.publish(channel, json.dumps(payload, default=str))
        log_debug("Redis publish", extra={"channel": channel, "receivers": receivers})
        return receivers
    except RedisError as e:
        log_error("Redis publish failed", extra={"channel": channel, "error": str(e)})
        raise
