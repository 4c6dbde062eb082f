# File: src/domain/notification/services/broadcaster.py
import asyncio
from typing import Any, Dict, Optional

from redis.asyncio import Redis

from common.config.settings import settings
from common.logging.logger import log_info
from common.utils.date_utils import utc_now
from infrastructure.database.redis.operations.publish import publish

NEW_REPORT_TOPIC = "new-report"
REPORT_UPDATED_TOPIC = "report-updated"


def channel_for(topic: str) -> str:
    return f"{settings.BROADCAST_CHANNEL_PREFIX}:{topic}"


def all_topics_pattern() -> str:
    return f"{settings.BROADCAST_CHANNEL_PREFIX}:*"


class Broadcaster:
    """
    Publishes live events on Redis pub/sub.

    Delivery is fire-and-forget: no acknowledgement, no retry. A publish that takes
    longer than BROADCAST_TIMEOUT_SECONDS is abandoned with a TimeoutError.
    """

    def __init__(self, redis: Redis, timeout: Optional[float] = None):
        self.redis = redis
        self.timeout = timeout if timeout is not None else settings.BROADCAST_TIMEOUT_SECONDS

    async def publish(self, topic: str, payload: Dict[str, Any]) -> int:
        envelope = {"event": topic, "data": payload, "published_at": utc_now().isoformat()}
        receivers = await asyncio.wait_for(publish(channel_for(topic), envelope, self.redis), timeout=self.timeout)
        log_info("Event broadcast", extra={"topic": topic, "receivers": receivers})
        return receivers
