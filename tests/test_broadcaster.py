import asyncio
import json

import pytest

from domain.notification.services.broadcaster import (
    NEW_REPORT_TOPIC,
    Broadcaster,
    all_topics_pattern,
    channel_for,
)


class FakeRedis:
    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.published = []

    async def publish(self, channel, message):
        if self.delay:
            await asyncio.sleep(self.delay)
        self.published.append((channel, json.loads(message)))
        return 2


async def test_publish_wraps_payload_in_envelope():
    redis = FakeRedis()

    receivers = await Broadcaster(redis, timeout=1).publish(NEW_REPORT_TOPIC, {"report_id": "r1", "category": "water"})

    assert receivers == 2
    channel, envelope = redis.published[0]
    assert channel == "civic:new-report"
    assert envelope["event"] == "new-report"
    assert envelope["data"] == {"report_id": "r1", "category": "water"}
    assert "published_at" in envelope


async def test_slow_publish_times_out():
    with pytest.raises(asyncio.TimeoutError):
        await Broadcaster(FakeRedis(delay=0.5), timeout=0.01).publish(NEW_REPORT_TOPIC, {})


def test_channel_naming():
    assert channel_for("report-updated") == "civic:report-updated"
    assert all_topics_pattern() == "civic:*"
