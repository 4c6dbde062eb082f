# File: src/api/routers/live/report_events.py

import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from redis.exceptions import RedisError

from common.logging.logger import log_error, log_info, log_warning
from domain.notification.services.broadcaster import all_topics_pattern
from infrastructure.database.redis.redis_client import get_redis_client

router = APIRouter(tags=["Live"])


@router.websocket("/ws/reports")
async def report_events(websocket: WebSocket):
    """Relay every broadcast report event to a connected client."""
    await websocket.accept()
    redis = await get_redis_client()
    pubsub = redis.pubsub()
    log_info("Live client connected", extra={"client": str(websocket.client)})

    try:
        await pubsub.psubscribe(all_topics_pattern())
        async for message in pubsub.listen():
            if message.get("type") != "pmessage":
                continue
            await websocket.send_json(json.loads(message["data"]))
    except WebSocketDisconnect:
        log_info("Live client disconnected", extra={"client": str(websocket.client)})
    except RedisError as e:
        log_error("Live feed lost Redis connection", extra={"error": str(e)}, exc_info=True)
        await websocket.close(code=1011)
    finally:
        for cleanup in (pubsub.punsubscribe, pubsub.aclose):
            try:
                await cleanup()
            except RedisError as e:
                log_warning("Live feed cleanup failed", extra={"step": cleanup.__name__, "error": str(e)})
