# File: src/api/routers/utility_routes.py

from fastapi import APIRouter
from fastapi.responses import RedirectResponse, PlainTextResponse

from common.utils.date_utils import utc_now
from infrastructure.database.mongodb.connection import MongoDBConnection
from infrastructure.database.redis.redis_client import ping_redis

router = APIRouter(tags=["Utility"])


@router.get("/", response_class=RedirectResponse, include_in_schema=False)
async def root():
    return RedirectResponse(url="/docs")


@router.get("/favicon.ico", response_class=PlainTextResponse, include_in_schema=False)
async def favicon():
    return ""


@router.get("/health", status_code=200, summary="Liveness plus storage reachability")
async def health_check():
    # Overall status tracks MongoDB only; Redis backs the live feed alone
    mongodb_up = await MongoDBConnection.ping()
    redis_up = await ping_redis()
    return {
        "status": "healthy" if mongodb_up else "degraded",
        "checks": {
            "mongodb": "up" if mongodb_up else "down",
            "redis": "up" if redis_up else "down",
        },
        "timestamp": utc_now().isoformat()
    }
