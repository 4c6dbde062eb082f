# File: infrastructure/database/mongodb/indexes.py

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, IndexModel

from common.logging.logger import log_info
from .mongo_client import BADGES_COLLECTION, REPORTS_COLLECTION, USERS_COLLECTION

INDEXES = {
    REPORTS_COLLECTION: [
        # Duplicate-window lookups
        IndexModel(
            [("category", ASCENDING), ("location.latitude", ASCENDING),
             ("location.longitude", ASCENDING), ("created_at", DESCENDING)],
            name="duplicate_window",
        ),
        # Badge counters and "my reports"
        IndexModel([("author_id", ASCENDING), ("created_at", DESCENDING)], name="author_created"),
        IndexModel([("author_id", ASCENDING), ("status", ASCENDING)], name="author_status"),
    ],
    USERS_COLLECTION: [
        IndexModel([("email", ASCENDING)], unique=True, name="email_unique"),
        IndexModel([("points", DESCENDING), ("created_at", ASCENDING)], name="leaderboard"),
    ],
    BADGES_COLLECTION: [
        # Backstop against concurrent double grants
        IndexModel([("user_id", ASCENDING), ("badge_type", ASCENDING)], unique=True, name="user_badge_unique"),
        IndexModel([("user_id", ASCENDING), ("earned_at", DESCENDING)], name="user_earned"),
    ],
}


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    for collection_name, models in INDEXES.items():
        created = await db[collection_name].create_indexes(models)
        log_info("Indexes ensured", extra={"collection": collection_name, "indexes": created})
