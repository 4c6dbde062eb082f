from typing import Callable

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from .connection import get_mongo_db
from .repository import MongoRepository

REPORTS_COLLECTION = "reports"
USERS_COLLECTION = "users"
BADGES_COLLECTION = "badges"


def get_mongo_collection(collection_name: str) -> Callable[[], MongoRepository]:
    def _get_repo(db: AsyncIOMotorDatabase = Depends(get_mongo_db)) -> MongoRepository:
        return MongoRepository(db, collection_name)
    return _get_repo


get_reports_repo = get_mongo_collection(REPORTS_COLLECTION)
get_users_repo = get_mongo_collection(USERS_COLLECTION)
get_badges_repo = get_mongo_collection(BADGES_COLLECTION)
