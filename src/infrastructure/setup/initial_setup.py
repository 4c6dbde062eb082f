# infrastructure/setup/initial_setup.py
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.config.settings import settings
from common.logging.logger import log_info
from domain.users.services.user_service import UserService
from infrastructure.database.mongodb.indexes import ensure_indexes
from infrastructure.database.mongodb.mongo_client import BADGES_COLLECTION, REPORTS_COLLECTION, USERS_COLLECTION
from infrastructure.database.mongodb.repository import MongoRepository


async def setup_indexes_and_admins(db: AsyncIOMotorDatabase) -> None:
    await ensure_indexes(db)

    if settings.ADMIN_EMAILS:
        user_service = UserService(
            MongoRepository(db, USERS_COLLECTION),
            MongoRepository(db, BADGES_COLLECTION),
            MongoRepository(db, REPORTS_COLLECTION),
        )
        flagged = await user_service.flag_admins(settings.ADMIN_EMAILS)
        log_info("Admin accounts flagged", extra={"emails": len(settings.ADMIN_EMAILS), "flagged": flagged})

    settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
