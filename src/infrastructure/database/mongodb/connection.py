# File: infrastructure/database/mongodb/connection.py

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from common.config.settings import settings
from common.exceptions.base_exception import StorageUnavailableException
from common.logging.logger import log_info, log_error, log_warning


class MongoDBConnection:
    """Process-wide Motor client for the reports database; timestamps come back timezone-aware."""

    _client: Optional[AsyncIOMotorClient] = None
    _db: Optional[AsyncIOMotorDatabase] = None

    @staticmethod
    def _build_client() -> AsyncIOMotorClient:
        return AsyncIOMotorClient(
            settings.MONGO_URI,
            serverSelectionTimeoutMS=settings.MONGO_TIMEOUT,
            tz_aware=True,
            appname="civic-reports",
        )

    @classmethod
    async def connect(cls) -> AsyncIOMotorDatabase:
        if cls._db is not None:
            return cls._db

        client = cls._build_client()
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            log_error("MongoDB unreachable", extra={
                "db": settings.MONGO_DB,
                "timeout_ms": settings.MONGO_TIMEOUT,
                "error": str(e)
            }, exc_info=True)
            raise StorageUnavailableException("MongoDB unavailable")

        cls._client, cls._db = client, client[settings.MONGO_DB]
        log_info("MongoDB connected", extra={"db": settings.MONGO_DB})
        return cls._db

    @classmethod
    async def disconnect(cls):
        if cls._client is None:
            return
        cls._client.close()
        cls._client, cls._db = None, None
        log_info("MongoDB connection closed", extra={"db": settings.MONGO_DB})

    @classmethod
    async def ping(cls) -> bool:
        """True when a connection exists and the server answers; never raises."""
        if cls._client is None:
            return False
        try:
            await cls._client.admin.command("ping")
            return True
        except PyMongoError as e:
            log_warning("MongoDB ping failed", extra={"error": str(e)})
            return False

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        if cls._db is None:
            raise StorageUnavailableException("MongoDB not connected")
        return cls._db


async def get_mongo_db() -> AsyncIOMotorDatabase:
    return await MongoDBConnection.connect()
