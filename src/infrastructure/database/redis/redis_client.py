# File: infrastructure/database/redis/redis_client.py

from typing import Optional

from redis.asyncio import Redis, ConnectionPool
from redis.exceptions import RedisError

from common.config.settings import settings
from common.exceptions.base_exception import StorageUnavailableException
from common.logging.logger import log_info, log_error

# Redis connection pool (global, but managed)
redis_pool: Optional[ConnectionPool] = None
redis_client: Optional[Redis] = None


def _connection_kwargs() -> dict:
    connection_kwargs = {
        "host": settings.REDIS_HOST,
        "port": settings.REDIS_PORT,
        "db": settings.REDIS_DB,
        "decode_responses": True
    }
    if settings.REDIS_PASSWORD.strip():
        connection_kwargs["password"] = settings.REDIS_PASSWORD
    return connection_kwargs


def _build_client() -> Redis:
    """Create the pool and client; no connection is opened until the first command."""
    global redis_pool, redis_client
    connection_kwargs = _connection_kwargs()

    if settings.REDIS_USE_SSL:
        connection_kwargs["ssl_ca_certs"] = settings.REDIS_SSL_CA_CERTS or None
        if settings.REDIS_SSL_CERT:
            connection_kwargs["ssl_certfile"] = settings.REDIS_SSL_CERT
            connection_kwargs["ssl_keyfile"] = settings.REDIS_SSL_KEY or None
        redis_pool = ConnectionPool.from_url(
            f"rediss://{settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}",
            **connection_kwargs
        )
    else:
        redis_pool = ConnectionPool(**connection_kwargs)

    redis_client = Redis(connection_pool=redis_pool)
    return redis_client


async def init_redis_pool() -> ConnectionPool:
    """Initialize the Redis pool used by the live broadcast channel and check it answers."""
    try:
        client = _build_client()
        await client.ping()
        log_info("Redis connection established", extra={
            "host": settings.REDIS_HOST,
            "port": settings.REDIS_PORT,
            "db": settings.REDIS_DB,
            "ssl": settings.REDIS_USE_SSL
        })
    except RedisError as e:
        log_error("Redis connection failed", extra={"error": str(e), "host": settings.REDIS_HOST}, exc_info=True)
        raise StorageUnavailableException("Redis unavailable")

    return redis_pool


async def close_redis_pool():
    """Close Redis connection pool."""
    global redis_pool, redis_client
    if redis_client:
        await redis_client.aclose()
    if redis_pool:
        await redis_pool.disconnect()
    log_info("Redis connection pool closed")
    redis_pool = None
    redis_client = None


async def ping_redis() -> bool:
    """Health check; only pings a client that startup already created."""
    if redis_client is None:
        return False
    try:
        return bool(await redis_client.ping())
    except RedisError as e:
        log_error("Redis ping failed", extra={"error": str(e)})
        return False


async def get_redis_client() -> Redis:
    """Dependency to get Redis client. Connection errors surface on use, not here."""
    if redis_client is None:
        return _build_client()
    return redis_client
