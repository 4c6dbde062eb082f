# File: main.py

from contextlib import asynccontextmanager

import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sentry_sdk.integrations.fastapi import FastApiIntegration

from api.middleware.error_middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from api.routers.all_endpoints import all_routers
from common.config.settings import settings
from common.exceptions.base_exception import StorageUnavailableException
from common.exceptions.exception_handlers import register_exception_handlers
from common.logging.logger import log_info, log_error, log_warning
from infrastructure.database.mongodb.connection import MongoDBConnection
from infrastructure.database.redis.redis_client import init_redis_pool, close_redis_pool
from infrastructure.setup.initial_setup import setup_indexes_and_admins

load_dotenv()

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[FastApiIntegration()],
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        environment=settings.ENVIRONMENT,
        send_default_pii=settings.SENTRY_SEND_PII
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # MongoDB is the system of record: no database, no API
    try:
        db = await MongoDBConnection.connect()
        await setup_indexes_and_admins(db)
    except Exception as e:
        log_error("Startup failed", extra={"error": str(e)}, exc_info=True)
        sentry_sdk.capture_exception(e)
        raise

    # Redis only carries live updates; without it the API runs and broadcasts fail quietly
    try:
        await init_redis_pool()
    except StorageUnavailableException as e:
        log_warning("Starting without live updates", extra={"error": str(e.detail), "redis_host": settings.REDIS_HOST})

    log_info("Civic reports API started", extra={"version": app.version, "environment": settings.ENVIRONMENT})
    yield

    await close_redis_pool()
    await MongoDBConnection.disconnect()
    log_info("Civic reports API stopped")


app = FastAPI(
    title="Civic Reports API",
    version="1.0.0",
    description="Citizens submit geotagged issue reports; the API classifies and prioritizes them, "
                "rejects near-identical recent reports, awards points and badges and pushes live updates.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
    expose_headers=[REQUEST_ID_HEADER],
)

register_exception_handlers(app)
app.include_router(all_routers)

settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
