# File: src/common/dependencies/service_dep.py
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis

from domain.badges.services.badge_engine import BadgeEngine
from domain.gamification.services.points_ledger import PointsLedger
from domain.notification.services.broadcaster import Broadcaster
from domain.reports.services.intake_service import ReportIntakeService
from domain.reports.services.query_service import ReportQueryService
from domain.users.services.user_service import UserService
from infrastructure.database.mongodb.mongo_client import get_badges_repo, get_reports_repo, get_users_repo
from infrastructure.database.mongodb.repository import MongoRepository
from infrastructure.database.redis.redis_client import get_redis_client
from infrastructure.storage.file_store import LocalFileStore


def get_file_store() -> LocalFileStore:
    return LocalFileStore()


def get_user_service(
    users_repo: Annotated[MongoRepository, Depends(get_users_repo)],
    badges_repo: Annotated[MongoRepository, Depends(get_badges_repo)],
    reports_repo: Annotated[MongoRepository, Depends(get_reports_repo)],
) -> UserService:
    return UserService(users_repo, badges_repo, reports_repo)


def get_query_service(
    reports_repo: Annotated[MongoRepository, Depends(get_reports_repo)],
) -> ReportQueryService:
    return ReportQueryService(reports_repo)


def get_intake_service(
    reports_repo: Annotated[MongoRepository, Depends(get_reports_repo)],
    users_repo: Annotated[MongoRepository, Depends(get_users_repo)],
    badges_repo: Annotated[MongoRepository, Depends(get_badges_repo)],
    redis: Annotated[Redis, Depends(get_redis_client)],
) -> ReportIntakeService:
    ledger = PointsLedger(users_repo)
    return ReportIntakeService(
        reports_repo=reports_repo,
        ledger=ledger,
        badge_engine=BadgeEngine(reports_repo, badges_repo, ledger),
        broadcaster=Broadcaster(redis),
    )
