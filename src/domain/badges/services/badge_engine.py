# File: domain/badges/services/badge_engine.py
"""
Badge eligibility rules.

Milestones fire on exact counts (``==``). A user whose count jumps past a threshold
without ever equalling it, for example through a bulk import, never receives that
badge. Grants go through a unique (user_id, badge_type) index, so evaluating the same
state twice, or two racing evaluations, grant each badge at most once.
"""

from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from common.config.settings import settings
from common.logging.logger import log_info
from common.utils.date_utils import local_midnight, utc_now
from domain.badges.entities.badge_entity import Badge, BadgeType
from domain.gamification.services.points_ledger import PointsLedger
from domain.reports.entities.report_entity import ReportStatus
from infrastructure.database.mongodb.repository import MongoRepository

SUBMISSION_MILESTONES: Tuple[Tuple[BadgeType, int], ...] = (
    (BadgeType.FIRST_REPORT, 1),
    (BadgeType.PROBLEM_SOLVER, 5),
    (BadgeType.CIVIC_CHAMPION, 25),
)
DAILY_REPORTS_FOR_QUICK_REPORTER = 3
RESOLVED_REPORTS_FOR_CITY_IMPROVER = 5


class BadgeEngine:
    def __init__(
        self,
        reports_repo: MongoRepository,
        badges_repo: MongoRepository,
        ledger: PointsLedger,
        clock: Callable[[], datetime] = utc_now,
        timezone_name: Optional[str] = None,
    ):
        self.reports_repo = reports_repo
        self.badges_repo = badges_repo
        self.ledger = ledger
        self.clock = clock
        self.timezone_name = timezone_name or settings.REPORTING_TIMEZONE

    async def evaluate_after_submission(self, user_id: str) -> List[Badge]:
        total = await self.reports_repo.count({"author_id": user_id})
        today = await self.reports_repo.count({
            "author_id": user_id,
            "created_at": {"$gte": local_midnight(self.clock(), self.timezone_name)},
        })

        eligible = [badge_type for badge_type, threshold in SUBMISSION_MILESTONES if total == threshold]
        if today == DAILY_REPORTS_FOR_QUICK_REPORTER:
            eligible.append(BadgeType.QUICK_REPORTER)

        log_info("Badge evaluation after submission", extra={
            "user_id": user_id,
            "total_reports": total,
            "reports_today": today,
            "eligible": [badge_type.value for badge_type in eligible],
        })
        return await self._grant_all(user_id, eligible)

    async def evaluate_after_resolution(self, user_id: str) -> List[Badge]:
        resolved = await self.reports_repo.count({"author_id": user_id, "status": ReportStatus.RESOLVED.value})

        eligible = []
        if resolved == RESOLVED_REPORTS_FOR_CITY_IMPROVER:
            eligible.append(BadgeType.CITY_IMPROVER)

        log_info("Badge evaluation after resolution", extra={
            "user_id": user_id,
            "resolved_reports": resolved,
            "eligible": [badge_type.value for badge_type in eligible],
        })
        return await self._grant_all(user_id, eligible)

    async def grant(self, user_id: str, badge_type: BadgeType) -> Optional[Badge]:
        """Grant a badge once; returns None when the user already holds it."""
        badge = Badge.grant(user_id, badge_type, earned_at=self.clock())
        badge_id = await self.badges_repo.insert_if_absent(badge.to_document())
        if badge_id is None:
            return None

        badge.id = badge_id
        await self.ledger.award(user_id, badge.points, reason=f"badge:{badge_type.value}", badge_id=badge_id)
        log_info("Badge granted", extra={"user_id": user_id, "badge_type": badge_type.value, "badge_id": badge_id})
        return badge

    async def _grant_all(self, user_id: str, eligible: Sequence[BadgeType]) -> List[Badge]:
        if not eligible:
            return []

        held = {doc["badge_type"] for doc in await self.badges_repo.find({"user_id": user_id})}
        granted = []
        for badge_type in eligible:
            if badge_type.value in held:
                continue
            badge = await self.grant(user_id, badge_type)
            if badge:
                granted.append(badge)
        return granted
