# File: domain/gamification/services/points_ledger.py

from typing import Optional

from common.logging.logger import log_info, log_warning
from infrastructure.database.mongodb.repository import MongoRepository

REPORT_SUBMITTED_POINTS = 10
REPORT_RESOLVED_POINTS = 5


class PointsLedger:
    """
    Point awards applied as atomic ``$inc`` writes on the user document.

    Points are never read back and rewritten here, so concurrent awards cannot
    overwrite each other. Awards are only ever positive.
    """

    def __init__(self, users_repo: MongoRepository):
        self.users_repo = users_repo

    async def award(self, user_id: str, points: int, reason: str, badge_id: Optional[str] = None) -> bool:
        if points <= 0:
            raise ValueError(f"Point awards must be positive, got {points}")

        operators = {"$inc": {"points": points}}
        if badge_id:
            operators["$addToSet"] = {"badges": badge_id}

        modified = await self.users_repo.update_with_operators({"_id": user_id}, operators)
        if not modified:
            log_warning("Points award matched no user", extra={"user_id": user_id, "points": points, "reason": reason})
            return False

        log_info("Points awarded", extra={"user_id": user_id, "points": points, "reason": reason})
        return True

    async def award_submission(self, user_id: str) -> bool:
        return await self.award(user_id, REPORT_SUBMITTED_POINTS, reason="report_submitted")

    async def award_resolution(self, user_id: str) -> bool:
        return await self.award(user_id, REPORT_RESOLVED_POINTS, reason="report_resolved")
