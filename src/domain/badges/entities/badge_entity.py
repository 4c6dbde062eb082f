from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from common.utils.date_utils import utc_now


class BadgeType(str, Enum):
    FIRST_REPORT = "first_report"
    PROBLEM_SOLVER = "problem_solver"
    CIVIC_CHAMPION = "civic_champion"
    EARLY_BIRD = "early_bird"
    CONSISTENCY_KING = "consistency_king"
    COMMUNITY_HERO = "community_hero"
    QUICK_REPORTER = "quick_reporter"
    DETAIL_ORIENTED = "detail_oriented"
    PERSISTENT_CITIZEN = "persistent_citizen"
    CITY_IMPROVER = "city_improver"


@dataclass(frozen=True)
class BadgeConfig:
    name: str
    description: str
    icon: str
    points: int


BADGE_CONFIGS: Dict[BadgeType, BadgeConfig] = {
    BadgeType.FIRST_REPORT: BadgeConfig("First Report", "Submitted your first report", "🎯", 5),
    BadgeType.PROBLEM_SOLVER: BadgeConfig("Problem Solver", "Submitted 5 reports", "🔧", 25),
    BadgeType.CIVIC_CHAMPION: BadgeConfig("Civic Champion", "Submitted 25 reports", "🏆", 100),
    BadgeType.EARLY_BIRD: BadgeConfig("Early Bird", "Submitted report within 1 hour of issue", "🐦", 15),
    BadgeType.CONSISTENCY_KING: BadgeConfig("Consistency King", "Submitted reports for 7 consecutive days", "👑", 50),
    BadgeType.COMMUNITY_HERO: BadgeConfig("Community Hero", "Helped resolve 10 community issues", "🦸", 75),
    BadgeType.QUICK_REPORTER: BadgeConfig("Quick Reporter", "Submitted 3 reports in one day", "⚡", 20),
    BadgeType.DETAIL_ORIENTED: BadgeConfig("Detail Oriented", "Submitted report with detailed description and image", "🔍", 10),
    BadgeType.PERSISTENT_CITIZEN: BadgeConfig("Persistent Citizen", "Followed up on 5 pending reports", "💪", 30),
    BadgeType.CITY_IMPROVER: BadgeConfig("City Improver", "Had 5 reports resolved", "🏙️", 40),
}


class Badge(BaseModel):
    """A one-time grant of a badge type to a user."""

    id: Optional[str] = Field(default=None, alias="_id")
    user_id: str
    badge_type: BadgeType
    badge_name: str
    description: str
    icon: str
    points: int
    earned_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    @classmethod
    def grant(cls, user_id: str, badge_type: BadgeType, earned_at: Optional[datetime] = None) -> "Badge":
        config = BADGE_CONFIGS[badge_type]
        return cls(
            user_id=user_id,
            badge_type=badge_type,
            badge_name=config.name,
            description=config.description,
            icon=config.icon,
            points=config.points,
            earned_at=earned_at or utc_now(),
        )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"id"})
