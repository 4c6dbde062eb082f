# File: domain/reports/services/duplicate_detector.py
"""
Duplicate detection over a time and space window.

An existing report duplicates a candidate when it has the same category, was created
strictly after ``now - window`` and lies inside a flat bounding box of
``radius`` degrees around the candidate on both axes. The check is a conjunctive
filter pushed to MongoDB; ``is_duplicate_of`` is the same rule evaluated in memory.

Two near-simultaneous submissions for one incident can both pass this check before
either is stored. That race is accepted.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from common.config.settings import settings
from common.logging.logger import log_info
from common.utils.date_utils import ensure_aware, hours_before, utc_now
from infrastructure.database.mongodb.repository import MongoRepository


@dataclass(frozen=True)
class DuplicateCandidate:
    category: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class DuplicateWindow:
    hours: int = 24
    radius_degrees: float = 0.001

    @classmethod
    def from_settings(cls) -> "DuplicateWindow":
        return cls(hours=settings.DUPLICATE_WINDOW_HOURS, radius_degrees=settings.DUPLICATE_RADIUS_DEGREES)


def build_duplicate_query(candidate: DuplicateCandidate, now: datetime, window: DuplicateWindow) -> Dict[str, Any]:
    radius = window.radius_degrees
    return {
        "category": candidate.category,
        "created_at": {"$gt": hours_before(now, window.hours)},
        "location.latitude": {"$gte": candidate.latitude - radius, "$lte": candidate.latitude + radius},
        "location.longitude": {"$gte": candidate.longitude - radius, "$lte": candidate.longitude + radius},
    }


def is_duplicate_of(
    candidate: DuplicateCandidate,
    existing: Dict[str, Any],
    now: datetime,
    window: Optional[DuplicateWindow] = None,
) -> bool:
    window = window or DuplicateWindow()
    location = existing.get("location") or {}
    created_at = existing.get("created_at")
    if created_at is None or "latitude" not in location or "longitude" not in location:
        return False

    return (
        existing.get("category") == candidate.category
        and ensure_aware(created_at) > hours_before(now, window.hours)
        and candidate.latitude - window.radius_degrees <= location["latitude"] <= candidate.latitude + window.radius_degrees
        and candidate.longitude - window.radius_degrees <= location["longitude"] <= candidate.longitude + window.radius_degrees
    )


async def find_duplicates(
    candidate: DuplicateCandidate,
    reports_repo: MongoRepository,
    now: Optional[datetime] = None,
    window: Optional[DuplicateWindow] = None,
) -> List[Dict[str, Any]]:
    """
    Return every stored report matching the candidate, oldest first.

    Args:
        candidate (DuplicateCandidate): Category and coordinates of the new report.
        reports_repo (MongoRepository): Repository over the reports collection.
        now (Optional[datetime]): Reference instant for the time window.
        window (Optional[DuplicateWindow]): Window size, defaults to settings.

    Returns:
        List[Dict[str, Any]]: Matching report documents sorted by created_at ascending.
    """
    now = now or utc_now()
    window = window or DuplicateWindow.from_settings()
    query = build_duplicate_query(candidate, now, window)

    matches = await reports_repo.find(query, sort=[("created_at", 1), ("_id", 1)])
    if matches:
        log_info("Duplicate reports found", extra={
            "category": candidate.category,
            "latitude": candidate.latitude,
            "longitude": candidate.longitude,
            "matches": [match["_id"] for match in matches],
        })
    return matches
