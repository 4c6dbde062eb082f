# File: domain/reports/services/priority.py

from typing import Dict, Tuple, Union

from domain.reports.entities.report_entity import ReportCategory, ReportPriority
from domain.reports.services.classifier import normalize_text

URGENT_KEYWORDS: Tuple[str, ...] = (
    "urgent", "emergency", "danger", "hazard", "accident", "injured", "hurt",
    "blocking", "blocked", "traffic", "school", "hospital", "fire", "gas leak",
)

CATEGORY_PRIORITY: Dict[ReportCategory, ReportPriority] = {
    ReportCategory.SAFETY: ReportPriority.HIGH,
    ReportCategory.TRAFFIC: ReportPriority.HIGH,
    ReportCategory.WATER: ReportPriority.MEDIUM,
    ReportCategory.STREETLIGHT: ReportPriority.MEDIUM,
    ReportCategory.POTHOLE: ReportPriority.MEDIUM,
    ReportCategory.INFRASTRUCTURE: ReportPriority.MEDIUM,
    ReportCategory.GARBAGE: ReportPriority.LOW,
    ReportCategory.ENVIRONMENT: ReportPriority.LOW,
    ReportCategory.OTHER: ReportPriority.LOW,
}


def has_urgent_keyword(text: str) -> bool:
    return any(keyword in text for keyword in URGENT_KEYWORDS)


def assign_priority(title: str, description: str, category: Union[ReportCategory, str]) -> ReportPriority:
    """Urgent wording always means high priority; otherwise the category decides."""
    if has_urgent_keyword(normalize_text(title, description)):
        return ReportPriority.HIGH

    try:
        category = ReportCategory(category)
    except ValueError:
        return ReportPriority.LOW
    return CATEGORY_PRIORITY.get(category, ReportPriority.LOW)
