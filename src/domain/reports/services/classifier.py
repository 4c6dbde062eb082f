# File: domain/reports/services/classifier.py
"""
Keyword-based report classification.

Each category scores one point per keyword found as a substring of the lowercased
title and description. A keyword counts once no matter how often it appears. The
highest score wins; on a tie the category declared first in CATEGORY_KEYWORDS wins.
When nothing matches the report falls back to "other".
"""

from typing import Dict, Tuple

from domain.reports.entities.report_entity import ReportCategory

CATEGORY_KEYWORDS: Dict[ReportCategory, Tuple[str, ...]] = {
    ReportCategory.POTHOLE: ("pothole", "road", "crack", "street", "hole", "asphalt", "pavement", "bumpy"),
    ReportCategory.STREETLIGHT: ("light", "lamp", "dark", "bulb", "street light", "illumination", "power", "electricity"),
    ReportCategory.GARBAGE: ("trash", "waste", "garbage", "litter", "bin", "dump", "rubbish", "refuse", "cleanup"),
    ReportCategory.WATER: ("water", "leak", "pipe", "drain", "sewage", "flood", "overflow", "blockage", "drainage"),
    ReportCategory.TRAFFIC: ("traffic", "signal", "sign", "zebra crossing", "road sign", "stop sign", "traffic light", "junction"),
    ReportCategory.SAFETY: ("safety", "danger", "hazard", "unsafe", "accident", "risk", "emergency", "urgent"),
    ReportCategory.INFRASTRUCTURE: ("bridge", "building", "wall", "fence", "barrier", "construction", "damage", "broken"),
    ReportCategory.ENVIRONMENT: ("tree", "park", "garden", "pollution", "air", "noise", "green", "nature"),
    ReportCategory.OTHER: (),
}


def normalize_text(title: str, description: str) -> str:
    return f"{title or ''} {description or ''}".lower()


def score_categories(text: str) -> Dict[ReportCategory, int]:
    return {
        category: sum(1 for keyword in keywords if keyword in text)
        for category, keywords in CATEGORY_KEYWORDS.items()
    }


def classify(title: str, description: str) -> ReportCategory:
    scores = score_categories(normalize_text(title, description))

    best_category, best_score = ReportCategory.OTHER, 0
    for category, score in scores.items():
        if score > best_score:
            best_category, best_score = category, score

    return best_category
