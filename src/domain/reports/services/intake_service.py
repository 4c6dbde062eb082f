# File: domain/reports/services/intake_service.py
"""
Report intake and status transitions.

Submission writes the report once and then runs points, badge evaluation and the
live broadcast as independent best-effort effects. If an effect fails the report
stays recorded and the caller still gets a success: a report can therefore exist
without its +10 points. This is accepted rather than wrapped in a transaction.
"""

from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import ValidationError

from common.base_service.base_service import BaseService, SideEffect
from common.exceptions.base_exception import (
    DuplicateReportException,
    InvalidStatusException,
    NotFoundException,
    ValidationException,
)
from common.logging.logger import log_info
from common.translations.messages import get_message
from common.utils.date_utils import utc_now
from domain.badges.services.badge_engine import BadgeEngine
from domain.gamification.services.points_ledger import PointsLedger
from domain.notification.services.broadcaster import Broadcaster, NEW_REPORT_TOPIC, REPORT_UPDATED_TOPIC
from domain.reports.entities.report_entity import GeoLocation, Report, ReportStatus, ReportView
from domain.reports.services.classifier import classify
from domain.reports.services.duplicate_detector import DuplicateCandidate, DuplicateWindow, find_duplicates
from domain.reports.services.priority import assign_priority
from infrastructure.database.mongodb.repository import MongoRepository


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class ReportIntakeService(BaseService):
    def __init__(
        self,
        reports_repo: MongoRepository,
        ledger: PointsLedger,
        badge_engine: BadgeEngine,
        broadcaster: Broadcaster,
        clock: Callable[[], datetime] = utc_now,
        duplicate_window: Optional[DuplicateWindow] = None,
    ):
        self.reports_repo = reports_repo
        self.ledger = ledger
        self.badge_engine = badge_engine
        self.broadcaster = broadcaster
        self.clock = clock
        self.duplicate_window = duplicate_window

    @staticmethod
    def validate_submission(
        title: Optional[str],
        description: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> GeoLocation:
        if _is_blank(title):
            raise ValidationException(get_message("report.title_required"), error_code="TITLE_REQUIRED")
        if _is_blank(description):
            raise ValidationException(get_message("report.description_required"), error_code="DESCRIPTION_REQUIRED")
        if latitude is None or longitude is None:
            raise ValidationException(get_message("report.location_required"), error_code="LOCATION_REQUIRED")
        try:
            return GeoLocation(latitude=latitude, longitude=longitude)
        except ValidationError:
            raise ValidationException(get_message("report.location_invalid"), error_code="LOCATION_INVALID")

    async def submit(
        self,
        author_id: str,
        title: Optional[str],
        description: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
        address: Optional[str] = None,
        image_reference: Optional[str] = None,
    ) -> ReportView:
        location = self.validate_submission(title, description, latitude, longitude)
        title, description = title.strip(), description.strip()

        category = classify(title, description)
        priority = assign_priority(title, description, category)

        now = self.clock()
        candidate = DuplicateCandidate(category=category.value, latitude=location.latitude, longitude=location.longitude)
        duplicates = await find_duplicates(candidate, self.reports_repo, now=now, window=self.duplicate_window)
        if duplicates:
            duplicate = ReportView.from_document(duplicates[0]).model_dump(mode="json")
            log_info("Report rejected as duplicate", extra={"author_id": author_id, "duplicate_id": duplicate["id"]})
            raise DuplicateReportException(duplicate=duplicate, detail=get_message("report.duplicate"))

        report = Report(
            author_id=author_id,
            title=title,
            description=description,
            image_reference=image_reference,
            location=location,
            address=address.strip() if address and address.strip() else None,
            category=category,
            priority=priority,
            status=ReportStatus.PENDING,
            created_at=now,
            updated_at=now,
            resolved_at=None,
        )
        report.id = await self.reports_repo.insert_one(report.to_document())
        log_info("Report created", extra={
            "report_id": report.id,
            "author_id": author_id,
            "category": report.category,
            "priority": report.priority,
        })

        await self.run_side_effects(
            [
                SideEffect("award_submission_points", lambda: self.ledger.award_submission(author_id)),
                SideEffect("evaluate_submission_badges", lambda: self.badge_engine.evaluate_after_submission(author_id)),
                SideEffect("broadcast_new_report", lambda: self.broadcaster.publish(NEW_REPORT_TOPIC, {
                    "report_id": report.id,
                    "title": report.title,
                    "category": report.category,
                    "priority": report.priority,
                    "location": report.location.model_dump(),
                })),
            ],
            context={"report_id": report.id, "author_id": author_id},
        )

        return ReportView.from_report(report)

    async def update_status(self, report_id: str, new_status: Any) -> ReportView:
        try:
            status = ReportStatus(new_status)
        except ValueError:
            raise InvalidStatusException(get_message("report.status_invalid"))

        existing = await self.reports_repo.find_by_id(report_id)
        if not existing:
            raise NotFoundException(get_message("report.not_found"), error_code="REPORT_NOT_FOUND")

        now = self.clock()
        newly_resolved = False
        if status == ReportStatus.RESOLVED:
            # Conditional on the current status so a resolution is rewarded once
            modified = await self.reports_repo.update_one(
                {"_id": report_id, "status": {"$ne": ReportStatus.RESOLVED.value}},
                {"status": status.value, "resolved_at": now, "updated_at": now},
            )
            newly_resolved = modified > 0
        else:
            await self.reports_repo.update_one(
                {"_id": report_id},
                {"status": status.value, "resolved_at": None, "updated_at": now},
            )

        updated = await self.reports_repo.find_by_id(report_id)
        if not updated:
            raise NotFoundException(get_message("report.not_found"), error_code="REPORT_NOT_FOUND")
        view = ReportView.from_document(updated)
        author_id = view.author_id

        log_info("Report status updated", extra={
            "report_id": report_id,
            "previous_status": existing.get("status"),
            "status": view.status,
            "newly_resolved": newly_resolved,
        })

        effects = []
        if newly_resolved:
            effects.append(SideEffect("award_resolution_points", lambda: self.ledger.award_resolution(author_id)))
            effects.append(SideEffect("evaluate_resolution_badges", lambda: self.badge_engine.evaluate_after_resolution(author_id)))
        effects.append(SideEffect("broadcast_report_updated", lambda: self.broadcaster.publish(REPORT_UPDATED_TOPIC, {
            "report_id": report_id,
            "status": view.status,
        })))
        await self.run_side_effects(effects, context={"report_id": report_id, "author_id": author_id})

        return view
