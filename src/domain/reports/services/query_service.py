# File: domain/reports/services/query_service.py

import re
from typing import Any, Dict, Optional

from common.exceptions.base_exception import NotFoundException, ValidationException
from common.translations.messages import get_message
from common.utils.pagination import page_offset, paginate_response
from domain.reports.entities.report_entity import ReportView
from infrastructure.database.mongodb.repository import MongoRepository

SEARCH_FIELDS = ("title", "description", "address")


def build_listing_query(
    author_id: Optional[str] = None,
    status: Optional[str] = None,
    category: Optional[str] = None,
    priority: Optional[str] = None,
) -> Dict[str, Any]:
    query = {}
    if author_id:
        query["author_id"] = author_id
    if status:
        query["status"] = status
    if category:
        query["category"] = category
    if priority:
        query["priority"] = priority
    return query


class ReportQueryService:
    """Read side for report listings, newest first."""

    def __init__(self, reports_repo: MongoRepository):
        self.reports_repo = reports_repo

    async def get_report(self, report_id: str) -> ReportView:
        document = await self.reports_repo.find_by_id(report_id)
        if not document:
            raise NotFoundException(get_message("report.not_found"), error_code="REPORT_NOT_FOUND")
        return ReportView.from_document(document)

    async def list_reports(self, query: Dict[str, Any], page: int = 1, page_size: int = 20) -> Dict[str, Any]:
        total = await self.reports_repo.count(query)
        documents = await self.reports_repo.find(
            query,
            sort=[("created_at", -1), ("_id", -1)],
            skip=page_offset(page, page_size),
            limit=page_size,
        )
        items = [ReportView.from_document(doc).model_dump(mode="json") for doc in documents]
        return paginate_response(items, total=total, page=page, page_size=page_size)

    async def search_reports(
        self,
        text: Optional[str],
        page: int = 1,
        page_size: int = 20,
        status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Case-insensitive substring match over title, description and address."""
        if not text or not text.strip():
            raise ValidationException(get_message("report.search_required"), error_code="SEARCH_QUERY_REQUIRED")

        pattern = re.escape(text.strip())
        query = build_listing_query(status=status, category=category)
        query["$or"] = [{field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS]
        return await self.list_reports(query, page=page, page_size=page_size)
