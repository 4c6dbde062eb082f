# File: src/api/routers/reports/get_reports.py

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from common.dependencies.auth_dep import get_current_user
from common.dependencies.service_dep import get_query_service
from common.schemas.standard_response import StandardResponse
from common.translations.messages import get_message
from common.utils.pagination import clamp_page
from domain.reports.entities.report_entity import ReportCategory, ReportPriority, ReportStatus
from domain.reports.services.query_service import ReportQueryService, build_listing_query
from domain.users.entities.user_entity import CallerIdentity

router = APIRouter(tags=["Reports"])


@router.get(
    "/reports",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="List reports",
    description="Public listing of reports, newest first, with optional filters."
)
async def list_reports(
    query_service: Annotated[ReportQueryService, Depends(get_query_service)],
    report_status: Annotated[Optional[ReportStatus], Query(alias="status")] = None,
    category: Annotated[Optional[ReportCategory], Query()] = None,
    priority: Annotated[Optional[ReportPriority], Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
):
    page, page_size = clamp_page(page, page_size)
    query = build_listing_query(
        status=report_status.value if report_status else None,
        category=category.value if category else None,
        priority=priority.value if priority else None,
    )
    result = await query_service.list_reports(query, page=page, page_size=page_size)
    return StandardResponse.success(data=result, message=get_message("report.fetched"))


@router.get(
    "/reports/mine",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="List my reports"
)
async def list_my_reports(
    current_user: Annotated[CallerIdentity, Depends(get_current_user)],
    query_service: Annotated[ReportQueryService, Depends(get_query_service)],
    report_status: Annotated[Optional[ReportStatus], Query(alias="status")] = None,
    category: Annotated[Optional[ReportCategory], Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 10,
):
    page, page_size = clamp_page(page, page_size)
    query = build_listing_query(
        author_id=current_user.user_id,
        status=report_status.value if report_status else None,
        category=category.value if category else None,
    )
    result = await query_service.list_reports(query, page=page, page_size=page_size)
    return StandardResponse.success(data=result, message=get_message("report.fetched"))


@router.get(
    "/reports/search",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Search reports",
    description="Case-insensitive text search over title, description and address, newest first.",
    responses={400: {"description": "Missing search text."}}
)
async def search_reports(
    query_service: Annotated[ReportQueryService, Depends(get_query_service)],
    q: Annotated[str, Query(min_length=1, max_length=100)],
    report_status: Annotated[Optional[ReportStatus], Query(alias="status")] = None,
    category: Annotated[Optional[ReportCategory], Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
):
    page, page_size = clamp_page(page, page_size)
    result = await query_service.search_reports(
        q,
        page=page,
        page_size=page_size,
        status=report_status.value if report_status else None,
        category=category.value if category else None,
    )
    return StandardResponse.success(data=result, message=get_message("report.fetched"))


@router.get(
    "/reports/{report_id}",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Get a single report",
    responses={404: {"description": "Report not found."}}
)
async def get_report(
    report_id: str,
    query_service: Annotated[ReportQueryService, Depends(get_query_service)],
):
    report = await query_service.get_report(report_id)
    return StandardResponse.success(data=report.model_dump(mode="json"), message=get_message("report.fetched"))
