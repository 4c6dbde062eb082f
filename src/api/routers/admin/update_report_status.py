# File: src/api/routers/admin/update_report_status.py

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from common.dependencies.auth_dep import require_admin
from common.dependencies.service_dep import get_intake_service
from common.exceptions.base_exception import InternalServerErrorException
from common.logging.logger import log_error, log_info
from common.schemas.standard_response import StandardResponse
from common.translations.messages import get_message
from domain.reports.services.intake_service import ReportIntakeService
from domain.users.entities.user_entity import CallerIdentity

router = APIRouter(tags=["Admin"])


class StatusUpdateRequest(BaseModel):
    # Plain string so values outside the enum reach the service and get INVALID_STATUS
    status: str = Field(..., description="New status: pending, in-progress or resolved", examples=["resolved"])
    admin_notes: Optional[str] = Field(default=None, max_length=1000, description="Optional note kept in the request log")
    request_id: Optional[str] = Field(default=None, max_length=64, description="Client-side id echoed into the log")

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


@router.patch(
    "/admin/reports/{report_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Change a report's status",
    description="Moves a report between pending, in-progress and resolved. Resolving awards the author 5 points.",
    responses={
        400: {"description": "Invalid status."},
        401: {"description": "Unauthorized."},
        403: {"description": "Admin access required."},
        404: {"description": "Report not found."}
    }
)
async def update_report_status(
    report_id: str,
    data: StatusUpdateRequest,
    admin: Annotated[CallerIdentity, Depends(require_admin)],
    intake_service: Annotated[ReportIntakeService, Depends(get_intake_service)],
):
    try:
        report = await intake_service.update_status(report_id, data.status)

        log_info("Report status changed by admin", extra={
            "report_id": report_id,
            "status": report.status,
            "admin_id": admin.user_id,
            "admin_notes": data.admin_notes,
            "request_id": data.request_id,
            "endpoint": "/admin/reports/{id}/status"
        })
        return StandardResponse.success(
            data=report.model_dump(mode="json"),
            message=get_message("report.status_updated"),
        )

    except HTTPException:
        raise

    except Exception as e:
        log_error("Unexpected error updating report status", extra={
            "error": str(e),
            "report_id": report_id,
            "admin_id": admin.user_id,
            "request_id": data.request_id
        }, exc_info=True)
        raise InternalServerErrorException(detail=get_message("server.error"))
