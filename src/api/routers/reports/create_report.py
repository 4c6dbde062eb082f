# File: src/api/routers/reports/create_report.py

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool

from common.dependencies.auth_dep import get_current_user
from common.dependencies.service_dep import get_file_store, get_intake_service
from common.exceptions.base_exception import InternalServerErrorException
from common.logging.logger import log_error, log_info
from common.schemas.standard_response import StandardResponse
from common.translations.messages import get_message
from domain.reports.services.intake_service import ReportIntakeService
from domain.users.entities.user_entity import CallerIdentity
from infrastructure.storage.file_store import LocalFileStore

router = APIRouter(tags=["Reports"])


@router.post(
    "/reports",
    status_code=status.HTTP_201_CREATED,
    response_model=StandardResponse,
    summary="Submit an issue report",
    description="Classifies, prioritizes and stores a geotagged report. Near-identical reports from the last 24 hours are rejected.",
    responses={
        201: {"description": "Report created."},
        400: {"description": "Missing or malformed input."},
        401: {"description": "Unauthorized."},
        409: {"description": "Duplicate report."},
        503: {"description": "Storage unavailable."}
    }
)
async def create_report(
    current_user: Annotated[CallerIdentity, Depends(get_current_user)],
    intake_service: Annotated[ReportIntakeService, Depends(get_intake_service)],
    file_store: Annotated[LocalFileStore, Depends(get_file_store)],
    title: Annotated[Optional[str], Form()] = None,
    description: Annotated[Optional[str], Form()] = None,
    latitude: Annotated[Optional[float], Form()] = None,
    longitude: Annotated[Optional[float], Form()] = None,
    address: Annotated[Optional[str], Form()] = None,
    image: Annotated[Optional[UploadFile], File()] = None,
):
    try:
        # Reject bad input before anything is written to disk
        intake_service.validate_submission(title, description, latitude, longitude)

        image_reference = None
        if image is not None and image.filename:
            content = await image.read()
            image_reference = await run_in_threadpool(file_store.save, content, image.content_type, image.filename)

        try:
            report = await intake_service.submit(
                author_id=current_user.user_id,
                title=title,
                description=description,
                latitude=latitude,
                longitude=longitude,
                address=address,
                image_reference=image_reference,
            )
        except Exception:
            # A rejected or failed submission must not leave its image behind
            if image_reference:
                await run_in_threadpool(file_store.delete, image_reference)
            raise

        log_info("Report submitted", extra={
            "report_id": report.id,
            "user_id": current_user.user_id,
            "endpoint": "/reports"
        })
        return StandardResponse.success(
            data=report.model_dump(mode="json"),
            message=get_message("report.created"),
            code=status.HTTP_201_CREATED,
        )

    except HTTPException:
        raise

    except Exception as e:
        log_error("Unexpected error submitting report", extra={
            "error": str(e),
            "user_id": current_user.user_id,
            "endpoint": "/reports"
        }, exc_info=True)
        raise InternalServerErrorException(detail=get_message("server.error"))
