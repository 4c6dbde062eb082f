# File: src/api/routers/admin/manage_users.py

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from common.dependencies.auth_dep import require_admin
from common.dependencies.service_dep import get_user_service
from common.exceptions.base_exception import InternalServerErrorException
from common.logging.logger import log_error, log_info
from common.schemas.standard_response import StandardResponse
from common.translations.messages import get_message
from common.utils.pagination import clamp_page
from domain.users.entities.user_entity import CallerIdentity
from domain.users.services.user_service import UserService

router = APIRouter(tags=["Admin"])


class AdminFlagRequest(BaseModel):
    is_admin: bool = Field(..., description="Grant (true) or revoke (false) admin rights")

    model_config = ConfigDict(extra="forbid")


@router.get(
    "/admin/users",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="List users",
    description="Users ranked by points, with submitted and resolved report counts. `search` matches name or email.",
    responses={403: {"description": "Admin access required."}}
)
async def list_users(
    admin: Annotated[CallerIdentity, Depends(require_admin)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    search: Annotated[Optional[str], Query(max_length=100)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
):
    page, page_size = clamp_page(page, page_size)
    result = await user_service.list_users(search=search, page=page, page_size=page_size)
    return StandardResponse.success(data=result, message=get_message("admin.users"))


@router.patch(
    "/admin/users/{user_id}/admin",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Grant or revoke admin rights",
    responses={
        403: {"description": "Admin access required."},
        404: {"description": "User not found."}
    }
)
async def set_admin_flag(
    user_id: str,
    data: AdminFlagRequest,
    admin: Annotated[CallerIdentity, Depends(require_admin)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    try:
        user = await user_service.set_admin(user_id, data.is_admin)

        log_info("Admin rights changed", extra={
            "user_id": user_id,
            "is_admin": data.is_admin,
            "admin_id": admin.user_id,
            "endpoint": "/admin/users/{id}/admin"
        })
        return StandardResponse.success(
            data=user,
            message=get_message("admin.user_promoted" if data.is_admin else "admin.user_demoted"),
        )

    except HTTPException:
        raise

    except Exception as e:
        log_error("Unexpected error changing admin rights", extra={
            "error": str(e),
            "user_id": user_id,
            "admin_id": admin.user_id
        }, exc_info=True)
        raise InternalServerErrorException(detail=get_message("server.error"))
