# File: src/common/dependencies/auth_dep.py
from typing import Annotated

from fastapi import Depends, Request

from common.exceptions.base_exception import ForbiddenException
from common.logging.logger import log_warning
from common.security.identity import get_token_from_header, resolve_identity
from common.translations.messages import get_message
from common.dependencies.service_dep import get_user_service
from domain.users.entities.user_entity import CallerIdentity
from domain.users.services.user_service import UserService


async def get_current_user(
    request: Request,
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> CallerIdentity:
    """Resolve the bearer token and make sure the caller has a user record."""
    identity = resolve_identity(get_token_from_header(request))
    await user_service.ensure_user(identity)
    return identity


async def require_admin(
    current_user: Annotated[CallerIdentity, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> CallerIdentity:
    if not await user_service.is_admin(current_user.user_id):
        log_warning("Non-admin attempted admin action", extra={"user_id": current_user.user_id})
        raise ForbiddenException(get_message("auth.admin_required"))
    return current_user
