# File: common/security/identity.py
"""
Caller identity resolution from bearer tokens.

The identity provider issues signed JWTs; this module only verifies them and trusts
the resulting claims completely.
"""

from typing import Any, Dict, Optional

from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from common.config.settings import settings
from common.exceptions.base_exception import UnauthorizedException
from common.logging.logger import log_debug, log_warning
from common.translations.messages import get_message
from domain.users.entities.user_entity import CallerIdentity


def get_token_from_header(request: Request) -> str:
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedException(get_message("auth.no_token"), error_code="NO_TOKEN")
    return token.strip()


def resolve_identity(token: str) -> CallerIdentity:
    """
    Verify a bearer token and map its claims to a caller identity.

    Args:
        token (str): Raw JWT taken from the Authorization header.

    Returns:
        CallerIdentity: Verified user id, email and display name.

    Raises:
        UnauthorizedException: If the token is expired, malformed or lacks claims.
    """
    options = {"verify_aud": bool(settings.TOKEN_AUDIENCE)}
    try:
        payload: Dict[str, Any] = jwt.decode(
            token,
            settings.ACCESS_SECRET,
            algorithms=[settings.ALGORITHM],
            audience=settings.TOKEN_AUDIENCE or None,
            options=options,
        )
    except ExpiredSignatureError:
        log_warning("Token expired")
        raise UnauthorizedException(get_message("auth.token_expired"), error_code="TOKEN_EXPIRED")
    except JWTError as e:
        log_warning("Invalid token", extra={"error": str(e)})
        raise UnauthorizedException(get_message("auth.invalid_token"), error_code="INVALID_TOKEN")

    email: Optional[str] = payload.get("email")
    try:
        identity = CallerIdentity(
            user_id=payload.get("sub"),
            email=email,
            display_name=payload.get("name") or (email.split("@")[0] if email else ""),
        )
    except ValidationError as ve:
        log_warning("Token claims incomplete", extra={"errors": ve.errors()})
        raise UnauthorizedException(get_message("auth.invalid_token"), error_code="INVALID_TOKEN")

    log_debug("Identity resolved", extra={"user_id": identity.user_id})
    return identity
