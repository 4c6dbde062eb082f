# File: common/exceptions/exception_handlers.py

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

import sentry_sdk

from common.exceptions.base_exception import AppHTTPException
from common.logging.logger import log_error, log_warning
from common.schemas.standard_response import ErrorResponse


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def build_error_response(
    request: Request,
    status_code: int,
    detail: str,
    error_code: Optional[str] = None,
    category: Optional[str] = None,
    headers: Optional[dict] = None,
    **extra,
) -> JSONResponse:
    body = ErrorResponse(
        detail=detail,
        message=detail,
        error_code=error_code,
        category=category,
        request_id=_request_id(request),
        **extra,
    ).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def register_exception_handlers(app: FastAPI):
    """
    Map every error to the ErrorResponse shape with a stable error_code and category.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Malformed query parameters or JSON bodies rejected by FastAPI before a route runs.
        """
        details = []
        for err in exc.errors():
            loc = err.get("loc", [])
            field = loc[-1] if loc else "field"
            details.append(f"{field}: {err.get('msg', 'Invalid input.')}")
        error_message = "; ".join(details)

        log_warning("Request validation failed", extra={
            "path": request.url.path,
            "method": request.method,
            "errors": error_message,
            "request_id": _request_id(request)
        })
        return build_error_response(
            request,
            HTTP_400_BAD_REQUEST,
            detail=error_message,
            error_code="VALIDATION_ERROR",
            category="validation",
        )

    @app.exception_handler(AppHTTPException)
    async def app_exception_handler(request: Request, exc: AppHTTPException):
        # Expected outcomes such as duplicates or bad input log at warning; 5xx at error
        log = log_error if exc.status_code >= 500 else log_warning
        log("Request rejected", extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
            "error_code": exc.error_code,
            "category": exc.category,
            "detail": str(exc.detail),
            "request_id": _request_id(request)
        })
        return build_error_response(
            request,
            exc.status_code,
            detail=str(exc.detail),
            error_code=exc.error_code,
            category=exc.category,
            headers=getattr(exc, "headers", None),
            **exc.extra_payload(),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """
        Framework-raised HTTP errors such as 404 for unknown paths or 405.
        """
        log_warning("HTTP error", extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
            "detail": str(exc.detail)
        })
        return build_error_response(
            request, exc.status_code, detail=str(exc.detail), category="http", headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        log_error("Unhandled exception", extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
            "request_id": _request_id(request)
        }, exc_info=True)
        sentry_sdk.capture_exception(exc)

        return build_error_response(
            request,
            HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error occurred.",
            error_code="INTERNAL_ERROR",
            category="internal",
        )
