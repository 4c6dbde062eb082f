# File: src/api/middleware/error_middleware.py

import time
from uuid import uuid4

import sentry_sdk
from fastapi.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse

from common.logging.logger import log_error, log_info
from common.schemas.standard_response import ErrorResponse

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id, logs its outcome and duration, and turns errors
    that escaped the exception handlers into a 500 in the standard error shape.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)

        except HTTPException:
            raise

        except Exception as exc:
            log_error("Unhandled error reached middleware", extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
                "client_ip": request.client.host if request.client else "unknown",
            }, exc_info=True)
            with sentry_sdk.new_scope() as scope:
                scope.set_tag("request_id", request_id)
                sentry_sdk.capture_exception(exc)

            response = JSONResponse(
                status_code=500,
                content=ErrorResponse(
                    detail="Unexpected server error.",
                    message="Something went wrong.",
                    error_code="INTERNAL_ERROR",
                    category="internal",
                    request_id=request_id,
                ).model_dump(exclude_none=True)
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        log_info("Request handled", extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        })
        return response
