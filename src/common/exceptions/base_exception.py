# File: common/exceptions/base_exception.py

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AppHTTPException(HTTPException):
    """
    HTTP exception carrying a stable machine-readable code and an error category.

    The category tells a client what to do next: "validation" means fix the input,
    "duplicate" means the report already exists, "storage" means try again later.
    """

    error_code: str = "APP_ERROR"
    category: str = "general"

    def __init__(self, status_code: int, detail: str, error_code: Optional[str] = None):
        super().__init__(status_code=status_code, detail=detail)
        if error_code:
            self.error_code = error_code

    def extra_payload(self) -> Dict[str, Any]:
        return {}


class ValidationException(AppHTTPException):
    error_code = "VALIDATION_ERROR"
    category = "validation"

    def __init__(self, detail: str = "Invalid request parameters.", error_code: Optional[str] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, error_code)


class DuplicateReportException(AppHTTPException):
    error_code = "DUPLICATE_REPORT"
    category = "duplicate"

    def __init__(self, duplicate: Dict[str, Any], detail: str = "Duplicate report found."):
        super().__init__(status.HTTP_409_CONFLICT, detail)
        self.duplicate = duplicate

    def extra_payload(self) -> Dict[str, Any]:
        return {"duplicate": self.duplicate}


class NotFoundException(AppHTTPException):
    error_code = "NOT_FOUND"
    category = "not_found"

    def __init__(self, detail: str = "Resource not found.", error_code: Optional[str] = None):
        super().__init__(status.HTTP_404_NOT_FOUND, detail, error_code)


class InvalidStatusException(AppHTTPException):
    error_code = "INVALID_STATUS"
    category = "invalid_status"

    def __init__(self, detail: str = "Invalid status. Must be pending, in-progress, or resolved."):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class UnauthorizedException(AppHTTPException):
    error_code = "AUTH_FAILED"
    category = "unauthenticated"

    def __init__(self, detail: str = "Unauthorized access.", error_code: Optional[str] = None):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, error_code)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenException(AppHTTPException):
    error_code = "ADMIN_REQUIRED"
    category = "forbidden"

    def __init__(self, detail: str = "You do not have permission to access this resource."):
        super().__init__(status.HTTP_403_FORBIDDEN, detail)


class StorageUnavailableException(AppHTTPException):
    error_code = "STORAGE_UNAVAILABLE"
    category = "storage"

    def __init__(self, detail: str = "Storage temporarily unavailable. Please try again later."):
        super().__init__(status.HTTP_503_SERVICE_UNAVAILABLE, detail)


class InternalServerErrorException(AppHTTPException):
    error_code = "INTERNAL_ERROR"
    category = "internal"

    def __init__(self, detail: str = "Internal server error occurred."):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


CUSTOM_HTTP_EXCEPTIONS = [
    ValidationException,
    DuplicateReportException,
    NotFoundException,
    InvalidStatusException,
    UnauthorizedException,
    ForbiddenException,
    StorageUnavailableException,
    InternalServerErrorException,
]
