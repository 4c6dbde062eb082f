# File: common/schemas/standard_response.py

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


class Meta(BaseModel):
    message: str = Field(..., description="Human-readable outcome.")
    status: Literal["success", "error"] = Field(..., examples=["success"])
    code: int = Field(..., description="HTTP status code mirrored in the body", examples=[200, 201])


class StandardResponse(BaseModel):
    """Success envelope shared by every JSON endpoint."""

    data: Optional[Any] = Field(None, description="Report, listing page, profile or badge payload")
    meta: Meta

    @staticmethod
    def success(data: Any = None, message: str = "Success", code: int = 200) -> "StandardResponse":
        return StandardResponse(data=data, meta=Meta(message=message, status="success", code=code))


class ErrorResponse(BaseModel):
    """
    Error envelope. ``error_code`` is stable for clients to branch on; ``category``
    groups codes by what the caller should do next.
    """

    detail: str = Field(..., examples=["Duplicate report found."])
    message: Optional[str] = None
    error_code: Optional[str] = Field(None, examples=["DUPLICATE_REPORT", "TITLE_REQUIRED"])
    category: Optional[str] = Field(None, examples=["validation", "duplicate", "storage"])
    status: Literal["error"] = "error"
    duplicate: Optional[Dict[str, Any]] = Field(None, description="Existing report matched by duplicate detection")
    request_id: Optional[str] = None
