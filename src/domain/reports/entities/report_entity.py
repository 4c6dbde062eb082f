from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from common.utils.date_utils import utc_now


class ReportCategory(str, Enum):
    # Declaration order is the classifier's tie-break order
    POTHOLE = "pothole"
    STREETLIGHT = "streetlight"
    GARBAGE = "garbage"
    WATER = "water"
    TRAFFIC = "traffic"
    SAFETY = "safety"
    INFRASTRUCTURE = "infrastructure"
    ENVIRONMENT = "environment"
    OTHER = "other"


class ReportPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReportStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class GeoLocation(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Report(BaseModel):
    id: Optional[str] = Field(default=None, alias="_id")
    author_id: str
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    image_reference: Optional[str] = None
    location: GeoLocation
    address: Optional[str] = None
    category: ReportCategory = ReportCategory.OTHER
    priority: ReportPriority = ReportPriority.MEDIUM
    status: ReportStatus = ReportStatus.PENDING

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    resolved_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Report":
        return cls.model_validate(document)


class ReportView(BaseModel):
    """Public representation returned to clients."""

    id: str
    author_id: str
    title: str
    description: str
    image_reference: Optional[str] = None
    location: GeoLocation
    address: Optional[str] = None
    category: ReportCategory
    priority: ReportPriority
    status: ReportStatus
    created_at: datetime
    resolved_at: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_report(cls, report: Report) -> "ReportView":
        return cls(**report.model_dump(exclude={"updated_at"}))

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "ReportView":
        return cls.from_report(Report.from_document(document))
