from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from common.utils.date_utils import utc_now


class CallerIdentity(BaseModel):
    """Verified identity handed over by the token resolver."""

    user_id: str
    email: EmailStr
    display_name: str


class User(BaseModel):
    id: Optional[str] = Field(default=None, alias="_id")
    email: EmailStr
    name: str

    # Gamification ledger
    points: int = Field(default=0, ge=0)
    badges: List[str] = Field(default_factory=list)

    is_admin: bool = False

    created_at: datetime = Field(default_factory=utc_now)
    last_active: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


class UserProfile(BaseModel):
    id: str
    email: EmailStr
    name: str
    points: int
    badge_count: int
    badges: List[dict] = Field(default_factory=list)
    is_admin: bool
    created_at: datetime
    last_active: Optional[datetime] = None
