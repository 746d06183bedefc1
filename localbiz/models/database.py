"""Database models mirroring the Supabase tables."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from .enums import AppRole


def _parse_timestamp(v):
    if isinstance(v, str):
        v = datetime.fromisoformat(v.replace("Z", "+00:00"))
    if isinstance(v, datetime) and v.tzinfo is None:
        v = v.replace(tzinfo=timezone.utc)
    return v


class Profile(BaseModel):
    """Row of `profiles` (regular user accounts)."""

    id: Optional[str] = None
    user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def parse_datetime(cls, v):
        return _parse_timestamp(v)


class BusinessProfile(BaseModel):
    """Row of `business_profiles`.

    `user_id` is the business identity. For listings added on behalf of an
    owner it is a placeholder UUID until the listing is claimed.
    """

    id: Optional[str] = None
    user_id: str
    business_name: str
    business_description: Optional[str] = None
    business_category: Optional[str] = None
    business_address: Optional[str] = None
    business_phone: Optional[str] = None
    business_email: Optional[str] = None
    business_website: Optional[str] = None
    business_hours: Optional[Any] = None

    average_rating: float = 0.0
    total_reviews: int = 0

    is_claimed: bool = False
    claim_token: Optional[str] = None
    created_by: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}

    @field_validator("average_rating", mode="before")
    @classmethod
    def coerce_float(cls, v):
        return float(v) if v is not None else 0.0

    @field_validator("total_reviews", mode="before")
    @classmethod
    def coerce_int(cls, v):
        return int(v) if v is not None else 0

    @field_validator("is_claimed", mode="before")
    @classmethod
    def coerce_bool(cls, v):
        return bool(v)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def parse_datetime(cls, v):
        return _parse_timestamp(v)


class Review(BaseModel):
    """Row of `reviews`."""

    id: Optional[str] = None
    business_id: str
    reviewer_id: Optional[str] = None
    rating: int
    title: Optional[str] = None
    content: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def parse_datetime(cls, v):
        return _parse_timestamp(v)


class ReviewAttempt(BaseModel):
    """Row of `review_attempts`; append-only audit log."""

    id: Optional[str] = None
    reviewer_id: str
    business_id: str
    was_successful: bool = False
    attempted_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}

    @field_validator("was_successful", mode="before")
    @classmethod
    def coerce_bool(cls, v):
        return bool(v)

    @field_validator("attempted_at", mode="before")
    @classmethod
    def parse_datetime(cls, v):
        return _parse_timestamp(v)


class UserRole(BaseModel):
    id: Optional[str] = None
    user_id: str
    role: AppRole
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}
