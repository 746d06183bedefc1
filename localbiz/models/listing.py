"""Display models shared by the browse page, detail view and API payloads."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BusinessListing(BaseModel):
    """A business card, either from the local store or from Google Places."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    name: str
    category: str = "Other"
    image: str = ""
    rating: float = 0.0
    review_count: int = 0
    address: str = ""
    phone: str = ""
    hours: str = ""
    price_range: str = "$$"
    description: str = ""
    is_google_business: bool = False

    @property
    def dedup_key(self) -> str:
        return f"{self.name.lower()}_{self.address.lower()}"

    @property
    def is_external(self) -> bool:
        return self.id.startswith("google_")


class ReviewView(BaseModel):
    """A review as shown on the detail page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    user_id: Optional[str] = None
    user_name: str = "Anonymous User"
    user_avatar: Optional[str] = None
    rating: int = 0
    title: str = ""
    content: str = ""
    date: datetime
    helpful: int = 0
    verified: bool = False
    is_google_review: bool = False


class EligibilityResult(BaseModel):
    can_review: bool
    next_review_date: Optional[datetime] = None


class SaveResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    business_id: str
    is_new: bool


class UserWithRoles(BaseModel):
    id: str
    display_id: str
    roles: List[str] = Field(default_factory=list)
