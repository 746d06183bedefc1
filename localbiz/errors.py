"""Errors raised by the directory services.

Backend failures are not classified any further than this; the message of the
underlying Supabase or Google error is carried through so it can be shown to
the user.
"""

from datetime import datetime
from typing import Optional


class LocalBizError(Exception):
    """Base class for all localbiz errors."""


class NotAuthenticatedError(LocalBizError):
    def __init__(self, message: str = "No user logged in"):
        super().__init__(message)


class PermissionDeniedError(LocalBizError):
    pass


class AuthError(LocalBizError):
    pass


class EligibilityCheckError(LocalBizError):
    """The eligibility query failed; the caller must treat it as not eligible."""


class ReviewLimitError(LocalBizError):
    """A business creator tried to review their listing inside the cooldown."""

    def __init__(self, business_id: str, next_review_date: Optional[datetime], business_name: Optional[str] = None):
        self.business_id = business_id
        self.next_review_date = next_review_date
        self.business_name = business_name
        super().__init__("You've reached your review limit for this business.")

    def notice(self, now: Optional[datetime] = None) -> str:
        from .services.eligibility import review_limit_notice

        return review_limit_notice(self.business_name, self.next_review_date, now=now)


class ReviewSubmitError(LocalBizError):
    pass


class BusinessSaveError(LocalBizError):
    pass


class BusinessNotFoundError(LocalBizError):
    pass


class PlacesError(LocalBizError):
    pass
