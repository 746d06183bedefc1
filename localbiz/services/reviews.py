"""
Reviews
=======
Submission workflow, review listing for the detail page, and moderation.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from postgrest.exceptions import APIError
from supabase import Client

from .. import config
from ..errors import (
    BusinessNotFoundError,
    BusinessSaveError,
    LocalBizError,
    PlacesError,
    PermissionDeniedError,
    ReviewLimitError,
    ReviewSubmitError,
)
from ..models import BusinessListing, EligibilityResult, Review, ReviewForm, ReviewView
from ..places import GOOGLE_ID_PREFIX, PlacesDirectory
from ..session import AuthSession
from .businesses import get_business, recompute_rating_stats, to_listing
from .dedup import save_external_business
from .eligibility import check_eligibility, log_review_attempt

logger = logging.getLogger(__name__)


def preflight(session: AuthSession, business_id: str, now: Optional[datetime] = None) -> EligibilityResult:
    """Eligibility shown before the review form opens. Not logged as an attempt."""
    return check_eligibility(session, business_id, now=now)


def _record_attempt(session: AuthSession, business_id: str, was_successful: bool) -> None:
    """Audit only; a logging failure never changes the submission outcome."""
    try:
        log_review_attempt(session, business_id, was_successful)
    except LocalBizError as e:
        logger.error(f"Review attempt for {business_id} not recorded: {e}")


def submit_review(
    session: AuthSession,
    business_id: str,
    form: ReviewForm,
    business_data: Optional[BusinessListing] = None,
    places: Optional[PlacesDirectory] = None,
    now: Optional[datetime] = None,
) -> Review:
    """Stores a review after saving unsaved Google businesses and checking eligibility.

    The attempt is logged once the outcome is known: failed when the reviewer
    is inside the cooldown or the insert fails, successful otherwise.
    """
    reviewer_id = session.require_user("You must be logged in to leave a review")
    client = session.client

    final_id = business_id
    if business_id.startswith(GOOGLE_ID_PREFIX) and business_data is not None:
        try:
            saved = save_external_business(client, business_data, acting_user_id=reviewer_id, places=places)
        except BusinessSaveError as e:
            logger.error(f"Error saving Google business {business_id}: {e}")
            raise BusinessSaveError("Failed to save business information") from e
        final_id = saved.business_id
        logger.info(f"Google business saved with ID: {final_id}")

    eligibility = check_eligibility(session, final_id, now=now)
    if not eligibility.can_review:
        _record_attempt(session, final_id, False)
        name = business_data.name if business_data else None
        raise ReviewLimitError(final_id, eligibility.next_review_date, business_name=name)

    data = {
        "business_id": final_id,
        "reviewer_id": reviewer_id,
        "rating": form.rating,
        "title": form.title,
        "content": form.content,
    }
    try:
        result = client.table("reviews").insert(data).execute()
    except APIError as e:
        logger.error(f"Failed to submit review for {final_id}: {e.message}")
        _record_attempt(session, final_id, False)
        raise ReviewSubmitError(e.message or "Failed to submit review") from e

    _record_attempt(session, final_id, True)
    recompute_rating_stats(client, final_id)
    logger.info(f"Review stored for {final_id} by {reviewer_id}")
    return Review(**(result.data[0] if result.data else data))


def _to_view(review: Review) -> ReviewView:
    return ReviewView(
        id=review.id or "",
        user_id=review.reviewer_id,
        user_name="Anonymous User",
        rating=review.rating,
        title=review.title or "",
        content=review.content or "",
        date=review.created_at or datetime.now(timezone.utc),
        helpful=0,
        verified=False,
    )


def list_reviews(client: Client, business_id: str, places: Optional[PlacesDirectory] = None) -> List[ReviewView]:
    """Local reviews newest first, followed by Google reviews for `google_` ids."""
    reviews: List[ReviewView] = []
    try:
        result = (
            client.table("reviews")
            .select("*")
            .eq("business_id", business_id)
            .order("created_at", desc=True)
            .execute()
        )
        reviews = [_to_view(Review(**row)) for row in result.data or []]
    except APIError as e:
        logger.error(f"Error fetching reviews for {business_id}: {e.message}")

    if places is not None and business_id.startswith(GOOGLE_ID_PREFIX):
        try:
            reviews.extend(places.fetch_place_reviews(business_id))
        except PlacesError as e:
            logger.error(f"Error fetching Google reviews for {business_id}: {e}")

    return reviews


def delete_review(session: AuthSession, review_id: str, business_id: Optional[str] = None) -> None:
    """Moderator deletion; refreshes the business's rating stats."""
    if not session.is_admin:
        raise PermissionDeniedError("Only admins can delete reviews")
    try:
        session.client.table("reviews").delete().eq("id", review_id).execute()
    except APIError as e:
        raise ReviewSubmitError(e.message or "Failed to delete review") from e

    logger.info(f"Review {review_id} deleted by {session.user_id}")
    if business_id:
        recompute_rating_stats(session.client, business_id)


def _pending_google_listing(business_id: str) -> BusinessListing:
    return BusinessListing(
        id=business_id,
        name="Loading business details...",
        category="Other",
        image=config.PLACEHOLDER_IMAGE_URL,
        address="Address will be available after first review",
        phone="Phone not available",
        hours="Hours not available",
        description="This business will be saved to our database when you add a review.",
        is_google_business=True,
    )


def business_detail(
    client: Client,
    business_id: str,
    places: Optional[PlacesDirectory] = None,
    known: Optional[BusinessListing] = None,
) -> Tuple[BusinessListing, List[ReviewView]]:
    """Listing and reviews for the detail page.

    `known` is the listing the caller already has from the browse page. Google
    businesses that were never saved get a placeholder listing.
    """
    if known is not None and known.id == business_id:
        return known, list_reviews(client, business_id, places)

    local = get_business(client, business_id)
    if local is not None:
        return to_listing(local), list_reviews(client, business_id, places)

    if business_id.startswith(GOOGLE_ID_PREFIX):
        return _pending_google_listing(business_id), []

    raise BusinessNotFoundError(f"Business {business_id} not found")
