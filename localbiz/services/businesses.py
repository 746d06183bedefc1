"""Local business listings stored in `business_profiles`."""

import logging
import secrets
import uuid
from typing import List, Optional

from postgrest.exceptions import APIError
from supabase import Client

from .. import config
from ..errors import BusinessSaveError, LocalBizError
from ..models import AddBusinessForm, BusinessListing, BusinessProfile
from ..session import AuthSession

logger = logging.getLogger(__name__)

TABLE = "business_profiles"


def new_placeholder_id() -> str:
    """Identity for a listing added on an owner's behalf, replaced when claimed."""
    return str(uuid.uuid4())


def new_claim_token() -> str:
    return secrets.token_urlsafe(24)


def to_listing(business: BusinessProfile) -> BusinessListing:
    if not business.business_hours:
        hours = "Hours not provided"
    elif isinstance(business.business_hours, (dict, list)):
        hours = "Hours available"
    else:
        hours = str(business.business_hours)

    return BusinessListing(
        id=business.user_id,
        name=business.business_name,
        category=business.business_category or "Other",
        image=config.PLACEHOLDER_IMAGE_URL,
        rating=business.average_rating,
        review_count=business.total_reviews,
        address=business.business_address or "Address not provided",
        phone=business.business_phone or "Phone not provided",
        hours=hours,
        price_range="$$",
        description=business.business_description or "No description available",
    )


def add_business(session: AuthSession, form: AddBusinessForm) -> BusinessProfile:
    """Adds an unclaimed listing created by the signed-in user."""
    user_id = session.require_user()
    data = {
        "user_id": new_placeholder_id(),
        "business_name": form.business_name,
        "business_email": form.business_email,
        "business_description": form.business_description,
        "business_category": form.business_category,
        "business_address": form.business_address,
        "business_phone": form.business_phone,
        "business_website": form.business_website,
        "created_by": user_id,
        "is_claimed": False,
        "claim_token": new_claim_token(),
    }
    try:
        result = session.client.table(TABLE).insert(data).execute()
    except APIError as e:
        logger.error(f"Failed to add business {form.business_name}: {e.message}")
        raise BusinessSaveError(e.message or "Failed to add business") from e

    logger.info(f"Business {form.business_name} added by {user_id}")
    return BusinessProfile(**(result.data[0] if result.data else data))


def claim_business(session: AuthSession, claim_token: str) -> bool:
    """Transfers an unclaimed listing to the signed-in owner."""
    user_id = session.require_user()
    try:
        result = session.client.rpc(
            "claim_business_account", {"_claim_token": claim_token, "_user_id": user_id}
        ).execute()
    except APIError as e:
        raise LocalBizError(e.message or "Failed to claim business") from e

    claimed = bool(result.data)
    if claimed:
        logger.info(f"Business claimed by {user_id}")
    else:
        logger.warning(f"Claim token rejected for {user_id}")
    return claimed


def get_business(client: Client, business_id: str) -> Optional[BusinessProfile]:
    result = client.table(TABLE).select("*").eq("user_id", business_id).limit(1).execute()
    return BusinessProfile(**result.data[0]) if result.data else None


def list_local_businesses(client: Client) -> List[BusinessListing]:
    result = client.table(TABLE).select("*").execute()
    return [to_listing(BusinessProfile(**row)) for row in result.data or []]


def recompute_rating_stats(client: Client, business_id: str) -> None:
    """Refreshes `average_rating` and `total_reviews` from the stored reviews."""
    try:
        result = client.table("reviews").select("rating").eq("business_id", business_id).execute()
        ratings = [row["rating"] for row in result.data or [] if row.get("rating") is not None]
        average = round(sum(ratings) / len(ratings), 2) if ratings else 0.0
        client.table(TABLE).update(
            {"average_rating": average, "total_reviews": len(ratings)}
        ).eq("user_id", business_id).execute()
    except APIError as e:
        logger.error(f"Failed to update rating stats for {business_id}: {e.message}")
