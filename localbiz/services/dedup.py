"""
Dedup-on-save
=============
Stores an externally sourced (Google) business locally, reusing an existing
row when one already has the same name and address.

Matching is exact after lowercasing. Near-duplicates that differ in
formatting ("St." vs "Street", extra spaces) are stored as separate rows.
"""

import logging
from typing import Optional

from postgrest.exceptions import APIError
from supabase import Client

from ..errors import BusinessSaveError, PlacesError
from ..models import BusinessListing, SaveResult
from ..places import PlacesDirectory, strip_google_prefix
from .businesses import TABLE, new_claim_token, new_placeholder_id

logger = logging.getLogger(__name__)


def escape_like(value: str) -> str:
    """Escapes `%`, `_` and `*` so `ilike` performs a case-insensitive equality."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_").replace("*", "\\*")


def find_existing(client: Client, name: str, address: str) -> Optional[str]:
    result = (
        client.table(TABLE)
        .select("user_id")
        .ilike("business_name", escape_like(name))
        .ilike("business_address", escape_like(address))
        .limit(1)
        .execute()
    )
    return result.data[0]["user_id"] if result.data else None


def import_google_reviews(client: Client, places: PlacesDirectory, place_id: str, business_id: str) -> int:
    """Copies a place's Google reviews onto the new local row. Returns the count saved.

    Imported rows have no reviewer, so they never count toward anyone's review limit.
    """
    reviews = places.fetch_place_reviews(place_id)
    logger.info(f"Found {len(reviews)} Google reviews to save")
    for review in reviews:
        client.table("reviews").insert(
            {
                "business_id": business_id,
                "reviewer_id": None,
                "rating": review.rating or 5,
                "title": "",
                "content": review.content,
            }
        ).execute()
    return len(reviews)


def save_external_business(
    client: Client,
    record: Optional[BusinessListing],
    acting_user_id: Optional[str] = None,
    places: Optional[PlacesDirectory] = None,
) -> SaveResult:
    if record is None:
        raise BusinessSaveError("Business data is required")

    logger.info(f"Saving Google business to local database: {record.name}")

    try:
        existing_id = find_existing(client, record.name, record.address)
    except APIError as e:
        logger.error(f"Error checking existing business: {e.message}")
        existing_id = None

    if existing_id:
        logger.info(f"Business already exists with ID: {existing_id}")
        return SaveResult(business_id=existing_id, is_new=False)

    data = {
        "user_id": new_placeholder_id(),
        "business_name": record.name,
        "business_description": record.description,
        "business_category": record.category,
        "business_address": record.address,
        "business_phone": record.phone,
        "business_email": None,
        "business_website": None,
        "is_claimed": False,
        "claim_token": new_claim_token(),
        "created_by": acting_user_id,
    }
    try:
        result = client.table(TABLE).insert(data).execute()
    except APIError as e:
        logger.error(f"Error inserting business {record.name}: {e.message}")
        raise BusinessSaveError(e.message or "Failed to save business") from e

    business_id = result.data[0]["user_id"] if result.data else data["user_id"]
    logger.info(f"Successfully saved Google business with ID: {business_id}")

    if places is not None and record.is_external:
        try:
            import_google_reviews(client, places, strip_google_prefix(record.id), business_id)
        except (PlacesError, APIError) as e:
            # The business row is already stored; reviews are best effort
            logger.error(f"Error saving Google reviews for {business_id}: {e}")

    return SaveResult(business_id=business_id, is_new=True)
