"""Browse page: local and Google listings merged, then filtered."""

import logging
from typing import Iterable, List, Optional

from postgrest.exceptions import APIError
from supabase import Client

from .. import config
from ..errors import PlacesError
from ..models import BusinessListing
from ..places import PlacesDirectory
from .businesses import list_local_businesses

logger = logging.getLogger(__name__)


def merge_listings(external: Iterable[BusinessListing], local: Iterable[BusinessListing]) -> List[BusinessListing]:
    """External entries first, then local entries not already present.

    Entries are the same business when lowercase name and lowercase address
    are equal.
    """
    external = list(external)
    seen = {business.dedup_key for business in external}
    return external + [business for business in local if business.dedup_key not in seen]


def browse(
    client: Optional[Client],
    places: Optional[PlacesDirectory],
    query: str = config.BROWSE_QUERY,
    location: Optional[str] = None,
) -> List[BusinessListing]:
    """All listings for the browse page; degrades to whichever source answered."""
    local: List[BusinessListing] = []
    if client is not None:
        try:
            local = list_local_businesses(client)
        except APIError as e:
            logger.error(f"Error fetching local businesses: {e.message}")

    if places is None:
        return local

    try:
        external = places.search_businesses(query, location=location)
    except PlacesError as e:
        logger.warning(f"Google businesses unavailable, showing local only: {e}")
        return local

    merged = merge_listings(external, local)
    logger.info(f"Browse: {len(external)} Google + {len(merged) - len(external)} local businesses")
    return merged


def filter_listings(listings: Iterable[BusinessListing], search_term: str = "", category: str = "") -> List[BusinessListing]:
    term = search_term.lower()

    def matches(business: BusinessListing) -> bool:
        matches_search = (
            not term
            or term in business.name.lower()
            or term in business.description.lower()
            or term in business.category.lower()
        )
        matches_category = not category or business.category == category
        return matches_search and matches_category

    return [business for business in listings if matches(business)]


def categories(listings: Iterable[BusinessListing]) -> List[str]:
    seen: List[str] = []
    for business in listings:
        if business.category and business.category not in seen:
            seen.append(business.category)
    return seen
