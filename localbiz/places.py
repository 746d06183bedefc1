"""
Google Places (New Places V1 API)
=================================
Business search and place reviews via the google-maps-places client.
Results are converted to the directory's own listing and review shapes.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from google.api_core import exceptions as google_exceptions
from google.maps import places_v1

from . import config
from .errors import PlacesError
from .models import BusinessListing, ReviewView

logger = logging.getLogger(__name__)

GOOGLE_ID_PREFIX = "google_"

SEARCH_FIELD_MASK = ",".join(
    [
        "places.id",
        "places.displayName",
        "places.formattedAddress",
        "places.rating",
        "places.userRatingCount",
        "places.types",
        "places.photos",
        "places.nationalPhoneNumber",
        "places.currentOpeningHours",
        "places.editorialSummary",
    ]
)
REVIEWS_FIELD_MASK = "reviews"


def strip_google_prefix(place_id: str) -> str:
    return place_id.replace(GOOGLE_ID_PREFIX, "", 1) if place_id.startswith(GOOGLE_ID_PREFIX) else place_id


def _text(value) -> str:
    """LocalizedText/Text messages expose `.text`; unset ones are empty."""
    if not value:
        return ""
    return getattr(value, "text", "") or ""


def parse_location(location: str) -> Optional[dict]:
    """Parses a "lat,lng" string into a lat/lng dict."""
    try:
        lat, lng = (float(part) for part in location.split(",")[:2])
    except ValueError:
        logger.warning(f"Ignoring malformed location bias: {location!r}")
        return None
    return {"latitude": lat, "longitude": lng}


class PlacesDirectory:
    """Uses the google-maps-places client for business search and reviews."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[places_v1.PlacesClient] = None):
        self.api_key = api_key if api_key is not None else config.GOOGLE_PLACES_API_KEY
        self.client = client

    def _get_client(self) -> places_v1.PlacesClient:
        if not self.api_key:
            raise PlacesError("Google Places API key not configured")
        if self.client is None:
            self.client = places_v1.PlacesClient(client_options={"api_key": self.api_key})
        return self.client

    def photo_url(self, photo_name: str) -> str:
        # photo_name format: places/{id}/photos/{pid}
        return f"https://places.googleapis.com/v1/{photo_name}/media?maxWidthPx=400&key={self.api_key}"

    def search_businesses(
        self,
        query: Optional[str] = None,
        location: Optional[str] = None,
        radius: float = config.SEARCH_RADIUS_METERS,
    ) -> List[BusinessListing]:
        """Text search, converted to listings with `google_`-prefixed ids."""
        client = self._get_client()
        request = {
            "text_query": query or "businesses",
            "max_result_count": config.PLACES_MAX_RESULTS,
        }
        if location:
            center = parse_location(location)
            if center:
                request["location_bias"] = {"circle": {"center": center, "radius": float(radius)}}

        logger.info(f"Fetching Google businesses with query: {request['text_query']}")
        try:
            response = client.search_text(request=request, metadata=[("x-goog-fieldmask", SEARCH_FIELD_MASK)])
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Google Places search failed: {e}")
            raise PlacesError(f"Google Places API error: {e}") from e

        businesses = [self.to_listing(place) for place in response.places]
        logger.info(f"Found {len(businesses)} Google businesses")
        return businesses

    def to_listing(self, place) -> BusinessListing:
        types = list(place.types or [])
        category = types[0].replace("_", " ") if types else "Other"

        image = config.PLACEHOLDER_IMAGE_URL
        if place.photos and getattr(place.photos[0], "name", None):
            image = self.photo_url(place.photos[0].name)

        hours = place.current_opening_hours
        open_now = bool(hours and getattr(hours, "open_now", False))

        return BusinessListing(
            id=f"{GOOGLE_ID_PREFIX}{place.id}",
            name=_text(place.display_name) or "Unknown",
            category=category,
            image=image,
            rating=place.rating or 0,
            review_count=place.user_rating_count or 0,
            address=place.formatted_address or "Address not available",
            phone=place.national_phone_number or "Phone not available",
            hours="Open now" if open_now else "Hours not available",
            price_range="$$",
            description=_text(place.editorial_summary) or "No description available",
            is_google_business=True,
        )

    def fetch_place_reviews(self, place_id: Optional[str]) -> List[ReviewView]:
        if not place_id:
            raise PlacesError("Place ID is required")
        client = self._get_client()
        clean_id = strip_google_prefix(place_id)

        logger.info(f"Fetching Google reviews for place: {clean_id}")
        try:
            place = client.get_place(
                request={"name": f"places/{clean_id}"},
                metadata=[("x-goog-fieldmask", REVIEWS_FIELD_MASK)],
            )
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Google Places reviews lookup failed for {clean_id}: {e}")
            raise PlacesError(f"Google Places API error: {e}") from e

        reviews = [self.to_review(review) for review in place.reviews or []]
        logger.info(f"Found {len(reviews)} Google reviews")
        return reviews

    @staticmethod
    def to_review(review) -> ReviewView:
        author = review.author_attribution
        author_name = (getattr(author, "display_name", "") if author else "") or "Google User"
        avatar = (getattr(author, "photo_uri", None) if author else None) or None
        return ReviewView(
            id=f"google_review_{review.name}",
            user_id=author_name,
            user_name=author_name,
            user_avatar=avatar,
            rating=int(review.rating or 0),
            title="",
            content=_text(review.text),
            date=review.publish_time or datetime.now(timezone.utc),
            helpful=0,
            verified=True,
            is_google_review=True,
        )


_places: Optional[PlacesDirectory] = None


def get_places() -> PlacesDirectory:
    global _places
    if _places is None:
        _places = PlacesDirectory()
    return _places
