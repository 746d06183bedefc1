"""
Places Endpoints
================
HTTP endpoints proxying Google Places for the web client:

    POST /fetch-google-businesses     {query, location?, radius?} -> {businesses}
    POST /fetch-google-place-reviews  {placeId}                   -> {reviews}
    POST /save-google-business        {businessData}              -> {businessId, isNew}

Failures return {"error": message}. CORS is open to all origins.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from supabase import Client

from .. import config
from ..db import create_user_client, get_supabase, set_supabase_client
from ..errors import BusinessSaveError, LocalBizError
from ..models import BusinessListing
from ..places import PlacesDirectory, get_places
from ..services.dedup import save_external_business

logger = logging.getLogger(__name__)

CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


class SearchRequest(BaseModel):
    query: Optional[str] = None
    location: Optional[str] = None
    radius: float = config.SEARCH_RADIUS_METERS


class PlaceReviewsRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    place_id: Optional[str] = None


class SaveBusinessRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    business_data: Optional[BusinessListing] = None


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def get_request_client(authorization: Optional[str] = Header(None)) -> Optional[Client]:
    """Client authorised as the caller, falling back to the shared client."""
    return create_user_client(authorization) or get_supabase()


def get_acting_user_id(
    authorization: Optional[str] = Header(None),
    client: Optional[Client] = Depends(get_request_client),
) -> Optional[str]:
    if not authorization or client is None:
        return None
    token = authorization.removeprefix("Bearer ").strip()
    try:
        response = client.auth.get_user(token)
    except Exception as e:
        logger.warning(f"Could not resolve caller, saving anonymously: {e}")
        return None
    return response.user.id if response and response.user else None


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO), format=config.LOG_FORMAT)
    client = get_supabase()
    if client is None:
        logger.warning("SUPABASE_URL / key not set; save-google-business will fail")
    set_supabase_client(client)
    yield
    set_supabase_client(None)


def create_app() -> FastAPI:
    app = FastAPI(title="localbiz", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_HEADERS,
    )

    @app.post("/fetch-google-businesses")
    def fetch_google_businesses(body: SearchRequest, places: PlacesDirectory = Depends(get_places)):
        try:
            businesses = places.search_businesses(body.query, location=body.location, radius=body.radius)
        except LocalBizError as e:
            logger.error(f"Error in fetch-google-businesses: {e}")
            return _error(str(e), 500)
        return {"businesses": [b.model_dump(mode="json", by_alias=True) for b in businesses]}

    @app.post("/fetch-google-place-reviews")
    def fetch_google_place_reviews(body: PlaceReviewsRequest, places: PlacesDirectory = Depends(get_places)):
        try:
            reviews = places.fetch_place_reviews(body.place_id)
        except LocalBizError as e:
            logger.error(f"Error in fetch-google-place-reviews: {e}")
            return _error(str(e), 500)
        return {"reviews": [r.model_dump(mode="json", by_alias=True) for r in reviews]}

    @app.post("/save-google-business")
    def save_google_business(
        body: SaveBusinessRequest,
        client: Optional[Client] = Depends(get_request_client),
        user_id: Optional[str] = Depends(get_acting_user_id),
        places: PlacesDirectory = Depends(get_places),
    ):
        if client is None:
            return _error("Supabase is not configured", 400)
        try:
            result = save_external_business(
                client,
                body.business_data,
                acting_user_id=user_id,
                places=places if places.api_key else None,
            )
        except BusinessSaveError as e:
            logger.error(f"Error in save-google-business: {e}")
            return _error(str(e), 400)
        return result.model_dump(by_alias=True)

    return app


app = create_app()
