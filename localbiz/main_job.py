"""Command line entry point: browse, directory snapshot job, terms, API server."""
from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List

import boto3

from . import config
from .db import get_supabase
from .models import BusinessListing
from .places import get_places
from .services.browse import browse, categories, filter_listings
from .terms import render_terms

logger = logging.getLogger(__name__)


def collect_listings(query: str, location: str | None, search: str, category: str) -> List[BusinessListing]:
    places = get_places() if config.GOOGLE_PLACES_API_KEY else None
    if places is None:
        logger.warning("GOOGLE_PLACES_API_KEY not set; local businesses only")
    listings = browse(get_supabase(), places, query=query, location=location)
    return filter_listings(listings, search_term=search, category=category)


def write_payload(payload: dict, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, indent=2))
    logger.info(f"Saved {output_path}")
    return output_path


def upload_to_s3(file_path: Path) -> bool:
    if not config.S3_BUCKET:
        logger.info("S3 bucket not configured; skipping upload")
        return False
    client = boto3.client("s3", region_name=config.AWS_REGION)
    extra_args = {"ContentType": "application/json", "ACL": "public-read"}
    client.upload_file(str(file_path), config.S3_BUCKET, config.S3_KEY, ExtraArgs=extra_args)
    logger.info(f"Uploaded {file_path} to s3://{config.S3_BUCKET}/{config.S3_KEY}")
    return True


def build_snapshot(listings: List[BusinessListing]) -> dict:
    return {
        "date": datetime.now(timezone.utc).isoformat(),
        "categories": categories(listings),
        "businesses": [b.model_dump(mode="json", by_alias=True) for b in listings],
    }


def run_browse(args: argparse.Namespace) -> None:
    listings = collect_listings(args.query, args.location, args.search, args.category)
    if not listings:
        print("No businesses found")
        return
    for business in listings:
        source = "google" if business.is_google_business else "local"
        print(f"{business.name} [{business.category}] {business.rating:.1f} ({business.review_count}) - {business.address} <{source}>")


def run_snapshot(args: argparse.Namespace) -> Path:
    listings = collect_listings(args.query, args.location, args.search, args.category)
    output_file = write_payload(build_snapshot(listings), args.output)
    if args.upload:
        upload_to_s3(output_file)
    return output_file


def run_serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("localbiz.api.app:app", host=args.host, port=args.port)


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Local business directory tools")
    parser.add_argument("--log-level", type=str, default=config.LOG_LEVEL, help="Logging level")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_listing_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--query", type=str, default=config.BROWSE_QUERY, help="Google Places text query")
        p.add_argument("--location", type=str, default=None, help="Location bias as 'lat,lng'")
        p.add_argument("--search", type=str, default="", help="Filter by name, description or category")
        p.add_argument("--category", type=str, default="", help="Exact category filter")

    browse_parser = sub.add_parser("browse", help="Print the merged business directory")
    add_listing_args(browse_parser)
    browse_parser.set_defaults(func=run_browse)

    snapshot_parser = sub.add_parser("snapshot", help="Write the merged directory as JSON")
    add_listing_args(snapshot_parser)
    snapshot_parser.add_argument("--output", type=Path, default=config.SNAPSHOT_OUTPUT_PATH, help="Where to save the JSON")
    snapshot_parser.add_argument("--upload", action="store_true", help="Upload the artifact to S3")
    snapshot_parser.set_defaults(func=run_snapshot)

    terms_parser = sub.add_parser("terms", help="Print the Terms and Conditions")
    terms_parser.set_defaults(func=lambda args: print(render_terms()))

    serve_parser = sub.add_parser("serve", help="Run the places API")
    serve_parser.add_argument("--host", type=str, default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(func=run_serve)

    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format=config.LOG_FORMAT)
    args.func(args)


if __name__ == "__main__":
    main()
