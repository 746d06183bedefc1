"""Runtime settings loaded from the environment (.env supported)."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
SUPABASE_SECRET_KEY = os.getenv("SUPABASE_SECRET_KEY")

# Google Places
GOOGLE_PLACES_API_KEY = os.getenv("GOOGLE_PLACES_API_KEY")
BROWSE_QUERY = os.getenv("BROWSE_QUERY", "top rated businesses in Zimbabwe")
SEARCH_RADIUS_METERS = float(os.getenv("SEARCH_RADIUS_METERS", "50000"))
PLACES_MAX_RESULTS = 20

# Reviews
REVIEW_COOLDOWN_DAYS = int(os.getenv("REVIEW_COOLDOWN_DAYS", "14"))

# Display
PLACEHOLDER_IMAGE_URL = "https://images.unsplash.com/photo-1554118811-1e0d58224f24?w=400&h=300&fit=crop"
SITE_URL = os.getenv("SITE_URL", "http://localhost:8080/")

# Snapshot job
SNAPSHOT_OUTPUT_PATH = Path(os.getenv("SNAPSHOT_OUTPUT_PATH", "directory.json"))
S3_BUCKET = os.getenv("S3_BUCKET_NAME")
S3_KEY = os.getenv("S3_OBJECT_KEY", "directory.json")
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
