"""
localbiz Services
=================
Directory operations over the Supabase tables and Google Places.
Every write takes an explicit `AuthSession`.
"""

from .browse import browse, categories, filter_listings, merge_listings
from .dedup import save_external_business
from .eligibility import check_eligibility, evaluate_eligibility, log_review_attempt
from .reviews import business_detail, delete_review, list_reviews, preflight, submit_review

__all__ = [
    "browse",
    "categories",
    "filter_listings",
    "merge_listings",
    "save_external_business",
    "check_eligibility",
    "evaluate_eligibility",
    "log_review_attempt",
    "business_detail",
    "delete_review",
    "list_reviews",
    "preflight",
    "submit_review",
]
