"""
Review Eligibility
==================
A user who created a business listing may review it only once per cooldown
window (14 days by default). Everybody else may always review.

Checks never write to the attempt log; the submission workflow logs its
outcome once the decision has been made.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from postgrest.exceptions import APIError

from .. import config
from ..errors import EligibilityCheckError, LocalBizError
from ..models import EligibilityResult, Review, ReviewAttempt
from ..session import AuthSession

logger = logging.getLogger(__name__)

REVIEW_COOLDOWN = timedelta(days=config.REVIEW_COOLDOWN_DAYS)


def evaluate_eligibility(
    reviewer_id: str,
    created_by: Optional[str],
    last_success_at: Optional[datetime],
    now: datetime,
    cooldown: timedelta = REVIEW_COOLDOWN,
) -> EligibilityResult:
    if created_by is None or created_by != reviewer_id:
        return EligibilityResult(can_review=True)
    if last_success_at is None:
        return EligibilityResult(can_review=True)

    next_review_date = last_success_at + cooldown
    if now < next_review_date:
        return EligibilityResult(can_review=False, next_review_date=next_review_date)
    return EligibilityResult(can_review=True)


def _latest_attempt(session: AuthSession, reviewer_id: str, business_id: str) -> Optional[datetime]:
    result = (
        session.client.table("review_attempts")
        .select("reviewer_id, business_id, was_successful, attempted_at")
        .eq("business_id", business_id)
        .eq("reviewer_id", reviewer_id)
        .eq("was_successful", True)
        .order("attempted_at", desc=True)
        .limit(1)
        .execute()
    )
    return ReviewAttempt(**result.data[0]).attempted_at if result.data else None


def _latest_review(session: AuthSession, reviewer_id: str, business_id: str) -> Optional[datetime]:
    result = (
        session.client.table("reviews")
        .select("business_id, reviewer_id, rating, created_at")
        .eq("business_id", business_id)
        .eq("reviewer_id", reviewer_id)
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )
    return Review(**result.data[0]).created_at if result.data else None


def _latest_success(session: AuthSession, reviewer_id: str, business_id: str) -> Optional[datetime]:
    """Newer of the reviewer's latest review row and latest successful attempt.

    Imported Google reviews carry no reviewer, so they never count here.
    """
    found = [
        ts
        for ts in (
            _latest_review(session, reviewer_id, business_id),
            _latest_attempt(session, reviewer_id, business_id),
        )
        if ts is not None
    ]
    return max(found) if found else None


def check_eligibility(session: AuthSession, business_id: str, now: Optional[datetime] = None) -> EligibilityResult:
    """Decides whether the signed-in user may review `business_id` right now.

    Raises:
        NotAuthenticatedError: nobody is signed in.
        EligibilityCheckError: the backend query failed. The caller must not
            treat this as permission to write.
    """
    reviewer_id = session.require_user()
    now = now or datetime.now(timezone.utc)
    try:
        business = (
            session.client.table("business_profiles")
            .select("created_by")
            .eq("user_id", business_id)
            .limit(1)
            .execute()
        )
        created_by = business.data[0].get("created_by") if business.data else None
        last_success_at = _latest_success(session, reviewer_id, business_id) if created_by == reviewer_id else None
    except APIError as e:
        logger.error(f"Eligibility check failed for {business_id}: {e.message}")
        raise EligibilityCheckError(e.message or "Failed to check review eligibility") from e

    result = evaluate_eligibility(reviewer_id, created_by, last_success_at, now)
    if not result.can_review:
        logger.info(f"Reviewer {reviewer_id} blocked on {business_id} until {result.next_review_date.isoformat()}")
    return result


def log_review_attempt(session: AuthSession, business_id: str, was_successful: bool) -> None:
    reviewer_id = session.require_user()
    try:
        session.client.rpc(
            "log_review_attempt",
            {
                "_reviewer_id": reviewer_id,
                "_business_id": business_id,
                "_was_successful": was_successful,
            },
        ).execute()
    except APIError as e:
        logger.error(f"Failed to log review attempt for {business_id}: {e.message}")
        raise LocalBizError(e.message or "Failed to log review attempt") from e


# =============================================================================
# FREQUENCY NOTICE
# =============================================================================

def format_review_date(value: datetime) -> str:
    """e.g. "Monday, January 15, 2024"."""
    return f"{value.strftime('%A, %B')} {value.day}, {value.year}"


def days_until(value: datetime, now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    return math.ceil((value - now).total_seconds() / 86400)


def review_limit_notice(
    business_name: Optional[str], next_review_date: Optional[datetime], now: Optional[datetime] = None
) -> str:
    lines = [
        "Review Limit Reached",
        "You've reached your review limit for this business.",
        f"Since you added {business_name or 'this business'} to the platform, "
        f"you can only review it once every {config.REVIEW_COOLDOWN_DAYS // 7} weeks to prevent spam.",
    ]
    if next_review_date:
        lines.append(f"Next Review Available: {format_review_date(next_review_date)}")
        lines.append(f"{days_until(next_review_date, now)} days remaining")
    return "\n".join(lines)
