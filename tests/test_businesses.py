import pytest

from localbiz.errors import BusinessSaveError, NotAuthenticatedError
from localbiz.models import AddBusinessForm, BusinessProfile
from localbiz.services.businesses import (
    add_business,
    claim_business,
    get_business,
    list_local_businesses,
    recompute_rating_stats,
    to_listing,
)


def business_form(**overrides):
    data = dict(business_name="Cafe Nush", business_email="hello@cafenush.co.zw", business_category="cafe")
    data.update(overrides)
    return AddBusinessForm(**data)


def test_add_business_creates_unclaimed_listing(db, make_session):
    profile = add_business(make_session("user-1"), business_form())

    row = db.tables["business_profiles"][0]
    assert profile.user_id == row["user_id"] != "user-1"
    assert row["created_by"] == "user-1"
    assert row["is_claimed"] is False
    assert len(row["claim_token"]) >= 24


def test_add_business_requires_sign_in(make_session):
    with pytest.raises(NotAuthenticatedError):
        add_business(make_session(user_id=None), business_form())


def test_add_business_backend_failure(db, make_session):
    db.fail_ops.add(("business_profiles", "insert"))
    with pytest.raises(BusinessSaveError):
        add_business(make_session("user-1"), business_form())


def test_claim_business(db, make_session):
    profile = add_business(make_session("user-1"), business_form())
    owner = make_session("owner-9")

    assert claim_business(owner, profile.claim_token) is True
    row = db.tables["business_profiles"][0]
    assert row["is_claimed"] is True
    assert row["claim_token"] is None

    assert claim_business(owner, profile.claim_token) is False


def test_to_listing_defaults():
    listing = to_listing(BusinessProfile(user_id="b1", business_name="Zambezi Car Wash"))
    assert listing.id == "b1"
    assert listing.category == "Other"
    assert listing.address == "Address not provided"
    assert listing.phone == "Phone not provided"
    assert listing.hours == "Hours not provided"
    assert listing.description == "No description available"
    assert listing.price_range == "$$"
    assert listing.is_google_business is False


def test_to_listing_keeps_text_hours():
    listing = to_listing(BusinessProfile(user_id="b1", business_name="x", business_hours="Mon-Fri 8-5"))
    assert listing.hours == "Mon-Fri 8-5"


def test_get_and_list(db, add_business):
    business = add_business()
    assert get_business(db, business["user_id"]).business_name == "Cafe Nush"
    assert get_business(db, "missing") is None
    assert [b.id for b in list_local_businesses(db)] == [business["user_id"]]


def test_recompute_rating_stats(db, add_business):
    business = add_business()
    for rating in (5, 4, 4):
        db.add("reviews", {"business_id": business["user_id"], "rating": rating})

    recompute_rating_stats(db, business["user_id"])

    assert business["average_rating"] == 4.33
    assert business["total_reviews"] == 3


def test_recompute_rating_stats_logs_failure(db, add_business, caplog):
    business = add_business()
    db.fail_tables.add("reviews")
    recompute_rating_stats(db, business["user_id"])
    assert business["total_reviews"] == 0
    assert "Failed to update rating stats" in caplog.text
