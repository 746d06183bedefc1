"""
Shared fixtures: an in-memory stand-in for the Supabase client.

Only the query builder calls used by localbiz are supported: select, eq,
ilike, in_, order, limit, insert, update, delete, rpc, and the auth calls.
"""

import copy
import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from localbiz.models import BusinessListing
from localbiz.places import PlacesDirectory
from localbiz.session import AuthSession

T0 = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def _like_regex(pattern: str) -> "re.Pattern":
    """PostgREST ilike: `%` and `*` match any run, `_` one character, `\\` escapes."""
    out, i = [], 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if char in "%*":
            out.append(".*")
        elif char == "_":
            out.append(".")
        else:
            out.append(re.escape(char))
        i += 1
    return re.compile("".join(out), re.IGNORECASE | re.DOTALL)


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self._order = None
        self._limit = None

    def select(self, *columns):
        self.op = "select"
        return self

    def insert(self, data):
        self.op, self.payload = "insert", data
        return self

    def update(self, data):
        self.op, self.payload = "update", data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def ilike(self, column, pattern):
        regex = _like_regex(pattern)
        self.filters.append(lambda row: regex.fullmatch(row.get(column) or "") is not None)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matching(self):
        return [row for row in self.db.tables.setdefault(self.table, []) if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if self.table in self.db.fail_tables or (self.table, self.op) in self.db.fail_ops:
            raise APIError({"message": f"{self.table} unavailable", "code": "500", "hint": None, "details": None})

        if self.op == "insert":
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            stored = [self.db.add(self.table, row) for row in rows]
            return SimpleNamespace(data=copy.deepcopy(stored))

        rows = self._matching()
        if self.op == "update":
            for row in rows:
                row.update(self.payload)
            return SimpleNamespace(data=copy.deepcopy(rows))
        if self.op == "delete":
            self.db.tables[self.table] = [r for r in self.db.tables[self.table] if r not in rows]
            return SimpleNamespace(data=copy.deepcopy(rows))

        if self._order:
            column, desc = self._order
            rows = sorted(rows, key=lambda r: r.get(column) or "", reverse=desc)
        if self._limit is not None:
            rows = rows[: self._limit]
        return SimpleNamespace(data=copy.deepcopy(rows))


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.tokens = {}
        self.signed_up = []
        self.signed_out = False

    def add_user(self, email, password, user_id=None, confirmed=True):
        user_id = user_id or str(uuid.uuid4())
        self.users[email] = {"password": password, "id": user_id, "confirmed": confirmed}
        self.tokens[f"token-{user_id}"] = user_id
        return user_id

    def sign_up(self, credentials):
        if credentials["email"] in self.users:
            raise Exception("User already registered")
        self.signed_up.append(credentials)
        return SimpleNamespace(user=None, session=None)

    def sign_in_with_password(self, credentials):
        user = self.users.get(credentials["email"])
        if not user or user["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        if not user["confirmed"]:
            raise Exception("Email not confirmed")
        return SimpleNamespace(user=SimpleNamespace(id=user["id"], email=credentials["email"]), session=object())

    def sign_out(self):
        self.signed_out = True

    def get_user(self, jwt=None):
        user_id = self.tokens.get(jwt)
        if user_id is None:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(id=user_id))


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.now = T0
        self.fail_tables = set()
        self.fail_ops = set()
        self.calls = []
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def add(self, table, row):
        row = dict(row)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.now.isoformat())
        if table == "business_profiles":
            row.setdefault("average_rating", 0)
            row.setdefault("total_reviews", 0)
        self.tables.setdefault(table, []).append(row)
        return row

    def advance(self, **delta):
        self.now = self.now + timedelta(**delta)

    def rpc(self, name, params):
        db = self

        class _Rpc:
            def execute(self):
                db.calls.append((name, "rpc"))
                if name in db.fail_tables:
                    raise APIError({"message": f"{name} unavailable", "code": "500", "hint": None, "details": None})
                return SimpleNamespace(data=db.run_rpc(name, params))

        return _Rpc()

    def run_rpc(self, name, params):
        if name == "log_review_attempt":
            self.add(
                "review_attempts",
                {
                    "reviewer_id": params["_reviewer_id"],
                    "business_id": params["_business_id"],
                    "was_successful": params["_was_successful"],
                    "attempted_at": self.now.isoformat(),
                },
            )
            return None
        if name == "claim_business_account":
            for row in self.tables.get("business_profiles", []):
                if row.get("claim_token") == params["_claim_token"] and not row.get("is_claimed"):
                    row.update(is_claimed=True, claim_token=None, owner_id=params["_user_id"])
                    return True
            return False
        raise AssertionError(f"unexpected rpc {name}")

    def attempts(self, **match):
        return [r for r in self.tables.get("review_attempts", []) if all(r.get(k) == v for k, v in match.items())]


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def make_session(db):
    def _make(user_id="user-1", roles=(), is_admin=False):
        return AuthSession(client=db, user_id=user_id, email=f"{user_id}@example.com", roles=list(roles), is_admin=is_admin)

    return _make


@pytest.fixture
def add_business(db):
    def _add(name="Cafe Nush", address="Avondale, Harare", created_by="owner-1", **extra):
        return db.add(
            "business_profiles",
            {
                "user_id": str(uuid.uuid4()),
                "business_name": name,
                "business_address": address,
                "business_category": extra.pop("category", "cafe"),
                "created_by": created_by,
                "is_claimed": False,
                **extra,
            },
        )

    return _add


def make_place(**overrides):
    place = dict(
        id="ChIJabc",
        display_name=SimpleNamespace(text="Cafe Nush"),
        formatted_address="Avondale, Harare",
        rating=4.5,
        user_rating_count=120,
        types=["coffee_shop", "food"],
        photos=[SimpleNamespace(name="places/ChIJabc/photos/p1")],
        national_phone_number="024 2335678",
        current_opening_hours=SimpleNamespace(open_now=True),
        editorial_summary=SimpleNamespace(text="Cosy garden cafe"),
    )
    place.update(overrides)
    return SimpleNamespace(**place)


def make_google_review(**overrides):
    review = dict(
        name="places/ChIJabc/reviews/r1",
        author_attribution=SimpleNamespace(display_name="Tendai M", photo_uri="https://lh3.example/t.png"),
        rating=4,
        text=SimpleNamespace(text="Great coffee"),
        publish_time=T0 - timedelta(days=3),
    )
    review.update(overrides)
    return SimpleNamespace(**review)


@pytest.fixture
def places_client():
    client = MagicMock()
    client.search_text.return_value = SimpleNamespace(places=[make_place()])
    client.get_place.return_value = SimpleNamespace(reviews=[make_google_review()])
    return client


@pytest.fixture
def places(places_client):
    return PlacesDirectory(api_key="test-key", client=places_client)


@pytest.fixture
def google_listing():
    return BusinessListing(
        id="google_ChIJabc",
        name="Cafe Nush",
        category="coffee shop",
        address="Avondale, Harare",
        phone="024 2335678",
        description="Cosy garden cafe",
        is_google_business=True,
    )
