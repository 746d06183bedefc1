"""
Session Context
===============
Signed-in user state, passed explicitly to every service call.

`sign_in` builds a populated `AuthSession`, `sign_out` tears it down. Nothing
here is stored in module globals.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError
from supabase import Client

from . import config
from .errors import AuthError, NotAuthenticatedError
from .models import AccountType, AppRole, BusinessProfile, Profile, SignUpForm, UserRole

logger = logging.getLogger(__name__)

# Backend auth messages rewritten for display
_SIGN_IN_MESSAGES = {
    "Invalid login credentials": "Invalid email or password",
    "Email not confirmed": "Please check your email and click the confirmation link",
}
_SIGN_UP_MESSAGES = {
    "User already registered": "An account with this email already exists",
}


@dataclass
class AuthSession:
    client: Client
    user_id: Optional[str] = None
    email: Optional[str] = None
    profile: Optional[Profile] = None
    business_profile: Optional[BusinessProfile] = None
    account_type: Optional[AccountType] = None
    roles: List[str] = field(default_factory=list)
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def require_user(self, message: str = "No user logged in") -> str:
        if not self.user_id:
            raise NotAuthenticatedError(message)
        return self.user_id

    def clear(self) -> None:
        self.user_id = None
        self.email = None
        self.profile = None
        self.business_profile = None
        self.account_type = None
        self.roles = []
        self.is_admin = False


def _rewrite(message: str, table: Dict[str, str], default: str) -> str:
    for needle, replacement in table.items():
        if needle in message:
            return replacement
    return message or default


def sign_up(client: Client, form: SignUpForm) -> None:
    """Create an auth account; the user confirms by email before signing in."""
    try:
        client.auth.sign_up(
            {
                "email": form.email,
                "password": form.password,
                "options": {
                    "email_redirect_to": config.SITE_URL,
                    "data": form.metadata(),
                },
            }
        )
    except Exception as e:
        logger.error(f"Sign up failed for {form.email}: {e}")
        raise AuthError(_rewrite(str(e), _SIGN_UP_MESSAGES, "An error occurred during sign up")) from e
    logger.info(f"Sign up requested for {form.email} ({form.account_type.value})")


def sign_in(client: Client, email: str, password: str) -> AuthSession:
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        logger.warning(f"Sign in failed for {email}: {e}")
        raise AuthError(_rewrite(str(e), _SIGN_IN_MESSAGES, "An error occurred during login")) from e

    user = response.user
    if user is None:
        raise AuthError("An error occurred during login")

    session = AuthSession(client=client, user_id=user.id, email=user.email)
    load_user_data(session)
    return session


def load_user_data(session: AuthSession) -> AuthSession:
    """Populate roles and the matching profile row for the signed-in user."""
    user_id = session.require_user()
    client = session.client
    try:
        roles = client.table("user_roles").select("user_id, role").eq("user_id", user_id).execute()
        session.roles = [UserRole(**row).role.value for row in roles.data or []]
        session.is_admin = AppRole.ADMIN.value in session.roles

        if AppRole.BUSINESS.value in session.roles:
            session.account_type = AccountType.BUSINESS
            result = client.table("business_profiles").select("*").eq("user_id", user_id).limit(1).execute()
            if result.data:
                session.business_profile = BusinessProfile(**result.data[0])
        else:
            session.account_type = AccountType.USER
            result = client.table("profiles").select("*").eq("user_id", user_id).limit(1).execute()
            if result.data:
                session.profile = Profile(**result.data[0])
    except APIError as e:
        logger.error(f"Error fetching user data for {user_id}: {e.message}")
    return session


def sign_out(session: AuthSession) -> None:
    try:
        session.client.auth.sign_out()
    except Exception as e:
        raise AuthError(str(e) or "An error occurred during sign out") from e
    finally:
        session.clear()


def update_profile(session: AuthSession, updates: Dict[str, Any]) -> Profile:
    user_id = session.require_user()
    try:
        session.client.table("profiles").update(updates).eq("user_id", user_id).execute()
    except APIError as e:
        raise AuthError(e.message or "Failed to update profile") from e

    if session.profile:
        session.profile = session.profile.model_copy(update=updates)
    else:
        session.profile = Profile(user_id=user_id, **updates)
    return session.profile


def update_business_profile(session: AuthSession, updates: Dict[str, Any]) -> Optional[BusinessProfile]:
    user_id = session.require_user()
    try:
        session.client.table("business_profiles").update(updates).eq("user_id", user_id).execute()
    except APIError as e:
        raise AuthError(e.message or "Failed to update business profile") from e

    if session.business_profile:
        session.business_profile = session.business_profile.model_copy(update=updates)
    return session.business_profile
