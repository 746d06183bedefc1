"""Admin panel: user listing and admin role management."""

import logging
from typing import List

from postgrest.exceptions import APIError

from ..errors import LocalBizError, PermissionDeniedError
from ..models import AppRole, UserWithRoles
from ..session import AuthSession

logger = logging.getLogger(__name__)


def _require_admin(session: AuthSession) -> str:
    user_id = session.require_user()
    if not session.is_admin:
        raise PermissionDeniedError("Admin role required")
    return user_id


def list_users(session: AuthSession) -> List[UserWithRoles]:
    _require_admin(session)
    client = session.client
    try:
        profiles = client.table("profiles").select("user_id").execute()
        user_ids = [row["user_id"] for row in profiles.data or []]
        roles = client.table("user_roles").select("user_id, role").in_("user_id", user_ids).execute()
    except APIError as e:
        logger.error(f"Error fetching users: {e.message}")
        raise LocalBizError(e.message or "Failed to fetch users") from e

    users = []
    for user_id in user_ids:
        user_roles = [row["role"] for row in roles.data or [] if row["user_id"] == user_id]
        users.append(UserWithRoles(id=user_id, display_id=user_id[:8] + "...", roles=user_roles))
    return users


def grant_admin(session: AuthSession, user_id: str) -> None:
    _require_admin(session)
    try:
        session.client.table("user_roles").insert({"user_id": user_id, "role": AppRole.ADMIN.value}).execute()
    except APIError as e:
        raise LocalBizError("Failed to grant admin role") from e
    logger.info(f"Admin role granted to {user_id} by {session.user_id}")


def revoke_admin(session: AuthSession, user_id: str) -> None:
    acting_id = _require_admin(session)
    if user_id == acting_id:
        raise PermissionDeniedError("You cannot remove your own admin role")
    try:
        (
            session.client.table("user_roles")
            .delete()
            .eq("user_id", user_id)
            .eq("role", AppRole.ADMIN.value)
            .execute()
        )
    except APIError as e:
        raise LocalBizError("Failed to remove admin role") from e
    logger.info(f"Admin role removed from {user_id} by {acting_id}")
