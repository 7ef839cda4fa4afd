"""
User service — profiles, admin user management and first sign-in sync.

Role and status changes are admin-only and leave an audit entry
(ROLE_CHANGED, ACCESS_GRANTED / ACCESS_REVOKED) in the same transaction as
the change.  An admin cannot deactivate their own account; that attempt is
rejected before anything is written, audit included.
"""

from __future__ import annotations

import logging

from app.auth import Principal
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    UpstreamError,
    ValidationError,
)
from app.integrations.identity_gateway import identity_gateway
from app.models import db
from app.models.audit import write_audit
from app.models.profile import Profile
from app.schemas.user import ProfileSync, ProfileUpdate, UserCreate
from app.services.helpers.upsert import upsert_row
from app.utils.helpers import apply_changes, commit_or_raise, get_or_404

logger = logging.getLogger(__name__)


def list_users() -> list[dict]:
    users = Profile.query.order_by(Profile.created_at.desc()).all()
    return [u.to_dict() for u in users]


def get_user(user_id: str) -> dict:
    return get_or_404(Profile, user_id, label="User").to_dict()


def update_profile(principal: Principal, user_id: str, data: ProfileUpdate) -> dict:
    """Users edit their own profile; admins edit anyone's."""
    if principal.id != user_id and not principal.is_admin:
        raise AuthorizationError("You can only update your own profile")
    profile = get_or_404(Profile, user_id, label="User")
    apply_changes(profile, data.model_dump(exclude_unset=True), required=("name",))
    commit_or_raise("Profile", "id", user_id)
    return profile.to_dict()


def create_user(principal: Principal, data: UserCreate) -> dict:
    """Create an identity-provider account and its profile.

    Raises:
        ConflictError: a profile with that email already exists.
        UpstreamError: the identity provider refused or was unreachable.
    """
    if Profile.query.filter_by(email=data.email).first() is not None:
        raise ConflictError("User", "email", data.email)

    result = identity_gateway.create_user(email=data.email, password=data.password, name=data.name)
    if not result.ok or not isinstance(result.data, dict) or not result.data.get("id"):
        raise UpstreamError(f"Failed to create user: {result.error or 'no user returned'}")

    user_id = result.data["id"]
    upsert_row(
        Profile,
        {"id": user_id, "email": data.email, "name": data.name, "role": data.role, "is_active": True},
        conflict_keys=("id",),
    )
    write_audit(
        action="USER_CREATED",
        entity_type="user",
        entity_id=user_id,
        user_id=principal.id,
        details={"email": data.email, "role": data.role},
    )
    commit_or_raise("Profile", "email", data.email)
    logger.info("User %s (%s) created by admin %s", user_id, data.role, principal.id)
    return db.session.get(Profile, user_id).to_dict()


def update_role(principal: Principal, user_id: str, role: str) -> dict:
    profile = get_or_404(Profile, user_id, label="User")
    old_role = profile.role
    profile.role = role
    write_audit(
        action="ROLE_CHANGED",
        entity_type="user",
        entity_id=user_id,
        user_id=principal.id,
        details={"target_user_id": user_id, "old_role": old_role, "new_role": role},
    )
    commit_or_raise("Profile", "id", user_id)
    logger.info("Role of %s changed %s → %s by %s", user_id, old_role, role, principal.id)
    return profile.to_dict()


def update_status(principal: Principal, user_id: str, is_active: bool) -> dict:
    """Activate or deactivate an account.

    Raises:
        ValidationError: an admin tried to deactivate themselves.
    """
    if user_id == principal.id and not is_active:
        raise ValidationError("Cannot deactivate your own account")

    profile = get_or_404(Profile, user_id, label="User")
    profile.is_active = is_active
    write_audit(
        action="ACCESS_GRANTED" if is_active else "ACCESS_REVOKED",
        entity_type="user",
        entity_id=user_id,
        user_id=principal.id,
        details={"target_user_id": user_id, "new_status": "active" if is_active else "inactive"},
    )
    commit_or_raise("Profile", "id", user_id)
    return {"id": profile.id, "is_active": profile.is_active}


# ── Identity-provider bridge ─────────────────────────────────────────────────

def sync_profile(claims: dict | None, data: ProfileSync) -> tuple[dict, bool]:
    """Ensure a profile exists for the signed-in identity.

    New profiles always start as students.  Returns ``(profile, created)``.
    """
    if not claims:
        raise AuthenticationError("No token provided")

    user_id = claims["sub"]
    profile = db.session.get(Profile, user_id)
    if profile is not None:
        if not profile.is_active:
            raise AuthenticationError("Account is deactivated")
        return profile.to_dict(), False

    email = claims.get("email")
    if not email:
        raise ValidationError("Token carries no email address")
    metadata = claims.get("user_metadata") or {}
    profile = Profile(
        id=user_id,
        email=email,
        name=data.name or metadata.get("name") or metadata.get("full_name") or email.split("@")[0],
        avatar_url=data.avatar_url or metadata.get("avatar_url"),
        github_id=data.github_id or metadata.get("user_name"),
        role="student",
    )
    db.session.add(profile)
    commit_or_raise("Profile", "email", email)
    logger.info("Profile %s created on first sign-in", user_id)
    return profile.to_dict(), True
