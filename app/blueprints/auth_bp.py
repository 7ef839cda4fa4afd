"""
Student Project Tracker
Auth blueprint.

Sign-in happens at the identity provider; these endpoints bridge its tokens
to local profiles.

Endpoints:
    GET  /api/auth/me            — the caller's profile
    POST /api/auth/sync-profile  — create the profile on first sign-in
"""

from flask import Blueprint, g

from app.auth import current_principal, require_auth
from app.schemas.user import ProfileSync
from app.services import user_service
from app.utils.errors import api_ok
from app.utils.helpers import parse_body

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/me", methods=["GET"])
@require_auth
def me():
    return api_ok(user_service.get_user(current_principal().id))


@auth_bp.route("/sync-profile", methods=["POST"])
def sync_profile():
    # The middleware decodes the token even when no profile exists yet.
    data = parse_body(ProfileSync)
    profile, created = user_service.sync_profile(g.get("jwt_claims"), data)
    if created:
        return api_ok(profile, status=201, message="Profile created")
    return api_ok(profile)
