"""
Student Project Tracker
User administration blueprint.

Endpoints:
    GET  /api/users                — all profiles (mentor, admin)
    POST /api/users                — provision account + profile (admin)
    GET  /api/users/<id>           — one profile
    PUT  /api/users/<id>           — edit profile (self or admin)
    PUT  /api/users/<id>/role      — change role (admin)
    PUT  /api/users/<id>/status    — activate / deactivate (admin)
"""

from flask import Blueprint

from app.auth import current_principal, require_auth
from app.middleware.permission_required import require_permission
from app.schemas.user import ProfileUpdate, RoleUpdate, StatusUpdate, UserCreate
from app.services import user_service
from app.utils.errors import api_ok
from app.utils.helpers import parse_body

user_bp = Blueprint("users", __name__, url_prefix="/api")


@user_bp.route("/users", methods=["GET"])
@require_permission("users.list")
def list_users():
    return api_ok(user_service.list_users())


@user_bp.route("/users", methods=["POST"])
@require_permission("users.create")
def create_user():
    data = parse_body(UserCreate)
    return api_ok(user_service.create_user(current_principal(), data), status=201)


@user_bp.route("/users/<user_id>", methods=["GET"])
@require_auth
def get_user(user_id):
    return api_ok(user_service.get_user(user_id))


@user_bp.route("/users/<user_id>", methods=["PUT"])
@require_auth
def update_profile(user_id):
    data = parse_body(ProfileUpdate)
    return api_ok(user_service.update_profile(current_principal(), user_id, data))


@user_bp.route("/users/<user_id>/role", methods=["PUT"])
@require_permission("users.role.update")
def update_role(user_id):
    data = parse_body(RoleUpdate)
    return api_ok(user_service.update_role(current_principal(), user_id, data.role))


@user_bp.route("/users/<user_id>/status", methods=["PUT"])
@require_permission("users.status.update")
def update_status(user_id):
    data = parse_body(StatusUpdate)
    result = user_service.update_status(current_principal(), user_id, data.is_active)
    message = "User activated" if data.is_active else "User deactivated"
    return api_ok(result, message=message)
