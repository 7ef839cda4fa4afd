"""
Student Project Tracker
Team blueprint.

Endpoints:
    GET    /api/teams                          — teams visible to the caller
    POST   /api/teams                          — create (mentor, admin)
    GET    /api/teams/<id>                     — detail with projects
    PUT    /api/teams/<id>                     — update (admin)
    POST   /api/teams/<id>/members             — add member (admin, owning mentor)
    DELETE /api/teams/<id>/members/<user_id>   — remove member (admin, owning mentor)
"""

from flask import Blueprint

from app.auth import current_principal, require_auth
from app.middleware.permission_required import require_permission
from app.schemas.team import TeamCreate, TeamMemberAdd, TeamUpdate
from app.services import team_service
from app.utils.errors import api_ok
from app.utils.helpers import parse_body

team_bp = Blueprint("teams", __name__, url_prefix="/api")


@team_bp.route("/teams", methods=["GET"])
@require_auth
def list_teams():
    return api_ok(team_service.list_teams(current_principal()))


@team_bp.route("/teams", methods=["POST"])
@require_permission("teams.create")
def create_team():
    data = parse_body(TeamCreate)
    return api_ok(team_service.create_team(current_principal(), data), status=201)


@team_bp.route("/teams/<team_id>", methods=["GET"])
@require_auth
def get_team(team_id):
    return api_ok(team_service.get_team(current_principal(), team_id))


@team_bp.route("/teams/<team_id>", methods=["PUT"])
@require_permission("teams.update")
def update_team(team_id):
    data = parse_body(TeamUpdate)
    return api_ok(team_service.update_team(team_id, data))


@team_bp.route("/teams/<team_id>/members", methods=["POST"])
@require_permission("teams.members.manage")
def add_team_member(team_id):
    data = parse_body(TeamMemberAdd)
    member = team_service.add_member(current_principal(), team_id, data.user_id)
    return api_ok(member, status=201)


@team_bp.route("/teams/<team_id>/members/<user_id>", methods=["DELETE"])
@require_permission("teams.members.manage")
def remove_team_member(team_id, user_id):
    team_service.remove_member(current_principal(), team_id, user_id)
    return api_ok(message="Member removed successfully")
