"""
Student Project Tracker
Project blueprint.

Endpoints:
    GET    /api/projects                          — projects visible to the caller
    POST   /api/projects                          — create (student, admin)
    GET    /api/projects/<id>                     — detail with milestones and tasks
    PUT    /api/projects/<id>                     — update (mentor, admin)
    DELETE /api/projects/<id>                     — delete (admin)
    POST   /api/projects/<id>/members             — add member (mentor, admin)
    DELETE /api/projects/<id>/members/<user_id>   — remove member (mentor, admin)
"""

from flask import Blueprint

from app.auth import current_principal, require_auth
from app.middleware.permission_required import require_permission
from app.schemas.project import ProjectCreate, ProjectMemberAdd, ProjectUpdate
from app.services import project_service
from app.utils.errors import api_ok
from app.utils.helpers import parse_body

project_bp = Blueprint("projects", __name__, url_prefix="/api")


@project_bp.route("/projects", methods=["GET"])
@require_auth
def list_projects():
    return api_ok(project_service.list_projects(current_principal()))


@project_bp.route("/projects", methods=["POST"])
@require_permission("projects.create")
def create_project():
    data = parse_body(ProjectCreate)
    return api_ok(project_service.create_project(current_principal(), data), status=201)


@project_bp.route("/projects/<project_id>", methods=["GET"])
@require_auth
def get_project(project_id):
    return api_ok(project_service.get_project(current_principal(), project_id))


@project_bp.route("/projects/<project_id>", methods=["PUT"])
@require_permission("projects.update")
def update_project(project_id):
    data = parse_body(ProjectUpdate)
    return api_ok(project_service.update_project(project_id, data))


@project_bp.route("/projects/<project_id>", methods=["DELETE"])
@require_permission("projects.delete")
def delete_project(project_id):
    project_service.delete_project(project_id)
    return api_ok(message="Project deleted successfully")


# ── Members ──────────────────────────────────────────────────────────────────

@project_bp.route("/projects/<project_id>/members", methods=["POST"])
@require_permission("projects.members.manage")
def add_project_member(project_id):
    data = parse_body(ProjectMemberAdd)
    member = project_service.add_member(project_id, data.user_id, data.role)
    return api_ok(member, status=201)


@project_bp.route("/projects/<project_id>/members/<user_id>", methods=["DELETE"])
@require_permission("projects.members.manage")
def remove_project_member(project_id, user_id):
    project_service.remove_member(project_id, user_id)
    return api_ok(message="Member removed successfully")
