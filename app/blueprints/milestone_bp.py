"""
Student Project Tracker
Milestone blueprint.

Endpoints:
    GET    /api/projects/<id>/milestones  — milestones by due date
    POST   /api/projects/<id>/milestones  — create (students: members only)
    PUT    /api/milestones/<id>           — update (mentor, admin)
    DELETE /api/milestones/<id>           — delete (admin)
"""

from flask import Blueprint

from app.auth import current_principal, require_auth
from app.middleware.permission_required import require_permission
from app.schemas.tracking import MilestoneCreate, MilestoneUpdate
from app.services import milestone_service
from app.utils.errors import api_ok
from app.utils.helpers import parse_body

milestone_bp = Blueprint("milestones", __name__, url_prefix="/api")


@milestone_bp.route("/projects/<project_id>/milestones", methods=["GET"])
@require_auth
def list_milestones(project_id):
    return api_ok(milestone_service.list_milestones(current_principal(), project_id))


@milestone_bp.route("/projects/<project_id>/milestones", methods=["POST"])
@require_auth
def create_milestone(project_id):
    data = parse_body(MilestoneCreate)
    milestone = milestone_service.create_milestone(current_principal(), project_id, data)
    return api_ok(milestone, status=201)


@milestone_bp.route("/milestones/<milestone_id>", methods=["PUT"])
@require_permission("milestones.update")
def update_milestone(milestone_id):
    data = parse_body(MilestoneUpdate)
    return api_ok(milestone_service.update_milestone(milestone_id, data))


@milestone_bp.route("/milestones/<milestone_id>", methods=["DELETE"])
@require_permission("milestones.delete")
def delete_milestone(milestone_id):
    milestone_service.delete_milestone(milestone_id)
    return api_ok(message="Milestone deleted successfully")
