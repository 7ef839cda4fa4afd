"""
Student Project Tracker
Evaluation blueprint.

Endpoints:
    GET  /api/evaluations                       — role-scoped list
    POST /api/evaluations                       — create or overwrite (mentor)
    GET  /api/evaluations/student/<student_id>  — one student's evaluations
"""

from flask import Blueprint

from app.auth import current_principal, require_auth
from app.middleware.permission_required import require_permission
from app.schemas.evaluation import EvaluationCreate
from app.services import evaluation_service
from app.utils.errors import api_ok
from app.utils.helpers import parse_body

evaluation_bp = Blueprint("evaluations", __name__, url_prefix="/api")


@evaluation_bp.route("/evaluations", methods=["GET"])
@require_auth
def list_evaluations():
    return api_ok(evaluation_service.list_evaluations(current_principal()))


@evaluation_bp.route("/evaluations", methods=["POST"])
@require_permission("evaluations.create")
def create_evaluation():
    data = parse_body(EvaluationCreate)
    return api_ok(evaluation_service.save_evaluation(current_principal(), data), status=201)


@evaluation_bp.route("/evaluations/student/<student_id>", methods=["GET"])
@require_auth
def list_student_evaluations(student_id):
    return api_ok(evaluation_service.list_student_evaluations(current_principal(), student_id))
