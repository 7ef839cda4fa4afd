"""
Student Project Tracker
Task & comment blueprint.

Endpoints:
    GET    /api/projects/<id>/tasks    — tasks of a visible project
    POST   /api/projects/<id>/tasks    — create task
    GET    /api/tasks/<id>             — task detail
    PUT    /api/tasks/<id>             — update task
    PATCH  /api/tasks/<id>/status      — change status only
    DELETE /api/tasks/<id>             — delete task
    GET    /api/tasks/<id>/comments    — comments, oldest first
    POST   /api/tasks/<id>/comments    — add comment
    PUT    /api/comments/<id>          — edit own comment
    DELETE /api/comments/<id>          — delete own comment

Every route needs an authenticated caller; project visibility is checked
by app.services.task_service.
"""

from flask import Blueprint

from app.auth import current_principal, require_auth
from app.schemas.tracking import CommentCreate, CommentUpdate, TaskCreate, TaskStatusUpdate, TaskUpdate
from app.services import task_service
from app.utils.errors import api_ok
from app.utils.helpers import parse_body

task_bp = Blueprint("tasks", __name__, url_prefix="/api")


# ── Tasks ────────────────────────────────────────────────────────────────────

@task_bp.route("/projects/<project_id>/tasks", methods=["GET"])
@require_auth
def list_tasks(project_id):
    return api_ok(task_service.list_tasks(current_principal(), project_id))


@task_bp.route("/projects/<project_id>/tasks", methods=["POST"])
@require_auth
def create_task(project_id):
    data = parse_body(TaskCreate)
    return api_ok(task_service.create_task(current_principal(), project_id, data), status=201)


@task_bp.route("/tasks/<task_id>", methods=["GET"])
@require_auth
def get_task(task_id):
    return api_ok(task_service.get_task(current_principal(), task_id))


@task_bp.route("/tasks/<task_id>", methods=["PUT"])
@require_auth
def update_task(task_id):
    data = parse_body(TaskUpdate)
    return api_ok(task_service.update_task(current_principal(), task_id, data))


@task_bp.route("/tasks/<task_id>/status", methods=["PATCH"])
@require_auth
def update_task_status(task_id):
    data = parse_body(TaskStatusUpdate)
    return api_ok(task_service.update_task_status(current_principal(), task_id, data.status))


@task_bp.route("/tasks/<task_id>", methods=["DELETE"])
@require_auth
def delete_task(task_id):
    task_service.delete_task(current_principal(), task_id)
    return api_ok(message="Task deleted successfully")


# ── Comments ─────────────────────────────────────────────────────────────────

@task_bp.route("/tasks/<task_id>/comments", methods=["GET"])
@require_auth
def list_comments(task_id):
    return api_ok(task_service.list_comments(current_principal(), task_id))


@task_bp.route("/tasks/<task_id>/comments", methods=["POST"])
@require_auth
def create_comment(task_id):
    data = parse_body(CommentCreate)
    return api_ok(task_service.create_comment(current_principal(), task_id, data.content), status=201)


@task_bp.route("/comments/<comment_id>", methods=["PUT"])
@require_auth
def update_comment(comment_id):
    data = parse_body(CommentUpdate)
    return api_ok(task_service.update_comment(current_principal(), comment_id, data.content))


@task_bp.route("/comments/<comment_id>", methods=["DELETE"])
@require_auth
def delete_comment(comment_id):
    task_service.delete_comment(current_principal(), comment_id)
    return api_ok(message="Comment deleted successfully")
