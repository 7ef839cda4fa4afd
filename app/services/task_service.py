"""
Task service — tasks and their comments.

Every task operation first resolves the parent project through
access_scope.load_visible_project, so task endpoints inherit the project's
404 / 403 behaviour.

Comment update/delete are filtered by (id, user_id) at the store.  When that
touches no row the service tells the two causes apart: an absent comment is
NotFoundError, someone else's comment is AuthorizationError.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from app.auth import Principal
from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models import db
from app.models.profile import Profile
from app.models.tracking import Comment, Milestone, Task
from app.schemas.tracking import TaskCreate, TaskUpdate
from app.services import access_scope
from app.utils.helpers import apply_changes, commit_or_raise, get_or_404

logger = logging.getLogger(__name__)


def _validate_refs(project_id: str, milestone_id: str | None, assignee_id: str | None) -> None:
    if milestone_id:
        milestone = db.session.get(Milestone, milestone_id)
        if milestone is None or milestone.project_id != project_id:
            raise ValidationError(
                "milestone_id must reference a milestone of this project",
                details={"milestone_id": milestone_id},
            )
    if assignee_id:
        get_or_404(Profile, assignee_id, label="Assignee")


def _load_task(principal: Principal, task_id: str) -> Task:
    task = get_or_404(Task, task_id)
    access_scope.load_visible_project(principal, task.project_id)
    return task


# ── Tasks ────────────────────────────────────────────────────────────────────

def list_tasks(principal: Principal, project_id: str) -> list[dict]:
    access_scope.load_visible_project(principal, project_id)
    tasks = (
        Task.query.filter_by(project_id=project_id)
        .order_by(Task.created_at.desc())
        .all()
    )
    return [t.to_dict() for t in tasks]


def create_task(principal: Principal, project_id: str, data: TaskCreate) -> dict:
    access_scope.load_visible_project(principal, project_id)
    _validate_refs(project_id, data.milestone_id, data.assignee_id)

    task = Task(project_id=project_id, **data.model_dump())
    db.session.add(task)
    commit_or_raise("Task", "project_id", project_id)
    return task.to_dict()


def get_task(principal: Principal, task_id: str) -> dict:
    task = _load_task(principal, task_id)
    data = task.to_dict()
    data["project"] = {"id": task.project.id, "title": task.project.title}
    return data


def update_task(principal: Principal, task_id: str, data: TaskUpdate) -> dict:
    task = _load_task(principal, task_id)
    changes = data.model_dump(exclude_unset=True)
    _validate_refs(task.project_id, changes.get("milestone_id"), changes.get("assignee_id"))
    apply_changes(task, changes, required=("title", "priority", "status"))
    commit_or_raise("Task", "id", task_id)
    return task.to_dict()


def update_task_status(principal: Principal, task_id: str, status: str) -> dict:
    task = _load_task(principal, task_id)
    task.status = status
    commit_or_raise("Task", "id", task_id)
    return task.to_dict()


def delete_task(principal: Principal, task_id: str) -> None:
    task = _load_task(principal, task_id)
    db.session.delete(task)
    commit_or_raise("Task", "id", task_id)


# ── Comments ─────────────────────────────────────────────────────────────────

def list_comments(principal: Principal, task_id: str) -> list[dict]:
    _load_task(principal, task_id)
    comments = (
        Comment.query.filter_by(task_id=task_id)
        .order_by(Comment.created_at.asc())
        .all()
    )
    return [c.to_dict() for c in comments]


def create_comment(principal: Principal, task_id: str, content: str) -> dict:
    _load_task(principal, task_id)
    comment = Comment(task_id=task_id, user_id=principal.id, content=content)
    db.session.add(comment)
    commit_or_raise("Comment", "task_id", task_id)
    return comment.to_dict()


def _explain_missed_comment(comment_id: str) -> None:
    """Raise the right error after an owner-filtered write touched no row."""
    db.session.rollback()
    if db.session.get(Comment, comment_id) is None:
        raise NotFoundError(resource="Comment", resource_id=comment_id)
    raise AuthorizationError("You can only modify your own comments")


def update_comment(principal: Principal, comment_id: str, content: str) -> dict:
    updated = (
        Comment.query.filter_by(id=comment_id, user_id=principal.id)
        .update(
            {"content": content, "updated_at": datetime.now(timezone.utc)},
            synchronize_session=False,
        )
    )
    if updated == 0:
        _explain_missed_comment(comment_id)
    commit_or_raise("Comment", "id", comment_id)
    return db.session.get(Comment, comment_id).to_dict()


def delete_comment(principal: Principal, comment_id: str) -> None:
    deleted = (
        Comment.query.filter_by(id=comment_id, user_id=principal.id)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        _explain_missed_comment(comment_id)
    commit_or_raise("Comment", "id", comment_id)
