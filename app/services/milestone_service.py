"""
Milestone service.

Any authenticated role may create a milestone, but a student only on a
project they are a member of.  Updates are for mentors and admins, deletes
for admins; both are enforced by the route decorators.
"""

from __future__ import annotations

from app.auth import Principal
from app.models import db
from app.models.project import Project
from app.models.tracking import Milestone
from app.schemas.tracking import MilestoneCreate, MilestoneUpdate
from app.services import access_scope
from app.services.permission_service import ensure_can_create_milestone
from app.utils.helpers import apply_changes, commit_or_raise, get_or_404


def list_milestones(principal: Principal, project_id: str) -> list[dict]:
    access_scope.load_visible_project(principal, project_id)
    milestones = (
        Milestone.query.filter_by(project_id=project_id)
        .order_by(Milestone.due_date.asc())
        .all()
    )
    return [m.to_dict() for m in milestones]


def create_milestone(principal: Principal, project_id: str, data: MilestoneCreate) -> dict:
    get_or_404(Project, project_id)
    ensure_can_create_milestone(principal, project_id)

    milestone = Milestone(project_id=project_id, **data.model_dump())
    db.session.add(milestone)
    commit_or_raise("Milestone", "project_id", project_id)
    return milestone.to_dict()


def update_milestone(milestone_id: str, data: MilestoneUpdate) -> dict:
    milestone = get_or_404(Milestone, milestone_id)
    apply_changes(
        milestone, data.model_dump(exclude_unset=True), required=("title", "due_date", "status"),
    )
    commit_or_raise("Milestone", "id", milestone_id)
    return milestone.to_dict()


def delete_milestone(milestone_id: str) -> None:
    milestone = get_or_404(Milestone, milestone_id)
    db.session.delete(milestone)
    commit_or_raise("Milestone", "id", milestone_id)
