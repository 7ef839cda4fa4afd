"""
Project service — CRUD and membership for projects.

Rules:
  - Role-table checks already ran in the route decorator; relational guards
    and visibility checks run here before any write.
  - db.session.commit() happens only in service modules.
  - Creating a project writes the project and its owner membership in one
    transaction: both rows or neither.
"""

from __future__ import annotations

import logging

from app.auth import Principal
from app.core.exceptions import ConflictError, NotFoundError
from app.models import db
from app.models.profile import Profile
from app.models.project import Project, ProjectMember
from app.models.team import Team
from app.schemas.project import ProjectCreate, ProjectUpdate
from app.services import access_scope
from app.services.helpers.predicates import fetch_all
from app.services.permission_service import ensure_can_create_project, is_project_member
from app.utils.helpers import apply_changes, commit_or_raise, get_or_404

logger = logging.getLogger(__name__)


def list_projects(principal: Principal) -> list[dict]:
    """Projects visible to the principal, newest first."""
    projects = fetch_all(
        Project,
        access_scope.project_scope(principal),
        order_by=Project.created_at.desc(),
    )
    return [p.to_dict() for p in projects]


def get_project(principal: Principal, project_id: str) -> dict:
    project = access_scope.load_visible_project(principal, project_id)
    return project.to_dict(include_children=True)


def create_project(principal: Principal, data: ProjectCreate) -> dict:
    """Create a project owned by the principal.

    Raises:
        AuthorizationError: student naming a team they are not a member of.
        NotFoundError: team_id does not exist.
    """
    ensure_can_create_project(principal, data.team_id)
    if data.team_id:
        get_or_404(Team, data.team_id)

    project = Project(
        title=data.title,
        description=data.description,
        status=data.status,
        start_date=data.start_date,
        end_date=data.end_date,
        github_repo_url=data.github_repo_url,
        team_id=data.team_id,
        created_by=principal.id,
    )
    db.session.add(project)
    db.session.flush()
    db.session.add(ProjectMember(project_id=project.id, user_id=principal.id, role="owner"))
    commit_or_raise("ProjectMember", "project_id,user_id", f"{project.id},{principal.id}")

    logger.info("Project %s created by %s (team=%s)", project.id, principal.id, data.team_id)
    return project.to_dict()


def update_project(project_id: str, data: ProjectUpdate) -> dict:
    project = get_or_404(Project, project_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("team_id"):
        get_or_404(Team, changes["team_id"])
    apply_changes(project, changes, required=("title", "status"))
    commit_or_raise("Project", "id", project_id)
    return project.to_dict()


def delete_project(project_id: str) -> None:
    project = get_or_404(Project, project_id)
    db.session.delete(project)
    commit_or_raise("Project", "id", project_id)
    logger.info("Project %s deleted", project_id)


# ── Members ──────────────────────────────────────────────────────────────────

def add_member(project_id: str, user_id: str, role: str = "member") -> dict:
    """Add a profile to a project.

    Raises:
        NotFoundError: unknown project or user.
        ConflictError: the user is already a member.
    """
    get_or_404(Project, project_id)
    get_or_404(Profile, user_id, label="User")
    if is_project_member(user_id, project_id):
        raise ConflictError("ProjectMember", "user_id", user_id)

    member = ProjectMember(project_id=project_id, user_id=user_id, role=role)
    db.session.add(member)
    commit_or_raise("ProjectMember", "user_id", user_id)
    return member.to_dict()


def remove_member(project_id: str, user_id: str) -> None:
    member = ProjectMember.query.filter_by(project_id=project_id, user_id=user_id).first()
    if member is None:
        raise NotFoundError(resource="Project member", resource_id=user_id)
    db.session.delete(member)
    commit_or_raise("ProjectMember", "user_id", user_id)
