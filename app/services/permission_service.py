"""
Permission Service — role table per operation plus relational guards.

Two layers, always in this order:
  1. Role table (OPERATION_ROLES): checked by the route decorator in
     app.middleware.permission_required before any service code runs.
  2. Relational guards (ensure_*): checked inside services before any write,
     because they need the target rows (team membership, team ownership,
     project membership).

Both raise AuthorizationError (HTTP 403).
"""

import logging

from sqlalchemy import select

from app.auth import Principal
from app.core.exceptions import AuthorizationError, ValidationError
from app.models import db
from app.models.project import ProjectMember
from app.models.team import Team, TeamMember

logger = logging.getLogger(__name__)

# operation codename → roles allowed to attempt it
OPERATION_ROLES: dict[str, frozenset[str]] = {
    "projects.create": frozenset({"student", "admin"}),
    "projects.update": frozenset({"mentor", "admin"}),
    "projects.delete": frozenset({"admin"}),
    "projects.members.manage": frozenset({"mentor", "admin"}),
    "teams.create": frozenset({"mentor", "admin"}),
    "teams.update": frozenset({"admin"}),
    "teams.members.manage": frozenset({"mentor", "admin"}),
    "milestones.update": frozenset({"mentor", "admin"}),
    "milestones.delete": frozenset({"admin"}),
    "evaluations.create": frozenset({"mentor"}),
    "users.list": frozenset({"mentor", "admin"}),
    "users.create": frozenset({"admin"}),
    "users.role.update": frozenset({"admin"}),
    "users.status.update": frozenset({"admin"}),
    "audit.view": frozenset({"admin"}),
}


def has_permission(principal: Principal, codename: str) -> bool:
    """Return True when the principal's role may perform *codename*."""
    roles = OPERATION_ROLES.get(codename)
    if roles is None:
        logger.error("Unknown operation codename '%s'", codename)
        return False
    return principal.role in roles


# ── Membership lookups ───────────────────────────────────────────────────────

def is_team_member(user_id: str, team_id: str) -> bool:
    stmt = select(TeamMember.id).where(
        TeamMember.team_id == team_id, TeamMember.user_id == user_id,
    )
    return db.session.execute(stmt).first() is not None


def is_project_member(user_id: str, project_id: str) -> bool:
    stmt = select(ProjectMember.id).where(
        ProjectMember.project_id == project_id, ProjectMember.user_id == user_id,
    )
    return db.session.execute(stmt).first() is not None


# ── Relational guards ────────────────────────────────────────────────────────

def ensure_can_create_project(principal: Principal, team_id: str | None) -> None:
    """A student may only attach a new project to a team they belong to."""
    if principal.is_student and team_id and not is_team_member(principal.id, team_id):
        logger.warning("Student %s denied project creation on team %s", principal.id, team_id)
        raise AuthorizationError("You can only create projects for teams you belong to")


def resolve_team_mentor(principal: Principal, mentor_id: str | None) -> str:
    """Mentors always own the teams they create; admins must name a mentor."""
    if principal.is_mentor:
        return principal.id
    if not mentor_id:
        raise ValidationError("mentor_id is required", details={"mentor_id": "required for admins"})
    return mentor_id


def ensure_can_manage_team_members(principal: Principal, team: Team) -> None:
    """Mentors may only change the roster of a team they mentor."""
    if principal.is_mentor and team.mentor_id != principal.id:
        logger.warning("Mentor %s denied roster change on team %s", principal.id, team.id)
        raise AuthorizationError("You can only manage members of your own teams")


def ensure_can_create_milestone(principal: Principal, project_id: str) -> None:
    """Students must be members of the project they add milestones to."""
    if principal.is_student and not is_project_member(principal.id, project_id):
        raise AuthorizationError("You must be a member of the project to create milestones")
