"""
Access scoping — which projects, teams and evaluations a principal may see.

All queries run with full store privileges; visibility is decided here and
nowhere else.

List endpoints:
    *_scope(principal) returns a predicate (app.services.helpers.predicates)
    that the caller hands to fetch_all().  Precursor id sets (memberships,
    mentored teams) are loaded with separate queries first.

Single-entity endpoints:
    load_visible_project / load_visible_team fetch unconditionally and then
    check, so a missing row is NotFoundError (404) while a row outside the
    principal's scope is AuthorizationError (403).
"""

import logging

from sqlalchemy import select

from app.auth import Principal
from app.core.exceptions import AuthorizationError
from app.models import db
from app.models.project import Project, ProjectMember
from app.models.team import Team, TeamMember
from app.services.helpers.predicates import EVERYTHING, NOTHING, Eq, In, Predicate, any_of
from app.utils.helpers import get_or_404

logger = logging.getLogger(__name__)


# ── Precursor sets ───────────────────────────────────────────────────────────

def member_project_ids(user_id: str) -> list[str]:
    stmt = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
    return list(db.session.execute(stmt).scalars())


def member_team_ids(user_id: str) -> list[str]:
    stmt = select(TeamMember.team_id).where(TeamMember.user_id == user_id)
    return list(db.session.execute(stmt).scalars())


def mentored_team_ids(user_id: str) -> list[str]:
    stmt = select(Team.id).where(Team.mentor_id == user_id)
    return list(db.session.execute(stmt).scalars())


# ── List predicates ──────────────────────────────────────────────────────────

def project_scope(principal: Principal) -> Predicate:
    """Projects visible to *principal*.

    admin    everything
    mentor   created_by = me OR team_id in mentored teams OR id in my memberships
    student  id in my memberships OR team_id in my teams (NOTHING when both empty)
    """
    if principal.is_admin:
        return EVERYTHING
    if principal.is_mentor:
        return any_of(
            Eq("created_by", principal.id),
            In("team_id", mentored_team_ids(principal.id)),
            In("id", member_project_ids(principal.id)),
        )
    if principal.is_student:
        return any_of(
            In("id", member_project_ids(principal.id)),
            In("team_id", member_team_ids(principal.id)),
        )
    return NOTHING


def team_scope(principal: Principal) -> Predicate:
    if principal.is_admin:
        return EVERYTHING
    if principal.is_mentor:
        return Eq("mentor_id", principal.id)
    if principal.is_student:
        return any_of(In("id", member_team_ids(principal.id)))
    return NOTHING


def evaluation_scope(principal: Principal) -> Predicate:
    if principal.is_admin:
        return EVERYTHING
    if principal.is_mentor:
        return Eq("mentor_id", principal.id)
    if principal.is_student:
        return Eq("student_id", principal.id)
    return NOTHING


# ── Single-entity checks ─────────────────────────────────────────────────────

def can_view_project(principal: Principal, project: Project) -> bool:
    if principal.is_admin:
        return True
    is_member = principal.id in project.member_ids()
    if principal.is_mentor:
        team_mentor = project.team.mentor_id if project.team else None
        return project.created_by == principal.id or is_member or team_mentor == principal.id
    if principal.is_student:
        return is_member
    return False


def can_view_team(principal: Principal, team: Team) -> bool:
    if principal.is_admin:
        return True
    if principal.is_mentor:
        return team.mentor_id == principal.id
    if principal.is_student:
        return principal.id in team.member_ids()
    return False


def load_visible_project(principal: Principal, project_id: str) -> Project:
    """Fetch a project (404 if absent) and verify the principal may see it (403)."""
    project = get_or_404(Project, project_id)
    if not can_view_project(principal, project):
        logger.info("Project %s hidden from %s %s", project_id, principal.role, principal.id)
        raise AuthorizationError("You do not have access to this project")
    return project


def load_visible_team(principal: Principal, team_id: str) -> Team:
    """Fetch a team (404 if absent) and verify the principal may see it (403)."""
    team = get_or_404(Team, team_id)
    if not can_view_team(principal, team):
        logger.info("Team %s hidden from %s %s", team_id, principal.role, principal.id)
        raise AuthorizationError("You do not have access to this team")
    return team
