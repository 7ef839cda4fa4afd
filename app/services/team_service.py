"""
Team service — mentored student teams and their rosters.

A mentor creating a team always becomes its mentor; an admin must name one.
Team creation writes the team and every initial member in one transaction.
"""

from __future__ import annotations

import logging

from sqlalchemy import select

from app.auth import Principal
from app.core.exceptions import ConflictError, NotFoundError
from app.models import db
from app.models.profile import Profile
from app.models.team import Team, TeamMember
from app.schemas.team import TeamCreate, TeamUpdate
from app.services import access_scope
from app.services.helpers.predicates import fetch_all
from app.services.permission_service import (
    ensure_can_manage_team_members,
    is_team_member,
    resolve_team_mentor,
)
from app.utils.helpers import apply_changes, commit_or_raise, get_or_404

logger = logging.getLogger(__name__)


def _require_profiles(user_ids: list[str]) -> None:
    if not user_ids:
        return
    found = set(db.session.execute(select(Profile.id).where(Profile.id.in_(user_ids))).scalars())
    missing = [uid for uid in user_ids if uid not in found]
    if missing:
        raise NotFoundError(resource="User", resource_id=missing[0])


def list_teams(principal: Principal) -> list[dict]:
    teams = fetch_all(Team, access_scope.team_scope(principal), order_by=Team.created_at.desc())
    return [t.to_dict() for t in teams]


def get_team(principal: Principal, team_id: str) -> dict:
    team = access_scope.load_visible_team(principal, team_id)
    return team.to_dict(include_projects=True)


def create_team(principal: Principal, data: TeamCreate) -> dict:
    """Create a team with its initial members.

    Raises:
        ValidationError: admin without mentor_id.
        NotFoundError: mentor or a member does not exist.
    """
    mentor_id = resolve_team_mentor(principal, data.mentor_id)
    member_ids = list(dict.fromkeys(data.member_ids))
    _require_profiles([mentor_id, *member_ids])

    team = Team(name=data.name, mentor_id=mentor_id)
    db.session.add(team)
    db.session.flush()
    for user_id in member_ids:
        db.session.add(TeamMember(team_id=team.id, user_id=user_id))
    commit_or_raise("TeamMember", "team_id", team.id)

    logger.info("Team %s created by %s with %d members", team.id, principal.id, len(member_ids))
    return team.to_dict()


def update_team(team_id: str, data: TeamUpdate) -> dict:
    team = get_or_404(Team, team_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("mentor_id"):
        _require_profiles([changes["mentor_id"]])
    apply_changes(team, changes, required=("name",))
    commit_or_raise("Team", "id", team_id)
    return team.to_dict()


def add_member(principal: Principal, team_id: str, user_id: str) -> dict:
    team = get_or_404(Team, team_id)
    ensure_can_manage_team_members(principal, team)
    get_or_404(Profile, user_id, label="User")
    if is_team_member(user_id, team_id):
        raise ConflictError("TeamMember", "user_id", user_id)

    member = TeamMember(team_id=team_id, user_id=user_id)
    db.session.add(member)
    commit_or_raise("TeamMember", "user_id", user_id)
    return member.to_dict()


def remove_member(principal: Principal, team_id: str, user_id: str) -> None:
    team = get_or_404(Team, team_id)
    ensure_can_manage_team_members(principal, team)
    member = TeamMember.query.filter_by(team_id=team_id, user_id=user_id).first()
    if member is None:
        raise NotFoundError(resource="Team member", resource_id=user_id)
    db.session.delete(member)
    commit_or_raise("TeamMember", "user_id", user_id)
