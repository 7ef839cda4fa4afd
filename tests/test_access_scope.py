"""Role-based visibility of projects, teams and evaluations."""

import pytest

from app.auth import Principal
from app.core.exceptions import AuthorizationError, NotFoundError
from app.services import access_scope
from app.services.helpers.predicates import EVERYTHING, NOTHING, Eq, Or
from app.services.project_service import list_projects


def _principal(profile):
    return Principal(id=profile.id, email=profile.email, role=profile.role)


def test_admin_sees_everything(admin):
    assert access_scope.project_scope(_principal(admin)) is EVERYTHING
    assert access_scope.team_scope(_principal(admin)) is EVERYTHING
    assert access_scope.evaluation_scope(_principal(admin)) is EVERYTHING


def test_student_without_memberships_gets_nothing(student):
    assert access_scope.project_scope(_principal(student)) is NOTHING
    assert list_projects(_principal(student)) == []


def test_mentor_without_teams_or_memberships_sees_own_projects(mentor):
    assert access_scope.project_scope(_principal(mentor)) == Eq("created_by", mentor.id)


def test_mentor_scope_combines_created_mentored_and_member(mentor, student, make_team, make_project):
    team = make_team(mentor, members=[student])
    make_project(student, team=team)

    pred = access_scope.project_scope(_principal(mentor))
    assert isinstance(pred, Or)
    assert len(pred.terms) == 2


def test_student_sees_member_and_team_projects(mentor, student, other_student, make_team, make_project):
    team = make_team(mentor, members=[student])
    own = make_project(student, title="Own project")
    team_project = make_project(other_student, title="Team project", team=team)
    make_project(other_student, title="Unrelated")

    titles = {p["title"] for p in list_projects(_principal(student))}
    assert titles == {own.title, team_project.title}


def test_mentor_lists_projects_of_mentored_teams(mentor, student, make_team, make_project):
    team = make_team(mentor, members=[student])
    project = make_project(student, team=team)
    make_project(student, title="Solo project")

    ids = [p["id"] for p in list_projects(_principal(mentor))]
    assert ids == [project.id]


def test_load_visible_project_missing_is_404(student):
    with pytest.raises(NotFoundError):
        access_scope.load_visible_project(_principal(student), "00000000-0000-0000-0000-000000000000")


def test_load_visible_project_outside_scope_is_403(student, other_student, make_project):
    project = make_project(other_student)
    with pytest.raises(AuthorizationError):
        access_scope.load_visible_project(_principal(student), project.id)


def test_mentor_views_project_through_team(mentor, student, make_team, make_project):
    team = make_team(mentor)
    project = make_project(student, team=team)
    assert access_scope.can_view_project(_principal(mentor), project)


def test_other_mentor_cannot_view_team(mentor, make_profile, make_team):
    team = make_team(mentor)
    outsider = make_profile("mentor")
    assert not access_scope.can_view_team(_principal(outsider), team)
    assert access_scope.can_view_team(_principal(mentor), team)


def test_evaluation_scope_per_role(mentor, student):
    assert access_scope.evaluation_scope(_principal(mentor)) == Eq("mentor_id", mentor.id)
    assert access_scope.evaluation_scope(_principal(student)) == Eq("student_id", student.id)
