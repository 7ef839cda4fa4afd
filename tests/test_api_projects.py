"""Project CRUD, membership and role rules over HTTP."""

import uuid
from datetime import date
from unittest.mock import patch

from app.models import db as _db
from app.models.project import Project, ProjectMember
from app.models.tracking import Milestone, Task


def test_student_creates_project_and_becomes_owner(client, student, auth_headers):
    res = client.post(
        "/api/projects",
        headers=auth_headers(student),
        json={"title": "Robot Arm", "description": "Pick and place", "start_date": "2026-09-01"},
    )
    assert res.status_code == 201
    body = res.get_json()
    assert body["success"] is True
    project = body["data"]
    assert project["status"] == "planning"
    assert project["created_by"] == student.id
    assert project["project_members"][0]["user_id"] == student.id
    assert project["project_members"][0]["role"] == "owner"


def test_failed_owner_membership_rolls_back_project(client, student, auth_headers):
    def _broken_member(**kwargs):
        return ProjectMember(**{**kwargs, "user_id": None})

    with patch("app.services.project_service.ProjectMember", side_effect=_broken_member):
        res = client.post("/api/projects", headers=auth_headers(student), json={"title": "Half Written"})

    assert res.status_code == 400
    assert res.get_json()["success"] is False
    assert Project.query.count() == 0
    assert ProjectMember.query.count() == 0


def test_mentor_cannot_create_project(client, mentor, auth_headers):
    res = client.post("/api/projects", headers=auth_headers(mentor), json={"title": "Nope"})
    assert res.status_code == 403
    assert res.get_json()["error"] == "Insufficient permissions"


def test_title_too_short_is_400(client, student, auth_headers):
    res = client.post("/api/projects", headers=auth_headers(student), json={"title": "ab"})
    assert res.status_code == 400
    body = res.get_json()
    assert body["error"] == "Validation failed"
    assert body["details"][0]["field"] == "title"


def test_student_cannot_create_project_for_foreign_team(client, mentor, student, make_team, auth_headers):
    team = make_team(mentor)
    res = client.post(
        "/api/projects", headers=auth_headers(student), json={"title": "Team work", "team_id": team.id},
    )
    assert res.status_code == 403
    assert Project.query.count() == 0


def test_student_creates_project_for_own_team(client, mentor, student, make_team, auth_headers):
    team = make_team(mentor, members=[student])
    res = client.post(
        "/api/projects", headers=auth_headers(student), json={"title": "Team work", "team_id": team.id},
    )
    assert res.status_code == 201
    assert res.get_json()["data"]["teams"]["mentor_id"] == mentor.id


def test_unknown_team_is_404(client, admin, auth_headers):
    res = client.post(
        "/api/projects", headers=auth_headers(admin),
        json={"title": "Orphan", "team_id": str(uuid.uuid4())},
    )
    assert res.status_code == 404


def test_list_is_role_scoped(client, student, other_student, admin, make_project, auth_headers):
    mine = make_project(student, title="Mine")
    make_project(other_student, title="Theirs")

    res = client.get("/api/projects", headers=auth_headers(student))
    assert [p["id"] for p in res.get_json()["data"]] == [mine.id]

    res = client.get("/api/projects", headers=auth_headers(admin))
    assert len(res.get_json()["data"]) == 2


def test_get_project_includes_children(client, student, make_project, auth_headers):
    project = make_project(student)
    milestone = Milestone(project_id=project.id, title="Alpha", due_date=date(2026, 12, 1))
    _db.session.add(milestone)
    _db.session.add(Task(project_id=project.id, title="Wire motors"))
    _db.session.commit()

    res = client.get(f"/api/projects/{project.id}", headers=auth_headers(student))
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert [m["title"] for m in data["milestones"]] == ["Alpha"]
    assert [t["title"] for t in data["tasks"]] == ["Wire motors"]


def test_get_foreign_project_is_403_and_missing_is_404(client, student, other_student, make_project, auth_headers):
    project = make_project(other_student)
    assert client.get(f"/api/projects/{project.id}", headers=auth_headers(student)).status_code == 403
    missing = client.get(f"/api/projects/{uuid.uuid4()}", headers=auth_headers(student))
    assert missing.status_code == 404


def test_update_is_mentor_or_admin(client, student, mentor, make_project, auth_headers):
    project = make_project(student)
    payload = {"status": "active", "description": "Now running"}

    assert client.put(f"/api/projects/{project.id}", headers=auth_headers(student), json=payload).status_code == 403

    res = client.put(f"/api/projects/{project.id}", headers=auth_headers(mentor), json=payload)
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "active"


def test_update_rejects_null_title(client, admin, student, make_project, auth_headers):
    project = make_project(student)
    res = client.put(f"/api/projects/{project.id}", headers=auth_headers(admin), json={"title": None})
    assert res.status_code == 400


def test_delete_is_admin_only_and_cascades(client, admin, mentor, student, make_project, auth_headers):
    project = make_project(student)
    _db.session.add(Task(project_id=project.id, title="Doomed task"))
    _db.session.commit()

    assert client.delete(f"/api/projects/{project.id}", headers=auth_headers(mentor)).status_code == 403

    res = client.delete(f"/api/projects/{project.id}", headers=auth_headers(admin))
    assert res.status_code == 200
    assert res.get_json()["message"] == "Project deleted successfully"
    _db.session.expire_all()
    assert Project.query.count() == 0
    assert Task.query.count() == 0
    assert ProjectMember.query.count() == 0


# ── Members ──────────────────────────────────────────────────────────────


def test_add_and_remove_member(client, mentor, student, other_student, make_project, auth_headers):
    project = make_project(student)
    url = f"/api/projects/{project.id}/members"

    res = client.post(url, headers=auth_headers(mentor), json={"user_id": other_student.id})
    assert res.status_code == 201
    assert res.get_json()["data"]["role"] == "member"

    duplicate = client.post(url, headers=auth_headers(mentor), json={"user_id": other_student.id})
    assert duplicate.status_code == 400

    res = client.delete(f"{url}/{other_student.id}", headers=auth_headers(mentor))
    assert res.status_code == 200
    again = client.delete(f"{url}/{other_student.id}", headers=auth_headers(mentor))
    assert again.status_code == 404


def test_student_cannot_manage_members(client, student, other_student, make_project, auth_headers):
    project = make_project(student)
    res = client.post(
        f"/api/projects/{project.id}/members", headers=auth_headers(student),
        json={"user_id": other_student.id},
    )
    assert res.status_code == 403


def test_add_unknown_user_is_404(client, admin, student, make_project, auth_headers):
    project = make_project(student)
    res = client.post(
        f"/api/projects/{project.id}/members", headers=auth_headers(admin),
        json={"user_id": str(uuid.uuid4())},
    )
    assert res.status_code == 404


def test_mentor_get_on_unrelated_project_is_403(client, mentor, student, make_project, auth_headers):
    project = make_project(student)
    res = client.get(f"/api/projects/{project.id}", headers=auth_headers(mentor))
    assert res.status_code == 403
