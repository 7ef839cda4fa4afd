"""Team creation, visibility and roster management."""

import uuid

from app.models.team import Team, TeamMember


def test_mentor_creates_team_and_is_forced_mentor(client, mentor, make_profile, student, auth_headers):
    someone_else = make_profile("mentor")
    res = client.post(
        "/api/teams",
        headers=auth_headers(mentor),
        json={"name": "Rocketry", "mentor_id": someone_else.id, "member_ids": [student.id, student.id]},
    )
    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["mentor_id"] == mentor.id
    assert [m["user_id"] for m in data["team_members"]] == [student.id]


def test_admin_must_name_mentor(client, admin, auth_headers):
    res = client.post("/api/teams", headers=auth_headers(admin), json={"name": "Headless"})
    assert res.status_code == 400
    assert Team.query.count() == 0


def test_student_cannot_create_team(client, student, auth_headers):
    res = client.post("/api/teams", headers=auth_headers(student), json={"name": "Rebels"})
    assert res.status_code == 403


def test_unknown_member_aborts_whole_creation(client, mentor, auth_headers):
    res = client.post(
        "/api/teams", headers=auth_headers(mentor),
        json={"name": "Ghosts", "member_ids": [str(uuid.uuid4())]},
    )
    assert res.status_code == 404
    assert Team.query.count() == 0
    assert TeamMember.query.count() == 0


def test_team_visibility(client, mentor, make_profile, student, other_student, make_team, auth_headers):
    team = make_team(mentor, members=[student])
    make_team(make_profile("mentor"), name="Other team")

    listed = client.get("/api/teams", headers=auth_headers(student)).get_json()["data"]
    assert [t["id"] for t in listed] == [team.id]

    listed = client.get("/api/teams", headers=auth_headers(mentor)).get_json()["data"]
    assert [t["id"] for t in listed] == [team.id]

    assert client.get("/api/teams", headers=auth_headers(other_student)).get_json()["data"] == []
    assert client.get(f"/api/teams/{team.id}", headers=auth_headers(other_student)).status_code == 403


def test_get_team_includes_projects(client, mentor, student, make_team, make_project, auth_headers):
    team = make_team(mentor, members=[student])
    make_project(student, team=team, title="Team build")

    res = client.get(f"/api/teams/{team.id}", headers=auth_headers(mentor))
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["project_count"] == 1
    assert data["projects"][0]["title"] == "Team build"


def test_update_is_admin_only(client, admin, mentor, make_team, auth_headers):
    team = make_team(mentor)
    assert client.put(f"/api/teams/{team.id}", headers=auth_headers(mentor), json={"name": "Renamed"}).status_code == 403
    res = client.put(f"/api/teams/{team.id}", headers=auth_headers(admin), json={"name": "Renamed"})
    assert res.status_code == 200
    assert res.get_json()["data"]["name"] == "Renamed"


def test_mentor_manages_only_own_roster(client, mentor, make_profile, student, make_team, auth_headers):
    own = make_team(mentor)
    foreign = make_team(make_profile("mentor"), name="Foreign")

    res = client.post(f"/api/teams/{own.id}/members", headers=auth_headers(mentor), json={"user_id": student.id})
    assert res.status_code == 201
    dup = client.post(f"/api/teams/{own.id}/members", headers=auth_headers(mentor), json={"user_id": student.id})
    assert dup.status_code == 400

    res = client.post(f"/api/teams/{foreign.id}/members", headers=auth_headers(mentor), json={"user_id": student.id})
    assert res.status_code == 403

    res = client.delete(f"/api/teams/{own.id}/members/{student.id}", headers=auth_headers(mentor))
    assert res.status_code == 200
    assert TeamMember.query.count() == 0


def test_admin_manages_any_roster(client, admin, mentor, student, make_team, auth_headers):
    team = make_team(mentor)
    res = client.post(f"/api/teams/{team.id}/members", headers=auth_headers(admin), json={"user_id": student.id})
    assert res.status_code == 201


def test_admin_team_with_two_students_is_listed_for_first(client, admin, mentor, student, other_student, auth_headers):
    res = client.post(
        "/api/teams", headers=auth_headers(admin),
        json={"name": "Pair", "mentor_id": mentor.id, "member_ids": [student.id, other_student.id]},
    )
    assert res.status_code == 201
    team_id = res.get_json()["data"]["id"]
    assert TeamMember.query.filter_by(team_id=team_id).count() == 2

    listed = client.get("/api/teams", headers=auth_headers(student)).get_json()["data"]
    assert [t["id"] for t in listed] == [team_id]
