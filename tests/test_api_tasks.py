"""Tasks, milestones and comments."""

import uuid
from datetime import date

from app.models import db as _db
from app.models.tracking import Comment, Milestone


def _milestone(project, title="Prototype", due="2026-11-30"):
    milestone = Milestone(project_id=project.id, title=title, due_date=date.fromisoformat(due))
    _db.session.add(milestone)
    _db.session.commit()
    return milestone


# ── Milestones ───────────────────────────────────────────────────────────


def test_member_student_creates_milestone(client, student, make_project, auth_headers):
    project = make_project(student)
    res = client.post(
        f"/api/projects/{project.id}/milestones", headers=auth_headers(student),
        json={"title": "Design review", "due_date": "2026-11-01"},
    )
    assert res.status_code == 201
    assert res.get_json()["data"]["status"] == "pending"


def test_non_member_student_cannot_create_milestone(client, student, other_student, make_project, auth_headers):
    project = make_project(other_student)
    res = client.post(
        f"/api/projects/{project.id}/milestones", headers=auth_headers(student),
        json={"title": "Sneaky", "due_date": "2026-11-01"},
    )
    assert res.status_code == 403


def test_milestone_requires_due_date(client, student, make_project, auth_headers):
    project = make_project(student)
    res = client.post(
        f"/api/projects/{project.id}/milestones", headers=auth_headers(student), json={"title": "No date"},
    )
    assert res.status_code == 400


def test_milestones_listed_by_due_date(client, student, make_project, auth_headers):
    project = make_project(student)
    _milestone(project, "Late", "2026-12-20")
    _milestone(project, "Early", "2026-10-20")

    res = client.get(f"/api/projects/{project.id}/milestones", headers=auth_headers(student))
    assert [m["title"] for m in res.get_json()["data"]] == ["Early", "Late"]


def test_milestone_update_and_delete_roles(client, admin, mentor, student, make_project, auth_headers):
    project = make_project(student)
    milestone = _milestone(project)
    url = f"/api/milestones/{milestone.id}"

    assert client.put(url, headers=auth_headers(student), json={"status": "completed"}).status_code == 403
    res = client.put(url, headers=auth_headers(mentor), json={"status": "completed"})
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "completed"

    assert client.delete(url, headers=auth_headers(mentor)).status_code == 403
    assert client.delete(url, headers=auth_headers(admin)).status_code == 200
    assert client.delete(url, headers=auth_headers(admin)).status_code == 404


# ── Tasks ────────────────────────────────────────────────────────────────


def test_task_lifecycle(client, student, make_project, auth_headers):
    project = make_project(student)
    milestone = _milestone(project)
    headers = auth_headers(student)

    res = client.post(
        f"/api/projects/{project.id}/tasks", headers=headers,
        json={"title": "Solder board", "milestone_id": milestone.id, "assignee_id": student.id, "priority": "high"},
    )
    assert res.status_code == 201
    task = res.get_json()["data"]
    assert task["status"] == "todo"
    assert task["milestone"]["title"] == "Prototype"
    assert task["assignee"]["id"] == student.id

    res = client.patch(f"/api/tasks/{task['id']}/status", headers=headers, json={"status": "in_progress"})
    assert res.get_json()["data"]["status"] == "in_progress"

    res = client.get(f"/api/tasks/{task['id']}", headers=headers)
    assert res.get_json()["data"]["project"] == {"id": project.id, "title": project.title}

    res = client.put(f"/api/tasks/{task['id']}", headers=headers, json={"title": "Solder main board"})
    assert res.get_json()["data"]["title"] == "Solder main board"

    listed = client.get(f"/api/projects/{project.id}/tasks", headers=headers).get_json()["data"]
    assert [t["id"] for t in listed] == [task["id"]]

    assert client.delete(f"/api/tasks/{task['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/tasks/{task['id']}", headers=headers).status_code == 404


def test_invalid_task_status_is_400(client, student, make_project, auth_headers):
    project = make_project(student)
    res = client.post(
        f"/api/projects/{project.id}/tasks", headers=auth_headers(student),
        json={"title": "Bad status", "status": "done"},
    )
    assert res.status_code == 400


def test_milestone_from_other_project_is_rejected(client, student, make_project, auth_headers):
    project = make_project(student, title="Home")
    elsewhere = _milestone(make_project(student, title="Elsewhere"))
    res = client.post(
        f"/api/projects/{project.id}/tasks", headers=auth_headers(student),
        json={"title": "Cross wired", "milestone_id": elsewhere.id},
    )
    assert res.status_code == 400


def test_unknown_assignee_is_404(client, student, make_project, auth_headers):
    project = make_project(student)
    res = client.post(
        f"/api/projects/{project.id}/tasks", headers=auth_headers(student),
        json={"title": "Nobody", "assignee_id": str(uuid.uuid4())},
    )
    assert res.status_code == 404


def test_tasks_of_invisible_project_are_403(client, student, other_student, make_project, auth_headers):
    project = make_project(other_student)
    assert client.get(f"/api/projects/{project.id}/tasks", headers=auth_headers(student)).status_code == 403


# ── Comments ─────────────────────────────────────────────────────────────


def _task(client, project, headers):
    res = client.post(f"/api/projects/{project.id}/tasks", headers=headers, json={"title": "Discuss"})
    return res.get_json()["data"]["id"]


def test_comments_thread_in_order(client, student, other_student, make_project, auth_headers):
    project = make_project(student, members=[other_student])
    task_id = _task(client, project, auth_headers(student))

    client.post(f"/api/tasks/{task_id}/comments", headers=auth_headers(student), json={"content": "first"})
    client.post(f"/api/tasks/{task_id}/comments", headers=auth_headers(other_student), json={"content": "second"})

    res = client.get(f"/api/tasks/{task_id}/comments", headers=auth_headers(student))
    comments = res.get_json()["data"]
    assert [c["content"] for c in comments] == ["first", "second"]
    assert comments[1]["user"]["id"] == other_student.id


def test_only_author_edits_or_deletes_comment(client, student, other_student, make_project, auth_headers):
    project = make_project(student, members=[other_student])
    task_id = _task(client, project, auth_headers(student))
    res = client.post(f"/api/tasks/{task_id}/comments", headers=auth_headers(student), json={"content": "mine"})
    comment_id = res.get_json()["data"]["id"]

    res = client.put(f"/api/comments/{comment_id}", headers=auth_headers(other_student), json={"content": "hijack"})
    assert res.status_code == 403
    assert client.delete(f"/api/comments/{comment_id}", headers=auth_headers(other_student)).status_code == 403
    _db.session.expire_all()
    assert _db.session.get(Comment, comment_id).content == "mine"

    res = client.put(f"/api/comments/{comment_id}", headers=auth_headers(student), json={"content": "edited"})
    assert res.status_code == 200
    assert res.get_json()["data"]["content"] == "edited"

    assert client.delete(f"/api/comments/{comment_id}", headers=auth_headers(student)).status_code == 200
    assert client.delete(f"/api/comments/{comment_id}", headers=auth_headers(student)).status_code == 404


def test_empty_comment_is_400(client, student, make_project, auth_headers):
    project = make_project(student)
    task_id = _task(client, project, auth_headers(student))
    res = client.post(f"/api/tasks/{task_id}/comments", headers=auth_headers(student), json={"content": ""})
    assert res.status_code == 400
