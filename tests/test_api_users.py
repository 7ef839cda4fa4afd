"""Admin user management, profile edits and audit side effects."""

import uuid
from unittest.mock import patch

from app.integrations.github_gateway import GatewayResult
from app.models import db as _db
from app.models.audit import AuditLog
from app.models.profile import Profile


def _ok(data):
    return GatewayResult(ok=True, status_code=200, data=data, error=None, duration_ms=5)


def test_list_users_roles(client, admin, mentor, student, auth_headers):
    assert client.get("/api/users", headers=auth_headers(student)).status_code == 403
    res = client.get("/api/users", headers=auth_headers(mentor))
    assert res.status_code == 200
    assert len(res.get_json()["data"]) == 3


def test_admin_creates_user(client, admin, auth_headers):
    new_id = str(uuid.uuid4())
    with patch("app.services.user_service.identity_gateway") as gateway:
        gateway.create_user.return_value = _ok({"id": new_id, "email": "fresh@example.edu"})
        res = client.post(
            "/api/users", headers=auth_headers(admin),
            json={"email": "fresh@example.edu", "password": "s3cret!", "name": "Fresh Face", "role": "mentor"},
        )
    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["id"] == new_id
    assert data["role"] == "mentor"
    gateway.create_user.assert_called_once_with(email="fresh@example.edu", password="s3cret!", name="Fresh Face")

    entry = AuditLog.query.one()
    assert entry.action == "USER_CREATED"
    assert entry.user_id == admin.id
    assert entry.details["email"] == "fresh@example.edu"


def test_create_user_upstream_failure_writes_nothing(client, admin, auth_headers):
    failure = GatewayResult(ok=False, status_code=422, data=None, error="User already registered", duration_ms=3)
    with patch("app.services.user_service.identity_gateway") as gateway:
        gateway.create_user.return_value = failure
        res = client.post(
            "/api/users", headers=auth_headers(admin),
            json={"email": "dup@example.edu", "password": "s3cret!", "name": "Dup User"},
        )
    assert res.status_code == 424
    assert "User already registered" in res.get_json()["error"]
    assert Profile.query.filter_by(email="dup@example.edu").first() is None
    assert AuditLog.query.count() == 0


def test_create_user_duplicate_email_skips_provider(client, admin, student, auth_headers):
    with patch("app.services.user_service.identity_gateway") as gateway:
        res = client.post(
            "/api/users", headers=auth_headers(admin),
            json={"email": student.email, "password": "s3cret!", "name": "Again"},
        )
    assert res.status_code == 400
    gateway.create_user.assert_not_called()


def test_create_user_validates_body(client, admin, auth_headers):
    res = client.post(
        "/api/users", headers=auth_headers(admin),
        json={"email": "not-an-email", "password": "123", "name": "X"},
    )
    assert res.status_code == 400
    fields = {d["field"] for d in res.get_json()["details"]}
    assert fields == {"email", "password", "name"}


def test_role_change_is_audited(client, admin, student, auth_headers):
    res = client.put(f"/api/users/{student.id}/role", headers=auth_headers(admin), json={"role": "mentor"})
    assert res.status_code == 200
    assert res.get_json()["data"]["role"] == "mentor"

    entry = AuditLog.query.one()
    assert entry.action == "ROLE_CHANGED"
    assert entry.details == {"target_user_id": student.id, "old_role": "student", "new_role": "mentor"}


def test_role_change_requires_admin(client, mentor, student, auth_headers):
    res = client.put(f"/api/users/{student.id}/role", headers=auth_headers(mentor), json={"role": "admin"})
    assert res.status_code == 403
    assert AuditLog.query.count() == 0


def test_deactivate_and_reactivate(client, admin, student, auth_headers):
    url = f"/api/users/{student.id}/status"
    res = client.put(url, headers=auth_headers(admin), json={"is_active": False})
    assert res.status_code == 200
    assert res.get_json()["data"] == {"id": student.id, "is_active": False}

    assert client.get("/api/auth/me", headers=auth_headers(student)).status_code == 401

    client.put(url, headers=auth_headers(admin), json={"is_active": True})
    actions = [a.action for a in AuditLog.query.order_by(AuditLog.id).all()]
    assert actions == ["ACCESS_REVOKED", "ACCESS_GRANTED"]


def test_admin_cannot_deactivate_self(client, admin, auth_headers):
    res = client.put(f"/api/users/{admin.id}/status", headers=auth_headers(admin), json={"is_active": False})
    assert res.status_code == 400
    assert AuditLog.query.count() == 0
    _db.session.expire_all()
    assert _db.session.get(Profile, admin.id).is_active is True


def test_profile_edit_self_or_admin(client, admin, student, other_student, auth_headers):
    url = f"/api/users/{student.id}"
    assert client.put(url, headers=auth_headers(other_student), json={"bio": "hacked"}).status_code == 403

    res = client.put(url, headers=auth_headers(student), json={"bio": "Robotics fan"})
    assert res.status_code == 200
    assert res.get_json()["data"]["bio"] == "Robotics fan"

    res = client.put(url, headers=auth_headers(admin), json={"name": "Samuel Student"})
    assert res.get_json()["data"]["name"] == "Samuel Student"


def test_get_unknown_user_is_404(client, student, auth_headers):
    assert client.get(f"/api/users/{uuid.uuid4()}", headers=auth_headers(student)).status_code == 404
