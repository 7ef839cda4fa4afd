"""Audit trail and system metrics endpoints."""

from app.models import db as _db
from app.models.audit import write_audit


def _seed_entries(actor, count):
    for i in range(count):
        write_audit(action="ROLE_CHANGED", entity_type="user", entity_id=actor.id,
                    user_id=actor.id, details={"seq": i})
    _db.session.commit()


def test_audit_is_admin_only(client, mentor, auth_headers):
    assert client.get("/api/audit", headers=auth_headers(mentor)).status_code == 403
    assert client.get("/api/audit/metrics", headers=auth_headers(mentor)).status_code == 403


def test_audit_newest_first_with_limit(client, admin, auth_headers):
    _seed_entries(admin, 5)

    res = client.get("/api/audit?limit=3", headers=auth_headers(admin))
    assert res.status_code == 200
    entries = res.get_json()["data"]
    assert [e["details"]["seq"] for e in entries] == [4, 3, 2]
    assert entries[0]["user"]["id"] == admin.id


def test_audit_default_limit(client, admin, auth_headers):
    _seed_entries(admin, 55)
    res = client.get("/api/audit", headers=auth_headers(admin))
    assert len(res.get_json()["data"]) == 50


def test_metrics_counts(client, admin, student, make_project, auth_headers):
    make_project(student)
    res = client.get("/api/audit/metrics", headers=auth_headers(admin))
    data = res.get_json()["data"]
    assert data["users"] == 2
    assert data["projects"] == 1
    assert data["tasks"] == 0
    assert data["status"] == "Operational"
    assert data["uptime"] >= 0
