"""App factory, configuration guards and the error envelope."""

import pytest

from app.auth import Principal
from app.config import ProductionConfig
from app.services.permission_service import OPERATION_ROLES, has_permission


def test_production_refuses_to_start_without_database(monkeypatch):
    monkeypatch.setattr(ProductionConfig, "SQLALCHEMY_DATABASE_URI", None)
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        ProductionConfig()


def test_production_requires_jwt_secret(monkeypatch):
    monkeypatch.setattr(ProductionConfig, "SQLALCHEMY_DATABASE_URI", "postgresql://db/tracker")
    monkeypatch.setattr(ProductionConfig, "SUPABASE_JWT_SECRET", "")
    with pytest.raises(RuntimeError, match="SUPABASE_JWT_SECRET"):
        ProductionConfig()


def test_unknown_api_route_uses_error_envelope(client):
    res = client.get("/api/health/nope")
    assert res.status_code == 404
    body = res.get_json()
    assert body["success"] is False
    assert "error" in body


def test_malformed_json_body_is_validation_error(client, student, auth_headers):
    res = client.post("/api/projects", headers=auth_headers(student), data="{not json")
    assert res.status_code == 400


def test_unknown_codename_is_denied():
    principal = Principal(id="x", email="x@example.edu", role="admin")
    assert not has_permission(principal, "projects.teleport")


@pytest.mark.parametrize("codename", sorted(OPERATION_ROLES))
def test_every_operation_allows_at_least_one_role(codename):
    assert OPERATION_ROLES[codename]
