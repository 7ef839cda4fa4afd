"""
Shared pytest fixtures for the Student Project Tracker test suite.

Provides:
    - app: Flask application (session-scoped, "testing" config)
    - session: per-test DB reset (autouse)
    - client: Flask test client
    - make_profile: factory for Profile rows
    - auth_headers: factory for Bearer headers signed with the test secret
    - admin / mentor / student / other_student: ready-made profiles
    - make_project / make_team: direct-to-store factories
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app import create_app
from app.models import db as _db
from app.models.profile import Profile
from app.models.project import Project, ProjectMember
from app.models.team import Team, TeamMember


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(autouse=True)
def session(app):
    """Per-test: open app context, rollback and recreate tables afterwards."""
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Identity fixtures ────────────────────────────────────────────────────


@pytest.fixture()
def make_profile():
    def _make(role="student", *, name=None, email=None, is_active=True):
        uid = str(uuid.uuid4())
        profile = Profile(
            id=uid,
            email=email or f"{role}-{uid[:8]}@example.edu",
            name=name or f"{role.title()} {uid[:4]}",
            role=role,
            is_active=is_active,
        )
        _db.session.add(profile)
        _db.session.commit()
        return profile

    return _make


def make_token(app, sub, *, email="someone@example.edu", expires_in=3600, secret=None, aud="authenticated"):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "email": email,
        "aud": aud,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret or app.config["SUPABASE_JWT_SECRET"], algorithm="HS256")


@pytest.fixture()
def auth_headers(app):
    def _headers(profile_or_id, **token_kwargs):
        sub = getattr(profile_or_id, "id", profile_or_id)
        token = make_token(app, sub, **token_kwargs)
        return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}

    return _headers


@pytest.fixture()
def admin(make_profile):
    return make_profile("admin", name="Ada Admin")


@pytest.fixture()
def mentor(make_profile):
    return make_profile("mentor", name="Mina Mentor")


@pytest.fixture()
def student(make_profile):
    return make_profile("student", name="Sam Student")


@pytest.fixture()
def other_student(make_profile):
    return make_profile("student", name="Olu Other")


# ── Domain factories ─────────────────────────────────────────────────────


@pytest.fixture()
def make_team():
    def _make(mentor, *, name="Team Alpha", members=()):
        team = Team(name=name, mentor_id=mentor.id if mentor else None)
        _db.session.add(team)
        _db.session.flush()
        for member in members:
            _db.session.add(TeamMember(team_id=team.id, user_id=member.id))
        _db.session.commit()
        return team

    return _make


@pytest.fixture()
def make_project():
    def _make(owner, *, title="Capstone", team=None, members=(), repo_url=None):
        project = Project(
            title=title,
            created_by=owner.id if owner else None,
            team_id=team.id if team else None,
            github_repo_url=repo_url,
        )
        _db.session.add(project)
        _db.session.flush()
        if owner is not None:
            _db.session.add(ProjectMember(project_id=project.id, user_id=owner.id, role="owner"))
        for member in members:
            _db.session.add(ProjectMember(project_id=project.id, user_id=member.id))
        _db.session.commit()
        return project

    return _make


@pytest.fixture()
def token_for(app):
    """Raw token factory for identities that have no profile yet."""
    def _token(sub, **kwargs):
        return make_token(app, sub, **kwargs)

    return _token
