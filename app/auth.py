"""
Student Project Tracker
Request principal and authentication decorator.

Provides:
    - Principal: the authenticated actor of a request (id, email, role)
    - current_principal(): the principal resolved by the JWT middleware
    - require_auth: decorator rejecting requests without a principal

Security model:
    - Every /api/* endpoint except /api/health and /api/github/webhook
      requires a Bearer token issued by the identity provider
    - The role is read from the caller's profile on every request and is
      never taken from the token itself
    - Role tables per operation live in app.services.permission_service
"""

import functools
from dataclasses import dataclass

from flask import g

from app.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class Principal:
    id: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_mentor(self) -> bool:
        return self.role == "mentor"

    @property
    def is_student(self) -> bool:
        return self.role == "student"


def current_principal() -> Principal:
    """Return the request principal or raise AuthenticationError."""
    principal = getattr(g, "principal", None)
    if principal is None:
        raise AuthenticationError(getattr(g, "auth_error", None) or "Authentication required")
    return principal


# ── Authentication decorator ─────────────────────────────────────────────────

def require_auth(f):
    """
    Decorator: require a resolved principal for the endpoint.

    The JWT middleware has already decoded the token; this only turns a
    missing principal into a 401 with the middleware's reason.
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        current_principal()
        return f(*args, **kwargs)

    return decorated
