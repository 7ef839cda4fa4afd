"""
JWT Auth Middleware — resolves the request principal from the Bearer token.

For every /api/ request outside JWT_SKIP_PREFIXES:
  1. Decode the identity-provider token  →  g.jwt_claims
  2. Load the matching profile           →  g.principal (id, email, role)

The hook never rejects a request itself.  When resolution fails it stores
the reason in g.auth_error and leaves g.principal unset; endpoints decorated
with require_auth / require_permission then answer 401.
"""

import logging

import jwt as pyjwt
from flask import g, request

from app.auth import Principal
from app.models import db
from app.models.profile import Profile
from app.services.jwt_service import decode_access_token

logger = logging.getLogger(__name__)

# Paths that skip JWT auth entirely
JWT_SKIP_PREFIXES = (
    "/api/health",
    "/api/github/webhook",
)


def init_jwt_middleware(app):
    """Register JWT middleware as a before_request hook."""

    @app.before_request
    def _jwt_auth():
        g.principal = None
        g.jwt_claims = None
        g.auth_error = None

        path = request.path
        if not path.startswith("/api/") or request.method == "OPTIONS":
            return
        for prefix in JWT_SKIP_PREFIXES:
            if path.startswith(prefix):
                return

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            g.auth_error = "No token provided"
            return

        token = auth_header[7:]  # Strip "Bearer "

        try:
            claims = decode_access_token(token)
        except pyjwt.ExpiredSignatureError:
            g.auth_error = "Token has expired"
            return
        except pyjwt.InvalidTokenError as exc:
            logger.info("Rejected token on %s: %s", path, exc)
            g.auth_error = "Invalid token"
            return

        g.jwt_claims = claims
        profile = db.session.get(Profile, claims["sub"])
        if profile is None:
            g.auth_error = "User profile not found"
            return
        if not profile.is_active:
            g.auth_error = "Account is deactivated"
            return

        g.principal = Principal(
            id=profile.id,
            email=profile.email or claims.get("email", ""),
            role=profile.role,
        )
