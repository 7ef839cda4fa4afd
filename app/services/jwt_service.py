"""
JWT Service — verification of identity-provider access tokens.

Tokens are issued by the identity provider (Supabase Auth), never by this
service.  Verification only:

Algorithm:  HS256, shared secret SUPABASE_JWT_SECRET
Audience:   "authenticated"

Token payload (subset used here):
{
    "sub": <profile uuid>,
    "email": <email>,
    "aud": "authenticated",
    "exp": <expires_at>
}
"""

import jwt
from flask import current_app

ALGORITHM = "HS256"
DEFAULT_AUDIENCE = "authenticated"


def _get_secret():
    """Get the JWT verification secret from app config."""
    return current_app.config.get("SUPABASE_JWT_SECRET") or current_app.config["SECRET_KEY"]


def decode_access_token(token: str) -> dict:
    """
    Decode and verify an access token.

    Returns the payload dict on success.
    Raises jwt.exceptions on failure (ExpiredSignatureError, InvalidTokenError, etc.)
    """
    payload = jwt.decode(
        token,
        _get_secret(),
        algorithms=[ALGORITHM],
        audience=current_app.config.get("JWT_AUDIENCE", DEFAULT_AUDIENCE),
        options={"require": ["sub", "exp"]},
    )
    if not payload.get("sub"):
        raise jwt.InvalidTokenError("Token has no subject")
    return payload
