"""
Identity Provider Gateway.

Wraps the Supabase Auth admin API.  Used only by the admin user-creation
flow; sign-in, sign-up and token refresh happen between the client and the
identity provider directly.

Testability: pass a mock `session` to IdentityGateway() in tests, or patch
the module-level `identity_gateway` singleton.
"""

from __future__ import annotations

import logging
import time

import requests
from flask import current_app

from app.integrations.github_gateway import GatewayResult

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 15


class IdentityGateway:
    """Supabase Auth admin API gateway."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session: requests.Session | None = session

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def create_user(self, *, email: str, password: str, name: str) -> GatewayResult:
        """Create a confirmed account and return the provider's user object.

        Returns:
            GatewayResult with ``data["id"]`` on success.
        """
        base_url = (current_app.config.get("SUPABASE_URL") or "").rstrip("/")
        service_key = current_app.config.get("SUPABASE_SERVICE_ROLE_KEY")
        if not base_url or not service_key:
            return GatewayResult(
                ok=False, status_code=None, data=None,
                error="Identity provider is not configured", duration_ms=0,
            )

        url = f"{base_url}/auth/v1/admin/users"
        headers = {
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Content-Type": "application/json",
        }
        body = {
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": {"name": name},
        }

        t0 = time.perf_counter()
        try:
            resp = self.session.post(url, json=body, headers=headers, timeout=_DEFAULT_TIMEOUT)
        except requests.RequestException as exc:
            logger.warning("Identity provider unreachable: %s", exc)
            return GatewayResult(
                ok=False, status_code=None, data=None,
                error=str(exc)[:500], duration_ms=0,
            )
        duration_ms = int((time.perf_counter() - t0) * 1000)

        try:
            data = resp.json() if resp.content else {}
        except ValueError:
            data = {}

        if not resp.ok:
            message = ""
            if isinstance(data, dict):
                message = data.get("msg") or data.get("message") or data.get("error_description") or ""
            logger.warning("Identity provider rejected user creation status=%d", resp.status_code)
            return GatewayResult(
                ok=False, status_code=resp.status_code, data=None,
                error=message or f"HTTP {resp.status_code}",
                duration_ms=duration_ms,
            )

        # Some provider versions wrap the user object
        if isinstance(data, dict) and "user" in data and isinstance(data["user"], dict):
            data = data["user"]
        return GatewayResult(
            ok=True, status_code=resp.status_code, data=data,
            error=None, duration_ms=duration_ms,
        )


# Module-level singleton, patched in tests.
identity_gateway = IdentityGateway()
