"""
GitHub REST API Gateway.

All outbound HTTP calls to api.github.com go through this class.

  - Bearer token injected when GITHUB_TOKEN is configured (public repos
    work anonymously at a lower rate limit)
  - Timeout: 30 s per call
  - No retries: one failed fetch aborts the sync that asked for it
  - Structured GatewayResult returned; the gateway never raises

Testability: pass a mock `session` to GitHubGateway() in tests, or patch
the module-level `github_gateway` singleton.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any

import requests
from flask import current_app, has_app_context

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
_DEFAULT_TIMEOUT = 30
PAGE_SIZE = 100

_REPO_URL_RE = re.compile(r"github\.com/([^/]+)/([^/?#]+)")


def parse_repo_url(url: str | None) -> tuple[str, str] | None:
    """Extract ``(owner, repo)`` from a GitHub repository URL.

    Accepts https URLs, with or without a ``.git`` suffix or trailing path.  Returns None when
    the URL does not name a GitHub repository.
    """
    if not url:
        return None
    match = _REPO_URL_RE.search(url)
    if not match:
        return None
    owner, repo = match.group(1), match.group(2)
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not owner or not repo:
        return None
    return owner, repo


class GatewayResult:
    """Structured return value from GitHubGateway calls.

    Attributes:
        ok:          True if the call succeeded (HTTP 2xx + no exception).
        status_code: HTTP status code (None if network-level failure).
        data:        Parsed JSON response body (dict or list), else None.
        error:       Human-readable error message or None.
        duration_ms: Round-trip latency in milliseconds.
    """

    def __init__(
        self,
        ok: bool,
        status_code: int | None,
        data: dict | list | None,
        error: str | None,
        duration_ms: int,
    ) -> None:
        self.ok = ok
        self.status_code = status_code
        self.data = data
        self.error = error
        self.duration_ms = duration_ms

    def __repr__(self) -> str:
        return f"<GatewayResult ok={self.ok} status={self.status_code} error={self.error!r}>"


class GitHubGateway:
    """GitHub REST API v3 gateway.

    Instantiate once at module level (module-level singleton pattern).

    Usage:
        from app.integrations.github_gateway import github_gateway
        result = github_gateway.list_commits("octocat", "hello-world")
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        api_url: str | None = None,
        token: str | None = None,
    ) -> None:
        self._session: requests.Session | None = session
        self._api_url = api_url
        self._token = token

    # ── Configuration ────────────────────────────────────────────────────────

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @property
    def api_url(self) -> str:
        if self._api_url:
            return self._api_url.rstrip("/")
        if has_app_context():
            return (current_app.config.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        return DEFAULT_API_URL

    @property
    def token(self) -> str | None:
        if self._token:
            return self._token
        if has_app_context():
            return current_app.config.get("GITHUB_TOKEN") or None
        return None

    def _headers(self) -> dict:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    # ── Core request dispatcher ──────────────────────────────────────────────

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        timeout: int = _DEFAULT_TIMEOUT,
    ) -> GatewayResult:
        """Execute one request against the GitHub API.

        Returns:
            GatewayResult — always returns (never raises). Callers check .ok.
        """
        url = f"{self.api_url}{path}"
        kwargs: dict[str, Any] = {"headers": self._headers(), "timeout": timeout}
        if params:
            kwargs["params"] = params

        t0 = time.perf_counter()
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.Timeout:
            logger.warning("GitHub request timed out url=%s", url)
            return GatewayResult(
                ok=False, status_code=None, data=None,
                error=f"Request timed out after {timeout}s",
                duration_ms=int(timeout * 1000),
            )
        except requests.RequestException as exc:
            logger.warning("GitHub network error url=%s error=%s", url, exc)
            return GatewayResult(
                ok=False, status_code=None, data=None,
                error=str(exc)[:500], duration_ms=0,
            )

        duration_ms = int((time.perf_counter() - t0) * 1000)
        if not resp.ok:
            logger.warning(
                "GitHub request failed status=%d url=%s (%dms)",
                resp.status_code, url, duration_ms,
            )
            return GatewayResult(
                ok=False, status_code=resp.status_code, data=None,
                error=f"HTTP {resp.status_code}: {resp.text[:500]}",
                duration_ms=duration_ms,
            )

        try:
            data = resp.json() if resp.content else None
        except ValueError:
            data = None
        logger.debug("GitHub %s %s → %d (%dms)", method, path, resp.status_code, duration_ms)
        return GatewayResult(
            ok=True, status_code=resp.status_code, data=data,
            error=None, duration_ms=duration_ms,
        )

    # ── GitHub specific operations ───────────────────────────────────────────

    def list_commits(self, owner: str, repo: str) -> GatewayResult:
        """Most recent commits on the default branch (one page of 100)."""
        return self.request(
            "GET", f"/repos/{owner}/{repo}/commits", params={"per_page": PAGE_SIZE},
        )

    def list_pull_requests(self, owner: str, repo: str) -> GatewayResult:
        """Open and closed pull requests (one page of 100)."""
        return self.request(
            "GET", f"/repos/{owner}/{repo}/pulls",
            params={"state": "all", "per_page": PAGE_SIZE},
        )

    def contributor_stats(self, owner: str, repo: str) -> GatewayResult:
        """Weekly additions/deletions per author.

        GitHub answers 202 with an empty body while it computes the
        statistics; callers treat a non-list payload as "not ready".
        """
        return self.request("GET", f"/repos/{owner}/{repo}/stats/contributors")

    def list_contributors(self, owner: str, repo: str) -> GatewayResult:
        """Contributors with commit counts only."""
        return self.request("GET", f"/repos/{owner}/{repo}/contributors")


# Module-level singleton, patched in tests.
github_gateway = GitHubGateway()
