"""
GitHub sync service — mirrors commits and pull requests into the store.

Two writers share one sink (store_commit / store_pull_request):
  - pull path: sync_project() fetches from the GitHub API on request
  - push path: app.services.github_webhook_service on webhook delivery

Both upsert on the same natural keys, (project_id, sha) for commits and
(project_id, pr_number) for pull requests, so replays and overlapping runs
converge instead of duplicating rows.

Rules:
  - Each row is committed on its own; a failing row is rolled back, logged
    and left out of the returned count, the rest of the batch continues.
  - A failed fetch (bad URL, HTTP error, network error) aborts the sync with
    UpstreamError before anything is written for that resource.
  - No retries.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from sqlalchemy.exc import SQLAlchemyError

from app.auth import Principal
from app.core.exceptions import UpstreamError, ValidationError
from app.integrations.github_gateway import github_gateway, parse_repo_url
from app.models import db
from app.models.github import GitHubCommit, GitHubPullRequest
from app.services import access_scope
from app.services.helpers.upsert import upsert_row
from app.utils.helpers import parse_timestamp

logger = logging.getLogger(__name__)

LIST_LIMIT = 100


def _repo_coordinates(repo_url: str | None) -> tuple[str, str]:
    coords = parse_repo_url(repo_url)
    if coords is None:
        raise UpstreamError(f"Invalid GitHub repository URL: {repo_url!r}")
    return coords


def _fetch_list(result, what: str) -> list:
    if not result.ok:
        raise UpstreamError(f"Failed to fetch {what} from GitHub: {result.error}")
    if not isinstance(result.data, list):
        raise UpstreamError(f"Unexpected {what} payload from GitHub")
    return result.data


# ── Shared sink ──────────────────────────────────────────────────────────────

def store_commit(project_id: str, *, sha: str, message, author, timestamp) -> bool:
    """Upsert one commit and commit the transaction.

    Returns True when the row was written, False when the store refused it.
    """
    try:
        upsert_row(
            GitHubCommit,
            {
                "project_id": project_id,
                "sha": sha,
                "message": message,
                "author": author,
                "timestamp": parse_timestamp(timestamp),
            },
            conflict_keys=("project_id", "sha"),
        )
        db.session.commit()
        return True
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to store commit %s for project %s", sha, project_id)
        return False


def store_pull_request(
    project_id: str, *, pr_number: int, title, status: str, author, created_at, updated_at,
) -> bool:
    """Upsert one pull request and commit the transaction."""
    try:
        upsert_row(
            GitHubPullRequest,
            {
                "project_id": project_id,
                "pr_number": pr_number,
                "title": title,
                "status": status,
                "author": author,
                "created_at": parse_timestamp(created_at),
                "updated_at": parse_timestamp(updated_at),
            },
            conflict_keys=("project_id", "pr_number"),
        )
        db.session.commit()
        return True
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to store PR #%s for project %s", pr_number, project_id)
        return False


def pull_request_status(pr: dict) -> str:
    """A merged PR reports state "closed"; merged_at is what marks it merged."""
    if pr.get("merged_at"):
        return "merged"
    return pr.get("state") or "open"


# ── Pull path ────────────────────────────────────────────────────────────────

def sync_commits(project_id: str, repo_url: str) -> int:
    """Fetch up to 100 recent commits and upsert them.  Returns rows stored."""
    owner, repo = _repo_coordinates(repo_url)
    commits = _fetch_list(github_gateway.list_commits(owner, repo), "commits")

    stored = 0
    for item in commits:
        commit = item.get("commit") or {}
        author = commit.get("author") or {}
        if store_commit(
            project_id,
            sha=item.get("sha"),
            message=commit.get("message"),
            author=author.get("name"),
            timestamp=author.get("date"),
        ):
            stored += 1
    logger.info("Synced %d/%d commits for project %s", stored, len(commits), project_id)
    return stored


def sync_pull_requests(project_id: str, repo_url: str) -> int:
    """Fetch up to 100 pull requests (any state) and upsert them."""
    owner, repo = _repo_coordinates(repo_url)
    pulls = _fetch_list(github_gateway.list_pull_requests(owner, repo), "pull requests")

    stored = 0
    for pr in pulls:
        if store_pull_request(
            project_id,
            pr_number=pr.get("number"),
            title=pr.get("title"),
            status=pull_request_status(pr),
            author=(pr.get("user") or {}).get("login"),
            created_at=pr.get("created_at"),
            updated_at=pr.get("updated_at"),
        ):
            stored += 1
    logger.info("Synced %d/%d pull requests for project %s", stored, len(pulls), project_id)
    return stored


def sync_project(principal: Principal, project_id: str) -> dict:
    """Reconcile a project's commits and pull requests with GitHub.

    Raises:
        NotFoundError: unknown project.
        AuthorizationError: the project is outside the principal's scope.
        ValidationError: the project has no repository URL.
        UpstreamError: the URL is not a GitHub repository or a fetch failed.
    """
    project = access_scope.load_visible_project(principal, project_id)
    if not project.github_repo_url:
        raise ValidationError("Project has no GitHub repository configured")

    repo_url = project.github_repo_url
    commits = sync_commits(project_id, repo_url)
    pull_requests = sync_pull_requests(project_id, repo_url)
    return {"commits_synced": commits, "pull_requests_synced": pull_requests}


# ── Contributors ─────────────────────────────────────────────────────────────

def contributor_stats(repo_url: str) -> list[dict]:
    """Per-author contributions with additions/deletions, most active first.

    While GitHub is still computing statistics (202, non-list body) the plain
    contributors list is used instead, with zero additions/deletions.
    """
    owner, repo = _repo_coordinates(repo_url)
    stats = github_gateway.contributor_stats(owner, repo)
    if not stats.ok:
        raise UpstreamError(f"Failed to fetch contributor stats from GitHub: {stats.error}")

    if not isinstance(stats.data, list):
        contributors = _fetch_list(github_gateway.list_contributors(owner, repo), "contributors")
        result = [
            {
                "login": c.get("login"),
                "avatar_url": c.get("avatar_url"),
                "contributions": c.get("contributions", 0),
                "additions": 0,
                "deletions": 0,
            }
            for c in contributors
        ]
    else:
        result = []
        for entry in stats.data:
            totals = defaultdict(int)
            for week in entry.get("weeks") or []:
                totals["a"] += week.get("a", 0)
                totals["d"] += week.get("d", 0)
            author = entry.get("author") or {}
            result.append({
                "login": author.get("login"),
                "avatar_url": author.get("avatar_url"),
                "contributions": entry.get("total", 0),
                "additions": totals["a"],
                "deletions": totals["d"],
            })

    result.sort(key=lambda c: c["contributions"], reverse=True)
    return result


# ── Reads ────────────────────────────────────────────────────────────────────

def list_commits(principal: Principal, project_id: str) -> list[dict]:
    access_scope.load_visible_project(principal, project_id)
    rows = (
        GitHubCommit.query.filter_by(project_id=project_id)
        .order_by(GitHubCommit.timestamp.desc())
        .limit(LIST_LIMIT)
        .all()
    )
    return [r.to_dict() for r in rows]


def list_pull_requests(principal: Principal, project_id: str) -> list[dict]:
    access_scope.load_visible_project(principal, project_id)
    rows = (
        GitHubPullRequest.query.filter_by(project_id=project_id)
        .order_by(GitHubPullRequest.created_at.desc())
        .limit(LIST_LIMIT)
        .all()
    )
    return [r.to_dict() for r in rows]


def list_contributors(principal: Principal, project_id: str) -> list[dict]:
    project = access_scope.load_visible_project(principal, project_id)
    if not project.github_repo_url:
        raise ValidationError("Project has no GitHub repository configured")
    return contributor_stats(project.github_repo_url)
