"""
GitHub webhook service — push-path ingestion of repository events.

Deliveries are unauthenticated by bearer token.  When GITHUB_WEBHOOK_SECRET
is configured the X-Hub-Signature-256 HMAC is verified first.

Events:
    push          every commit in the payload is upserted (id → sha)
    pull_request  the PR is upserted with status taken from "state" as sent
    anything else acknowledged and ignored

Pull request deliveries do not look at merged_at, so a merged PR is stored
as "closed" until the next pull sync rewrites it as "merged".
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from app.models.project import Project
from app.services.github_sync_service import store_commit, store_pull_request

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="


def verify_signature(secret: str, body: bytes, signature_header: str | None) -> bool:
    """Check a GitHub ``X-Hub-Signature-256`` header against *body*."""
    if not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        return False
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature_header[len(SIGNATURE_PREFIX):])


def handle_event(event: str | None, payload: dict) -> dict:
    """Apply one webhook delivery.  Never raises for unknown repositories.

    Returns:
        {"message": str, "project_id": str | None, "stored": int}
    """
    repository = payload.get("repository")
    repo_url = repository.get("url") if isinstance(repository, dict) else None
    if not repo_url:
        return {"message": "No repository in payload", "project_id": None, "stored": 0}

    project = Project.query.filter_by(github_repo_url=repo_url).first()
    if project is None:
        logger.info("Webhook %s for unknown repository %s ignored", event, repo_url)
        return {"message": "Project not found for this repository", "project_id": None, "stored": 0}

    project_id = project.id
    stored = 0
    if event == "push":
        commits = payload.get("commits")
        for commit in commits if isinstance(commits, list) else []:
            if isinstance(commit, dict) and store_commit(
                project_id,
                sha=commit.get("id"),
                message=commit.get("message"),
                author=(commit.get("author") or {}).get("name"),
                timestamp=commit.get("timestamp"),
            ):
                stored += 1
    elif event == "pull_request":
        pr = payload.get("pull_request")
        if isinstance(pr, dict) and store_pull_request(
            project_id,
            pr_number=pr.get("number"),
            title=pr.get("title"),
            status=pr.get("state") or "open",
            author=(pr.get("user") or {}).get("login"),
            created_at=pr.get("created_at"),
            updated_at=pr.get("updated_at"),
        ):
            stored += 1
    else:
        logger.debug("Webhook event %s ignored", event)

    logger.info("Webhook %s for project %s stored %d rows", event, project_id, stored)
    return {"message": "Webhook processed successfully", "project_id": project_id, "stored": stored}
