"""
Student Project Tracker
GitHub blueprint.

Endpoints:
    POST /api/github/webhook                         — push/pull_request deliveries (no bearer token)
    POST /api/github/sync/<project_id>               — pull commits and PRs from GitHub
    GET  /api/github/commits/<project_id>            — stored commits, newest first
    GET  /api/github/pull-requests/<project_id>      — stored PRs, newest first
    GET  /api/github/contributors/<project_id>       — live contributor statistics
"""

import logging

from flask import Blueprint, current_app, request

from app.auth import current_principal, require_auth
from app.services import github_sync_service, github_webhook_service
from app.utils.errors import api_error, api_ok

logger = logging.getLogger(__name__)

github_bp = Blueprint("github", __name__, url_prefix="/api/github")


@github_bp.route("/webhook", methods=["POST"])
def webhook():
    secret = current_app.config.get("GITHUB_WEBHOOK_SECRET")
    if secret:
        signature = request.headers.get("X-Hub-Signature-256")
        if not github_webhook_service.verify_signature(secret, request.get_data(), signature):
            logger.warning("Rejected webhook with bad signature from %s", request.remote_addr)
            return api_error("Invalid signature", status=401)

    event = request.headers.get("X-GitHub-Event")
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    result = github_webhook_service.handle_event(event, payload)
    return api_ok(result, message=result["message"])


@github_bp.route("/sync/<project_id>", methods=["POST"])
@require_auth
def sync(project_id):
    result = github_sync_service.sync_project(current_principal(), project_id)
    return api_ok(result, message="GitHub data synced successfully")


@github_bp.route("/commits/<project_id>", methods=["GET"])
@require_auth
def list_commits(project_id):
    return api_ok(github_sync_service.list_commits(current_principal(), project_id))


@github_bp.route("/pull-requests/<project_id>", methods=["GET"])
@require_auth
def list_pull_requests(project_id):
    return api_ok(github_sync_service.list_pull_requests(current_principal(), project_id))


@github_bp.route("/contributors/<project_id>", methods=["GET"])
@require_auth
def list_contributors(project_id):
    return api_ok(github_sync_service.list_contributors(current_principal(), project_id))
