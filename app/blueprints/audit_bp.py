"""
Student Project Tracker
Audit blueprint (admin only).

Endpoints:
    GET /api/audit           — recent audit entries (?limit=, default 50, max 500)
    GET /api/audit/metrics   — entity counts and uptime
"""

from flask import Blueprint, request

from app.middleware.permission_required import require_permission
from app.services import audit_service
from app.utils.errors import api_ok

audit_bp = Blueprint("audit", __name__, url_prefix="/api/audit")


@audit_bp.route("", methods=["GET"])
@require_permission("audit.view")
def list_audit_logs():
    limit = request.args.get("limit", type=int)
    return api_ok(audit_service.list_audit_logs(limit))


@audit_bp.route("/metrics", methods=["GET"])
@require_permission("audit.view")
def metrics():
    return api_ok(audit_service.system_metrics())
