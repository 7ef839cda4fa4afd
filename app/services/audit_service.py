"""
Audit service — audit trail reads and system metrics for admins.
"""

from __future__ import annotations

import time

from sqlalchemy import func, select

from app.models import db
from app.models.audit import AuditLog
from app.models.profile import Profile
from app.models.project import Project
from app.models.tracking import Task

DEFAULT_LIMIT = 50
MAX_LIMIT = 500

# Process start reference for uptime reporting
_STARTED_AT = time.monotonic()


def list_audit_logs(limit: int | None = None) -> list[dict]:
    """Newest entries first, *limit* rows (default 50)."""
    if limit is None or limit < 1:
        limit = DEFAULT_LIMIT
    limit = min(limit, MAX_LIMIT)
    rows = AuditLog.query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()
    return [r.to_dict() for r in rows]


def _count(model) -> int:
    return db.session.execute(select(func.count()).select_from(model)).scalar_one()


def system_metrics() -> dict:
    return {
        "users": _count(Profile),
        "projects": _count(Project),
        "tasks": _count(Task),
        "status": "Operational",
        "uptime": round(time.monotonic() - _STARTED_AT, 1),
    }
