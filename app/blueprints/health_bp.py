"""
Health check blueprint.

Endpoints:
    GET /api/health  — liveness plus database round-trip (no auth, not rate limited)
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from app.models import db

logger = logging.getLogger(__name__)

health_bp = Blueprint("health_bp", __name__, url_prefix="/api")


@health_bp.route("/health", methods=["GET"])
def health():
    checks = {}
    try:
        t0 = time.perf_counter()
        db.session.execute(db.text("SELECT 1"))
        checks["database"] = {"status": "ok", "latency_ms": round((time.perf_counter() - t0) * 1000, 1)}
        status = 200
    except SQLAlchemyError as exc:
        logger.error("Health check database failure: %s", exc)
        checks["database"] = {"status": "error", "detail": str(exc)}
        status = 503

    return jsonify({
        "status": "ok" if status == 200 else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }), status
