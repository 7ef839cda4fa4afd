"""
Rate limiting configuration.

Applies per-blueprint limits using Flask-Limiter.  The Limiter instance is
created in app/__init__.py with no default limits; this module attaches
limits per route category, keyed by remote address.

Usage:
    from app.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)

# Blueprint name -> limit string
BLUEPRINT_LIMITS = {
    "github": "10/minute",
    "users": "60/minute",
    "auth": "60/minute",
    "projects": "120/minute",
    "tasks": "120/minute",
    "milestones": "120/minute",
    "teams": "120/minute",
    "evaluations": "120/minute",
    "audit": "60/minute",
}

EXEMPT_BLUEPRINTS = ("health_bp",)


def init_rate_limits(app, limiter):
    """Attach BLUEPRINT_LIMITS; disabled entirely when TESTING is set."""
    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    for bp_name, limit in BLUEPRINT_LIMITS.items():
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(limit)(bp)

    for bp_name in EXEMPT_BLUEPRINTS:
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.exempt(bp)

    logger.info("Rate limits applied to %d blueprints", len(BLUEPRINT_LIMITS))
