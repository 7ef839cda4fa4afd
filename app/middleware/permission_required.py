"""
Permission Decorators — role-table checks for route protection.

Usage:
    @bp.route("/projects", methods=["POST"])
    @require_permission("projects.create")
    def create_project():
        ...

The decorator resolves the principal first (401 when absent), then checks
the role table in app.services.permission_service (403 when denied).
Relational conditions stay in the services.
"""

import functools
import logging

from app.auth import current_principal
from app.core.exceptions import AuthorizationError
from app.services.permission_service import has_permission

logger = logging.getLogger(__name__)


def require_permission(codename: str):
    """
    Decorator: require the principal's role to allow a specific operation.

    Args:
        codename: Operation codename, e.g. "projects.create"
    """
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            principal = current_principal()
            if not has_permission(principal, codename):
                logger.warning(
                    "User %s (%s) denied: '%s' on %s",
                    principal.id, principal.role, codename, f.__name__,
                )
                raise AuthorizationError("Insufficient permissions")
            return f(*args, **kwargs)
        return decorated
    return decorator
