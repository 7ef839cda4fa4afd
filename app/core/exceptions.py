"""
Application-wide exception hierarchy.

Services raise these; the handlers registered in app.utils.errors render
them as the standard ``{"success": false, "error": ...}`` envelope with the
``status_code`` carried by each class.  Blueprints never catch them.

Usage:
    from app.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Project", resource_id=project_id)
    raise ValidationError("mentor_id is required", details={"mentor_id": "missing"})
"""


class AppError(Exception):
    """Base class for every error that maps to an HTTP response."""

    status_code = 500

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppError):
    """Input was well-formed JSON but violated a business rule.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown; keys are field names.
    """

    status_code = 400


class AuthenticationError(AppError):
    """No principal could be resolved: missing, invalid or expired token,
    unknown profile, or a deactivated account."""

    status_code = 401

    def __init__(self, message: str = "Authentication required", details: dict | None = None) -> None:
        super().__init__(message, details)


class AuthorizationError(AppError):
    """The principal is known but not allowed to perform the operation.

    Distinct from NotFoundError: single-entity reads fetch first, so a
    403 tells the caller the row exists and is outside their scope.
    """

    status_code = 403

    def __init__(self, message: str = "Insufficient permissions", details: dict | None = None) -> None:
        super().__init__(message, details)


class NotFoundError(AppError):
    """Raised when a requested resource does not exist.

    Args:
        resource: Human-readable entity name (e.g. "Project", "Team").
        resource_id: The key that was looked up. Logged, not rendered.
    """

    status_code = 404

    def __init__(self, resource: str, resource_id: str | int | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")

    def __str__(self) -> str:
        if self.resource_id is not None:
            return f"{self.resource} id={self.resource_id} not found"
        return self.message


class ConflictError(AppError):
    """Raised when a write would duplicate a unique key.

    Args:
        resource: Model name.
        field: The unique field (or composite key) that would be duplicated.
        value: The conflicting value.
    """

    status_code = 400

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} with {field}={value!r} already exists")


class UpstreamError(AppError):
    """An external dependency (GitHub, identity provider) failed or
    returned something unusable."""

    status_code = 424


class InternalError(AppError):
    """Unexpected store failure surfaced to the caller."""

    status_code = 500
