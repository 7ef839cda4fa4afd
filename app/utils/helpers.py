"""Shared utility functions for services and blueprints.

get_or_404:       primary-key fetch that raises NotFoundError
parse_date:       lenient ISO date parser (None on bad input)
parse_timestamp:  GitHub ISO-8601 timestamps ("...Z") to aware datetimes
commit_or_raise:  commit, mapping IntegrityError to ConflictError
apply_changes:    partial update from a pydantic dump
parse_body:       request JSON through a pydantic schema
"""
import logging
from datetime import date, datetime, timezone

from flask import request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from app.models import db

logger = logging.getLogger(__name__)


def get_or_404(model, pk, label=None):
    """Fetch a model instance by primary key or raise NotFoundError."""
    label = label or model.__name__
    obj = db.session.get(model, pk)
    if obj is None:
        raise NotFoundError(resource=label, resource_id=pk)
    return obj


def parse_date(value):
    """Parse a date string (ISO date or ISO datetime) to a date object.

    Returns None for empty/invalid input.
    """
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        return None


def parse_timestamp(value):
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable timestamp %r", value)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ── Database commit helper ───────────────────────────────────────────────────

def commit_or_raise(resource: str = "Record", field: str = "key", value: str | None = None):
    """Commit the current session or roll back and raise.

    IntegrityError   → ConflictError (duplicate / constraint violation)
    SQLAlchemyError  → InternalError
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit: %s", exc.orig)
        raise ConflictError(resource, field, value) from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Database error on commit")
        raise InternalError("Database error") from exc


def parse_body(schema):
    """Validate the JSON request body against a pydantic model.

    pydantic.ValidationError propagates and is rendered as 400 by the
    app-wide handler.
    """
    return schema.model_validate(request.get_json(silent=True) or {})


def apply_changes(obj, changes: dict, *, required: tuple[str, ...] = ()) -> None:
    """Copy *changes* onto *obj*; fields listed in *required* may not be nulled."""
    nulled = [f for f in required if f in changes and changes[f] is None]
    if nulled:
        raise ValidationError(
            f"{nulled[0]} cannot be null",
            details={f: "cannot be null" for f in nulled},
        )
    for field, value in changes.items():
        setattr(obj, field, value)
