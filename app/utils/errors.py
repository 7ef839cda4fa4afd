"""Standardised API responses.

Every endpoint answers with the same envelope::

    {"success": true,  "data": ..., "message": "..."}
    {"success": false, "error": "...", "details": {...}}

Usage
-----
    from app.utils.errors import api_ok, api_error

    return api_ok(project.to_dict(), status=201)
    return api_error("Project not found", status=404)

Services raise :mod:`app.core.exceptions` errors; the handlers installed by
:func:`register_error_handlers` turn them into ``api_error`` responses.
"""

from __future__ import annotations

import logging

import pydantic
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from app.core.exceptions import AppError

logger = logging.getLogger(__name__)


def api_ok(data=None, *, status: int = 200, message: str | None = None):
    """Return a success envelope.

    Parameters
    ----------
    data : Any
        JSON-serialisable payload placed under ``data``.
    status : int
        HTTP status code (``201`` for creates).
    message : str, optional
        Human-readable confirmation, e.g. for deletes.
    """
    body: dict = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return jsonify(body), status


def api_error(message: str, *, status: int = 400, details: dict | list | None = None):
    """Return a failure envelope.

    Returns
    -------
    tuple[Response, int]
        ``(jsonify(body), http_status)`` – drop-in for Flask views.
    """
    body: dict = {"success": False, "error": message}
    if details:
        body["details"] = details
    return jsonify(body), status


def _pydantic_details(error: pydantic.ValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
        for e in error.errors(include_url=False, include_context=False, include_input=False)
    ]


def register_error_handlers(app):
    """Install app-wide handlers for the exception hierarchy."""

    @app.errorhandler(AppError)
    def _handle_app_error(error: AppError):
        if error.status_code >= 500:
            logger.error("%s on %s %s: %s", type(error).__name__,
                         request.method, request.path, error)
        else:
            logger.info("%s on %s %s: %s", type(error).__name__,
                        request.method, request.path, error)
        return api_error(error.message, status=error.status_code, details=error.details)

    @app.errorhandler(pydantic.ValidationError)
    def _handle_schema_error(error: pydantic.ValidationError):
        return api_error("Validation failed", status=400, details=_pydantic_details(error))

    @app.errorhandler(HTTPException)
    def _handle_http_error(error: HTTPException):
        return api_error(error.description or error.name, status=error.code or 500)

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        logger.exception("Unexpected error endpoint=%s", request.endpoint)
        return api_error("Internal server error", status=500)
