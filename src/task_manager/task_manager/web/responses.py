from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

UNAUTHORIZED = "Unauthorized"
FORBIDDEN = "Forbidden"
INTERNAL_ERROR = "Internal server error"


def json_error(message: str, status: int):
    return jsonify({"error": message}), status


def json_message(message: str, status: int = 200, **fields):
    return jsonify({**fields, "message": message}), status


def status_for(error: Exception) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    return 500


def register_error_handlers(app: Flask) -> None:
    """Map domain errors onto JSON responses.

    Auth failures get fixed texts so callers cannot probe why a token was
    refused; everything unexpected is logged and reported as a 500.
    """

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        status = status_for(e)
        if status == 401:
            logger.info("Authentication failed: %s", e)
            return json_error(UNAUTHORIZED, 401)
        if status == 403:
            logger.info("Authorization failed: %s", e)
            return json_error(FORBIDDEN, 403)
        if status == 500:
            logger.exception("Service failure")
            return json_error(INTERNAL_ERROR, 500)
        return json_error(str(e), status)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return json_error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error")
        return json_error(INTERNAL_ERROR, 500)
