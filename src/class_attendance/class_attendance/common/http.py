from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)

_NO_DATA = object()


def ok(data: Any = _NO_DATA, *, message: Optional[str] = None, status: int = 200, **extra: Any):
    body: dict = {"success": True}
    if message:
        body["message"] = message
    if data is not _NO_DATA:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def json_endpoint(view):
    """Map domain errors to their HTTP status; anything else is a logged 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            if e.http_status >= 500:
                logger.error("%s %s failed: %s", request.method, request.path, e)
                return fail("A storage error occurred, please try again", e.http_status)
            return fail(str(e), e.http_status)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.path)
            return fail("Internal server error", 500)

    return wrapper
