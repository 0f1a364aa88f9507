"""Standardized JSON response helpers."""

from __future__ import annotations

from typing import Any, Mapping

from flask import Response, jsonify

from .errors import AppError
from .logging import get_logger

logger = get_logger("responses")


def ok(data: Any, *, status: int = 200) -> Response:
    """Return a success envelope."""

    response = jsonify({"success": True, "data": data})
    response.status_code = status
    return response


def fail(error: AppError | Mapping[str, Any], *, status: int | None = None) -> Response:
    """Return a standardized failure envelope."""

    if isinstance(error, AppError):
        body = error.to_dict()
        status = status or error.status_code
    else:
        body = dict(error)
        status = status or 400
    logger.debug("request failed with %s: %s", status, body.get("code"))
    response = jsonify({"success": False, "error": body})
    response.status_code = status
    return response


__all__ = ["ok", "fail"]
