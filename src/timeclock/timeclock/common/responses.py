from __future__ import annotations

from typing import Any, Tuple

from flask import Response, jsonify

from ..core.exceptions import DomainError, IngestionError, NotFoundError


def ok(payload: Any = None, status: int = 200) -> Tuple[Response, int]:
    body = {"ok": True}
    if payload is not None:
        body["data"] = payload
    return jsonify(body), status


def error_response(exc: DomainError) -> Tuple[Response, int]:
    """ValidationError -> 400, NotFoundError -> 404, oversized upload -> 413."""
    status = 400
    if isinstance(exc, NotFoundError):
        status = 404
    elif isinstance(exc, IngestionError) and exc.too_large:
        status = 413
    return jsonify({"ok": False, "error": str(exc)}), status
