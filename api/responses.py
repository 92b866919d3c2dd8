"""
Uniform response envelope:
    {datetime, info, misc, request, status} plus optional data
"""
from __future__ import annotations

import time
from typing import Any, Callable, Optional, Tuple

from flask import jsonify, request
from marshmallow import Schema, ValidationError

from models.schemas.common import split_validation_errors
from services.results import ErrorKind, Result

OK = "OK"
NO_ADDITIONAL_INFORMATION = "NO_ADDITIONAL_INFORMATION"


def _request_label() -> str:
    path = request.full_path.rstrip("?") if request.query_string else request.path
    return f"{path} [{request.method}]"


def envelope(status: int, info: str, data: Any = None, misc: str = NO_ADDITIONAL_INFORMATION):
    body = {
        "datetime": int(time.time() * 1000),
        "info": info,
        "misc": misc,
        "request": _request_label(),
        "status": status,
    }
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def ok(data: Any = None):
    return envelope(200, OK, data)


def failure(kind: ErrorKind, details: Optional[dict] = None):
    return envelope(kind.status, kind.value, details)


def from_result(result: Result, serialize: Optional[Callable[[Any], Any]] = None):
    if not result.ok:
        return failure(result.error, result.details)
    if serialize is None:
        return ok()
    return ok(serialize(result.data))


def load_body(schema: Schema) -> Tuple[Optional[dict], Optional[tuple]]:
    """
    Validate the JSON body with a marshmallow schema.
    Returns (data, None) or (None, response) with MISSING_DATA / INVALID_DATA.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    try:
        return schema.load(payload), None
    except ValidationError as err:
        missing, invalid = split_validation_errors(err.messages)
        if missing:
            return None, failure(ErrorKind.MISSING_DATA, {"missing": missing})
        return None, failure(ErrorKind.INVALID_DATA, {"invalid": invalid})
