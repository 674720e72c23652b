from __future__ import annotations

import dataclasses
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any

from flask import jsonify, request

from ..core.exceptions import DomainError, InvalidTransitionError, NotFoundError, ValidationError
from ..logging_config import get_logger
from .datetime_utils import parse_iso_date

logger = get_logger("http")

_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    InvalidTransitionError: 409,
}


def to_json(value: Any) -> Any:
    """Dataclasses, enums and dates to plain JSON types."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k.value if isinstance(k, Enum) else k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS.items():
        if isinstance(error, cls):
            return status
    return 422


def json_view(view):
    """Run a view returning ``(payload, status)`` or a payload; map domain errors."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            out = view(*args, **kwargs)
        except DomainError as e:
            return jsonify({"error": str(e)}), status_for(e)
        except Exception:
            logger.exception("request failed", extra={"path": request.path})
            return jsonify({"error": "internal error"}), 500
        payload, status = out if isinstance(out, tuple) else (out, 200)
        return jsonify(to_json(payload)), status

    return wrapper


def body() -> dict:
    return request.get_json(silent=True) or {}


def parse_date_param(value: Any, field_name: str = "date") -> date:
    try:
        return parse_iso_date(str(value or "").strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def parse_int_param(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
