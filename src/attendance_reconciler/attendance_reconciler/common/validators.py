from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_hhmm(value: str, field_name: str) -> str:
    """Validate a 24-hour ``HH:MM`` time string."""
    v = (value or "").strip()
    if not _HHMM_RE.match(v):
        raise ValidationError(f"{field_name} must be a valid time (HH:MM)")
    return v


def optional_hhmm(value: Optional[str], field_name: str) -> Optional[str]:
    """Blank means "not supplied"; anything else must be ``HH:MM``."""
    if value is None or not str(value).strip():
        return None
    return require_hhmm(str(value), field_name)
