from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ..core.constants import LOCAL_TZ


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time (fixed UTC-3), naive.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(LOCAL_TZ).replace(tzinfo=None)


def today_local() -> date:
    return now_local().date()


def previous_day(value: date) -> date:
    return value - timedelta(days=1)


def millis_to_local_datetime(millis: int) -> datetime:
    return datetime.fromtimestamp(int(millis) / 1000, tz=LOCAL_TZ)


def millis_to_hhmm(millis: int) -> str:
    """Convert an epoch-millisecond timestamp to a local ``HH:MM`` string."""
    return millis_to_local_datetime(millis).strftime("%H:%M")


def time_to_minutes(value: str) -> int:
    """Minutes since midnight for ``HH:MM`` or ``HH:MM:SS`` (seconds ignored)."""
    parts = value.split(":")
    return int(parts[0]) * 60 + int(parts[1])


def minutes_to_hhmm(minutes: int) -> str:
    minutes = int(minutes) % (24 * 60)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_minutes(minutes: Optional[int]) -> str:
    """Format minutes as "Xh Ymin" for messages."""
    if minutes is None:
        return "-"
    abs_minutes = abs(int(minutes))
    hours, mins = divmod(abs_minutes, 60)
    if hours == 0:
        return f"{mins}min"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}min"
