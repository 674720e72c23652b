"""Minimal five-field cron expressions (minute hour day month weekday)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

_FIELDS = (
    ("minute", 0, 59),
    ("hour", 0, 23),
    ("day", 1, 31),
    ("month", 1, 12),
    ("weekday", 0, 6),
)


def _expand(part: str, lo: int, hi: int) -> set[int]:
    """Supports ``*``, ``N``, ``N-M``, ``*/S``, ``N-M/S`` and comma lists."""
    out: set[int] = set()
    for item in part.split(","):
        item = item.strip()
        step = 1
        if "/" in item:
            item, step_str = item.split("/", 1)
            step = int(step_str)
            if step <= 0:
                raise ValueError(f"step must be positive: {step}")
        if item == "*":
            start, end = lo, hi
        elif "-" in item:
            a, b = item.split("-", 1)
            start, end = int(a), int(b)
        else:
            start = int(item)
            end = hi if step > 1 else start
        if start > end or start < lo or end > hi:
            raise ValueError(f"value out of range [{lo}, {hi}]: {item}")
        out.update(range(start, end + 1, step))
    return out


@dataclass(frozen=True)
class CronSpec:
    expression: str
    minutes: frozenset[int]
    hours: frozenset[int]
    days: frozenset[int]
    months: frozenset[int]
    weekdays: frozenset[int]

    @classmethod
    def parse(cls, expression: str) -> "CronSpec":
        parts = expression.split()
        if len(parts) != len(_FIELDS):
            raise ValueError(f"cron expression needs 5 fields: {expression!r}")
        sets = [frozenset(_expand(p, lo, hi)) for p, (_, lo, hi) in zip(parts, _FIELDS)]
        return cls(expression, *sets)

    def matches(self, dt: datetime) -> bool:
        # cron weekday: 0=Sunday; Python: 0=Monday
        weekday = (dt.weekday() + 1) % 7
        return (
            dt.minute in self.minutes
            and dt.hour in self.hours
            and dt.day in self.days
            and dt.month in self.months
            and weekday in self.weekdays
        )
