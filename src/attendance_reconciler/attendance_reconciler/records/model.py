from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Mapping, Optional

from ..core.enums import Classification

PUNCH_FIELDS = ("punch_1", "punch_2", "punch_3", "punch_4")


@dataclass(frozen=True)
class PunchSet:
    """Up to four ``HH:MM`` punches: entry, lunch-out, lunch-return, exit.

    On Saturdays and for apprentices only ``punch_1`` (entry) and ``punch_2``
    (exit) are used.
    """

    punch_1: Optional[str] = None
    punch_2: Optional[str] = None
    punch_3: Optional[str] = None
    punch_4: Optional[str] = None

    def as_tuple(self) -> tuple[Optional[str], ...]:
        return (self.punch_1, self.punch_2, self.punch_3, self.punch_4)

    def count(self) -> int:
        return sum(1 for p in self.as_tuple() if p)

    def merged_with(self, corrections: Mapping[str, Optional[str]]) -> "PunchSet":
        """Overlay only the supplied (non-empty) corrections."""
        changes = {k: v for k, v in corrections.items() if k in PUNCH_FIELDS and v}
        return replace(self, **changes)


@dataclass(frozen=True)
class DailyRecord:
    """Domain entity: one employee's workday, unique per (employee, date)."""

    record_id: int
    employee_id: int
    work_date: date
    punch_1: Optional[str] = None
    punch_2: Optional[str] = None
    punch_3: Optional[str] = None
    punch_4: Optional[str] = None
    total_worked_minutes: Optional[int] = None
    difference_minutes: Optional[int] = None
    classification: Optional[Classification] = None
    alert_sent: bool = False
    manager_alert_sent: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def punches(self) -> PunchSet:
        return PunchSet(self.punch_1, self.punch_2, self.punch_3, self.punch_4)


@dataclass(frozen=True)
class RecordTotals:
    """Derived fields written together with the punches (all None when incomplete)."""

    total_worked_minutes: Optional[int] = None
    difference_minutes: Optional[int] = None
    classification: Optional[Classification] = None
