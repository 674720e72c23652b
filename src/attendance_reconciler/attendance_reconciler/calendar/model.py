from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import HolidayType


@dataclass(frozen=True)
class Holiday:
    """A holiday; recurring ones match every year on month/day."""

    date: date
    name: str
    type: HolidayType = HolidayType.COMPANY
    recurring: bool = False
    holiday_id: int = 0

    def falls_on(self, day: date) -> bool:
        if self.recurring:
            return (self.date.month, self.date.day) == (day.month, day.day)
        return self.date == day
