from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..calendar.holidays import is_saturday
from .strategies.base import PunchModeStrategy
from .strategies.four_punch import FourPunchStrategy
from .strategies.two_punch import TwoPunchStrategy


@dataclass
class PunchModeFactory:
    """Factory Pattern: two-punch mode iff apprentice or Saturday."""

    def for_day(self, *, work_date: date, is_apprentice: bool) -> PunchModeStrategy:
        if is_apprentice or is_saturday(work_date):
            return TwoPunchStrategy()
        return FourPunchStrategy()
