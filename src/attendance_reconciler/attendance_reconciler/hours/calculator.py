"""Hours calculation and classification.

Weekdays (Mon-Fri), non-apprentice:
    requires 4 punches, total = (punch_2 - punch_1) + (punch_4 - punch_3),
    expected = the employee's expected daily minutes, or the schedule default (480).

Saturdays and apprentices:
    requires punch_1 and punch_2, total = punch_2 - punch_1,
    expected = 240 on Saturday, the apprentice's daily minutes otherwise
    (240 unless overridden), and the smaller of the two for an apprentice on a Saturday.

Classification of ``difference = total - expected``:
    |difference| <= tolerance -> normal, below -> late, above -> overtime.

Sundays and holidays are not calculated at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..calendar.holidays import HolidayCalendar, is_saturday
from ..core.constants import WorkSchedule
from ..core.enums import Classification
from ..employees.model import Employee
from ..records.model import PunchSet, RecordTotals
from .factory import PunchModeFactory
from .strategies.base import PunchModeStrategy


@dataclass(frozen=True)
class CalculationContext:
    work_date: date
    is_apprentice: bool = False
    expected_minutes: Optional[int] = None

    @classmethod
    def for_employee(cls, employee: Employee, work_date: date) -> "CalculationContext":
        return cls(
            work_date=work_date,
            is_apprentice=employee.is_apprentice,
            expected_minutes=employee.expected_daily_minutes,
        )


@dataclass(frozen=True)
class CalculationResult:
    total_worked_minutes: int
    difference_minutes: int
    classification: Classification

    def as_totals(self) -> RecordTotals:
        return RecordTotals(self.total_worked_minutes, self.difference_minutes, self.classification)


def classify(difference_minutes: int, tolerance_minutes: int) -> Classification:
    if abs(difference_minutes) <= tolerance_minutes:
        return Classification.NORMAL
    if difference_minutes < 0:
        return Classification.LATE
    return Classification.OVERTIME


class HoursCalculator:
    """Pure calculator: same punches and context always give the same result."""

    def __init__(
        self,
        schedule: Optional[WorkSchedule] = None,
        calendar: Optional[HolidayCalendar] = None,
        *,
        factory: Optional[PunchModeFactory] = None,
    ):
        self.schedule = schedule or WorkSchedule()
        self.calendar = calendar or HolidayCalendar()
        self._factory = factory or PunchModeFactory()

    def mode_for(self, context: CalculationContext) -> PunchModeStrategy:
        return self._factory.for_day(work_date=context.work_date, is_apprentice=context.is_apprentice)

    def expected_minutes(self, context: CalculationContext) -> int:
        s = self.schedule
        saturday = is_saturday(context.work_date)
        if context.is_apprentice:
            apprentice = context.expected_minutes if context.expected_minutes is not None else s.default_apprentice_minutes
            return min(apprentice, s.expected_saturday_minutes) if saturday else apprentice
        if saturday:
            return s.expected_saturday_minutes
        return context.expected_minutes if context.expected_minutes is not None else s.expected_weekday_minutes

    def calculate(self, punches: PunchSet, context: CalculationContext) -> Optional[CalculationResult]:
        if not self.calendar.is_working_day(context.work_date):
            return None

        total = self.mode_for(context).worked_minutes(punches)
        if total is None:
            return None

        difference = total - self.expected_minutes(context)
        return CalculationResult(
            total_worked_minutes=total,
            difference_minutes=difference,
            classification=classify(difference, self.schedule.tolerance_minutes),
        )

    def totals(self, punches: PunchSet, context: CalculationContext) -> RecordTotals:
        """Derived record fields; all None when the calculation is not possible."""
        result = self.calculate(punches, context)
        return result.as_totals() if result else RecordTotals()

    def should_alert(self, result: Optional[CalculationResult]) -> bool:
        if result is None or result.classification == Classification.NORMAL:
            return False
        return abs(result.difference_minutes) >= self.schedule.alert_threshold_minutes
