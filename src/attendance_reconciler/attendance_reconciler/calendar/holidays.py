"""Working-day calendar: Sundays, national holidays and company holidays."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from ..core.enums import HolidayType
from ..employees.model import Employee
from .model import Holiday
from .repository import HolidayRepository

FIXED_HOLIDAYS = {
    (1, 1): "Confraternização Universal",
    (4, 21): "Tiradentes",
    (5, 1): "Dia do Trabalho",
    (9, 7): "Independência do Brasil",
    (10, 12): "Nossa Senhora Aparecida",
    (11, 2): "Finados",
    (11, 15): "Proclamação da República",
    (11, 20): "Dia da Consciência Negra",
    (12, 25): "Natal",
}

# Offsets in days from Easter Sunday.
MOVABLE_HOLIDAYS = {
    -48: "Carnaval (segunda-feira)",
    -47: "Carnaval (terça-feira)",
    -2: "Sexta-feira Santa",
    60: "Corpus Christi",
}

SATURDAY = 5
SUNDAY = 6


def easter_sunday(year: int) -> date:
    """Gregorian Easter (anonymous Gregorian algorithm)."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def is_saturday(day: date) -> bool:
    return day.weekday() == SATURDAY


def is_sunday(day: date) -> bool:
    return day.weekday() == SUNDAY


class HolidayCalendar:
    """Fixed + movable national holidays plus company holidays.

    Company holidays come from ``extra`` or, when a ``source`` repository is
    given, are loaded from it on first lookup and again after ``reload()``.
    """

    def __init__(
        self,
        extra: Iterable[Holiday] = (),
        *,
        include_national: bool = True,
        source: Optional[HolidayRepository] = None,
    ):
        self._extra: Optional[tuple[Holiday, ...]] = tuple(extra) if source is None else None
        self._source = source
        self._include_national = include_national
        self._movable_cache: dict[int, dict[date, str]] = {}

    def _movable(self, year: int) -> dict[date, str]:
        if year not in self._movable_cache:
            easter = easter_sunday(year)
            self._movable_cache[year] = {easter + timedelta(days=off): name for off, name in MOVABLE_HOLIDAYS.items()}
        return self._movable_cache[year]

    def reload(self) -> None:
        if self._source is not None:
            self._extra = None

    def _company_holidays(self) -> tuple[Holiday, ...]:
        if self._extra is None:
            self._extra = tuple(self._source.list_holidays())
        return self._extra

    def holiday_for(self, day: date) -> Optional[Holiday]:
        if self._include_national:
            name = FIXED_HOLIDAYS.get((day.month, day.day))
            if name:
                return Holiday(date=day, name=name, type=HolidayType.NATIONAL, recurring=True)
            name = self._movable(day.year).get(day)
            if name:
                return Holiday(date=day, name=name, type=HolidayType.NATIONAL)
        for h in self._company_holidays():
            if h.falls_on(day):
                return h
        return None

    def is_holiday(self, day: date) -> bool:
        return self.holiday_for(day) is not None

    def is_working_day(self, day: date) -> bool:
        """False on Sundays and holidays."""
        return not is_sunday(day) and not self.is_holiday(day)

    def is_working_day_for(self, employee: Employee, day: date) -> bool:
        """Also false on a Saturday for employees who do not work Saturdays."""
        if is_saturday(day) and not employee.works_saturday:
            return False
        return self.is_working_day(day)

    def holidays_for_year(self, year: int) -> list[Holiday]:
        out: dict[date, Holiday] = {}
        day = date(year, 1, 1)
        while day.year == year:
            h = self.holiday_for(day)
            if h:
                out[day] = Holiday(date=day, name=h.name, type=h.type, recurring=h.recurring, holiday_id=h.holiday_id)
            day += timedelta(days=1)
        return [out[d] for d in sorted(out)]
