from datetime import date

from attendance_reconciler.calendar.holidays import HolidayCalendar, easter_sunday
from attendance_reconciler.calendar.model import Holiday
from attendance_reconciler.core.enums import HolidayType
from attendance_reconciler.employees.model import Employee


class FakeHolidayRepo:
    def __init__(self, holidays):
        self.holidays = list(holidays)
        self.loads = 0

    def list_holidays(self):
        self.loads += 1
        return list(self.holidays)


def test_easter_dates():
    assert easter_sunday(2024) == date(2024, 3, 31)
    assert easter_sunday(2025) == date(2025, 4, 20)
    assert easter_sunday(2026) == date(2026, 4, 5)


def test_movable_holidays_follow_easter():
    cal = HolidayCalendar()

    assert cal.is_holiday(date(2024, 2, 12))  # Carnaval segunda
    assert cal.is_holiday(date(2024, 2, 13))  # Carnaval terça
    assert cal.is_holiday(date(2024, 3, 29))  # Sexta-feira Santa
    assert cal.is_holiday(date(2024, 5, 30))  # Corpus Christi
    assert not cal.is_holiday(date(2024, 2, 14))


def test_fixed_holidays_and_sundays_are_not_working_days():
    cal = HolidayCalendar()

    assert not cal.is_working_day(date(2024, 11, 15))
    assert not cal.is_working_day(date(2024, 3, 10))
    assert cal.is_working_day(date(2024, 3, 9))
    assert cal.is_working_day(date(2024, 3, 4))


def test_recurring_company_holiday_matches_every_year():
    anniversary = Holiday(date=date(2020, 8, 15), name="Aniversário da cidade", recurring=True)
    cal = HolidayCalendar([anniversary])

    assert cal.is_holiday(date(2024, 8, 15))
    assert cal.holiday_for(date(2025, 8, 15)).name == "Aniversário da cidade"


def test_one_off_company_holiday_only_matches_its_date():
    cal = HolidayCalendar([Holiday(date=date(2024, 6, 14), name="Inventário")])

    assert cal.is_holiday(date(2024, 6, 14))
    assert not cal.is_holiday(date(2025, 6, 14))


def test_saturday_is_off_for_employees_who_do_not_work_saturdays():
    cal = HolidayCalendar()
    weekday_only = Employee(employee_id=1, name="A", leader_id=1, works_saturday=False)
    everyone = Employee(employee_id=2, name="B", leader_id=1)

    assert not cal.is_working_day_for(weekday_only, date(2024, 3, 9))
    assert cal.is_working_day_for(everyone, date(2024, 3, 9))
    assert cal.is_working_day_for(weekday_only, date(2024, 3, 8))


def test_company_holidays_load_lazily_and_reload():
    repo = FakeHolidayRepo([Holiday(date=date(2024, 3, 4), name="Fechado")])
    cal = HolidayCalendar(source=repo)
    assert repo.loads == 0

    assert not cal.is_working_day(date(2024, 3, 4))
    assert cal.is_working_day(date(2024, 3, 5))
    assert repo.loads == 1

    repo.holidays.append(Holiday(date=date(2024, 3, 5), name="Fechado 2"))
    cal.reload()
    assert not cal.is_working_day(date(2024, 3, 5))
    assert repo.loads == 2


def test_holidays_for_year_lists_national_and_company():
    cal = HolidayCalendar([Holiday(date=date(2024, 6, 14), name="Inventário")])
    days = cal.holidays_for_year(2024)

    assert [h.date for h in days] == sorted(h.date for h in days)
    assert any(h.name == "Corpus Christi" and h.type == HolidayType.NATIONAL for h in days)
    assert any(h.date == date(2024, 6, 14) and h.type == HolidayType.COMPANY for h in days)


def test_national_holidays_can_be_disabled():
    cal = HolidayCalendar(include_national=False)

    assert cal.is_working_day(date(2024, 12, 25))
