from datetime import date

import pytest

from attendance_reconciler.calendar.holidays import HolidayCalendar
from attendance_reconciler.core.constants import WorkSchedule
from attendance_reconciler.core.enums import Classification, PunchSlot
from attendance_reconciler.employees.model import Employee
from attendance_reconciler.hours.calculator import CalculationContext, HoursCalculator, classify
from attendance_reconciler.hours.factory import PunchModeFactory
from attendance_reconciler.hours.strategies.four_punch import FourPunchStrategy
from attendance_reconciler.hours.strategies.two_punch import TwoPunchStrategy
from attendance_reconciler.records.model import PunchSet, RecordTotals

MONDAY = date(2024, 3, 4)
SATURDAY = date(2024, 3, 9)
SUNDAY = date(2024, 3, 10)


@pytest.fixture
def calc():
    return HoursCalculator()


def test_weekday_within_tolerance_is_normal_and_does_not_alert(calc):
    result = calc.calculate(PunchSet("08:00", "12:00", "14:00", "18:05"), CalculationContext(MONDAY))

    assert result.total_worked_minutes == 485
    assert result.difference_minutes == 5
    assert result.classification == Classification.NORMAL
    assert calc.should_alert(result) is False


def test_weekday_overtime_above_threshold_alerts(calc):
    result = calc.calculate(PunchSet("08:00", "12:00", "14:00", "18:20"), CalculationContext(MONDAY))

    assert result.total_worked_minutes == 500
    assert result.difference_minutes == 20
    assert result.classification == Classification.OVERTIME
    assert calc.should_alert(result) is True


def test_saturday_two_punches_short_is_late(calc):
    result = calc.calculate(PunchSet("08:00", "11:40"), CalculationContext(SATURDAY))

    assert result.total_worked_minutes == 220
    assert result.difference_minutes == -20
    assert result.classification == Classification.LATE


@pytest.mark.parametrize("delta", range(-10, 11))
def test_classification_is_normal_within_tolerance(delta):
    assert classify(delta, 10) == Classification.NORMAL


@pytest.mark.parametrize("delta", [11, 25, 90])
def test_classification_is_symmetric_outside_tolerance(delta):
    assert classify(delta, 10) == Classification.OVERTIME
    assert classify(-delta, 10) == Classification.LATE


def test_exactly_eleven_minutes_alerts_ten_does_not(calc):
    ctx = CalculationContext(MONDAY)
    eleven = calc.calculate(PunchSet("08:00", "12:00", "14:00", "18:11"), ctx)
    ten = calc.calculate(PunchSet("08:00", "12:00", "14:00", "18:10"), ctx)

    assert calc.should_alert(eleven) is True
    assert ten.classification == Classification.NORMAL
    assert calc.should_alert(ten) is False


def test_missing_required_punch_gives_none_not_zero(calc):
    ctx = CalculationContext(MONDAY)

    assert calc.calculate(PunchSet("08:00", "12:00", "14:00"), ctx) is None
    assert calc.totals(PunchSet("08:00", "12:00", None, "18:00"), ctx) == RecordTotals()
    assert calc.should_alert(None) is False


def test_saturday_ignores_lunch_punches(calc):
    result = calc.calculate(PunchSet("08:00", "12:00", None, None), CalculationContext(SATURDAY))

    assert result.total_worked_minutes == 240
    assert result.classification == Classification.NORMAL


def test_apprentice_uses_two_punches_on_weekday(calc):
    apprentice = Employee(employee_id=1, name="Ap", leader_id=1, is_apprentice=True, expected_daily_minutes=360)
    result = calc.calculate(PunchSet("08:00", "14:00"), CalculationContext.for_employee(apprentice, MONDAY))

    assert result.total_worked_minutes == 360
    assert result.difference_minutes == 0


def test_apprentice_on_saturday_expects_the_smaller_target(calc):
    ctx = CalculationContext(SATURDAY, is_apprentice=True, expected_minutes=360)

    assert calc.expected_minutes(ctx) == 240


def test_apprentice_without_override_uses_default_minutes(calc):
    apprentice = Employee(employee_id=1, name="Ap", leader_id=1, is_apprentice=True)
    result = calc.calculate(PunchSet("08:00", "12:00"), CalculationContext.for_employee(apprentice, MONDAY))

    assert result.difference_minutes == 0
    assert result.classification == Classification.NORMAL


def test_apprentice_default_follows_the_schedule():
    calc = HoursCalculator(WorkSchedule(default_apprentice_minutes=300))
    apprentice = Employee(employee_id=1, name="Ap", leader_id=1, is_apprentice=True)

    assert calc.expected_minutes(CalculationContext.for_employee(apprentice, MONDAY)) == 300


def test_regular_employee_without_override_expects_a_full_day(calc):
    employee = Employee(employee_id=2, name="Re", leader_id=1)

    assert calc.expected_minutes(CalculationContext.for_employee(employee, MONDAY)) == 480


def test_expected_minutes_override_on_weekday(calc):
    ctx = CalculationContext(MONDAY, expected_minutes=420)
    result = calc.calculate(PunchSet("08:00", "12:00", "14:00", "17:00"), ctx)

    assert result.difference_minutes == 0


def test_sunday_and_holidays_are_not_calculated():
    calc = HoursCalculator(calendar=HolidayCalendar())
    punches = PunchSet("08:00", "12:00", "14:00", "18:00")

    assert calc.calculate(punches, CalculationContext(SUNDAY)) is None
    assert calc.calculate(punches, CalculationContext(date(2024, 12, 25))) is None


def test_calculate_is_deterministic(calc):
    punches = PunchSet("07:55", "12:02", "13:58", "18:31")
    ctx = CalculationContext(MONDAY)

    assert calc.calculate(punches, ctx) == calc.calculate(punches, ctx)


def test_factory_selects_two_punch_mode_iff_apprentice_or_saturday():
    factory = PunchModeFactory()

    assert isinstance(factory.for_day(work_date=MONDAY, is_apprentice=False), FourPunchStrategy)
    assert isinstance(factory.for_day(work_date=MONDAY, is_apprentice=True), TwoPunchStrategy)
    assert isinstance(factory.for_day(work_date=SATURDAY, is_apprentice=False), TwoPunchStrategy)


def test_missing_slots_are_named_per_mode():
    assert FourPunchStrategy().missing_slots(PunchSet("08:00", "12:00", None, "18:00")) == [PunchSlot.RETORNO]
    assert TwoPunchStrategy().missing_slots(PunchSet("08:00")) == [PunchSlot.SAIDA]
    assert FourPunchStrategy().non_final_punches(PunchSet("08:00", "12:00", "14:00", "18:00")) == [
        "08:00",
        "12:00",
        "14:00",
    ]
    assert TwoPunchStrategy().non_final_punches(PunchSet("08:00", "12:00")) == ["08:00"]
