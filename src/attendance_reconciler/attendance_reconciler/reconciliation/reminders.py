from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from ..calendar.holidays import HolidayCalendar, is_saturday
from ..common.datetime_utils import time_to_minutes
from ..core.constants import WorkSchedule
from ..core.enums import ReminderType
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..logging_config import get_logger
from ..notifications.sink import SafeNotifier
from ..records.model import DailyRecord
from ..records.repository import DailyRecordRepository

logger = get_logger("reconciliation.reminders")

# Matches the lunch-return job interval so each reminder fires exactly once.
LUNCH_REMINDER_WINDOW_MINUTES = 2


def _minutes_of_day(now: datetime) -> int:
    return now.hour * 60 + now.minute


class PunchReminderService:
    """Reminds employees shortly before a punch is due.

    ``now`` is naive local time; every method returns how many reminders went out.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        records: DailyRecordRepository,
        notifier: SafeNotifier,
        *,
        calendar: HolidayCalendar,
        schedule: Optional[WorkSchedule] = None,
        saturday_exit_for_apprentices: bool = True,
    ):
        self._employees = employees
        self._records = records
        self._notifier = notifier
        self._calendar = calendar
        self._schedule = schedule or WorkSchedule()
        self._saturday_exit_for_apprentices = saturday_exit_for_apprentices

    def _send(
        self,
        now: datetime,
        reminder_type: ReminderType,
        pick: Callable[[Employee, Optional[DailyRecord]], Optional[int]],
    ) -> int:
        today = now.date()
        if not self._calendar.is_working_day(today):
            return 0

        records = {r.employee_id: r for r in self._records.list_by_date(today)}
        sent = 0
        for emp in self._employees.list_employees():
            if emp.no_punch_required or not self._calendar.is_working_day_for(emp, today):
                continue
            minutes_left = pick(emp, records.get(emp.employee_id))
            if minutes_left is None:
                continue
            if self._notifier.notify_punch_reminder(emp, reminder_type=reminder_type, minutes_left=minutes_left):
                sent += 1

        if sent:
            logger.info("punch reminders sent", extra={"reminder_type": reminder_type, "sent": sent})
        return sent

    def send_entry_reminders(self, now: datetime) -> int:
        left = max(time_to_minutes(self._schedule.entry_time) - _minutes_of_day(now), 1)

        def pick(emp: Employee, record: Optional[DailyRecord]) -> Optional[int]:
            return left if record is None or not record.punch_1 else None

        return self._send(now, ReminderType.ENTRY, pick)

    def send_exit_reminders(self, now: datetime) -> int:
        """Weekday: back from lunch but not out yet.  Saturday: in but not out."""
        saturday = is_saturday(now.date())
        exit_time = self._schedule.saturday_exit_time if saturday else self._schedule.exit_time
        left = max(time_to_minutes(exit_time) - _minutes_of_day(now), 1)

        def pick(emp: Employee, record: Optional[DailyRecord]) -> Optional[int]:
            if record is None:
                return None
            if saturday:
                if emp.is_apprentice and not self._saturday_exit_for_apprentices:
                    return None
                return left if record.punch_1 and not record.punch_2 else None
            if emp.is_apprentice:
                return None
            return left if record.punch_3 and not record.punch_4 else None

        return self._send(now, ReminderType.EXIT, pick)

    def send_lunch_return_reminders(self, now: datetime) -> int:
        if is_saturday(now.date()):
            return 0
        current = _minutes_of_day(now)
        s = self._schedule

        def pick(emp: Employee, record: Optional[DailyRecord]) -> Optional[int]:
            if emp.is_apprentice or record is None or not record.punch_2 or record.punch_3:
                return None
            due = time_to_minutes(record.punch_2) + s.lunch_duration_minutes
            remind_at = due - s.reminder_lead_minutes
            if remind_at <= current < remind_at + LUNCH_REMINDER_WINDOW_MINUTES:
                return max(due - current, 1)
            return None

        return self._send(now, ReminderType.LUNCH_RETURN, pick)
