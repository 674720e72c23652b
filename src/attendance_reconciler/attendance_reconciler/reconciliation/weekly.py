from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from ..audit.repository import AuditLogRepository
from ..calendar.holidays import HolidayCalendar
from ..core.constants import WorkSchedule
from ..core.enums import AuditAction, Classification
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..logging_config import get_logger
from ..notifications.sink import SafeNotifier
from ..records.model import DailyRecord
from ..records.repository import DailyRecordRepository

logger = get_logger("reconciliation.weekly")

WEEK_DAYS = 7


@dataclass(frozen=True)
class WeeklySummaryResult:
    start: Optional[date]
    end: Optional[date]
    leaders_notified: int = 0
    records: int = 0
    error: Optional[str] = None


class WeeklySummaryJob:
    """One summary per manager over the working days of the last seven days.

    An employee's deviations go to their leader and to their secondary
    approver, when one is set.

    Only deviations that would have alerted the employee are listed:
    classification other than normal and ``|difference| >= alert threshold``.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        records: DailyRecordRepository,
        audit: AuditLogRepository,
        notifier: SafeNotifier,
        *,
        calendar: HolidayCalendar,
        schedule: Optional[WorkSchedule] = None,
    ):
        self._employees = employees
        self._records = records
        self._audit = audit
        self._notifier = notifier
        self._calendar = calendar
        self._schedule = schedule or WorkSchedule()

    def working_days(self, today: date) -> list[date]:
        days = [today - timedelta(days=i) for i in range(1, WEEK_DAYS + 1)]
        return sorted(d for d in days if self._calendar.is_working_day(d))

    def is_reportable(self, record: DailyRecord) -> bool:
        if record.classification in (None, Classification.NORMAL) or record.difference_minutes is None:
            return False
        return abs(record.difference_minutes) >= self._schedule.alert_threshold_minutes

    def run(self, today: date) -> WeeklySummaryResult:
        days = self.working_days(today)
        if not days:
            logger.info("weekly summary skipped", extra={"reason": "no working days"})
            return WeeklySummaryResult(start=None, end=None)

        start, end = days[0], days[-1]
        try:
            employees = {e.employee_id: e for e in self._employees.list_employees()}
            wanted = set(days)
            by_leader: dict[int, list[tuple[Employee, DailyRecord]]] = defaultdict(list)
            total = 0
            for record in self._records.list_range(start=start, end=end):
                employee = employees.get(record.employee_id)
                if employee is None or record.work_date not in wanted or not self.is_reportable(record):
                    continue
                total += 1
                for reviewer_id in {employee.leader_id, employee.secondary_approver_id} - {None}:
                    by_leader[reviewer_id].append((employee, record))

            notified = 0
            for leader_id, entries in by_leader.items():
                leader = self._employees.get_leader(leader_id)
                if leader is None:
                    logger.warning("weekly summary without leader", extra={"leader_id": leader_id})
                    continue
                entries.sort(key=lambda er: (er[1].work_date, er[0].name))
                if self._notifier.notify_manager_weekly_summary(leader, start=start, end=end, entries=entries):
                    notified += 1
        except Exception as e:
            logger.exception("weekly summary failed")
            self._audit.append(AuditAction.MANAGER_WEEKLY_ALERT_ERROR, "system", details={"error": str(e)})
            return WeeklySummaryResult(start=start, end=end, error=str(e))

        self._audit.append(
            AuditAction.MANAGER_WEEKLY_ALERTS_SENT,
            "system",
            details={"start": start.isoformat(), "end": end.isoformat(), "leaders": notified, "records": total},
        )
        logger.info("weekly summary sent", extra={"start": start, "end": end, "leaders": notified, "records": total})
        return WeeklySummaryResult(start=start, end=end, leaders_notified=notified, records=total)
