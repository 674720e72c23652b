"""End-of-day reconciliation.

Runs every morning except Sunday over the day before (Monday covers
Saturday) and decides, per employee, whether the record stands
(normal/late/overtime), needs an employee correction (``ajuste``) or
needs a manager decision (``sem_registro``). Only ``sem_registro`` notifies
the manager; everything else goes to the employee.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from ..audit.repository import AuditLogRepository
from ..calendar.holidays import HolidayCalendar, is_sunday
from ..common.datetime_utils import previous_day, time_to_minutes
from ..core.constants import WorkSchedule
from ..core.enums import AuditAction, Classification
from ..core.exceptions import ReconciliationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..hours.factory import PunchModeFactory
from ..logging_config import get_logger
from ..notifications.sink import SafeNotifier
from ..records.model import DailyRecord, PunchSet, RecordTotals
from ..records.repository import DailyRecordRepository

logger = get_logger("reconciliation")


def _minutes(punch: str) -> int:
    try:
        return time_to_minutes(punch)
    except (ValueError, IndexError) as e:
        raise ReconciliationError(f"malformed punch {punch!r}") from e


class DayOutcome(str, Enum):
    SKIPPED = "skipped"
    FOLGA = "folga"
    SEM_REGISTRO = "sem_registro"
    MISSING_PUNCH = "missing_punch"
    LATE_START = "late_start"
    LATE_PUNCH = "late_punch"
    COMPUTED = "computed"
    FAILED = "failed"


@dataclass
class ReconcileResult:
    work_date: date
    outcomes: Counter = field(default_factory=Counter)
    error: Optional[str] = None

    def count(self, outcome: DayOutcome) -> int:
        return self.outcomes[outcome]


class DailyReconciler:
    def __init__(
        self,
        employees: EmployeeRepository,
        records: DailyRecordRepository,
        audit: AuditLogRepository,
        notifier: SafeNotifier,
        *,
        calendar: HolidayCalendar,
        schedule: Optional[WorkSchedule] = None,
        factory: Optional[PunchModeFactory] = None,
    ):
        self._employees = employees
        self._records = records
        self._audit = audit
        self._notifier = notifier
        self._calendar = calendar
        self._schedule = schedule or WorkSchedule()
        self._factory = factory or PunchModeFactory()

    def target_day(self, today: date) -> date:
        """The day a run on ``today`` closes.

        There is no Sunday run, so a run after a Sunday reaches back to Saturday.
        """
        target = previous_day(today)
        while is_sunday(target):
            target = previous_day(target)
        return target

    def run_daily_checks(self, today: date) -> Optional[ReconcileResult]:
        """Reconcile ``target_day(today)``; None when that was not a working day."""
        target = self.target_day(today)
        if not self._calendar.is_working_day(target):
            logger.info("daily check skipped", extra={"work_date": target, "reason": "not a working day"})
            return None
        return self.reconcile(target)

    def reconcile(self, work_date: date) -> ReconcileResult:
        result = ReconcileResult(work_date=work_date)
        logger.info("reconciliation started", extra={"work_date": work_date})
        try:
            employees = [e for e in self._employees.list_employees() if not e.no_punch_required]
            by_employee = {r.employee_id: r for r in self._records.list_by_date(work_date)}
        except Exception as e:
            logger.exception("reconciliation aborted", extra={"work_date": work_date})
            self._audit.append(
                AuditAction.END_OF_DAY_CHECK_ERROR,
                "system",
                details={"work_date": work_date.isoformat(), "error": str(e)},
            )
            result.error = str(e)
            return result

        for employee in employees:
            try:
                outcome = self.reconcile_employee(employee, work_date, by_employee.get(employee.employee_id))
            except Exception as e:
                logger.exception(
                    "employee reconciliation failed",
                    extra={"employee_id": employee.employee_id, "work_date": work_date},
                )
                self._audit.append(
                    AuditAction.END_OF_DAY_CHECK_ERROR,
                    "employee",
                    employee.employee_id,
                    {"work_date": work_date.isoformat(), "error": str(e), "error_type": type(e).__name__},
                )
                outcome = DayOutcome.FAILED
            result.outcomes[outcome] += 1

        logger.info(
            "reconciliation completed",
            extra={"work_date": work_date, "outcomes": {k.value: v for k, v in result.outcomes.items()}},
        )
        return result

    def reconcile_employee(
        self, employee: Employee, work_date: date, record: Optional[DailyRecord]
    ) -> DayOutcome:
        if not self._calendar.is_working_day_for(employee, work_date):
            if record is not None and record.classification is None:
                self._records.update_classification(record_id=record.record_id, classification=Classification.FOLGA)
                return DayOutcome.FOLGA
            return DayOutcome.SKIPPED

        punches = record.punches if record is not None else PunchSet()
        if punches.count() == 0:
            if record is not None and record.classification in (Classification.FOLGA, Classification.FALTA):
                return DayOutcome.SKIPPED
            return self._no_record(employee, work_date, record)

        mode = self._factory.for_day(work_date=work_date, is_apprentice=employee.is_apprentice)
        missing = mode.missing_slots(punches)
        if missing:
            self._set_ajuste(record)
            self._notifier.notify_employee_missing_punch(
                employee,
                record=record,
                work_date=work_date,
                missing_slots=[slot.value for slot in missing],
            )
            return DayOutcome.MISSING_PUNCH

        s = self._schedule
        if not employee.is_apprentice and _minutes(punches.punch_1) > time_to_minutes(s.late_start_cutoff):
            self._set_ajuste(record)
            self._notifier.notify_employee_late_start(employee, record=record, cutoff=s.late_start_cutoff)
            return DayOutcome.LATE_START

        cutoff = time_to_minutes(s.late_punch_cutoff)
        late = next((p for p in mode.non_final_punches(punches) if _minutes(p) > cutoff), None)
        if late is not None:
            self._set_ajuste(record)
            self._notifier.notify_employee_late_punch(
                employee, record=record, punch=late, cutoff=s.late_punch_cutoff
            )
            return DayOutcome.LATE_PUNCH

        return DayOutcome.COMPUTED

    def _set_ajuste(self, record: DailyRecord) -> None:
        self._records.update_classification(record_id=record.record_id, classification=Classification.AJUSTE)

    def _no_record(self, employee: Employee, work_date: date, record: Optional[DailyRecord]) -> DayOutcome:
        if record is None:
            record = self._records.upsert(
                employee_id=employee.employee_id,
                work_date=work_date,
                punches=PunchSet(),
                totals=RecordTotals(classification=Classification.SEM_REGISTRO),
            )
        else:
            self._records.update_classification(
                record_id=record.record_id, classification=Classification.SEM_REGISTRO
            )

        # The manager decides folga/falta; the employee is not notified.
        if not record.manager_alert_sent:
            sent = self._notifier.notify_manager_no_record(
                employee, leader=self._employees.get_leader(employee.leader_id), work_date=work_date
            )
            if sent:
                self._records.mark_manager_alert_sent(record.record_id)
        return DayOutcome.SEM_REGISTRO
