"""Punch ingestion: time clock -> DailyRecords.

Tangerino reports one record per entry/exit pair; a full weekday is two
pairs (entry/lunch-out, lunch-return/exit).  Pairs are sorted by entry
timestamp before slot assignment, so the earlier pair always becomes
``punch_1``/``punch_2``.
"""

from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Sequence

from ..audit.repository import AuditLogRepository
from ..common.datetime_utils import millis_to_hhmm
from ..core.enums import AuditAction
from ..core.exceptions import UnmatchedEmployeeError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..hours.calculator import CalculationContext, HoursCalculator
from ..logging_config import get_logger
from ..notifications.sink import SafeNotifier
from ..records.model import PunchSet, RecordTotals
from ..records.repository import DailyRecordRepository
from .matcher import EmployeeIndex, resolve_employee
from .source import PunchPair, PunchSource

logger = get_logger("ingestion")


class GroupOutcome(str, Enum):
    PROCESSED = "processed"
    UNMATCHED = "unmatched"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncResult:
    work_date: date
    punches_received: int = 0
    groups: int = 0
    processed: int = 0
    unmatched: int = 0
    failed: int = 0
    alerts_sent: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def punches_from_pairs(pairs: Sequence[PunchPair]) -> PunchSet:
    """Assign the first two pairs (sorted by entry) to the four punch slots."""
    ordered = sorted(pairs, key=lambda p: p.date_in)
    slots: list[Optional[str]] = [None, None, None, None]
    for i, pair in enumerate(ordered[:2]):
        slots[2 * i] = millis_to_hhmm(pair.date_in)
        slots[2 * i + 1] = millis_to_hhmm(pair.date_out) if pair.date_out is not None else None
    return PunchSet(*slots)


class PunchIngestor:
    def __init__(
        self,
        source: PunchSource,
        employees: EmployeeRepository,
        records: DailyRecordRepository,
        audit: AuditLogRepository,
        notifier: SafeNotifier,
        *,
        calculator: HoursCalculator,
        max_workers: int = 1,
    ):
        self._source = source
        self._employees = employees
        self._records = records
        self._audit = audit
        self._notifier = notifier
        self._calculator = calculator
        self._max_workers = max(1, int(max_workers))

    def sync_date(self, work_date: date) -> SyncResult:
        """Fetch, match and upsert every punch group for ``work_date``.

        A source failure aborts the run and is audit-logged; the next
        scheduled tick retries.  One bad group never aborts the others.
        """
        logger.info("punch sync started", extra={"work_date": work_date})
        try:
            pairs = list(self._source.fetch_punches(work_date, work_date))
        except Exception as e:
            logger.exception("punch sync aborted", extra={"work_date": work_date})
            self._audit.append(
                AuditAction.SYNC_ERROR,
                "system",
                details={"work_date": work_date.isoformat(), "error": str(e)},
            )
            return SyncResult(work_date=work_date, error=str(e))

        groups: dict[tuple[str, date], list[PunchPair]] = defaultdict(list)
        for pair in pairs:
            groups[(pair.external_employee_id, pair.date)].append(pair)

        index = EmployeeIndex(self._employees.list_employees())
        items = list(groups.items())
        if self._max_workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                outcomes = list(pool.map(lambda kv: self._process_group(index, kv[0], kv[1]), items))
        else:
            outcomes = [self._process_group(index, key, group) for key, group in items]

        result = SyncResult(
            work_date=work_date,
            punches_received=len(pairs),
            groups=len(items),
            processed=sum(1 for o, _ in outcomes if o == GroupOutcome.PROCESSED),
            unmatched=sum(1 for o, _ in outcomes if o == GroupOutcome.UNMATCHED),
            failed=sum(1 for o, _ in outcomes if o == GroupOutcome.FAILED),
            alerts_sent=sum(1 for _, alerted in outcomes if alerted),
        )
        self._audit.append(
            AuditAction.SYNC_COMPLETED,
            "system",
            details={
                "work_date": work_date.isoformat(),
                "punches": result.punches_received,
                "employees": result.processed,
                "unmatched": result.unmatched,
                "failed": result.failed,
            },
        )
        logger.info(
            "punch sync completed",
            extra={
                "work_date": work_date,
                "punches": result.punches_received,
                "processed": result.processed,
                "unmatched": result.unmatched,
                "failed": result.failed,
            },
        )
        return result

    def _process_group(
        self, index: EmployeeIndex, key: tuple[str, date], pairs: Sequence[PunchPair]
    ) -> tuple[GroupOutcome, bool]:
        external_id, work_date = key
        try:
            employee = self._match(index, external_id, pairs)
            return GroupOutcome.PROCESSED, self._store(employee, work_date, pairs)
        except UnmatchedEmployeeError as e:
            logger.info("punch group skipped", extra={"external_id": external_id, "reason": str(e)})
            return GroupOutcome.UNMATCHED, False
        except Exception:
            logger.exception("punch group failed", extra={"external_id": external_id, "work_date": work_date})
            return GroupOutcome.FAILED, False

    def _match(self, index: EmployeeIndex, external_id: str, pairs: Sequence[PunchPair]) -> Employee:
        name = next((p.employee_name for p in pairs if p.employee_name), None)
        employee = resolve_employee(index, external_id=external_id, name=name)
        if employee is None:
            raise UnmatchedEmployeeError(f"no employee for external id {external_id} ({name or 'no name'})")

        if not employee.external_id:
            try:
                self._employees.link_external_id(employee.employee_id, external_id)
            except Exception:
                logger.exception("linking external id failed", extra={"employee_id": employee.employee_id})
        return employee

    def _store(self, employee: Employee, work_date: date, pairs: Sequence[PunchPair]) -> bool:
        """Upsert the record; returns True when an employee alert went out."""
        punches = punches_from_pairs(pairs)
        result = self._calculator.calculate(punches, CalculationContext.for_employee(employee, work_date))
        record = self._records.upsert(
            employee_id=employee.employee_id,
            work_date=work_date,
            punches=punches,
            totals=result.as_totals() if result else RecordTotals(),
        )

        if not self._calculator.should_alert(result) or record.alert_sent:
            return False

        if self._notifier.is_available():
            self._notifier.notify_employee_deviation(
                employee,
                work_date=work_date,
                total_worked_minutes=result.total_worked_minutes,
                difference_minutes=result.difference_minutes,
                classification=result.classification,
                record_id=record.record_id,
            )
        else:
            logger.info(
                "alert (no notification sink)",
                extra={
                    "employee": employee.name,
                    "classification": result.classification,
                    "difference_minutes": result.difference_minutes,
                },
            )
        self._records.mark_alert_sent(record.record_id)
        return True
