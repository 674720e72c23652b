from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Optional, Sequence

import pytest

from attendance_reconciler.approvals.model import Justification, PunchAdjustmentRequest
from attendance_reconciler.audit.model import AuditLogEntry
from attendance_reconciler.calendar.holidays import HolidayCalendar
from attendance_reconciler.common.datetime_utils import parse_iso_date
from attendance_reconciler.container import Container, build_services
from attendance_reconciler.core.constants import LOCAL_TZ, WorkSchedule
from attendance_reconciler.core.enums import RequestStatus
from attendance_reconciler.employees.model import Employee, Leader
from attendance_reconciler.ingestion.source import ExternalEmployee, PunchPair
from attendance_reconciler.notifications.sink import SafeNotifier
from attendance_reconciler.records.model import DailyRecord, PunchSet, RecordTotals

NOW = datetime(2024, 3, 5, 9, 0, 0)


class InMemoryEmployees:
    def __init__(self, employees: Sequence[Employee], leaders: Sequence[Leader]):
        self._employees = {e.employee_id: e for e in employees}
        self._leaders = {l.leader_id: l for l in leaders}
        self.linked: list[tuple[int, str]] = []

    def list_employees(self):
        return sorted(self._employees.values(), key=lambda e: e.name)

    def get_by_id(self, employee_id):
        return self._employees.get(int(employee_id))

    def list_by_leader(self, leader_id):
        return [e for e in self.list_employees() if e.is_reviewed_by(leader_id)]

    def link_external_id(self, employee_id, external_id):
        emp = self._employees.get(int(employee_id))
        if emp is None or emp.external_id:
            return False
        self._employees[emp.employee_id] = replace(emp, external_id=str(external_id))
        self.linked.append((emp.employee_id, str(external_id)))
        return True

    def list_leaders(self):
        return list(self._leaders.values())

    def get_leader(self, leader_id):
        return self._leaders.get(int(leader_id))


class InMemoryRecords:
    def __init__(self):
        self._next_id = 1
        self._by_key: dict[tuple[int, date], DailyRecord] = {}
        self.upserts = 0

    def _save(self, record: DailyRecord) -> DailyRecord:
        self._by_key[(record.employee_id, record.work_date)] = record
        return record

    def get(self, employee_id, work_date):
        return self._by_key.get((int(employee_id), work_date))

    def get_by_id(self, record_id):
        return next((r for r in self._by_key.values() if r.record_id == int(record_id)), None)

    def upsert(self, *, employee_id, work_date, punches, totals):
        self.upserts += 1
        current = self.get(employee_id, work_date)
        fields = dict(
            punch_1=punches.punch_1,
            punch_2=punches.punch_2,
            punch_3=punches.punch_3,
            punch_4=punches.punch_4,
            total_worked_minutes=totals.total_worked_minutes,
            difference_minutes=totals.difference_minutes,
            classification=totals.classification,
        )
        if current is not None:
            return self._save(replace(current, **fields, updated_at=NOW))
        record = DailyRecord(
            record_id=self._next_id, employee_id=int(employee_id), work_date=work_date, created_at=NOW, **fields
        )
        self._next_id += 1
        return self._save(record)

    def seed(self, employee_id: int, work_date: date, *punches: Optional[str], **kwargs: Any) -> DailyRecord:
        padded = (list(punches) + [None] * 4)[:4]
        record = self.upsert(
            employee_id=employee_id, work_date=work_date, punches=PunchSet(*padded), totals=RecordTotals()
        )
        return self._save(replace(record, **kwargs)) if kwargs else record

    def update_punches(self, *, record_id, punches, totals):
        current = self.get_by_id(record_id)
        if current is None:
            return False
        self._save(
            replace(
                current,
                punch_1=punches.punch_1,
                punch_2=punches.punch_2,
                punch_3=punches.punch_3,
                punch_4=punches.punch_4,
                total_worked_minutes=totals.total_worked_minutes,
                difference_minutes=totals.difference_minutes,
                classification=totals.classification,
            )
        )
        return True

    def update_classification(self, *, record_id, classification):
        current = self.get_by_id(record_id)
        if current is None:
            return False
        self._save(replace(current, classification=classification))
        return True

    def mark_alert_sent(self, record_id):
        current = self.get_by_id(record_id)
        if current is None:
            return False
        self._save(replace(current, alert_sent=True))
        return True

    def mark_manager_alert_sent(self, record_id):
        current = self.get_by_id(record_id)
        if current is None:
            return False
        self._save(replace(current, manager_alert_sent=True))
        return True

    def list_by_date(self, work_date):
        return self.list_range(start=work_date, end=work_date)

    def list_range(self, *, start, end, employee_ids=None):
        return sorted(
            (
                r
                for r in self._by_key.values()
                if start <= r.work_date <= end and (employee_ids is None or r.employee_id in set(employee_ids))
            ),
            key=lambda r: (r.work_date, r.employee_id),
        )

    def all(self) -> list[DailyRecord]:
        return list(self._by_key.values())


class InMemoryApprovals:
    def __init__(self, records: InMemoryRecords):
        self._records = records
        self._next_id = 1
        self._justifications: dict[int, Justification] = {}
        self._adjustments: dict[int, PunchAdjustmentRequest] = {}

    def _work_date(self, record_id: int) -> date:
        return self._records.get_by_id(record_id).work_date

    def _new_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def create_justification(self, *, record_id, employee_id, type, reason, custom_note):
        jid = self._new_id()
        self._justifications[jid] = Justification(
            justification_id=jid,
            record_id=int(record_id),
            employee_id=int(employee_id),
            work_date=self._work_date(record_id),
            type=type,
            reason=reason,
            custom_note=custom_note,
            created_at=NOW,
        )
        return jid

    def get_justification(self, justification_id):
        return self._justifications.get(int(justification_id))

    def decide_justification(self, *, justification_id, status, reviewed_by, comment):
        current = self._justifications.get(int(justification_id))
        if current is None or current.status != RequestStatus.PENDING:
            return False
        self._justifications[current.justification_id] = replace(
            current, status=status, reviewed_by=reviewed_by, reviewer_comment=comment, reviewed_at=NOW
        )
        return True

    def delete_justification(self, justification_id):
        return self._justifications.pop(int(justification_id), None) is not None

    def list_justifications(self, *, status=None, employee_ids=None, limit=200):
        out = [
            j
            for j in self._justifications.values()
            if (status is None or j.status == status) and (employee_ids is None or j.employee_id in employee_ids)
        ]
        return out[:limit]

    def create_adjustment(self, *, record_id, employee_id, type, missing_punches, reason):
        aid = self._new_id()
        self._adjustments[aid] = PunchAdjustmentRequest(
            adjustment_id=aid,
            record_id=int(record_id),
            employee_id=int(employee_id),
            work_date=self._work_date(record_id),
            type=type,
            reason=reason,
            missing_punches=tuple(missing_punches),
            created_at=NOW,
        )
        return aid

    def get_adjustment(self, adjustment_id):
        return self._adjustments.get(int(adjustment_id))

    def decide_adjustment(self, *, adjustment_id, status, reviewed_by, comment, corrections=None):
        current = self._adjustments.get(int(adjustment_id))
        if current is None or current.status != RequestStatus.PENDING:
            return False
        c = corrections or PunchSet()
        self._adjustments[current.adjustment_id] = replace(
            current,
            status=status,
            reviewed_by=reviewed_by,
            reviewer_comment=comment,
            reviewed_at=NOW,
            corrected_punch_1=c.punch_1,
            corrected_punch_2=c.punch_2,
            corrected_punch_3=c.punch_3,
            corrected_punch_4=c.punch_4,
        )
        return True

    def delete_adjustment(self, adjustment_id):
        return self._adjustments.pop(int(adjustment_id), None) is not None

    def list_adjustments(self, *, status=None, employee_ids=None, limit=200):
        out = [
            a
            for a in self._adjustments.values()
            if (status is None or a.status == status) and (employee_ids is None or a.employee_id in employee_ids)
        ]
        return out[:limit]


class InMemoryAudit:
    def __init__(self):
        self.entries: list[AuditLogEntry] = []

    def append(self, action, entity_type, entity_id=None, details=None):
        audit_id = len(self.entries) + 1
        self.entries.append(
            AuditLogEntry(
                audit_id=audit_id,
                action=getattr(action, "value", action),
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id is not None else None,
                details=dict(details or {}),
                created_at=NOW,
            )
        )
        return audit_id

    def list_recent(self, *, limit=100, offset=0):
        return list(reversed(self.entries))[offset : offset + limit]

    def actions(self) -> list[str]:
        return [e.action for e in self.entries]


class RecordingSink:
    """Records every ``notify_*`` call; names in ``failing`` raise instead."""

    def __init__(self, available: bool = True):
        self.available = available
        self.calls: list[tuple[str, tuple, dict]] = []
        self.failing: set[str] = set()

    def is_available(self):
        return self.available

    def __getattr__(self, name):
        if not name.startswith("notify_"):
            raise AttributeError(name)

        def record(*args, **kwargs):
            if name in self.failing:
                raise RuntimeError(f"{name} is down")
            self.calls.append((name, args, kwargs))

        return record

    def named(self, name: str) -> list[tuple[tuple, dict]]:
        return [(args, kwargs) for n, args, kwargs in self.calls if n == name]


class StubSource:
    def __init__(self, pairs: Sequence[PunchPair] = (), employees: Sequence[ExternalEmployee] = ()):
        self.pairs = list(pairs)
        self.employees = list(employees)
        self.error: Optional[Exception] = None
        self.requests: list[tuple[date, date]] = []

    def fetch_employees(self):
        return list(self.employees)

    def fetch_punches(self, start, end):
        self.requests.append((start, end))
        if self.error is not None:
            raise self.error
        return [p for p in self.pairs if start <= p.date <= end]


@dataclass
class Env:
    container: Container
    employees: InMemoryEmployees
    records: InMemoryRecords
    approvals: InMemoryApprovals
    audit: InMemoryAudit
    sink: RecordingSink
    source: StubSource


def default_leaders() -> list[Leader]:
    return [
        Leader(leader_id=1, name="Ana Gestora", slack_id="U-ANA", sector="Loja"),
        Leader(leader_id=2, name="Rafael Costa", slack_id="U-RAFA", sector="CD"),
    ]


def default_employees() -> list[Employee]:
    return [
        Employee(employee_id=10, name="Bruno Silva", leader_id=1, external_id="T-10", slack_id="U-BRUNO"),
        Employee(employee_id=11, name="Carla Souza", leader_id=1, slack_id="U-CARLA"),
        Employee(
            employee_id=12,
            name="Diego Lima",
            leader_id=2,
            external_id="T-12",
            is_apprentice=True,
        ),
        Employee(employee_id=13, name="Elisa Rocha", leader_id=2, secondary_approver_id=1, works_saturday=False),
        Employee(employee_id=14, name="Fabio Dias", leader_id=2, no_punch_required=True),
    ]


@pytest.fixture
def make_env():
    def build(
        *,
        employees: Optional[Sequence[Employee]] = None,
        leaders: Optional[Sequence[Leader]] = None,
        holidays=(),
        schedule: Optional[WorkSchedule] = None,
        sink_available: bool = True,
        ingest_max_workers: int = 1,
        saturday_exit_for_apprentices: bool = True,
    ) -> Env:
        employees_repo = InMemoryEmployees(
            default_employees() if employees is None else employees,
            default_leaders() if leaders is None else leaders,
        )
        records = InMemoryRecords()
        approvals = InMemoryApprovals(records)
        audit = InMemoryAudit()
        sink = RecordingSink(available=sink_available)
        source = StubSource()
        container = build_services(
            schedule=schedule or WorkSchedule(),
            calendar=HolidayCalendar(holidays),
            notifier=SafeNotifier(sink),
            employees_repo=employees_repo,
            records_repo=records,
            approvals_repo=approvals,
            audit_repo=audit,
            punch_source=source,
            ingest_max_workers=ingest_max_workers,
            saturday_exit_for_apprentices=saturday_exit_for_apprentices,
        )
        return Env(container, employees_repo, records, approvals, audit, sink, source)

    return build


@pytest.fixture
def env(make_env) -> Env:
    return make_env()


@pytest.fixture
def make_pair():
    """Build a time-clock pair from local ``HH:MM`` strings."""

    def build(external_id: str, name: Optional[str], day: str, time_in: str, time_out: Optional[str] = None):
        work_date = parse_iso_date(day)

        def millis(hhmm: str) -> int:
            h, m = (int(x) for x in hhmm.split(":"))
            local = datetime(work_date.year, work_date.month, work_date.day, h, m, tzinfo=LOCAL_TZ)
            return int(local.timestamp() * 1000)

        return PunchPair(
            external_employee_id=external_id,
            employee_name=name,
            date=work_date,
            date_in=millis(time_in),
            date_out=millis(time_out) if time_out else None,
        )

    return build
