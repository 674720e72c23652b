from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .approvals.mysql_approval_repository import MySQLApprovalRepository
from .approvals.repository import ApprovalRepository
from .approvals.service import ApprovalService
from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .audit.repository import AuditLogRepository
from .calendar.holidays import HolidayCalendar
from .calendar.mysql_holiday_repository import MySQLHolidayRepository
from .core.constants import WorkSchedule
from .database.cache import ReadThroughCache
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .hours.calculator import HoursCalculator
from .hours.factory import PunchModeFactory
from .ingestion.service import PunchIngestor
from .ingestion.source import PunchSource
from .ingestion.tangerino_client import TangerinoClient
from .notifications.sink import LoggingNotificationSink, SafeNotifier, WebhookNotificationSink
from .reconciliation.reminders import PunchReminderService
from .reconciliation.service import DailyReconciler
from .reconciliation.weekly import WeeklySummaryJob
from .records.mysql_record_repository import MySQLDailyRecordRepository
from .records.repository import DailyRecordRepository


@dataclass(frozen=True)
class Container:
    schedule: WorkSchedule
    calendar: HolidayCalendar
    calculator: HoursCalculator
    notifier: SafeNotifier

    employees_repo: EmployeeRepository
    records_repo: DailyRecordRepository
    approvals_repo: ApprovalRepository
    audit_repo: AuditLogRepository

    punch_ingestor: PunchIngestor
    daily_reconciler: DailyReconciler
    weekly_summary_job: WeeklySummaryJob
    reminder_service: PunchReminderService
    approval_service: ApprovalService


def build_services(
    *,
    schedule: WorkSchedule,
    calendar: HolidayCalendar,
    notifier: SafeNotifier,
    employees_repo: EmployeeRepository,
    records_repo: DailyRecordRepository,
    approvals_repo: ApprovalRepository,
    audit_repo: AuditLogRepository,
    punch_source: PunchSource,
    ingest_max_workers: int = 1,
    saturday_exit_for_apprentices: bool = True,
) -> Container:
    """Wire services over already-built repositories (also used by tests)."""
    factory = PunchModeFactory()
    calculator = HoursCalculator(schedule, calendar, factory=factory)

    return Container(
        schedule=schedule,
        calendar=calendar,
        calculator=calculator,
        notifier=notifier,
        employees_repo=employees_repo,
        records_repo=records_repo,
        approvals_repo=approvals_repo,
        audit_repo=audit_repo,
        punch_ingestor=PunchIngestor(
            punch_source,
            employees_repo,
            records_repo,
            audit_repo,
            notifier,
            calculator=calculator,
            max_workers=ingest_max_workers,
        ),
        daily_reconciler=DailyReconciler(
            employees_repo,
            records_repo,
            audit_repo,
            notifier,
            calendar=calendar,
            schedule=schedule,
            factory=factory,
        ),
        weekly_summary_job=WeeklySummaryJob(
            employees_repo, records_repo, audit_repo, notifier, calendar=calendar, schedule=schedule
        ),
        reminder_service=PunchReminderService(
            employees_repo,
            records_repo,
            notifier,
            calendar=calendar,
            schedule=schedule,
            saturday_exit_for_apprentices=saturday_exit_for_apprentices,
        ),
        approval_service=ApprovalService(
            approvals_repo, records_repo, employees_repo, audit_repo, notifier, calculator=calculator
        ),
    )


def build_container(*, settings: Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
    cache = ReadThroughCache(getattr(settings, "CACHE_TTL_SECONDS", None))

    employees_repo = MySQLEmployeeRepository(conn, cache=cache)
    records_repo = MySQLDailyRecordRepository(conn, cache=cache)
    approvals_repo = MySQLApprovalRepository(conn, cache=cache)
    audit_repo = MySQLAuditLogRepository(conn)

    webhook_url = getattr(settings, "NOTIFY_WEBHOOK_URL", "")
    sink = WebhookNotificationSink(webhook_url) if webhook_url else LoggingNotificationSink()

    source = TangerinoClient(
        base_url=getattr(settings, "TANGERINO_API_URL"),
        token=getattr(settings, "TANGERINO_API_TOKEN", ""),
        company_id=getattr(settings, "TANGERINO_COMPANY_ID", ""),
        page_size=getattr(settings, "TANGERINO_PAGE_SIZE", 100),
        max_pages=getattr(settings, "TANGERINO_MAX_PAGES", 50),
        timeout=getattr(settings, "TANGERINO_TIMEOUT_SECONDS", 30.0),
        audit=audit_repo,
    )

    return build_services(
        schedule=WorkSchedule.from_settings(settings),
        calendar=HolidayCalendar(source=MySQLHolidayRepository(conn)),
        notifier=SafeNotifier(sink),
        employees_repo=employees_repo,
        records_repo=records_repo,
        approvals_repo=approvals_repo,
        audit_repo=audit_repo,
        punch_source=source,
        ingest_max_workers=int(getattr(settings, "INGEST_MAX_WORKERS", 1)),
        saturday_exit_for_apprentices=bool(getattr(settings, "SATURDAY_EXIT_REMINDER_FOR_APPRENTICES", True)),
    )
