"""Default job table."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from .scheduler import ScheduledJob

if TYPE_CHECKING:
    from ..container import Container

SYNC_PUNCHES = "sync_punches"
DAILY_CHECKS = "daily_checks"
WEEKLY_SUMMARY = "weekly_summary"
ENTRY_REMINDERS = "entry_reminders"
EXIT_REMINDERS = "exit_reminders"
SATURDAY_EXIT_REMINDERS = "saturday_exit_reminders"
LUNCH_RETURN_REMINDERS = "lunch_return_reminders"


def default_jobs(container: "Container") -> list[ScheduledJob]:
    def sync(now: datetime):
        return container.punch_ingestor.sync_date(now.date())

    def daily(now: datetime):
        container.calendar.reload()
        return container.daily_reconciler.run_daily_checks(now.date())

    def weekly(now: datetime):
        return container.weekly_summary_job.run(now.date())

    reminders = container.reminder_service
    return [
        ScheduledJob.every(SYNC_PUNCHES, "*/5 7-20 * * 1-6", sync),
        ScheduledJob.every(DAILY_CHECKS, "0 8 * * 1-6", daily),
        ScheduledJob.every(WEEKLY_SUMMARY, "0 8 * * 5", weekly),
        ScheduledJob.every(ENTRY_REMINDERS, "50 7 * * 1-6", reminders.send_entry_reminders),
        ScheduledJob.every(EXIT_REMINDERS, "50 17 * * 1-5", reminders.send_exit_reminders),
        ScheduledJob.every(SATURDAY_EXIT_REMINDERS, "50 11 * * 6", reminders.send_exit_reminders),
        ScheduledJob.every(LUNCH_RETURN_REMINDERS, "*/2 12-16 * * 1-5", reminders.send_lunch_return_reminders),
    ]
