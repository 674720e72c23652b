"""Notification sinks.

The engine only talks to :class:`NotificationSink`; delivery is best-effort
and wrapped by :class:`SafeNotifier` so a failing sink never interrupts a
state transition.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Optional, Protocol, Sequence

import requests

from ..core.enums import Classification, JustificationType, ReminderType, RequestStatus
from ..core.exceptions import NotificationError
from ..employees.model import Employee, Leader
from ..logging_config import get_logger
from ..records.model import DailyRecord
from . import messages

logger = get_logger("notifications")


class NotificationSink(Protocol):
    def is_available(self) -> bool:
        raise NotImplementedError

    def notify_employee_deviation(
        self,
        employee: Employee,
        *,
        work_date: date,
        total_worked_minutes: int,
        difference_minutes: int,
        classification: Classification,
        record_id: int,
    ) -> None:
        raise NotImplementedError

    def notify_employee_missing_punch(
        self, employee: Employee, *, record: DailyRecord, work_date: date, missing_slots: Sequence[str]
    ) -> None:
        raise NotImplementedError

    def notify_employee_late_start(self, employee: Employee, *, record: DailyRecord, cutoff: str) -> None:
        raise NotImplementedError

    def notify_employee_late_punch(
        self, employee: Employee, *, record: DailyRecord, punch: str, cutoff: str
    ) -> None:
        raise NotImplementedError

    def notify_manager_no_record(self, employee: Employee, *, leader: Optional[Leader], work_date: date) -> None:
        raise NotImplementedError

    def notify_manager_weekly_summary(
        self,
        leader: Leader,
        *,
        start: date,
        end: date,
        entries: Sequence[tuple[Employee, DailyRecord]],
    ) -> None:
        raise NotImplementedError

    def notify_justification_outcome(
        self,
        employee: Employee,
        *,
        work_date: date,
        justification_type: JustificationType,
        status: RequestStatus,
        reviewer: str,
        comment: Optional[str],
    ) -> None:
        raise NotImplementedError

    def notify_adjustment_outcome(
        self,
        employee: Employee,
        *,
        work_date: date,
        status: RequestStatus,
        reviewer: str,
        comment: Optional[str],
    ) -> None:
        raise NotImplementedError

    def notify_punch_reminder(self, employee: Employee, *, reminder_type: ReminderType, minutes_left: int) -> None:
        raise NotImplementedError


class _TextSink:
    """Renders every notification to text and hands it to ``_send``."""

    def is_available(self) -> bool:
        return True

    def _send(self, *, recipient: str, kind: str, text: str) -> None:
        raise NotImplementedError

    @staticmethod
    def _recipient(person: Any) -> str:
        return person.slack_id or person.name

    def notify_employee_deviation(
        self, employee, *, work_date, total_worked_minutes, difference_minutes, classification, record_id
    ) -> None:
        self._send(
            recipient=self._recipient(employee),
            kind="employee_deviation",
            text=messages.deviation(employee, work_date, total_worked_minutes, difference_minutes, classification),
        )

    def notify_employee_missing_punch(self, employee, *, record, work_date, missing_slots) -> None:
        self._send(
            recipient=self._recipient(employee),
            kind="employee_missing_punch",
            text=messages.missing_punch(employee, work_date, missing_slots),
        )

    def notify_employee_late_start(self, employee, *, record, cutoff) -> None:
        self._send(
            recipient=self._recipient(employee),
            kind="employee_late_start",
            text=messages.late_start(employee, record, cutoff),
        )

    def notify_employee_late_punch(self, employee, *, record, punch, cutoff) -> None:
        self._send(
            recipient=self._recipient(employee),
            kind="employee_late_punch",
            text=messages.late_punch(employee, record, punch, cutoff),
        )

    def notify_manager_no_record(self, employee, *, leader, work_date) -> None:
        if leader is None:
            raise NotificationError(f"employee {employee.employee_id} has no leader to notify")
        self._send(
            recipient=self._recipient(leader),
            kind="manager_no_record",
            text=messages.manager_no_record(employee, work_date),
        )

    def notify_manager_weekly_summary(self, leader, *, start, end, entries) -> None:
        self._send(
            recipient=self._recipient(leader),
            kind="manager_weekly_summary",
            text=messages.weekly_summary(leader, start, end, entries),
        )

    def notify_justification_outcome(
        self, employee, *, work_date, justification_type, status, reviewer, comment
    ) -> None:
        self._send(
            recipient=self._recipient(employee),
            kind="justification_outcome",
            text=messages.justification_outcome(employee, work_date, justification_type, status, reviewer, comment),
        )

    def notify_adjustment_outcome(self, employee, *, work_date, status, reviewer, comment) -> None:
        self._send(
            recipient=self._recipient(employee),
            kind="adjustment_outcome",
            text=messages.adjustment_outcome(employee, work_date, status, reviewer, comment),
        )

    def notify_punch_reminder(self, employee, *, reminder_type, minutes_left) -> None:
        self._send(
            recipient=self._recipient(employee),
            kind=f"reminder_{reminder_type.value}",
            text=messages.punch_reminder(reminder_type, minutes_left),
        )


class LoggingNotificationSink(_TextSink):
    """Writes notifications to the log; used when no webhook is configured."""

    def _send(self, *, recipient: str, kind: str, text: str) -> None:
        logger.info("notification", extra={"recipient": recipient, "kind": kind, "text": text})


class WebhookNotificationSink(_TextSink):
    """POSTs each notification as JSON to a chat webhook."""

    def __init__(self, url: str, *, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self._url = (url or "").strip()
        self._session = session or requests.Session()
        self._timeout = timeout

    def is_available(self) -> bool:
        return bool(self._url)

    def _send(self, *, recipient: str, kind: str, text: str) -> None:
        if not self._url:
            raise NotificationError("notification webhook is not configured")
        try:
            resp = self._session.post(
                self._url,
                json={"recipient": recipient, "kind": kind, "text": text},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise NotificationError(f"webhook delivery failed: {e}") from e


class SafeNotifier:
    """Wraps a sink: every ``notify_*`` call returns True/False and never raises."""

    def __init__(self, sink: NotificationSink):
        self._sink = sink

    @property
    def sink(self) -> NotificationSink:
        return self._sink

    def is_available(self) -> bool:
        try:
            return bool(self._sink.is_available())
        except Exception:
            logger.exception("notification sink availability check failed")
            return False

    def __getattr__(self, name: str) -> Callable[..., bool]:
        if not name.startswith("notify_"):
            raise AttributeError(name)
        target = getattr(self._sink, name)

        def call(*args: Any, **kwargs: Any) -> bool:
            try:
                target(*args, **kwargs)
                return True
            except Exception:
                logger.exception("notification failed", extra={"notification": name})
                return False

        return call
