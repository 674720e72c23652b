from datetime import date

import pytest
import requests

from attendance_reconciler.core.enums import Classification, ReminderType
from attendance_reconciler.core.exceptions import NotificationError
from attendance_reconciler.employees.model import Employee, Leader
from attendance_reconciler.notifications import messages
from attendance_reconciler.notifications.sink import LoggingNotificationSink, SafeNotifier, WebhookNotificationSink

BRUNO = Employee(employee_id=10, name="Bruno Silva", leader_id=1, slack_id="U-BRUNO")
CARLA = Employee(employee_id=11, name="Carla Souza", leader_id=1)
ANA = Leader(leader_id=1, name="Ana Gestora", slack_id="U-ANA")


class FakeResponse:
    def __init__(self, status=200):
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(str(self.status_code))


class FakeSession:
    def __init__(self, status=200):
        self.status = status
        self.posts = []

    def post(self, url, json=None, timeout=None):
        self.posts.append((url, json))
        return FakeResponse(self.status)


def test_deviation_message_is_portuguese():
    text = messages.deviation(BRUNO, date(2024, 3, 4), 500, 20, Classification.OVERTIME)

    assert "Hora extra: 20min" in text
    assert "04/03/2024" in text
    assert "Total trabalhado: 8h 20min" in text


def test_missing_punch_message_lists_slots():
    text = messages.missing_punch(BRUNO, date(2024, 3, 4), ["Retorno"])

    assert "1 ponto(s): Retorno" in text


def test_webhook_posts_to_slack_id_or_name():
    session = FakeSession()
    sink = WebhookNotificationSink("https://hooks.example.test/x", session=session)

    sink.notify_punch_reminder(BRUNO, reminder_type=ReminderType.ENTRY, minutes_left=10)
    sink.notify_manager_no_record(CARLA, leader=ANA, work_date=date(2024, 3, 4))

    assert [p[1]["recipient"] for p in session.posts] == ["U-BRUNO", "U-ANA"]
    assert session.posts[0][1]["kind"] == "reminder_entry"
    assert "entrada" in session.posts[0][1]["text"]


def test_webhook_failure_raises_notification_error():
    sink = WebhookNotificationSink("https://hooks.example.test/x", session=FakeSession(status=500))

    with pytest.raises(NotificationError):
        sink.notify_punch_reminder(BRUNO, reminder_type=ReminderType.EXIT, minutes_left=10)


def test_webhook_without_url_is_unavailable():
    assert WebhookNotificationSink("").is_available() is False


def test_manager_notification_without_leader_fails():
    with pytest.raises(NotificationError):
        LoggingNotificationSink().notify_manager_no_record(CARLA, leader=None, work_date=date(2024, 3, 4))


def test_safe_notifier_swallows_and_reports_failures():
    notifier = SafeNotifier(WebhookNotificationSink("https://hooks.example.test/x", session=FakeSession(status=502)))

    assert notifier.is_available() is True
    assert notifier.notify_punch_reminder(BRUNO, reminder_type=ReminderType.EXIT, minutes_left=10) is False


def test_safe_notifier_only_proxies_notify_methods():
    notifier = SafeNotifier(LoggingNotificationSink())

    assert notifier.notify_manager_no_record(CARLA, leader=ANA, work_date=date(2024, 3, 4)) is True
    with pytest.raises(AttributeError):
        notifier.send_everything
