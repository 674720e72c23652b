from datetime import date

import pytest
import requests

from attendance_reconciler.core.enums import AuditAction
from attendance_reconciler.core.exceptions import SourceUnavailableError
from attendance_reconciler.ingestion.tangerino_client import TangerinoClient, parse_punch_pair

# 2024-03-04 08:00 and 12:00 at UTC-3
MORNING_IN = 1709550000000
MORNING_OUT = 1709564400000


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "headers": headers, "timeout": timeout})
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, *args, **kwargs):
        raise AssertionError("the time clock must never be written to")


class FakeAudit:
    def __init__(self):
        self.entries = []

    def append(self, action, entity_type, entity_id=None, details=None):
        self.entries.append((action, entity_type, dict(details or {})))
        return len(self.entries)


def _client(session, **kwargs):
    return TangerinoClient(base_url="https://api.example.test/", token="tok", session=session, **kwargs)


def _item(employee_id="77", name="Bruno Silva"):
    return {"employeeId": employee_id, "employeeName": name, "date": "2024-03-04", "dateIn": MORNING_IN, "dateOut": MORNING_OUT}


def test_parse_punch_pair_reads_nested_employee():
    pair = parse_punch_pair({"employee": {"id": 5, "name": "Ana"}, "dateIn": MORNING_IN})

    assert pair.external_employee_id == "5"
    assert pair.employee_name == "Ana"
    assert pair.date == date(2024, 3, 4)
    assert pair.date_out is None


def test_parse_punch_pair_without_entry_is_ignored():
    assert parse_punch_pair({"employeeId": 5}) is None


def test_fetch_punches_pages_until_total_pages():
    session = FakeSession(
        [
            FakeResponse({"content": [_item("1")], "totalPages": 2}),
            FakeResponse({"content": [_item("2")], "totalPages": 2}),
        ]
    )

    pairs = _client(session, company_id="42").fetch_punches(date(2024, 3, 4), date(2024, 3, 4))

    assert [p.external_employee_id for p in pairs] == ["1", "2"]
    assert [c["params"]["page"] for c in session.calls] == [0, 1]
    assert session.calls[0]["url"] == "https://api.example.test/punch"
    assert session.calls[0]["params"]["startDate"] == "2024-03-04"
    assert session.calls[0]["params"]["companyId"] == "42"
    assert session.calls[0]["headers"]["Authorization"] == "Bearer tok"


def test_pagination_is_bounded_by_max_pages():
    session = FakeSession([FakeResponse({"content": [_item(str(i))], "totalPages": 99}) for i in range(5)])

    pairs = _client(session, max_pages=3).fetch_punches(date(2024, 3, 4), date(2024, 3, 4))

    assert len(pairs) == 3
    assert len(session.calls) == 3


def test_plain_list_response_is_a_single_page():
    session = FakeSession([FakeResponse([_item("1"), _item("2")])])

    pairs = _client(session).fetch_punches(date(2024, 3, 4), date(2024, 3, 4))

    assert len(pairs) == 2
    assert len(session.calls) == 1


def test_http_error_raises_source_unavailable():
    session = FakeSession([FakeResponse({}, status=503)])

    with pytest.raises(SourceUnavailableError):
        _client(session).fetch_punches(date(2024, 3, 4), date(2024, 3, 4))


def test_connection_error_raises_source_unavailable():
    session = FakeSession([requests.ConnectionError("refused")])

    with pytest.raises(SourceUnavailableError):
        _client(session).fetch_employees()


def test_invalid_json_raises_source_unavailable():
    session = FakeSession([FakeResponse(ValueError("not json"))])

    with pytest.raises(SourceUnavailableError):
        _client(session).fetch_punches(date(2024, 3, 4), date(2024, 3, 4))


def test_every_read_is_audited():
    audit = FakeAudit()
    session = FakeSession([FakeResponse({"content": [{"id": 7, "name": "Ana"}, {"name": "no id"}], "totalPages": 1})])

    employees = _client(session, audit=audit).fetch_employees()

    assert [(e.external_id, e.name) for e in employees] == [("7", "Ana")]
    assert audit.entries == [(AuditAction.API_READ, "tangerino", {"method": "GET", "endpoint": "/employee"})]
