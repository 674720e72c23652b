from datetime import date, datetime

import pytest

from attendance_reconciler.core.enums import Classification
from attendance_reconciler.database.cache import ReadThroughCache
from attendance_reconciler.database.mysql_base import db_cursor
from attendance_reconciler.employees.mysql_employee_repository import MySQLEmployeeRepository
from attendance_reconciler.records.model import PunchSet, RecordTotals
from attendance_reconciler.records.mysql_record_repository import MySQLDailyRecordRepository

ROW = {
    "record_id": 7,
    "employee_id": 10,
    "work_date": date(2024, 3, 4),
    "punch_1": "08:00",
    "punch_2": "12:00",
    "punch_3": "14:00",
    "punch_4": "18:20",
    "total_worked_minutes": 500,
    "difference_minutes": 20,
    "classification": "overtime",
    "alert_sent": 1,
    "manager_alert_sent": 0,
    "created_at": datetime(2024, 3, 4, 18, 25),
    "updated_at": datetime(2024, 3, 4, 18, 25),
}


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []
        self.rowcount = 1
        self.lastrowid = 1

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = 0
        self.rolled_back = 0
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, rows=()):
        self.cursor = FakeCursor(list(rows))
        self.connections = []

    def connect(self):
        conn = FakeConnection(self.cursor)
        self.connections.append(conn)
        return conn


def test_db_cursor_commits_and_closes():
    factory = FakeFactory()

    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")

    conn = factory.connections[0]
    assert (conn.committed, conn.rolled_back, conn.closed) == (1, 0, True)


def test_db_cursor_rolls_back_on_error():
    factory = FakeFactory()

    with pytest.raises(RuntimeError):
        with db_cursor(factory):
            raise RuntimeError("constraint")

    conn = factory.connections[0]
    assert (conn.committed, conn.rolled_back, conn.closed) == (0, 1, True)


def test_record_rows_are_mapped_to_domain_objects():
    repo = MySQLDailyRecordRepository(FakeFactory([ROW]))

    record = repo.get(10, date(2024, 3, 4))

    assert record.punches == PunchSet("08:00", "12:00", "14:00", "18:20")
    assert record.classification == Classification.OVERTIME
    assert record.alert_sent is True
    assert record.manager_alert_sent is False


def test_upsert_is_a_single_insert_on_duplicate_key():
    factory = FakeFactory([ROW])
    repo = MySQLDailyRecordRepository(factory)

    repo.upsert(
        employee_id=10,
        work_date=date(2024, 3, 4),
        punches=PunchSet("08:00", "12:00", "14:00", "18:20"),
        totals=RecordTotals(500, 20, Classification.OVERTIME),
    )

    sql, params = factory.cursor.executed[0]
    assert sql.startswith("INSERT INTO daily_records")
    assert "ON DUPLICATE KEY UPDATE" in sql
    assert params[-1] == "overtime"


def test_writes_invalidate_cached_date_ranges():
    factory = FakeFactory([ROW])
    repo = MySQLDailyRecordRepository(factory, cache=ReadThroughCache())

    repo.list_by_date(date(2024, 3, 4))
    repo.list_by_date(date(2024, 3, 4))
    reads_before = len(factory.cursor.executed)
    repo.mark_alert_sent(7)
    repo.list_by_date(date(2024, 3, 4))

    assert reads_before == 1
    assert len(factory.cursor.executed) == 3


def test_employee_without_expected_minutes_keeps_none():
    row = {
        "employee_id": 12,
        "name": "Diego Lima",
        "leader_id": 2,
        "external_id": "T-12",
        "slack_id": None,
        "secondary_approver_id": None,
        "is_apprentice": 1,
        "expected_daily_minutes": None,
        "no_punch_required": 0,
        "works_saturday": 1,
    }
    repo = MySQLEmployeeRepository(FakeFactory([row]))

    employee = repo.get_by_id(12)

    assert employee.is_apprentice is True
    assert employee.expected_daily_minutes is None
