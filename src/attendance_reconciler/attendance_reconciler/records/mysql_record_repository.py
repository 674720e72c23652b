from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import Classification
from ..database.cache import BY_DATE_RANGE, ReadThroughCache
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_date, db_cursor, fetchall, fetchone
from .model import DailyRecord, PunchSet, RecordTotals
from .repository import DailyRecordRepository

_RECORD_COLUMNS = """
    record_id, employee_id, work_date, punch_1, punch_2, punch_3, punch_4,
    total_worked_minutes, difference_minutes, classification,
    alert_sent, manager_alert_sent, created_at, updated_at
"""


def _opt_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _to_record(r: dict) -> DailyRecord:
    return DailyRecord(
        record_id=int(r["record_id"]),
        employee_id=int(r["employee_id"]),
        work_date=as_date(r["work_date"]),
        punch_1=r.get("punch_1"),
        punch_2=r.get("punch_2"),
        punch_3=r.get("punch_3"),
        punch_4=r.get("punch_4"),
        total_worked_minutes=_opt_int(r.get("total_worked_minutes")),
        difference_minutes=_opt_int(r.get("difference_minutes")),
        classification=Classification(r["classification"]) if r.get("classification") else None,
        alert_sent=as_bool(r.get("alert_sent")),
        manager_alert_sent=as_bool(r.get("manager_alert_sent")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _cls_value(totals: RecordTotals) -> Optional[str]:
    return totals.classification.value if totals.classification else None


class MySQLDailyRecordRepository(DailyRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, cache: Optional[ReadThroughCache] = None):
        self._conn_factory = conn_factory
        self._cache = cache or ReadThroughCache()

    def _select_one(self, where: str, params: tuple) -> Optional[DailyRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM daily_records WHERE {where}", params)
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get(self, employee_id: int, work_date: date) -> Optional[DailyRecord]:
        return self._select_one("employee_id=%s AND work_date=%s", (int(employee_id), work_date))

    def get_by_id(self, record_id: int) -> Optional[DailyRecord]:
        return self._select_one("record_id=%s", (int(record_id),))

    def upsert(
        self,
        *,
        employee_id: int,
        work_date: date,
        punches: PunchSet,
        totals: RecordTotals,
    ) -> DailyRecord:
        # UNIQUE(employee_id, work_date) makes this a single atomic statement per key.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_records(
                    employee_id, work_date, punch_1, punch_2, punch_3, punch_4,
                    total_worked_minutes, difference_minutes, classification,
                    alert_sent, manager_alert_sent
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,0,0)
                ON DUPLICATE KEY UPDATE
                    punch_1=VALUES(punch_1), punch_2=VALUES(punch_2),
                    punch_3=VALUES(punch_3), punch_4=VALUES(punch_4),
                    total_worked_minutes=VALUES(total_worked_minutes),
                    difference_minutes=VALUES(difference_minutes),
                    classification=VALUES(classification),
                    updated_at=CURRENT_TIMESTAMP
                """,
                (
                    int(employee_id),
                    work_date,
                    *punches.as_tuple(),
                    totals.total_worked_minutes,
                    totals.difference_minutes,
                    _cls_value(totals),
                ),
            )
        self._cache.invalidate(BY_DATE_RANGE)
        record = self.get(employee_id, work_date)
        if record is None:
            raise RuntimeError(f"daily record for employee {employee_id} on {work_date} vanished after upsert")
        return record

    def update_punches(self, *, record_id: int, punches: PunchSet, totals: RecordTotals) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE daily_records
                SET punch_1=%s, punch_2=%s, punch_3=%s, punch_4=%s,
                    total_worked_minutes=%s, difference_minutes=%s, classification=%s,
                    updated_at=CURRENT_TIMESTAMP
                WHERE record_id=%s
                """,
                (
                    *punches.as_tuple(),
                    totals.total_worked_minutes,
                    totals.difference_minutes,
                    _cls_value(totals),
                    int(record_id),
                ),
            )
            changed = cur.rowcount > 0
        self._cache.invalidate(BY_DATE_RANGE)
        return changed

    def _update_flag(self, sql: str, params: tuple) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            changed = cur.rowcount > 0
        self._cache.invalidate(BY_DATE_RANGE)
        return changed

    def update_classification(self, *, record_id: int, classification: Classification) -> bool:
        return self._update_flag(
            "UPDATE daily_records SET classification=%s, updated_at=CURRENT_TIMESTAMP WHERE record_id=%s",
            (classification.value, int(record_id)),
        )

    def mark_alert_sent(self, record_id: int) -> bool:
        return self._update_flag("UPDATE daily_records SET alert_sent=1 WHERE record_id=%s", (int(record_id),))

    def mark_manager_alert_sent(self, record_id: int) -> bool:
        return self._update_flag(
            "UPDATE daily_records SET manager_alert_sent=1 WHERE record_id=%s", (int(record_id),)
        )

    def list_by_date(self, work_date: date) -> Sequence[DailyRecord]:
        return self.list_range(start=work_date, end=work_date)

    def list_range(
        self,
        *,
        start: date,
        end: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[DailyRecord]:
        ids = tuple(sorted(int(i) for i in employee_ids)) if employee_ids is not None else None
        if ids == ():
            return []

        def load() -> list[DailyRecord]:
            clauses = ["work_date BETWEEN %s AND %s"]
            params: list[object] = [start, end]
            if ids is not None:
                clauses.append(f"employee_id IN ({','.join(['%s'] * len(ids))})")
                params.extend(ids)
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_RECORD_COLUMNS}
                    FROM daily_records
                    WHERE {" AND ".join(clauses)}
                    ORDER BY work_date, employee_id
                    """,
                    tuple(params),
                )
                return [_to_record(r) for r in fetchall(cur)]

        return self._cache.get_or_load(BY_DATE_RANGE, (start, end, ids), load)
