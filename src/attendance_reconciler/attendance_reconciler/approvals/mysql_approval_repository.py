from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import AdjustmentType, JustificationType, RequestStatus
from ..database.cache import JUSTIFICATIONS, ReadThroughCache
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from ..records.model import PunchSet
from .model import Justification, PunchAdjustmentRequest
from .repository import ApprovalRepository

_JUSTIFICATION_SELECT = """
    SELECT j.justification_id, j.record_id, j.employee_id, r.work_date,
           j.type, j.reason, j.custom_note, j.status,
           j.reviewed_by, j.reviewed_at, j.reviewer_comment, j.created_at
    FROM justifications j
    JOIN daily_records r ON r.record_id = j.record_id
"""

_ADJUSTMENT_SELECT = """
    SELECT a.adjustment_id, a.record_id, a.employee_id, r.work_date,
           a.type, a.missing_punches, a.reason, a.status,
           a.corrected_punch_1, a.corrected_punch_2, a.corrected_punch_3, a.corrected_punch_4,
           a.reviewed_by, a.reviewed_at, a.reviewer_comment, a.created_at
    FROM punch_adjustments a
    JOIN daily_records r ON r.record_id = a.record_id
"""


def _to_justification(r: dict) -> Justification:
    return Justification(
        justification_id=int(r["justification_id"]),
        record_id=int(r["record_id"]),
        employee_id=int(r["employee_id"]),
        work_date=as_date(r["work_date"]),
        type=JustificationType(r["type"]),
        reason=r["reason"],
        custom_note=r.get("custom_note"),
        status=RequestStatus(r["status"]),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        reviewer_comment=r.get("reviewer_comment"),
        created_at=r.get("created_at"),
    )


def _to_adjustment(r: dict) -> PunchAdjustmentRequest:
    raw_missing = r.get("missing_punches")
    return PunchAdjustmentRequest(
        adjustment_id=int(r["adjustment_id"]),
        record_id=int(r["record_id"]),
        employee_id=int(r["employee_id"]),
        work_date=as_date(r["work_date"]),
        type=AdjustmentType(r["type"]),
        reason=r["reason"],
        missing_punches=tuple(json.loads(raw_missing)) if raw_missing else (),
        status=RequestStatus(r["status"]),
        corrected_punch_1=r.get("corrected_punch_1"),
        corrected_punch_2=r.get("corrected_punch_2"),
        corrected_punch_3=r.get("corrected_punch_3"),
        corrected_punch_4=r.get("corrected_punch_4"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        reviewer_comment=r.get("reviewer_comment"),
        created_at=r.get("created_at"),
    )


def _filters(alias: str, status: Optional[RequestStatus], ids: Optional[tuple[int, ...]]) -> tuple[str, list]:
    clauses: list[str] = []
    params: list[object] = []
    if status is not None:
        clauses.append(f"{alias}.status=%s")
        params.append(status.value)
    if ids is not None:
        clauses.append(f"{alias}.employee_id IN ({','.join(['%s'] * len(ids))})")
        params.extend(ids)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class MySQLApprovalRepository(ApprovalRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, cache: Optional[ReadThroughCache] = None):
        self._conn_factory = conn_factory
        self._cache = cache or ReadThroughCache()

    # -------- Justifications --------
    def create_justification(
        self,
        *,
        record_id: int,
        employee_id: int,
        type: JustificationType,
        reason: str,
        custom_note: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO justifications(record_id, employee_id, type, reason, custom_note, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(record_id), int(employee_id), type.value, reason, custom_note, RequestStatus.PENDING.value),
            )
            new_id = int(cur.lastrowid)
        self._cache.invalidate(JUSTIFICATIONS)
        return new_id

    def get_justification(self, justification_id: int) -> Optional[Justification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_JUSTIFICATION_SELECT} WHERE j.justification_id=%s", (int(justification_id),))
            r = fetchone(cur)
            return _to_justification(r) if r else None

    def decide_justification(
        self,
        *,
        justification_id: int,
        status: RequestStatus,
        reviewed_by: str,
        comment: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE justifications
                SET status=%s, reviewed_by=%s, reviewer_comment=%s, reviewed_at=CURRENT_TIMESTAMP
                WHERE justification_id=%s AND status=%s
                """,
                (status.value, reviewed_by, comment, int(justification_id), RequestStatus.PENDING.value),
            )
            changed = cur.rowcount > 0
        self._cache.invalidate(JUSTIFICATIONS)
        return changed

    def delete_justification(self, justification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM justifications WHERE justification_id=%s", (int(justification_id),))
            changed = cur.rowcount > 0
        self._cache.invalidate(JUSTIFICATIONS)
        return changed

    def list_justifications(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_ids: Optional[Sequence[int]] = None,
        limit: int = 200,
    ) -> Sequence[Justification]:
        ids = tuple(sorted(int(i) for i in employee_ids)) if employee_ids is not None else None
        if ids == ():
            return []

        def load() -> list[Justification]:
            where, params = _filters("j", status, ids)
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"{_JUSTIFICATION_SELECT} {where} ORDER BY j.created_at DESC, j.justification_id DESC LIMIT %s",
                    (*params, int(limit)),
                )
                return [_to_justification(r) for r in fetchall(cur)]

        return self._cache.get_or_load(JUSTIFICATIONS, (status, ids, int(limit)), load)

    # -------- Punch adjustments --------
    def create_adjustment(
        self,
        *,
        record_id: int,
        employee_id: int,
        type: AdjustmentType,
        missing_punches: Sequence[str],
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO punch_adjustments(record_id, employee_id, type, missing_punches, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(record_id),
                    int(employee_id),
                    type.value,
                    json.dumps(list(missing_punches), ensure_ascii=False),
                    reason,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_adjustment(self, adjustment_id: int) -> Optional[PunchAdjustmentRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_ADJUSTMENT_SELECT} WHERE a.adjustment_id=%s", (int(adjustment_id),))
            r = fetchone(cur)
            return _to_adjustment(r) if r else None

    def decide_adjustment(
        self,
        *,
        adjustment_id: int,
        status: RequestStatus,
        reviewed_by: str,
        comment: Optional[str],
        corrections: Optional[PunchSet] = None,
    ) -> bool:
        c = corrections or PunchSet()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE punch_adjustments
                SET status=%s, reviewed_by=%s, reviewer_comment=%s, reviewed_at=CURRENT_TIMESTAMP,
                    corrected_punch_1=%s, corrected_punch_2=%s, corrected_punch_3=%s, corrected_punch_4=%s
                WHERE adjustment_id=%s AND status=%s
                """,
                (
                    status.value,
                    reviewed_by,
                    comment,
                    *c.as_tuple(),
                    int(adjustment_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete_adjustment(self, adjustment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM punch_adjustments WHERE adjustment_id=%s", (int(adjustment_id),))
            return cur.rowcount > 0

    def list_adjustments(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_ids: Optional[Sequence[int]] = None,
        limit: int = 200,
    ) -> Sequence[PunchAdjustmentRequest]:
        ids = tuple(sorted(int(i) for i in employee_ids)) if employee_ids is not None else None
        if ids == ():
            return []
        where, params = _filters("a", status, ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_ADJUSTMENT_SELECT} {where} ORDER BY a.created_at DESC, a.adjustment_id DESC LIMIT %s",
                (*params, int(limit)),
            )
            return [_to_adjustment(r) for r in fetchall(cur)]
