from __future__ import annotations

from typing import Optional, Sequence

from ..database.cache import BY_LEADER, ReadThroughCache
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Employee, Leader
from .repository import EmployeeRepository

_EMPLOYEE_COLUMNS = """
    employee_id, name, leader_id, external_id, slack_id, secondary_approver_id,
    is_apprentice, expected_daily_minutes, no_punch_required, works_saturday
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        name=r["name"],
        leader_id=int(r["leader_id"]),
        external_id=r.get("external_id"),
        slack_id=r.get("slack_id"),
        secondary_approver_id=(int(r["secondary_approver_id"]) if r.get("secondary_approver_id") else None),
        is_apprentice=as_bool(r.get("is_apprentice")),
        expected_daily_minutes=(int(r["expected_daily_minutes"]) if r.get("expected_daily_minutes") is not None else None),
        no_punch_required=as_bool(r.get("no_punch_required")),
        works_saturday=as_bool(r.get("works_saturday", 1)),
    )


def _to_leader(r: dict) -> Leader:
    return Leader(
        leader_id=int(r["leader_id"]),
        name=r["name"],
        slack_id=r.get("slack_id"),
        sector=r.get("sector"),
        parent_leader_id=(int(r["parent_leader_id"]) if r.get("parent_leader_id") else None),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, cache: Optional[ReadThroughCache] = None):
        self._conn_factory = conn_factory
        self._cache = cache or ReadThroughCache()

    def list_employees(self) -> Sequence[Employee]:
        return self._cache.get_or_load(BY_LEADER, "all", self._load_employees)

    def _load_employees(self) -> list[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees ORDER BY name")
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_by_leader(self, leader_id: int) -> Sequence[Employee]:
        def load() -> list[Employee]:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_EMPLOYEE_COLUMNS}
                    FROM employees
                    WHERE leader_id=%s OR secondary_approver_id=%s
                    ORDER BY name
                    """,
                    (int(leader_id), int(leader_id)),
                )
                return [_to_employee(r) for r in fetchall(cur)]

        return self._cache.get_or_load(BY_LEADER, int(leader_id), load)

    def link_external_id(self, employee_id: int, external_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET external_id=%s WHERE employee_id=%s AND external_id IS NULL",
                (str(external_id), int(employee_id)),
            )
            changed = cur.rowcount > 0
        self._cache.invalidate(BY_LEADER)
        return changed

    def list_leaders(self) -> Sequence[Leader]:
        def load() -> list[Leader]:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT leader_id, name, slack_id, sector, parent_leader_id FROM leaders ORDER BY name")
                return [_to_leader(r) for r in fetchall(cur)]

        return self._cache.get_or_load(BY_LEADER, "leaders", load)

    def get_leader(self, leader_id: int) -> Optional[Leader]:
        for leader in self.list_leaders():
            if leader.leader_id == int(leader_id):
                return leader
        return None
