from __future__ import annotations

from typing import Sequence

from ..core.enums import HolidayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_date, db_cursor, fetchall
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_holidays(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_id, holiday_date, name, type, recurring FROM holidays ORDER BY holiday_date")
            return [
                Holiday(
                    holiday_id=int(r["holiday_id"]),
                    date=as_date(r["holiday_date"]),
                    name=r["name"],
                    type=HolidayType(r.get("type") or HolidayType.COMPANY.value),
                    recurring=as_bool(r.get("recurring")),
                )
                for r in fetchall(cur)
            ]
