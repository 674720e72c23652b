from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Classification
from .model import DailyRecord, PunchSet, RecordTotals


class DailyRecordRepository(Protocol):
    def get(self, employee_id: int, work_date: date) -> Optional[DailyRecord]:
        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[DailyRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        work_date: date,
        punches: PunchSet,
        totals: RecordTotals,
    ) -> DailyRecord:
        """Overwrite punches and derived fields, or create with alert flags false.

        Last writer wins on the full punch/derived field set of one key.
        """

        raise NotImplementedError

    def update_punches(self, *, record_id: int, punches: PunchSet, totals: RecordTotals) -> bool:
        raise NotImplementedError

    def update_classification(self, *, record_id: int, classification: Classification) -> bool:
        raise NotImplementedError

    def mark_alert_sent(self, record_id: int) -> bool:
        raise NotImplementedError

    def mark_manager_alert_sent(self, record_id: int) -> bool:
        raise NotImplementedError

    def list_by_date(self, work_date: date) -> Sequence[DailyRecord]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start: date,
        end: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[DailyRecord]:
        raise NotImplementedError
