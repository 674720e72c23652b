from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AdjustmentType, JustificationType, RequestStatus
from ..records.model import PunchSet


@dataclass(frozen=True)
class Justification:
    """An employee's explanation for a late/overtime day; annotates, never recalculates."""

    justification_id: int
    record_id: int
    employee_id: int
    work_date: date
    type: JustificationType
    reason: str
    custom_note: Optional[str] = None
    status: RequestStatus = RequestStatus.PENDING
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewer_comment: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PunchAdjustmentRequest:
    """Request to correct missing or implausible punches on one DailyRecord."""

    adjustment_id: int
    record_id: int
    employee_id: int
    work_date: date
    type: AdjustmentType
    reason: str
    missing_punches: tuple[str, ...] = field(default_factory=tuple)
    status: RequestStatus = RequestStatus.PENDING
    corrected_punch_1: Optional[str] = None
    corrected_punch_2: Optional[str] = None
    corrected_punch_3: Optional[str] = None
    corrected_punch_4: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewer_comment: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def corrections(self) -> PunchSet:
        return PunchSet(
            self.corrected_punch_1, self.corrected_punch_2, self.corrected_punch_3, self.corrected_punch_4
        )


@dataclass(frozen=True)
class PendingAdjustment:
    """A pending adjustment shown next to the record's current (incomplete) punches."""

    adjustment: PunchAdjustmentRequest
    current_punches: PunchSet


@dataclass(frozen=True)
class PendingQueue:
    justifications: list[Justification]
    adjustments: list[PendingAdjustment]

