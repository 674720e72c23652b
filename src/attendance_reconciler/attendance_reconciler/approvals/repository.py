from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AdjustmentType, JustificationType, RequestStatus
from ..records.model import PunchSet
from .model import Justification, PunchAdjustmentRequest


class ApprovalRepository(Protocol):
    """Justifications and punch adjustment requests.

    ``decide_*`` only transition rows that are still pending and return
    False otherwise, so two reviewers can never both decide one request.
    """

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
        raise NotImplementedError

    def get_justification(self, justification_id: int) -> Optional[Justification]:
        raise NotImplementedError

    def decide_justification(
        self,
        *,
        justification_id: int,
        status: RequestStatus,
        reviewed_by: str,
        comment: str,
    ) -> bool:
        raise NotImplementedError

    def delete_justification(self, justification_id: int) -> bool:
        raise NotImplementedError

    def list_justifications(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_ids: Optional[Sequence[int]] = None,
        limit: int = 200,
    ) -> Sequence[Justification]:
        raise NotImplementedError

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
        raise NotImplementedError

    def get_adjustment(self, adjustment_id: int) -> Optional[PunchAdjustmentRequest]:
        raise NotImplementedError

    def decide_adjustment(
        self,
        *,
        adjustment_id: int,
        status: RequestStatus,
        reviewed_by: str,
        comment: Optional[str],
        corrections: Optional[PunchSet] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_adjustment(self, adjustment_id: int) -> bool:
        raise NotImplementedError

    def list_adjustments(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_ids: Optional[Sequence[int]] = None,
        limit: int = 200,
    ) -> Sequence[PunchAdjustmentRequest]:
        raise NotImplementedError
