"""Approval workflow for justifications and punch adjustments.

Both request kinds move ``pending -> approved | rejected`` exactly once.
Approving a punch adjustment writes the supplied corrections onto the
DailyRecord and recalculates it; everything else only annotates.
"""

from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Sequence

from ..audit.repository import AuditLogRepository
from ..common.validators import optional_hhmm, require_non_empty
from ..core.constants import LATE_JUSTIFICATIONS, OTHER_REASON, OVERTIME_JUSTIFICATIONS
from ..core.enums import AdjustmentType, AuditAction, Classification, JustificationType, PunchSlot, RequestStatus
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..hours.calculator import CalculationContext, HoursCalculator
from ..logging_config import get_logger
from ..notifications.sink import SafeNotifier
from ..records.model import PUNCH_FIELDS, DailyRecord, PunchSet, RecordTotals
from ..records.repository import DailyRecordRepository
from .model import Justification, PendingAdjustment, PendingQueue, PunchAdjustmentRequest
from .repository import ApprovalRepository

logger = get_logger("approvals")

_MANAGER_DECISIONS = {
    Classification.FOLGA: AuditAction.MANAGER_SET_FOLGA,
    Classification.FALTA: AuditAction.MANAGER_SET_FALTA,
}


def justification_reasons(justification_type: JustificationType) -> list[str]:
    """Preset reasons offered to the employee; ``Outros`` needs a custom note."""
    presets = LATE_JUSTIFICATIONS if justification_type == JustificationType.LATE else OVERTIME_JUSTIFICATIONS
    return [*presets, OTHER_REASON]


def parse_corrections(corrections: Optional[Mapping[str, Optional[str]]]) -> PunchSet:
    """Validate corrected punches (``HH:MM``); blank fields mean "keep current"."""
    corrections = corrections or {}
    unknown = sorted(set(corrections) - set(PUNCH_FIELDS))
    if unknown:
        raise ValidationError(f"unknown punch field(s): {', '.join(unknown)}")
    return PunchSet(**{name: optional_hhmm(corrections.get(name), name) for name in PUNCH_FIELDS})


class ApprovalService:
    def __init__(
        self,
        approvals: ApprovalRepository,
        records: DailyRecordRepository,
        employees: EmployeeRepository,
        audit: AuditLogRepository,
        notifier: SafeNotifier,
        *,
        calculator: HoursCalculator,
    ):
        self._approvals = approvals
        self._records = records
        self._employees = employees
        self._audit = audit
        self._notifier = notifier
        self._calculator = calculator

    def _employee_record(self, *, record_id: int, employee_id: int) -> tuple[Employee, DailyRecord]:
        record = self._records.get_by_id(int(record_id))
        if record is None:
            raise NotFoundError("Daily record not found")
        if record.employee_id != int(employee_id):
            raise ValidationError("Daily record belongs to another employee")
        employee = self._employees.get_by_id(record.employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")
        return employee, record

    # -------- Justifications --------
    def submit_justification(
        self,
        *,
        record_id: int,
        employee_id: int,
        justification_type: JustificationType,
        reason: str,
        custom_note: str = "",
    ) -> int:
        reason = require_non_empty(reason, "reason")
        note = (custom_note or "").strip() or None
        if reason == OTHER_REASON and not note:
            raise ValidationError("custom note is required when the reason is 'Outros'")

        employee, record = self._employee_record(record_id=record_id, employee_id=employee_id)
        justification_id = self._approvals.create_justification(
            record_id=record.record_id,
            employee_id=employee.employee_id,
            type=justification_type,
            reason=reason,
            custom_note=note,
        )
        self._audit.append(
            AuditAction.JUSTIFICATION_SUBMITTED,
            "justification",
            justification_id,
            {"record_id": record.record_id, "type": justification_type.value, "reason": reason},
        )
        return justification_id

    def approve_justification(self, *, justification_id: int, reviewer: str, comment: str) -> Justification:
        return self._decide_justification(justification_id, RequestStatus.APPROVED, reviewer, comment)

    def reject_justification(self, *, justification_id: int, reviewer: str, comment: str) -> Justification:
        return self._decide_justification(justification_id, RequestStatus.REJECTED, reviewer, comment)

    def _decide_justification(
        self, justification_id: int, status: RequestStatus, reviewer: str, comment: str
    ) -> Justification:
        verb = "approve" if status == RequestStatus.APPROVED else "reject"
        if not (comment or "").strip():
            raise ValidationError(f"comment required to {verb}")
        comment = comment.strip()
        reviewer = require_non_empty(reviewer, "reviewer")

        current = self._approvals.get_justification(int(justification_id))
        if current is None:
            raise NotFoundError("Justification not found")
        if current.status != RequestStatus.PENDING:
            raise InvalidTransitionError(f"Justification already {current.status.value}")

        if not self._approvals.decide_justification(
            justification_id=current.justification_id, status=status, reviewed_by=reviewer, comment=comment
        ):
            raise InvalidTransitionError("Justification was already decided")

        action = AuditAction.JUSTIFICATION_APPROVED if status == RequestStatus.APPROVED else AuditAction.JUSTIFICATION_REJECTED
        self._audit.append(
            action, "justification", current.justification_id, {"reviewer": reviewer, "comment": comment}
        )

        employee = self._employees.get_by_id(current.employee_id)
        if employee is not None:
            self._notifier.notify_justification_outcome(
                employee,
                work_date=current.work_date,
                justification_type=current.type,
                status=status,
                reviewer=reviewer,
                comment=comment,
            )
        return self._approvals.get_justification(current.justification_id) or current

    def delete_justification(self, *, justification_id: int, deleted_by: str) -> None:
        current = self._approvals.get_justification(int(justification_id))
        if current is None or not self._approvals.delete_justification(current.justification_id):
            raise NotFoundError("Justification not found")
        self._audit.append(
            AuditAction.JUSTIFICATION_DELETED,
            "justification",
            current.justification_id,
            {"deleted_by": deleted_by, "status": current.status.value},
        )

    # -------- Punch adjustments --------
    def request_adjustment(
        self,
        *,
        record_id: int,
        employee_id: int,
        adjustment_type: AdjustmentType,
        missing_punches: Sequence[str] = (),
        reason: str,
    ) -> int:
        reason = require_non_empty(reason, "reason")
        valid_slots = {s.value for s in PunchSlot}
        bad = [m for m in missing_punches if m not in valid_slots]
        if bad:
            raise ValidationError(f"unknown punch slot(s): {', '.join(bad)}")
        if adjustment_type == AdjustmentType.MISSING_PUNCH and not missing_punches:
            raise ValidationError("missing punches are required")

        employee, record = self._employee_record(record_id=record_id, employee_id=employee_id)
        adjustment_id = self._approvals.create_adjustment(
            record_id=record.record_id,
            employee_id=employee.employee_id,
            type=adjustment_type,
            missing_punches=list(missing_punches),
            reason=reason,
        )
        self._audit.append(
            AuditAction.PUNCH_ADJUSTMENT_REQUESTED,
            "punch_adjustment",
            adjustment_id,
            {"record_id": record.record_id, "type": adjustment_type.value, "missing_punches": list(missing_punches)},
        )
        return adjustment_id

    def _pending_adjustment(self, adjustment_id: int) -> PunchAdjustmentRequest:
        current = self._approvals.get_adjustment(int(adjustment_id))
        if current is None:
            raise NotFoundError("Punch adjustment not found")
        if current.status != RequestStatus.PENDING:
            raise InvalidTransitionError(f"Punch adjustment already {current.status.value}")
        return current

    def approve_adjustment(
        self,
        *,
        adjustment_id: int,
        reviewer: str,
        corrections: Optional[Mapping[str, Optional[str]]] = None,
        comment: str = "",
    ) -> DailyRecord:
        """Merge the supplied punches into the record and recalculate it."""
        supplied = parse_corrections(corrections)
        reviewer = require_non_empty(reviewer, "reviewer")
        comment = (comment or "").strip() or None

        current = self._pending_adjustment(adjustment_id)
        record = self._records.get_by_id(current.record_id)
        if record is None:
            raise NotFoundError("Daily record not found")
        employee = self._employees.get_by_id(record.employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")

        merged = record.punches.merged_with(
            {name: value for name, value in zip(PUNCH_FIELDS, supplied.as_tuple())}
        )
        totals = self._calculator.totals(merged, CalculationContext.for_employee(employee, record.work_date))

        if not self._approvals.decide_adjustment(
            adjustment_id=current.adjustment_id,
            status=RequestStatus.APPROVED,
            reviewed_by=reviewer,
            comment=comment,
            corrections=supplied,
        ):
            raise InvalidTransitionError("Punch adjustment was already decided")
        self._records.update_punches(record_id=record.record_id, punches=merged, totals=totals)

        self._audit.append(
            AuditAction.PUNCH_ADJUSTMENT_APPROVED,
            "punch_adjustment",
            current.adjustment_id,
            {
                "record_id": record.record_id,
                "reviewer": reviewer,
                "before": list(record.punches.as_tuple()),
                "after": list(merged.as_tuple()),
                "classification": totals.classification.value if totals.classification else None,
            },
        )
        self._notifier.notify_adjustment_outcome(
            employee, work_date=record.work_date, status=RequestStatus.APPROVED, reviewer=reviewer, comment=comment
        )
        return self._records.get_by_id(record.record_id) or record

    def reject_adjustment(self, *, adjustment_id: int, reviewer: str, comment: str) -> None:
        if not (comment or "").strip():
            raise ValidationError("comment required to reject")
        comment = comment.strip()
        reviewer = require_non_empty(reviewer, "reviewer")

        current = self._pending_adjustment(adjustment_id)
        if not self._approvals.decide_adjustment(
            adjustment_id=current.adjustment_id,
            status=RequestStatus.REJECTED,
            reviewed_by=reviewer,
            comment=comment,
        ):
            raise InvalidTransitionError("Punch adjustment was already decided")

        self._audit.append(
            AuditAction.PUNCH_ADJUSTMENT_REJECTED,
            "punch_adjustment",
            current.adjustment_id,
            {"record_id": current.record_id, "reviewer": reviewer, "comment": comment},
        )
        employee = self._employees.get_by_id(current.employee_id)
        if employee is not None:
            self._notifier.notify_adjustment_outcome(
                employee,
                work_date=current.work_date,
                status=RequestStatus.REJECTED,
                reviewer=reviewer,
                comment=comment,
            )

    def delete_adjustment(self, *, adjustment_id: int, deleted_by: str) -> None:
        current = self._approvals.get_adjustment(int(adjustment_id))
        if current is None or not self._approvals.delete_adjustment(current.adjustment_id):
            raise NotFoundError("Punch adjustment not found")
        self._audit.append(
            AuditAction.PUNCH_ADJUSTMENT_DELETED,
            "punch_adjustment",
            current.adjustment_id,
            {"deleted_by": deleted_by, "status": current.status.value},
        )

    # -------- Manager queues and decisions --------
    def pending_for_leader(self, leader_id: int) -> PendingQueue:
        ids = [e.employee_id for e in self._employees.list_by_leader(int(leader_id))]
        justifications = list(self._approvals.list_justifications(status=RequestStatus.PENDING, employee_ids=ids))

        adjustments = []
        for adj in self._approvals.list_adjustments(status=RequestStatus.PENDING, employee_ids=ids):
            record = self._records.get_by_id(adj.record_id)
            adjustments.append(
                PendingAdjustment(adjustment=adj, current_punches=record.punches if record else PunchSet())
            )
        return PendingQueue(justifications=justifications, adjustments=adjustments)

    def resolve_missing_record(
        self,
        *,
        employee_id: int,
        work_date: date,
        decision: Classification,
        decided_by: str,
    ) -> DailyRecord:
        """Manager outcome for a day without punches: ``folga`` or ``falta``."""
        if decision not in _MANAGER_DECISIONS:
            raise ValidationError("decision must be 'folga' or 'falta'")
        decided_by = require_non_empty(decided_by, "decided_by")

        employee = self._employees.get_by_id(int(employee_id))
        if employee is None:
            raise NotFoundError("Employee not found")

        record = self._records.get(employee.employee_id, work_date)
        if record is not None and record.punches.count() > 0:
            raise ValidationError("Daily record has punches; request a punch adjustment instead")

        if record is None:
            record = self._records.upsert(
                employee_id=employee.employee_id,
                work_date=work_date,
                punches=PunchSet(),
                totals=RecordTotals(classification=decision),
            )
        else:
            self._records.update_classification(record_id=record.record_id, classification=decision)

        self._audit.append(
            _MANAGER_DECISIONS[decision],
            "daily_record",
            record.record_id,
            {"employee_id": employee.employee_id, "work_date": work_date.isoformat(), "decided_by": decided_by},
        )
        logger.info(
            "manager decision recorded",
            extra={"employee_id": employee.employee_id, "work_date": work_date, "decision": decision},
        )
        return self._records.get_by_id(record.record_id) or record
