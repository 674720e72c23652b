from __future__ import annotations

from flask import Flask, request

from ..common.http import body, json_view, parse_date_param, parse_int_param
from ..container import Container
from ..core.enums import AdjustmentType, Classification, JustificationType
from ..core.exceptions import ValidationError
from .service import justification_reasons


def _enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def register(app: Flask, container: Container) -> None:
    service = container.approval_service

    # -------- Justifications --------
    @app.route("/api/justifications/reasons", methods=["GET"], endpoint="justification_reasons")
    @json_view
    def reasons():
        jtype = _enum(JustificationType, request.args.get("type", "late"), "type")
        return {"type": jtype, "reasons": justification_reasons(jtype)}

    @app.route("/api/justifications", methods=["POST"], endpoint="submit_justification")
    @json_view
    def submit_justification():
        data = body()
        justification_id = service.submit_justification(
            record_id=parse_int_param(data.get("record_id"), "record_id"),
            employee_id=parse_int_param(data.get("employee_id"), "employee_id"),
            justification_type=_enum(JustificationType, data.get("type"), "type"),
            reason=data.get("reason", ""),
            custom_note=data.get("custom_note", ""),
        )
        return {"justification_id": justification_id}, 201

    @app.route("/api/justifications/<int:justification_id>/approve", methods=["POST"], endpoint="approve_justification")
    @json_view
    def approve_justification(justification_id: int):
        data = body()
        return service.approve_justification(
            justification_id=justification_id,
            reviewer=data.get("reviewer", ""),
            comment=data.get("comment", ""),
        )

    @app.route("/api/justifications/<int:justification_id>/reject", methods=["POST"], endpoint="reject_justification")
    @json_view
    def reject_justification(justification_id: int):
        data = body()
        return service.reject_justification(
            justification_id=justification_id,
            reviewer=data.get("reviewer", ""),
            comment=data.get("comment", ""),
        )

    @app.route("/api/justifications/<int:justification_id>", methods=["DELETE"], endpoint="delete_justification")
    @json_view
    def delete_justification(justification_id: int):
        service.delete_justification(justification_id=justification_id, deleted_by=body().get("deleted_by", "admin"))
        return {"deleted": True}

    # -------- Punch adjustments --------
    @app.route("/api/punch-adjustments", methods=["POST"], endpoint="request_adjustment")
    @json_view
    def request_adjustment():
        data = body()
        missing = data.get("missing_punches") or []
        if not isinstance(missing, list):
            raise ValidationError("missing_punches must be a list")
        adjustment_id = service.request_adjustment(
            record_id=parse_int_param(data.get("record_id"), "record_id"),
            employee_id=parse_int_param(data.get("employee_id"), "employee_id"),
            adjustment_type=_enum(AdjustmentType, data.get("type"), "type"),
            missing_punches=[str(m) for m in missing],
            reason=data.get("reason", ""),
        )
        return {"adjustment_id": adjustment_id}, 201

    @app.route("/api/punch-adjustments/<int:adjustment_id>/approve", methods=["POST"], endpoint="approve_adjustment")
    @json_view
    def approve_adjustment(adjustment_id: int):
        data = body()
        return service.approve_adjustment(
            adjustment_id=adjustment_id,
            reviewer=data.get("reviewer", ""),
            corrections={k: data.get(k) for k in ("punch_1", "punch_2", "punch_3", "punch_4")},
            comment=data.get("comment", ""),
        )

    @app.route("/api/punch-adjustments/<int:adjustment_id>/reject", methods=["POST"], endpoint="reject_adjustment")
    @json_view
    def reject_adjustment(adjustment_id: int):
        data = body()
        service.reject_adjustment(
            adjustment_id=adjustment_id,
            reviewer=data.get("reviewer", ""),
            comment=data.get("comment", ""),
        )
        return {"status": "rejected"}

    @app.route("/api/punch-adjustments/<int:adjustment_id>", methods=["DELETE"], endpoint="delete_adjustment")
    @json_view
    def delete_adjustment(adjustment_id: int):
        service.delete_adjustment(adjustment_id=adjustment_id, deleted_by=body().get("deleted_by", "admin"))
        return {"deleted": True}

    # -------- Manager --------
    @app.route("/api/leaders/<int:leader_id>/pending", methods=["GET"], endpoint="leader_pending")
    @json_view
    def leader_pending(leader_id: int):
        return service.pending_for_leader(leader_id)

    @app.route("/api/records/decision", methods=["POST"], endpoint="record_decision")
    @json_view
    def record_decision():
        data = body()
        decision = _enum(Classification, data.get("decision"), "decision")
        return service.resolve_missing_record(
            employee_id=parse_int_param(data.get("employee_id"), "employee_id"),
            work_date=parse_date_param(data.get("date")),
            decision=decision,
            decided_by=data.get("decided_by", ""),
        )
