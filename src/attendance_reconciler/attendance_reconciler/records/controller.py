from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import previous_day, today_local
from ..common.http import body, json_view, parse_date_param
from ..container import Container
from ..core.exceptions import NotFoundError


def register(app: Flask, container: Container) -> None:
    def _date_or_today(value):
        return parse_date_param(value) if value else today_local()

    @app.route("/api/records", methods=["GET"], endpoint="list_records")
    @json_view
    def list_records():
        work_date = _date_or_today(request.args.get("date"))
        return {"date": work_date, "records": container.records_repo.list_by_date(work_date)}

    @app.route("/api/records/<int:record_id>", methods=["GET"], endpoint="get_record")
    @json_view
    def get_record(record_id: int):
        record = container.records_repo.get_by_id(record_id)
        if record is None:
            raise NotFoundError("Daily record not found")
        return record

    @app.route("/api/sync", methods=["POST"], endpoint="trigger_sync")
    @json_view
    def trigger_sync():
        result = container.punch_ingestor.sync_date(_date_or_today(body().get("date")))
        return result, (200 if result.ok else 502)

    @app.route("/api/reconcile", methods=["POST"], endpoint="trigger_reconcile")
    @json_view
    def trigger_reconcile():
        value = body().get("date")
        work_date = parse_date_param(value) if value else previous_day(today_local())
        result = container.daily_reconciler.reconcile(work_date)
        return {
            "date": result.work_date,
            "outcomes": dict(result.outcomes),
            "error": result.error,
        }
