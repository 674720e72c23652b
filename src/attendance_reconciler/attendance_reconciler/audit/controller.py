from __future__ import annotations

from flask import Flask, request

from ..common.http import json_view, parse_int_param
from ..container import Container
from ..core.constants import DEFAULT_AUDIT_LIMIT


def register(app: Flask, container: Container) -> None:
    @app.route("/api/audit", methods=["GET"], endpoint="list_audit")
    @json_view
    def list_audit():
        limit = parse_int_param(request.args.get("limit", DEFAULT_AUDIT_LIMIT), "limit")
        offset = parse_int_param(request.args.get("offset", 0), "offset")
        return container.audit_repo.list_recent(limit=max(1, min(limit, 1000)), offset=max(0, offset))
