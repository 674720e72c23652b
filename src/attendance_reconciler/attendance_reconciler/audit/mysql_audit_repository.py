from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Sequence, Union

from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditLogEntry
from .repository import AuditLogRepository


def _action_value(action: Union[AuditAction, str]) -> str:
    return action.value if isinstance(action, AuditAction) else str(action)


class MySQLAuditLogRepository(AuditLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(
        self,
        action: Union[AuditAction, str],
        entity_type: str,
        entity_id: Optional[Union[int, str]] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_log(action, entity_type, entity_id, details)
                VALUES(%s,%s,%s,%s)
                """,
                (
                    _action_value(action),
                    entity_type,
                    str(entity_id) if entity_id is not None else None,
                    json.dumps(dict(details or {}), default=str, ensure_ascii=False),
                ),
            )
            return int(cur.lastrowid)

    def list_recent(self, *, limit: int = 100, offset: int = 0) -> Sequence[AuditLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT audit_id, action, entity_type, entity_id, details, created_at
                FROM audit_log
                ORDER BY created_at DESC, audit_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(limit), int(offset)),
            )
            rows = fetchall(cur)
        return [
            AuditLogEntry(
                audit_id=int(r["audit_id"]),
                action=r["action"],
                entity_type=r["entity_type"],
                entity_id=r.get("entity_id"),
                details=json.loads(r["details"]) if r.get("details") else {},
                created_at=r.get("created_at"),
            )
            for r in rows
        ]
