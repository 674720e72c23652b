from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class AuditLogEntry:
    """Append-only trail entry; never updated or deleted."""

    audit_id: int
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    details: Mapping[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
