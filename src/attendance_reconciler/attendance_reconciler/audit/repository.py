from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, Union

from ..core.enums import AuditAction
from .model import AuditLogEntry


class AuditLogRepository(Protocol):
    def append(
        self,
        action: Union[AuditAction, str],
        entity_type: str,
        entity_id: Optional[Union[int, str]] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> int:
        raise NotImplementedError

    def list_recent(self, *, limit: int = 100, offset: int = 0) -> Sequence[AuditLogEntry]:
        """Newest first."""

        raise NotImplementedError
