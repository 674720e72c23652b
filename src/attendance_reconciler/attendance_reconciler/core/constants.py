"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import timedelta, timezone
from typing import Any

# Tangerino stores UTC; the business runs on Sao Paulo time (no DST since 2019).
LOCAL_TZ = timezone(timedelta(hours=-3))

DEFAULT_CACHE_TTL_SECONDS = {
    "byLeader": 600,
    "byDateRange": 120,
    "justifications": 120,
}

DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 50
DEFAULT_AUDIT_LIMIT = 100

OTHER_REASON = "Outros"

LATE_JUSTIFICATIONS = (
    "Atestado médico",
    "Ajuste de horas",
    "Compensação de horas",
    "Esquecimento",
    "Máquina de ponto indisponível",
)

OVERTIME_JUSTIFICATIONS = (
    "Estava em reunião",
    "Inventário",
    "Troca de vitrine",
    "Ação de vendas",
    "Gestor ordenou sair mais tarde",
)


@dataclass(frozen=True)
class WorkSchedule:
    """Nominal work schedule and classification thresholds."""

    entry_time: str = "08:00"
    exit_time: str = "18:00"
    saturday_exit_time: str = "12:00"
    lunch_duration_minutes: int = 120
    tolerance_minutes: int = 10
    alert_threshold_minutes: int = 11
    expected_weekday_minutes: int = 480
    expected_saturday_minutes: int = 240
    default_apprentice_minutes: int = 240
    late_start_cutoff: str = "10:00"
    late_punch_cutoff: str = "17:00"
    reminder_lead_minutes: int = 10

    @classmethod
    def from_settings(cls, settings: Any) -> "WorkSchedule":
        """Build from a settings module; names are the upper-cased field names.

        ``expected_weekday_minutes`` also accepts the ``EXPECTED_DAILY_MINUTES`` alias.
        """
        values: dict[str, Any] = {}
        for f in fields(cls):
            key = f.name.upper()
            if f.name == "expected_weekday_minutes" and not hasattr(settings, key):
                key = "EXPECTED_DAILY_MINUTES"
            if hasattr(settings, key):
                raw = getattr(settings, key)
                values[f.name] = int(raw) if f.type in ("int", int) else str(raw)
        return cls(**values)
