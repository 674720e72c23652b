from __future__ import annotations

from enum import Enum


class Classification(str, Enum):
    """Final classification of one employee workday stored on the DailyRecord."""

    NORMAL = "normal"
    LATE = "late"
    OVERTIME = "overtime"
    AJUSTE = "ajuste"
    FOLGA = "folga"
    FALTA = "falta"
    SEM_REGISTRO = "sem_registro"


class RequestStatus(str, Enum):
    """Approval lifecycle shared by justifications and punch adjustments."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class JustificationType(str, Enum):
    LATE = "late"
    OVERTIME = "overtime"


class AdjustmentType(str, Enum):
    MISSING_PUNCH = "missing_punch"
    LATE_START = "late_start"


class ReminderType(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"
    LUNCH_RETURN = "lunch_return"


class PunchSlot(str, Enum):
    """Named punch slots as shown to employees."""

    ENTRADA = "Entrada"
    INTERVALO = "Intervalo"
    RETORNO = "Retorno"
    SAIDA = "Saída"


class HolidayType(str, Enum):
    NATIONAL = "national"
    STATE = "state"
    MUNICIPAL = "municipal"
    COMPANY = "company"


class AuditAction(str, Enum):
    """Actions recorded on the append-only audit trail."""

    API_READ = "API_READ"
    SYNC_COMPLETED = "SYNC_COMPLETED"
    SYNC_ERROR = "SYNC_ERROR"
    END_OF_DAY_CHECK_ERROR = "END_OF_DAY_CHECK_ERROR"
    JUSTIFICATION_SUBMITTED = "JUSTIFICATION_SUBMITTED"
    JUSTIFICATION_APPROVED = "JUSTIFICATION_APPROVED"
    JUSTIFICATION_REJECTED = "JUSTIFICATION_REJECTED"
    JUSTIFICATION_DELETED = "JUSTIFICATION_DELETED"
    PUNCH_ADJUSTMENT_REQUESTED = "PUNCH_ADJUSTMENT_REQUESTED"
    PUNCH_ADJUSTMENT_APPROVED = "PUNCH_ADJUSTMENT_APPROVED"
    PUNCH_ADJUSTMENT_REJECTED = "PUNCH_ADJUSTMENT_REJECTED"
    PUNCH_ADJUSTMENT_DELETED = "PUNCH_ADJUSTMENT_DELETED"
    MANAGER_SET_FOLGA = "MANAGER_SET_FOLGA"
    MANAGER_SET_FALTA = "MANAGER_SET_FALTA"
    MANAGER_WEEKLY_ALERTS_SENT = "MANAGER_WEEKLY_ALERTS_SENT"
    MANAGER_WEEKLY_ALERT_ERROR = "MANAGER_WEEKLY_ALERT_ERROR"
