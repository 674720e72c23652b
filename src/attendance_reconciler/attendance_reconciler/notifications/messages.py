"""Plain-text message bodies shared by every notification sink."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_minutes
from ..core.enums import Classification, JustificationType, ReminderType, RequestStatus
from ..employees.model import Employee, Leader
from ..records.model import DailyRecord

_REMINDER_PUNCH = {
    ReminderType.ENTRY: "entrada",
    ReminderType.LUNCH_RETURN: "retorno do almoço",
    ReminderType.EXIT: "saída",
}

_STATUS_LABEL = {
    RequestStatus.APPROVED: "Aprovada",
    RequestStatus.REJECTED: "Rejeitada",
    RequestStatus.PENDING: "Pendente",
}


def _fmt_date(day: date) -> str:
    return day.strftime("%d/%m/%Y")


def deviation(
    employee: Employee,
    work_date: date,
    total_worked_minutes: int,
    difference_minutes: int,
    classification: Classification,
) -> str:
    label = "Atraso" if classification == Classification.LATE else "Hora extra"
    return "\n".join(
        [
            f"Alerta de {label.lower()}",
            f"Colaborador: {employee.name}",
            f"Data: {_fmt_date(work_date)}",
            f"Total trabalhado: {format_minutes(total_worked_minutes)}",
            f"{label}: {format_minutes(abs(difference_minutes))}",
            "Seu gestor será informado sobre este registro.",
        ]
    )


def missing_punch(employee: Employee, work_date: date, missing: Sequence[str]) -> str:
    return "\n".join(
        [
            f"Colaborador: {employee.name}",
            f"Data: {_fmt_date(work_date)}",
            f"Você esqueceu de bater {len(missing)} ponto(s): {', '.join(missing)}",
            "Solicite um ajuste para o seu gestor.",
        ]
    )


def late_start(employee: Employee, record: DailyRecord, cutoff: str) -> str:
    return "\n".join(
        [
            f"Colaborador: {employee.name}",
            f"Data: {_fmt_date(record.work_date)}",
            f"Primeiro ponto: {record.punch_1}",
            f"Seu primeiro ponto foi após {cutoff}. Solicite um ajuste se estiver incorreto.",
        ]
    )


def late_punch(employee: Employee, record: DailyRecord, punch: str, cutoff: str) -> str:
    return "\n".join(
        [
            f"Colaborador: {employee.name}",
            f"Data: {_fmt_date(record.work_date)}",
            f"O ponto {punch} foi registrado após {cutoff} e parece incorreto. Solicite um ajuste.",
        ]
    )


def manager_no_record(employee: Employee, work_date: date) -> str:
    return "\n".join(
        [
            "Decisão necessária - sem registro",
            f"Colaborador: {employee.name}",
            f"Data: {_fmt_date(work_date)}",
            "Por favor, indique se foi folga ou falta.",
        ]
    )


def weekly_summary(leader: Leader, start: date, end: date, entries: Sequence[tuple[Employee, DailyRecord]]) -> str:
    lines = [
        f"Resumo semanal {_fmt_date(start)} - {_fmt_date(end)}",
        f"Gestor: {leader.name}",
        f"Total de alertas: {len(entries)}",
    ]
    for employee, record in entries:
        label = "Atraso" if record.classification == Classification.LATE else "Hora extra"
        lines.append(
            f"- {employee.name} {_fmt_date(record.work_date)}: {label} {format_minutes(abs(record.difference_minutes or 0))}"
        )
    return "\n".join(lines)


def justification_outcome(
    employee: Employee,
    work_date: date,
    justification_type: JustificationType,
    status: RequestStatus,
    reviewer: str,
    comment: Optional[str],
) -> str:
    type_label = "Atraso" if justification_type == JustificationType.LATE else "Hora extra"
    return "\n".join(
        [
            f"Justificativa {_STATUS_LABEL[status].lower()}",
            f"Colaborador: {employee.name}",
            f"Data: {_fmt_date(work_date)}",
            f"Tipo: {type_label}",
            f"Revisado por: {reviewer}",
            f"Comentário do gestor: {comment or '-'}",
        ]
    )


def adjustment_outcome(
    employee: Employee, work_date: date, status: RequestStatus, reviewer: str, comment: Optional[str]
) -> str:
    return "\n".join(
        [
            f"Ajuste de ponto {_STATUS_LABEL[status].lower()}",
            f"Colaborador: {employee.name}",
            f"Data: {_fmt_date(work_date)}",
            f"Revisado por: {reviewer}",
            f"Comentário do gestor: {comment or '-'}",
        ]
    )


def punch_reminder(reminder_type: ReminderType, minutes_left: int) -> str:
    return f"Lembrete: faltam {minutes_left} min para bater o ponto de {_REMINDER_PUNCH[reminder_type]}"
