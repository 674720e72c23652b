from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol, Sequence


@dataclass(frozen=True)
class PunchPair:
    """One entry/exit pair as reported by the time clock (epoch milliseconds)."""

    external_employee_id: str
    employee_name: Optional[str]
    date: date
    date_in: int
    date_out: Optional[int] = None


@dataclass(frozen=True)
class ExternalEmployee:
    external_id: str
    name: str


class PunchSource(Protocol):
    """Read-only access to the external time clock."""

    def fetch_employees(self) -> Sequence[ExternalEmployee]:
        raise NotImplementedError

    def fetch_punches(self, start: date, end: date) -> Sequence[PunchPair]:
        raise NotImplementedError
