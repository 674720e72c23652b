from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Leader:
    """Domain entity: a manager who reviews requests for their team."""

    leader_id: int
    name: str
    slack_id: Optional[str] = None
    sector: Optional[str] = None
    parent_leader_id: Optional[int] = None


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee whose punches are reconciled.

    Note: plain data object, no DB access code.
    """

    employee_id: int
    name: str
    leader_id: int
    external_id: Optional[str] = None
    slack_id: Optional[str] = None
    secondary_approver_id: Optional[int] = None
    is_apprentice: bool = False
    expected_daily_minutes: Optional[int] = None
    no_punch_required: bool = False
    works_saturday: bool = True

    def is_reviewed_by(self, leader_id: int) -> bool:
        return int(leader_id) in {self.leader_id, self.secondary_approver_id}
