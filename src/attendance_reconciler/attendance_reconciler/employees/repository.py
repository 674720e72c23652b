from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, Leader


class EmployeeRepository(Protocol):
    """Repository interface for employees and leaders.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def list_employees(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_by_leader(self, leader_id: int) -> Sequence[Employee]:
        """Employees whose leader or secondary approver is ``leader_id``."""

        raise NotImplementedError

    def link_external_id(self, employee_id: int, external_id: str) -> bool:
        raise NotImplementedError

    def list_leaders(self) -> Sequence[Leader]:
        raise NotImplementedError

    def get_leader(self, leader_id: int) -> Optional[Leader]:
        raise NotImplementedError
