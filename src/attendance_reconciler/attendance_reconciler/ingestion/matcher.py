from __future__ import annotations

from typing import Iterable, Optional

from ..employees.model import Employee


def _name_key(name: Optional[str]) -> str:
    return (name or "").strip().lower()


class EmployeeIndex:
    """Lookup tables over the employee directory, built once per sync run."""

    def __init__(self, employees: Iterable[Employee]):
        self.by_external_id: dict[str, Employee] = {}
        self.by_name: dict[str, Employee] = {}
        for emp in employees:
            if emp.external_id:
                self.by_external_id[str(emp.external_id)] = emp
            # First employee with a given display name wins.
            self.by_name.setdefault(_name_key(emp.name), emp)


def resolve_employee(index: EmployeeIndex, *, external_id: str, name: Optional[str]) -> Optional[Employee]:
    """Resolve a time-clock employee to an internal one.

    Linked external id first, then case-insensitive exact name.  Two people
    sharing a display name resolve to the same employee, so swap this out for
    a stricter strategy when the directory allows it.
    """
    employee = index.by_external_id.get(str(external_id))
    if employee is None and _name_key(name):
        employee = index.by_name.get(_name_key(name))
    return employee
