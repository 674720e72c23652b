from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...common.datetime_utils import time_to_minutes
from ...core.enums import PunchSlot
from ...records.model import PunchSet


class PunchModeStrategy(ABC):
    """Strategy Pattern: how a day's punches add up to worked minutes."""

    #: Slot names in punch order (punch_1, punch_2, ...).
    slots: Sequence[PunchSlot] = ()

    @property
    def expected_punches(self) -> int:
        return len(self.slots)

    def required(self, punches: PunchSet) -> tuple[Optional[str], ...]:
        return punches.as_tuple()[: self.expected_punches]

    def is_complete(self, punches: PunchSet) -> bool:
        return all(self.required(punches))

    def missing_slots(self, punches: PunchSet) -> list[PunchSlot]:
        return [slot for slot, value in zip(self.slots, self.required(punches)) if not value]

    def non_final_punches(self, punches: PunchSet) -> list[str]:
        """Punches that should never happen late in the day (all but the exit)."""
        return [p for p in self.required(punches)[:-1] if p]

    def worked_minutes(self, punches: PunchSet) -> Optional[int]:
        """Worked minutes, or None when a required punch is missing."""
        if not self.is_complete(punches):
            return None
        return self._sum([time_to_minutes(p) for p in self.required(punches)])

    @abstractmethod
    def _sum(self, minutes: list[int]) -> int:
        raise NotImplementedError
