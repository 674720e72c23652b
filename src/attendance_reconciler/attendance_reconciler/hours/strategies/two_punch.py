from __future__ import annotations

from ...core.enums import PunchSlot
from .base import PunchModeStrategy


class TwoPunchStrategy(PunchModeStrategy):
    """Saturday or apprentice day: entry and exit only."""

    slots = (PunchSlot.ENTRADA, PunchSlot.SAIDA)

    def _sum(self, minutes: list[int]) -> int:
        entry, exit_ = minutes
        return exit_ - entry
