from __future__ import annotations

from ...core.enums import PunchSlot
from .base import PunchModeStrategy


class FourPunchStrategy(PunchModeStrategy):
    """Weekday: morning (entry to lunch-out) plus afternoon (lunch-return to exit)."""

    slots = (PunchSlot.ENTRADA, PunchSlot.INTERVALO, PunchSlot.RETORNO, PunchSlot.SAIDA)

    def _sum(self, minutes: list[int]) -> int:
        p1, p2, p3, p4 = minutes
        return (p2 - p1) + (p4 - p3)
