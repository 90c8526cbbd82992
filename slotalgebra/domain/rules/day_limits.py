"""
Per-day limits.
"""

from typing import Dict, List, Sequence

import pendulum

from ..exceptions import InvalidRuleError
from ..merging import sort_slots
from ..models import Slot
from .base import SlotRule


def _day_key(slot: Slot) -> str:
    # The offset is part of the key, so the same date in two zones counts separately.
    return pendulum.instance(slot.start).start_of("day").isoformat()


def max_slots_per_day_rule(max_slots: int) -> SlotRule:
    """
    Forbid every slot beyond the first ``max_slots`` of each local calendar day.

    Days are taken from each slot's start in its own zone; a day with exactly
    ``max_slots`` slots is left alone.
    """
    if max_slots < 0:
        raise InvalidRuleError(f"max_slots must not be negative, got {max_slots}")

    def rule(slots: Sequence[Slot]) -> List[Slot]:
        slots_by_day: Dict[str, List[Slot]] = {}
        for slot in slots:
            slots_by_day.setdefault(_day_key(slot), []).append(slot)

        forbidden: List[Slot] = []
        for day_slots in slots_by_day.values():
            if len(day_slots) > max_slots:
                forbidden.extend(sort_slots(day_slots)[max_slots:])
        return forbidden

    return rule
