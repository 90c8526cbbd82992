"""
Weekday rules.

Weekdays use ISO numbering (1 = Monday, 7 = Sunday) and are read from each
slot's start in the slot's own time zone, so the same instant can fall on
different weekdays for slots in different zones.
"""

from typing import Iterable, List, Sequence

from ..exceptions import InvalidRuleError
from ..models import Slot
from .base import SlotRule

WEEKEND = (6, 7)


def _validate_weekdays(weekdays: Iterable[int]) -> frozenset:
    days = frozenset(weekdays)
    invalid = sorted(day for day in days if day not in range(1, 8))
    if invalid:
        raise InvalidRuleError(f"Weekdays must be between 1 and 7, got {invalid}")
    return days


def _weekday_rule(weekdays: Iterable[int], is_allow_list: bool) -> SlotRule:
    days = _validate_weekdays(weekdays)

    def rule(slots: Sequence[Slot]) -> List[Slot]:
        # No weekdays means no restriction, not "forbid everything".
        if not days:
            return []
        return [
            slot for slot in slots
            if (slot.start.isoweekday() in days) != is_allow_list
        ]

    return rule


def allow_weekdays_rule(allowed_weekdays: Iterable[int] = ()) -> SlotRule:
    """Forbid slots that start on a weekday outside ``allowed_weekdays``."""
    return _weekday_rule(allowed_weekdays, is_allow_list=True)


def forbid_weekdays_rule(forbidden_weekdays: Iterable[int] = ()) -> SlotRule:
    """Forbid slots that start on one of ``forbidden_weekdays``."""
    return _weekday_rule(forbidden_weekdays, is_allow_list=False)


def remove_weekends_rule() -> SlotRule:
    """Forbid slots that start on a Saturday or Sunday."""
    return forbid_weekdays_rule(WEEKEND)
