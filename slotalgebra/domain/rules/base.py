"""
Shared rule types.

A rule maps a slot collection to the slots that should be forbidden. Rules
never mutate their input and never remove anything themselves; callers
subtract the result with ``difference_slots`` or ``remove_slots``.
"""

from typing import Callable, Iterable, List, Sequence

from ..models import Slot

SlotRule = Callable[[Sequence[Slot]], List[Slot]]

SlotMatcher = Callable[[Slot], bool]


def collect_forbidden(slots: Sequence[Slot], rules: Iterable[SlotRule]) -> List[Slot]:
    """Concatenate the forbidden slots of every rule, in rule order."""
    forbidden: List[Slot] = []
    for rule in rules:
        forbidden.extend(rule(slots))
    return forbidden
