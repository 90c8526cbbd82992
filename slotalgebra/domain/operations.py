"""
Operators that maintain a normalized slot collection.

Each factory returns a ``SlotOperator``: a function from the current
collection to an ``OperationResult``. Operators never raise for bad input;
they hand back the untouched collection together with an error message.
"""

import logging
from typing import List, Sequence, Union

from .merging import merge_overlapping_slots
from .models import OperationResult, Slot, SlotOperationOptions, SlotOperator
from .validation import is_slot

logger = logging.getLogger(__name__)

INVALID_SLOT_ERROR = "Invalid slot format"
INVALID_NEW_SLOT_ERROR = "Invalid new slot format"


def _as_list(slots: Union[Slot, Sequence[Slot]]) -> List[Slot]:
    # Anything that is not a list or tuple is treated as one candidate slot.
    if isinstance(slots, (list, tuple)):
        return list(slots)
    return [slots]


def add_slots(new_slots: Union[Slot, Sequence[Slot]], options: SlotOperationOptions) -> SlotOperator:
    """Create an operator that merges ``new_slots`` into the collection."""
    slots_to_add = _as_list(new_slots)

    def operator(current_slots: List[Slot]) -> OperationResult:
        for slot in slots_to_add:
            if not is_slot(slot):
                logger.warning("Rejected slot %r: %s", slot, INVALID_SLOT_ERROR)
                return OperationResult(data=current_slots, error=INVALID_SLOT_ERROR)

        return OperationResult(
            data=merge_overlapping_slots(
                list(current_slots) + slots_to_add,
                options.metadata_merger,
                options.edge_strategy,
            )
        )

    return operator


def remove_slots(slots_to_remove: Union[Slot, Sequence[Slot]]) -> SlotOperator:
    """
    Create an operator that drops slots whose endpoints exactly match.

    Unlike ``difference_slots`` this never splits a slot.
    """
    bounds = {(slot.start, slot.end) for slot in _as_list(slots_to_remove)}

    def operator(current_slots: List[Slot]) -> OperationResult:
        return OperationResult(
            data=[slot for slot in current_slots if (slot.start, slot.end) not in bounds]
        )

    return operator


def update_slot(old_slot: Slot, new_slot: Slot, options: SlotOperationOptions) -> SlotOperator:
    """Create an operator that replaces ``old_slot`` and re-merges the replacement."""

    def operator(current_slots: List[Slot]) -> OperationResult:
        if not is_slot(new_slot):
            logger.warning("Rejected replacement slot %r: %s", new_slot, INVALID_NEW_SLOT_ERROR)
            return OperationResult(data=current_slots, error=INVALID_NEW_SLOT_ERROR)

        without_old = remove_slots(old_slot)(current_slots)
        if without_old.error:
            return without_old

        return add_slots(new_slot, options)(without_old.data)

    return operator


def compose_operators(*operators: SlotOperator) -> SlotOperator:
    """
    Chain operators left to right.

    Stops at the first error and returns it with the collection as it was
    just before the failing step.
    """

    def composed(slots: List[Slot]) -> OperationResult:
        for operator in operators:
            result = operator(slots)
            if result.error:
                return result
            slots = result.data
        return OperationResult(data=slots)

    return composed
