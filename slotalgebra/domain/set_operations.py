"""
Set operations over slots and slot collections.

Every operation accepts a single slot or a sequence of slots on each side
and always returns a list (an empty list means "no result").
"""

import logging
from typing import Callable, Dict, List, Sequence, Union

from .merging import merge_overlapping_slots, slots_overlap, sort_slots
from .models import EdgeStrategy, SetOperation, Slot, SlotOperationOptions

logger = logging.getLogger(__name__)

SlotInput = Union[Slot, Sequence[Slot]]


def _as_slot_list(slots: SlotInput) -> List[Slot]:
    if isinstance(slots, Slot):
        return [slots]
    return list(slots)


def _normalize(slots: SlotInput, options: SlotOperationOptions) -> List[Slot]:
    return merge_overlapping_slots(
        _as_slot_list(slots),
        options.metadata_merger,
        options.edge_strategy,
    )


def intersect_slots(a: SlotInput, b: SlotInput, options: SlotOperationOptions) -> List[Slot]:
    """
    Return the time covered by both sides.

    Fragments shorter than ``options.min_duration`` are dropped before the
    fragments are merged back together.
    """
    normalized_a = _normalize(a, options)
    normalized_b = _normalize(b, options)
    fragments: List[Slot] = []

    for slot_a in normalized_a:
        for slot_b in normalized_b:
            if not slots_overlap(slot_a, slot_b, options.edge_strategy):
                continue

            start = max(slot_a.start, slot_b.start)
            end = min(slot_a.end, slot_b.end)

            # Touching slots have no real overlap under exclusive edges
            touching = start == end and not (slot_a.is_instant() and slot_b.is_instant())
            if options.edge_strategy is EdgeStrategy.EXCLUSIVE and touching:
                continue

            fragment = Slot(
                start=start,
                end=end,
                metadata=options.metadata_merger(slot_a.metadata, slot_b.metadata),
            )
            if options.meets_min_duration(fragment):
                fragments.append(fragment)

    return merge_overlapping_slots(fragments, options.metadata_merger, options.edge_strategy)


def union_slots(a: SlotInput, b: SlotInput, options: SlotOperationOptions) -> List[Slot]:
    """Return the time covered by either side, merged."""
    merged = merge_overlapping_slots(
        _normalize(a, options) + _normalize(b, options),
        options.metadata_merger,
        options.edge_strategy,
    )
    return [slot for slot in merged if options.meets_min_duration(slot)]


def _subtract(slot: Slot, subtrahend: Slot, edge_strategy: EdgeStrategy) -> List[Slot]:
    if not slots_overlap(slot, subtrahend, edge_strategy):
        return [slot]

    residuals: List[Slot] = []
    if slot.start < subtrahend.start:
        residuals.append(slot.with_bounds(slot.start, subtrahend.start))
    if slot.end > subtrahend.end:
        residuals.append(slot.with_bounds(subtrahend.end, slot.end))
    return residuals


def difference_slots(a: SlotInput, b: SlotInput, options: SlotOperationOptions) -> List[Slot]:
    """
    Remove every part of ``a`` that overlaps ``b``.

    The subtrahend is normalized, the minuend is not: each slot of ``a`` keeps
    its own segmentation and the output is never re-merged, so hourly slots
    stay hourly after a notch is cut out of them.

    Example:
    a = [09:00-10:00, 10:00-11:00], b = [10:30-12:00]
    -> [09:00-10:00, 10:00-10:30]
    """
    subtrahends = _normalize(b, options)
    result: List[Slot] = []

    for slot in sort_slots(_as_slot_list(a)):
        remaining = [slot]
        for subtrahend in subtrahends:
            remaining = [
                piece
                for current in remaining
                for piece in _subtract(current, subtrahend, options.edge_strategy)
            ]
            if not remaining:
                break

        result.extend(piece for piece in remaining if options.meets_min_duration(piece))

    return result


def symmetric_difference_slots(a: SlotInput, b: SlotInput, options: SlotOperationOptions) -> List[Slot]:
    """Return the time covered by exactly one side, merged."""
    exclusive_parts = difference_slots(a, b, options) + difference_slots(b, a, options)
    return merge_overlapping_slots(exclusive_parts, options.metadata_merger, options.edge_strategy)


remove_overlapping_slots = difference_slots

_SET_OPERATIONS: Dict[SetOperation, Callable[[SlotInput, SlotInput, SlotOperationOptions], List[Slot]]] = {
    SetOperation.UNION: union_slots,
    SetOperation.INTERSECTION: intersect_slots,
    SetOperation.DIFFERENCE: difference_slots,
    SetOperation.SYMMETRIC_DIFFERENCE: symmetric_difference_slots,
}


def apply_set_operation(
    operation: Union[SetOperation, str],
    a: SlotInput,
    b: SlotInput,
    options: SlotOperationOptions,
) -> List[Slot]:
    """
    Run the named set operation.

    Raises:
        ValueError: If the operation name is unknown
    """
    try:
        operation = SetOperation(operation)
    except ValueError as exc:
        valid = ", ".join(op.value for op in SetOperation)
        raise ValueError(f"Unknown set operation '{operation}'. Expected one of: {valid}") from exc

    logger.debug("Applying %s with edge strategy %s", operation.value, options.edge_strategy.value)
    return _SET_OPERATIONS[operation](a, b, options)
