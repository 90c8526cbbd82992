"""
Overlap predicate and the merge engine.

``merge_overlapping_slots`` is the only place a slot collection gets
normalized; every collection-level set operation runs its operands through it.
"""

from typing import Iterable, List

from .models import EdgeStrategy, MetadataMerger, Slot


def slots_overlap(a: Slot, b: Slot, edge_strategy: EdgeStrategy = EdgeStrategy.INCLUSIVE) -> bool:
    """
    Check whether two slots overlap.

    Under ``INCLUSIVE`` slots that only share an endpoint overlap; under
    ``EXCLUSIVE`` the overlap must have positive length, except that two
    instants at the same moment overlap each other.
    """
    if EdgeStrategy(edge_strategy) is EdgeStrategy.INCLUSIVE:
        return a.start <= b.end and b.start <= a.end
    if a.is_instant() and b.is_instant():
        return a.start == b.start
    return a.start < b.end and b.start < a.end


def merge_slots(a: Slot, b: Slot, metadata_merger: MetadataMerger) -> Slot:
    """
    Combine two slots into their outer bounds.

    The merger is always called as ``metadata_merger(a.metadata, b.metadata)``.
    """
    return Slot(
        start=min(a.start, b.start),
        end=max(a.end, b.end),
        metadata=metadata_merger(a.metadata, b.metadata),
    )


def sort_slots(slots: Iterable[Slot]) -> List[Slot]:
    """Stable sort by start; ties keep their input order."""
    return sorted(slots, key=lambda slot: slot.start)


def merge_overlapping_slots(
    slots: Iterable[Slot],
    metadata_merger: MetadataMerger,
    edge_strategy: EdgeStrategy = EdgeStrategy.INCLUSIVE,
) -> List[Slot]:
    """
    Normalize a collection into sorted, pairwise non-overlapping slots.

    Example (inclusive):
    [09:00-10:00, 10:00-11:00, 12:00-13:00] -> [09:00-11:00, 12:00-13:00]
    """
    sorted_slots = sort_slots(slots)
    if not sorted_slots:
        return []

    merged: List[Slot] = []
    current = sorted_slots[0]

    for candidate in sorted_slots[1:]:
        if slots_overlap(current, candidate, edge_strategy):
            current = merge_slots(current, candidate, metadata_merger)
        else:
            merged.append(current)
            current = candidate

    merged.append(current)
    return merged
