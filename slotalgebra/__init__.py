"""
Algebra of time slots: set operations, rules and collection operators.
"""

from .domain import (
    DEFAULT_METADATA_MERGER,
    EdgeStrategy,
    OperationResult,
    SetOperation,
    Slot,
    SlotOperationOptions,
    add_slots,
    apply_set_operation,
    compose_operators,
    difference_slots,
    generate_slots,
    intersect_slots,
    merge_overlapping_slots,
    remove_slots,
    symmetric_difference_slots,
    union_slots,
    update_slot,
)
from .services import AvailabilityService

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_METADATA_MERGER",
    "EdgeStrategy",
    "OperationResult",
    "SetOperation",
    "Slot",
    "SlotOperationOptions",
    "add_slots",
    "apply_set_operation",
    "compose_operators",
    "difference_slots",
    "generate_slots",
    "intersect_slots",
    "merge_overlapping_slots",
    "remove_slots",
    "symmetric_difference_slots",
    "union_slots",
    "update_slot",
    "AvailabilityService",
]
