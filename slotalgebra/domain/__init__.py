"""
Domain layer - Pure slot algebra without external I/O.
"""

from .exceptions import (
    InvalidRuleError,
    InvalidSlotError,
    MetadataConflictError,
    SlotAlgebraError,
    SlotGenerationError,
)
from .generator import generate_slots
from .merging import merge_overlapping_slots, merge_slots, slots_overlap, sort_slots
from .metadata import (
    DEFAULT_METADATA_MERGER,
    MetadataKeyConfig,
    MetadataMergeConfig,
    MetadataStrategy,
    combine_metadata,
    create_metadata_merger,
    keep_first_metadata,
    keep_last_metadata,
)
from .models import (
    EdgeStrategy,
    MetadataMerger,
    OperationResult,
    SetOperation,
    Slot,
    SlotOperationOptions,
    SlotOperator,
)
from .operations import add_slots, compose_operators, remove_slots, update_slot
from .set_operations import (
    apply_set_operation,
    difference_slots,
    intersect_slots,
    remove_overlapping_slots,
    symmetric_difference_slots,
    union_slots,
)
from .validation import is_slot

__all__ = [
    "InvalidRuleError",
    "InvalidSlotError",
    "MetadataConflictError",
    "SlotAlgebraError",
    "SlotGenerationError",
    "generate_slots",
    "merge_overlapping_slots",
    "merge_slots",
    "slots_overlap",
    "sort_slots",
    "DEFAULT_METADATA_MERGER",
    "MetadataKeyConfig",
    "MetadataMergeConfig",
    "MetadataStrategy",
    "combine_metadata",
    "create_metadata_merger",
    "keep_first_metadata",
    "keep_last_metadata",
    "EdgeStrategy",
    "MetadataMerger",
    "OperationResult",
    "SetOperation",
    "Slot",
    "SlotOperationOptions",
    "SlotOperator",
    "add_slots",
    "compose_operators",
    "remove_slots",
    "update_slot",
    "apply_set_operation",
    "difference_slots",
    "intersect_slots",
    "remove_overlapping_slots",
    "symmetric_difference_slots",
    "union_slots",
    "is_slot",
]
