"""
Domain-specific exception hierarchy for the slot algebra engine.
"""


class SlotAlgebraError(Exception):
    """Base class for all library-level errors."""


class InvalidSlotError(SlotAlgebraError, ValueError):
    """Raised when a slot has malformed endpoints or metadata."""


class SlotGenerationError(SlotAlgebraError, ValueError):
    """Raised when slot generation is asked for a non-positive duration or stride."""


class InvalidRuleError(SlotAlgebraError, ValueError):
    """Raised when a rule is built from out-of-range parameters."""


class MetadataConflictError(SlotAlgebraError):
    """Raised by the ``error`` merge strategy when two values disagree."""
