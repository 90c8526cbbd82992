"""
Domain models for slots and the options threaded through slot operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidSlotError

Metadata = Dict[str, Any]

MetadataMerger = Callable[[Mapping[str, Any], Mapping[str, Any]], Metadata]


class EdgeStrategy(str, Enum):
    """Whether slots that only touch at an endpoint count as overlapping."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class SetOperation(str, Enum):
    """Set operations available through the dispatcher."""

    UNION = "union"
    INTERSECTION = "intersection"
    DIFFERENCE = "difference"
    SYMMETRIC_DIFFERENCE = "symmetric_difference"


def _as_datetime(value: Any, name: str) -> DateTime:
    if not isinstance(value, datetime):
        raise InvalidSlotError(f"Slot {name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidSlotError(f"Slot {name} {value} must be timezone-aware")
    if isinstance(value, DateTime):
        return value
    return pendulum.instance(value)


@dataclass(frozen=True)
class Slot:
    """
    An immutable time interval with attached metadata.

    Invariant: start must not be after end. Zero-duration slots are valid
    and stand for a single instant.
    """
    start: DateTime
    end: DateTime
    metadata: Metadata = field(default_factory=dict)

    def __post_init__(self):
        start = _as_datetime(self.start, "start")
        end = _as_datetime(self.end, "end")
        if start > end:
            raise InvalidSlotError(f"Start time {start} must not be after end time {end}")
        if not isinstance(self.metadata, Mapping):
            raise InvalidSlotError(
                f"Slot metadata must be a mapping, got {type(self.metadata).__name__}"
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def __hash__(self) -> int:
        return hash((self.start, self.end))

    def duration(self) -> timedelta:
        """Elapsed time between start and end, independent of wall-clock shifts."""
        return timedelta(seconds=self.end.timestamp() - self.start.timestamp())

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int(self.duration().total_seconds() / 60)

    def is_instant(self) -> bool:
        return self.start == self.end

    def same_bounds(self, other: "Slot") -> bool:
        """Exact endpoint equality, ignoring metadata."""
        return self.start == other.start and self.end == other.end

    def with_bounds(self, start: DateTime, end: DateTime) -> "Slot":
        """Copy of this slot with new endpoints and a shallow copy of its metadata."""
        return Slot(start=start, end=end, metadata=dict(self.metadata))

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm Z')} - {self.end.format('YYYY-MM-DD HH:mm Z')}"


@dataclass(frozen=True)
class SlotOperationOptions:
    """
    Configuration bundle passed to every set operation.

    The metadata merger is required; use ``DEFAULT_METADATA_MERGER`` to opt
    into right-biased overwrite.
    """
    metadata_merger: MetadataMerger
    edge_strategy: EdgeStrategy = EdgeStrategy.INCLUSIVE
    min_duration: Optional[timedelta] = None

    def __post_init__(self):
        object.__setattr__(self, "edge_strategy", EdgeStrategy(self.edge_strategy))
        if self.min_duration is not None and self.min_duration < timedelta(0):
            raise ValueError(f"min_duration must not be negative, got {self.min_duration}")

    def meets_min_duration(self, slot: Slot) -> bool:
        """True when no minimum is set or the slot lasts at least that long."""
        if self.min_duration is None:
            return True
        return slot.duration() >= self.min_duration


@dataclass
class OperationResult:
    """Outcome of a collection operator: the resulting slots plus an optional error."""
    data: List[Slot]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


SlotOperator = Callable[[List[Slot]], OperationResult]
