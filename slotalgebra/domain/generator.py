"""
Fixed-duration slot generation.
"""

from datetime import timedelta
from typing import Any, List, Mapping, Optional

import pendulum
from pendulum import DateTime

from .exceptions import SlotGenerationError
from .models import Slot


def _shift(instant: DateTime, delta: timedelta) -> DateTime:
    # Seconds-only arithmetic in pendulum is absolute, so DST changes
    # neither stretch nor shrink the generated slots.
    microseconds = round(delta.total_seconds() * 1_000_000)
    return pendulum.instance(instant).add(
        seconds=microseconds // 1_000_000,
        microseconds=microseconds % 1_000_000,
    )


def generate_slots(
    start: DateTime,
    end: DateTime,
    duration: timedelta,
    stride: timedelta,
    metadata: Optional[Mapping[str, Any]] = None,
) -> List[Slot]:
    """
    Generate slots of a fixed duration, one every ``stride``, between two instants.

    A stride shorter than the duration gives a sliding window of overlapping
    slots, an equal stride tiles the range, a longer one leaves gaps. The last
    slot ends at or before ``end``.

    Example:
    10:00 to 12:00, duration 60 min, stride 30 min
    -> [10:00-11:00, 10:30-11:30, 11:00-12:00]

    Args:
        start: Start of the first slot
        end: Latest allowed end of any slot
        duration: Length of each slot
        stride: Distance between the starts of consecutive slots
        metadata: Copied into every generated slot

    Returns:
        List of generated slots, empty when start is not before end

    Raises:
        SlotGenerationError: If duration or stride is not positive
    """
    if start >= end:
        return []

    if duration <= timedelta(0) or stride <= timedelta(0):
        raise SlotGenerationError(
            f"Duration and stride must be positive, got duration={duration} stride={stride}"
        )

    base_metadata = dict(metadata or {})
    slots: List[Slot] = []
    index = 0

    while True:
        # Offsets are computed from the first start so the stride never drifts.
        offset = stride * index
        slot_start = _shift(start, offset)
        slot_end = _shift(start, offset + duration)
        if slot_end > end:
            break
        slots.append(Slot(start=slot_start, end=slot_end, metadata=dict(base_metadata)))
        index += 1

    return slots
