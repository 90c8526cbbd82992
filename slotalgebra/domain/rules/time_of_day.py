"""
Time-of-day rules.

Windows are half-open, ``[start, end)``, and compared with each slot's local
clock time in the slot's own time zone. A window whose end is earlier than
its start wraps past midnight: 22:00-06:00 is ``[22:00, 24:00) + [00:00, 06:00)``.
A window whose start equals its end is a single clock time.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import List, Sequence, Tuple

from ..exceptions import InvalidRuleError
from ..models import Slot
from .base import SlotRule

SECONDS_PER_DAY = 24 * 60 * 60

Segment = Tuple[int, int]


@dataclass(frozen=True)
class TimeOfDay:
    """A clock time; 24:00 is allowed as the end of the day."""
    hour: int
    minute: int = 0

    def __post_init__(self):
        if not 0 <= self.hour <= 24:
            raise InvalidRuleError(f"Hour must be between 0 and 24, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise InvalidRuleError(f"Minute must be between 0 and 59, got {self.minute}")
        if self.hour == 24 and self.minute != 0:
            raise InvalidRuleError("24:00 is the latest time of day")

    @property
    def seconds(self) -> int:
        return self.hour * 3600 + self.minute * 60

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


MIDNIGHT = TimeOfDay(0)
END_OF_DAY = TimeOfDay(24)


def _window_segments(start: TimeOfDay, end: TimeOfDay) -> List[Segment]:
    if start.seconds <= end.seconds:
        return [(start.seconds, end.seconds)]
    return [
        segment
        for segment in ((start.seconds, SECONDS_PER_DAY), (0, end.seconds))
        if segment[0] < segment[1]
    ]


def _clock_seconds(instant) -> int:
    return instant.hour * 3600 + instant.minute * 60 + instant.second


def _slot_segments(slot: Slot) -> List[Segment]:
    if slot.duration() >= timedelta(days=1):
        return [(0, SECONDS_PER_DAY)]

    # Read both ends on the start's clock.
    local_end = slot.end.astimezone(slot.start.tzinfo)
    start = _clock_seconds(slot.start)
    end = _clock_seconds(local_end)

    if slot.is_instant():
        return [(start, start)]
    if start < end:
        return [(start, end)]

    segments = [(start, SECONDS_PER_DAY)]
    if end > 0:
        segments.append((0, end))
    return segments


def _touches_window(slot_segment: Segment, window: Segment) -> bool:
    slot_start, slot_end = slot_segment
    window_start, window_end = window
    if window_start == window_end:
        # A point window catches slots running through it and instants on it.
        return slot_start <= window_start < slot_end or slot_start == slot_end == window_start
    if slot_start == slot_end:
        return window_start <= slot_start < window_end
    return slot_start < window_end and window_start < slot_end


def _in_any_window(slot: Slot, windows: List[Segment]) -> bool:
    return any(
        _touches_window(segment, window)
        for segment in _slot_segments(slot)
        for window in windows
    )


def create_time_of_day_rule(start: TimeOfDay, end: TimeOfDay) -> SlotRule:
    """
    Forbid slots that overlap the ``[start, end)`` window.

    When ``start`` equals ``end`` the window is that single clock time and
    forbids the slots that run through it.

    Example:
    window 09:00-17:00 forbids 08:30-09:30 and 16:00-17:00 but not 17:00-18:00
    """
    windows = _window_segments(start, end)

    def rule(slots: Sequence[Slot]) -> List[Slot]:
        return [slot for slot in slots if _in_any_window(slot, windows)]

    return rule


def allow_time_of_day_rule(start: TimeOfDay, end: TimeOfDay) -> SlotRule:
    """Forbid slots that reach outside the ``[start, end)`` window."""
    if start.seconds == end.seconds:
        # An empty allowed window leaves nothing allowed.
        return create_time_of_day_rule(MIDNIGHT, END_OF_DAY)
    # The complement of [start, end) is [end, start), which wraps when start < end.
    return create_time_of_day_rule(end, start)


def no_meetings_before_rule(hour: int, minute: int = 0) -> SlotRule:
    return create_time_of_day_rule(MIDNIGHT, TimeOfDay(hour, minute))


def no_meetings_after_rule(hour: int, minute: int = 0) -> SlotRule:
    return create_time_of_day_rule(TimeOfDay(hour, minute), END_OF_DAY)


def block_time_range_rule(
    start_hour: int,
    end_hour: int,
    start_minute: int = 0,
    end_minute: int = 0,
) -> SlotRule:
    return create_time_of_day_rule(
        TimeOfDay(start_hour, start_minute),
        TimeOfDay(end_hour, end_minute),
    )


def allow_time_range_rule(
    start_hour: int,
    end_hour: int,
    start_minute: int = 0,
    end_minute: int = 0,
) -> SlotRule:
    return allow_time_of_day_rule(
        TimeOfDay(start_hour, start_minute),
        TimeOfDay(end_hour, end_minute),
    )
