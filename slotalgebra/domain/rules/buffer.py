"""
Buffer rules: block time around slots that match a predicate.
"""

from datetime import timedelta
from typing import List, Sequence

from ..exceptions import InvalidRuleError
from ..models import Slot
from .base import SlotMatcher, SlotRule

BUFFER_BEFORE = "before"
BUFFER_AFTER = "after"


def _buffer_slot(anchor: Slot, start, end, buffer_type: str) -> Slot:
    return Slot(
        start=start,
        end=end,
        metadata={
            **anchor.metadata,
            "is_buffer": True,
            "buffer_type": buffer_type,
            "original_slot": anchor,
        },
    )


def create_buffer_rule(
    matcher: SlotMatcher,
    buffer_before: int = 0,
    buffer_after: int = 0,
) -> SlotRule:
    """
    Create a rule that forbids time right before and/or after matching slots.

    Example:
    flights = create_buffer_rule(lambda s: s.metadata.get("type") == "flight", 60, 0)
    a 10:00-11:00 flight forbids 09:00-10:00

    Args:
        matcher: Selects the anchor slots
        buffer_before: Minutes blocked ending at each anchor's start
        buffer_after: Minutes blocked starting at each anchor's end

    Returns:
        A rule producing one buffer slot per anchor and non-zero side
    """
    if buffer_before < 0 or buffer_after < 0:
        raise InvalidRuleError(
            f"Buffer lengths must not be negative, got before={buffer_before} after={buffer_after}"
        )

    before = timedelta(minutes=buffer_before)
    after = timedelta(minutes=buffer_after)

    def rule(slots: Sequence[Slot]) -> List[Slot]:
        buffers: List[Slot] = []
        for anchor in slots:
            if not matcher(anchor):
                continue
            if buffer_before > 0:
                buffers.append(_buffer_slot(anchor, anchor.start - before, anchor.start, BUFFER_BEFORE))
            if buffer_after > 0:
                buffers.append(_buffer_slot(anchor, anchor.end, anchor.end + after, BUFFER_AFTER))
        return buffers

    return rule


def metadata_matcher(key: str, value) -> SlotMatcher:
    """Matcher selecting slots whose metadata ``key`` equals ``value``."""
    return lambda slot: slot.metadata.get(key) == value
