"""
Rules: functions from a slot collection to the slots it should not contain.
"""

from .base import SlotMatcher, SlotRule, collect_forbidden
from .buffer import BUFFER_AFTER, BUFFER_BEFORE, create_buffer_rule, metadata_matcher
from .day_limits import max_slots_per_day_rule
from .time_of_day import (
    TimeOfDay,
    allow_time_of_day_rule,
    allow_time_range_rule,
    block_time_range_rule,
    create_time_of_day_rule,
    no_meetings_after_rule,
    no_meetings_before_rule,
)
from .weekday import allow_weekdays_rule, forbid_weekdays_rule, remove_weekends_rule

__all__ = [
    "SlotMatcher",
    "SlotRule",
    "collect_forbidden",
    "BUFFER_AFTER",
    "BUFFER_BEFORE",
    "create_buffer_rule",
    "metadata_matcher",
    "max_slots_per_day_rule",
    "TimeOfDay",
    "allow_time_of_day_rule",
    "allow_time_range_rule",
    "block_time_range_rule",
    "create_time_of_day_rule",
    "no_meetings_after_rule",
    "no_meetings_before_rule",
    "allow_weekdays_rule",
    "forbid_weekdays_rule",
    "remove_weekends_rule",
]
