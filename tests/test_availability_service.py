"""
Tests for the AvailabilityService orchestration layer.
"""

from datetime import timedelta
from typing import List, Sequence

import pendulum

from slotalgebra.domain.generator import generate_slots
from slotalgebra.domain.metadata import keep_first_metadata, keep_last_metadata
from slotalgebra.domain.models import Slot, SlotOperationOptions
from slotalgebra.domain.rules import SlotRule, allow_time_range_rule, remove_weekends_rule
from slotalgebra.domain.set_operations import difference_slots, intersect_slots
from slotalgebra.services.availability import AvailabilityService

HOUR = timedelta(hours=1)


def _build_service(rules: Sequence[SlotRule] = ()) -> AvailabilityService:
    options = SlotOperationOptions(metadata_merger=keep_last_metadata)
    return AvailabilityService(options=options, rules=rules)


def _slot(start: str, end: str, tz: str = "UTC", **metadata) -> Slot:
    return Slot(start=pendulum.parse(start, tz=tz), end=pendulum.parse(end, tz=tz), metadata=metadata)


def _bounds(slots: List[Slot]):
    return [(s.start.format("HH:mm"), s.end.format("HH:mm")) for s in slots]


def _two_weeks_hourly(tz: str, **metadata) -> List[Slot]:
    start = pendulum.parse("2024-01-15", tz=tz)
    return generate_slots(start, start.add(days=14), HOUR, HOUR, metadata)


def test_apply_rules_without_rules_returns_copy():
    """Without rules every slot survives untouched."""
    slots = [_slot("2024-03-18 09:00", "2024-03-18 10:00")]
    service = _build_service()

    result = service.apply_rules(slots)

    assert result == slots
    assert result is not slots


def test_apply_rules_subtracts_forbidden_slots():
    """Weekend slots are removed, weekday slots keep their segmentation."""
    start = pendulum.parse("2024-03-22 09:00", tz="UTC")
    end = pendulum.parse("2024-03-25 00:00", tz="UTC")
    slots = generate_slots(start, end, HOUR, HOUR)
    service = _build_service([remove_weekends_rule()])

    result = service.apply_rules(slots)

    assert len(result) == 15
    assert all(slot.start.isoweekday() == 5 for slot in result)
    assert all(slot.duration() == HOUR for slot in result)


def test_forbidden_slots_collects_every_rule():
    saturday = _slot("2024-03-23 10:00", "2024-03-23 11:00")
    early = _slot("2024-03-18 07:00", "2024-03-18 08:00")
    service = _build_service([remove_weekends_rule(), allow_time_range_rule(9, 17)])

    assert service.forbidden_slots([early, saturday]) == [saturday, early]


def test_rules_property_is_a_copy():
    service = _build_service([remove_weekends_rule()])

    service.rules.clear()

    assert len(service.rules) == 1


def test_find_common_availability():
    """Common availability is the intersection across all parties."""
    service = _build_service()
    parties = {
        "alice": [_slot("2024-03-18 09:00", "2024-03-18 13:00")],
        "bob": [_slot("2024-03-18 11:00", "2024-03-18 17:00")],
        "carol": [_slot("2024-03-18 10:00", "2024-03-18 12:00"), _slot("2024-03-18 12:30", "2024-03-18 14:00")],
    }

    result = service.find_common_availability(parties)

    assert _bounds(result) == [("11:00", "12:00"), ("12:30", "13:00")]


def test_find_common_availability_without_overlap():
    service = _build_service()
    parties = {
        "alice": [_slot("2024-03-18 09:00", "2024-03-18 10:00")],
        "bob": [_slot("2024-03-18 11:00", "2024-03-18 12:00")],
        "carol": [_slot("2024-03-18 09:00", "2024-03-18 12:00")],
    }

    assert service.find_common_availability(parties) == []


def test_find_common_availability_without_parties():
    assert _build_service().find_common_availability({}) == []


def test_combined_availability():
    service = _build_service()
    parties = {
        "alice": [_slot("2024-03-18 09:00", "2024-03-18 10:00")],
        "bob": [_slot("2024-03-18 09:30", "2024-03-18 11:00"), _slot("2024-03-18 14:00", "2024-03-18 15:00")],
    }

    result = service.combined_availability(parties)

    assert _bounds(result) == [("09:00", "11:00"), ("14:00", "15:00")]


def test_find_exclusive_availability():
    service = _build_service()

    result = service.find_exclusive_availability(
        [_slot("2024-03-18 09:00", "2024-03-18 12:00")],
        [_slot("2024-03-18 11:00", "2024-03-18 13:00")],
    )

    assert _bounds(result) == [("09:00", "11:00"), ("12:00", "13:00")]


def test_sydney_and_san_francisco_scheduling():
    """Working hours, weekends and busy time in two zones, then the overlap."""
    sydney_all = _two_weeks_hourly("Australia/Sydney", timezone="Australia/Sydney", type="all-hours")
    sf_all = _two_weeks_hourly("America/Los_Angeles", timezone="America/Los_Angeles", type="all-hours")

    assert len(sydney_all) == 14 * 24
    assert sydney_all[0].start.timezone_name == "Australia/Sydney"
    assert sydney_all[0].start.hour == 0
    assert len(sf_all) == 14 * 24

    options = SlotOperationOptions(metadata_merger=keep_first_metadata)
    working_hours = AvailabilityService(options, [allow_time_range_rule(9, 17)])

    sydney_work = working_hours.apply_rules(sydney_all)
    sf_work = working_hours.apply_rules(sf_all)

    assert len(sydney_work) == 14 * 8
    assert all(9 <= slot.start.hour < 17 for slot in sydney_work)
    assert len(sf_work) == 14 * 8

    weekdays_only = AvailabilityService(options, [allow_time_range_rule(9, 17), remove_weekends_rule()])

    sydney_weekdays = weekdays_only.apply_rules(sydney_all)
    sf_weekdays = weekdays_only.apply_rules(sf_all)

    assert len(sydney_weekdays) == 10 * 8
    assert all(slot.start.isoweekday() <= 5 for slot in sydney_weekdays)
    assert len(sf_weekdays) == 10 * 8

    flight = _slot("2024-01-16 10:00", "2024-01-16 15:00", tz="Australia/Sydney", type="flight")
    meeting = _slot("2024-01-15 13:00", "2024-01-15 16:00", tz="America/Los_Angeles", type="meeting")

    sydney_available = difference_slots(sydney_weekdays, [flight], options)
    sf_available = difference_slots(sf_weekdays, [meeting], options)

    assert len([s for s in sydney_available if s.start.format("YYYY-MM-DD") == "2024-01-16"]) == 3
    assert len([s for s in sf_available if s.start.format("YYYY-MM-DD") == "2024-01-15"]) == 5

    overlap_options = SlotOperationOptions(metadata_merger=lambda a, b: {**a, **b, "type": "overlap"})
    overlapping = intersect_slots(sydney_available, sf_available, overlap_options)

    assert overlapping
    for slot in overlapping:
        sydney_time = slot.start.in_timezone("Australia/Sydney")
        sf_time = slot.start.in_timezone("America/Los_Angeles")
        assert 9 <= sydney_time.hour < 17
        assert 9 <= sf_time.hour <= 17
        assert slot.metadata["type"] == "overlap"
