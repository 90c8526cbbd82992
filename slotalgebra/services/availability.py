"""
Application service for deriving availability from slot collections.

The service applies a rule set to each party's slots and combines parties
through the set-operation engine. It holds no state beyond its options and
rules, so one instance can be shared freely.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence

from ..domain.models import Slot, SlotOperationOptions
from ..domain.rules import SlotRule, collect_forbidden
from ..domain.set_operations import difference_slots, intersect_slots, symmetric_difference_slots, union_slots

logger = logging.getLogger(__name__)


class AvailabilityService:
    """
    Applies rules and combines availability across parties.

    Example:
    service = AvailabilityService(options, [remove_weekends_rule()])
    service.find_common_availability({"alice": alice_slots, "bob": bob_slots})
    """

    def __init__(
        self,
        options: SlotOperationOptions,
        rules: Sequence[SlotRule] = (),
    ) -> None:
        self._options = options
        self._rules = list(rules)

    @property
    def options(self) -> SlotOperationOptions:
        return self._options

    @property
    def rules(self) -> List[SlotRule]:
        return list(self._rules)

    def forbidden_slots(self, slots: Sequence[Slot]) -> List[Slot]:
        """Collect the forbidden slots of every rule."""
        return collect_forbidden(slots, self._rules)

    def apply_rules(self, slots: Sequence[Slot]) -> List[Slot]:
        """Subtract everything the rules forbid."""
        forbidden = self.forbidden_slots(slots)
        if not forbidden:
            return list(slots)

        available = difference_slots(list(slots), forbidden, self._options)
        logger.debug(
            "Rules forbade %d slot(s); %d of %d slot(s) remain",
            len(forbidden),
            len(available),
            len(slots),
        )
        return available

    def find_common_availability(self, parties: Mapping[str, Sequence[Slot]]) -> List[Slot]:
        """
        Calculate the time every party has available after rules.

        Returns an empty list when no parties are given or any party has no
        availability left.
        """
        available = self._available_per_party(parties)
        if not available:
            return []

        names = list(available.keys())
        result = available[names[0]]

        for name in names[1:]:
            result = intersect_slots(result, available[name], self._options)

            # Early exit if no common time
            if not result:
                logger.debug("No common availability left after intersecting with %s", name)
                return []

        return result

    def combined_availability(self, parties: Mapping[str, Sequence[Slot]]) -> List[Slot]:
        """Calculate the time at least one party has available after rules."""
        result: List[Slot] = []
        for slots in self._available_per_party(parties).values():
            result = union_slots(result, slots, self._options)
        return result

    def find_exclusive_availability(
        self,
        first: Sequence[Slot],
        second: Sequence[Slot],
    ) -> List[Slot]:
        """Calculate the time exactly one of two parties has available after rules."""
        return symmetric_difference_slots(
            self.apply_rules(first),
            self.apply_rules(second),
            self._options,
        )

    def _available_per_party(self, parties: Mapping[str, Sequence[Slot]]) -> Dict[str, List[Slot]]:
        return {name: self.apply_rules(slots) for name, slots in parties.items()}
