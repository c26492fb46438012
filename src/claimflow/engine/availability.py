"""
ClaimFlow Repairer Availability

Provides the protocol for repairer scheduling backends and a simulated
implementation.

The simulated oracle stands in for a real booking calendar. It derives a
stable pattern from the sum of the repairer id's character codes, marks a
subset of the look-ahead window as fully booked, and removes a subset of the
fixed slot catalog for a given day. Identical inputs always give identical
outputs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Protocol, runtime_checkable

from ..models import FulfillmentRules

logger = logging.getLogger(__name__)


@runtime_checkable
class AvailabilityOracle(Protocol):
    """
    Protocol for repairer availability.

    A real calendar integration replaces the simulated oracle by providing
    these two methods.
    """

    def unavailable_dates(self, repairer_id: Optional[str]) -> set[date]:
        """
        Fully booked dates within the look-ahead window.

        Args:
            repairer_id: Repairer to check; None means no repairer selected

        Returns:
            Set of unavailable dates
        """
        ...

    def available_slots(self, repairer_id: Optional[str], on_date: date) -> list[str]:
        """
        Bookable slot labels on a date, in catalog order.

        Args:
            repairer_id: Repairer to check; None means no repairer selected
            on_date: Day of the appointment

        Returns:
            Ordered list of slot labels
        """
        ...


def repairer_hash(repairer_id: str) -> int:
    """Sum of the character codes of the repairer id."""
    return sum(ord(ch) for ch in repairer_id)


@dataclass
class SimulatedAvailabilityOracle:
    """
    Deterministic stand-in for a repairer scheduling backend.

    Usage:
        oracle = SimulatedAvailabilityOracle(reference_date=date(2026, 10, 18))
        blocked = oracle.unavailable_dates("rep-001")
        slots = oracle.available_slots("rep-001", date(2026, 10, 20))
    """

    rules: FulfillmentRules = field(default_factory=FulfillmentRules)

    # Day the look-ahead window counts from (defaults to today)
    reference_date: Optional[date] = None

    def _today(self) -> date:
        return self.reference_date or date.today()

    def date_pattern_index(self, repairer_id: str) -> int:
        return repairer_hash(repairer_id) % len(self.rules.date_patterns)

    def slot_pattern_index(self, repairer_id: str, on_date: date) -> int:
        return (repairer_hash(repairer_id) + on_date.day) % len(self.rules.slot_patterns)

    def unavailable_dates(self, repairer_id: Optional[str]) -> set[date]:
        if not repairer_id:
            return set()

        pattern = self.rules.date_patterns[self.date_pattern_index(repairer_id)]
        today = self._today()
        unavailable = {
            today + timedelta(days=offset)
            for offset in range(1, self.rules.lookahead_days + 1)
            if pattern.is_unavailable(offset)
        }

        logger.debug(
            "Unavailable dates for repairer %s: %d dates", repairer_id, len(unavailable)
        )
        return unavailable

    def available_slots(self, repairer_id: Optional[str], on_date: date) -> list[str]:
        all_slots = list(self.rules.time_slots)
        if not repairer_id:
            return all_slots

        removed = set(self.rules.slot_patterns[self.slot_pattern_index(repairer_id, on_date)])
        available = [slot for index, slot in enumerate(all_slots) if index not in removed]

        logger.debug(
            "Available slots for repairer %s on %s: %d slots",
            repairer_id, on_date.isoformat(), len(available),
        )
        return available

    def first_available_date(self, repairer_id: Optional[str]) -> date:
        """Earliest bookable date after the reference date."""
        blocked = self.unavailable_dates(repairer_id)
        candidate = self._today() + timedelta(days=1)
        while candidate in blocked:
            candidate += timedelta(days=1)
        return candidate

    def is_bookable(self, repairer_id: Optional[str], on_date: date, slot: str) -> bool:
        """True if the date is not booked out and the slot is offered that day."""
        if on_date in self.unavailable_dates(repairer_id):
            return False
        return slot in self.available_slots(repairer_id, on_date)
