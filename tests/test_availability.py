"""
Tests for the simulated repairer availability oracle.
"""
import pytest
from datetime import date, timedelta

from claimflow.engine import AvailabilityOracle, SimulatedAvailabilityOracle, repairer_hash
from claimflow.models import DEFAULT_TIME_SLOTS, DatePattern

from tests.conftest import TODAY, make_rules


@pytest.fixture
def oracle():
    return SimulatedAvailabilityOracle(rules=make_rules(), reference_date=TODAY)


def offsets(dates):
    return sorted((d - TODAY).days for d in dates)


class TestRepairerHash:
    """The pattern seed is the sum of character codes."""

    def test_hash_values(self):
        assert repairer_hash("abc") == 294
        assert repairer_hash("rep-001") == 517
        assert repairer_hash("rep-004") == 520

    def test_empty_id(self):
        assert repairer_hash("") == 0


class TestUnavailableDates:
    """Tests for fully booked dates."""

    def test_divisors_three_and_ten(self, oracle):
        # rep-001 hashes to pattern 2
        assert offsets(oracle.unavailable_dates("rep-001")) == [
            3, 6, 9, 10, 12, 15, 18, 20, 21, 24, 27, 30,
        ]

    def test_divisor_seven(self, oracle):
        assert offsets(oracle.unavailable_dates("rep-004")) == [7, 14, 21, 28]

    def test_divisor_six_plus_day_two(self, oracle):
        assert offsets(oracle.unavailable_dates("rep-003")) == [2, 6, 12, 18, 24, 30]

    def test_divisor_five(self, oracle):
        assert offsets(oracle.unavailable_dates("rep-005")) == [5, 10, 15, 20, 25, 30]

    def test_divisor_four(self, oracle):
        assert offsets(oracle.unavailable_dates("rep-002")) == [4, 8, 12, 16, 20, 24, 28]

    def test_no_repairer(self, oracle):
        assert oracle.unavailable_dates(None) == set()
        assert oracle.unavailable_dates("") == set()

    def test_window_stays_within_lookahead(self, oracle):
        for blocked in oracle.unavailable_dates("rep-001"):
            assert TODAY < blocked <= TODAY + timedelta(days=30)

    def test_deterministic(self, oracle):
        again = SimulatedAvailabilityOracle(rules=make_rules(), reference_date=TODAY)
        assert oracle.unavailable_dates("rep-001") == again.unavailable_dates("rep-001")

    def test_custom_lookahead(self):
        oracle = SimulatedAvailabilityOracle(
            rules=make_rules(lookahead_days=10), reference_date=TODAY,
        )
        assert offsets(oracle.unavailable_dates("rep-001")) == [3, 6, 9, 10]

    def test_custom_patterns(self):
        rules = make_rules(date_patterns=(DatePattern(extra_days=(1,)),))
        oracle = SimulatedAvailabilityOracle(rules=rules, reference_date=TODAY)
        assert oracle.unavailable_dates("anything") == {TODAY + timedelta(days=1)}


class TestAvailableSlots:
    """Tests for slot removal by repairer and day."""

    def test_pattern_removes_first_and_third(self, oracle):
        # (517 + 19) % 4 == 0
        assert oracle.available_slots("rep-001", date(2026, 10, 19)) == [
            "11:00 - 13:00", "15:00 - 17:00", "17:00 - 19:00",
        ]

    def test_pattern_removes_second_and_fifth(self, oracle):
        assert oracle.available_slots("rep-001", date(2026, 10, 20)) == [
            "09:00 - 11:00", "13:00 - 15:00", "15:00 - 17:00",
        ]

    def test_pattern_removes_fourth(self, oracle):
        slots = oracle.available_slots("rep-001", date(2026, 10, 21))
        assert "15:00 - 17:00" not in slots
        assert len(slots) == 4

    def test_pattern_removes_nothing(self, oracle):
        assert oracle.available_slots("rep-001", date(2026, 10, 22)) == list(DEFAULT_TIME_SLOTS)

    def test_no_repairer_gets_every_slot(self, oracle):
        assert oracle.available_slots(None, date(2026, 10, 19)) == list(DEFAULT_TIME_SLOTS)

    def test_slots_keep_catalog_order(self, oracle):
        for day in range(19, 31):
            slots = oracle.available_slots("rep-002", date(2026, 10, day))
            assert slots == [s for s in DEFAULT_TIME_SLOTS if s in slots]


class TestBookability:
    """Tests for the combined date and slot check."""

    def test_first_available_date(self, oracle):
        assert oracle.first_available_date("rep-001") == date(2026, 10, 19)
        # rep-003 is booked out on day 2 only, day 1 is free
        assert oracle.first_available_date("rep-003") == date(2026, 10, 19)

    def test_first_available_skips_blocked_days(self):
        rules = make_rules(date_patterns=(DatePattern(extra_days=(1, 2)),))
        oracle = SimulatedAvailabilityOracle(rules=rules, reference_date=TODAY)
        assert oracle.first_available_date("rep-001") == date(2026, 10, 21)

    def test_offered_slot_is_bookable(self, oracle):
        assert oracle.is_bookable("rep-001", date(2026, 10, 19), "11:00 - 13:00")

    def test_removed_slot_is_not_bookable(self, oracle):
        assert not oracle.is_bookable("rep-001", date(2026, 10, 19), "09:00 - 11:00")

    def test_blocked_date_is_not_bookable(self, oracle):
        assert not oracle.is_bookable("rep-001", date(2026, 10, 21), "09:00 - 11:00")

    def test_satisfies_protocol(self, oracle):
        assert isinstance(oracle, AvailabilityOracle)
