"""
Tests for fulfillment routing.

Tests cover:
- Large-item precedence over the voucher threshold
- Voucher threshold boundaries
- Unknown category and unknown value handling
- Rules overrides
"""
import pytest
from decimal import Decimal

from claimflow.engine import decide_routing, decide_value_routing, is_large_item, is_voucher_value
from claimflow.models import FulfillmentStatus, FulfillmentType

from tests.conftest import make_rules


class TestDecideRouting:
    """Tests for the three routing rules."""

    @pytest.mark.parametrize(
        "category,value,expected_type,expected_status",
        [
            ("TVs", 500, FulfillmentType.IN_HOME_REPAIR, FulfillmentStatus.AWAITING_APPOINTMENT),
            ("Mobile Phones", 99, FulfillmentType.VOUCHER, FulfillmentStatus.COMPLETED),
            ("Mobile Phones", None, FulfillmentType.COLLECTION_REPAIR, FulfillmentStatus.AWAITING_APPOINTMENT),
            ("Mobile Phones", 0, FulfillmentType.COLLECTION_REPAIR, FulfillmentStatus.AWAITING_APPOINTMENT),
            ("Home Appliances", 50, FulfillmentType.IN_HOME_REPAIR, FulfillmentStatus.AWAITING_APPOINTMENT),
            ("Laptops", 1199, FulfillmentType.COLLECTION_REPAIR, FulfillmentStatus.AWAITING_APPOINTMENT),
        ],
    )
    def test_routing_examples(self, category, value, expected_type, expected_status):
        decision = decide_routing(category, value)
        assert decision.fulfillment_type == expected_type
        assert decision.status == expected_status

    def test_large_item_takes_precedence_over_voucher(self):
        """A cheap TV is still repaired at home."""
        decision = decide_routing("TVs", Decimal("20"))
        assert decision.fulfillment_type == FulfillmentType.IN_HOME_REPAIR

    def test_threshold_is_exclusive(self):
        assert decide_routing("Laptops", 150).fulfillment_type == FulfillmentType.COLLECTION_REPAIR
        assert decide_routing("Laptops", Decimal("149.99")).fulfillment_type == FulfillmentType.VOUCHER

    def test_unknown_category_never_in_home(self):
        assert decide_routing("", 900).fulfillment_type == FulfillmentType.COLLECTION_REPAIR
        assert decide_routing(None, 900).fulfillment_type == FulfillmentType.COLLECTION_REPAIR

    def test_unknown_category_low_value_is_voucher(self):
        assert decide_routing(None, 99).fulfillment_type == FulfillmentType.VOUCHER

    def test_negative_value_is_not_voucher(self):
        assert decide_routing("Cameras", -10).fulfillment_type == FulfillmentType.COLLECTION_REPAIR

    def test_reason_is_recorded(self):
        decision = decide_routing("TVs", 500)
        assert "TVs" in decision.reason

    def test_string_values_are_coerced(self):
        assert decide_routing("Tablets", "75.50").fulfillment_type == FulfillmentType.VOUCHER


class TestLargeItems:
    """Tests for the large-item category list."""

    @pytest.mark.parametrize(
        "category",
        ["TVs", "tvs", "TV", "Smart TV", "HOME APPLIANCES", "White Goods", "Washing Machine", "ovens"],
    )
    def test_large_item_categories(self, category):
        assert is_large_item(category)

    @pytest.mark.parametrize("category", ["Mobile Phones", "Laptops", "Cameras", "", None])
    def test_not_large_item(self, category):
        assert not is_large_item(category)

    def test_whitespace_is_ignored(self):
        assert is_large_item("  TVs ")


class TestValueRouting:
    """Tests for the value-only rule used by late device values."""

    def test_voucher_value(self):
        decision = decide_value_routing(Decimal("99"))
        assert decision.fulfillment_type == FulfillmentType.VOUCHER
        assert decision.status == FulfillmentStatus.COMPLETED

    def test_value_routing_ignores_category(self):
        """Only the threshold applies, so no in-home outcome is possible."""
        decision = decide_value_routing(Decimal("900"))
        assert decision.fulfillment_type == FulfillmentType.COLLECTION_REPAIR

    def test_is_voucher_value_bounds(self):
        assert not is_voucher_value(None)
        assert not is_voucher_value(0)
        assert is_voucher_value(Decimal("0.01"))
        assert not is_voucher_value(150)


class TestRulesOverrides:
    """Routing follows the configured rules."""

    def test_custom_threshold(self):
        rules = make_rules(voucher_threshold=Decimal("200"))
        assert decide_routing("Laptops", 180, rules).fulfillment_type == FulfillmentType.VOUCHER
        assert decide_routing("Laptops", 180).fulfillment_type == FulfillmentType.COLLECTION_REPAIR

    def test_custom_large_items(self):
        rules = make_rules(large_item_categories=frozenset({"laptops"}))
        assert decide_routing("Laptops", 900, rules).fulfillment_type == FulfillmentType.IN_HOME_REPAIR
        assert decide_routing("TVs", 900, rules).fulfillment_type == FulfillmentType.COLLECTION_REPAIR
