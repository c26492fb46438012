"""
ClaimFlow Routing

Decides how a claim is fulfilled once the excess is paid.

Rules, first match wins:
1. Large-item category (TVs, home appliances, ...) -> in-home repair
2. Confirmed device value above zero and below the voucher threshold -> voucher
3. Anything else, including an unknown value or category -> collection repair

An unknown value never produces a voucher and an unknown category never
produces an in-home repair.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from ..models import FulfillmentRules, FulfillmentStatus, FulfillmentType

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class RoutingDecision:
    """Outcome of routing: fulfillment type, resulting status, and why."""
    fulfillment_type: FulfillmentType
    status: FulfillmentStatus
    reason: str


def to_decimal(value: Optional[Number]) -> Optional[Decimal]:
    """Coerce a device value to Decimal, keeping None as None."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_large_item(category: Optional[str], rules: Optional[FulfillmentRules] = None) -> bool:
    """True if the category requires an engineer visit (case-insensitive)."""
    rules = rules or FulfillmentRules()
    return rules.is_large_item(category)


def is_voucher_value(device_value: Optional[Number], rules: Optional[FulfillmentRules] = None) -> bool:
    """True only for a confirmed positive value strictly below the threshold."""
    rules = rules or FulfillmentRules()
    value = to_decimal(device_value)
    if value is None:
        return False
    return Decimal("0") < value < rules.voucher_threshold


def decide_value_routing(
    device_value: Optional[Number],
    rules: Optional[FulfillmentRules] = None,
) -> RoutingDecision:
    """Apply the value threshold only (rules 2 and 3)."""
    rules = rules or FulfillmentRules()
    if is_voucher_value(device_value, rules):
        return RoutingDecision(
            fulfillment_type=FulfillmentType.VOUCHER,
            status=FulfillmentStatus.COMPLETED,
            reason=f"Confirmed device value below {rules.voucher_threshold}",
        )
    return RoutingDecision(
        fulfillment_type=FulfillmentType.COLLECTION_REPAIR,
        status=FulfillmentStatus.AWAITING_APPOINTMENT,
        reason=(
            "Device value unknown"
            if to_decimal(device_value) in (None, Decimal("0"))
            else f"Device value at or above {rules.voucher_threshold}"
        ),
    )


def decide_routing(
    device_category: Optional[str],
    device_value: Optional[Number],
    rules: Optional[FulfillmentRules] = None,
) -> RoutingDecision:
    """
    Route a claim after excess payment.

    Args:
        device_category: Normalized category, "" or None when unknown
        device_value: Covered item purchase price, None when unknown
        rules: Business constants (defaults when omitted)

    Returns:
        RoutingDecision with the fulfillment type and next status
    """
    rules = rules or FulfillmentRules()

    if rules.is_large_item(device_category):
        decision = RoutingDecision(
            fulfillment_type=FulfillmentType.IN_HOME_REPAIR,
            status=FulfillmentStatus.AWAITING_APPOINTMENT,
            reason=f"Large item category '{device_category}' requires in-home repair",
        )
    else:
        decision = decide_value_routing(device_value, rules)

    logger.info(
        "Routing decision: category=%r value=%s -> %s (%s)",
        device_category, device_value,
        decision.fulfillment_type.value, decision.reason,
    )
    return decision
