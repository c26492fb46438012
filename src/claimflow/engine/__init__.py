"""
ClaimFlow Engine

Routing, state machine, category detection, availability, references and the
per-claim flow controller.

Usage:
    from claimflow.engine import FulfillmentFlowController, FulfillmentServices

    flow = FulfillmentFlowController("CLM-001", services)
    view = flow.load()
"""
from __future__ import annotations

from .availability import AvailabilityOracle, SimulatedAvailabilityOracle, repairer_hash
from .category_resolver import UNKNOWN_CATEGORY, DeviceCategoryResolver
from .controller import FlowView, FulfillmentFlowController, FulfillmentServices
from .events import EventChannel, EventRecorder, FulfillmentTransitioned
from .payment import SimulatedPaymentProcessor
from .recommendations import (
    RepairerRecommendationProvider,
    SLARecommendationProvider,
    filter_eligible,
    recommendation_error_from_status,
    score_sla,
)
from .references import ReferenceGenerator
from .routing import (
    RoutingDecision,
    decide_routing,
    decide_value_routing,
    is_large_item,
    is_voucher_value,
)
from .state_machine import FulfillmentStateMachine, Transition, derive_step, status_note
from .supersession import SupersessionGuard

__all__ = [
    # Availability
    "AvailabilityOracle",
    "SimulatedAvailabilityOracle",
    "repairer_hash",
    # Category
    "UNKNOWN_CATEGORY",
    "DeviceCategoryResolver",
    # Controller
    "FlowView",
    "FulfillmentFlowController",
    "FulfillmentServices",
    # Events
    "EventChannel",
    "EventRecorder",
    "FulfillmentTransitioned",
    # Payment
    "SimulatedPaymentProcessor",
    # Recommendations
    "RepairerRecommendationProvider",
    "SLARecommendationProvider",
    "filter_eligible",
    "recommendation_error_from_status",
    "score_sla",
    # References
    "ReferenceGenerator",
    # Routing
    "RoutingDecision",
    "decide_routing",
    "decide_value_routing",
    "is_large_item",
    "is_voucher_value",
    # State machine
    "FulfillmentStateMachine",
    "Transition",
    "derive_step",
    "status_note",
    # Supersession
    "SupersessionGuard",
]
