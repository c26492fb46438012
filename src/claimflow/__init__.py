"""
ClaimFlow - Claim Fulfillment Workflow Engine

ClaimFlow takes an accepted device-protection claim from excess payment to a
booked repair or a replacement voucher.

Workflow:
- Excess payment (payment on file, card, or bank debit)
- Routing: engineer visit for large items, voucher for low-value devices,
  courier collection for everything else
- Repairer recommendation and availability lookup
- Appointment scheduling with engineer/logistics reference codes
- Claim status notification

The visible step is always derived from the persisted fulfillment record, so
an interrupted flow resumes where it stopped.

Quick Start:
    from claimflow import (
        FulfillmentFlowController, FulfillmentServices, PaymentOnFile,
    )
    from claimflow.stores import InMemoryFulfillmentStore

    services = FulfillmentServices(
        fulfillments=InMemoryFulfillmentStore(),
        claims=claims, policies=policies,
        covered_items=covered_items, repairers=repairers,
    )
    flow = FulfillmentFlowController("CLM-001", services)
    flow.load()
    flow.confirm_excess(PaymentOnFile())

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"
__author__ = "ClaimFlow Team"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    BankPayment,
    CardPayment,
    ClaimStatus,
    FlowStep,
    FulfillmentRecord,
    FulfillmentRules,
    FulfillmentStatus,
    FulfillmentType,
    PaymentMethod,
    PaymentOnFile,
)

# =============================================================================
# Engine
# =============================================================================
from .engine import (
    DeviceCategoryResolver,
    FlowView,
    FulfillmentFlowController,
    FulfillmentServices,
    FulfillmentStateMachine,
    SimulatedAvailabilityOracle,
    decide_routing,
    derive_step,
)

# =============================================================================
# Packs
# =============================================================================
from .packs import RulesPackLoader, load_rules_pack, load_rules_pack_from_string

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    AppointmentValidationError,
    ClaimFlowError,
    ClaimNotFoundError,
    FulfillmentValidationError,
    InvalidTransitionError,
    PaymentSelectionError,
    PersistenceError,
    PrematureActionError,
)

__all__ = [
    "__version__",
    # Models
    "BankPayment",
    "CardPayment",
    "ClaimStatus",
    "FlowStep",
    "FulfillmentRecord",
    "FulfillmentRules",
    "FulfillmentStatus",
    "FulfillmentType",
    "PaymentMethod",
    "PaymentOnFile",
    # Engine
    "DeviceCategoryResolver",
    "FlowView",
    "FulfillmentFlowController",
    "FulfillmentServices",
    "FulfillmentStateMachine",
    "SimulatedAvailabilityOracle",
    "decide_routing",
    "derive_step",
    # Packs
    "RulesPackLoader",
    "load_rules_pack",
    "load_rules_pack_from_string",
    # Exceptions
    "AppointmentValidationError",
    "ClaimFlowError",
    "ClaimNotFoundError",
    "FulfillmentValidationError",
    "InvalidTransitionError",
    "PaymentSelectionError",
    "PersistenceError",
    "PrematureActionError",
]
