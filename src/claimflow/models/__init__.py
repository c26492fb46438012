"""
ClaimFlow Models

All domain models for the claim fulfillment workflow.

    from claimflow.models import (
        # Enums
        FulfillmentStatus, FulfillmentType, PaymentMethod, FlowStep,
        # Record
        FulfillmentRecord,
        # Payment
        PaymentOnFile, CardPayment, BankPayment,
        # Rules
        FulfillmentRules,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    ClaimStatus,
    FlowStep,
    FulfillmentStatus,
    FulfillmentType,
    PaymentMethod,
)

# =============================================================================
# Fulfillment Record
# =============================================================================
from .fulfillment import FulfillmentRecord

# =============================================================================
# Payment Selection
# =============================================================================
from .payment import (
    BankPayment,
    CardPayment,
    PaymentOnFile,
    PaymentSelection,
)

# =============================================================================
# Collaborator Records
# =============================================================================
from .collaborators import (
    CatalogDevice,
    ClaimSummary,
    CoveredItem,
    PolicySummary,
    Repairer,
    RepairerSLA,
    StatusHistoryEntry,
)

# =============================================================================
# Recommendations
# =============================================================================
from .recommendation import (
    EligibleRepairer,
    RecommendationResult,
    RepairerRecommendation,
)

# =============================================================================
# Rules
# =============================================================================
from .rules import (
    DEFAULT_TIME_SLOTS,
    DEFAULT_VOUCHER_THRESHOLD,
    DatePattern,
    FulfillmentRules,
    KeywordSet,
)

__all__ = [
    # Enums
    "ClaimStatus",
    "FlowStep",
    "FulfillmentStatus",
    "FulfillmentType",
    "PaymentMethod",
    # Record
    "FulfillmentRecord",
    # Payment
    "BankPayment",
    "CardPayment",
    "PaymentOnFile",
    "PaymentSelection",
    # Collaborators
    "CatalogDevice",
    "ClaimSummary",
    "CoveredItem",
    "PolicySummary",
    "Repairer",
    "RepairerSLA",
    "StatusHistoryEntry",
    # Recommendations
    "EligibleRepairer",
    "RecommendationResult",
    "RepairerRecommendation",
    # Rules
    "DEFAULT_TIME_SLOTS",
    "DEFAULT_VOUCHER_THRESHOLD",
    "DatePattern",
    "FulfillmentRules",
    "KeywordSet",
]
