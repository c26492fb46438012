"""
ClaimFlow Enumerations

All enumeration types used by the fulfillment workflow.

String enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Fulfillment Status
# =============================================================================

class FulfillmentStatus(str, Enum):
    """
    Persisted state of a fulfillment record.

    pending_excess -> awaiting_appointment -> scheduled
    pending_excess -> completed (voucher path, no scheduling)
    """
    PENDING_EXCESS = "pending_excess"
    AWAITING_APPOINTMENT = "awaiting_appointment"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (FulfillmentStatus.SCHEDULED, FulfillmentStatus.COMPLETED)


# =============================================================================
# Fulfillment Type
# =============================================================================

class FulfillmentType(str, Enum):
    """How the claim is fulfilled. Decided by routing, not chosen by the user."""
    IN_HOME_REPAIR = "in_home_repair"          # Engineer visit for large items
    COLLECTION_REPAIR = "collection_repair"    # Courier collection / drop-off
    VOUCHER = "voucher"                        # Replacement voucher, no repair


# =============================================================================
# Payment Methods
# =============================================================================

class PaymentMethod(str, Enum):
    """Method used to settle the excess."""
    PAYMENT_ON_FILE = "payment_on_file"
    CREDIT_CARD = "credit_card"
    SEPA_DEBIT = "sepa_debit"


# =============================================================================
# UI Step
# =============================================================================

class FlowStep(int, Enum):
    """
    Step of the fulfillment flow shown to the user.

    Always derived from record fields, never stored. Steps 2 and 3 belong to
    the manual device-value and fulfillment-type corrections and are not
    produced by the resumption projection.
    """
    EXCESS_PAYMENT = 1
    DEVICE_VALUE = 2
    FULFILLMENT_TYPE = 3
    SCHEDULE = 4
    COMPLETE = 5


# =============================================================================
# Claim Status (owned by the claim store)
# =============================================================================

class ClaimStatus(str, Enum):
    """Claim lifecycle statuses of the surrounding portal."""
    NOTIFIED = "notified"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    REFERRED = "referred"
    REFERRED_PENDING_INFO = "referred_pending_info"
    REFERRED_INFO_RECEIVED = "referred_info_received"
    EXCESS_DUE = "excess_due"
    EXCESS_PAID_FULFILLMENT_PENDING = "excess_paid_fulfillment_pending"
    PENDING_FULFILLMENT = "pending_fulfillment"
    FULFILLMENT_INSPECTION_BOOKED = "fulfillment_inspection_booked"
    ESTIMATE_RECEIVED = "estimate_received"
    FULFILLMENT_OUTCOME = "fulfillment_outcome"
    INBOUND_LOGISTICS = "inbound_logistics"
    REPAIR = "repair"
    OUTBOUND_LOGISTICS = "outbound_logistics"
    CLOSED = "closed"
