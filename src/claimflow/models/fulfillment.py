"""
ClaimFlow Fulfillment Record

The single persisted entity owned by the fulfillment workflow: one record per
claim, upserted keyed on ``claim_id``.

A record does not exist until the excess payment is confirmed. Every later
step mutates it; it is never deleted, closure is implied by a terminal status.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from .enums import FulfillmentStatus, FulfillmentType, PaymentMethod


def _decimal_or_none(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _datetime_or_none(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _date_or_none(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass
class FulfillmentRecord:
    """
    Fulfillment state for one claim.

    Attributes:
        claim_id: Owning claim (required, immutable)
        excess_paid: Gate for every step after the excess payment
        excess_amount: Policy excess snapshot at payment time
        excess_payment_method: How the excess was settled
        excess_payment_date: When the excess was settled
        device_value: Covered item purchase price snapshot, used for routing
        fulfillment_type: Routing outcome
        repairer_id: Repairer selected from the recommendations
        appointment_date: Booked appointment day
        appointment_slot: Booked two-hour window label
        engineer_reference: Set for engineer visits only
        logistics_reference: Set for collections only
        status: Persisted workflow state
        id: Store-assigned row identifier
        created_at: Store-assigned
        updated_at: Store-assigned
    """
    claim_id: str
    excess_paid: bool = False
    excess_amount: Optional[Decimal] = None
    excess_payment_method: Optional[PaymentMethod] = None
    excess_payment_date: Optional[datetime] = None
    device_value: Optional[Decimal] = None
    fulfillment_type: Optional[FulfillmentType] = None
    repairer_id: Optional[str] = None
    appointment_date: Optional[date] = None
    appointment_slot: Optional[str] = None
    engineer_reference: Optional[str] = None
    logistics_reference: Optional[str] = None
    status: FulfillmentStatus = FulfillmentStatus.PENDING_EXCESS
    notes: Optional[str] = None

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.claim_id:
            raise ValueError("FulfillmentRecord requires a claim_id")

    @classmethod
    def new(cls, claim_id: str) -> FulfillmentRecord:
        """Initial, unpersisted record for a claim with no fulfillment yet."""
        return cls(claim_id=claim_id)

    @property
    def is_voucher(self) -> bool:
        return self.fulfillment_type == FulfillmentType.VOUCHER

    @property
    def reference(self) -> Optional[str]:
        """Whichever of the engineer/logistics references is set."""
        return self.engineer_reference or self.logistics_reference

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "claim_id": self.claim_id,
            "excess_paid": self.excess_paid,
            "excess_amount": str(self.excess_amount) if self.excess_amount is not None else None,
            "excess_payment_method": (
                self.excess_payment_method.value if self.excess_payment_method else None
            ),
            "excess_payment_date": (
                self.excess_payment_date.isoformat() if self.excess_payment_date else None
            ),
            "device_value": str(self.device_value) if self.device_value is not None else None,
            "fulfillment_type": self.fulfillment_type.value if self.fulfillment_type else None,
            "repairer_id": self.repairer_id,
            "appointment_date": (
                self.appointment_date.isoformat() if self.appointment_date else None
            ),
            "appointment_slot": self.appointment_slot,
            "engineer_reference": self.engineer_reference,
            "logistics_reference": self.logistics_reference,
            "status": self.status.value,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FulfillmentRecord:
        """Rebuild a record from a stored row."""
        method = data.get("excess_payment_method")
        fulfillment_type = data.get("fulfillment_type")
        return cls(
            id=data.get("id"),
            claim_id=data["claim_id"],
            excess_paid=bool(data.get("excess_paid", False)),
            excess_amount=_decimal_or_none(data.get("excess_amount")),
            excess_payment_method=PaymentMethod(method) if method else None,
            excess_payment_date=_datetime_or_none(data.get("excess_payment_date")),
            device_value=_decimal_or_none(data.get("device_value")),
            fulfillment_type=FulfillmentType(fulfillment_type) if fulfillment_type else None,
            repairer_id=data.get("repairer_id"),
            appointment_date=_date_or_none(data.get("appointment_date")),
            appointment_slot=data.get("appointment_slot"),
            engineer_reference=data.get("engineer_reference"),
            logistics_reference=data.get("logistics_reference"),
            status=FulfillmentStatus(data.get("status") or FulfillmentStatus.PENDING_EXCESS.value),
            notes=data.get("notes"),
            created_at=_datetime_or_none(data.get("created_at")),
            updated_at=_datetime_or_none(data.get("updated_at")),
        )
