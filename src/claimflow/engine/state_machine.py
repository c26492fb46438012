"""
ClaimFlow Fulfillment State Machine

Computes the next fulfillment record for each user action and checks that the
action is legal. Every operation is a pure function of the current record and
the action's inputs; the caller persists the returned record.

States:
    pending_excess -> awaiting_appointment -> scheduled
    pending_excess -> completed                       (voucher path)

Actions, in workflow order:
1. confirm_excess            excess payment confirmed, claim routed
2. confirm_device_value      late device value, threshold re-applied
3. override_fulfillment_type manual routing correction
4. schedule_appointment      date, slot and repairer booked

The UI step is never stored. ``derive_step`` projects it from the record so a
user who leaves mid-flow resumes at the right place.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from ..exceptions import (
    AppointmentValidationError,
    InvalidTransitionError,
    PaymentSelectionError,
    PrematureActionError,
)
from ..models import (
    CardPayment,
    FlowStep,
    FulfillmentRecord,
    FulfillmentRules,
    FulfillmentStatus,
    FulfillmentType,
    PaymentOnFile,
    PaymentSelection,
)
from .routing import Number, RoutingDecision, decide_routing, decide_value_routing, to_decimal

logger = logging.getLogger(__name__)


# =============================================================================
# Step Projection
# =============================================================================

def derive_step(record: Optional[FulfillmentRecord]) -> FlowStep:
    """
    Project the displayed step from persisted record fields.

    - no record, or excess not paid -> EXCESS_PAYMENT
    - voucher, or scheduled         -> COMPLETE
    - otherwise                     -> SCHEDULE
    """
    if record is None or not record.excess_paid:
        return FlowStep.EXCESS_PAYMENT
    if record.fulfillment_type == FulfillmentType.VOUCHER:
        return FlowStep.COMPLETE
    if record.status == FulfillmentStatus.SCHEDULED:
        return FlowStep.COMPLETE
    return FlowStep.SCHEDULE


def ordinal(day: int) -> str:
    """1 -> "1st", 2 -> "2nd", 11 -> "11th", 22 -> "22nd"."""
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def status_note(appointment_date: date, slot: str, large_item: bool) -> str:
    """Claim status-history note written when an appointment is booked."""
    visit = "engineer visit" if large_item else "collection"
    day = f"{appointment_date:%B} {ordinal(appointment_date.day)}, {appointment_date.year}"
    return f"Fulfillment {visit} scheduled for {day} at {slot}"


# =============================================================================
# Transition Result
# =============================================================================

@dataclass
class Transition:
    """A computed, not yet persisted, state change."""
    action: str
    previous: FulfillmentRecord
    record: FulfillmentRecord
    routing: Optional[RoutingDecision] = None

    @property
    def step(self) -> FlowStep:
        return derive_step(self.record)

    @property
    def status_changed(self) -> bool:
        return self.previous.status != self.record.status


# =============================================================================
# State Machine
# =============================================================================

@dataclass
class FulfillmentStateMachine:
    """
    Pure transition logic for fulfillment records.

    Usage:
        machine = FulfillmentStateMachine(rules)

        transition = machine.confirm_excess(
            record=FulfillmentRecord.new("CLM-001"),
            selection=PaymentOnFile(),
            device_category="TVs",
            device_value=Decimal("899"),
            excess_amount=Decimal("50"),
            payment_on_file_available=True,
        )
        store.upsert(transition.record)
    """

    rules: FulfillmentRules = field(default_factory=FulfillmentRules)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_payment(
        self,
        selection: Optional[PaymentSelection],
        payment_on_file_available: bool = True,
        claim_id: Optional[str] = None,
    ) -> None:
        """
        Check a payment selection before any processing happens.

        Raises:
            PaymentSelectionError: If no option was chosen or details are missing
        """
        if selection is None:
            raise PaymentSelectionError(
                message="Please select a payment option",
                claim_id=claim_id,
            )

        if isinstance(selection, PaymentOnFile) and not payment_on_file_available:
            raise PaymentSelectionError(
                message="No payment method on file for this policy",
                claim_id=claim_id,
            )

        missing = selection.missing_fields()
        if missing:
            label = "card" if isinstance(selection, CardPayment) else "bank"
            raise PaymentSelectionError(
                message=f"Please fill in all {label} details",
                details={"missing_fields": missing},
                claim_id=claim_id,
            )

    def _require_excess_paid(self, record: FulfillmentRecord, action: str) -> None:
        if not record.excess_paid:
            raise PrematureActionError(
                message=f"Excess must be paid before {action}",
                details={"status": record.status.value},
                claim_id=record.claim_id,
            )

    # -------------------------------------------------------------------------
    # 1. Excess payment
    # -------------------------------------------------------------------------

    def confirm_excess(
        self,
        record: FulfillmentRecord,
        selection: Optional[PaymentSelection],
        device_category: Optional[str],
        device_value: Optional[Number],
        excess_amount: Optional[Number],
        payment_on_file_available: bool = True,
        now: Optional[datetime] = None,
    ) -> Transition:
        """
        Record the excess payment and route the claim.

        Raises:
            PaymentSelectionError: Missing or incomplete payment selection
            InvalidTransitionError: Excess already paid
        """
        if record.excess_paid:
            raise InvalidTransitionError(
                message="Excess has already been paid",
                details={"status": record.status.value},
                claim_id=record.claim_id,
            )

        self.validate_payment(selection, payment_on_file_available, record.claim_id)

        routing = decide_routing(device_category, device_value, self.rules)
        updated = replace(
            record,
            excess_paid=True,
            excess_payment_date=now or datetime.now(timezone.utc),
            excess_payment_method=selection.method,
            excess_amount=to_decimal(excess_amount) if excess_amount is not None else Decimal("0"),
            device_value=to_decimal(device_value),
            fulfillment_type=routing.fulfillment_type,
            status=routing.status,
        )
        return Transition("confirm_excess", record, updated, routing)

    # -------------------------------------------------------------------------
    # 2. Late device value
    # -------------------------------------------------------------------------

    def confirm_device_value(
        self,
        record: FulfillmentRecord,
        device_value: Number,
    ) -> Transition:
        """
        Re-apply the voucher threshold with a newly supplied device value.

        Raises:
            PrematureActionError: Excess not yet paid
            InvalidTransitionError: Record already scheduled or completed
        """
        self._require_excess_paid(record, "confirming the device value")
        if record.status.is_terminal:
            raise InvalidTransitionError(
                message=f"Device value cannot change once fulfillment is {record.status.value}",
                details={"status": record.status.value},
                claim_id=record.claim_id,
            )

        value = to_decimal(device_value)
        if value is None or value < 0:
            raise InvalidTransitionError(
                message="Device value must be zero or positive",
                claim_id=record.claim_id,
            )

        routing = decide_value_routing(value, self.rules)
        updated = replace(
            record,
            device_value=value,
            fulfillment_type=routing.fulfillment_type,
            status=routing.status,
        )
        return Transition("confirm_device_value", record, updated, routing)

    # -------------------------------------------------------------------------
    # 3. Manual override
    # -------------------------------------------------------------------------

    def override_fulfillment_type(
        self,
        record: FulfillmentRecord,
        fulfillment_type: FulfillmentType,
    ) -> Transition:
        """
        Set the fulfillment type directly and reopen scheduling.

        Raises:
            PrematureActionError: Excess not yet paid
            InvalidTransitionError: Appointment already scheduled
        """
        self._require_excess_paid(record, "changing the fulfillment type")
        if record.status == FulfillmentStatus.SCHEDULED:
            raise InvalidTransitionError(
                message="Fulfillment type cannot change after scheduling",
                claim_id=record.claim_id,
            )

        updated = replace(
            record,
            fulfillment_type=FulfillmentType(fulfillment_type),
            status=FulfillmentStatus.AWAITING_APPOINTMENT,
        )
        logger.info(
            "Fulfillment type for claim %s overridden to %s",
            record.claim_id, updated.fulfillment_type.value,
        )
        return Transition("override_fulfillment_type", record, updated)

    # -------------------------------------------------------------------------
    # 4. Scheduling
    # -------------------------------------------------------------------------

    def validate_appointment(
        self,
        record: FulfillmentRecord,
        appointment_date: Optional[date],
        slot: Optional[str],
        repairer_id: Optional[str],
        today: Optional[date] = None,
    ) -> None:
        """
        Check ordering and inputs for scheduling.

        Raises:
            PrematureActionError: Excess not yet paid
            InvalidTransitionError: Not awaiting an appointment, or voucher path
            AppointmentValidationError: Missing/past date, missing slot or repairer
        """
        self._require_excess_paid(record, "scheduling an appointment")

        if record.fulfillment_type == FulfillmentType.VOUCHER:
            raise InvalidTransitionError(
                message="Voucher fulfillment does not need an appointment",
                claim_id=record.claim_id,
            )
        if record.status != FulfillmentStatus.AWAITING_APPOINTMENT:
            raise InvalidTransitionError(
                message=f"Cannot schedule from status '{record.status.value}'",
                details={"status": record.status.value},
                claim_id=record.claim_id,
            )

        if appointment_date is None or not slot:
            raise AppointmentValidationError(
                message="Please select a date and time slot",
                claim_id=record.claim_id,
            )

        today = today or date.today()
        if appointment_date <= today:
            raise AppointmentValidationError(
                message="Appointment date must be in the future",
                details={"appointment_date": appointment_date.isoformat()},
                claim_id=record.claim_id,
            )

        if not repairer_id:
            raise AppointmentValidationError(
                message="Please select a repairer",
                claim_id=record.claim_id,
            )

    def schedule_appointment(
        self,
        record: FulfillmentRecord,
        appointment_date: Optional[date],
        slot: Optional[str],
        repairer_id: Optional[str],
        large_item: bool,
        reference: str,
        today: Optional[date] = None,
    ) -> Transition:
        """
        Book the appointment.

        Exactly one of engineer_reference (large items) and
        logistics_reference (everything else) is set.
        """
        self.validate_appointment(record, appointment_date, slot, repairer_id, today)

        updated = replace(
            record,
            appointment_date=appointment_date,
            appointment_slot=slot,
            repairer_id=repairer_id,
            engineer_reference=reference if large_item else None,
            logistics_reference=None if large_item else reference,
            status=FulfillmentStatus.SCHEDULED,
        )
        return Transition("schedule_appointment", record, updated)
