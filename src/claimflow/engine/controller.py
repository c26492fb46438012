"""
ClaimFlow Fulfillment Flow Controller

Drives the fulfillment workflow of one claim: loads everything the flow needs,
applies user actions through the state machine, persists the result and
notifies the claim store once an appointment is booked.

Failure handling:
- Validation and ordering errors propagate to the caller; nothing is persisted.
- Persistence errors propagate; the controller's view keeps the last stored
  record and step.
- Collaborator failures (catalog, directory, recommendations, availability,
  claim status update) are logged and recorded as notices on the view. The
  flow stays usable.

Usage:
    services = FulfillmentServices(
        fulfillments=InMemoryFulfillmentStore(),
        claims=claims,
        policies=policies,
        covered_items=covered_items,
        repairers=repairers,
    )
    flow = FulfillmentFlowController("CLM-001", services)
    view = flow.load()
    view = flow.confirm_excess(PaymentOnFile())
    flow.select_repairer("rep-001")
    view = flow.schedule(date(2026, 10, 21), "09:00 - 11:00")
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar

from ..exceptions import (
    AppointmentValidationError,
    ClaimNotFoundError,
    LookupFailedError,
    PersistenceError,
    RecommendationCreditsError,
    RecommendationError,
    RecommendationRateLimitError,
)
from ..models import (
    ClaimStatus,
    ClaimSummary,
    CoveredItem,
    FlowStep,
    FulfillmentRecord,
    FulfillmentRules,
    FulfillmentType,
    PaymentSelection,
    PolicySummary,
    RecommendationResult,
)
from ..stores import (
    ClaimStore,
    CoveredItemStore,
    DeviceCatalog,
    FulfillmentStore,
    PolicyStore,
    RepairerDirectory,
)
from .availability import AvailabilityOracle, SimulatedAvailabilityOracle
from .category_resolver import DeviceCategoryResolver
from .events import EventChannel, FulfillmentTransitioned
from .payment import SimulatedPaymentProcessor
from .recommendations import RepairerRecommendationProvider, SLARecommendationProvider
from .references import ReferenceGenerator
from .routing import Number
from .state_machine import FulfillmentStateMachine, Transition, derive_step, status_note
from .supersession import SupersessionGuard

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Services
# =============================================================================

@dataclass
class FulfillmentServices:
    """
    Collaborators shared by every flow controller.

    Optional collaborators left as None are built from ``rules`` and the
    stores in ``__post_init__``.
    """
    fulfillments: FulfillmentStore
    claims: ClaimStore
    policies: PolicyStore
    covered_items: CoveredItemStore
    repairers: RepairerDirectory
    catalog: Optional[DeviceCatalog] = None
    rules: FulfillmentRules = field(default_factory=FulfillmentRules)

    oracle: Optional[AvailabilityOracle] = None
    recommender: Optional[RepairerRecommendationProvider] = None
    payments: Optional[SimulatedPaymentProcessor] = None
    references: Optional[ReferenceGenerator] = None

    events: EventChannel[FulfillmentTransitioned] = field(default_factory=EventChannel)
    guard: SupersessionGuard = field(default_factory=SupersessionGuard)
    today: Callable[[], date] = date.today

    def __post_init__(self) -> None:
        if self.oracle is None:
            self.oracle = SimulatedAvailabilityOracle(rules=self.rules)
        if self.recommender is None:
            self.recommender = SLARecommendationProvider(
                directory=self.repairers,
                claims=self.claims,
                policies=self.policies,
            )
        if self.payments is None:
            self.payments = SimulatedPaymentProcessor(
                delay_seconds=self.rules.payment_delay_seconds,
            )
        if self.references is None:
            self.references = ReferenceGenerator(
                exists=self.fulfillments.reference_exists,
                rules=self.rules,
            )


# =============================================================================
# View
# =============================================================================

@dataclass
class FlowView:
    """Everything the fulfillment screen shows for one claim."""
    claim_id: str
    step: FlowStep
    record: Optional[FulfillmentRecord] = None
    claim_number: Optional[str] = None
    claim_status: Optional[ClaimStatus] = None
    device_category: str = ""
    device_value: Optional[Decimal] = None
    requires_in_home_repair: bool = False
    policy_excess: Decimal = Decimal("0")
    payment_on_file_available: bool = False
    coverage_area: Optional[str] = None
    selected_repairer_id: Optional[str] = None
    repairer_name: Optional[str] = None
    notices: list[str] = field(default_factory=list)

    @property
    def fulfillment_type(self) -> Optional[FulfillmentType]:
        return self.record.fulfillment_type if self.record else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "claim_id": self.claim_id,
            "claim_number": self.claim_number,
            "claim_status": self.claim_status.value if self.claim_status else None,
            "step": int(self.step),
            "record": self.record.to_dict() if self.record else None,
            "device_category": self.device_category,
            "device_value": str(self.device_value) if self.device_value is not None else None,
            "requires_in_home_repair": self.requires_in_home_repair,
            "policy_excess": str(self.policy_excess),
            "payment_on_file_available": self.payment_on_file_available,
            "coverage_area": self.coverage_area,
            "selected_repairer_id": self.selected_repairer_id,
            "repairer_name": self.repairer_name,
            "notices": list(self.notices),
        }


# =============================================================================
# Controller
# =============================================================================

class FulfillmentFlowController:
    """
    Fulfillment workflow for a single claim.

    One controller is expected per active session of a claim. Records are
    upserted keyed on claim_id, so concurrent controllers for the same claim
    share one stored record and the last write wins.
    """

    def __init__(self, claim_id: str, services: FulfillmentServices) -> None:
        self.claim_id = claim_id
        self.services = services
        self.machine = FulfillmentStateMachine(services.rules)
        self.resolver = DeviceCategoryResolver(services.rules)

        self.recommendations: Optional[RecommendationResult] = None
        self.unavailable_dates: set[date] = set()
        self.available_slots: list[str] = []
        self._view: Optional[FlowView] = None

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @property
    def view(self) -> FlowView:
        if self._view is None:
            return self.load()
        return self._view

    def _degrade(self, notices: list[str], notice: str, call: Callable[[], T], default: T) -> T:
        """Run a collaborator call; on failure log, add a notice and use ``default``."""
        try:
            return call()
        except Exception as exc:
            logger.warning("Claim %s: %s (%s)", self.claim_id, notice, exc)
            notices.append(notice)
            return default

    def _notice(self, message: str) -> None:
        self.view.notices.append(message)

    def dismiss_notices(self) -> None:
        self.view.notices.clear()

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self) -> FlowView:
        """
        Read the claim, policy, covered item and fulfillment record.

        Raises:
            ClaimNotFoundError: If the claim does not exist
            PersistenceError: If the fulfillment record cannot be read
        """
        services = self.services
        claim: Optional[ClaimSummary] = services.claims.get_claim(self.claim_id)
        if claim is None:
            raise ClaimNotFoundError(
                message=f"Claim '{self.claim_id}' not found",
                claim_id=self.claim_id,
            )

        notices: list[str] = []
        record = self._read_record()

        policy: Optional[PolicySummary] = self._degrade(
            notices, "Policy details could not be loaded",
            lambda: services.policies.get_policy(claim.policy_id), None,
        )
        item: Optional[CoveredItem] = self._degrade(
            notices, "Covered item could not be loaded",
            lambda: services.covered_items.get_covered_item(claim.policy_id), None,
        )

        category = ""
        if item is not None:
            category = self._degrade(
                notices, "Device category could not be detected",
                lambda: self.resolver.resolve(
                    item.product_name, catalog=services.catalog, model_name=item.model,
                ),
                "",
            )
        if not category and claim.declared_category:
            category = services.rules.normalize_catalog_category(claim.declared_category)

        selected = record.repairer_id if record else None
        if selected is None and self._view is not None:
            selected = self._view.selected_repairer_id
        repairer_name = self._repairer_name(selected, notices)

        view = FlowView(
            claim_id=self.claim_id,
            step=derive_step(record),
            record=record,
            claim_number=claim.claim_number,
            claim_status=claim.status,
            device_category=category,
            device_value=item.purchase_price if item else None,
            requires_in_home_repair=services.rules.is_large_item(category),
            policy_excess=policy.excess_amount if policy else Decimal("0"),
            payment_on_file_available=policy.payment_on_file if policy else False,
            coverage_area=claim.coverage_area,
            selected_repairer_id=selected,
            repairer_name=repairer_name,
            notices=notices,
        )
        self._view = view
        logger.info(
            "Loaded fulfillment flow for claim %s at step %d (category=%r)",
            self.claim_id, view.step, category,
        )
        return view

    def _repairer_name(self, repairer_id: Optional[str], notices: list[str]) -> Optional[str]:
        if not repairer_id:
            return None
        repairer = self._degrade(
            notices, "Repairer details could not be loaded",
            lambda: self.services.repairers.get_repairer(repairer_id), None,
        )
        return repairer.display_name if repairer else None

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _commit(self, transition: Transition) -> FulfillmentRecord:
        """
        Persist a transition, then update the view and publish the event.

        The view is only touched after the store accepted the write.
        """
        try:
            stored = self.services.fulfillments.upsert(transition.record)
        except PersistenceError:
            logger.error("Failed to save fulfillment for claim %s", self.claim_id)
            raise
        except Exception as exc:
            logger.error("Failed to save fulfillment for claim %s: %s", self.claim_id, exc)
            raise PersistenceError(
                message="Failed to save fulfillment data",
                details={"action": transition.action},
                claim_id=self.claim_id,
            ) from exc

        view = self.view
        view.record = stored
        view.step = derive_step(stored)

        self.services.events.publish(
            FulfillmentTransitioned(
                claim_id=self.claim_id,
                action=transition.action,
                previous_status=transition.previous.status,
                status=stored.status,
                step=view.step,
                record=stored,
            )
        )
        logger.info(
            "Claim %s: %s -> status=%s step=%d",
            self.claim_id, transition.action, stored.status.value, view.step,
        )
        return stored

    def _read_record(self) -> Optional[FulfillmentRecord]:
        try:
            return self.services.fulfillments.get(self.claim_id)
        except PersistenceError:
            logger.error("Failed to read fulfillment for claim %s", self.claim_id)
            raise
        except Exception as exc:
            logger.error("Failed to read fulfillment for claim %s: %s", self.claim_id, exc)
            raise PersistenceError(
                message="Failed to load fulfillment data",
                claim_id=self.claim_id,
            ) from exc

    def _current_record(self) -> FulfillmentRecord:
        return self._read_record() or FulfillmentRecord.new(self.claim_id)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def confirm_excess(self, selection: Optional[PaymentSelection]) -> FlowView:
        """
        Pay the excess and route the claim.

        Raises:
            PaymentSelectionError: Missing or incomplete payment details
            InvalidTransitionError: Excess already paid
            PersistenceError: Record could not be saved
        """
        view = self.view
        transition = self.machine.confirm_excess(
            record=self._current_record(),
            selection=selection,
            device_category=view.device_category,
            device_value=view.device_value,
            excess_amount=view.policy_excess,
            payment_on_file_available=view.payment_on_file_available,
        )
        self.services.payments.process(self.claim_id, selection)
        self._commit(transition)
        return view

    def confirm_device_value(self, device_value: Number) -> FlowView:
        view = self.view
        transition = self.machine.confirm_device_value(self._current_record(), device_value)
        self._commit(transition)
        view.device_value = transition.record.device_value
        return view

    def override_fulfillment_type(self, fulfillment_type: FulfillmentType) -> FlowView:
        view = self.view
        transition = self.machine.override_fulfillment_type(
            self._current_record(), fulfillment_type,
        )
        self._commit(transition)
        return view

    # -------------------------------------------------------------------------
    # Repairer selection and availability
    # -------------------------------------------------------------------------

    def load_recommendations(self) -> Optional[RecommendationResult]:
        """Ask the recommendation service; None (with a notice) on failure."""
        view = self.view
        try:
            result = self.services.recommender.recommend(
                self.claim_id, view.device_category or None, view.coverage_area,
            )
        except RecommendationRateLimitError as exc:
            logger.warning("Recommendations rate limited for claim %s: %s", self.claim_id, exc)
            self._notice("Rate limits exceeded. Please try again later.")
            return None
        except RecommendationCreditsError as exc:
            logger.warning("Recommendation credits exhausted for claim %s: %s", self.claim_id, exc)
            self._notice("AI credits required. Please add credits to your workspace.")
            return None
        except RecommendationError as exc:
            logger.warning("Recommendations failed for claim %s: %s", self.claim_id, exc)
            self._notice(exc.message or "Failed to fetch recommendations")
            return None
        except Exception as exc:
            logger.warning("Recommendations failed for claim %s: %s", self.claim_id, exc)
            self._notice("Failed to fetch recommendations")
            return None

        self.recommendations = result
        return result

    def select_repairer(self, repairer_id: str) -> FlowView:
        """
        Choose the repairer to book with and refresh its unavailable dates.

        Raises:
            AppointmentValidationError: Repairer unknown to the directory
        """
        view = self.view
        try:
            repairer = self.services.repairers.get_repairer(repairer_id)
        except Exception as exc:
            raise LookupFailedError(
                message="Repairer directory lookup failed",
                details={"repairer_id": repairer_id},
                claim_id=self.claim_id,
            ) from exc
        if repairer is None:
            raise AppointmentValidationError(
                message=f"Could not find repairer data for {repairer_id}",
                claim_id=self.claim_id,
            )

        view.selected_repairer_id = repairer.id
        view.repairer_name = repairer.display_name
        self.available_slots = []
        logger.info("Claim %s: selected repairer %s", self.claim_id, repairer.id)

        self.fetch_unavailable_dates(repairer.id)
        return view

    def fetch_unavailable_dates(self, repairer_id: Optional[str] = None) -> Optional[set[date]]:
        """
        Fully booked dates for the repairer.

        Returns None when a newer request for this claim superseded this one.
        """
        repairer_id = repairer_id or self.view.selected_repairer_id
        key = (self.claim_id, "dates")
        ticket = self.services.guard.issue(key)

        dates = self._degrade(
            self.view.notices, "Repairer availability could not be loaded",
            lambda: self.services.oracle.unavailable_dates(repairer_id), set(),
        )
        if not self.services.guard.is_current(key, ticket):
            logger.debug("Discarding superseded date lookup for claim %s", self.claim_id)
            return None

        self.unavailable_dates = dates
        return dates

    def fetch_available_slots(
        self,
        appointment_date: date,
        repairer_id: Optional[str] = None,
    ) -> Optional[list[str]]:
        """
        Bookable slots on a date.

        Returns None when a newer request for this claim superseded this one.
        """
        repairer_id = repairer_id or self.view.selected_repairer_id
        key = (self.claim_id, "slots")
        ticket = self.services.guard.issue(key)

        slots = self._degrade(
            self.view.notices, "Time slots could not be loaded",
            lambda: self.services.oracle.available_slots(repairer_id, appointment_date), [],
        )
        if not self.services.guard.is_current(key, ticket):
            logger.debug("Discarding superseded slot lookup for claim %s", self.claim_id)
            return None

        self.available_slots = slots
        return slots

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    def _check_bookable(self, repairer_id: str, appointment_date: date, slot: str) -> None:
        oracle = self.services.oracle
        try:
            blocked = appointment_date in oracle.unavailable_dates(repairer_id)
            offered = slot in oracle.available_slots(repairer_id, appointment_date)
        except Exception as exc:
            raise LookupFailedError(
                message="Repairer availability could not be checked",
                details={"repairer_id": repairer_id},
                claim_id=self.claim_id,
            ) from exc

        if blocked or not offered:
            raise AppointmentValidationError(
                message="Selected time slot is no longer available",
                details={
                    "appointment_date": appointment_date.isoformat(),
                    "slot": slot,
                    "repairer_id": repairer_id,
                },
                claim_id=self.claim_id,
            )

    def schedule(
        self,
        appointment_date: Optional[date],
        slot: Optional[str],
        repairer_id: Optional[str] = None,
    ) -> FlowView:
        """
        Book the appointment and move the claim to pending_fulfillment.

        Raises:
            PrematureActionError: Excess not yet paid
            InvalidTransitionError: Not awaiting an appointment
            AppointmentValidationError: Missing, past or unavailable date/slot,
                or no repairer
            ReferenceGenerationError: No unique reference could be produced
            PersistenceError: Record could not be saved
        """
        view = self.view
        repairer_id = repairer_id or view.selected_repairer_id
        record = self._current_record()
        today = self.services.today()

        self.machine.validate_appointment(record, appointment_date, slot, repairer_id, today)
        self._check_bookable(repairer_id, appointment_date, slot)

        large_item = self.services.rules.is_large_item(view.device_category)
        reference = self.services.references.generate(large_item, claim_id=self.claim_id)

        transition = self.machine.schedule_appointment(
            record, appointment_date, slot, repairer_id, large_item, reference, today,
        )
        self._commit(transition)

        if view.selected_repairer_id != repairer_id:
            view.selected_repairer_id = repairer_id
            view.repairer_name = self._repairer_name(repairer_id, view.notices)

        self._notify_claim(appointment_date, slot, large_item)
        return view

    def _notify_claim(self, appointment_date: date, slot: str, large_item: bool) -> None:
        notes = status_note(appointment_date, slot, large_item)
        try:
            self.services.claims.update_status(
                self.claim_id, ClaimStatus.PENDING_FULFILLMENT, notes,
            )
        except Exception as exc:
            logger.error("Error updating claim status for %s: %s", self.claim_id, exc)
            self._notice("Appointment booked, but the claim status could not be updated")
            return
        self.view.claim_status = ClaimStatus.PENDING_FULFILLMENT
