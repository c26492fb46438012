"""
Pytest configuration and fixtures for ClaimFlow tests.

Provides helper factories and common fixtures for the fulfillment workflow.
"""
import pytest
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal

from claimflow.engine import (
    EventRecorder,
    FulfillmentServices,
    SimulatedAvailabilityOracle,
    SimulatedPaymentProcessor,
)
from claimflow.models import (
    CatalogDevice,
    ClaimStatus,
    ClaimSummary,
    CoveredItem,
    FulfillmentRecord,
    FulfillmentRules,
    FulfillmentStatus,
    FulfillmentType,
    PaymentMethod,
    PolicySummary,
    Repairer,
    RepairerSLA,
)
from claimflow.stores import (
    InMemoryClaimStore,
    InMemoryCoveredItemStore,
    InMemoryDeviceCatalog,
    InMemoryFulfillmentStore,
    InMemoryPolicyStore,
    InMemoryRepairerDirectory,
)


TODAY = date(2026, 10, 18)


# =============================================================================
# Factory Helpers
# =============================================================================

def make_rules(**overrides) -> FulfillmentRules:
    """Default rules with no payment delay."""
    overrides.setdefault("payment_delay_seconds", 0)
    return replace(FulfillmentRules(), **overrides)


def make_record(
    claim_id: str = "CLM-001",
    status: FulfillmentStatus = FulfillmentStatus.PENDING_EXCESS,
    fulfillment_type: FulfillmentType = None,
    excess_paid: bool = None,
    **kwargs,
) -> FulfillmentRecord:
    """Create a FulfillmentRecord; excess_paid follows the status unless given."""
    if excess_paid is None:
        excess_paid = status != FulfillmentStatus.PENDING_EXCESS
    if excess_paid:
        kwargs.setdefault("excess_payment_method", PaymentMethod.PAYMENT_ON_FILE)
        kwargs.setdefault("excess_payment_date", datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc))
        kwargs.setdefault("excess_amount", Decimal("50"))
    return FulfillmentRecord(
        claim_id=claim_id,
        excess_paid=excess_paid,
        status=status,
        fulfillment_type=fulfillment_type,
        **kwargs,
    )


def make_sla(
    device_category: str = "TVs",
    response_time_hours: int = 24,
    repair_time_hours: int = 48,
    quality_score: str = "4.50",
    success_rate: str = "95",
) -> RepairerSLA:
    """Create a RepairerSLA."""
    return RepairerSLA(
        device_category=device_category,
        response_time_hours=response_time_hours,
        repair_time_hours=repair_time_hours,
        quality_score=Decimal(quality_score),
        success_rate=Decimal(success_rate),
    )


def make_repairer(
    repairer_id: str = "rep-001",
    company_name: str = "TechFix Berlin",
    specializations: list = None,
    coverage_areas: list = None,
    country: str = "Germany",
    is_active: bool = True,
    slas: list = None,
) -> Repairer:
    """Create a Repairer."""
    return Repairer(
        id=repairer_id,
        name=f"Contact {repairer_id}",
        company_name=company_name,
        specializations=specializations if specializations is not None else ["TVs"],
        coverage_areas=coverage_areas if coverage_areas is not None else ["Berlin"],
        country=country,
        is_active=is_active,
        slas=slas if slas is not None else [make_sla()],
    )


def make_services(
    product_name: str = "Samsung QLED 65 TV",
    purchase_price=Decimal("899.00"),
    excess_amount=Decimal("99.00"),
    payment_on_file: bool = True,
    claim_id: str = "CLM-001",
    model: str = None,
    coverage_area: str = "Berlin",
    repairers: list = None,
    devices: list = None,
    rules: FulfillmentRules = None,
    today: date = TODAY,
    **kwargs,
) -> FulfillmentServices:
    """
    In-memory service bundle with one claim, its policy and covered item.

    The availability oracle and the clock are pinned to ``today``.
    """
    rules = rules or make_rules()
    policy_id = f"POL-{claim_id}"

    claims = InMemoryClaimStore([
        ClaimSummary(
            claim_id=claim_id,
            claim_number=f"NUM-{claim_id}",
            status=ClaimStatus.ACCEPTED,
            policy_id=policy_id,
            coverage_area=coverage_area,
        )
    ])
    policies = InMemoryPolicyStore()
    policies.add(PolicySummary(
        policy_id=policy_id,
        excess_amount=excess_amount,
        payment_on_file=payment_on_file,
    ))
    covered_items = InMemoryCoveredItemStore()
    covered_items.add(CoveredItem(
        policy_id=policy_id,
        product_name=product_name,
        purchase_price=purchase_price,
        model=model,
    ))
    directory = InMemoryRepairerDirectory()
    for repairer in repairers if repairers is not None else [make_repairer()]:
        directory.add(repairer)

    kwargs.setdefault("oracle", SimulatedAvailabilityOracle(rules=rules, reference_date=today))
    kwargs.setdefault("payments", SimulatedPaymentProcessor(delay_seconds=0))

    return FulfillmentServices(
        fulfillments=InMemoryFulfillmentStore(),
        claims=claims,
        policies=policies,
        covered_items=covered_items,
        repairers=directory,
        catalog=InMemoryDeviceCatalog(list(devices or [])),
        rules=rules,
        today=lambda: today,
        **kwargs,
    )


def bookable_slot(services: FulfillmentServices, repairer_id: str = "rep-001"):
    """First future (date, slot) the simulated oracle offers for a repairer."""
    on_date = services.oracle.first_available_date(repairer_id)
    return on_date, services.oracle.available_slots(repairer_id, on_date)[0]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def rules():
    return make_rules()


@pytest.fixture
def services():
    return make_services()


@pytest.fixture
def recorder(services):
    """Records every FulfillmentTransitioned event published by ``services``."""
    events = EventRecorder()
    services.events.subscribe(events)
    return events


@pytest.fixture
def catalog():
    return InMemoryDeviceCatalog([
        CatalogDevice(model_name="WAU28T", device_category="White Goods", manufacturer="Bosch"),
        CatalogDevice(model_name="Galaxy S24", device_category="Smartphone", manufacturer="Samsung"),
        CatalogDevice(model_name="OLED55C3", device_category="TV", manufacturer="LG"),
    ])
