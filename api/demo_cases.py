"""Pre-built demo claims for the interactive demo."""

from decimal import Decimal
from typing import Optional

from claimflow.models import (
    CatalogDevice,
    ClaimStatus,
    ClaimSummary,
    CoveredItem,
    PolicySummary,
    Repairer,
    RepairerSLA,
)
from claimflow.stores import (
    InMemoryClaimStore,
    InMemoryCoveredItemStore,
    InMemoryDeviceCatalog,
    InMemoryPolicyStore,
    InMemoryRepairerDirectory,
)

DEMO_CASES = [
    # ============== ENGINEER VISITS ==============
    {
        "claim_id": "CLM-DEMO-TV",
        "claim_number": "CLM-2026-0001",
        "name": "OLED TV screen failure - ENGINEER VISIT",
        "description": "Large item: the TV category always routes to an in-home repair.",
        "policy_id": "POL-1001",
        "product_name": "LG OLED55C3 55 inch OLED TV",
        "model": "OLED55C3",
        "purchase_price": "1299.00",
        "excess_amount": "99.00",
        "payment_on_file": True,
        "coverage_area": "Berlin",
        "expected_fulfillment": "in_home_repair",
    },
    {
        "claim_id": "CLM-DEMO-WASHER",
        "claim_number": "CLM-2026-0002",
        "name": "Washing machine drum fault - ENGINEER VISIT",
        "description": "Catalog lookup maps 'White Goods' to Home Appliances.",
        "policy_id": "POL-1002",
        "product_name": "Bosch Serie 6",
        "model": "WAU28T",
        "purchase_price": "649.00",
        "excess_amount": "75.00",
        "payment_on_file": False,
        "coverage_area": "Munich",
        "expected_fulfillment": "in_home_repair",
    },
    # ============== COLLECTIONS ==============
    {
        "claim_id": "CLM-DEMO-LAPTOP",
        "claim_number": "CLM-2026-0003",
        "name": "Laptop hinge damage - COLLECTION",
        "description": "Value above the voucher threshold, not a large item.",
        "policy_id": "POL-1003",
        "product_name": "Apple MacBook Air 13",
        "model": None,
        "purchase_price": "1199.00",
        "excess_amount": "50.00",
        "payment_on_file": True,
        "coverage_area": "Hamburg",
        "expected_fulfillment": "collection_repair",
    },
    {
        "claim_id": "CLM-DEMO-NO-VALUE",
        "claim_number": "CLM-2026-0004",
        "name": "Phone with unknown value - COLLECTION",
        "description": "An unknown device value never produces a voucher.",
        "policy_id": "POL-1004",
        "product_name": "Google Pixel 8",
        "model": None,
        "purchase_price": None,
        "excess_amount": "25.00",
        "payment_on_file": True,
        "coverage_area": "Cologne",
        "expected_fulfillment": "collection_repair",
    },
    # ============== VOUCHERS ==============
    {
        "claim_id": "CLM-DEMO-VOUCHER",
        "claim_number": "CLM-2026-0005",
        "name": "Low-value phone - VOUCHER",
        "description": "Confirmed value under 150 settles with a replacement voucher.",
        "policy_id": "POL-1005",
        "product_name": "Nokia 105 mobile phone",
        "model": None,
        "purchase_price": "29.99",
        "excess_amount": "10.00",
        "payment_on_file": False,
        "coverage_area": "Berlin",
        "expected_fulfillment": "voucher",
    },
]


DEMO_DEVICES = [
    CatalogDevice(model_name="WAU28T", device_category="White Goods", manufacturer="Bosch"),
    CatalogDevice(model_name="OLED55C3", device_category="TV", manufacturer="LG"),
    CatalogDevice(model_name="Galaxy S24", device_category="Smartphone", manufacturer="Samsung"),
]


DEMO_REPAIRERS = [
    Repairer(
        id="rep-001",
        name="Jonas Weber",
        company_name="TechFix Berlin",
        specializations=["TVs", "Home Appliances"],
        coverage_areas=["Berlin", "Brandenburg"],
        country="Germany",
        city="Berlin",
        slas=[
            RepairerSLA("TVs", response_time_hours=24, repair_time_hours=48,
                        quality_score=Decimal("4.80"), success_rate=Decimal("97")),
            RepairerSLA("Home Appliances", response_time_hours=48, repair_time_hours=72,
                        quality_score=Decimal("4.50"), success_rate=Decimal("94")),
        ],
    ),
    Repairer(
        id="rep-002",
        name="Mia Schulz",
        company_name="QuickRepair Mobile",
        specializations=["Mobile Phones", "Tablets", "Laptops"],
        coverage_areas=["Nationwide"],
        country="Germany",
        city="Hamburg",
        connectivity_type="portal",
        slas=[
            RepairerSLA("Mobile Phones", response_time_hours=12, repair_time_hours=24,
                        quality_score=Decimal("4.60"), success_rate=Decimal("96")),
            RepairerSLA("Laptops", response_time_hours=24, repair_time_hours=72,
                        quality_score=Decimal("4.30"), success_rate=Decimal("92")),
        ],
    ),
    Repairer(
        id="rep-003",
        name="Lena Hoffmann",
        company_name="HomeServ Munich",
        specializations=["Home Appliances", "TVs"],
        coverage_areas=["Munich", "Bavaria"],
        country="Germany",
        city="Munich",
        slas=[
            RepairerSLA("Home Appliances", response_time_hours=24, repair_time_hours=48,
                        quality_score=Decimal("4.70"), success_rate=Decimal("98")),
        ],
    ),
    Repairer(
        id="rep-004",
        name="Paul Becker",
        company_name="Retired Repairs GmbH",
        specializations=["TVs"],
        coverage_areas=["Berlin"],
        country="Germany",
        is_active=False,
    ),
]


def get_demo_cases() -> list[dict]:
    """Return all demo cases."""
    return DEMO_CASES


def get_demo_case(claim_id: str) -> Optional[dict]:
    """Get a specific demo case by claim ID."""
    for case in DEMO_CASES:
        if case["claim_id"] == claim_id:
            return case
    return None


def _money(value):
    return Decimal(value) if value is not None else None


def seed_demo_data(
    claims: InMemoryClaimStore,
    policies: InMemoryPolicyStore,
    covered_items: InMemoryCoveredItemStore,
    catalog: InMemoryDeviceCatalog,
    repairers: InMemoryRepairerDirectory,
) -> int:
    """Load the demo claims and their collaborators. Returns the claim count."""
    for case in DEMO_CASES:
        claims.add(ClaimSummary(
            claim_id=case["claim_id"],
            claim_number=case["claim_number"],
            status=ClaimStatus.ACCEPTED,
            policy_id=case["policy_id"],
            coverage_area=case["coverage_area"],
        ))
        policies.add(PolicySummary(
            policy_id=case["policy_id"],
            excess_amount=_money(case["excess_amount"]),
            payment_on_file=case["payment_on_file"],
            program_countries=["DE"],
        ))
        covered_items.add(CoveredItem(
            policy_id=case["policy_id"],
            product_name=case["product_name"],
            purchase_price=_money(case["purchase_price"]),
            model=case["model"],
        ))

    for device in DEMO_DEVICES:
        catalog.add(device)
    for repairer in DEMO_REPAIRERS:
        repairers.add(repairer)

    return len(DEMO_CASES)
