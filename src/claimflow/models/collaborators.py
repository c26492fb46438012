"""
ClaimFlow Collaborator Records

Read-only views of the records the fulfillment workflow consumes from the
surrounding portal: claims, policies, covered items, the device catalog and
the repairer directory.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from .enums import ClaimStatus


# =============================================================================
# Claim
# =============================================================================

@dataclass
class ClaimSummary:
    """The claim fields the workflow reads."""
    claim_id: str
    claim_number: str
    status: ClaimStatus
    policy_id: str
    coverage_area: Optional[str] = None
    declared_category: Optional[str] = None


@dataclass
class StatusHistoryEntry:
    """A note appended to a claim's status history."""
    claim_id: str
    status: ClaimStatus
    notes: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# =============================================================================
# Policy and Covered Item
# =============================================================================

@dataclass
class PolicySummary:
    """
    Policy fields the workflow reads.

    Attributes:
        policy_id: Policy identifier
        excess_amount: Excess the policyholder pays per claim
        payment_on_file: True if any past payment for the policy has status "paid"
    """
    policy_id: str
    excess_amount: Decimal = Decimal("0")
    payment_on_file: bool = False
    program_countries: list[str] = field(default_factory=list)


@dataclass
class CoveredItem:
    """The single item covered by a policy."""
    policy_id: str
    product_name: str
    purchase_price: Optional[Decimal] = None
    model: Optional[str] = None


# =============================================================================
# Device Catalog
# =============================================================================

@dataclass
class CatalogDevice:
    """An entry of the device catalog."""
    model_name: str
    device_category: str
    manufacturer: Optional[str] = None


# =============================================================================
# Repairers
# =============================================================================

@dataclass
class RepairerSLA:
    """Service levels a repairer commits to for one device category."""
    device_category: str
    response_time_hours: int = 24
    repair_time_hours: int = 72
    availability_hours: Optional[str] = None
    quality_score: Decimal = Decimal("0")      # out of 5.00
    success_rate: Decimal = Decimal("0")       # percent
    notes: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "device_category": self.device_category,
            "response_time_hours": self.response_time_hours,
            "repair_time_hours": self.repair_time_hours,
            "availability_hours": self.availability_hours,
            "quality_score": float(self.quality_score),
            "success_rate": float(self.success_rate),
            "notes": self.notes,
        }


@dataclass
class Repairer:
    """A repairer from the directory."""
    id: str
    name: str
    company_name: Optional[str] = None
    specializations: list[str] = field(default_factory=list)
    coverage_areas: list[str] = field(default_factory=list)
    country: Optional[str] = None
    city: Optional[str] = None
    connectivity_type: str = "api"
    is_active: bool = True
    slas: list[RepairerSLA] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        """Company name preferred, falling back to the contact name."""
        return self.company_name or self.name

    def sla_for(self, device_category: str) -> Optional[RepairerSLA]:
        """First SLA whose category overlaps the device category either way."""
        target = (device_category or "").lower()
        for sla in self.slas:
            category = sla.device_category.lower()
            if category in target or target in category:
                return sla
        return None
