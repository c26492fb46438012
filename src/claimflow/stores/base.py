"""
ClaimFlow Store Protocols

Interfaces of the data stores the fulfillment workflow reads from and writes
to. The backing service (tables behind a managed backend) is pluggable; the
workflow only depends on these contracts.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..models import (
    CatalogDevice,
    ClaimStatus,
    ClaimSummary,
    CoveredItem,
    FulfillmentRecord,
    PolicySummary,
    Repairer,
)


@runtime_checkable
class FulfillmentStore(Protocol):
    """
    Persistence for fulfillment records.

    Implementations must hold at most one record per claim: ``upsert`` is
    keyed on ``claim_id`` and the last write wins.
    """

    def get(self, claim_id: str) -> Optional[FulfillmentRecord]:
        """Latest record for a claim, or None if the flow has not started."""
        ...

    def upsert(self, record: FulfillmentRecord) -> FulfillmentRecord:
        """
        Insert or replace the record for ``record.claim_id``.

        Returns:
            The stored record with id and timestamps assigned

        Raises:
            PersistenceError: If the write is rejected
        """
        ...

    def reference_exists(self, reference: str) -> bool:
        """True if any record already carries this engineer/logistics reference."""
        ...


@runtime_checkable
class ClaimStore(Protocol):
    """Claim record store."""

    def get_claim(self, claim_id: str) -> Optional[ClaimSummary]:
        ...

    def update_status(self, claim_id: str, status: ClaimStatus, notes: str) -> None:
        """Set the claim status and append a status-history note."""
        ...


@runtime_checkable
class PolicyStore(Protocol):
    """Policy record store."""

    def get_policy(self, policy_id: str) -> Optional[PolicySummary]:
        ...


@runtime_checkable
class CoveredItemStore(Protocol):
    """Covered-item store (one item per policy)."""

    def get_covered_item(self, policy_id: str) -> Optional[CoveredItem]:
        ...


@runtime_checkable
class DeviceCatalog(Protocol):
    """Read-only device catalog."""

    def find_by_model(self, model_name: str) -> Optional[CatalogDevice]:
        """Case-insensitive substring match on model name; first hit wins."""
        ...


@runtime_checkable
class RepairerDirectory(Protocol):
    """Repairer directory."""

    def get_repairer(self, repairer_id: str) -> Optional[Repairer]:
        ...

    def list_repairers(self, active_only: bool = True) -> list[Repairer]:
        ...
