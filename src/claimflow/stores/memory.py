"""
ClaimFlow In-Memory Stores

Process-local implementations of the store protocols. Used by the demo
service and by tests; a deployment swaps them for table-backed stores.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from ..exceptions import PersistenceError
from ..models import (
    CatalogDevice,
    ClaimStatus,
    ClaimSummary,
    CoveredItem,
    FulfillmentRecord,
    PolicySummary,
    Repairer,
    StatusHistoryEntry,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Fulfillment Records
# =============================================================================

class InMemoryFulfillmentStore:
    """
    Fulfillment table keyed on claim_id.

    Rows are stored serialized so callers never share mutable state with the
    store. Concurrent upserts for the same claim race on one row; the last
    write wins and no duplicate row is ever created.
    """

    def __init__(self) -> None:
        self._rows: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._pending_failure: Optional[str] = None

    def get(self, claim_id: str) -> Optional[FulfillmentRecord]:
        with self._lock:
            row = self._rows.get(claim_id)
            return FulfillmentRecord.from_dict(row) if row else None

    def upsert(self, record: FulfillmentRecord) -> FulfillmentRecord:
        with self._lock:
            if self._pending_failure is not None:
                message, self._pending_failure = self._pending_failure, None
                raise PersistenceError(
                    message=message,
                    claim_id=record.claim_id,
                )

            now = datetime.now(timezone.utc)
            existing = self._rows.get(record.claim_id)
            row = record.to_dict()
            row["id"] = existing["id"] if existing else str(uuid4())
            row["created_at"] = existing["created_at"] if existing else now.isoformat()
            row["updated_at"] = now.isoformat()
            self._rows[record.claim_id] = row

        logger.debug(
            "Upserted fulfillment for claim %s (status=%s)",
            record.claim_id, row["status"],
        )
        return FulfillmentRecord.from_dict(row)

    def reference_exists(self, reference: str) -> bool:
        with self._lock:
            return any(
                reference in (row.get("engineer_reference"), row.get("logistics_reference"))
                for row in self._rows.values()
            )

    def count(self) -> int:
        with self._lock:
            return len(self._rows)

    def fail_next_write(self, message: str = "Write rejected by store") -> None:
        """Reject the next upsert with a PersistenceError."""
        with self._lock:
            self._pending_failure = message


# =============================================================================
# Claims
# =============================================================================

class InMemoryClaimStore:
    """Claims table plus the status-history table."""

    def __init__(self, claims: Optional[list[ClaimSummary]] = None) -> None:
        self._claims: dict[str, ClaimSummary] = {c.claim_id: c for c in claims or []}
        self.history: list[StatusHistoryEntry] = []
        self.fail_updates = False
        self._lock = threading.Lock()

    def add(self, claim: ClaimSummary) -> None:
        with self._lock:
            self._claims[claim.claim_id] = claim

    def get_claim(self, claim_id: str) -> Optional[ClaimSummary]:
        with self._lock:
            return self._claims.get(claim_id)

    def update_status(self, claim_id: str, status: ClaimStatus, notes: str) -> None:
        with self._lock:
            if self.fail_updates:
                raise PersistenceError(
                    message="Claim status update rejected",
                    claim_id=claim_id,
                )
            claim = self._claims.get(claim_id)
            if claim is None:
                raise PersistenceError(
                    message=f"Claim '{claim_id}' not found",
                    claim_id=claim_id,
                )
            claim.status = status
            self.history.append(
                StatusHistoryEntry(claim_id=claim_id, status=status, notes=notes)
            )

    def history_for(self, claim_id: str) -> list[StatusHistoryEntry]:
        with self._lock:
            return [h for h in self.history if h.claim_id == claim_id]


# =============================================================================
# Policies, Covered Items, Catalog, Repairers
# =============================================================================

@dataclass
class InMemoryPolicyStore:
    policies: dict[str, PolicySummary] = field(default_factory=dict)

    def add(self, policy: PolicySummary) -> None:
        self.policies[policy.policy_id] = policy

    def get_policy(self, policy_id: str) -> Optional[PolicySummary]:
        return self.policies.get(policy_id)


@dataclass
class InMemoryCoveredItemStore:
    items: dict[str, CoveredItem] = field(default_factory=dict)

    def add(self, item: CoveredItem) -> None:
        self.items[item.policy_id] = item

    def get_covered_item(self, policy_id: str) -> Optional[CoveredItem]:
        return self.items.get(policy_id)


@dataclass
class InMemoryDeviceCatalog:
    devices: list[CatalogDevice] = field(default_factory=list)

    def add(self, device: CatalogDevice) -> None:
        self.devices.append(device)

    def find_by_model(self, model_name: str) -> Optional[CatalogDevice]:
        needle = (model_name or "").strip().lower()
        if not needle:
            return None
        for device in self.devices:
            candidate = (device.model_name or "").strip().lower()
            if not candidate:
                continue
            if needle in candidate or candidate in needle:
                return device
        return None


@dataclass
class InMemoryRepairerDirectory:
    repairers: dict[str, Repairer] = field(default_factory=dict)

    def add(self, repairer: Repairer) -> None:
        self.repairers[repairer.id] = repairer

    def get_repairer(self, repairer_id: str) -> Optional[Repairer]:
        return self.repairers.get(repairer_id)

    def list_repairers(self, active_only: bool = True) -> list[Repairer]:
        repairers = sorted(self.repairers.values(), key=lambda r: r.id)
        if active_only:
            return [r for r in repairers if r.is_active]
        return repairers
