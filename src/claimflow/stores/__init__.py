"""
ClaimFlow Stores

Collaborator store protocols and their in-memory implementations.

Usage:
    from claimflow.stores import InMemoryFulfillmentStore

    store = InMemoryFulfillmentStore()
    stored = store.upsert(record)
"""
from __future__ import annotations

from .base import (
    ClaimStore,
    CoveredItemStore,
    DeviceCatalog,
    FulfillmentStore,
    PolicyStore,
    RepairerDirectory,
)
from .memory import (
    InMemoryClaimStore,
    InMemoryCoveredItemStore,
    InMemoryDeviceCatalog,
    InMemoryFulfillmentStore,
    InMemoryPolicyStore,
    InMemoryRepairerDirectory,
)

__all__ = [
    # Protocols
    "ClaimStore",
    "CoveredItemStore",
    "DeviceCatalog",
    "FulfillmentStore",
    "PolicyStore",
    "RepairerDirectory",
    # In-memory
    "InMemoryClaimStore",
    "InMemoryCoveredItemStore",
    "InMemoryDeviceCatalog",
    "InMemoryFulfillmentStore",
    "InMemoryPolicyStore",
    "InMemoryRepairerDirectory",
]
