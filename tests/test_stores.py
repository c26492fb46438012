"""
Tests for the in-memory stores.
"""
import threading

import pytest

from claimflow.exceptions import PersistenceError
from claimflow.models import CatalogDevice, ClaimStatus, ClaimSummary, FulfillmentStatus, FulfillmentType
from claimflow.stores import (
    ClaimStore,
    FulfillmentStore,
    InMemoryClaimStore,
    InMemoryDeviceCatalog,
    InMemoryFulfillmentStore,
    InMemoryRepairerDirectory,
    RepairerDirectory,
)

from tests.conftest import make_record, make_repairer


class TestFulfillmentStore:
    """Tests for the fulfillment table."""

    def test_upsert_assigns_id_and_timestamps(self):
        store = InMemoryFulfillmentStore()
        stored = store.upsert(make_record(status=FulfillmentStatus.AWAITING_APPOINTMENT))

        assert stored.id
        assert stored.created_at is not None
        assert stored.updated_at is not None
        assert store.get("CLM-001") == stored

    def test_upsert_keeps_one_row_per_claim(self):
        store = InMemoryFulfillmentStore()
        first = store.upsert(make_record(status=FulfillmentStatus.AWAITING_APPOINTMENT))
        second = store.upsert(make_record(
            status=FulfillmentStatus.SCHEDULED,
            fulfillment_type=FulfillmentType.IN_HOME_REPAIR,
        ))

        assert store.count() == 1
        assert second.id == first.id
        assert second.created_at == first.created_at
        assert store.get("CLM-001").status == FulfillmentStatus.SCHEDULED

    def test_concurrent_upserts_single_row(self):
        store = InMemoryFulfillmentStore()
        threads = [
            threading.Thread(
                target=store.upsert,
                args=(make_record(status=FulfillmentStatus.AWAITING_APPOINTMENT),),
            )
            for _ in range(10)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert store.count() == 1

    def test_callers_do_not_share_state(self):
        store = InMemoryFulfillmentStore()
        stored = store.upsert(make_record(status=FulfillmentStatus.AWAITING_APPOINTMENT))
        stored.status = FulfillmentStatus.COMPLETED
        assert store.get("CLM-001").status == FulfillmentStatus.AWAITING_APPOINTMENT

    def test_missing_claim(self):
        assert InMemoryFulfillmentStore().get("CLM-404") is None

    def test_reference_exists(self):
        store = InMemoryFulfillmentStore()
        store.upsert(make_record(
            status=FulfillmentStatus.SCHEDULED,
            engineer_reference="ENG-AAAA1111",
        ))
        assert store.reference_exists("ENG-AAAA1111")
        assert not store.reference_exists("LOG-AAAA1111")

    def test_fail_next_write(self):
        store = InMemoryFulfillmentStore()
        store.fail_next_write("disk full")
        with pytest.raises(PersistenceError, match="disk full"):
            store.upsert(make_record())
        assert store.count() == 0
        store.upsert(make_record())
        assert store.count() == 1

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryFulfillmentStore(), FulfillmentStore)


class TestClaimStore:
    """Tests for claims and status history."""

    @pytest.fixture
    def claims(self):
        return InMemoryClaimStore([
            ClaimSummary(
                claim_id="CLM-001", claim_number="N-1",
                status=ClaimStatus.ACCEPTED, policy_id="POL-1",
            )
        ])

    def test_update_status_appends_history(self, claims):
        claims.update_status("CLM-001", ClaimStatus.PENDING_FULFILLMENT, "Booked")
        assert claims.get_claim("CLM-001").status == ClaimStatus.PENDING_FULFILLMENT
        assert [h.notes for h in claims.history_for("CLM-001")] == ["Booked"]

    def test_update_unknown_claim(self, claims):
        with pytest.raises(PersistenceError):
            claims.update_status("CLM-404", ClaimStatus.PENDING_FULFILLMENT, "Booked")

    def test_failing_updates(self, claims):
        claims.fail_updates = True
        with pytest.raises(PersistenceError):
            claims.update_status("CLM-001", ClaimStatus.PENDING_FULFILLMENT, "Booked")
        assert claims.history_for("CLM-001") == []

    def test_satisfies_protocol(self, claims):
        assert isinstance(claims, ClaimStore)


class TestCatalogAndDirectory:
    """Tests for the device catalog and repairer directory."""

    def test_catalog_substring_match(self):
        catalog = InMemoryDeviceCatalog([CatalogDevice("Galaxy S24", "Smartphone")])
        assert catalog.find_by_model("galaxy s24 ultra").device_category == "Smartphone"
        assert catalog.find_by_model("S24").model_name == "Galaxy S24"
        assert catalog.find_by_model("Pixel") is None
        assert catalog.find_by_model("") is None

    def test_catalog_skips_blank_model_names(self):
        catalog = InMemoryDeviceCatalog([
            CatalogDevice("", "TVs"),
            CatalogDevice("  ", "TVs"),
            CatalogDevice("iPhone 15", "Mobile Phones"),
        ])
        assert catalog.find_by_model("iPhone 15").device_category == "Mobile Phones"
        assert catalog.find_by_model("Galaxy S24") is None

    def test_directory_lists_active_sorted(self):
        directory = InMemoryRepairerDirectory()
        directory.add(make_repairer("rep-002"))
        directory.add(make_repairer("rep-001"))
        directory.add(make_repairer("rep-003", is_active=False))

        assert [r.id for r in directory.list_repairers()] == ["rep-001", "rep-002"]
        assert len(directory.list_repairers(active_only=False)) == 3
        assert directory.get_repairer("rep-404") is None
        assert isinstance(directory, RepairerDirectory)
