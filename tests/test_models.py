"""
Tests for ClaimFlow domain models and exceptions.
"""
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from claimflow.exceptions import ClaimFlowError, PaymentSelectionError, PrematureActionError
from claimflow.models import (
    BankPayment,
    CardPayment,
    FlowStep,
    FulfillmentRecord,
    FulfillmentStatus,
    FulfillmentType,
    PaymentMethod,
    PaymentOnFile,
    Repairer,
    RepairerSLA,
)

from tests.conftest import make_record, make_sla


class TestFulfillmentRecord:
    """Tests for the persisted record."""

    def test_new_record_defaults(self):
        record = FulfillmentRecord.new("CLM-001")
        assert record.excess_paid is False
        assert record.status == FulfillmentStatus.PENDING_EXCESS
        assert record.fulfillment_type is None
        assert record.reference is None

    def test_claim_id_required(self):
        with pytest.raises(ValueError):
            FulfillmentRecord(claim_id="")

    def test_row_conversion(self):
        record = make_record(
            status=FulfillmentStatus.SCHEDULED,
            fulfillment_type=FulfillmentType.IN_HOME_REPAIR,
            device_value=Decimal("899.00"),
            repairer_id="rep-001",
            appointment_date=date(2026, 10, 19),
            appointment_slot="11:00 - 13:00",
            engineer_reference="ENG-ABCD1234",
        )
        row = record.to_dict()

        assert row["status"] == "scheduled"
        assert row["fulfillment_type"] == "in_home_repair"
        assert row["excess_payment_method"] == "payment_on_file"
        assert row["device_value"] == "899.00"
        assert row["appointment_date"] == "2026-10-19"
        assert FulfillmentRecord.from_dict(row) == record

    def test_from_partial_row(self):
        record = FulfillmentRecord.from_dict({
            "claim_id": "CLM-001",
            "excess_paid": 1,
            "device_value": "",
            "appointment_date": "2026-10-19T00:00:00",
            "excess_payment_date": "2026-10-17T09:30:00+00:00",
        })
        assert record.excess_paid is True
        assert record.device_value is None
        assert record.appointment_date == date(2026, 10, 19)
        assert record.excess_payment_date == datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)
        assert record.status == FulfillmentStatus.PENDING_EXCESS

    def test_reference_and_voucher_helpers(self):
        record = make_record(
            status=FulfillmentStatus.COMPLETED,
            fulfillment_type=FulfillmentType.VOUCHER,
        )
        assert record.is_voucher
        scheduled = make_record(
            status=FulfillmentStatus.SCHEDULED,
            logistics_reference="LOG-ZZZZ9999",
        )
        assert scheduled.reference == "LOG-ZZZZ9999"


class TestEnums:
    """Tests for enumeration helpers."""

    def test_terminal_statuses(self):
        assert FulfillmentStatus.SCHEDULED.is_terminal
        assert FulfillmentStatus.COMPLETED.is_terminal
        assert not FulfillmentStatus.AWAITING_APPOINTMENT.is_terminal

    def test_steps_are_ordered(self):
        assert [int(s) for s in FlowStep] == [1, 2, 3, 4, 5]

    def test_string_enums_compare_to_values(self):
        assert FulfillmentType.VOUCHER == "voucher"


class TestPaymentSelection:
    """Each payment option carries only its own details."""

    def test_methods(self):
        assert PaymentOnFile().method == PaymentMethod.PAYMENT_ON_FILE
        assert CardPayment().method == PaymentMethod.CREDIT_CARD
        assert BankPayment().method == PaymentMethod.SEPA_DEBIT

    def test_card_missing_fields(self):
        assert CardPayment().missing_fields() == ["card_number", "expiry_date", "cvv", "cardholder_name"]

    def test_bank_missing_fields(self):
        assert BankPayment(bic="COBADEFFXXX").missing_fields() == ["iban"]

    def test_masked_number(self):
        assert CardPayment(card_number="4242 4242 4242 1234").masked_number() == "**** 1234"
        assert CardPayment(card_number="12").masked_number() == "****"


class TestRepairer:
    """Tests for repairer helpers."""

    def test_display_name_prefers_company(self):
        assert Repairer(id="rep-001", name="Max", company_name="TechFix").display_name == "TechFix"
        assert Repairer(id="rep-001", name="Max").display_name == "Max"

    def test_sla_for_partial_category(self):
        repairer = Repairer(id="rep-001", name="Max", slas=[
            make_sla("Laptops"),
            make_sla("TVs", response_time_hours=12),
        ])
        assert repairer.sla_for("TV").response_time_hours == 12
        assert repairer.sla_for("Cameras") is None

    def test_sla_to_dict(self):
        data = RepairerSLA(device_category="TVs", quality_score=Decimal("4.5")).to_dict()
        assert data["quality_score"] == 4.5


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_to_dict(self):
        error = PaymentSelectionError(
            message="Please fill in all card details",
            details={"missing_fields": ["cvv"]},
            claim_id="CLM-001",
        )
        assert error.to_dict() == {
            "code": "CF_PAYMENT_SELECTION_INVALID",
            "message": "Please fill in all card details",
            "details": {"missing_fields": ["cvv"]},
            "claim_id": "CLM-001",
        }

    def test_str_includes_code_and_claim(self):
        error = PrematureActionError(message="Excess must be paid first", claim_id="CLM-001")
        assert str(error) == "[CF_PREMATURE_ACTION] Excess must be paid first (claim: CLM-001)"

    def test_minimal_to_dict(self):
        assert ClaimFlowError(message="boom").to_dict() == {
            "code": "CF_INTERNAL_ERROR",
            "message": "boom",
        }
