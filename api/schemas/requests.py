"""Request schemas for the API."""

from datetime import date
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from claimflow.models import BankPayment, CardPayment, FulfillmentType, PaymentOnFile, PaymentSelection


class CardDetailsInput(BaseModel):
    """Credit card details. Never stored."""
    card_number: str = Field(default="", description="Card number, spaces allowed")
    expiry_date: str = Field(default="", description="MM/YY")
    cvv: str = Field(default="", description="Card security code")
    cardholder_name: str = Field(default="", description="Name on the card")


class BankDetailsInput(BaseModel):
    """SEPA direct debit details."""
    iban: str = Field(default="", description="IBAN")
    bic: str = Field(default="", description="BIC")


class ExcessPaymentRequest(BaseModel):
    """Settle the claim excess."""
    method: Optional[Literal["payment_on_file", "credit_card", "sepa_debit"]] = Field(
        default=None, description="payment_on_file|credit_card|sepa_debit"
    )
    card: Optional[CardDetailsInput] = Field(default=None, description="Required for credit_card")
    bank: Optional[BankDetailsInput] = Field(default=None, description="Required for sepa_debit")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"method": "payment_on_file"},
                {
                    "method": "credit_card",
                    "card": {
                        "card_number": "4242 4242 4242 4242",
                        "expiry_date": "12/28",
                        "cvv": "123",
                        "cardholder_name": "Anna Keller",
                    },
                },
            ]
        }
    }

    def to_selection(self) -> Optional[PaymentSelection]:
        """Convert to the domain payment selection; None when nothing was chosen."""
        if self.method is None:
            return None
        if self.method == "payment_on_file":
            return PaymentOnFile()
        if self.method == "credit_card":
            card = self.card or CardDetailsInput()
            return CardPayment(
                card_number=card.card_number,
                expiry_date=card.expiry_date,
                cvv=card.cvv,
                cardholder_name=card.cardholder_name,
            )
        bank = self.bank or BankDetailsInput()
        return BankPayment(iban=bank.iban, bic=bank.bic)


class DeviceValueRequest(BaseModel):
    """Supply a device value that was unknown at excess payment."""
    device_value: Decimal = Field(..., description="Confirmed device value")

    model_config = {
        "json_schema_extra": {"examples": [{"device_value": "99.00"}]}
    }


class FulfillmentTypeRequest(BaseModel):
    """Manually correct the fulfillment type."""
    fulfillment_type: FulfillmentType = Field(
        ..., description="in_home_repair|collection_repair|voucher"
    )


class ScheduleRequest(BaseModel):
    """Book the appointment."""
    appointment_date: Optional[date] = Field(default=None, description="YYYY-MM-DD, after today")
    slot: Optional[str] = Field(default=None, description="Slot label, e.g. '09:00 - 11:00'")
    repairer_id: Optional[str] = Field(default=None, description="Selected repairer")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "appointment_date": "2026-10-21",
                    "slot": "09:00 - 11:00",
                    "repairer_id": "rep-001",
                }
            ]
        }
    }
