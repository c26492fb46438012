"""
ClaimFlow Payment Selection

The excess can be settled with the payment method already on file, a credit
card, or a SEPA bank debit. Each option is its own type so that exactly one
set of payment details can ever be present.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .enums import PaymentMethod


@dataclass(frozen=True)
class PaymentOnFile:
    """Reuse the policy's existing payment method."""

    @property
    def method(self) -> PaymentMethod:
        return PaymentMethod.PAYMENT_ON_FILE

    def missing_fields(self) -> list[str]:
        return []


@dataclass(frozen=True)
class CardPayment:
    """Credit card details entered for the excess."""
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""
    cardholder_name: str = ""

    @property
    def method(self) -> PaymentMethod:
        return PaymentMethod.CREDIT_CARD

    def missing_fields(self) -> list[str]:
        fields = {
            "card_number": self.card_number,
            "expiry_date": self.expiry_date,
            "cvv": self.cvv,
            "cardholder_name": self.cardholder_name,
        }
        return [name for name, value in fields.items() if not value or not value.strip()]

    def masked_number(self) -> str:
        digits = self.card_number.replace(" ", "")
        return f"**** {digits[-4:]}" if len(digits) >= 4 else "****"


@dataclass(frozen=True)
class BankPayment:
    """SEPA direct debit details."""
    iban: str = ""
    bic: str = ""

    @property
    def method(self) -> PaymentMethod:
        return PaymentMethod.SEPA_DEBIT

    def missing_fields(self) -> list[str]:
        fields = {"iban": self.iban, "bic": self.bic}
        return [name for name, value in fields.items() if not value or not value.strip()]


PaymentSelection = Union[PaymentOnFile, CardPayment, BankPayment]
