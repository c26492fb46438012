"""
ClaimFlow Payment Processing

The excess payment is simulated: card payments wait for a fixed delay to mimic
processing latency, payment on file and bank debits complete immediately.
No money moves and no card data is stored.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from ..models import CardPayment, PaymentSelection

logger = logging.getLogger(__name__)


@dataclass
class SimulatedPaymentProcessor:
    """
    Stand-in for a payment gateway.

    Usage:
        processor = SimulatedPaymentProcessor(delay_seconds=1.5)
        processor.process("CLM-001", CardPayment(...))
    """

    delay_seconds: float = 1.5
    sleep: Callable[[float], None] = time.sleep

    def process(self, claim_id: str, selection: PaymentSelection) -> None:
        if isinstance(selection, CardPayment):
            logger.info(
                "Processing card payment %s for claim %s",
                selection.masked_number(), claim_id,
            )
            if self.delay_seconds > 0:
                self.sleep(self.delay_seconds)
        else:
            logger.info(
                "Recording %s excess payment for claim %s",
                selection.method.value, claim_id,
            )
