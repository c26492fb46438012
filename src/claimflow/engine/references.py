"""
ClaimFlow Reference Codes

Engineer visits get ``ENG-XXXXXXXX`` references, collections get
``LOG-XXXXXXXX``, where X is an uppercase base36 character. Codes are checked
against existing references and regenerated on collision.
"""
from __future__ import annotations

import logging
import random
import string
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..exceptions import ReferenceGenerationError
from ..models import FulfillmentRules

logger = logging.getLogger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_uppercase


def _never_exists(reference: str) -> bool:
    return False


@dataclass
class ReferenceGenerator:
    """
    Produces unique engineer/logistics references.

    Usage:
        generator = ReferenceGenerator(exists=store.reference_exists)
        ref = generator.generate(large_item=True)   # "ENG-4K2J9QZ1"
    """

    exists: Callable[[str], bool] = _never_exists
    rules: FulfillmentRules = field(default_factory=FulfillmentRules)
    rng: random.Random = field(default_factory=random.SystemRandom)

    def prefix_for(self, large_item: bool) -> str:
        return self.rules.engineer_prefix if large_item else self.rules.logistics_prefix

    def candidate(self, large_item: bool) -> str:
        body = "".join(
            self.rng.choice(BASE36_ALPHABET) for _ in range(self.rules.reference_length)
        )
        return f"{self.prefix_for(large_item)}-{body}"

    def generate(self, large_item: bool, claim_id: Optional[str] = None) -> str:
        """
        Generate a reference not used by any other record.

        Raises:
            ReferenceGenerationError: If every attempt collided
        """
        attempts = max(1, self.rules.reference_attempts)
        for attempt in range(1, attempts + 1):
            reference = self.candidate(large_item)
            if not self.exists(reference):
                return reference
            logger.warning("Reference collision on %s (attempt %d)", reference, attempt)

        raise ReferenceGenerationError(
            message=f"No unique reference after {attempts} attempts",
            details={"prefix": self.prefix_for(large_item)},
            claim_id=claim_id,
        )
