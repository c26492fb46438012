"""
ClaimFlow Exception Hierarchy

Domain-specific exceptions for the claim fulfillment workflow.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: CF_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ClaimFlowError(Exception):
    """
    Base exception for all ClaimFlow errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (CF_*)
        details: Additional context about the error
        claim_id: Associated claim ID if applicable
    """
    message: str
    code: str = "CF_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    claim_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.claim_id:
            parts.append(f"(claim: {self.claim_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.claim_id:
            result["claim_id"] = self.claim_id
        return result


# =============================================================================
# Rules Pack Errors
# =============================================================================

@dataclass
class RulesPackLoadError(ClaimFlowError):
    """Failed to load a fulfillment rules pack from file."""
    code: str = "CF_RULES_LOAD_ERROR"


@dataclass
class RulesPackValidationError(ClaimFlowError):
    """Rules pack schema validation failed."""
    code: str = "CF_RULES_VALIDATION_ERROR"


@dataclass
class RulesPackVersionMismatch(ClaimFlowError):
    """Rules pack schema version is not supported."""
    code: str = "CF_RULES_VERSION_MISMATCH"


# =============================================================================
# Validation Errors (user-correctable, never persisted)
# =============================================================================

@dataclass
class FulfillmentValidationError(ClaimFlowError):
    """User input failed validation; the transition was not attempted."""
    code: str = "CF_VALIDATION_ERROR"


@dataclass
class PaymentSelectionError(FulfillmentValidationError):
    """Payment option missing or incomplete."""
    code: str = "CF_PAYMENT_SELECTION_INVALID"


@dataclass
class AppointmentValidationError(FulfillmentValidationError):
    """Appointment date, slot or repairer missing or not bookable."""
    code: str = "CF_APPOINTMENT_INVALID"


# =============================================================================
# Ordering Errors
# =============================================================================

@dataclass
class InvalidTransitionError(ClaimFlowError):
    """Action is not legal from the record's current status."""
    code: str = "CF_INVALID_TRANSITION"


@dataclass
class PrematureActionError(InvalidTransitionError):
    """An earlier workflow step has not been completed."""
    code: str = "CF_PREMATURE_ACTION"


# =============================================================================
# Persistence Errors
# =============================================================================

@dataclass
class PersistenceError(ClaimFlowError):
    """Write to the fulfillment store was rejected."""
    code: str = "CF_PERSISTENCE_ERROR"


@dataclass
class ClaimNotFoundError(ClaimFlowError):
    """Claim does not exist in the claim store."""
    code: str = "CF_CLAIM_NOT_FOUND"


# =============================================================================
# Collaborator Errors
# =============================================================================

@dataclass
class CollaboratorError(ClaimFlowError):
    """An external collaborator call failed."""
    code: str = "CF_COLLABORATOR_ERROR"


@dataclass
class LookupFailedError(CollaboratorError):
    """Directory or catalog lookup failed."""
    code: str = "CF_LOOKUP_FAILED"


@dataclass
class RecommendationError(CollaboratorError):
    """Repairer recommendation service failed."""
    code: str = "CF_RECOMMENDATION_ERROR"


@dataclass
class RecommendationRateLimitError(RecommendationError):
    """Recommendation service rate limit exceeded."""
    code: str = "CF_RECOMMENDATION_RATE_LIMITED"


@dataclass
class RecommendationCreditsError(RecommendationError):
    """Recommendation service requires payment or credits."""
    code: str = "CF_RECOMMENDATION_CREDITS_REQUIRED"


# =============================================================================
# Reference Errors
# =============================================================================

@dataclass
class ReferenceGenerationError(ClaimFlowError):
    """Could not produce a unique engineer/logistics reference."""
    code: str = "CF_REFERENCE_GENERATION_FAILED"
