"""
ClaimFlow Rules Pack Schemas

Pydantic models for validating fulfillment rules packs (YAML/JSON).

A rules pack overrides the default business constants of the fulfillment
workflow for one program: voucher threshold, large-item categories, category
synonyms, keyword sets, slot catalog and availability patterns, payment delay
and reference format. Every section is optional; omitted values keep their
defaults.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check major version compatibility
"""
from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import DEFAULT_TIME_SLOTS


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"

SLOT_LABEL = re.compile(r"^\d{2}:\d{2} - \d{2}:\d{2}$")
REFERENCE_PREFIX = re.compile(r"^[A-Z]{2,6}$")


# =============================================================================
# Sections
# =============================================================================

class RoutingSchema(BaseModel):
    """Routing thresholds."""
    voucher_threshold: Optional[Decimal] = Field(default=None, gt=0)
    large_item_categories: Optional[list[str]] = None

    @field_validator("large_item_categories")
    @classmethod
    def lower_categories(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        return [c.strip().lower() for c in v if c.strip()]

    model_config = {"extra": "forbid"}


class KeywordSetSchema(BaseModel):
    """Product-name keywords identifying one category."""
    category: str = Field(..., min_length=1)
    keywords: list[str] = Field(..., min_length=1)

    @field_validator("keywords")
    @classmethod
    def lower_keywords(cls, v: list[str]) -> list[str]:
        return [k.lower() for k in v]

    model_config = {"extra": "forbid"}


class CategoriesSchema(BaseModel):
    """Category detection tables."""
    synonyms: Optional[dict[str, str]] = None
    keyword_sets: Optional[list[KeywordSetSchema]] = None

    @field_validator("synonyms")
    @classmethod
    def lower_synonym_keys(cls, v: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        if v is None:
            return v
        return {k.strip().lower(): value for k, value in v.items()}

    @field_validator("keyword_sets")
    @classmethod
    def unique_categories(cls, v: Optional[list[KeywordSetSchema]]) -> Optional[list[KeywordSetSchema]]:
        if v is None:
            return v
        names = [ks.category.lower() for ks in v]
        if len(set(names)) != len(names):
            raise ValueError("keyword_sets must not repeat a category")
        return v

    model_config = {"extra": "forbid"}


class DatePatternSchema(BaseModel):
    """Fully booked day offsets."""
    divisors: list[int] = Field(default_factory=list)
    extra_days: list[int] = Field(default_factory=list)

    @field_validator("divisors")
    @classmethod
    def positive_divisors(cls, v: list[int]) -> list[int]:
        if any(d <= 0 for d in v):
            raise ValueError("divisors must be positive")
        return v

    model_config = {"extra": "forbid"}


class AvailabilitySchema(BaseModel):
    """Simulated repairer availability."""
    time_slots: Optional[list[str]] = None
    lookahead_days: Optional[int] = Field(default=None, ge=1, le=365)
    date_patterns: Optional[list[DatePatternSchema]] = None
    slot_patterns: Optional[list[list[int]]] = None

    @field_validator("time_slots")
    @classmethod
    def validate_slot_labels(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        if not v:
            raise ValueError("time_slots must not be empty")
        for label in v:
            if not SLOT_LABEL.match(label):
                raise ValueError(f"Invalid slot label '{label}', expected 'HH:MM - HH:MM'")
        if len(set(v)) != len(v):
            raise ValueError("time_slots must be unique")
        return v

    @field_validator("date_patterns", "slot_patterns")
    @classmethod
    def non_empty_patterns(cls, v: Optional[list[Any]]) -> Optional[list[Any]]:
        if v is not None and not v:
            raise ValueError("pattern lists must not be empty")
        return v

    @model_validator(mode="after")
    def validate_slot_indices(self) -> "AvailabilitySchema":
        """Slot patterns may only remove slots that exist."""
        if self.slot_patterns is None:
            return self
        slot_count = len(self.time_slots or DEFAULT_TIME_SLOTS)
        for pattern in self.slot_patterns:
            for index in pattern:
                if not 0 <= index < slot_count:
                    raise ValueError(
                        f"Slot index {index} out of range for {slot_count} slots"
                    )
        return self

    model_config = {"extra": "forbid"}


class PaymentSchema(BaseModel):
    """Simulated payment processing."""
    delay_seconds: Optional[float] = Field(default=None, ge=0)

    model_config = {"extra": "forbid"}


class ReferencesSchema(BaseModel):
    """Engineer/logistics reference format."""
    engineer_prefix: Optional[str] = None
    logistics_prefix: Optional[str] = None
    length: Optional[int] = Field(default=None, ge=4, le=16)
    attempts: Optional[int] = Field(default=None, ge=1, le=100)

    @field_validator("engineer_prefix", "logistics_prefix")
    @classmethod
    def validate_prefix(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not REFERENCE_PREFIX.match(v):
            raise ValueError(f"Invalid reference prefix '{v}', expected 2-6 uppercase letters")
        return v

    @model_validator(mode="after")
    def distinct_prefixes(self) -> "ReferencesSchema":
        if self.engineer_prefix and self.engineer_prefix == self.logistics_prefix:
            raise ValueError("engineer_prefix and logistics_prefix must differ")
        return self

    model_config = {"extra": "forbid"}


# =============================================================================
# Root Schema
# =============================================================================

class FulfillmentRulesSchema(BaseModel):
    """Root schema of a rules pack file."""
    schema_version: str = Field(default=SCHEMA_VERSION)
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    version: str = Field(default="1.0.0")
    description: Optional[str] = None

    routing: RoutingSchema = Field(default_factory=RoutingSchema)
    categories: CategoriesSchema = Field(default_factory=CategoriesSchema)
    availability: AvailabilitySchema = Field(default_factory=AvailabilitySchema)
    payment: PaymentSchema = Field(default_factory=PaymentSchema)
    references: ReferencesSchema = Field(default_factory=ReferencesSchema)

    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_rules_pack(data: dict[str, Any]) -> FulfillmentRulesSchema:
    """
    Validate a rules pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return FulfillmentRulesSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """True if the pack's major schema version matches ours."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    return pack_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
