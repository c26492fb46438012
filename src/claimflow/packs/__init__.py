"""
ClaimFlow Rules Packs

Schema validation and loading for fulfillment rules packs.

Rules packs are YAML or JSON files that override the business constants of
the fulfillment workflow (voucher threshold, large-item categories, slot
catalog, reference format, ...) for a program.

Usage:
    from claimflow.packs import load_rules_pack, RulesPackLoader

    rules = load_rules_pack("packs/standard_fulfillment.yaml")

    loader = RulesPackLoader(strict_version=False)
    rules = loader.load("path/to/legacy_pack.yaml")
"""
from __future__ import annotations

from .loader import (
    RulesPackLoader,
    load_rules_pack,
    load_rules_pack_from_string,
)
from .schema import (
    SCHEMA_VERSION,
    AvailabilitySchema,
    CategoriesSchema,
    DatePatternSchema,
    FulfillmentRulesSchema,
    KeywordSetSchema,
    PaymentSchema,
    ReferencesSchema,
    RoutingSchema,
    check_schema_version,
    validate_rules_pack,
)

__all__ = [
    # Version
    "SCHEMA_VERSION",
    # Loader
    "RulesPackLoader",
    "load_rules_pack",
    "load_rules_pack_from_string",
    # Validation
    "validate_rules_pack",
    "check_schema_version",
    # Schemas
    "FulfillmentRulesSchema",
    "RoutingSchema",
    "CategoriesSchema",
    "KeywordSetSchema",
    "AvailabilitySchema",
    "DatePatternSchema",
    "PaymentSchema",
    "ReferencesSchema",
]
