"""
ClaimFlow Rules Pack Loader

Loads and validates fulfillment rules packs from YAML or JSON files.

Converts the Pydantic schema to the frozen FulfillmentRules domain model;
sections a pack omits keep the default business constants.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import RulesPackLoadError, RulesPackValidationError, RulesPackVersionMismatch
from ..models import DatePattern, FulfillmentRules, KeywordSet
from .schema import (
    SCHEMA_VERSION,
    FulfillmentRulesSchema,
    check_schema_version,
    validate_rules_pack,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Schema to Model Conversion
# =============================================================================

def _convert_rules_pack(schema: FulfillmentRulesSchema) -> FulfillmentRules:
    """Overlay the pack's values on the default rules."""
    defaults = FulfillmentRules()
    routing = schema.routing
    categories = schema.categories
    availability = schema.availability
    references = schema.references

    synonyms = dict(defaults.category_synonyms)
    if categories.synonyms is not None:
        synonyms.update(categories.synonyms)

    keyword_sets = defaults.keyword_sets
    if categories.keyword_sets is not None:
        keyword_sets = tuple(
            KeywordSet(category=ks.category, keywords=tuple(ks.keywords))
            for ks in categories.keyword_sets
        )

    date_patterns = defaults.date_patterns
    if availability.date_patterns is not None:
        date_patterns = tuple(
            DatePattern(divisors=tuple(p.divisors), extra_days=tuple(p.extra_days))
            for p in availability.date_patterns
        )

    slot_patterns = defaults.slot_patterns
    if availability.slot_patterns is not None:
        slot_patterns = tuple(tuple(p) for p in availability.slot_patterns)

    def pick(value: Any, default: Any) -> Any:
        return default if value is None else value

    return FulfillmentRules(
        id=schema.id,
        name=schema.name,
        version=schema.version,
        voucher_threshold=pick(routing.voucher_threshold, defaults.voucher_threshold),
        large_item_categories=(
            frozenset(routing.large_item_categories)
            if routing.large_item_categories is not None
            else defaults.large_item_categories
        ),
        category_synonyms=synonyms,
        keyword_sets=keyword_sets,
        time_slots=(
            tuple(availability.time_slots)
            if availability.time_slots is not None
            else defaults.time_slots
        ),
        lookahead_days=pick(availability.lookahead_days, defaults.lookahead_days),
        date_patterns=date_patterns,
        slot_patterns=slot_patterns,
        payment_delay_seconds=pick(schema.payment.delay_seconds, defaults.payment_delay_seconds),
        engineer_prefix=pick(references.engineer_prefix, defaults.engineer_prefix),
        logistics_prefix=pick(references.logistics_prefix, defaults.logistics_prefix),
        reference_length=pick(references.length, defaults.reference_length),
        reference_attempts=pick(references.attempts, defaults.reference_attempts),
    )


# =============================================================================
# Rules Pack Loader
# =============================================================================

class RulesPackLoader:
    """
    Loads rules packs from YAML or JSON files.

    Usage:
        loader = RulesPackLoader()
        rules = loader.load("packs/standard_fulfillment.yaml")
    """

    def __init__(self, strict_version: bool = True):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject packs with incompatible schema versions
        """
        self.strict_version = strict_version
        self._rules: dict[str, FulfillmentRules] = {}

    def load(self, path: Union[str, Path]) -> FulfillmentRules:
        """
        Load a rules pack from a file.

        Raises:
            RulesPackLoadError: If the file cannot be read
            RulesPackValidationError: If validation fails
            RulesPackVersionMismatch: If the schema version is incompatible
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except Exception as e:
            raise RulesPackLoadError(
                message=f"Failed to load rules pack: {e}",
                details={"path": str(path), "error": str(e)},
            )

        rules = self.load_data(data, source=str(path))
        logger.info("Loaded rules pack %s (%s) from %s", rules.id, rules.version, path)
        return rules

    def load_data(self, data: Any, source: str = "<string>") -> FulfillmentRules:
        """Validate and convert already-parsed pack data."""
        if not isinstance(data, dict):
            raise RulesPackLoadError(
                message="Rules pack must be a mapping",
                details={"path": source},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise RulesPackVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )

        try:
            schema = validate_rules_pack(data)
        except ValidationError as e:
            raise RulesPackValidationError(
                message=f"Rules pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False), "path": source},
            )

        rules = _convert_rules_pack(schema)
        self._rules[rules.id] = rules
        return rules

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f)
            elif path.suffix.lower() == ".json":
                return json.load(f)
            else:
                content = f.read()
                try:
                    return yaml.safe_load(content)
                except yaml.YAMLError:
                    return json.loads(content)

    def get_rules(self, rules_id: str) -> Optional[FulfillmentRules]:
        """Get previously loaded rules by pack ID."""
        return self._rules.get(rules_id)

    def list_rules(self) -> list[str]:
        return list(self._rules.keys())


# =============================================================================
# Convenience Functions
# =============================================================================

def load_rules_pack(path: Union[str, Path]) -> FulfillmentRules:
    """Load a rules pack from a file with a temporary loader."""
    return RulesPackLoader().load(path)


def load_rules_pack_from_string(
    content: str,
    format: str = "yaml",
) -> FulfillmentRules:
    """
    Load a rules pack from a string.

    Args:
        content: YAML or JSON string
        format: "yaml" or "json"
    """
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (ValueError, yaml.YAMLError) as e:
        raise RulesPackLoadError(
            message=f"Failed to parse rules pack: {e}",
            details={"format": format},
        )
    return RulesPackLoader().load_data(data)
