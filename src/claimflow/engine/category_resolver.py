"""
ClaimFlow Device Category Resolver

Maps a free-text product name to the normalized device category used for
routing and repairer matching.

Resolution order, first success wins:
1. Device catalog lookup on the model name, mapped through the synonym table
2. Keyword sets matched against the product name
3. Unknown ("")

Unknown is a valid answer. Callers treat it as "not a large item".
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..models import FulfillmentRules
from ..stores import CoveredItemStore, DeviceCatalog

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = ""


@dataclass
class DeviceCategoryResolver:
    """
    Resolves device categories. Read-only and idempotent.

    Usage:
        resolver = DeviceCategoryResolver(rules)
        resolver.resolve("Sony BRAVIA XR X95L")            # "TVs"
        resolver.resolve("Galaxy S24", catalog=catalog)    # catalog category
    """

    rules: FulfillmentRules = field(default_factory=FulfillmentRules)

    def resolve(
        self,
        product_name: Optional[str],
        catalog: Optional[DeviceCatalog] = None,
        model_name: Optional[str] = None,
    ) -> str:
        """
        Resolve the normalized category of a product.

        Args:
            product_name: Raw product name from the covered item
            catalog: Optional device catalog for an authoritative lookup
            model_name: Model to look up instead of the product name

        Returns:
            Normalized category, or "" when unknown
        """
        if not product_name and not model_name:
            return UNKNOWN_CATEGORY

        if catalog is not None:
            for lookup in (model_name, product_name):
                if not lookup:
                    continue
                category = self._from_catalog(catalog, lookup)
                if category:
                    return category

        return self.from_keywords(product_name or model_name or "")

    def from_keywords(self, product_name: str) -> str:
        """Match the product name against the ordered keyword sets."""
        for keyword_set in self.rules.keyword_sets:
            if keyword_set.matches(product_name):
                logger.debug(
                    "Detected %s from product name keywords: %s",
                    keyword_set.category, product_name,
                )
                return keyword_set.category
        return UNKNOWN_CATEGORY

    def _from_catalog(self, catalog: DeviceCatalog, model_name: str) -> str:
        try:
            device = catalog.find_by_model(model_name)
        except Exception as exc:
            # Catalog failures degrade to keyword matching
            logger.warning("Device catalog lookup failed for %r: %s", model_name, exc)
            return UNKNOWN_CATEGORY

        if device is None or not device.device_category:
            return UNKNOWN_CATEGORY

        normalized = self.rules.normalize_catalog_category(device.device_category)
        logger.debug(
            "Found device category from catalog: %s -> %s",
            device.device_category, normalized,
        )
        return normalized

    def resolve_for_policy(
        self,
        policy_id: str,
        covered_items: CoveredItemStore,
        catalog: Optional[DeviceCatalog] = None,
        fallback: Optional[str] = None,
    ) -> str:
        """
        Resolve the category of a policy's covered item.

        ``fallback`` (e.g. the category declared on the claim) is used only
        when the covered item cannot be resolved.
        """
        try:
            item = covered_items.get_covered_item(policy_id)
        except Exception as exc:
            logger.warning("Covered item lookup failed for policy %s: %s", policy_id, exc)
            item = None

        category = UNKNOWN_CATEGORY
        if item is not None:
            category = self.resolve(item.product_name, catalog=catalog, model_name=item.model)

        if not category and fallback:
            category = self.rules.normalize_catalog_category(fallback)
        return category
