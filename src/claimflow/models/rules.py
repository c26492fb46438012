"""
ClaimFlow Fulfillment Rules

Business constants that drive routing, category detection and simulated
availability. Defaults reproduce the portal's hard-coded values; a rules pack
(see ``claimflow.packs``) can override any of them per program.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_VOUCHER_THRESHOLD = Decimal("150")

DEFAULT_LARGE_ITEM_CATEGORIES: frozenset[str] = frozenset({
    "home appliances",
    "tv",
    "tvs",
    "smart tv",
    "smart tvs",
    "brown goods",       # TVs and audio equipment
    "white goods",       # Washing machines, refrigerators, etc.
    "washing machine",
    "washing machines",
    "refrigerator",
    "refrigerators",
    "dishwasher",
    "dishwashers",
    "oven",
    "ovens",
    "large appliances",
})

DEFAULT_CATEGORY_SYNONYMS: dict[str, str] = {
    "tv": "TVs",
    "tvs": "TVs",
    "television": "TVs",
    "smart tv": "TVs",
    "brown goods": "TVs",
    "home appliance": "Home Appliances",
    "home appliances": "Home Appliances",
    "white goods": "Home Appliances",
    "washing machine": "Home Appliances",
    "refrigerator": "Home Appliances",
    "dishwasher": "Home Appliances",
    "laptop": "Laptops",
    "notebook": "Laptops",
    "mobile phone": "Mobile Phones",
    "smartphone": "Mobile Phones",
    "tablet": "Tablets",
    "camera": "Cameras",
    "gaming console": "Gaming Consoles",
}


@dataclass(frozen=True)
class KeywordSet:
    """Product-name tokens that identify a category."""
    category: str
    keywords: tuple[str, ...]

    def matches(self, product_name: str) -> bool:
        lowered = product_name.lower()
        return any(keyword in lowered for keyword in self.keywords)


# Evaluated in order; first match wins. Consoles come before TVs so that
# "Switch OLED" is not read as an OLED television.
DEFAULT_KEYWORD_SETS: tuple[KeywordSet, ...] = (
    KeywordSet("Gaming Consoles", ("console", "playstation", "xbox", "nintendo", "steam deck")),
    KeywordSet("TVs", (
        "tv", "television", "oled", "qled", "qned", "nanocell", "led tv",
        "smart tv", "smart display", "bravia", "x95", "x90",
    )),
    KeywordSet("Home Appliances", (
        "washing", "washer", "dryer", "dishwasher", "refrigerator", "fridge",
        "freezer", "oven", "cooker",
    )),
    KeywordSet("Laptops", ("laptop", "macbook", "notebook", "chromebook", "thinkpad")),
    KeywordSet("Tablets", ("tablet", "ipad", "galaxy tab")),
    KeywordSet("Mobile Phones", ("phone", "iphone", "samsung galaxy", "pixel")),
    KeywordSet("Cameras", ("camera", "gopro", "dslr")),
)

DEFAULT_TIME_SLOTS: tuple[str, ...] = (
    "09:00 - 11:00",
    "11:00 - 13:00",
    "13:00 - 15:00",
    "15:00 - 17:00",
    "17:00 - 19:00",
)


@dataclass(frozen=True)
class DatePattern:
    """
    Marks day offsets (1..lookahead) as fully booked.

    An offset is unavailable if it is divisible by any divisor or is listed
    in ``extra_days``.
    """
    divisors: tuple[int, ...] = ()
    extra_days: tuple[int, ...] = ()

    def is_unavailable(self, offset: int) -> bool:
        if offset in self.extra_days:
            return True
        return any(offset % d == 0 for d in self.divisors)


DEFAULT_DATE_PATTERNS: tuple[DatePattern, ...] = (
    DatePattern(divisors=(7,)),
    DatePattern(divisors=(5,)),
    DatePattern(divisors=(3, 10)),
    DatePattern(divisors=(4,)),
    DatePattern(divisors=(6,), extra_days=(2,)),
)

# Zero-based slot indices removed for each pattern.
DEFAULT_SLOT_PATTERNS: tuple[tuple[int, ...], ...] = (
    (0, 2),
    (1, 4),
    (3,),
    (),
)


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class FulfillmentRules:
    """
    Configuration of the fulfillment workflow.

    Attributes:
        voucher_threshold: Confirmed device values strictly below this
            (and above zero) settle by voucher
        large_item_categories: Lower-cased categories that need an engineer visit
        category_synonyms: Lower-cased catalog category -> normalized category
        keyword_sets: Ordered product-name keyword sets
        time_slots: Catalog of bookable slot labels
        lookahead_days: Days ahead covered by the availability calendar
        date_patterns: Unavailable-date patterns selected by repairer hash
        slot_patterns: Removed-slot patterns selected by repairer hash + day
        payment_delay_seconds: Simulated card processing latency
        engineer_prefix: Reference prefix for engineer visits
        logistics_prefix: Reference prefix for collections
        reference_length: Random base36 characters after the prefix
        reference_attempts: Attempts to find an unused reference
    """
    id: str = "default"
    name: str = "Default Fulfillment Rules"
    version: str = "1.0.0"

    voucher_threshold: Decimal = DEFAULT_VOUCHER_THRESHOLD
    large_item_categories: frozenset[str] = DEFAULT_LARGE_ITEM_CATEGORIES
    category_synonyms: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_SYNONYMS)
    )
    keyword_sets: tuple[KeywordSet, ...] = DEFAULT_KEYWORD_SETS

    time_slots: tuple[str, ...] = DEFAULT_TIME_SLOTS
    lookahead_days: int = 30
    date_patterns: tuple[DatePattern, ...] = DEFAULT_DATE_PATTERNS
    slot_patterns: tuple[tuple[int, ...], ...] = DEFAULT_SLOT_PATTERNS

    payment_delay_seconds: float = 1.5

    engineer_prefix: str = "ENG"
    logistics_prefix: str = "LOG"
    reference_length: int = 8
    reference_attempts: int = 5

    def normalize_catalog_category(self, raw: str) -> str:
        """Map a catalog category through the synonym table."""
        return self.category_synonyms.get(raw.strip().lower(), raw.strip())

    def is_large_item(self, category: Optional[str]) -> bool:
        return (category or "").strip().lower() in self.large_item_categories
