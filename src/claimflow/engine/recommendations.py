"""
ClaimFlow Repairer Recommendations

Protocol for the repairer recommendation service plus a deterministic,
SLA-based implementation.

The production service is AI-backed and may fail with rate-limit or credit
errors; the workflow only consumes its output shape. ``SLARecommendationProvider``
applies the same eligibility rules (active, specialization, coverage area,
program country) and ranks the eligible repairers by their SLA for the
device category.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol, runtime_checkable

from ..exceptions import (
    RecommendationCreditsError,
    RecommendationError,
    RecommendationRateLimitError,
)
from ..models import (
    EligibleRepairer,
    RecommendationResult,
    Repairer,
    RepairerRecommendation,
    RepairerSLA,
)
from ..stores import ClaimStore, PolicyStore, RepairerDirectory

logger = logging.getLogger(__name__)


# Program countries are configured as ISO codes, repairers by country name
COUNTRY_NAMES = {
    "DE": "Germany",
    "ES": "Spain",
    "FR": "France",
    "IT": "Italy",
    "NL": "Netherlands",
    "BE": "Belgium",
    "AT": "Austria",
    "CH": "Switzerland",
    "IE": "Ireland",
    "UK": "United Kingdom",
}

NATIONWIDE_AREAS = frozenset({"nationwide", "all", "germany", "deutschland"})

# Broad coverage regions and the states/cities they include
REGION_CITIES: dict[str, tuple[str, ...]] = {
    "east germany": (
        "berlin", "brandenburg", "sachsen", "saxony", "sachsen-anhalt",
        "thüringen", "thuringia", "mecklenburg", "leipzig", "dresden",
        "chemnitz", "potsdam", "magdeburg", "erfurt", "jena", "halle", "rostock",
    ),
    "west germany": (
        "nordrhein-westfalen", "nrw", "rheinland-pfalz", "saarland", "hessen",
        "köln", "düsseldorf", "dortmund", "essen", "frankfurt", "mainz",
        "wiesbaden", "bonn", "aachen", "ruhrgebiet",
    ),
    "south germany": (
        "bayern", "bavaria", "baden-württemberg", "münchen", "munich",
        "stuttgart", "nürnberg", "nuremberg", "augsburg", "freiburg",
        "karlsruhe", "mannheim", "regensburg", "ulm",
    ),
    "north germany": (
        "schleswig-holstein", "hamburg", "bremen", "niedersachsen",
        "lower saxony", "hannover", "hanover", "kiel", "lübeck",
        "braunschweig", "oldenburg", "osnabrück", "wolfsburg",
    ),
    "nationwide": ("germany", "deutschland", "all"),
    "germany": ("all",),
}

MAX_RECOMMENDATIONS = 3


def recommendation_error_from_status(
    status_code: int,
    message: str = "",
    claim_id: Optional[str] = None,
) -> RecommendationError:
    """Map a recommendation service HTTP status to the matching exception."""
    if status_code == 429:
        return RecommendationRateLimitError(
            message=message or "Rate limits exceeded. Please try again later.",
            details={"status_code": status_code},
            claim_id=claim_id,
        )
    if status_code == 402:
        return RecommendationCreditsError(
            message=message or "AI credits required. Please add credits to your workspace.",
            details={"status_code": status_code},
            claim_id=claim_id,
        )
    return RecommendationError(
        message=message or "Failed to fetch recommendations",
        details={"status_code": status_code},
        claim_id=claim_id,
    )


@runtime_checkable
class RepairerRecommendationProvider(Protocol):
    """
    Protocol for repairer recommendation services.

    Implementations raise RecommendationRateLimitError,
    RecommendationCreditsError or RecommendationError on failure.
    """

    def recommend(
        self,
        claim_id: str,
        device_category: Optional[str],
        coverage_area: Optional[str],
    ) -> RecommendationResult:
        ...


# =============================================================================
# Eligibility
# =============================================================================

def matches_specialization(repairer: Repairer, device_category: Optional[str]) -> bool:
    """Partial match either way, so "TV" and "TVs" match."""
    if not device_category:
        return True
    category = device_category.lower()
    return any(
        specialization.lower() in category or category in specialization.lower()
        for specialization in repairer.specializations
    )


def matches_coverage(coverage_areas: list[str], target_area: Optional[str]) -> bool:
    """
    True if a repairer's coverage areas include the target area.

    No target or no restrictions means covered. Nationwide areas cover
    everything. A regional area ("South Germany") covers the cities and
    states listed for it in REGION_CITIES. Otherwise a direct or substring
    match either way is needed.
    """
    if not target_area or not coverage_areas:
        return True

    target = target_area.lower()
    for area in coverage_areas:
        lowered = area.strip().lower()
        if not lowered:
            continue
        if lowered in NATIONWIDE_AREAS:
            return True
        if lowered == target or lowered in target or target in lowered:
            return True
        if region_covers(lowered, target):
            return True
    return False


def region_covers(area: str, target: str) -> bool:
    """True if the area names a region that lists the target city or state."""
    for region, cities in REGION_CITIES.items():
        if area in region or region in area:
            if any(city in target or target in city for city in cities):
                return True
    return False


def matches_country(repairer: Repairer, program_countries: list[str]) -> bool:
    """Only filtered when both the program and the repairer name a country."""
    if not program_countries or not repairer.country:
        return True
    names = {COUNTRY_NAMES.get(code, code).lower() for code in program_countries}
    return repairer.country.lower() in names


def filter_eligible(
    repairers: list[Repairer],
    device_category: Optional[str],
    coverage_area: Optional[str],
    program_countries: Optional[list[str]] = None,
) -> list[Repairer]:
    """Repairers that may be recommended for the claim."""
    return [
        r for r in repairers
        if r.is_active
        and matches_specialization(r, device_category)
        and matches_coverage(r.coverage_areas, coverage_area)
        and matches_country(r, program_countries or [])
    ]


# =============================================================================
# Scoring
# =============================================================================

def score_sla(sla: Optional[RepairerSLA]) -> float:
    """
    Score an SLA from 0 to 100.

    Quality and success rate carry 40 points each; response time carries 20,
    falling linearly to zero at 72 hours.
    """
    if sla is None:
        return 40.0
    quality = min(sla.quality_score, Decimal("5")) / Decimal("5") * 40
    success = min(sla.success_rate, Decimal("100")) / Decimal("100") * 40
    response_hours = min(max(sla.response_time_hours, 0), 72)
    response = Decimal(20) * (Decimal(72) - response_hours) / Decimal(72)
    return round(float(quality + success + response), 1)


def key_advantages(repairer: Repairer, sla: Optional[RepairerSLA], coverage_area: Optional[str]) -> list[str]:
    advantages: list[str] = []
    if sla is not None:
        if sla.quality_score >= Decimal("4.5"):
            advantages.append(f"High quality score ({sla.quality_score:.2f}/5.00)")
        if sla.success_rate >= Decimal("95"):
            advantages.append(f"{sla.success_rate:.0f}% repair success rate")
        if sla.response_time_hours <= 24:
            advantages.append(f"Responds within {sla.response_time_hours}h")
        if sla.repair_time_hours <= 48:
            advantages.append(f"Repairs completed within {sla.repair_time_hours}h")
    if coverage_area and any(a.lower() == coverage_area.lower() for a in repairer.coverage_areas):
        advantages.append(f"Local coverage in {coverage_area}")
    return advantages


def _reasoning(repairer: Repairer, sla: Optional[RepairerSLA], device_category: Optional[str]) -> str:
    if sla is None:
        return f"{repairer.display_name} has no SLA configured for this category."
    return (
        f"{repairer.display_name} responds in {sla.response_time_hours}h and repairs "
        f"in {sla.repair_time_hours}h for {device_category or sla.device_category}, "
        f"with a quality score of {sla.quality_score:.2f}/5.00 and a "
        f"{sla.success_rate:.0f}% success rate."
    )


# =============================================================================
# Provider
# =============================================================================

@dataclass
class SLARecommendationProvider:
    """
    Ranks eligible repairers by SLA.

    Usage:
        provider = SLARecommendationProvider(directory=repairers)
        result = provider.recommend("CLM-001", "TVs", "Berlin")
        for rec in result.recommendations:
            print(rec.rank, rec.repairer_name, rec.score)
    """

    directory: RepairerDirectory
    claims: Optional[ClaimStore] = None
    policies: Optional[PolicyStore] = None
    limit: int = MAX_RECOMMENDATIONS

    def _program_countries(self, claim_id: str) -> list[str]:
        if self.claims is None or self.policies is None:
            return []
        claim = self.claims.get_claim(claim_id)
        if claim is None:
            return []
        policy = self.policies.get_policy(claim.policy_id)
        return list(policy.program_countries) if policy else []

    def recommend(
        self,
        claim_id: str,
        device_category: Optional[str],
        coverage_area: Optional[str],
    ) -> RecommendationResult:
        eligible = filter_eligible(
            self.directory.list_repairers(active_only=True),
            device_category,
            coverage_area,
            self._program_countries(claim_id),
        )
        logger.info(
            "Eligible repairers for claim %s (%s, %s): %d",
            claim_id, device_category or "any", coverage_area or "any", len(eligible),
        )

        eligible_out = [
            EligibleRepairer(
                id=r.id,
                name=r.display_name,
                connectivity_type=r.connectivity_type,
                slas=list(r.slas),
            )
            for r in eligible
        ]

        if not eligible:
            return RecommendationResult(
                recommendations=[],
                overall_analysis="No repairers found matching the criteria",
                eligible_repairers=[],
            )

        scored = []
        for repairer in eligible:
            sla = repairer.sla_for(device_category or "")
            scored.append((score_sla(sla), repairer, sla))
        scored.sort(key=lambda item: (-item[0], item[1].display_name, item[1].id))

        recommendations = [
            RepairerRecommendation(
                repairer_id=repairer.id,
                repairer_name=repairer.display_name,
                rank=rank,
                score=score,
                reasoning=_reasoning(repairer, sla, device_category),
                key_advantages=key_advantages(repairer, sla, coverage_area),
            )
            for rank, (score, repairer, sla) in enumerate(scored[: self.limit], start=1)
        ]

        top = recommendations[0]
        analysis = (
            f"{len(eligible)} eligible repairer(s) for "
            f"{device_category or 'this claim'}. {top.repairer_name} is the best "
            f"match with a score of {top.score:.0f}/100."
        )
        return RecommendationResult(
            recommendations=recommendations,
            overall_analysis=analysis,
            eligible_repairers=eligible_out,
        )
