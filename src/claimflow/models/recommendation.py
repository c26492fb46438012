"""
ClaimFlow Repairer Recommendations

The output shape of the repairer recommendation service: a ranked list of
candidate repairers with scores and reasoning, the overall analysis, and the
repairers that were eligible for ranking.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .collaborators import RepairerSLA


RANK_LABELS = {
    1: "Best Match",
    2: "Strong Alternative",
    3: "Good Option",
}


@dataclass
class RepairerRecommendation:
    """One ranked repairer candidate."""
    repairer_id: str
    repairer_name: str
    rank: int
    score: float  # 0-100
    reasoning: str
    key_advantages: list[str] = field(default_factory=list)

    def rank_label(self) -> str:
        return RANK_LABELS.get(self.rank, f"Rank {self.rank}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "repairer_id": self.repairer_id,
            "repairer_name": self.repairer_name,
            "rank": self.rank,
            "score": self.score,
            "reasoning": self.reasoning,
            "key_advantages": list(self.key_advantages),
        }


@dataclass
class EligibleRepairer:
    """A repairer that passed the eligibility filter."""
    id: str
    name: str
    connectivity_type: str
    slas: list[RepairerSLA] = field(default_factory=list)

    def next_appointment_hint(self) -> str:
        """Rough availability derived from the first SLA's response time."""
        if not self.slas:
            return "Contact for availability"
        response_hours = self.slas[0].response_time_hours or 24
        days = -(-response_hours // 24)
        if days == 0:
            return "Available today"
        if days == 1:
            return "Available tomorrow"
        return f"Available in {days} days"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "connectivity_type": self.connectivity_type,
            "slas": [s.to_dict() for s in self.slas],
        }


@dataclass
class RecommendationResult:
    """Full response of the recommendation service."""
    recommendations: list[RepairerRecommendation] = field(default_factory=list)
    overall_analysis: str = ""
    eligible_repairers: list[EligibleRepairer] = field(default_factory=list)

    @property
    def has_results(self) -> bool:
        return bool(self.recommendations)

    def get_eligible(self, repairer_id: str) -> Optional[EligibleRepairer]:
        for repairer in self.eligible_repairers:
            if repairer.id == repairer_id:
                return repairer
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "overall_analysis": self.overall_analysis,
            "eligible_repairers": [r.to_dict() for r in self.eligible_repairers],
        }
