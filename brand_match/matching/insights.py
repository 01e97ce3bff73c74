"""Actionable insights derived from the four sub-scores."""

from __future__ import annotations

from brand_match.matching.config import InsightBonuses
from brand_match.matching.models import (
    CreatorProfile,
    EnhancedBrand,
    MatchInsights,
    MatchScores,
)
from brand_match.matching.scorers import location_overlap

NO_GEOGRAPHIC_OVERLAP_CONCERN = (
    "No geographic overlap - brand may not ship to your audience locations"
)
LIMITED_GEOGRAPHIC_OVERLAP_CONCERN = (
    "Limited geographic overlap - only small portion of audience can purchase"
)
EXCLUSIVITY_CONCERN = (
    "Brand requires exclusivity which may conflict with creator availability"
)

APPROACH_LEAD_WITH_ALIGNMENT = "Lead with strong value and audience alignment"
APPROACH_DREAM_BRAND = "Leverage dream brand status with specific creative ideas"
APPROACH_REFERENCE_OPPORTUNITY = "Reference upcoming campaign opportunity"
APPROACH_STANDARD = "Standard outreach with personalization"


class InsightGenerator:
    """Turn sub-scores into strengths, opportunities, concerns and an approach."""

    def __init__(self, bonuses: InsightBonuses | None = None) -> None:
        self.bonuses = bonuses or InsightBonuses()

    def generate(
        self,
        creator: CreatorProfile,
        brand: EnhancedBrand,
        scores: MatchScores,
        overall_score: float,
    ) -> MatchInsights:
        bonuses = self.bonuses
        values = scores.values_alignment
        audience = scores.audience_resonance
        dream_brand = values.dream_brand

        strengths: list[str] = []
        if values.score >= bonuses.strong_values_score:
            strengths.append(
                "Exceptional values alignment creates authentic partnership potential"
            )
        if audience.score >= bonuses.strong_audience_score:
            strengths.append(
                "High audience overlap suggests strong conversion potential"
            )
        if dream_brand:
            strengths.append("Creator's enthusiasm for brand will show in content")

        opportunities: list[str] = []
        upcoming = brand.intelligence.upcoming_campaigns
        if upcoming:
            opportunities.append(
                f"Upcoming campaign: {upcoming[0].theme or 'New launch'}"
            )
        if scores.success_probability.likely_open_to_partnerships:
            opportunities.append("Timing is ideal - brand hasn't partnered recently")

        concerns = self._concerns(creator, brand, scores)

        if (
            values.score > bonuses.lead_values_score
            and audience.score > bonuses.lead_audience_score
        ):
            suggested_approach = APPROACH_LEAD_WITH_ALIGNMENT
        elif dream_brand:
            suggested_approach = APPROACH_DREAM_BRAND
        elif opportunities:
            suggested_approach = APPROACH_REFERENCE_OPPORTUNITY
        else:
            suggested_approach = APPROACH_STANDARD

        return MatchInsights(
            strengths=strengths,
            opportunities=opportunities,
            concerns=concerns,
            suggested_approach=suggested_approach,
            estimated_response_rate=self.estimate_response_rate(
                overall_score,
                dream_brand=dream_brand,
                decision_maker_active=brand.automation.decision_maker_active,
            ),
        )

    def estimate_response_rate(
        self,
        overall_score: float,
        *,
        dream_brand: bool,
        decision_maker_active: bool,
    ) -> float:
        """Estimate the outreach response rate in percent."""
        bonuses = self.bonuses
        modifier = 0.0
        for floor, points in bonuses.response_tiers:
            if overall_score > floor:
                modifier += points
                break
        if dream_brand:
            modifier += bonuses.dream_brand_response_points
        if decision_maker_active:
            modifier += bonuses.decision_maker_response_points
        return min(bonuses.max_response_rate, bonuses.base_response_rate + modifier)

    def _concerns(
        self, creator: CreatorProfile, brand: EnhancedBrand, scores: MatchScores
    ) -> list[str]:
        concerns = list(scores.content_style_match.concerns)

        hours = creator.professional.availability.hours_per_week
        if (
            brand.campaigns.exclusivity_required
            and hours is not None
            and hours < self.bonuses.exclusivity_min_hours
        ):
            concerns.append(EXCLUSIVITY_CONCERN)

        # Raw country overlap, independent of the clamped audience sub-score
        overlap = location_overlap(creator, brand)
        if overlap == 0:
            concerns.append(NO_GEOGRAPHIC_OVERLAP_CONCERN)
        elif overlap < self.bonuses.limited_location_overlap:
            concerns.append(LIMITED_GEOGRAPHIC_OVERLAP_CONCERN)

        return concerns
