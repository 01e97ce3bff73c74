"""Rate-card estimate for a creator-brand pair."""

from __future__ import annotations

import math

from brand_match.matching.config import FinancialBonuses
from brand_match.matching.matchers import round_half_up
from brand_match.matching.models import CreatorProfile, EnhancedBrand, MatchFinancials

NEGOTIATION_LIMITED = "Limited room - already below market"
NEGOTIATION_STRONG_ROI = "Strong ROI history - push for 20-30% above initial offer"
NEGOTIATION_STANDARD = "Standard 10-20% negotiation expected"


class FinancialEstimator:
    """Estimate market and suggested rates for a sponsored post."""

    def __init__(self, bonuses: FinancialBonuses | None = None) -> None:
        self.bonuses = bonuses or FinancialBonuses()

    def engagement_multiplier(self, engagement_rate: float) -> float:
        bonuses = self.bonuses
        if engagement_rate > bonuses.high_engagement_rate:
            return bonuses.high_engagement_multiplier
        if engagement_rate > bonuses.medium_engagement_rate:
            return bonuses.medium_engagement_multiplier
        return 1.0

    def market_rate(self, creator: CreatorProfile) -> int:
        """Rate implied by audience size and engagement alone."""
        analytics = creator.analytics
        base_rate = (
            math.floor(analytics.follower_count / 1000)
            * self.bonuses.rate_per_thousand_followers
        )
        return round_half_up(
            base_rate * self.engagement_multiplier(analytics.engagement_rate)
        )

    def estimate(
        self, creator: CreatorProfile, brand: EnhancedBrand, *, dream_brand: bool
    ) -> MatchFinancials:
        bonuses = self.bonuses
        budget = brand.campaigns.budget_range
        market_rate = self.market_rate(creator)

        suggested: float = market_rate
        if suggested > budget.max:
            suggested = budget.max
        if suggested < budget.min:
            suggested = budget.min

        # Creators accept less for access to a dream brand
        if dream_brand:
            suggested = suggested * bonuses.dream_brand_discount
        suggested_rate = round_half_up(suggested)

        avg_roi = brand.history.success_metrics.avg_roi
        if suggested_rate < market_rate * bonuses.below_market_ratio:
            negotiation_room = NEGOTIATION_LIMITED
        elif avg_roi is not None and avg_roi > bonuses.strong_roi:
            negotiation_room = NEGOTIATION_STRONG_ROI
        else:
            negotiation_room = NEGOTIATION_STANDARD

        return MatchFinancials(
            suggested_rate=suggested_rate,
            market_rate=market_rate,
            negotiation_room=negotiation_room,
            currency=budget.currency,
        )
