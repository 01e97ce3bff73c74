"""Brand match scoring engine implementation."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from brand_match.matching.config import (
    MatchingConfig,
    MatchThresholds,
    ScoringWeights,
    get_matching_config,
)
from brand_match.matching.financials import FinancialEstimator
from brand_match.matching.insights import InsightGenerator
from brand_match.matching.matchers import round_half_up
from brand_match.matching.models import (
    BrandMatch,
    CreatorProfile,
    EnhancedBrand,
    MatchCategory,
    MatchScores,
    MatchStatus,
)
from brand_match.matching.outreach import OutreachStrategyBuilder
from brand_match.matching.scorers import (
    AudienceResonanceScorer,
    ContentStyleScorer,
    SuccessProbabilityScorer,
    ValuesAlignmentScorer,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def composite_score(scores: MatchScores, weights: ScoringWeights) -> int:
    """Weighted sum of the four sub-scores, rounded half up."""
    total = (
        scores.values_alignment.score * weights.values_alignment
        + scores.audience_resonance.score * weights.audience_resonance
        + scores.content_style_match.score * weights.content_style
        + scores.success_probability.score * weights.success_probability
    )
    return round_half_up(total)


def categorize(overall_score: float, thresholds: MatchThresholds) -> MatchCategory:
    """Bucket an overall score; each floor is inclusive."""
    if overall_score >= thresholds.excellent:
        return MatchCategory.EXCELLENT
    if overall_score >= thresholds.good:
        return MatchCategory.GOOD
    if overall_score >= thresholds.fair:
        return MatchCategory.FAIR
    return MatchCategory.POOR


class MatchScoringEngine:
    """Score a (creator, brand) pair into a `BrandMatch`.

    The engine is stateless: scoring the same inputs at the same clock
    reading always yields an equal `BrandMatch`. The clock is only read for
    the brand's campaign recency and the month used in content ideas.
    """

    def __init__(
        self,
        config: MatchingConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or get_matching_config()
        self.clock = clock or _utc_now

        bonuses = self.config.bonuses
        self.values_scorer = ValuesAlignmentScorer(bonuses.values)
        self.audience_scorer = AudienceResonanceScorer(bonuses.audience)
        self.style_scorer = ContentStyleScorer(bonuses.style)
        self.success_scorer = SuccessProbabilityScorer(bonuses.success)
        self.insight_generator = InsightGenerator(bonuses.insights)
        self.financial_estimator = FinancialEstimator(bonuses.financials)
        self.outreach_builder = OutreachStrategyBuilder(bonuses.outreach)

    def score_pair(
        self,
        creator: CreatorProfile,
        brand: EnhancedBrand,
        now: datetime | None = None,
    ) -> MatchScores:
        """Run the four scorers."""
        return MatchScores(
            values_alignment=self.values_scorer.score(creator, brand),
            audience_resonance=self.audience_scorer.score(creator, brand),
            content_style_match=self.style_scorer.score(creator, brand),
            success_probability=self.success_scorer.score(
                creator, brand, now=now or self.clock()
            ),
        )

    def calculate_match(
        self, creator: CreatorProfile, brand: EnhancedBrand
    ) -> BrandMatch:
        """Calculate the full match record for a creator and a brand."""
        now = self.clock()
        scores = self.score_pair(creator, brand, now=now)

        overall_score = composite_score(scores, self.config.weights)
        match_category = categorize(overall_score, self.config.thresholds)

        insights = self.insight_generator.generate(
            creator, brand, scores, overall_score
        )
        financials = self.financial_estimator.estimate(
            creator, brand, dream_brand=scores.values_alignment.dream_brand
        )
        outreach_strategy = self.outreach_builder.build(creator, brand, scores, now)

        return BrandMatch(
            id=f"{creator.id}-{brand.id}",
            creator_id=creator.id,
            brand_id=brand.id,
            brand_name=brand.name,
            overall_score=overall_score,
            match_category=match_category,
            scores=scores,
            insights=insights,
            financials=financials,
            outreach_strategy=outreach_strategy,
            status=MatchStatus.DISCOVERED,
            created_at=now,
            updated_at=now,
            last_status_update=now,
        )


def calculate_match(
    creator: CreatorProfile,
    brand: EnhancedBrand,
    config: MatchingConfig | None = None,
) -> BrandMatch:
    """Score a single pair with a default engine."""
    return MatchScoringEngine(config=config).calculate_match(creator, brand)
