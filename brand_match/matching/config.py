"""Configuration settings for the matching engine.

Every coefficient the scorers use lives here so that tuning never touches
algorithm code. Defaults reproduce the production scoring rules.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Points = Annotated[float, Field(ge=0.0, le=100.0)]
Weight = Annotated[float, Field(ge=0.0, le=1.0)]


class ScoringWeights(BaseModel):
    """Sub-score weights of the composite score (must sum to 1.0)."""

    model_config = ConfigDict(frozen=True)

    values_alignment: Weight = 0.20
    audience_resonance: Weight = 0.50
    content_style: Weight = 0.20
    success_probability: Weight = 0.10

    @model_validator(mode="after")
    def validate_weights_sum_to_one(self) -> ScoringWeights:
        """Ensure scoring weights sum to 1.0 (within tolerance)."""
        weight_sum = (
            self.values_alignment
            + self.audience_resonance
            + self.content_style
            + self.success_probability
        )
        if abs(weight_sum - 1.0) > 1e-6:
            raise ValueError(
                "Scoring weights must sum to 1.0. "
                f"Got {weight_sum:.6f} "
                f"(values_alignment={self.values_alignment}, "
                f"audience_resonance={self.audience_resonance}, "
                f"content_style={self.content_style}, "
                f"success_probability={self.success_probability})."
            )
        return self


class MatchThresholds(BaseModel):
    """Inclusive lower bounds of each match category."""

    model_config = ConfigDict(frozen=True)

    excellent: Points = 85
    good: Points = 70
    fair: Points = 50

    @model_validator(mode="after")
    def validate_descending(self) -> MatchThresholds:
        if not (self.excellent > self.good > self.fair):
            raise ValueError(
                "Match thresholds must be strictly descending "
                f"(excellent={self.excellent}, good={self.good}, fair={self.fair})."
            )
        return self


class ValuesBonuses(BaseModel):
    """Points used by the values-alignment scorer."""

    model_config = ConfigDict(frozen=True)

    shared_values_weight: Weight = 0.4
    esg_threshold: Points = 70
    esg_bonus: Points = 20
    controversy_penalty: Points = 20
    dream_brand_bonus: Points = 20
    similar_segment_bonus: Points = 15
    repeat_collaboration_bonus: Points = 10
    certified_supply_chain_bonus: Points = 10


class AudienceBonuses(BaseModel):
    """Points used by the audience-resonance scorer."""

    model_config = ConfigDict(frozen=True)

    age_overlap_points: Points = 30
    city_match_bonus_ratio: Weight = 0.5
    # (overlap strictly greater than, points), checked in order
    location_tiers: tuple[tuple[float, float], ...] = (
        (80.0, 25.0),
        (60.0, 20.0),
        (40.0, 15.0),
        (20.0, 10.0),
        (0.0, 5.0),
    )
    income_match_points: Points = 15
    interest_overlap_points: Points = 25
    gender_alignment_points: Points = 10


class StyleBonuses(BaseModel):
    """Points used by the content-style scorer."""

    model_config = ConfigDict(frozen=True)

    format_match_points: Points = 30
    aesthetic_overlap_points: Points = 40
    production_match_points: Points = 20
    storytelling_points: Points = 10
    # "professional" creators fit brands with more approval rounds than this
    professional_approval_rounds: Annotated[int, Field(ge=0)] = 2


class SuccessBonuses(BaseModel):
    """Points used by the success-probability scorer."""

    model_config = ConfigDict(frozen=True)

    base_score: Points = 0
    size_match_points: Points = 30
    min_engagement_points: Points = 25
    preferred_engagement_points: Points = 15
    historical_engagement_points: Points = 20
    historical_engagement_tolerance: Annotated[float, Field(ge=0.0)] = 2.0
    timing_points: Points = 10
    dormancy_days: Annotated[int, Field(ge=0)] = 90
    # days assumed since the last campaign when none is on record
    no_campaign_days: Annotated[int, Field(ge=0)] = 365


class InsightBonuses(BaseModel):
    """Cut points used by the insight generator and financial estimator."""

    model_config = ConfigDict(frozen=True)

    strong_values_score: Points = 80
    strong_audience_score: Points = 85
    lead_values_score: Points = 90
    lead_audience_score: Points = 85
    limited_location_overlap: Points = 20
    exclusivity_min_hours: Annotated[float, Field(ge=0.0)] = 20
    base_response_rate: Points = 15
    max_response_rate: Points = 75
    # (overall strictly greater than, response-rate points), checked in order
    response_tiers: tuple[tuple[float, float], ...] = (
        (85.0, 25.0),
        (70.0, 15.0),
        (50.0, 5.0),
    )
    dream_brand_response_points: Points = 20
    decision_maker_response_points: Points = 10


class FinancialBonuses(BaseModel):
    """Rate-card coefficients used by the financial estimator."""

    model_config = ConfigDict(frozen=True)

    rate_per_thousand_followers: Annotated[float, Field(ge=0.0)] = 10.0
    high_engagement_rate: Annotated[float, Field(ge=0.0)] = 5.0
    high_engagement_multiplier: Annotated[float, Field(ge=0.0)] = 1.5
    medium_engagement_rate: Annotated[float, Field(ge=0.0)] = 3.0
    medium_engagement_multiplier: Annotated[float, Field(ge=0.0)] = 1.2
    dream_brand_discount: Weight = 0.8
    below_market_ratio: Weight = 0.8
    strong_roi: Annotated[float, Field(ge=0.0)] = 3.0


class OutreachBonuses(BaseModel):
    """Settings used by the outreach strategy builder."""

    model_config = ConfigDict(frozen=True)

    instagram_max_followers: Annotated[int, Field(ge=0)] = 50_000
    default_best_timing: str = "Tuesday 10AM"
    max_content_ideas: Annotated[int, Field(ge=0)] = 3
    fallback_content_pillar: str = "lifestyle"


class ScoringBonuses(BaseModel):
    """All literal bonuses, penalties and cut points, grouped per component."""

    model_config = ConfigDict(frozen=True)

    values: ValuesBonuses = Field(default_factory=ValuesBonuses)
    audience: AudienceBonuses = Field(default_factory=AudienceBonuses)
    style: StyleBonuses = Field(default_factory=StyleBonuses)
    success: SuccessBonuses = Field(default_factory=SuccessBonuses)
    insights: InsightBonuses = Field(default_factory=InsightBonuses)
    financials: FinancialBonuses = Field(default_factory=FinancialBonuses)
    outreach: OutreachBonuses = Field(default_factory=OutreachBonuses)


class MatchingConfig(BaseSettings):
    """Matching engine configuration settings.

    All settings have sensible defaults and can be overridden via
    environment variables with `MATCHING_` prefix or a .env file. Nested
    values use a double underscore, e.g. `MATCHING_WEIGHTS__AUDIENCE_RESONANCE`.
    """

    model_config = SettingsConfigDict(
        env_prefix="MATCHING_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: MatchThresholds = Field(default_factory=MatchThresholds)
    bonuses: ScoringBonuses = Field(default_factory=ScoringBonuses)

    # Orchestrator defaults
    default_limit: Annotated[int, Field(gt=0)] = Field(
        default=100,
        description="Maximum number of matches returned per creator",
    )
    default_min_score: Points = Field(
        default=50,
        description="Minimum overall score for a match to be kept",
    )
    exclude_matched: bool = Field(
        default=True,
        description="Skip brands already present in the creator's match set",
    )


# Singleton instance for easy import
_matching_config: MatchingConfig | None = None


def get_matching_config() -> MatchingConfig:
    """Get the matching configuration singleton."""
    global _matching_config
    if _matching_config is None:
        _matching_config = MatchingConfig()
    return _matching_config


def reset_matching_config() -> None:
    """Reset the matching configuration singleton (useful for testing)."""
    global _matching_config
    _matching_config = None
