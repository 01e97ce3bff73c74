"""Brand-creator matching engine and orchestrator.

This module scores (creator, brand) pairs on four dimensions, derives
insights, a financial estimate and an outreach strategy for each pair, and
ranks and persists the best matches for a creator.

Public API:
    - calculate_match / MatchScoringEngine: Score a single pair
    - MatchOrchestrator: Find and persist matches for a creator
    - normalize_brand: Convert raw brand records to EnhancedBrand
    - CreatorProfile / EnhancedBrand: Input models
    - BrandMatch: Output model
    - MatchingConfig: Configuration settings
"""

from brand_match.matching.config import (
    MatchingConfig,
    MatchThresholds,
    ScoringBonuses,
    ScoringWeights,
    get_matching_config,
    reset_matching_config,
)
from brand_match.matching.engine import (
    MatchScoringEngine,
    calculate_match,
    categorize,
    composite_score,
)
from brand_match.matching.models import (
    AudienceResonance,
    BrandMatch,
    ContentStyleMatch,
    CreatorProfile,
    CreatorSize,
    EnhancedBrand,
    MatchCategory,
    MatchFinancials,
    MatchInsights,
    MatchScores,
    MatchStatus,
    OutreachStrategy,
    SuccessProbability,
    ValuesAlignment,
)
from brand_match.matching.normalization import BrandNormalizer, normalize_brand
from brand_match.matching.orchestrator import (
    AudienceFilter,
    BrandRepository,
    MatchOptions,
    MatchOrchestrator,
    MatchResults,
    MatchStats,
    MatchStore,
    ProfileRepository,
    is_brand_eligible,
)

__all__ = [
    "MatchScoringEngine",
    "calculate_match",
    "categorize",
    "composite_score",
    "MatchOrchestrator",
    "MatchOptions",
    "MatchResults",
    "MatchStats",
    "AudienceFilter",
    "is_brand_eligible",
    "ProfileRepository",
    "BrandRepository",
    "MatchStore",
    "BrandNormalizer",
    "normalize_brand",
    "CreatorProfile",
    "EnhancedBrand",
    "BrandMatch",
    "MatchScores",
    "ValuesAlignment",
    "AudienceResonance",
    "ContentStyleMatch",
    "SuccessProbability",
    "MatchInsights",
    "MatchFinancials",
    "OutreachStrategy",
    "MatchCategory",
    "MatchStatus",
    "CreatorSize",
    "MatchingConfig",
    "ScoringWeights",
    "MatchThresholds",
    "ScoringBonuses",
    "get_matching_config",
    "reset_matching_config",
]
