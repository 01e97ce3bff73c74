"""Match orchestration for a single creator.

The orchestrator fetches the creator profile and the candidate brand set,
normalizes and filters the candidates, scores each one with the
`MatchScoringEngine`, ranks the results and persists the top matches.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from brand_match.errors import CreatorNotFoundError, MalformedBrandError
from brand_match.matching.config import MatchingConfig, get_matching_config
from brand_match.matching.engine import MatchScoringEngine
from brand_match.matching.matchers import contains_term, country_matches
from brand_match.matching.models import (
    BrandMatch,
    CreatorProfile,
    EnhancedBrand,
    MatchCategory,
)
from brand_match.matching.normalization import BrandNormalizer
from brand_match.utils.logging import get_logger

logger = get_logger("matching.orchestrator")


@dataclass(frozen=True)
class AudienceFilter:
    """Where a creator's audience lives; used to pre-select brands."""

    creator_id: str
    countries: tuple[str, ...] = ()
    cities: tuple[str, ...] = ()

    @classmethod
    def from_profile(cls, creator: CreatorProfile) -> AudienceFilter:
        return cls(
            creator_id=creator.id,
            countries=tuple(creator.audience_countries),
            cities=tuple(creator.audience_cities),
        )


class ProfileRepository(Protocol):
    async def get_creator_profile(self, creator_id: str) -> CreatorProfile | None: ...


class BrandRepository(Protocol):
    async def list_eligible_brands(
        self, audience_filter: AudienceFilter
    ) -> Sequence[Mapping[str, Any] | EnhancedBrand]: ...


class MatchStore(Protocol):
    async def list_matched_brand_ids(self, creator_id: str) -> Sequence[str]: ...

    async def upsert_matches(self, matches: Sequence[BrandMatch]) -> None: ...


def is_brand_eligible(brand: EnhancedBrand, audience_filter: AudienceFilter) -> bool:
    """Return True if the brand can serve the creator's audience.

    Local-only brands need their headquarters city among the audience
    cities; every other brand needs to ship to an audience country.
    """
    if brand.is_local_only:
        return bool(brand.headquarters_city) and contains_term(
            audience_filter.cities, brand.headquarters_city
        )
    return any(
        country_matches(country, brand.ships_to_countries)
        for country in audience_filter.countries
    )


@dataclass(frozen=True)
class MatchOptions:
    """Options for one `get_matches_for_creator` run."""

    limit: int = 100
    min_score: float = 50
    exclude_matched: bool = True

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise ValueError(f"limit must be positive (got {self.limit})")
        if not (0 <= self.min_score <= 100):
            raise ValueError(
                f"min_score must be between 0 and 100 (got {self.min_score})"
            )

    @classmethod
    def from_config(cls, config: MatchingConfig) -> MatchOptions:
        return cls(
            limit=config.default_limit,
            min_score=config.default_min_score,
            exclude_matched=config.exclude_matched,
        )


@dataclass
class MatchStats:
    """Number of returned matches per category.

    `poor` is only non-zero when `min_score` is lowered below the fair
    threshold. It is serialized with the other categories so the counts add
    up to the number of returned matches.
    """

    excellent: int = 0
    good: int = 0
    fair: int = 0
    poor: int = 0

    @classmethod
    def from_matches(cls, matches: Sequence[BrandMatch]) -> MatchStats:
        stats = cls()
        for match in matches:
            name = match.match_category.value
            setattr(stats, name, getattr(stats, name) + 1)
        return stats

    def to_dict(self) -> dict[str, int]:
        return {
            category.value: getattr(self, category.value) for category in MatchCategory
        }


@dataclass
class MatchResults:
    """Outcome of `get_matches_for_creator`.

    Attributes:
        matches: Ranked matches, best first.
        total_brands_analyzed: Eligible brands before the exclusion set and
            the minimum-score filter were applied.
        match_stats: Counts per category over `matches`.
    """

    matches: list[BrandMatch] = field(default_factory=list)
    total_brands_analyzed: int = 0
    match_stats: MatchStats = field(default_factory=MatchStats)

    def to_dict(self) -> dict:
        return {
            "matches": [match.to_dict() for match in self.matches],
            "total_brands_analyzed": self.total_brands_analyzed,
            "match_stats": self.match_stats.to_dict(),
        }


def rank_matches(matches: Sequence[BrandMatch]) -> list[BrandMatch]:
    """Sort by overall score descending, then brand id ascending."""
    return sorted(matches, key=lambda match: (-match.overall_score, match.brand_id))


class MatchOrchestrator:
    """Find, score, rank and persist brand matches for a creator."""

    def __init__(
        self,
        profiles: ProfileRepository,
        brands: BrandRepository,
        store: MatchStore,
        engine: MatchScoringEngine | None = None,
        normalizer: BrandNormalizer | None = None,
        config: MatchingConfig | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            profiles: Source of creator profiles.
            brands: Source of raw candidate brand records.
            store: Persistent match set of each creator.
            engine: Scoring engine; built from `config` when omitted.
            normalizer: Converts raw brand records to `EnhancedBrand`.
            config: Matching configuration; defaults to the global one.
        """
        self.config = config or get_matching_config()
        self.profiles = profiles
        self.brands = brands
        self.store = store
        self.engine = engine or MatchScoringEngine(config=self.config)
        self.normalizer = normalizer or BrandNormalizer()

    async def get_matches_for_creator(
        self,
        creator_id: str,
        options: MatchOptions | None = None,
        *,
        limit: int | None = None,
        min_score: float | None = None,
        exclude_matched: bool | None = None,
    ) -> MatchResults:
        """Score every eligible brand for a creator and persist the best.

        Keyword arguments override the matching fields of `options`, which
        itself defaults to the configured orchestrator defaults.

        Raises:
            ValueError: If the options are invalid.
            CreatorNotFoundError: If the creator profile does not exist.
        """
        options = self._resolve_options(options, limit, min_score, exclude_matched)

        creator = await self.profiles.get_creator_profile(creator_id)
        if creator is None:
            raise CreatorNotFoundError(creator_id)

        audience_filter = AudienceFilter.from_profile(creator)
        raw_brands = await self.brands.list_eligible_brands(audience_filter)

        eligible = [
            brand
            for brand in self._normalize_all(raw_brands)
            if is_brand_eligible(brand, audience_filter)
        ]
        total_brands_analyzed = len(eligible)

        excluded: set[str] = set()
        if options.exclude_matched:
            excluded = set(await self.store.list_matched_brand_ids(creator_id))

        scored: list[BrandMatch] = []
        for brand in eligible:
            if brand.id in excluded:
                continue
            match = self.engine.calculate_match(creator, brand)
            logger.debug(
                "Scored %s for creator %s: %d (%s)",
                brand.id,
                creator_id,
                match.overall_score,
                match.match_category.value,
            )
            if match.overall_score >= options.min_score:
                scored.append(match)

        matches = rank_matches(scored)[: options.limit]
        if matches:
            await self.store.upsert_matches(matches)

        logger.info(
            "Creator %s: %d eligible brands, %d excluded, %d scored above %g, "
            "%d persisted",
            creator_id,
            total_brands_analyzed,
            len(excluded),
            len(scored),
            options.min_score,
            len(matches),
        )

        return MatchResults(
            matches=matches,
            total_brands_analyzed=total_brands_analyzed,
            match_stats=MatchStats.from_matches(matches),
        )

    def _resolve_options(
        self,
        options: MatchOptions | None,
        limit: int | None,
        min_score: float | None,
        exclude_matched: bool | None,
    ) -> MatchOptions:
        base = options or MatchOptions.from_config(self.config)
        return MatchOptions(
            limit=base.limit if limit is None else limit,
            min_score=base.min_score if min_score is None else min_score,
            exclude_matched=(
                base.exclude_matched if exclude_matched is None else exclude_matched
            ),
        )

    def _normalize_all(
        self, raw_brands: Sequence[Mapping[str, Any] | EnhancedBrand]
    ) -> list[EnhancedBrand]:
        """Normalize raw records, skipping unusable ones and duplicate ids."""
        brands: list[EnhancedBrand] = []
        seen: set[str] = set()
        for raw in raw_brands:
            if isinstance(raw, EnhancedBrand):
                brand = raw
            else:
                try:
                    brand = self.normalizer.normalize(raw)
                except MalformedBrandError as e:
                    logger.warning("Skipping brand record: %s", e)
                    continue
            if brand.id in seen:
                continue
            seen.add(brand.id)
            brands.append(brand)
        return brands
