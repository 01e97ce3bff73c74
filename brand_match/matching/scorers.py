"""Sub-score calculators for brand-creator matching.

Each scorer is a pure function of (creator, brand): no I/O, no shared state,
and no exceptions for well-formed models. Only the success-probability
scorer reads the clock, and it accepts `now` so callers can pin it.
"""

from __future__ import annotations

from datetime import UTC, datetime

from brand_match.matching.config import (
    AudienceBonuses,
    StyleBonuses,
    SuccessBonuses,
    ValuesBonuses,
)
from brand_match.matching.matchers import (
    clamp_score,
    contains_term,
    country_matches,
    creator_size,
    find_matching_interests,
    market_segment_for_name,
    matches_blacklist,
    round_half_up,
    shared_terms,
)
from brand_match.matching.models import (
    AudienceResonance,
    ContentStyleMatch,
    CreatorProfile,
    EnhancedBrand,
    SuccessProbability,
    ValuesAlignment,
)

BLACKLIST_DETAIL = "Brand is on creator's blacklist"
OPEN_TO_PARTNERSHIPS_FACTOR = "Brand likely ready for new partnerships"
FORMAT_MISMATCH_CONCERN = "Primary content format doesn't match brand preference"
PRODUCTION_MISMATCH_CONCERN = "Production style may not match brand expectations"


def is_dream_brand(creator: CreatorProfile, brand: EnhancedBrand) -> bool:
    """Return True if the creator pre-declared enthusiasm for this brand."""
    return contains_term(creator.identity.dream_brands, brand.name)


def location_overlap(creator: CreatorProfile, brand: EnhancedBrand) -> float:
    """Percent of the creator's audience living in a brand target country.

    Unlike the audience sub-score this ignores the city bonus.
    """
    countries = brand.targeting.audience_demographics.locations.countries
    total = 0.0
    for location in creator.analytics.audience_demographics.top_locations:
        if country_matches(location.country, countries):
            total += location.percentage
    return total


def _format_number(value: float) -> str:
    return f"{value:g}"


class ValuesAlignmentScorer:
    """Compare brand values, ethics and history against creator identity."""

    def __init__(self, bonuses: ValuesBonuses | None = None) -> None:
        self.bonuses = bonuses or ValuesBonuses()

    def score(self, creator: CreatorProfile, brand: EnhancedBrand) -> ValuesAlignment:
        bonuses = self.bonuses
        identity = creator.identity
        details: list[str] = []
        score = 0.0

        shared = shared_terms(identity.brand_values, brand.values.core_values)
        if identity.brand_values:
            share = len(shared) / len(identity.brand_values)
            score += share * 100 * bonuses.shared_values_weight
        if shared:
            details.append(f"Shared values: {', '.join(shared)}")

        dream_brand = is_dream_brand(creator, brand)

        # The blacklist zeroes only this sub-score
        if matches_blacklist(identity.blacklist_brands, brand.name, brand.industry):
            details.append(BLACKLIST_DETAIL)
            return ValuesAlignment(
                score=0.0,
                details=details,
                shared_values=shared,
                blacklisted=True,
                dream_brand=dream_brand,
            )

        esg_rating = brand.values.esg_rating
        if esg_rating is not None and esg_rating > bonuses.esg_threshold:
            score += bonuses.esg_bonus
            details.append(f"Strong ESG rating: {_format_number(esg_rating)}/100")

        if brand.values.controversy_history.has_controversies:
            score -= bonuses.controversy_penalty
            details.append("Recent controversy may conflict with creator values")

        if dream_brand:
            score += bonuses.dream_brand_bonus
            details.append("This is one of creator's dream brands!")

        if identity.past_brands:
            segment = brand.positioning.market_segment
            if segment and any(
                market_segment_for_name(past) == segment
                for past in identity.past_brands
            ):
                score += bonuses.similar_segment_bonus
                details.append("Similar to brands creator has successfully worked with")

            if contains_term(identity.past_brands, brand.name):
                score += bonuses.repeat_collaboration_bonus
                details.append("Previous successful collaboration with this brand")

        if brand.values.supply_chain_ethics == "certified" and contains_term(
            identity.brand_values, "sustainability"
        ):
            score += bonuses.certified_supply_chain_bonus
            details.append("Certified ethical supply chain aligns with creator values")

        return ValuesAlignment(
            score=clamp_score(score),
            details=details,
            shared_values=shared,
            dream_brand=dream_brand,
        )


class AudienceResonanceScorer:
    """Compare demographic and geographic audience overlap."""

    def __init__(self, bonuses: AudienceBonuses | None = None) -> None:
        self.bonuses = bonuses or AudienceBonuses()

    def location_score(self, overlap: float) -> float:
        """Map a raw location overlap percentage to its discrete score."""
        for floor, points in self.bonuses.location_tiers:
            if overlap > floor:
                return points
        return 0.0

    def score(
        self, creator: CreatorProfile, brand: EnhancedBrand
    ) -> AudienceResonance:
        bonuses = self.bonuses
        audience = creator.analytics.audience_demographics
        target = brand.targeting.audience_demographics
        score = 0.0

        creator_ranges = [share.range for share in audience.age_ranges]
        age_overlap = shared_terms(creator_ranges, target.age_ranges)
        if target.age_ranges:
            age_share = len(age_overlap) / len(target.age_ranges)
            score += age_share * bonuses.age_overlap_points

        overlap, location_details = self._location_overlap(creator, brand)
        location_score = self.location_score(overlap)
        score += location_score
        if location_score:
            location_details.insert(
                0, f"Location match: {round_half_up(overlap)}% audience overlap"
            )

        income_level = creator.identity.audience_psychographics.income_level
        if contains_term(target.income_level, income_level):
            score += bonuses.income_match_points

        shared_interests, _ = find_matching_interests(
            audience.interests, brand.targeting.niches
        )
        if brand.targeting.niches:
            score += (
                len(shared_interests)
                / len(brand.targeting.niches)
                * bonuses.interest_overlap_points
            )

        preference = target.gender_preference
        if preference in (None, "all") or preference == audience.gender_split.dominant:
            score += bonuses.gender_alignment_points

        return AudienceResonance(
            score=clamp_score(score),
            shared_interests=shared_interests,
            location_overlap=overlap,
            location_score=location_score,
            location_details=location_details,
            age_overlap=age_overlap,
        )

    def _location_overlap(
        self, creator: CreatorProfile, brand: EnhancedBrand
    ) -> tuple[float, list[str]]:
        locations = brand.targeting.audience_demographics.locations
        total = 0.0
        details: list[str] = []

        for location in creator.analytics.audience_demographics.top_locations:
            if not country_matches(location.country, locations.countries):
                continue
            total += location.percentage
            pct = _format_number(location.percentage)
            if location.city and contains_term(locations.cities, location.city):
                total += location.percentage * self.bonuses.city_match_bonus_ratio
                details.append(
                    f"{location.city}, {location.country} ({pct}% exact match)"
                )
            elif location.city:
                details.append(
                    f"{location.country} ({pct}% country match, {location.city})"
                )
            else:
                details.append(f"{location.country} ({pct}% country match)")

        return total, details


class ContentStyleScorer:
    """Compare format, aesthetic and production compatibility."""

    def __init__(self, bonuses: StyleBonuses | None = None) -> None:
        self.bonuses = bonuses or StyleBonuses()

    def score(
        self, creator: CreatorProfile, brand: EnhancedBrand
    ) -> ContentStyleMatch:
        bonuses = self.bonuses
        style = creator.identity.content_style
        targeting = brand.targeting
        score = 0.0
        matching_elements: list[str] = []
        concerns: list[str] = []

        if contains_term(targeting.content_formats, style.primary_format):
            score += bonuses.format_match_points
            matching_elements.append(f"Primary format match: {style.primary_format}")
        else:
            concerns.append(FORMAT_MISMATCH_CONCERN)

        aesthetic_matches = shared_terms(style.aesthetic_keywords, targeting.aesthetics)
        if aesthetic_matches and targeting.aesthetics:
            score += (
                len(aesthetic_matches)
                / len(targeting.aesthetics)
                * bonuses.aesthetic_overlap_points
            )
            matching_elements.append(f"Aesthetic match: {', '.join(aesthetic_matches)}")

        approvals = brand.campaigns.content_requirements.approvals_needed
        rounds = bonuses.professional_approval_rounds
        production_match = (
            style.production_value == "professional" and approvals > rounds
        ) or (style.production_value == "authentic" and approvals <= rounds)
        if production_match:
            score += bonuses.production_match_points
            matching_elements.append("Production style aligns with brand expectations")
        else:
            concerns.append(PRODUCTION_MISMATCH_CONCERN)

        if style.caption_style == "storytelling" and contains_term(
            brand.values.core_values, "authenticity"
        ):
            score += bonuses.storytelling_points
            matching_elements.append(
                "Storytelling style aligns with brand authenticity"
            )

        return ContentStyleMatch(
            score=clamp_score(score),
            matching_elements=matching_elements,
            concerns=concerns,
        )


class SuccessProbabilityScorer:
    """Compare creator size and engagement with the brand's partner history."""

    def __init__(self, bonuses: SuccessBonuses | None = None) -> None:
        self.bonuses = bonuses or SuccessBonuses()

    def days_since_last_campaign(
        self, brand: EnhancedBrand, now: datetime | None = None
    ) -> float:
        last = brand.intelligence.last_campaign_date
        if last is None:
            return float(self.bonuses.no_campaign_days)
        if last.tzinfo is None:
            last = last.replace(tzinfo=UTC)
        now = now or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        return (now - last).total_seconds() / 86_400

    def score(
        self,
        creator: CreatorProfile,
        brand: EnhancedBrand,
        now: datetime | None = None,
    ) -> SuccessProbability:
        bonuses = self.bonuses
        analytics = creator.analytics
        thresholds = brand.targeting.engagement_rate
        score = bonuses.base_score
        factors: list[str] = []

        size = creator_size(analytics.follower_count)
        if brand.history.preferred_creator_size == size:
            score += bonuses.size_match_points
            factors.append(f"Brand typically works with {size.value} creators")

        if analytics.engagement_rate >= thresholds.min:
            score += bonuses.min_engagement_points
            if analytics.engagement_rate >= thresholds.preferred:
                score += bonuses.preferred_engagement_points
                factors.append("Engagement rate exceeds brand's preferred threshold")
            else:
                factors.append("Engagement rate meets minimum requirements")

        historical = brand.history.success_metrics.avg_engagement_rate
        gap = abs(analytics.engagement_rate - historical)
        if gap < bonuses.historical_engagement_tolerance:
            score += bonuses.historical_engagement_points
            factors.append("Similar engagement to brand's successful partnerships")

        open_to_partnerships = (
            self.days_since_last_campaign(brand, now) > bonuses.dormancy_days
        )
        if open_to_partnerships:
            score += bonuses.timing_points
            factors.append(OPEN_TO_PARTNERSHIPS_FACTOR)

        return SuccessProbability(
            score=clamp_score(score),
            factors=factors,
            creator_size=size,
            likely_open_to_partnerships=open_to_partnerships,
        )
