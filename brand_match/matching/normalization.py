"""Normalization of raw brand records into `EnhancedBrand`.

Brand catalog rows arrive partially populated: either as nested documents
shaped like `EnhancedBrand` or as flat catalog rows with free-text
`strategy` / `recent_campaigns` columns. Scorers never check whether a field
is present; this module guarantees that every section exists by filling gaps
with defaults or with values inferred from the row's text.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, cast

from pydantic import BaseModel, ValidationError

from brand_match.errors import MalformedBrandError
from brand_match.matching.models import (
    GLOBAL_MARKER,
    BrandAutomation,
    BrandCampaigns,
    BrandContact,
    BrandContacts,
    BrandHistory,
    BrandIntelligence,
    BrandPositioning,
    BrandTargeting,
    BrandValues,
    BudgetRange,
    ContentRequirements,
    ControversyHistory,
    CreatorSize,
    EngagementThresholds,
    EnhancedBrand,
    SuccessMetrics,
    TargetDemographics,
    TargetLocations,
)
from brand_match.matching.patterns import CampaignPatterns, extract_campaign_patterns
from brand_match.utils.logging import get_logger

logger = get_logger("matching.normalization")

SECTION_MODELS: dict[str, type[BaseModel]] = {
    "targeting": BrandTargeting,
    "values": BrandValues,
    "campaigns": BrandCampaigns,
    "history": BrandHistory,
    "intelligence": BrandIntelligence,
    "automation": BrandAutomation,
    "contacts": BrandContacts,
    "positioning": BrandPositioning,
}

DEFAULT_BUDGET = (1000.0, 10000.0)
DEFAULT_AGE_RANGES = ["18-24", "25-34", "35-44"]
DEFAULT_INCOME_LEVELS = ["medium", "high"]
DEFAULT_OUTREACH_TIMES = ["Tuesday 10AM", "Thursday 2PM"]
DEFAULT_ENGAGEMENT = EngagementThresholds(min=2.0, preferred=4.0)
DEFAULT_INDUSTRY_ENGAGEMENT = 3.5

INDUSTRY_ENGAGEMENT: dict[str, float] = {
    "fashion": 4.0,
    "beauty": 4.5,
    "jewelry": 3.5,
    "jewelry & accessories": 3.5,
    "technology": 3.0,
    "food": 3.5,
    "beverage": 3.5,
    "fitness": 4.0,
    "travel": 3.0,
    "health & nutrition": 4.0,
    "education": 2.5,
}

# (keywords, value) pairs scanned in the brand's strategy text
STRATEGY_VALUES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("authentic",), "authenticity"),
    (("sustainab",), "sustainability"),
    (("empower",), "empowerment"),
    (("inclusi", "divers"), "inclusivity"),
    (("innovation", "tech"), "innovation"),
    (("luxury", "premium"), "luxury"),
    (("community",), "community"),
    (("wellness", "health"), "wellness"),
    (("quality", "craftsmanship"), "quality"),
    (("adventure", "explor"), "adventure"),
    (("creativ",), "creativity"),
    (("education", "learn"), "education"),
    (("family",), "family"),
    (("celebrat",), "celebration"),
)

# (keywords, value) pairs scanned in the brand's recent campaign text
CAMPAIGN_VALUES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("sustainab", "eco"), "sustainability"),
    (("divers", "inclusi"), "inclusivity"),
    (("empower", "confidence"), "empowerment"),
    (("wellness", "selfcare"), "wellness"),
    (("luxury", "premium"), "luxury"),
    (("innovation", "future"), "innovation"),
    (("authentic", "real"), "authenticity"),
)

CAMPAIGN_NICHES: tuple[tuple[str, str], ...] = (
    ("fitness", "fitness"),
    ("travel", "travel"),
    ("food", "food"),
    ("tech", "technology"),
    ("beauty", "beauty"),
    ("fashion", "fashion"),
    ("wellness", "wellness"),
    ("lifestyle", "lifestyle"),
)

AESTHETIC_FAMILIES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("luxury", "premium"), ("luxury", "sophisticated", "elegant")),
    (("tech", "innovation"), ("modern", "minimalist", "clean")),
    (("wellness", "natural", "organic"), ("natural", "earthy", "calming")),
    (("fashion", "style"), ("trendy", "stylish")),
    (("vibrant", "colorful", "fun"), ("colorful", "vibrant", "playful")),
    (("authentic", "real"), ("authentic", "relatable")),
)

# Checked in order against the influencer_types column
INFLUENCER_TIERS: tuple[
    tuple[tuple[str, ...], CreatorSize, tuple[float, float]], ...
] = (
    (("celebrity", "mega"), CreatorSize.MEGA, (10000.0, 100000.0)),
    (("macro",), CreatorSize.MACRO, (5000.0, 50000.0)),
    (("micro",), CreatorSize.MICRO, (500.0, 5000.0)),
    (("nano",), CreatorSize.NANO, (100.0, 1000.0)),
)


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(item for item in items if item))


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "t"}
    return bool(value)


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def parse_ships_to(value: Any) -> list[str]:
    """Parse a shipping list ("US|CA", "GLOBAL", a list, or nothing).

    Missing data means the brand ships globally.
    """
    if value is None:
        return [GLOBAL_MARKER]
    if isinstance(value, str):
        parts = value.replace(",", "|").split("|")
    elif isinstance(value, list | tuple | set):
        parts = [str(item) for item in value]
    else:
        return [GLOBAL_MARKER]

    countries = _dedupe([part.strip() for part in parts])
    if not countries or any(c.upper() == GLOBAL_MARKER for c in countries):
        return [GLOBAL_MARKER]
    return countries


def extract_values(
    text: str, table: tuple[tuple[tuple[str, ...], str], ...]
) -> list[str]:
    """Return the values whose keywords occur in `text`."""
    lowered = text.lower()
    return [value for keywords, value in table if any(k in lowered for k in keywords)]


def infer_esg_rating(values: list[str]) -> float:
    rating = 50.0
    if "sustainability" in values:
        rating += 20
    if "inclusivity" in values:
        rating += 15
    if "community" in values:
        rating += 10
    if "wellness" in values:
        rating += 5
    return min(100.0, rating)


def infer_influencer_tier(
    influencer_types: str,
) -> tuple[CreatorSize, tuple[float, float]]:
    """Preferred creator size and base budget from the influencer_types column."""
    lowered = influencer_types.lower()
    for keywords, size, budget in INFLUENCER_TIERS:
        if any(keyword in lowered for keyword in keywords):
            return size, budget
    return CreatorSize.MICRO, DEFAULT_BUDGET


def infer_market_segment(budget: BudgetRange) -> tuple[str, str]:
    """Market segment and price point from the budget midpoint."""
    midpoint = (budget.min + budget.max) / 2
    if midpoint < 1000:
        return "budget", "$"
    if midpoint < 5000:
        return "mid-market", "$$"
    if midpoint < 10000:
        return "premium", "$$$"
    return "luxury", "$$$$"


def infer_niches(industry: str, industry_niche: str, campaigns: str) -> list[str]:
    niches = [part.strip().lower() for part in industry_niche.split(",")]
    if industry:
        niches.append(industry.lower())
    lowered = campaigns.lower()
    niches.extend(niche for keyword, niche in CAMPAIGN_NICHES if keyword in lowered)
    return _dedupe(niches)


def infer_content_formats(campaigns: str, patterns: CampaignPatterns) -> list[str]:
    formats: list[str] = []
    focus = patterns.content_focus
    if "ugc" in focus or "unboxing" in focus:
        formats.extend(["reels", "stories"])
    if "tutorial" in focus or "review" in focus:
        formats.extend(["reels", "carousel"])
    if "lifestyle" in focus:
        formats.extend(["posts", "stories"])

    lowered = campaigns.lower()
    if "reel" in lowered or "video" in lowered:
        formats.append("reels")
    if "story" in lowered or "stories" in lowered:
        formats.append("stories")
    if "post" in lowered:
        formats.append("posts")
    if "carousel" in lowered:
        formats.append("carousel")

    if not formats:
        formats = ["posts", "reels", "stories"]
    return _dedupe(formats)


def infer_aesthetics(text: str) -> list[str]:
    lowered = text.lower()
    aesthetics: list[str] = []
    for keywords, family in AESTHETIC_FAMILIES:
        if any(keyword in lowered for keyword in keywords):
            aesthetics.extend(family)
    return _dedupe(aesthetics)


class BrandNormalizer:
    """Convert raw brand records into fully-populated `EnhancedBrand` values."""

    def normalize(self, raw: Mapping[str, Any]) -> EnhancedBrand:
        """Normalize one raw record.

        Raises:
            MalformedBrandError: If the record is not a mapping or has no id.
        """
        if not isinstance(raw, Mapping):
            raise MalformedBrandError(
                f"Brand record must be a mapping (got {type(raw).__name__})", raw
            )

        brand_id = _as_text(raw.get("id"))
        if not brand_id:
            raise MalformedBrandError("Brand record has no id", raw)

        name = (
            _as_text(raw.get("name"))
            or _as_text(raw.get("brand_name"))
            or _as_text(raw.get("display_name"))
            or brand_id
        )
        industry = _as_text(raw.get("industry"))
        ships_to = parse_ships_to(
            raw.get("ships_to_countries", raw.get("ships_to"))
        )

        if any(section in raw for section in SECTION_MODELS):
            sections = self._validated_sections(brand_id, raw)
        else:
            sections = self._infer_sections(raw, name, industry, ships_to)

        self._fill_gaps(sections, industry, ships_to)

        return EnhancedBrand(
            id=brand_id,
            name=name,
            industry=industry,
            instagram_handle=_as_text(raw.get("instagram_handle")) or None,
            website=_as_text(raw.get("website")) or None,
            ships_to_countries=ships_to,
            is_local_only=_as_bool(raw.get("is_local_only")),
            headquarters_city=_as_text(raw.get("headquarters_city")) or None,
            **sections,
        )

    def _validated_sections(
        self, brand_id: str, raw: Mapping[str, Any]
    ) -> dict[str, BaseModel]:
        sections: dict[str, BaseModel] = {}
        for section, model in SECTION_MODELS.items():
            value = raw.get(section)
            if value is None:
                sections[section] = model()
                continue
            try:
                sections[section] = model.model_validate(value)
            except ValidationError as e:
                logger.warning(
                    "Brand %s: invalid %s section, using defaults (%d error(s))",
                    brand_id,
                    section,
                    e.error_count(),
                )
                sections[section] = model()
        return sections

    def _infer_sections(
        self,
        raw: Mapping[str, Any],
        name: str,
        industry: str,
        ships_to: list[str],
    ) -> dict[str, BaseModel]:
        strategy = _as_text(raw.get("strategy"))
        campaigns_text = _as_text(raw.get("recent_campaigns"))
        industry_niche = _as_text(raw.get("industry_niche"))

        core_values = _dedupe(
            extract_values(strategy, STRATEGY_VALUES)
            + extract_values(campaigns_text, CAMPAIGN_VALUES)
        )
        patterns = extract_campaign_patterns(f"{strategy} {campaigns_text}")

        preferred_size, (budget_min, budget_max) = infer_influencer_tier(
            _as_text(raw.get("influencer_types"))
        )
        budget = BudgetRange(
            min=round(budget_min * patterns.budget_multiplier),
            max=round(budget_max * patterns.budget_multiplier),
        )
        market_segment, price_point = infer_market_segment(budget)

        slug = "".join(name.lower().split())
        return {
            "targeting": BrandTargeting(
                engagement_rate=DEFAULT_ENGAGEMENT,
                niches=infer_niches(industry, industry_niche, campaigns_text),
                content_formats=infer_content_formats(campaigns_text, patterns),
                aesthetics=infer_aesthetics(
                    f"{strategy} {campaigns_text} {industry_niche}"
                ),
                audience_demographics=TargetDemographics(
                    age_ranges=list(DEFAULT_AGE_RANGES),
                    locations=TargetLocations(countries=list(ships_to)),
                    income_level=list(DEFAULT_INCOME_LEVELS),
                ),
            ),
            "values": BrandValues(
                core_values=core_values,
                esg_rating=infer_esg_rating(core_values),
                controversy_history=ControversyHistory(),
                supply_chain_ethics=(
                    "certified" if "sustainability" in core_values else "unknown"
                ),
                campaign_themes=patterns.themes,
            ),
            "campaigns": BrandCampaigns(
                budget_range=budget,
                exclusivity_required=patterns.exclusivity,
                content_requirements=ContentRequirements(
                    approvals_needed=(
                        3 if "professional" in patterns.content_focus else 2
                    ),
                    usage_rights=(
                        "12 months"
                        if patterns.partnership_type == "ambassador"
                        else "6 months"
                    ),
                ),
            ),
            "history": BrandHistory(
                preferred_creator_size=preferred_size,
                success_metrics=SuccessMetrics(
                    avg_engagement_rate=INDUSTRY_ENGAGEMENT.get(
                        industry.lower(), DEFAULT_INDUSTRY_ENGAGEMENT
                    ),
                ),
            ),
            "intelligence": BrandIntelligence(
                last_campaign_date=_as_datetime(raw.get("last_campaign_date")),
            ),
            "automation": BrandAutomation(
                best_outreach_times=list(DEFAULT_OUTREACH_TIMES),
                decision_maker_active=True,
            ),
            "contacts": BrandContacts(
                primary=BrandContact(email=f"partnerships@{slug}.com" if slug else None)
            ),
            "positioning": BrandPositioning(
                market_segment=market_segment, price_point=price_point
            ),
        }

    def _fill_gaps(
        self, sections: dict[str, BaseModel], industry: str, ships_to: list[str]
    ) -> None:
        """Fill values a usable brand cannot do without."""
        targeting = cast(BrandTargeting, sections["targeting"])
        locations = targeting.audience_demographics.locations
        if not locations.countries:
            locations.countries = list(ships_to)

        # zero thresholds mean the brand never stated any
        thresholds = targeting.engagement_rate
        if thresholds.min == 0 and thresholds.preferred == 0:
            targeting.engagement_rate = DEFAULT_ENGAGEMENT.model_copy()

        metrics = cast(BrandHistory, sections["history"]).success_metrics
        if metrics.avg_engagement_rate == 0:
            metrics.avg_engagement_rate = INDUSTRY_ENGAGEMENT.get(
                industry.lower(), DEFAULT_INDUSTRY_ENGAGEMENT
            )

        campaigns = cast(BrandCampaigns, sections["campaigns"])
        budget = campaigns.budget_range
        if budget.max == 0 and budget.min == 0:
            budget.min, budget.max = DEFAULT_BUDGET
        elif budget.max < budget.min:
            budget.min, budget.max = budget.max, budget.min

        positioning = cast(BrandPositioning, sections["positioning"])
        if not positioning.market_segment:
            market_segment, price_point = infer_market_segment(budget)
            positioning.market_segment = market_segment
            positioning.price_point = positioning.price_point or price_point


_default_normalizer = BrandNormalizer()


def normalize_brand(raw: Mapping[str, Any]) -> EnhancedBrand:
    """Normalize a raw brand record with the default normalizer."""
    return _default_normalizer.normalize(raw)
