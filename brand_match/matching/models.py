"""Data models for the Brand Matching engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

# Matches the whole world in target-country and shipping lists
GLOBAL_MARKER = "GLOBAL"


class MatchCategory(str, Enum):
    """Four-tier bucket derived from the overall score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class MatchStatus(str, Enum):
    """Lifecycle of a match. The engine only ever creates DISCOVERED."""

    DISCOVERED = "discovered"
    QUALIFIED = "qualified"
    CONTACTED = "contacted"
    RESPONDED = "responded"
    NEGOTIATING = "negotiating"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"


class CreatorSize(str, Enum):
    """Creator size bucket derived from follower count."""

    NANO = "nano"
    MICRO = "micro"
    MACRO = "macro"
    MEGA = "mega"


# ---------------------------------------------------------------------------
# Creator profile
# ---------------------------------------------------------------------------


class AgeRangeShare(BaseModel):
    """Share of the audience in one age range."""

    range: str = Field(..., description="Age range label, e.g. '18-24'")
    percentage: float = Field(default=0.0, ge=0.0, description="Audience share (%)")


class GenderSplit(BaseModel):
    """Audience gender split in percent."""

    male: float = Field(default=0.0, ge=0.0)
    female: float = Field(default=0.0, ge=0.0)
    other: float = Field(default=0.0, ge=0.0)

    @property
    def dominant(self) -> Literal["male", "female"] | None:
        """Gender holding the majority of the female/male split, if any."""
        if self.female > self.male:
            return "female"
        if self.male > self.female:
            return "male"
        return None


class AudienceLocation(BaseModel):
    """Share of the audience located in one country (and optionally city)."""

    country: str = Field(..., description="Country code or name")
    city: str | None = Field(default=None, description="City, when known")
    percentage: float = Field(default=0.0, ge=0.0, description="Audience share (%)")


class AudienceDemographics(BaseModel):
    """Creator audience breakdown."""

    age_ranges: list[AgeRangeShare] = Field(default_factory=list)
    gender_split: GenderSplit = Field(default_factory=GenderSplit)
    top_locations: list[AudienceLocation] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)


class CreatorAnalytics(BaseModel):
    """Account analytics provided by the creator."""

    follower_count: int = Field(default=0, ge=0)
    engagement_rate: float = Field(default=0.0, ge=0.0, description="Percent")
    avg_likes: int = Field(default=0, ge=0)
    avg_comments: int = Field(default=0, ge=0)
    avg_views: int = Field(default=0, ge=0)
    follower_growth_rate: float = Field(default=0.0, description="% per month")
    top_posting_times: list[str] = Field(default_factory=list)
    audience_demographics: AudienceDemographics = Field(
        default_factory=AudienceDemographics
    )


class ContentStyle(BaseModel):
    """How the creator produces content."""

    primary_format: Literal["reels", "carousel", "static", "stories"] = "reels"
    aesthetic_keywords: list[str] = Field(default_factory=list)
    caption_style: Literal["short", "storytelling", "educational", "humorous"] = (
        "short"
    )
    production_value: Literal["professional", "authentic", "mixed"] = "mixed"


class AudiencePsychographics(BaseModel):
    """What the creator's audience struggles with and aspires to."""

    problems: list[str] = Field(default_factory=list)
    aspirations: list[str] = Field(default_factory=list)
    income_level: Literal["low", "medium", "high", "luxury"] = "medium"
    similar_creators: list[str] = Field(default_factory=list)


class CreatorIdentity(BaseModel):
    """Creator identity and brand constraints."""

    content_pillars: list[str] = Field(default_factory=list)
    brand_values: list[str] = Field(default_factory=list)
    past_brands: list[str] = Field(default_factory=list)
    dream_brands: list[str] = Field(default_factory=list)
    blacklist_brands: list[str] = Field(
        default_factory=list, description="Brands or industries to avoid"
    )
    content_style: ContentStyle = Field(default_factory=ContentStyle)
    audience_psychographics: AudiencePsychographics = Field(
        default_factory=AudiencePsychographics
    )


class Availability(BaseModel):
    """Time the creator can dedicate to partnerships."""

    hours_per_week: float | None = Field(default=None, ge=0.0)
    turnaround_days: int | None = Field(default=None, ge=0)


class Capabilities(BaseModel):
    """Production capabilities."""

    equipment: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    travel_radius_miles: int = Field(default=0, ge=0)


class CreatorProfessional(BaseModel):
    """Professional setup of the creator."""

    availability: Availability = Field(default_factory=Availability)
    capabilities: Capabilities = Field(default_factory=Capabilities)


class CreatorWellbeing(BaseModel):
    """Wellbeing constraints."""

    stress_triggers: list[str] = Field(default_factory=list)
    communication_preference: Literal["email", "phone", "text", "video"] = "email"
    max_brands_per_month: int | None = Field(default=None, ge=0)
    support_needs: list[str] = Field(default_factory=list)


class CreatorProfile(BaseModel):
    """Creator being matched. Read-only input to scoring."""

    id: str = Field(..., description="Creator identifier")
    user_id: str | None = Field(default=None, description="Owning user identifier")
    instagram_handle: str | None = Field(default=None)

    analytics: CreatorAnalytics = Field(default_factory=CreatorAnalytics)
    identity: CreatorIdentity = Field(default_factory=CreatorIdentity)
    professional: CreatorProfessional = Field(default_factory=CreatorProfessional)
    wellbeing: CreatorWellbeing = Field(default_factory=CreatorWellbeing)

    @property
    def audience_countries(self) -> list[str]:
        """Distinct audience countries, in profile order."""
        countries: list[str] = []
        for location in self.analytics.audience_demographics.top_locations:
            if location.country and location.country not in countries:
                countries.append(location.country)
        return countries

    @property
    def audience_cities(self) -> list[str]:
        """Distinct audience cities, in profile order."""
        cities: list[str] = []
        for location in self.analytics.audience_demographics.top_locations:
            if location.city and location.city not in cities:
                cities.append(location.city)
        return cities

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> CreatorProfile:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


# ---------------------------------------------------------------------------
# Brand profile
# ---------------------------------------------------------------------------


class FollowerRange(BaseModel):
    min: int = Field(default=0, ge=0)
    max: int | None = Field(default=None, ge=0)


class EngagementThresholds(BaseModel):
    min: float = Field(default=0.0, ge=0.0)
    preferred: float = Field(default=0.0, ge=0.0)


class TargetLocations(BaseModel):
    countries: list[str] = Field(default_factory=list)
    cities: list[str] = Field(default_factory=list)


class TargetDemographics(BaseModel):
    age_ranges: list[str] = Field(default_factory=list)
    gender_preference: Literal["male", "female", "all"] | None = None
    locations: TargetLocations = Field(default_factory=TargetLocations)
    income_level: list[str] = Field(
        default_factory=list, description="Accepted audience income levels"
    )


class BrandTargeting(BaseModel):
    """Who the brand wants to partner with."""

    follower_range: FollowerRange = Field(default_factory=FollowerRange)
    engagement_rate: EngagementThresholds = Field(
        default_factory=EngagementThresholds
    )
    niches: list[str] = Field(default_factory=list)
    content_formats: list[str] = Field(default_factory=list)
    aesthetics: list[str] = Field(default_factory=list)
    audience_demographics: TargetDemographics = Field(
        default_factory=TargetDemographics
    )


class ControversyHistory(BaseModel):
    has_controversies: bool = False
    details: list[str] = Field(default_factory=list)
    last_incident: datetime | None = None


class BrandValues(BaseModel):
    """Brand values and ethics."""

    core_values: list[str] = Field(default_factory=list)
    esg_rating: float | None = Field(default=None, ge=0.0, le=100.0)
    controversy_history: ControversyHistory = Field(
        default_factory=ControversyHistory
    )
    supply_chain_ethics: Literal["certified", "improving", "unknown"] = "unknown"
    campaign_themes: list[str] = Field(default_factory=list)


class BudgetRange(BaseModel):
    min: float = Field(default=0.0, ge=0.0)
    max: float = Field(default=0.0, ge=0.0)
    currency: str = "USD"


class ContentRequirements(BaseModel):
    approvals_needed: int = Field(default=2, ge=0)
    revisions_included: int = Field(default=0, ge=0)
    turnaround_days: int | None = Field(default=None, ge=0)
    usage_rights: str | None = None


class BrandCampaigns(BaseModel):
    """Campaign terms offered by the brand."""

    types: list[str] = Field(default_factory=list)
    budget_range: BudgetRange = Field(default_factory=BudgetRange)
    exclusivity_required: bool = False
    content_requirements: ContentRequirements = Field(
        default_factory=ContentRequirements
    )


class SuccessMetrics(BaseModel):
    avg_engagement_rate: float = Field(default=0.0, ge=0.0)
    avg_roi: float | None = None
    repeat_collaboration_rate: float = Field(default=0.0, ge=0.0)


class PastInfluencer(BaseModel):
    handle: str
    follower_size: str | None = None
    campaign_type: str | None = None
    engagement_rate: float | None = None
    date: datetime | None = None


class BrandHistory(BaseModel):
    """Track record with creators."""

    past_influencers: list[PastInfluencer] = Field(default_factory=list)
    success_metrics: SuccessMetrics = Field(default_factory=SuccessMetrics)
    preferred_creator_size: CreatorSize | None = None


class UpcomingCampaign(BaseModel):
    name: str | None = None
    theme: str | None = None
    estimated_launch: datetime | None = None
    budget: float | None = None


class BrandIntelligence(BaseModel):
    """Discovery data about the brand's campaign calendar."""

    discovery_source: str | None = None
    last_campaign_date: datetime | None = None
    upcoming_campaigns: list[UpcomingCampaign] = Field(default_factory=list)
    market_position: str | None = None


class BrandAutomation(BaseModel):
    """Outreach preferences."""

    outreach_enabled: bool = True
    best_outreach_times: list[str] = Field(default_factory=list)
    decision_maker_active: bool = False


class BrandContact(BaseModel):
    name: str | None = None
    role: str | None = None
    email: str | None = None
    preferred_channel: Literal["email", "instagram", "linkedin"] | None = None


class BrandContacts(BaseModel):
    primary: BrandContact = Field(default_factory=BrandContact)


class BrandPositioning(BaseModel):
    market_segment: str | None = None
    price_point: str | None = None


class EnhancedBrand(BaseModel):
    """Fully-populated sponsor profile. Read-only input to scoring.

    Produced from raw catalog records by the normalization step, which
    guarantees every section is present.
    """

    id: str = Field(..., description="Brand identifier")
    name: str = Field(..., description="Brand display name")
    industry: str = Field(default="", description="Industry label")
    instagram_handle: str | None = None
    website: str | None = None

    # Logistics
    ships_to_countries: list[str] = Field(
        default_factory=lambda: [GLOBAL_MARKER],
        description="Countries the brand ships to (GLOBAL matches all)",
    )
    is_local_only: bool = False
    headquarters_city: str | None = None

    targeting: BrandTargeting = Field(default_factory=BrandTargeting)
    values: BrandValues = Field(default_factory=BrandValues)
    campaigns: BrandCampaigns = Field(default_factory=BrandCampaigns)
    history: BrandHistory = Field(default_factory=BrandHistory)
    intelligence: BrandIntelligence = Field(default_factory=BrandIntelligence)
    automation: BrandAutomation = Field(default_factory=BrandAutomation)
    contacts: BrandContacts = Field(default_factory=BrandContacts)
    positioning: BrandPositioning = Field(default_factory=BrandPositioning)

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> EnhancedBrand:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


# ---------------------------------------------------------------------------
# Match output
# ---------------------------------------------------------------------------


def _check_score(name: str, value: float) -> None:
    if not (0.0 <= value <= 100.0):
        raise ValueError(f"{name} must be between 0 and 100 (got {value})")


@dataclass
class ValuesAlignment:
    """Values sub-score with the reasons behind it."""

    score: float
    details: list[str] = field(default_factory=list)
    shared_values: list[str] = field(default_factory=list)
    blacklisted: bool = False
    dream_brand: bool = False

    def __post_init__(self) -> None:
        _check_score("values_alignment.score", self.score)


@dataclass
class AudienceResonance:
    """Audience sub-score.

    `location_overlap` is the raw weighted overlap (city bonus included), kept
    separately from the discrete `location_score` it maps to.
    """

    score: float
    shared_interests: list[str] = field(default_factory=list)
    location_overlap: float = 0.0
    location_score: float = 0.0
    location_details: list[str] = field(default_factory=list)
    age_overlap: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_score("audience_resonance.score", self.score)


@dataclass
class ContentStyleMatch:
    """Content-style sub-score."""

    score: float
    matching_elements: list[str] = field(default_factory=list)
    concerns: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_score("content_style_match.score", self.score)


@dataclass
class SuccessProbability:
    """Success-probability sub-score."""

    score: float
    factors: list[str] = field(default_factory=list)
    creator_size: CreatorSize | None = None
    likely_open_to_partnerships: bool = False

    def __post_init__(self) -> None:
        _check_score("success_probability.score", self.score)


@dataclass
class MatchScores:
    """The four sub-scores of a match."""

    values_alignment: ValuesAlignment
    audience_resonance: AudienceResonance
    content_style_match: ContentStyleMatch
    success_probability: SuccessProbability


@dataclass
class MatchInsights:
    strengths: list[str] = field(default_factory=list)
    opportunities: list[str] = field(default_factory=list)
    concerns: list[str] = field(default_factory=list)
    suggested_approach: str = ""
    estimated_response_rate: float = 0.0


@dataclass
class MatchFinancials:
    suggested_rate: int
    market_rate: int
    negotiation_room: str
    currency: str = "USD"


@dataclass
class OutreachStrategy:
    recommended_channel: Literal["email", "instagram", "linkedin"]
    personalized_hooks: list[str] = field(default_factory=list)
    content_ideas: list[str] = field(default_factory=list)
    best_timing: str = ""


@dataclass
class BrandMatch:
    """Scored (creator, brand) pair with guidance attached."""

    id: str
    creator_id: str
    brand_id: str
    brand_name: str
    overall_score: int
    match_category: MatchCategory
    scores: MatchScores
    insights: MatchInsights
    financials: MatchFinancials
    outreach_strategy: OutreachStrategy
    status: MatchStatus = MatchStatus.DISCOVERED
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_status_update: datetime = field(default_factory=lambda: datetime.now(UTC))
    next_action: str | None = None

    def __post_init__(self) -> None:
        _check_score("overall_score", self.overall_score)
        if self.id != f"{self.creator_id}-{self.brand_id}":
            raise ValueError(
                f"BrandMatch.id must be '<creator_id>-<brand_id>' (got {self.id})"
            )

    def to_dict(self) -> dict:
        """Serialize the match to a JSON-compatible dictionary."""

        def convert(value: object) -> object:
            if isinstance(value, Enum):
                return value.value
            if isinstance(value, datetime):
                return value.isoformat()
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            if isinstance(value, list | tuple):
                return [convert(v) for v in value]
            return value

        return convert(asdict(self))  # type: ignore[return-value]
