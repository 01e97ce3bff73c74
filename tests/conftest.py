"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime

import pytest

FIXED_NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


def creator_data(**overrides) -> dict:
    """Raw creator profile used across tests.

    A micro creator (25k followers, 4.5% engagement) whose audience is
    mostly in the US and Canada.
    """
    data = {
        "id": "creator-1",
        "user_id": "user-1",
        "instagram_handle": "@greenliving",
        "analytics": {
            "follower_count": 25_000,
            "engagement_rate": 4.5,
            "audience_demographics": {
                "age_ranges": [
                    {"range": "18-24", "percentage": 40},
                    {"range": "25-34", "percentage": 35},
                    {"range": "35-44", "percentage": 15},
                ],
                "gender_split": {"female": 70, "male": 28, "other": 2},
                "top_locations": [
                    {"country": "US", "city": "New York", "percentage": 50},
                    {"country": "CA", "city": "Toronto", "percentage": 20},
                    {"country": "GB", "city": "London", "percentage": 10},
                ],
                "interests": ["sustainable fashion", "wellness", "travel"],
            },
        },
        "identity": {
            "content_pillars": ["sustainable fashion", "thrifting"],
            "brand_values": ["sustainability", "inclusivity"],
            "past_brands": [],
            "dream_brands": ["EcoWear"],
            "blacklist_brands": ["FastFashionCo"],
            "content_style": {
                "primary_format": "reels",
                "aesthetic_keywords": ["minimalist", "earthy", "natural"],
                "caption_style": "storytelling",
                "production_value": "authentic",
            },
            "audience_psychographics": {
                "problems": ["finding affordable sustainable clothing"],
                "income_level": "medium",
            },
        },
        "professional": {"availability": {"hours_per_week": 25}},
    }
    data.update(overrides)
    return data


def brand_data(**overrides) -> dict:
    """Nested brand record for EcoWear, a dream brand of `creator-1`."""
    data = {
        "id": "brand-ecowear",
        "name": "EcoWear",
        "industry": "Fashion",
        "instagram_handle": "@ecowear",
        "ships_to_countries": ["US", "CA"],
        "targeting": {
            "engagement_rate": {"min": 2.0, "preferred": 4.0},
            "niches": ["fashion", "sustainability"],
            "content_formats": ["reels", "carousel"],
            "aesthetics": ["natural", "earthy", "minimalist", "bright"],
            "audience_demographics": {
                "age_ranges": ["18-24", "25-34"],
                "gender_preference": "female",
                "locations": {"countries": ["US", "CA"], "cities": ["New York"]},
                "income_level": ["medium", "high"],
            },
        },
        "values": {
            "core_values": ["sustainability", "innovation"],
            "esg_rating": 80,
            "controversy_history": {"has_controversies": False},
            "supply_chain_ethics": "improving",
        },
        "campaigns": {
            "budget_range": {"min": 500, "max": 5000, "currency": "USD"},
            "exclusivity_required": False,
            "content_requirements": {"approvals_needed": 2},
        },
        "history": {
            "preferred_creator_size": "micro",
            "success_metrics": {"avg_engagement_rate": 4.0},
        },
        "intelligence": {"last_campaign_date": "2026-01-10T00:00:00+00:00"},
        "automation": {
            "best_outreach_times": ["Wednesday 9AM"],
            "decision_maker_active": True,
        },
    }
    data.update(overrides)
    return data


@pytest.fixture
def fixed_now() -> datetime:
    """Clock reading used for date-dependent rules."""
    return FIXED_NOW


@pytest.fixture
def fixed_clock():
    """Clock callable that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def creator_record():
    """Factory for raw creator profile dicts."""
    return creator_data


@pytest.fixture
def brand_record():
    """Factory for raw nested brand dicts."""
    return brand_data


@pytest.fixture
def make_creator():
    """Factory for CreatorProfile instances."""
    from brand_match.matching.models import CreatorProfile

    return lambda **overrides: CreatorProfile.model_validate(creator_data(**overrides))


@pytest.fixture
def make_brand():
    """Factory for EnhancedBrand instances."""
    from brand_match.matching.models import EnhancedBrand

    return lambda **overrides: EnhancedBrand.model_validate(brand_data(**overrides))


@pytest.fixture
def creator():
    """Sample creator profile."""
    from brand_match.matching.models import CreatorProfile

    return CreatorProfile.model_validate(creator_data())


@pytest.fixture
def eco_brand():
    """Sample brand that is on the creator's dream-brand list."""
    from brand_match.matching.models import EnhancedBrand

    return EnhancedBrand.model_validate(brand_data())


@pytest.fixture
def blacklisted_brand():
    """Same brand profile under a name on the creator's blacklist."""
    from brand_match.matching.models import EnhancedBrand

    return EnhancedBrand.model_validate(
        brand_data(id="brand-fastfashion", name="FastFashionCo")
    )


@pytest.fixture
def engine(fixed_clock):
    """Scoring engine with default configuration and a fixed clock."""
    from brand_match.matching.config import MatchingConfig
    from brand_match.matching.engine import MatchScoringEngine

    return MatchScoringEngine(config=MatchingConfig(_env_file=None), clock=fixed_clock)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset configuration and logging singletons around each test."""
    from brand_match.config.settings import reset_settings
    from brand_match.matching.config import reset_matching_config
    from brand_match.utils.logging import reset_logging

    reset_settings()
    reset_matching_config()
    reset_logging()
    yield
    reset_settings()
    reset_matching_config()
    reset_logging()
