"""Outreach strategy for a scored creator-brand pair."""

from __future__ import annotations

import calendar
from datetime import datetime

from brand_match.matching.config import OutreachBonuses
from brand_match.matching.models import (
    CreatorProfile,
    EnhancedBrand,
    MatchScores,
    OutreachStrategy,
)


class OutreachStrategyBuilder:
    """Pick a channel, hooks, content ideas and timing for first contact."""

    def __init__(self, bonuses: OutreachBonuses | None = None) -> None:
        self.bonuses = bonuses or OutreachBonuses()

    def build(
        self,
        creator: CreatorProfile,
        brand: EnhancedBrand,
        scores: MatchScores,
        now: datetime,
    ) -> OutreachStrategy:
        best_times = brand.automation.best_outreach_times or [
            self.bonuses.default_best_timing
        ]
        return OutreachStrategy(
            recommended_channel=self.recommend_channel(creator, brand),
            personalized_hooks=self.personalized_hooks(brand, scores),
            content_ideas=self.content_ideas(creator, brand, now),
            best_timing=best_times[0],
        )

    def recommend_channel(self, creator: CreatorProfile, brand: EnhancedBrand) -> str:
        preferred = brand.contacts.primary.preferred_channel
        if preferred:
            return preferred
        if (
            brand.instagram_handle
            and creator.analytics.follower_count < self.bonuses.instagram_max_followers
        ):
            return "instagram"
        return "email"

    def personalized_hooks(
        self, brand: EnhancedBrand, scores: MatchScores
    ) -> list[str]:
        """Opening lines, in fixed priority order."""
        hooks: list[str] = []

        upcoming = brand.intelligence.upcoming_campaigns
        if upcoming:
            theme = upcoming[0].theme or upcoming[0].name or "new"
            hooks.append(f"Noticed your upcoming {theme} campaign")

        shared_interests = scores.audience_resonance.shared_interests
        if shared_interests:
            hooks.append(f"My audience is obsessed with {shared_interests[0]}")

        if scores.values_alignment.dream_brand:
            hooks.append(
                f"I've been a genuine fan of {brand.name} since [specific moment]"
            )

        shared_values = scores.values_alignment.shared_values
        if shared_values:
            hooks.append(
                f"Your commitment to {shared_values[0]} "
                "aligns perfectly with my content"
            )

        return hooks

    def content_ideas(
        self, creator: CreatorProfile, brand: EnhancedBrand, now: datetime
    ) -> list[str]:
        identity = creator.identity
        pillar = self._top_pillar(creator)
        content_format = identity.content_style.primary_format
        month = calendar.month_name[now.month]

        ideas = [
            f'{content_format} series: "{pillar} meets {brand.name}"',
            f'{month} campaign: "My {pillar} essentials featuring {brand.name}"',
        ]

        problems = identity.audience_psychographics.problems
        if problems:
            ideas.append(
                f'Problem-solving content: "How {brand.name} helps with {problems[0]}"'
            )

        return ideas[: self.bonuses.max_content_ideas]

    def _top_pillar(self, creator: CreatorProfile) -> str:
        pillars = creator.identity.content_pillars
        if pillars:
            return pillars[0]
        interests = creator.analytics.audience_demographics.interests
        if interests:
            return interests[0]
        return self.bonuses.fallback_content_pillar
