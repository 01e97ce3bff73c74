"""Campaign keyword tables used to infer brand traits from free text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


class PartnershipType(NamedTuple):
    duration: str
    exclusivity: bool
    budget_multiplier: float


class ContentFocus(NamedTuple):
    production_value: str
    turnaround: str


# Checked in order; the first keyword found wins
PARTNERSHIP_TYPES: dict[str, PartnershipType] = {
    "ambassador": PartnershipType("long-term", True, 1.5),
    "long-term": PartnershipType("long-term", False, 1.3),
    "campaign-specific": PartnershipType("short-term", False, 1.0),
    "one-off": PartnershipType("short-term", False, 0.9),
    "seasonal": PartnershipType("short-term", False, 1.1),
    "exclusive": PartnershipType("varies", True, 1.4),
    "celebrity": PartnershipType("varies", False, 2.0),
    "endorsement": PartnershipType("long-term", True, 1.6),
}

CONTENT_FOCUS: dict[str, ContentFocus] = {
    "ugc": ContentFocus("authentic", "fast"),
    "user-generated": ContentFocus("authentic", "fast"),
    "professional": ContentFocus("professional", "slow"),
    "lifestyle": ContentFocus("mixed", "medium"),
    "tutorial": ContentFocus("professional", "slow"),
    "unboxing": ContentFocus("authentic", "fast"),
    "review": ContentFocus("authentic", "medium"),
    "storytelling": ContentFocus("mixed", "medium"),
}

CAMPAIGN_THEMES: dict[str, tuple[str, ...]] = {
    "sustainability": ("eco-conscious", "sustainable", "green", "environmental"),
    "diversity": ("inclusive", "diverse", "representation", "equality"),
    "wellness": ("health", "mindfulness", "selfcare", "balance"),
    "innovation": ("tech", "innovative", "cutting-edge", "modern"),
    "luxury": ("premium", "exclusive", "high-end", "sophisticated"),
    "community": ("togetherness", "belonging", "support", "connection"),
    "empowerment": ("confidence", "strength", "inspiration", "motivation"),
}

_CELEBRITY_WORDS = ("celebrity", "influencer", "ambassador", "endorsement")


@dataclass
class CampaignPatterns:
    """Traits detected in a brand's strategy and campaign text."""

    partnership_type: str | None = None
    content_focus: list[str] = field(default_factory=list)
    themes: list[str] = field(default_factory=list)
    celebrity_mentioned: bool = False

    @property
    def budget_multiplier(self) -> float:
        if self.partnership_type is None:
            return 1.0
        return PARTNERSHIP_TYPES[self.partnership_type].budget_multiplier

    @property
    def exclusivity(self) -> bool:
        if self.partnership_type is None:
            return False
        return PARTNERSHIP_TYPES[self.partnership_type].exclusivity


def extract_campaign_patterns(text: str) -> CampaignPatterns:
    """Detect partnership type, content focus and themes in free text."""
    lowered = (text or "").lower()
    patterns = CampaignPatterns()

    for name in PARTNERSHIP_TYPES:
        if name in lowered:
            patterns.partnership_type = name
            break

    patterns.content_focus = [focus for focus in CONTENT_FOCUS if focus in lowered]
    patterns.themes = [
        theme
        for theme, keywords in CAMPAIGN_THEMES.items()
        if any(keyword in lowered for keyword in keywords)
    ]
    patterns.celebrity_mentioned = any(word in lowered for word in _CELEBRITY_WORDS)
    return patterns
