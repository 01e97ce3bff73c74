"""Term matching utilities for brand matching."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable

from brand_match.matching.models import GLOBAL_MARKER, CreatorSize

# Name fragments used to guess a past-collaboration brand's market segment
_SEGMENT_BRANDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    # Fashion & apparel
    ("mid-market", ("nike", "adidas", "zara", "h&m", "uniqlo", "gap", "levis", "puma")),
    ("luxury", ("gucci", "prada", "chanel", "dior", "hermes", "versace")),
    # Beauty
    ("mid-market", ("sephora", "ulta", "glossier", "fenty", "nyx", "elf")),
    ("premium", ("lancome", "estee lauder", "charlotte tilbury", "tom ford")),
    # Tech
    ("premium", ("apple", "samsung", "google", "microsoft")),
    # Food & beverage
    ("premium", ("whole foods", "sweetgreen", "chipotle")),
)

DEFAULT_MARKET_SEGMENT = "mid-market"


def normalize_term(term: str) -> str:
    """Normalize a free-text term for comparison.

    Lowercases, collapses whitespace and trims surrounding punctuation.
    """
    value = str(term).strip().lower()
    value = re.sub(r"\s+", " ", value)
    return value.strip(" ,;")


def contains_term(items: Iterable[str], term: str) -> bool:
    """Return True if `term` equals any of `items` after normalization."""
    needle = normalize_term(term)
    if not needle:
        return False
    return any(normalize_term(item) == needle for item in items)


def shared_terms(left: Iterable[str], right: Iterable[str]) -> list[str]:
    """Return the items of `left` that also appear in `right`.

    Order follows `left`; duplicates are dropped.
    """
    targets = {normalize_term(item) for item in right}
    targets.discard("")

    shared: list[str] = []
    seen: set[str] = set()
    for item in left:
        key = normalize_term(item)
        if key and key in targets and key not in seen:
            shared.append(item)
            seen.add(key)
    return shared


def find_matching_interests(
    interests: Iterable[str], niches: Iterable[str]
) -> tuple[list[str], list[str]]:
    """Split audience interests into those matching a brand niche and the rest.

    An interest matches when any niche is a substring of it, so
    "sustainable fashion" matches the niche "fashion".
    """
    niche_keys = [normalize_term(niche) for niche in niches]
    niche_keys = [key for key in niche_keys if key]

    matched: list[str] = []
    unmatched: list[str] = []
    for interest in interests:
        value = normalize_term(interest)
        if value and any(key in value for key in niche_keys):
            matched.append(interest)
        else:
            unmatched.append(interest)
    return matched, unmatched


def matches_blacklist(blacklist: Iterable[str], *candidates: str) -> str | None:
    """Return the first blacklist entry contained in any candidate string.

    Blank entries are ignored; they would otherwise match every brand.
    """
    haystacks = [normalize_term(candidate) for candidate in candidates if candidate]
    for entry in blacklist:
        needle = normalize_term(entry)
        if needle and any(needle in haystack for haystack in haystacks):
            return entry
    return None


def country_matches(country: str, targets: Iterable[str]) -> bool:
    """Return True if a country is covered by a target-country list."""
    needle = normalize_term(country)
    if not needle:
        return False
    for target in targets:
        key = normalize_term(target)
        if key == GLOBAL_MARKER.lower() or key == needle:
            return True
    return False


def creator_size(follower_count: int) -> CreatorSize:
    """Map a follower count to its size bucket."""
    if follower_count < 10_000:
        return CreatorSize.NANO
    if follower_count < 100_000:
        return CreatorSize.MICRO
    if follower_count < 1_000_000:
        return CreatorSize.MACRO
    return CreatorSize.MEGA


def market_segment_for_name(brand_name: str) -> str:
    """Guess a brand's market segment from its name."""
    value = normalize_term(brand_name)
    for segment, fragments in _SEGMENT_BRANDS:
        if any(fragment in value for fragment in fragments):
            return segment
    return DEFAULT_MARKET_SEGMENT


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp a score into [low, high]."""
    return max(low, min(high, value))
