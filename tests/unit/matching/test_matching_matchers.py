"""Tests for term matching helpers."""

import pytest


class TestSharedTerms:
    """Test case-insensitive list intersection."""

    def test_shared_terms_is_case_insensitive(self):
        from brand_match.matching.matchers import shared_terms

        assert shared_terms(["Sustainability", "Inclusivity"], ["sustainability"]) == [
            "Sustainability"
        ]

    def test_shared_terms_keeps_left_order_and_drops_duplicates(self):
        from brand_match.matching.matchers import shared_terms

        result = shared_terms(["b", "a", "B"], ["a", "b"])

        assert result == ["b", "a"]

    def test_shared_terms_ignores_blank_entries(self):
        from brand_match.matching.matchers import shared_terms

        assert shared_terms(["", "  "], ["", "x"]) == []


class TestFindMatchingInterests:
    """Test interest-to-niche matching."""

    def test_niche_substring_matches_interest(self):
        """'sustainable fashion' should match the niche 'fashion'."""
        from brand_match.matching.matchers import find_matching_interests

        matched, unmatched = find_matching_interests(
            ["sustainable fashion", "travel"], ["fashion"]
        )

        assert matched == ["sustainable fashion"]
        assert unmatched == ["travel"]

    def test_no_niches_matches_nothing(self):
        from brand_match.matching.matchers import find_matching_interests

        matched, unmatched = find_matching_interests(["fitness"], [])

        assert matched == []
        assert unmatched == ["fitness"]


class TestMatchesBlacklist:
    """Test blacklist matching."""

    def test_blacklist_entry_contained_in_brand_name(self):
        from brand_match.matching.matchers import matches_blacklist

        assert matches_blacklist(["fastfashion"], "FastFashionCo", "Fashion") == (
            "fastfashion"
        )

    def test_blacklist_entry_contained_in_industry(self):
        from brand_match.matching.matchers import matches_blacklist

        assert matches_blacklist(["tobacco"], "SmokeCo", "Tobacco") == "tobacco"

    def test_blank_blacklist_entries_are_ignored(self):
        """An empty entry would otherwise match every brand."""
        from brand_match.matching.matchers import matches_blacklist

        assert matches_blacklist(["", "   "], "EcoWear", "Fashion") is None


class TestCountryMatches:
    """Test country matching against target lists."""

    def test_exact_country_matches(self):
        from brand_match.matching.matchers import country_matches

        assert country_matches("us", ["US", "CA"]) is True
        assert country_matches("GB", ["US", "CA"]) is False

    def test_global_marker_matches_every_country(self):
        from brand_match.matching.matchers import country_matches

        assert country_matches("BR", ["GLOBAL"]) is True

    def test_blank_country_never_matches(self):
        from brand_match.matching.matchers import country_matches

        assert country_matches("", ["GLOBAL"]) is False


class TestCreatorSize:
    """Test follower-count buckets."""

    @pytest.mark.parametrize(
        ("followers", "expected"),
        [
            (0, "nano"),
            (9_999, "nano"),
            (10_000, "micro"),
            (99_999, "micro"),
            (100_000, "macro"),
            (999_999, "macro"),
            (1_000_000, "mega"),
        ],
    )
    def test_creator_size_boundaries(self, followers, expected):
        from brand_match.matching.matchers import creator_size

        assert creator_size(followers).value == expected


class TestMarketSegmentForName:
    """Test market segment inference for past-collaboration brands."""

    def test_known_brand_segments(self):
        from brand_match.matching.matchers import market_segment_for_name

        assert market_segment_for_name("Gucci") == "luxury"
        assert market_segment_for_name("Apple Store") == "premium"
        assert market_segment_for_name("Nike") == "mid-market"

    def test_unknown_brand_defaults_to_mid_market(self):
        from brand_match.matching.matchers import market_segment_for_name

        assert market_segment_for_name("Tiny Local Bakery") == "mid-market"


class TestRounding:
    """Test half-up rounding."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(84.5, 85), (84.49, 84), (0.5, 1), (2.5, 3), (69.5, 70)],
    )
    def test_round_half_up(self, value, expected):
        from brand_match.matching.matchers import round_half_up

        assert round_half_up(value) == expected

    def test_clamp_score(self):
        from brand_match.matching.matchers import clamp_score

        assert clamp_score(-5) == 0
        assert clamp_score(120) == 100
        assert clamp_score(42.5) == 42.5
