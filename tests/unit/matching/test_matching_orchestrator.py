"""Unit tests for the MatchOrchestrator."""

from __future__ import annotations

import logging

import pytest


class FakeProfiles:
    def __init__(self, *profiles):
        self.profiles = {profile.id: profile for profile in profiles}
        self.calls: list[str] = []

    async def get_creator_profile(self, creator_id):
        self.calls.append(creator_id)
        return self.profiles.get(creator_id)


class FakeBrands:
    def __init__(self, records, error: Exception | None = None):
        self.records = records
        self.error = error
        self.filters = []

    async def list_eligible_brands(self, audience_filter):
        self.filters.append(audience_filter)
        if self.error is not None:
            raise self.error
        return self.records


class FakeStore:
    def __init__(self, matched_ids=()):
        self.matched_ids = list(matched_ids)
        self.upserts: list[list] = []

    async def list_matched_brand_ids(self, creator_id):
        return self.matched_ids

    async def upsert_matches(self, matches):
        self.upserts.append(list(matches))


def _orchestrator(engine, creator, records, store=None, brands=None):
    from brand_match.matching.orchestrator import MatchOrchestrator

    return MatchOrchestrator(
        profiles=FakeProfiles(creator),
        brands=brands or FakeBrands(records),
        store=store or FakeStore(),
        engine=engine,
        config=engine.config,
    )


class TestIsBrandEligible:
    """Test candidate eligibility."""

    def test_brand_shipping_to_audience_country(self, creator, make_brand):
        from brand_match.matching.orchestrator import AudienceFilter, is_brand_eligible

        audience = AudienceFilter.from_profile(creator)

        assert is_brand_eligible(make_brand(ships_to_countries=["CA"]), audience)
        assert not is_brand_eligible(make_brand(ships_to_countries=["JP"]), audience)

    def test_global_brand_is_eligible(self, creator, make_brand):
        from brand_match.matching.orchestrator import AudienceFilter, is_brand_eligible

        brand = make_brand(ships_to_countries=["GLOBAL"])

        assert is_brand_eligible(brand, AudienceFilter.from_profile(creator))

    def test_local_brand_needs_audience_city(self, creator, make_brand):
        from brand_match.matching.orchestrator import AudienceFilter, is_brand_eligible

        audience = AudienceFilter.from_profile(creator)
        toronto = make_brand(is_local_only=True, headquarters_city="toronto")
        paris = make_brand(is_local_only=True, headquarters_city="Paris")
        nowhere = make_brand(is_local_only=True, headquarters_city=None)

        assert is_brand_eligible(toronto, audience)
        assert not is_brand_eligible(paris, audience)
        assert not is_brand_eligible(nowhere, audience)

    def test_audience_filter_from_profile(self, creator):
        from brand_match.matching.orchestrator import AudienceFilter

        audience = AudienceFilter.from_profile(creator)

        assert audience.creator_id == "creator-1"
        assert audience.countries == ("US", "CA", "GB")
        assert audience.cities == ("New York", "Toronto", "London")


class TestMatchOptions:
    """Test option validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [{"limit": 0}, {"limit": -1}, {"min_score": -1}, {"min_score": 101}],
    )
    def test_invalid_options_raise(self, kwargs):
        from brand_match.matching.orchestrator import MatchOptions

        with pytest.raises(ValueError):
            MatchOptions(**kwargs)

    def test_defaults_come_from_config(self):
        from brand_match.matching.config import MatchingConfig
        from brand_match.matching.orchestrator import MatchOptions

        config = MatchingConfig(
            _env_file=None, default_limit=5, default_min_score=10, exclude_matched=False
        )

        assert MatchOptions.from_config(config) == MatchOptions(
            limit=5, min_score=10, exclude_matched=False
        )


class TestGetMatchesForCreator:
    """Test the orchestration flow."""

    @pytest.mark.asyncio
    async def test_ranks_scores_and_persists(
        self, engine, creator, brand_record
    ):
        from brand_match.matching.models import MatchCategory

        store = FakeStore()
        records = [
            brand_record(id="brand-blacklisted", name="FastFashionCo"),
            brand_record(),
            brand_record(id="brand-far", ships_to_countries=["JP"]),
        ]
        orchestrator = _orchestrator(engine, creator, records, store=store)

        results = await orchestrator.get_matches_for_creator("creator-1")

        assert [m.brand_id for m in results.matches] == [
            "brand-ecowear",
            "brand-blacklisted",
        ]
        assert [m.overall_score for m in results.matches] == [84, 72]
        assert all(m.match_category == MatchCategory.GOOD for m in results.matches)
        assert results.total_brands_analyzed == 2
        assert results.match_stats.to_dict() == {
            "excellent": 0,
            "good": 2,
            "fair": 0,
            "poor": 0,
        }
        assert store.upserts == [results.matches]

    @pytest.mark.asyncio
    async def test_passes_audience_filter_to_brand_repository(
        self, engine, creator, brand_record
    ):
        brands = FakeBrands([brand_record()])
        orchestrator = _orchestrator(engine, creator, [], brands=brands)

        await orchestrator.get_matches_for_creator("creator-1")

        assert len(brands.filters) == 1
        assert brands.filters[0].countries == ("US", "CA", "GB")

    @pytest.mark.asyncio
    async def test_excludes_already_matched_brands(self, engine, creator, brand_record):
        store = FakeStore(matched_ids=["brand-ecowear"])
        records = [brand_record(), brand_record(id="brand-other", name="Other")]
        orchestrator = _orchestrator(engine, creator, records, store=store)

        results = await orchestrator.get_matches_for_creator("creator-1")

        assert "brand-ecowear" not in [m.brand_id for m in results.matches]
        assert [m.brand_id for m in results.matches] == ["brand-other"]
        # counted before the exclusion set is applied
        assert results.total_brands_analyzed == 2

    @pytest.mark.asyncio
    async def test_exclude_matched_false_rescores_existing(
        self, engine, creator, brand_record
    ):
        store = FakeStore(matched_ids=["brand-ecowear"])
        orchestrator = _orchestrator(engine, creator, [brand_record()], store=store)

        results = await orchestrator.get_matches_for_creator(
            "creator-1", exclude_matched=False
        )

        assert [m.brand_id for m in results.matches] == ["brand-ecowear"]

    @pytest.mark.asyncio
    async def test_min_score_filter(self, engine, creator, brand_record):
        records = [
            brand_record(),
            brand_record(id="brand-blacklisted", name="FastFashionCo"),
        ]
        orchestrator = _orchestrator(engine, creator, records)

        results = await orchestrator.get_matches_for_creator("creator-1", min_score=80)

        assert [m.brand_id for m in results.matches] == ["brand-ecowear"]
        assert results.total_brands_analyzed == 2

    @pytest.mark.asyncio
    async def test_min_score_is_inclusive(self, engine, creator, brand_record):
        orchestrator = _orchestrator(engine, creator, [brand_record()])

        results = await orchestrator.get_matches_for_creator("creator-1", min_score=84)

        assert len(results.matches) == 1

    @pytest.mark.asyncio
    async def test_ties_break_on_brand_id(self, engine, creator, brand_record):
        """Equal scores are ordered by brand id ascending."""
        records = [
            brand_record(id="brand-c"),
            brand_record(id="brand-a"),
            brand_record(id="brand-b"),
        ]
        orchestrator = _orchestrator(engine, creator, records)

        results = await orchestrator.get_matches_for_creator("creator-1")

        assert [m.brand_id for m in results.matches] == [
            "brand-a",
            "brand-b",
            "brand-c",
        ]

    @pytest.mark.asyncio
    async def test_limit_truncates_after_ranking(self, engine, creator, brand_record):
        records = [
            brand_record(id="brand-blacklisted", name="FastFashionCo"),
            brand_record(id="brand-b"),
            brand_record(id="brand-a"),
        ]
        store = FakeStore()
        orchestrator = _orchestrator(engine, creator, records, store=store)

        results = await orchestrator.get_matches_for_creator("creator-1", limit=2)

        assert [m.brand_id for m in results.matches] == ["brand-a", "brand-b"]
        assert len(store.upserts[0]) == 2
        assert results.total_brands_analyzed == 3

    @pytest.mark.asyncio
    async def test_options_object(self, engine, creator, brand_record):
        from brand_match.matching.orchestrator import MatchOptions

        orchestrator = _orchestrator(engine, creator, [brand_record()])

        results = await orchestrator.get_matches_for_creator(
            "creator-1", MatchOptions(limit=1, min_score=90)
        )

        assert results.matches == []

    @pytest.mark.asyncio
    async def test_no_matches_skips_upsert(self, engine, creator, brand_record):
        store = FakeStore()
        orchestrator = _orchestrator(engine, creator, [brand_record()], store=store)

        results = await orchestrator.get_matches_for_creator(
            "creator-1", min_score=100
        )

        assert results.matches == []
        assert store.upserts == []

    @pytest.mark.asyncio
    async def test_missing_creator_raises_not_found(self, engine, creator):
        from brand_match.errors import CreatorNotFoundError, NotFoundError

        brands = FakeBrands([])
        orchestrator = _orchestrator(engine, creator, [], brands=brands)

        with pytest.raises(CreatorNotFoundError) as exc_info:
            await orchestrator.get_matches_for_creator("nobody")

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.creator_id == "nobody"
        assert brands.filters == []

    @pytest.mark.asyncio
    async def test_invalid_options_fail_before_io(self, engine, creator):
        from brand_match.matching.orchestrator import MatchOrchestrator

        profiles = FakeProfiles(creator)
        orchestrator = MatchOrchestrator(
            profiles=profiles, brands=FakeBrands([]), store=FakeStore(), engine=engine
        )

        with pytest.raises(ValueError):
            await orchestrator.get_matches_for_creator("creator-1", limit=0)

        assert profiles.calls == []

    @pytest.mark.asyncio
    async def test_brand_fetch_error_propagates(self, engine, creator):
        brands = FakeBrands([], error=RuntimeError("catalog unavailable"))
        orchestrator = _orchestrator(engine, creator, [], brands=brands)

        with pytest.raises(RuntimeError, match="catalog unavailable"):
            await orchestrator.get_matches_for_creator("creator-1")

    @pytest.mark.asyncio
    async def test_malformed_records_are_skipped(
        self, engine, creator, brand_record, caplog
    ):
        records = [
            {"name": "No Id Co"},
            "not a record",
            brand_record(),
            {"id": "brand-partial", "name": "Partial", "values": {"esg_rating": "?"}},
        ]
        orchestrator = _orchestrator(engine, creator, records)

        with caplog.at_level(logging.WARNING):
            results = await orchestrator.get_matches_for_creator(
                "creator-1", min_score=0
            )

        assert sorted(m.brand_id for m in results.matches) == [
            "brand-ecowear",
            "brand-partial",
        ]
        assert "Skipping brand record" in caplog.text
        assert "invalid values section" in caplog.text

    @pytest.mark.asyncio
    async def test_accepts_normalized_brands(self, engine, creator, eco_brand):
        orchestrator = _orchestrator(engine, creator, [eco_brand])

        results = await orchestrator.get_matches_for_creator("creator-1")

        assert [m.brand_id for m in results.matches] == ["brand-ecowear"]

    @pytest.mark.asyncio
    async def test_duplicate_brand_ids_are_scored_once(
        self, engine, creator, brand_record
    ):
        orchestrator = _orchestrator(engine, creator, [brand_record(), brand_record()])

        results = await orchestrator.get_matches_for_creator("creator-1")

        assert len(results.matches) == 1
        assert results.total_brands_analyzed == 1

    @pytest.mark.asyncio
    async def test_results_to_dict(self, engine, creator, brand_record):
        orchestrator = _orchestrator(engine, creator, [brand_record()])

        results = await orchestrator.get_matches_for_creator("creator-1")
        data = results.to_dict()

        assert data["total_brands_analyzed"] == 1
        assert data["match_stats"]["good"] == 1
        assert data["matches"][0]["id"] == "creator-1-brand-ecowear"


class TestMatchStats:
    """Test per-category counting."""

    def test_counts_add_up_to_returned_matches(self):
        from types import SimpleNamespace

        from brand_match.matching.models import MatchCategory
        from brand_match.matching.orchestrator import MatchStats

        matches = [
            SimpleNamespace(match_category=category)
            for category in (
                MatchCategory.GOOD,
                MatchCategory.FAIR,
                MatchCategory.POOR,
                MatchCategory.POOR,
            )
        ]

        stats = MatchStats.from_matches(matches).to_dict()

        assert stats == {"excellent": 0, "good": 1, "fair": 1, "poor": 2}
        assert sum(stats.values()) == len(matches)
