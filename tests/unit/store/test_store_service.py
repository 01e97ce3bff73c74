"""Tests for the match lifecycle service."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest


class TestCanTransition:
    """Test lifecycle rules."""

    @pytest.mark.parametrize(
        ("current", "target", "allowed"),
        [
            ("discovered", "qualified", True),
            ("discovered", "contacted", True),
            ("qualified", "discovered", False),
            ("contacted", "responded", True),
            ("negotiating", "responded", False),
            ("discovered", "closed_lost", True),
            ("negotiating", "closed_won", True),
            ("closed_won", "negotiating", False),
            ("closed_lost", "closed_won", False),
        ],
    )
    def test_transitions(self, current, target, allowed):
        from brand_match.matching.models import MatchStatus
        from brand_match.store.service import can_transition

        assert can_transition(MatchStatus(current), MatchStatus(target)) is allowed


class TestMatchTrackingService:
    """Test MatchTrackingService against a real store."""

    @pytest.fixture
    async def service(self, tmp_path, engine, creator, eco_brand):
        """Service over a store holding one discovered match."""
        from brand_match.store.repository import SQLiteMatchStore
        from brand_match.store.service import MatchTrackingService

        store = SQLiteMatchStore(tmp_path / "matches.db")
        await store.initialize()
        await store.upsert_matches([engine.calculate_match(creator, eco_brand)])

        clock = lambda: datetime(2026, 6, 20, 9, 0, tzinfo=UTC)  # noqa: E731
        yield MatchTrackingService(store, clock=clock)
        await store.close()

    @pytest.mark.asyncio
    async def test_get_missing_match_raises(self, service):
        from brand_match.errors import MatchNotFoundError, NotFoundError

        with pytest.raises(MatchNotFoundError) as exc_info:
            await service.get_match("creator-1", "unknown")

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.brand_id == "unknown"

    @pytest.mark.asyncio
    async def test_update_status_moves_forward(self, service):
        from brand_match.matching.models import MatchStatus

        record = await service.update_status(
            "creator-1", "brand-ecowear", MatchStatus.QUALIFIED
        )

        assert record.status == MatchStatus.QUALIFIED
        assert record.last_status_update == datetime(2026, 6, 20, 9, 0, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_same_status_is_noop(self, service, fixed_now):
        from brand_match.matching.models import MatchStatus

        record = await service.update_status(
            "creator-1", "brand-ecowear", MatchStatus.DISCOVERED
        )

        assert record.last_status_update == fixed_now

    @pytest.mark.asyncio
    async def test_backward_move_raises(self, service):
        from brand_match.errors import InvalidTransitionError
        from brand_match.matching.models import MatchStatus

        await service.update_status("creator-1", "brand-ecowear", MatchStatus.CONTACTED)

        with pytest.raises(InvalidTransitionError, match="contacted to qualified"):
            await service.update_status(
                "creator-1", "brand-ecowear", MatchStatus.QUALIFIED
            )

    @pytest.mark.asyncio
    async def test_update_missing_match_raises(self, service):
        from brand_match.errors import MatchNotFoundError
        from brand_match.matching.models import MatchStatus

        with pytest.raises(MatchNotFoundError):
            await service.update_status(
                "creator-2", "brand-ecowear", MatchStatus.QUALIFIED
            )

    @pytest.mark.asyncio
    async def test_record_outreach_sent(self, service):
        from brand_match.matching.models import MatchStatus

        record = await service.record_outreach_sent("creator-1", "brand-ecowear")

        assert record.status == MatchStatus.CONTACTED
        assert record.outreach_sent_at == datetime(2026, 6, 20, 9, 0, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_outreach_on_closed_match_raises(self, service):
        from brand_match.errors import InvalidTransitionError
        from brand_match.matching.models import MatchStatus

        await service.update_status(
            "creator-1", "brand-ecowear", MatchStatus.CLOSED_LOST
        )

        with pytest.raises(InvalidTransitionError):
            await service.record_outreach_sent("creator-1", "brand-ecowear")

        record = await service.get_match("creator-1", "brand-ecowear")
        assert record.outreach_sent_at is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("response", "status"),
        [
            ("positive", "responded"),
            ("negotiating", "negotiating"),
            ("negative", "closed_lost"),
        ],
    )
    async def test_record_response(self, service, response, status):
        from brand_match.matching.models import MatchStatus
        from brand_match.store.models import ResponseType

        await service.record_outreach_sent("creator-1", "brand-ecowear")

        record = await service.record_response(
            "creator-1", "brand-ecowear", ResponseType(response)
        )

        assert record.status == MatchStatus(status)
        assert record.response_type == ResponseType(response)

    @pytest.mark.asyncio
    async def test_response_after_close_raises(self, service):
        from brand_match.errors import InvalidTransitionError
        from brand_match.store.models import ResponseType

        await service.record_response(
            "creator-1", "brand-ecowear", ResponseType.NEGATIVE
        )

        with pytest.raises(InvalidTransitionError):
            await service.record_response(
                "creator-1", "brand-ecowear", ResponseType.POSITIVE
            )

    @pytest.mark.asyncio
    async def test_rescoring_keeps_tracked_status(
        self, service, engine, creator, eco_brand
    ):
        """A re-run of the engine does not reset a contacted match."""
        from brand_match.matching.models import MatchStatus

        await service.record_outreach_sent("creator-1", "brand-ecowear")
        await service.store.upsert_matches([engine.calculate_match(creator, eco_brand)])

        record = await service.get_match("creator-1", "brand-ecowear")

        assert record.status == MatchStatus.CONTACTED
