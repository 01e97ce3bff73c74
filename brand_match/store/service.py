"""Business logic service for the match lifecycle.

The matching engine only creates matches in `discovered` status. This
module moves stored matches along the rest of the lifecycle:
- Qualification and closing via `update_status`
- Outreach bookkeeping via `record_outreach_sent`
- Brand replies via `record_response`
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from brand_match.errors import InvalidTransitionError, MatchNotFoundError
from brand_match.matching.models import MatchStatus
from brand_match.store.models import MatchRecord, ResponseType
from brand_match.store.repository import SQLiteMatchStore
from brand_match.utils.logging import get_logger

logger = get_logger("store.service")

# Open statuses in lifecycle order; a match may only move forward
STATUS_ORDER: tuple[MatchStatus, ...] = (
    MatchStatus.DISCOVERED,
    MatchStatus.QUALIFIED,
    MatchStatus.CONTACTED,
    MatchStatus.RESPONDED,
    MatchStatus.NEGOTIATING,
)

CLOSED_STATUSES = frozenset({MatchStatus.CLOSED_WON, MatchStatus.CLOSED_LOST})

RESPONSE_STATUS: dict[ResponseType, MatchStatus] = {
    ResponseType.POSITIVE: MatchStatus.RESPONDED,
    ResponseType.NEGOTIATING: MatchStatus.NEGOTIATING,
    ResponseType.NEGATIVE: MatchStatus.CLOSED_LOST,
}


def can_transition(current: MatchStatus, target: MatchStatus) -> bool:
    """Return True if a match may move from `current` to `target`."""
    if current in CLOSED_STATUSES:
        return False
    if target in CLOSED_STATUSES:
        return True
    return STATUS_ORDER.index(target) > STATUS_ORDER.index(current)


class MatchTrackingService:
    """Lifecycle operations on stored matches."""

    def __init__(
        self,
        store: SQLiteMatchStore,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the service.

        Args:
            store: The SQLiteMatchStore holding the matches.
            clock: Source of timestamps; defaults to the current UTC time.
        """
        self.store = store
        self.clock = clock or (lambda: datetime.now(UTC))

    async def get_match(self, creator_id: str, brand_id: str) -> MatchRecord:
        """Get a stored match.

        Raises:
            MatchNotFoundError: If the pair has never been persisted.
        """
        record = await self.store.get_match(creator_id, brand_id)
        if record is None:
            raise MatchNotFoundError(creator_id, brand_id)
        return record

    async def update_status(
        self, creator_id: str, brand_id: str, status: MatchStatus
    ) -> MatchRecord:
        """Move a match to a new status.

        Setting the current status again is a no-op.

        Raises:
            MatchNotFoundError: If the pair has never been persisted.
            InvalidTransitionError: If the lifecycle forbids the move.
        """
        record = await self.get_match(creator_id, brand_id)
        if record.status == status:
            return record
        if not can_transition(record.status, status):
            raise InvalidTransitionError(
                f"Cannot move match {record.match_id} from "
                f"{record.status.value} to {status.value}"
            )

        await self.store.update_status(creator_id, brand_id, status, at=self.clock())
        logger.info(
            "Match %s: %s -> %s", record.match_id, record.status.value, status.value
        )
        return await self.get_match(creator_id, brand_id)

    async def record_outreach_sent(
        self, creator_id: str, brand_id: str
    ) -> MatchRecord:
        """Record that outreach was sent and mark the match contacted."""
        record = await self.get_match(creator_id, brand_id)
        contacted = MatchStatus.CONTACTED
        if record.status != contacted and not can_transition(record.status, contacted):
            raise InvalidTransitionError(
                f"Cannot record outreach for match {record.match_id} "
                f"in status {record.status.value}"
            )

        await self.store.mark_outreach_sent(creator_id, brand_id, self.clock())
        return await self.update_status(creator_id, brand_id, contacted)

    async def record_response(
        self, creator_id: str, brand_id: str, response_type: ResponseType
    ) -> MatchRecord:
        """Record a brand reply and move the match accordingly.

        Positive replies mark the match responded, negotiating replies
        mark it negotiating and negative replies close it as lost.
        """
        target = RESPONSE_STATUS[response_type]
        record = await self.get_match(creator_id, brand_id)
        if record.status != target and not can_transition(record.status, target):
            raise InvalidTransitionError(
                f"Cannot record a {response_type.value} response for match "
                f"{record.match_id} in status {record.status.value}"
            )

        await self.store.mark_response(creator_id, brand_id, response_type)
        return await self.update_status(creator_id, brand_id, target)
