"""Data models for the match store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from brand_match.matching.models import BrandMatch, MatchCategory, MatchStatus


class ResponseType(str, Enum):
    """How a brand answered an outreach message."""

    POSITIVE = "positive"
    NEGOTIATING = "negotiating"
    NEGATIVE = "negative"


@dataclass
class MatchRecord:
    """A persisted match row.

    Attributes:
        creator_id: Creator the match belongs to.
        brand_id: Matched brand.
        match_id: "<creator_id>-<brand_id>".
        overall_score: Composite score at the last evaluation.
        match_category: Category at the last evaluation.
        status: Lifecycle status, driven by `MatchTrackingService`.
        payload: JSON form of the full `BrandMatch`.
        created_at: When the pair was first persisted.
        updated_at: When the pair was last re-scored.
        last_status_update: When the status last changed.
        outreach_sent_at: When outreach was sent, if it was.
        response_type: Brand response, if one was recorded.
    """

    creator_id: str
    brand_id: str
    match_id: str
    overall_score: int
    match_category: MatchCategory
    status: MatchStatus
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_status_update: datetime | None = None
    outreach_sent_at: datetime | None = None
    response_type: ResponseType | None = None

    @classmethod
    def from_match(cls, match: BrandMatch) -> MatchRecord:
        """Build a fresh record from an engine result."""
        return cls(
            creator_id=match.creator_id,
            brand_id=match.brand_id,
            match_id=match.id,
            overall_score=match.overall_score,
            match_category=match.match_category,
            status=match.status,
            payload=match.to_dict(),
            created_at=match.created_at,
            updated_at=match.updated_at,
            last_status_update=match.last_status_update,
        )

    def to_dict(self) -> dict:
        """Serialize the record to a dictionary.

        Returns:
            Dictionary representation of the record.
        """
        return {
            "creator_id": self.creator_id,
            "brand_id": self.brand_id,
            "match_id": self.match_id,
            "overall_score": self.overall_score,
            "match_category": self.match_category.value,
            "status": self.status.value,
            "payload": self.payload,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "last_status_update": self.last_status_update.isoformat()
            if self.last_status_update
            else None,
            "outreach_sent_at": self.outreach_sent_at.isoformat()
            if self.outreach_sent_at
            else None,
            "response_type": self.response_type.value if self.response_type else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> MatchRecord:
        """Deserialize a record from a dictionary.

        Args:
            data: Dictionary containing record data.

        Returns:
            MatchRecord instance.
        """

        def parse_datetime(value: str | datetime | None) -> datetime | None:
            if value is None:
                return None
            if isinstance(value, datetime):
                return value
            return datetime.fromisoformat(value)

        response_type = data.get("response_type")
        return cls(
            creator_id=data["creator_id"],
            brand_id=data["brand_id"],
            match_id=data.get("match_id") or f"{data['creator_id']}-{data['brand_id']}",
            overall_score=int(data["overall_score"]),
            match_category=MatchCategory(data["match_category"]),
            status=MatchStatus(data.get("status", MatchStatus.DISCOVERED.value)),
            payload=data.get("payload") or {},
            created_at=parse_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
            last_status_update=parse_datetime(data.get("last_status_update")),
            outreach_sent_at=parse_datetime(data.get("outreach_sent_at")),
            response_type=ResponseType(response_type) if response_type else None,
        )
