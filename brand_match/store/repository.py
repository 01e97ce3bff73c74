"""Database repositories for brands and brand matches.

This module provides async SQLite storage for raw brand catalog records
and for the match set of each creator.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from brand_match.matching.models import BrandMatch, MatchCategory, MatchStatus
from brand_match.matching.normalization import normalize_brand
from brand_match.matching.orchestrator import AudienceFilter
from brand_match.store.models import MatchRecord, ResponseType

CREATE_BRANDS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS brands (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    ships_to TEXT NOT NULL,
    is_local_only INTEGER DEFAULT 0,
    headquarters_city TEXT,
    record TEXT NOT NULL
)
"""

CREATE_BRANDS_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_brands_local ON brands(is_local_only);
"""

CREATE_MATCHES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS brand_matches (
    creator_id TEXT NOT NULL,
    brand_id TEXT NOT NULL,
    match_id TEXT NOT NULL,
    overall_score INTEGER NOT NULL,
    match_category TEXT NOT NULL,
    status TEXT NOT NULL,
    payload TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    last_status_update TEXT NOT NULL,
    outreach_sent_at TEXT,
    response_type TEXT,
    PRIMARY KEY (creator_id, brand_id)
)
"""

CREATE_MATCHES_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_matches_status ON brand_matches(status);
CREATE INDEX IF NOT EXISTS idx_matches_score
    ON brand_matches(creator_id, overall_score);
"""

UPSERT_MATCH_SQL = """
INSERT INTO brand_matches (
    creator_id, brand_id, match_id, overall_score, match_category, status,
    payload, created_at, updated_at, last_status_update
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT (creator_id, brand_id) DO UPDATE SET
    match_id = excluded.match_id,
    overall_score = excluded.overall_score,
    match_category = excluded.match_category,
    payload = excluded.payload,
    updated_at = excluded.updated_at
"""


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_datetime(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def _pipe_join(values: Sequence[str]) -> str:
    """Encode a list as "|a|b|" so single members can be matched with LIKE."""
    return "|" + "|".join(value.strip().lower() for value in values) + "|"


class _SQLiteRepository:
    """Shared connection handling for the SQLite repositories."""

    create_sql: tuple[str, ...] = ()

    def __init__(self, db_path: Path | str):
        """Initialize the repository.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get a database connection.

        Yields:
            An aiosqlite connection.
        """
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        yield self._connection

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        async with self._get_connection() as conn:
            for sql in self.create_sql:
                await conn.executescript(sql)
            await conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None


class SQLiteBrandRepository(_SQLiteRepository):
    """Async SQLite repository of raw brand catalog records.

    Records are stored as given; locality columns are extracted on save so
    that `list_eligible_brands` can pre-select candidates in SQL.
    """

    create_sql = (CREATE_BRANDS_TABLE_SQL, CREATE_BRANDS_INDEX_SQL)

    async def save_brand(self, raw: Mapping[str, Any]) -> str:
        """Insert or replace a raw brand record.

        Args:
            raw: Nested or flat brand record.

        Returns:
            The brand id.

        Raises:
            MalformedBrandError: If the record has no usable id.
        """
        brand = normalize_brand(raw)
        async with self._get_connection() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO brands (
                    id, name, ships_to, is_local_only, headquarters_city, record
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    brand.id,
                    brand.name,
                    _pipe_join(brand.ships_to_countries),
                    1 if brand.is_local_only else 0,
                    (brand.headquarters_city or "").lower() or None,
                    json.dumps(dict(raw), default=str),
                ),
            )
            await conn.commit()
        return brand.id

    async def get_brand(self, brand_id: str) -> dict[str, Any] | None:
        """Get a raw brand record by id.

        Returns:
            The stored record if found, None otherwise.
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT record FROM brands WHERE id = ?",
                (brand_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return json.loads(row["record"])

    async def list_eligible_brands(
        self, audience_filter: AudienceFilter
    ) -> list[dict[str, Any]]:
        """List brands that ship to, or are based in, the audience's locations.

        Args:
            audience_filter: Countries and cities of the creator's audience.

        Returns:
            Raw brand records ordered by id.
        """
        conditions: list[str] = []
        params: list[str] = []

        if audience_filter.countries:
            patterns = ["%|global|%"] + [
                f"%|{country.strip().lower()}|%"
                for country in audience_filter.countries
            ]
            likes = " OR ".join("ships_to LIKE ?" for _ in patterns)
            conditions.append(f"(is_local_only = 0 AND ({likes}))")
            params.extend(patterns)

        cities = [city.strip().lower() for city in audience_filter.cities]
        if cities:
            placeholders = ", ".join("?" for _ in cities)
            conditions.append(
                f"(is_local_only = 1 AND headquarters_city IN ({placeholders}))"
            )
            params.extend(cities)

        if not conditions:
            return []

        sql = f"SELECT record FROM brands WHERE {' OR '.join(conditions)} ORDER BY id"
        async with self._get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()

        return [json.loads(row["record"]) for row in rows]


class SQLiteMatchStore(_SQLiteRepository):
    """Async SQLite store of each creator's brand matches.

    Rows are keyed by (creator_id, brand_id). Re-scoring a pair overwrites
    its score, category and payload; lifecycle columns are kept.
    """

    create_sql = (CREATE_MATCHES_TABLE_SQL, CREATE_MATCHES_INDEX_SQL)

    async def list_matched_brand_ids(self, creator_id: str) -> list[str]:
        """Return the ids of every brand already matched to a creator."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT brand_id FROM brand_matches WHERE creator_id = ? "
                "ORDER BY brand_id",
                (creator_id,),
            )
            rows = await cursor.fetchall()
        return [row["brand_id"] for row in rows]

    async def upsert_matches(self, matches: Sequence[BrandMatch]) -> None:
        """Insert new matches and refresh the scores of existing ones.

        Args:
            matches: Engine results to persist.
        """
        if not matches:
            return

        rows = []
        for match in matches:
            rows.append(
                (
                    match.creator_id,
                    match.brand_id,
                    match.id,
                    match.overall_score,
                    match.match_category.value,
                    match.status.value,
                    json.dumps(match.to_dict()),
                    match.created_at.isoformat(),
                    match.updated_at.isoformat(),
                    match.last_status_update.isoformat(),
                )
            )

        async with self._get_connection() as conn:
            await conn.executemany(UPSERT_MATCH_SQL, rows)
            await conn.commit()

    async def get_match(self, creator_id: str, brand_id: str) -> MatchRecord | None:
        """Get a match row by its key.

        Returns:
            The match record if found, None otherwise.
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM brand_matches WHERE creator_id = ? AND brand_id = ?",
                (creator_id, brand_id),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return self._row_to_record(row)

    async def list_matches(
        self,
        creator_id: str,
        limit: int = 100,
        status_filter: MatchStatus | None = None,
    ) -> list[MatchRecord]:
        """List a creator's matches, best first.

        Args:
            creator_id: Creator whose matches to list.
            limit: Maximum number of records to return.
            status_filter: Optional status to filter by.

        Returns:
            Match records ordered by score descending, then brand id.
        """
        async with self._get_connection() as conn:
            if status_filter is not None:
                cursor = await conn.execute(
                    """
                    SELECT * FROM brand_matches
                    WHERE creator_id = ? AND status = ?
                    ORDER BY overall_score DESC, brand_id ASC
                    LIMIT ?
                    """,
                    (creator_id, status_filter.value, limit),
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM brand_matches
                    WHERE creator_id = ?
                    ORDER BY overall_score DESC, brand_id ASC
                    LIMIT ?
                    """,
                    (creator_id, limit),
                )
            rows = await cursor.fetchall()

        return [self._row_to_record(row) for row in rows]

    async def update_status(
        self,
        creator_id: str,
        brand_id: str,
        status: MatchStatus,
        at: datetime | None = None,
    ) -> None:
        """Update the status of a match and its last_status_update timestamp."""
        now = (at or _utc_now()).isoformat()
        async with self._get_connection() as conn:
            await conn.execute(
                """
                UPDATE brand_matches
                SET status = ?, last_status_update = ?
                WHERE creator_id = ? AND brand_id = ?
                """,
                (status.value, now, creator_id, brand_id),
            )
            await conn.commit()

    async def mark_outreach_sent(
        self, creator_id: str, brand_id: str, sent_at: datetime | None = None
    ) -> None:
        """Record when outreach was sent for a match."""
        async with self._get_connection() as conn:
            await conn.execute(
                """
                UPDATE brand_matches
                SET outreach_sent_at = ?
                WHERE creator_id = ? AND brand_id = ?
                """,
                ((sent_at or _utc_now()).isoformat(), creator_id, brand_id),
            )
            await conn.commit()

    async def mark_response(
        self, creator_id: str, brand_id: str, response_type: ResponseType
    ) -> None:
        """Record how the brand responded to outreach."""
        async with self._get_connection() as conn:
            await conn.execute(
                """
                UPDATE brand_matches
                SET response_type = ?
                WHERE creator_id = ? AND brand_id = ?
                """,
                (response_type.value, creator_id, brand_id),
            )
            await conn.commit()

    async def get_category_counts(self, creator_id: str) -> dict[MatchCategory, int]:
        """Return a creator's match counts grouped by category."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT match_category, COUNT(*) AS count FROM brand_matches
                WHERE creator_id = ?
                GROUP BY match_category
                """,
                (creator_id,),
            )
            rows = await cursor.fetchall()

        counts: dict[MatchCategory, int] = {}
        for row in rows:
            try:
                category = MatchCategory(row["match_category"])
            except ValueError:
                continue
            counts[category] = int(row["count"]) if row["count"] is not None else 0
        return counts

    def _row_to_record(self, row: aiosqlite.Row) -> MatchRecord:
        """Convert a database row to a MatchRecord."""
        response_type = row["response_type"]
        return MatchRecord(
            creator_id=row["creator_id"],
            brand_id=row["brand_id"],
            match_id=row["match_id"],
            overall_score=int(row["overall_score"]),
            match_category=MatchCategory(row["match_category"]),
            status=MatchStatus(row["status"]),
            payload=json.loads(row["payload"]),
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
            last_status_update=_parse_datetime(row["last_status_update"]),
            outreach_sent_at=_parse_datetime(row["outreach_sent_at"]),
            response_type=ResponseType(response_type) if response_type else None,
        )
