"""Convenience entry points wiring settings, storage and the orchestrator."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from brand_match.config.settings import Settings, get_settings
from brand_match.errors import MalformedBrandError
from brand_match.matching.config import get_matching_config
from brand_match.matching.orchestrator import (
    MatchOptions,
    MatchOrchestrator,
    MatchResults,
)
from brand_match.store.profiles import FileProfileRepository
from brand_match.store.repository import SQLiteBrandRepository, SQLiteMatchStore
from brand_match.utils.logging import configure_logging, get_logger

logger = get_logger("service")


async def import_brands(
    records: Iterable[Mapping[str, Any]],
    *,
    settings: Settings | None = None,
) -> int:
    """Store raw brand records in the configured database.

    Records without a usable id are skipped with a warning.

    Returns:
        Number of records stored.
    """
    settings = settings or get_settings()
    repository = SQLiteBrandRepository(settings.database_path)
    await repository.initialize()

    saved = 0
    try:
        for record in records:
            try:
                await repository.save_brand(record)
            except MalformedBrandError as e:
                logger.warning("Skipping brand record: %s", e)
                continue
            saved += 1
    finally:
        await repository.close()

    logger.info("Imported %d brand record(s) into %s", saved, settings.database_path)
    return saved


async def run_matching(
    creator_id: str,
    *,
    settings: Settings | None = None,
    options: MatchOptions | None = None,
) -> MatchResults:
    """Match one creator against the stored brand catalog."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, log_file=settings.log_file)

    brands = SQLiteBrandRepository(settings.database_path)
    store = SQLiteMatchStore(settings.database_path)
    await brands.initialize()
    await store.initialize()

    try:
        orchestrator = MatchOrchestrator(
            profiles=FileProfileRepository(settings.profiles_dir),
            brands=brands,
            store=store,
            config=get_matching_config(),
        )
        return await orchestrator.get_matches_for_creator(creator_id, options)
    finally:
        await store.close()
        await brands.close()
