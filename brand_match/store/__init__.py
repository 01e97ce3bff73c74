"""Persistence for brands, creator profiles and match lifecycles."""

from brand_match.store.models import MatchRecord, ResponseType
from brand_match.store.profiles import FileProfileRepository
from brand_match.store.repository import SQLiteBrandRepository, SQLiteMatchStore
from brand_match.store.service import MatchTrackingService, can_transition

__all__ = [
    "FileProfileRepository",
    "MatchRecord",
    "MatchTrackingService",
    "ResponseType",
    "SQLiteBrandRepository",
    "SQLiteMatchStore",
    "can_transition",
]
