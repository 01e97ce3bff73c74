"""Creator profile loading from YAML or JSON files."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import yaml

from brand_match.config.settings import get_settings
from brand_match.errors import CreatorNotFoundError
from brand_match.matching.models import CreatorProfile

PROFILE_SUFFIXES = (".yaml", ".yml", ".json")


class FileProfileRepository:
    """Load creator profiles stored as `<profiles_dir>/<creator_id>.<ext>`."""

    def __init__(self, profiles_dir: Path | str | None = None) -> None:
        if profiles_dir is None:
            profiles_dir = get_settings().profiles_dir
        self.profiles_dir = Path(profiles_dir)

    def profile_path(self, creator_id: str) -> Path | None:
        """Return the first existing profile file for a creator, if any."""
        if not creator_id or Path(creator_id).name != creator_id:
            return None
        for suffix in PROFILE_SUFFIXES:
            path = self.profiles_dir / f"{creator_id}{suffix}"
            if path.exists():
                return path
        return None

    async def get_creator_profile(self, creator_id: str) -> CreatorProfile:
        """Load and validate a creator profile.

        File reads and parsing run in a worker thread.

        Raises:
            CreatorNotFoundError: If no profile file exists for the creator.
            ValueError: If the file is not a valid YAML/JSON mapping.
            pydantic.ValidationError: If the data is not a valid profile.
        """
        path = self.profile_path(creator_id)
        if path is None:
            raise CreatorNotFoundError(creator_id)
        return await asyncio.to_thread(self.load_profile, path, creator_id)

    def load_profile(
        self, path: Path | str, creator_id: str | None = None
    ) -> CreatorProfile:
        """Load a profile file; `creator_id` fills in a missing `id`."""
        profile_path = Path(path)
        if profile_path.suffix.lower() == ".json":
            data = self._load_json(profile_path)
        else:
            data = self._load_yaml(profile_path)

        if creator_id is not None:
            data.setdefault("id", creator_id)
        return CreatorProfile.model_validate(data)

    def save_profile(self, profile: CreatorProfile) -> Path:
        """Write a profile as YAML and return its path."""
        self.profiles_dir.mkdir(parents=True, exist_ok=True)
        path = self.profiles_dir / f"{profile.id}.yaml"
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(profile.to_dict(), f, sort_keys=False, allow_unicode=True)
        return path

    def _load_yaml(self, path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML profile: {path}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Profile must be a mapping/dict: {path}")
        return data

    def _load_json(self, path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON profile: {path}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Profile must be a mapping/dict: {path}")
        return data
