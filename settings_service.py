"""Centralized settings loader for the application.

Infrastructure-level module: must not import from services/, repositories/,
config.py, or logging_config.py to avoid circular imports.
"""

import tomllib
import logging
from datetime import timedelta
from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).resolve().parent / "settings.toml"

_cached_settings: dict | None = None


def _load_settings(settings_path: Path = SETTINGS_PATH) -> dict:
    """Load and cache settings from the TOML file."""
    global _cached_settings
    if _cached_settings is not None:
        return _cached_settings
    try:
        with open(settings_path, "rb") as f:
            _cached_settings = tomllib.load(f)
            return _cached_settings
    except Exception as e:
        logger.error("Failed to load settings from %s: %s", settings_path, e)
        raise


def reset_settings_cache() -> None:
    """Drop the cached settings so the next read goes back to disk."""
    global _cached_settings
    _cached_settings = None


def get_rarity_weights():
    """Return the configured RarityWeights table.

    Module-level convenience function so callers don't need SettingsService.
    """
    from domain.models import RarityWeights

    return RarityWeights.from_mapping(_load_settings().get("rarity_weights", {}))


class SettingsService:
    """Read-only accessor for application settings.

    Settings are cached at module level after the first read.
    """

    def __init__(self, settings_path: str | Path = SETTINGS_PATH):
        self.settings = _load_settings(Path(settings_path))

    @property
    def log_level(self) -> str:
        return self.settings["env"]["log_level"]

    @property
    def store_backend(self) -> str:
        return self.settings.get("store", {}).get("backend", "firestore")

    @property
    def firebase(self) -> dict:
        return self.settings.get("firebase", {})

    @property
    def settings_collection(self) -> str:
        return self.settings["settings_doc"]["collection"]

    @property
    def settings_document_id(self) -> str:
        return self.settings["settings_doc"]["document_id"]

    @property
    def revert_after(self) -> timedelta:
        return timedelta(seconds=self.settings["settings_doc"]["revert_after_seconds"])

    @property
    def min_picks(self) -> int:
        return self.settings["generator"]["min_picks"]

    @property
    def max_picks(self) -> int:
        return self.settings["generator"]["max_picks"]

    @property
    def history_max_entries(self) -> int:
        return self.settings["history"]["max_entries"]

    @property
    def history_backend(self) -> str:
        return self.settings["history"].get("backend", "session")

    @property
    def history_dir(self) -> Path:
        """Directory of per-client history files; relative paths resolve against the project root."""
        path = Path(self.settings["history"]["dir"])
        if not path.is_absolute():
            path = SETTINGS_PATH.parent / path
        return path

    @property
    def admin_emails(self) -> list[str]:
        return [e.lower() for e in self.settings.get("auth", {}).get("admin_emails", [])]
