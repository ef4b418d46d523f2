"""
Configuration module for Orphaned Images MCP Server.

Uses pydantic-settings for configuration management with environment variable support.
Environment variables use ORPHANS_ prefix (e.g., ORPHANS_VAULT_PATH).
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_vault_path() -> Path:
    """Get default vault path."""
    return Path.home() / "Documents" / "Knowledge"


def _get_default_preferences_path() -> Path:
    """Get default path of the persisted user preferences."""
    return Path.home() / ".orphaned-images" / "data.json"


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Environment variables:
    - ORPHANS_VAULT_PATH: Path to the Obsidian vault
    - ORPHANS_PREFERENCES_PATH: Path to the JSON file holding user preferences
    - ORPHANS_TRASH_FOLDER: Vault folder receiving trashed files
    - ORPHANS_LOG_LEVEL: Minimum log level (DEBUG, INFO, WARNING, ERROR)
    """

    vault_path: Path = Field(default_factory=_get_default_vault_path)
    preferences_path: Path = Field(default_factory=_get_default_preferences_path)
    trash_folder: str = ".trash"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="ORPHANS_")


# Global settings instance
settings = Settings()

# Name of the report note, created at the vault root
REPORT_NAME = "Orphaned Images Report.md"

NOTE_EXTENSION = "md"
CANVAS_EXTENSION = "canvas"

DEFAULT_IMAGE_EXTENSIONS = "png, jpg, jpeg, gif, svg, bmp"

# Canvas node types whose "file" property points at a vault file
FILE_NODE_TYPES = frozenset({"file", "image", "media"})
