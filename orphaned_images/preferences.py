"""
User preferences module for Orphaned Images MCP Server.

Preferences are a plain model handed to each operation; PreferencesStore
loads them once, merged over defaults, and persists them after every change.
The JSON file uses the host's camelCase keys (imageExtensions, ...).
"""

import json
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .config import DEFAULT_IMAGE_EXTENSIONS
from .utils import parse_extensions

logger = structlog.get_logger(__name__)


class Preferences(BaseModel):
    """User-editable scan and cleanup preferences."""

    # Unknown keys from the persisted file are kept and written back
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    image_extensions: str = DEFAULT_IMAGE_EXTENSIONS
    max_delete_count: int = Field(default=-1, ge=-1)
    move_to_trash: bool = True

    @field_validator("max_delete_count", mode="before")
    @classmethod
    def _parse_max_delete_count(cls, value: Any) -> int:
        """Accept text input; anything unparsable or below -1 means no limit."""
        try:
            count = int(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError):
            return -1
        return count if count >= -1 else -1

    @property
    def extension_filter(self) -> list[str]:
        return parse_extensions(self.image_extensions)


class PreferencesStore:
    """Loads, updates, and persists the preferences file."""

    def __init__(self, path: Path):
        self.path = path
        self._preferences: Preferences | None = None

    @property
    def preferences(self) -> Preferences:
        if self._preferences is None:
            return Preferences()
        return self._preferences

    async def load(self) -> Preferences:
        """Load the file merged over defaults. A missing or corrupt file yields defaults."""
        data: dict[str, Any] = {}
        if await aiofiles.os.path.exists(self.path):
            try:
                async with aiofiles.open(self.path, encoding="utf-8") as f:
                    loaded = json.loads(await f.read())
                if isinstance(loaded, dict):
                    data = loaded
                else:
                    logger.warning("preferences_invalid", path=str(self.path), error="root is not an object")
            except (OSError, ValueError) as e:
                logger.warning("preferences_load_failed", path=str(self.path), error=str(e))

        try:
            self._preferences = Preferences.model_validate(data)
        except ValueError as e:
            logger.warning("preferences_invalid", path=str(self.path), error=str(e))
            self._preferences = Preferences()
        return self._preferences

    async def save(self) -> None:
        """Persist the current preferences."""
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        async with aiofiles.open(self.path, mode="w", encoding="utf-8") as f:
            await f.write(json.dumps(self.preferences.model_dump(by_alias=True), indent=2))
        logger.debug("preferences_saved", path=str(self.path))

    async def update(self, **changes: Any) -> Preferences:
        """Apply changes (snake_case field names), validate, and persist.

        Raises:
            pydantic.ValidationError: If a changed value is invalid
        """
        merged = self.preferences.model_dump()
        merged.update(changes)
        self._preferences = Preferences.model_validate(merged)
        await self.save()
        logger.info("preferences_updated", changed=sorted(changes))
        return self._preferences
