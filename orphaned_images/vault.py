"""
Filesystem vault module for Orphaned Images MCP Server.

Contains the Vault class, the DocumentStore backed by a vault directory on disk.
"""

from pathlib import Path

import aiofiles
import aiofiles.os
import structlog

from .links import build_link_index
from .models import VaultFile
from .utils import (
    PathValidationError,
    VaultIOError,
    file_extension,
    validate_path_within_vault,
)

logger = structlog.get_logger(__name__)


class Vault:
    """Vault directory on disk.

    Hidden files and folders (any path segment starting with '.') are not
    listed, which keeps `.obsidian` and the local trash out of scans.
    """

    def __init__(self, vault_path: Path, trash_folder: str = ".trash"):
        self.vault_path = vault_path
        self.trash_folder = trash_folder

    def _resolve(self, path: str, follow_symlinks: bool = True) -> Path:
        try:
            return validate_path_within_vault(path, self.vault_path, follow_symlinks)
        except PathValidationError as e:
            raise VaultIOError(str(e)) from e

    def _to_vault_file(self, rel_path: Path) -> VaultFile:
        return VaultFile(
            path=rel_path.as_posix(),
            name=rel_path.name,
            extension=file_extension(rel_path.name),
        )

    async def list_files(self) -> list[VaultFile]:
        """List every visible file, sorted by vault path."""
        files: list[VaultFile] = []
        # rglob is sync
        for file_path in self.vault_path.rglob("*"):
            rel_path = file_path.relative_to(self.vault_path)
            if any(part.startswith(".") for part in rel_path.parts):
                continue
            if not file_path.is_file():
                continue
            files.append(self._to_vault_file(rel_path))

        files.sort(key=lambda f: f.path)
        return files

    async def resolved_links(self) -> dict[str, dict[str, int]]:
        return await build_link_index(self)

    async def read(self, path: str) -> str:
        file_path = self._resolve(path)
        try:
            async with aiofiles.open(file_path, encoding="utf-8") as f:
                return await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise VaultIOError(f"Failed to read {path}: {e}") from e

    async def write(self, path: str, content: str) -> None:
        """Create or overwrite a file, creating parent folders as needed."""
        file_path = self._resolve(path)
        try:
            await aiofiles.os.makedirs(file_path.parent, exist_ok=True)
            async with aiofiles.open(file_path, mode="w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            raise VaultIOError(f"Failed to write {path}: {e}") from e

    async def delete(self, path: str) -> None:
        file_path = self._resolve(path, follow_symlinks=False)
        try:
            await aiofiles.os.remove(file_path)
        except OSError as e:
            raise VaultIOError(f"Failed to delete {path}: {e}") from e

    async def trash(self, path: str) -> None:
        """Move a file into the vault's trash folder.

        The trash is flat: name clashes get ' 1', ' 2', ... appended to the stem.
        A symlink is moved as a link; its target stays in place.
        """
        file_path = self._resolve(path, follow_symlinks=False)
        trash_dir = self.vault_path / self.trash_folder
        try:
            await aiofiles.os.makedirs(trash_dir, exist_ok=True)
            target = trash_dir / file_path.name
            counter = 1
            while target.exists() or target.is_symlink():
                target = trash_dir / f"{file_path.stem} {counter}{file_path.suffix}"
                counter += 1
            await aiofiles.os.rename(file_path, target)
        except OSError as e:
            raise VaultIOError(f"Failed to trash {path}: {e}") from e

        logger.debug("file_trashed", path=path, target=str(target.relative_to(self.vault_path)))

    async def get_file(self, path: str) -> VaultFile | None:
        """Resolve a vault path to a live regular file.

        Security: paths escaping the vault resolve to None.
        A symlink resolves to itself, never to the file it points at.
        """
        try:
            file_path = validate_path_within_vault(path, self.vault_path, follow_symlinks=False)
        except PathValidationError:
            return None

        if not await aiofiles.os.path.isfile(file_path):
            return None
        return self._to_vault_file(file_path.relative_to(self.vault_path.resolve()))
