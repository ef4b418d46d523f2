"""
Collaborator interface for Orphaned Images MCP Server.

The scanner, report emitter, and cleanup action only talk to the vault
through this protocol, so any host store (the filesystem Vault, an
in-memory store in tests) can back them.
"""

from typing import Mapping, Protocol

from .models import VaultFile

# source note path -> {target path: link count}
LinkIndex = Mapping[str, Mapping[str, int]]


class DocumentStore(Protocol):
    """File listing, link index, and file primitives of a vault."""

    async def list_files(self) -> list[VaultFile]:
        """All files, in a stable order."""
        ...

    async def resolved_links(self) -> dict[str, dict[str, int]]:
        """Resolved forward links of every note."""
        ...

    async def read(self, path: str) -> str:
        """Raises VaultIOError when the file cannot be read."""
        ...

    async def write(self, path: str, content: str) -> None:
        """Create or overwrite a file. Raises VaultIOError."""
        ...

    async def delete(self, path: str) -> None:
        """Delete a file permanently. Raises VaultIOError."""
        ...

    async def trash(self, path: str) -> None:
        """Move a file to the trash. Raises VaultIOError."""
        ...

    async def get_file(self, path: str) -> VaultFile | None:
        """Resolve a path to a live file, or None."""
        ...
