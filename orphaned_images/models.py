"""
Pydantic models for Orphaned Images MCP Server.

Contains data models for vault files and the results of report and delete actions.
"""

from pydantic import BaseModel


class VaultFile(BaseModel):
    """Model for a file listed from the vault."""

    path: str
    name: str
    extension: str


class ReportResult(BaseModel):
    """Model for the result of a report action."""

    success: bool
    path: str = ""
    orphans: list[str] = []
    error: str = ""

    @property
    def orphan_count(self) -> int:
        """Number of orphans found by the scan."""
        return len(self.orphans)


class DeleteResult(BaseModel):
    """Model for the result of a delete action."""

    deleted: list[str] = []
    failed: list[str] = []
    skipped: list[str] = []
    moved_to_trash: bool = False

    @property
    def deleted_count(self) -> int:
        """Number of files deleted or moved to trash."""
        return len(self.deleted)
