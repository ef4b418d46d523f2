"""
Utility functions and compiled regex patterns for Orphaned Images MCP Server.

Contains exceptions, path helpers, extension parsing, and vault path validation.
"""

import posixpath
import re
from pathlib import Path

SPACE_PATTERN = re.compile(r' ')


# ============== Exceptions ==============

class PathValidationError(Exception):
    """Raised when path validation fails."""
    pass


class VaultIOError(OSError):
    """Raised when reading, writing, or deleting a vault file fails."""
    pass


class CanvasParseError(ValueError):
    """Raised when a canvas document is not a valid JSON object."""
    pass


class VaultFileNotFoundError(LookupError):
    """Raised when a path no longer resolves to a file in the vault."""
    pass


# ============== Helper Functions ==============

def parse_extensions(value: str) -> list[str]:
    """Parse a comma-separated extension list.

    Entries are whitespace-trimmed; empty entries and repeats are dropped.
    Case is preserved: matching against file extensions is case-sensitive.
    """
    extensions: list[str] = []
    for part in value.split(","):
        ext = part.strip()
        if ext and ext not in extensions:
            extensions.append(ext)
    return extensions


def encode_image_path(image_path: str) -> str:
    """Encode a vault path for use as a Markdown link target."""
    return SPACE_PATTERN.sub('%20', image_path)


def file_name(path: str) -> str:
    """Return the final '/'-delimited segment of a vault path."""
    return path.rsplit("/", 1)[-1]


def file_extension(name: str) -> str:
    """Return the text after the last '.' of a file name, or '' if there is none."""
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return ""
    return ext


def path_variants(path: str) -> tuple[str, ...]:
    """Spellings under which a document may embed a vault path.

    Order: literal path, path without a leading '/', spaces as '%20',
    encode_image_path() output, bare file name.
    """
    return (
        path,
        path[1:] if path.startswith("/") else path,
        path.replace(" ", "%20"),
        encode_image_path(path),
        file_name(path),
    )


def parent_folder(path: str) -> str:
    """Return the folder part of a vault path ('' for the vault root)."""
    return posixpath.dirname(path)


# ============== Security Validation ==============

def validate_path_within_vault(path_str: str, vault_path: Path, follow_symlinks: bool = True) -> Path:
    """Validate that a path is safely within the vault directory.

    Args:
        path_str: The vault-relative path to validate
        vault_path: The vault root path
        follow_symlinks: Resolve a symlink at the final segment to its target.
            When False only the parent folder is resolved, so the returned
            path names the link itself.

    Returns:
        The validated absolute Path

    Raises:
        PathValidationError: If the path attempts to escape the vault
    """
    if not path_str or not path_str.strip():
        raise PathValidationError("Path cannot be empty")

    # Reject paths with ".." components (path traversal attempt)
    if ".." in Path(path_str).parts:
        raise PathValidationError("Path traversal detected: '..' is not allowed")

    # Reject absolute paths
    if path_str.startswith("/") or (len(path_str) > 1 and path_str[1] == ":"):
        raise PathValidationError("Absolute paths are not allowed")

    joined = vault_path / path_str
    if follow_symlinks:
        full_path = joined.resolve()
    else:
        full_path = joined.parent.resolve() / joined.name
    vault_resolved = vault_path.resolve()

    try:
        full_path.relative_to(vault_resolved)
    except ValueError:
        raise PathValidationError(f"Path escapes vault directory: {path_str}")

    return full_path
