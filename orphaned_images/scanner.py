"""
Orphan scanning functions for Orphaned Images MCP Server.

Contains the reference resolver and the scan that produces the ordered list
of unreferenced assets.
"""

import time

import structlog

from .canvas import CanvasSearch
from .interfaces import DocumentStore, LinkIndex
from .models import VaultFile
from .preferences import Preferences

logger = structlog.get_logger(__name__)


def is_linked(path: str, link_index: LinkIndex) -> bool:
    """Check whether any note in the link index links to the path (exact match)."""
    for targets in link_index.values():
        if targets and path in targets:
            return True
    return False


async def is_referenced(path: str, link_index: LinkIndex, canvas: CanvasSearch) -> bool:
    """Check whether a vault path is referenced by a note or a canvas document."""
    if is_linked(path, link_index):
        return True
    return await canvas.contains(path)


def filter_assets(files: list[VaultFile], extensions: list[str]) -> list[VaultFile]:
    """Keep files whose extension is in the filter (case-sensitive), in listing order."""
    allowed = set(extensions)
    return [f for f in files if f.extension in allowed]


async def scan_for_orphans(
    extensions: list[str],
    link_index: LinkIndex,
    assets: list[VaultFile],
    canvas: CanvasSearch,
) -> list[str]:
    """Collect the paths of candidate assets that nothing references.

    Args:
        extensions: Extension filter
        link_index: Resolved links, source path -> {target path: count}
        assets: All vault files, in listing order
        canvas: Canvas search for this scan

    Returns:
        Orphan paths, in listing order
    """
    unlinked: list[str] = []
    for asset in filter_assets(assets, extensions):
        if not await is_referenced(asset.path, link_index, canvas):
            unlinked.append(asset.path)
    return unlinked


async def find_orphans(store: DocumentStore, preferences: Preferences) -> list[str]:
    """Scan a store for orphaned assets using the given preferences."""
    start_time = time.time()

    files = await store.list_files()
    link_index = await store.resolved_links()
    extensions = preferences.extension_filter
    canvas = CanvasSearch(store, files)

    unlinked = await scan_for_orphans(extensions, link_index, files, canvas)

    duration_ms = round((time.time() - start_time) * 1000, 2)
    logger.info(
        "orphan_scan_completed",
        file_count=len(files),
        extensions=extensions,
        orphan_count=len(unlinked),
        duration_ms=duration_ms,
    )
    return unlinked
