"""
Cleanup functions for Orphaned Images MCP Server.

Deletes or trashes orphaned assets, up to the configured maximum.
"""

import structlog

from .interfaces import DocumentStore
from .models import DeleteResult, VaultFile
from .notifications import Notifier
from .preferences import Preferences
from .scanner import find_orphans
from .utils import VaultFileNotFoundError

logger = structlog.get_logger(__name__)


async def resolve_live_file(store: DocumentStore, path: str) -> VaultFile:
    """Resolve a scanned path to the file currently in the store.

    Raises:
        VaultFileNotFoundError: If the path no longer names a file
    """
    live_file = await store.get_file(path)
    if live_file is None:
        raise VaultFileNotFoundError(path)
    return live_file


async def delete_orphans(
    store: DocumentStore,
    notifier: Notifier,
    unlinked: list[str],
    max_count: int,
    move_to_trash: bool,
) -> DeleteResult:
    """Delete or trash orphans in scan order, stopping after max_count deletions.

    Args:
        store: Vault to delete from
        notifier: Sink for user notifications
        unlinked: Orphan paths from a scan
        max_count: Maximum number of files to remove; negative means no limit
        move_to_trash: Trash files instead of deleting them permanently

    Returns:
        DeleteResult listing deleted, failed, and skipped paths
    """
    result = DeleteResult(moved_to_trash=move_to_trash)

    for image_path in unlinked:
        if max_count >= 0 and result.deleted_count >= max_count:
            break

        try:
            live_file = await resolve_live_file(store, image_path)
        except VaultFileNotFoundError:
            # Gone since the scan, nothing to delete
            logger.debug("orphan_vanished", path=image_path)
            result.skipped.append(image_path)
            continue

        try:
            if move_to_trash:
                await store.trash(live_file.path)
            else:
                await store.delete(live_file.path)
        except OSError as e:
            logger.error("orphan_delete_failed", path=image_path, error=str(e))
            notifier.notify(f"Failed to delete the orphaned image: {image_path}")
            result.failed.append(image_path)
            continue

        logger.info("orphan_deleted", path=image_path, moved_to_trash=move_to_trash)
        if move_to_trash:
            notifier.notify(f"Moved orphaned image to trash: {image_path}")
        else:
            notifier.notify(f"Deleted orphaned image: {image_path}")
        result.deleted.append(image_path)

    if result.deleted_count == 0:
        notifier.notify("No orphaned images found to delete.")

    return result


async def delete_orphaned_images(
    store: DocumentStore,
    notifier: Notifier,
    preferences: Preferences,
) -> DeleteResult:
    """Scan the store and delete orphans as the preferences direct."""
    unlinked = await find_orphans(store, preferences)
    return await delete_orphans(
        store,
        notifier,
        unlinked,
        preferences.max_delete_count,
        preferences.move_to_trash,
    )
