"""
Report functions for Orphaned Images MCP Server.

Renders the orphan list as a Markdown note and writes it to the vault.
"""

import structlog

from .config import REPORT_NAME
from .interfaces import DocumentStore
from .models import ReportResult
from .notifications import Notifier
from .preferences import Preferences
from .scanner import find_orphans
from .utils import encode_image_path

logger = structlog.get_logger(__name__)

REPORT_HEADER = "# Orphaned Images\n\nThese images are not linked in any note:\n\n"


def format_report_line(image_path: str, embed: bool) -> str:
    """Format one report bullet: an image embed, or a text link named after the path."""
    encoded_path = encode_image_path(image_path)
    if embed:
        return f"- ![]({encoded_path})"
    return f"- [{image_path}]({encoded_path})"


def render_report(unlinked: list[str], embed: bool) -> str:
    """Render the report note body, one line per orphan in scan order."""
    return REPORT_HEADER + "\n".join(format_report_line(p, embed) for p in unlinked)


async def emit_report(
    store: DocumentStore,
    notifier: Notifier,
    unlinked: list[str],
    embed: bool,
    report_name: str = REPORT_NAME,
) -> ReportResult:
    """Write the orphan report, replacing any previous one, and open it.

    Nothing is written when there are no orphans. Write failures are logged
    and reported to the user, never raised.
    """
    if not unlinked:
        notifier.notify("All images are linked!")
        return ReportResult(success=True)

    content = render_report(unlinked, embed)

    try:
        await store.write(report_name, content)
    except OSError as e:
        logger.error("report_write_failed", path=report_name, error=str(e))
        notifier.notify("Failed to create or update note with orphaned images.")
        return ReportResult(success=False, path=report_name, orphans=unlinked, error=str(e))

    logger.info("report_written", path=report_name, orphan_count=len(unlinked), embed=embed)
    notifier.notify(f'Note "{report_name}" created or updated with orphaned images.')
    notifier.notify(f"Found {len(unlinked)} orphaned images. Note created or updated with details.")
    notifier.open_document(report_name)

    return ReportResult(success=True, path=report_name, orphans=unlinked)


async def find_orphaned_images(
    store: DocumentStore,
    notifier: Notifier,
    preferences: Preferences,
    embed: bool,
) -> ReportResult:
    """Scan the store and write the orphan report."""
    unlinked = await find_orphans(store, preferences)
    return await emit_report(store, notifier, unlinked, embed)
