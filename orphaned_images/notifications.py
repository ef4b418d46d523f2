"""
User notification sink for Orphaned Images MCP Server.

Collects the messages an action wants to show the user, plus the documents
it asks to open, so the tool layer can hand them back to the client.
"""

import structlog

logger = structlog.get_logger(__name__)


class Notifier:
    """Fire-and-forget notifications for one user action."""

    def __init__(self):
        self.messages: list[str] = []
        self.opened: list[str] = []

    def notify(self, message: str) -> None:
        logger.info("user_notified", message=message)
        self.messages.append(message)

    def open_document(self, path: str) -> None:
        """Ask the host to show a document to the user."""
        logger.debug("document_opened", path=path)
        self.opened.append(path)
