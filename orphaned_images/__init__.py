# Orphaned Images MCP Server
#
# Modular package structure:
# - config.py: Configuration settings and constants
# - utils.py: Exceptions, path helpers, and validation
# - models.py: Pydantic models for vault files and action results
# - interfaces.py: DocumentStore protocol implemented by the host vault
# - vault.py: Filesystem-backed vault
# - links.py: Resolved link index built from Markdown notes
# - canvas.py: Path search inside canvas documents
# - scanner.py: Reference resolution and orphan scanning
# - report.py: Markdown report emitter
# - cleanup.py: Delete / trash action
# - notifications.py: User notification sink
# - preferences.py: User preferences and their persistence
# - tools.py: MCP tool handlers and server instance
# - main.py: Entry point and server initialization
