"""
MCP Tools module for Orphaned Images MCP Server.

Contains the MCP tool handlers (list_tools and call_tool) and the vault and
preferences instances they act on.
"""

import json
from typing import Any

import structlog
from mcp.server import Server
from mcp.types import (
    Resource,
    TextContent,
    Tool,
)
from pydantic import ValidationError

from .cleanup import delete_orphaned_images
from .config import settings
from .notifications import Notifier
from .preferences import PreferencesStore
from .report import find_orphaned_images
from .scanner import find_orphans
from .vault import Vault

logger = structlog.get_logger(__name__)

# Initialize server
server = Server("orphaned-images")

vault = Vault(settings.vault_path, settings.trash_folder)
preferences_store = PreferencesStore(settings.preferences_path)

SETTING_ARGUMENTS = ("image_extensions", "max_delete_count", "move_to_trash")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="orphans_report",
            description="Find images that no note or canvas references and write them to the "
                       "'Orphaned Images Report.md' note (replacing any previous report).",
            inputSchema={
                "type": "object",
                "properties": {
                    "embed": {
                        "type": "boolean",
                        "description": "Embed the images in the report (true) or list them as text links (false)",
                        "default": True
                    }
                }
            }
        ),
        Tool(
            name="orphans_list",
            description="List images that no note or canvas references, without writing anything.",
            inputSchema={
                "type": "object",
                "properties": {
                    "format": {
                        "type": "string",
                        "description": "Output format: 'json' for raw JSON, 'summary' for human-readable text (default: summary)",
                        "enum": ["json", "summary"],
                        "default": "summary"
                    }
                }
            }
        ),
        Tool(
            name="orphans_delete",
            description="Delete (or move to the vault trash) orphaned images, up to the configured "
                       "max delete count.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="orphans_settings",
            description="Show the orphan finder settings, or change them when values are given.",
            inputSchema={
                "type": "object",
                "properties": {
                    "image_extensions": {
                        "type": "string",
                        "description": "Comma-separated list of image extensions to look for (e.g. 'png, jpg')"
                    },
                    "max_delete_count": {
                        "type": "integer",
                        "description": "Maximum number of orphaned images to delete (-1 for no limit)"
                    },
                    "move_to_trash": {
                        "type": "boolean",
                        "description": "Move deleted images to the vault trash instead of deleting them permanently"
                    }
                }
            }
        ),
    ]


def _format_notifications(notifier: Notifier) -> str:
    return "\n".join(f"- {message}" for message in notifier.messages)


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    preferences = preferences_store.preferences

    if name == "orphans_report":
        embed = arguments.get("embed", True)
        notifier = Notifier()
        result = await find_orphaned_images(vault, notifier, preferences, embed)

        output = f"# Orphaned images: {result.orphan_count}\n\n"
        output += _format_notifications(notifier) + "\n"
        for path in notifier.opened:
            try:
                content = await vault.read(path)
            except OSError as e:
                logger.warning("report_open_failed", path=path, error=str(e))
                continue
            output += f"\n---\n\n{content}\n"

        return [TextContent(type="text", text=output)]

    elif name == "orphans_list":
        output_format = arguments.get("format", "summary")
        unlinked = await find_orphans(vault, preferences)

        if output_format == "json":
            return [TextContent(type="text", text=json.dumps({"orphans": unlinked, "count": len(unlinked)}, indent=2))]

        if not unlinked:
            return [TextContent(type="text", text="All images are linked!")]

        output = f"Found {len(unlinked)} orphaned images:\n\n"
        for path in unlinked:
            output += f"- {path}\n"
        return [TextContent(type="text", text=output)]

    elif name == "orphans_delete":
        notifier = Notifier()
        result = await delete_orphaned_images(vault, notifier, preferences)

        action = "Moved to trash" if result.moved_to_trash else "Deleted"
        output = f"# {action}: {result.deleted_count}\n\n"
        output += _format_notifications(notifier) + "\n"
        if result.failed:
            output += f"\n**Failed:** {len(result.failed)}\n"
        if result.skipped:
            output += f"**Skipped (no longer in vault):** {len(result.skipped)}\n"

        return [TextContent(type="text", text=output)]

    elif name == "orphans_settings":
        changes = {key: arguments[key] for key in SETTING_ARGUMENTS if key in arguments}

        if changes:
            try:
                preferences = await preferences_store.update(**changes)
            except ValidationError as e:
                return [TextContent(type="text", text=f"Error: Invalid settings: {e}")]
            except OSError as e:
                logger.error("preferences_save_failed", path=str(preferences_store.path), error=str(e))
                return [TextContent(type="text", text=f"Error: Failed to save settings: {e}")]

        output = "# Orphaned Images Settings\n\n"
        output += f"**Image extensions:** {preferences.image_extensions}\n"
        output += f"**Max delete count:** {preferences.max_delete_count}\n"
        output += f"**Move to trash:** {preferences.move_to_trash}\n"

        return [TextContent(type="text", text=output)]

    return [TextContent(type="text", text=f"Unknown tool: {name}")]


# ============== Resources ==============

@server.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return [
        Resource(
            uri="orphans://settings",
            name="Orphaned Images Settings",
            description="Current orphan finder settings",
            mimeType="application/json"
        ),
    ]


@server.read_resource()
async def read_resource(uri: Any) -> str:
    """Read a resource."""
    if str(uri) == "orphans://settings":
        return json.dumps(preferences_store.preferences.model_dump(by_alias=True), indent=2)

    return json.dumps({"error": f"Unknown resource: {uri}"})
