"""
Main entry point for Orphaned Images MCP Server.

This module provides the main() function and server initialization.
"""

import asyncio

from mcp.server.stdio import stdio_server

from .config import settings
from .logging import configure_logging, get_logger
from .tools import preferences_store, server


def main():
    """Main entry point."""
    configure_logging(settings.log_level)
    logger = get_logger(__name__)

    async def run():
        await preferences_store.load()
        logger.info("server_starting", vault_path=str(settings.vault_path))
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())

    asyncio.run(run())


if __name__ == "__main__":
    main()
