"""
Main entry point for the web content retriever.

Lifecycle:
- Config + Settings werden einmal beim Start gelesen
- HTTP client und stdio transport als async context manager
- SIGINT (KeyboardInterrupt) schließt beides und beendet mit Exit-Code 0
"""
from __future__ import annotations

import asyncio
import sys

from mcp.server.stdio import stdio_server

from .config import Settings, load_settings, resolve_config
from .reader_client import JinaReaderClient, create_http_client
from .server import WebContentServer, build_server, setup_logger


async def serve(settings: Settings) -> None:
    logger = setup_logger(settings.log_level)
    if not settings.api_token:
        logger.warning(
            "JINA_API_TOKEN environment variable is not set. Please obtain a token from "
            "https://jina.ai/ for reliable operation."
        )

    async with create_http_client(settings) as http_client:
        app = WebContentServer(JinaReaderClient(http_client, settings), logger=logger)
        server = build_server(app, name=settings.server_name)
        async with stdio_server() as (read_stream, write_stream):
            logger.info(f"Starting {settings.server_name} on stdio (reader: {settings.base_url})")
            await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("Transport closed")


def main() -> None:
    """Start the MCP server on stdin/stdout."""
    try:
        settings = load_settings(resolve_config())
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        print("\nServer shutdown requested...", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Failed to start web content retriever: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
