from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError

from . import __version__
from .arguments import DecodeFailure, decode_arguments
from .reader_client import JinaReaderClient, RemoteAuthError, RemoteServiceError


TOOL_NAME = "get_web_content_as_markdown"

GET_WEB_CONTENT_TOOL = types.Tool(
    name=TOOL_NAME,
    description=(
        "Retrieve web content as markdown using Jina AI API. Uses the JINA_API_TOKEN "
        "environment variable for authentication; requests are sent unauthenticated "
        "when it is not set."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "url": {
                "type": "string",
                "description": "The URL of the web page to convert to markdown",
            },
        },
        "required": ["url"],
    },
)

AUTH_ERROR_TEXT = (
    "Authentication error: Invalid or expired Jina API token. Please obtain a valid token "
    "from https://jina.ai/ and set it as the JINA_API_TOKEN environment variable."
)


class UnknownToolError(McpError):
    def __init__(self, name: str) -> None:
        super().__init__(types.ErrorData(code=types.METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))


class InvalidArgumentsError(McpError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(
            types.ErrorData(
                code=types.INVALID_PARAMS,
                message=f"Invalid arguments: url must be a valid URL string ({reason})",
            )
        )


def setup_logger(level_name: str = "INFO") -> logging.Logger:
    logger = logging.getLogger("web_content_retriever")
    if logger.handlers:
        return logger
    level = getattr(logging, level_name.upper(), logging.INFO)
    logger.setLevel(level)
    # stderr: stdout carries the protocol
    handler = logging.StreamHandler()

    class StructuredFormatter(logging.Formatter):
        """Fills in structured fields that a record did not set."""

        def format(self, record: logging.LogRecord) -> str:
            for field in ("tool", "url", "status", "duration_ms"):
                if not hasattr(record, field):
                    setattr(record, field, "")
            return super().format(record)

    handler.setFormatter(StructuredFormatter(
        '{"ts":"%(asctime)s","level":"%(levelname)s","tool":"%(tool)s","url":"%(url)s",'
        '"status":"%(status)s","duration_ms":"%(duration_ms)s","msg":"%(message)s"}'
    ))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _text_result(text: str, is_error: bool) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


class WebContentServer:
    """Validates tool calls and delegates them to the reader service."""

    def __init__(self, reader: JinaReaderClient, logger: Optional[logging.Logger] = None) -> None:
        self.reader = reader
        self.logger = logger or logging.getLogger("web_content_retriever")

    def list_tools(self) -> List[types.Tool]:
        return [GET_WEB_CONTENT_TOOL]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        if name != TOOL_NAME:
            raise UnknownToolError(name)
        if arguments is None:
            arguments = {"url": ""}
        decoded = decode_arguments(arguments)
        if isinstance(decoded, DecodeFailure):
            raise InvalidArgumentsError(decoded.reason)

        url = decoded.args.url
        log_extra: Dict[str, Any] = {"tool": name, "url": url}
        start = time.perf_counter()
        try:
            content = await self.reader.fetch(url)
        except RemoteAuthError as exc:
            log_extra.update(status=exc.status_code, duration_ms=_elapsed_ms(start))
            self.logger.warning("Reader service rejected credentials", extra=log_extra)
            return _text_result(AUTH_ERROR_TEXT, is_error=True)
        except RemoteServiceError as exc:
            log_extra.update(status=exc.status_code, duration_ms=_elapsed_ms(start))
            self.logger.info(f"Reader service error: {exc}", extra=log_extra)
            return _text_result(f"Error retrieving web content: {exc}", is_error=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log_extra.update(duration_ms=_elapsed_ms(start))
            self.logger.error(f"Reader request failed: {exc!r}", extra=log_extra)
            raise

        log_extra.update(duration_ms=_elapsed_ms(start))
        self.logger.info("Web content retrieved", extra=log_extra)
        return _text_result(content, is_error=False)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000.0, 2)


def build_server(app: WebContentServer, name: str = "web-content-retriever") -> Server:
    server: Server = Server(name, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return app.list_tools()

    # Registered directly instead of via @server.call_tool(): McpError from
    # validation must reach the client as a JSON-RPC error, not an isError result.
    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        result = await app.call_tool(req.params.name, req.params.arguments)
        return types.ServerResult(result)

    server.request_handlers[types.CallToolRequest] = handle_call_tool
    return server
