"""
End-to-end tests over an in-memory MCP client session.
"""
from __future__ import annotations

import httpx
import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError
from mcp.shared.memory import create_connected_server_and_client_session

from web_content_retriever.server import TOOL_NAME, build_server


@pytest.mark.asyncio
async def test_list_tools(build_app, stub_factory):
    async with build_app(stub_factory()) as app:
        async with create_connected_server_and_client_session(build_server(app)) as session:
            result = await session.list_tools()
    assert [tool.name for tool in result.tools] == [TOOL_NAME]
    assert result.tools[0].inputSchema["required"] == ["url"]


@pytest.mark.asyncio
async def test_call_tool_success(build_app, stub_factory):
    stub = stub_factory(body="# Example\n...")
    async with build_app(stub) as app:
        async with create_connected_server_and_client_session(build_server(app)) as session:
            result = await session.call_tool(TOOL_NAME, {"url": "https://example.com"})
    assert result.isError is False
    assert result.content[0].text == "# Example\n..."
    assert len(stub.requests) == 1


@pytest.mark.asyncio
async def test_unknown_tool_is_method_not_found(build_app, stub_factory):
    stub = stub_factory()
    async with build_app(stub) as app:
        async with create_connected_server_and_client_session(build_server(app)) as session:
            with pytest.raises(McpError) as exc_info:
                await session.call_tool("unknown_tool", {"url": "https://example.com"})
    assert exc_info.value.error.code == types.METHOD_NOT_FOUND
    assert stub.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("arguments", [None, {"url": "not a url"}, {"url": 42}])
async def test_bad_arguments_are_invalid_params(build_app, stub_factory, arguments):
    stub = stub_factory()
    async with build_app(stub) as app:
        async with create_connected_server_and_client_session(build_server(app)) as session:
            with pytest.raises(McpError) as exc_info:
                await session.call_tool(TOOL_NAME, arguments)
    assert exc_info.value.error.code == types.INVALID_PARAMS
    assert stub.requests == []


@pytest.mark.asyncio
async def test_auth_error_is_tool_result(build_app, stub_factory):
    async with build_app(stub_factory(status_code=401)) as app:
        async with create_connected_server_and_client_session(build_server(app)) as session:
            result = await session.call_tool(TOOL_NAME, {"url": "https://example.com"})
    assert result.isError is True
    assert "Authentication error" in result.content[0].text


@pytest.mark.asyncio
async def test_network_fault_is_protocol_error(build_app):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection reset", request=request)

    async with build_app(handler) as app:
        async with create_connected_server_and_client_session(build_server(app)) as session:
            with pytest.raises(McpError) as exc_info:
                await session.call_tool(TOOL_NAME, {"url": "https://example.com"})
    assert "connection reset" in exc_info.value.error.message


@pytest.mark.asyncio
async def test_tools_capability_advertised(build_app, stub_factory):
    async with build_app(stub_factory()) as app:
        server = build_server(app, name="reader-test")
        options = server.create_initialization_options()
    assert options.server_name == "reader-test"
    assert options.capabilities.tools is not None
