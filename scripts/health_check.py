from __future__ import annotations

import asyncio
import os
import sys

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client


SERVER_PARAMS = StdioServerParameters(
    command=sys.executable,
    args=["-m", "web_content_retriever"],
    env=dict(os.environ),
)
PROBE_URL = os.getenv("HEALTH_CHECK_URL", "https://example.com")


async def main() -> int:
    print("Spawning web content retriever over stdio...")
    async with stdio_client(SERVER_PARAMS) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()

            print("Fetching tool list...")
            tools = await session.list_tools()
            print(f"Found {len(tools.tools)} tools:")
            for tool in tools.tools:
                print(f" - {tool.name}")

            print(f"Calling get_web_content_as_markdown for {PROBE_URL}...")
            try:
                result = await session.call_tool("get_web_content_as_markdown", {"url": PROBE_URL})
            except Exception as exc:
                print("get_web_content_as_markdown FAILED")
                print(repr(exc))
                return 1
            if result.isError:
                print("get_web_content_as_markdown returned an error:")
                print(result.content[0].text if result.content else "")
                return 1
            print("get_web_content_as_markdown OK")
            return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
