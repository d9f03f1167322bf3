from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Any, Dict

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client


SERVER_PARAMS = StdioServerParameters(
    command=sys.executable,
    args=["-m", "web_content_retriever"],
    env=dict(os.environ),
)


async def main() -> None:
    if len(sys.argv) < 3:
        print("Usage: python scripts/call_tool.py <tool_name> '<json-args>'")
        raise SystemExit(1)

    tool_name = sys.argv[1]
    raw_args = sys.argv[2]

    try:
        params: Dict[str, Any] = json.loads(raw_args)
    except Exception as exc:
        print("Failed to parse JSON arguments")
        print(repr(exc))
        raise SystemExit(1)

    async with stdio_client(SERVER_PARAMS) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            try:
                result = await session.call_tool(tool_name, params)
            except Exception as exc:
                print("Tool call failed:")
                print(repr(exc))
                raise SystemExit(1)
            print("Tool call result:")
            for item in result.content:
                print(getattr(item, "text", item))
            if result.isError:
                raise SystemExit(2)


if __name__ == "__main__":
    asyncio.run(main())
