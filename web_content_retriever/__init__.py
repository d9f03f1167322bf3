"""web-content-retriever: MCP server that returns web pages as markdown via the Jina Reader API."""

__version__ = "1.0.0"

__all__ = ["__version__"]
