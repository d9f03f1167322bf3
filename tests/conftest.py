from __future__ import annotations

from contextlib import asynccontextmanager
from typing import List, Optional

import httpx
import pytest

from web_content_retriever.config import Settings
from web_content_retriever.reader_client import JinaReaderClient, create_http_client
from web_content_retriever.server import WebContentServer


class StubReader:
    """httpx.MockTransport handler that records every request it sees."""

    def __init__(self, status_code: int = 200, body: str = "# Example\n...", reason: Optional[str] = None) -> None:
        self.status_code = status_code
        self.body = body
        self.reason = reason
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        extensions = {"reason_phrase": self.reason.encode("ascii")} if self.reason is not None else {}
        return httpx.Response(self.status_code, text=self.body, extensions=extensions)


@pytest.fixture
def stub_factory():
    return StubReader


@pytest.fixture
def build_app():
    @asynccontextmanager
    async def _build(handler, settings: Optional[Settings] = None):
        settings = settings or Settings()
        async with create_http_client(settings, transport=httpx.MockTransport(handler)) as client:
            yield WebContentServer(JinaReaderClient(client, settings))

    return _build
