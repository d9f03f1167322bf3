from __future__ import annotations

from typing import Optional

import httpx

from .config import Settings


class RemoteServiceError(Exception):
    """Reader service answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteAuthError(RemoteServiceError):
    """401 from the reader service."""
    pass


class RemoteRequestError(RemoteServiceError):
    """Any other non-2xx status."""
    pass


def create_http_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    # Redirects are followed; only the final status decides success
    return httpx.AsyncClient(
        headers=settings.request_headers(),
        timeout=httpx.Timeout(settings.timeout_seconds),
        follow_redirects=True,
        transport=transport,
    )


class JinaReaderClient:
    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        self.http_client = http_client
        self.settings = settings

    def reader_url(self, url: str) -> str:
        # Appended verbatim, no escaping, so query strings survive as-is
        return f"{self.settings.base_url}{url}"

    async def fetch(self, url: str) -> str:
        """
        Fetch ``url`` through the reader service and return the body.

        httpx transport errors (DNS, connect, timeout) are not caught here.
        """
        response = await self.http_client.get(self.reader_url(url))
        if response.is_success:
            return response.text
        status = response.status_code
        if status == 401:
            raise RemoteAuthError("Unauthorized", status)
        message = response.reason_phrase or f"Request failed with status code {status}"
        raise RemoteRequestError(message, status)
