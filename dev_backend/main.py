"""
Dev stub for the Jina Reader service.

Run with ``uvicorn dev_backend.main:app --port 8081`` and point
``reader.base_url`` at ``http://127.0.0.1:8081/``.

Target URLs containing ``status=<code>`` make the stub answer with that status.
"""
from __future__ import annotations

import os
import re

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

SERVICE_NAME = os.getenv("SERVICE_NAME", "reader-stub")
_STATUS_RE = re.compile(r"[?&]status=(\d{3})")

app = FastAPI(title=f"Dev stub reader for {SERVICE_NAME}")


@app.get("/{target:path}")
async def read(target: str, request: Request) -> PlainTextResponse:
    # Query string of the target URL arrives as the stub's own query
    full_target = target
    if request.url.query:
        full_target = f"{target}?{request.url.query}"
    match = _STATUS_RE.search(full_target)
    if match:
        code = int(match.group(1))
        return PlainTextResponse(f"stub status {code}", status_code=code)
    auth = request.headers.get("authorization", "")
    body = (
        f"Title: {full_target}\n\n"
        f"URL Source: {full_target}\n\n"
        "Markdown Content:\n"
        f"# Stub page\n\nServed by {SERVICE_NAME} (authenticated: {'yes' if auth else 'no'}).\n"
    )
    return PlainTextResponse(body)
