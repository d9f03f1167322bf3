"""
Tests for the dev stub reader service.
"""
from __future__ import annotations

from fastapi.testclient import TestClient

from dev_backend.main import app


client = TestClient(app)


def test_returns_markdown_for_target():
    response = client.get("/https://example.com/page")
    assert response.status_code == 200
    assert "# Stub page" in response.text
    assert "URL Source: https://example.com/page" in response.text
    assert "authenticated: no" in response.text


def test_reports_authorization():
    response = client.get("/https://example.com/", headers={"Authorization": "Bearer abc"})
    assert "authenticated: yes" in response.text


def test_simulated_status():
    assert client.get("/https://example.com/?status=401").status_code == 401
    assert client.get("/https://example.com/?status=500").status_code == 500
