"""Tests for MCPRequestGuard (Streamable HTTP transport).

Each test exercises the middleware directly via httpx's ASGI transport so no
real server is started. The inner app is a trivial 200-OK echo that never
runs if the middleware short-circuits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from rustdocs.transport import SUPPORTED_PROTOCOL_VERSIONS, MCPRequestGuard

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _ok_app(scope: Scope, receive: Receive, send: Send) -> None:
    await send({"type": "http.response.start", "status": 200, "headers": []})
    await send({"type": "http.response.body", "body": b"ok"})


def _client(app: ASGIApp) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://localhost",
    )


# ---------------------------------------------------------------------------
# Origin validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "origin",
    [
        "http://localhost",
        "http://localhost:8080",
        "https://localhost:9000",
        "http://127.0.0.1:3000",
        "http://[::1]:8080",
    ],
)
async def test_origin_localhost_allowed(origin: str) -> None:
    async with _client(MCPRequestGuard(_ok_app)) as client:
        response = await client.get("/mcp", headers={"Origin": origin})
    assert response.status_code == 200


@pytest.mark.parametrize(
    "origin",
    [
        "https://evil.com",
        "http://attacker.localhost.evil.com",
        "http://localhost.evil.com:8080",
        "http://192.168.1.1",
    ],
)
async def test_origin_external_blocked(origin: str) -> None:
    async with _client(MCPRequestGuard(_ok_app)) as client:
        response = await client.get("/mcp", headers={"Origin": origin})
    assert response.status_code == 403


async def test_configured_origin_allowed() -> None:
    app = MCPRequestGuard(_ok_app, allowed_origins=["https://ide.example.com/"])
    async with _client(app) as client:
        response = await client.get("/mcp", headers={"Origin": "https://ide.example.com"})
    assert response.status_code == 200


async def test_no_origin_header_allowed() -> None:
    """CLI tools and non-browser clients send no Origin header."""
    async with _client(MCPRequestGuard(_ok_app)) as client:
        response = await client.get("/mcp")
    assert response.status_code == 200


# ---------------------------------------------------------------------------
# Protocol version validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("version", sorted(SUPPORTED_PROTOCOL_VERSIONS))
async def test_known_protocol_version_allowed(version: str) -> None:
    async with _client(MCPRequestGuard(_ok_app)) as client:
        response = await client.get("/mcp", headers={"MCP-Protocol-Version": version})
    assert response.status_code == 200


async def test_unknown_protocol_version_blocked() -> None:
    async with _client(MCPRequestGuard(_ok_app)) as client:
        response = await client.get("/mcp", headers={"MCP-Protocol-Version": "1999-01-01"})
    assert response.status_code == 400
    assert "1999-01-01" in response.text


async def test_origin_checked_before_protocol_version() -> None:
    async with _client(MCPRequestGuard(_ok_app)) as client:
        response = await client.get(
            "/mcp",
            headers={"Origin": "https://evil.com", "MCP-Protocol-Version": "1999-01-01"},
        )
    assert response.status_code == 403
