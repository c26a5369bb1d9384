"""Streamable HTTP transport and request-validation middleware for the MCP server."""

from __future__ import annotations

import re
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
import uvicorn
from starlette.datastructures import Headers
from starlette.responses import Response

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterable
    from contextlib import AbstractAsyncContextManager

    from mcp.server.fastmcp import FastMCP
    from starlette.applications import Starlette
    from starlette.types import ASGIApp, Receive, Scope, Send

    from rustdocs.config import Settings

log = structlog.get_logger()

SUPPORTED_PROTOCOL_VERSIONS: frozenset[str] = frozenset({"2025-11-25", "2025-06-18", "2025-03-26"})
_LOCALHOST_ORIGIN = re.compile(r"^https?://(localhost|127\.0\.0\.1|\[::1\])(:\d+)?$")


class MCPRequestGuard:
    """Pure ASGI middleware guarding the Streamable HTTP endpoint.

    Rejects, before the MCP app sees them:
    1. Requests whose ``Origin`` is neither localhost nor explicitly allowed
       (DNS rebinding protection).
    2. Requests announcing an unsupported ``MCP-Protocol-Version``.

    Implemented as pure ASGI (not BaseHTTPMiddleware) so that SSE streaming
    responses are never buffered by the middleware layer.
    """

    def __init__(self, app: ASGIApp, *, allowed_origins: Iterable[str] = ()) -> None:
        self.app = app
        self.allowed_origins = frozenset(origin.rstrip("/") for origin in allowed_origins)

    def origin_allowed(self, origin: str) -> bool:
        return bool(_LOCALHOST_ORIGIN.match(origin)) or origin.rstrip("/") in self.allowed_origins

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            headers = Headers(scope=scope)

            origin = headers.get("origin", "")
            if origin and not self.origin_allowed(origin):
                log.warning("http_origin_rejected", origin=origin)
                await Response("Forbidden", status_code=403)(scope, receive, send)
                return

            proto_version = headers.get("mcp-protocol-version", "")
            if proto_version and proto_version not in SUPPORTED_PROTOCOL_VERSIONS:
                await Response(
                    f"Unsupported protocol version: {proto_version}",
                    status_code=400,
                )(scope, receive, send)
                return

        await self.app(scope, receive, send)


def build_http_app(
    mcp: FastMCP,
    settings: Settings,
    hold_shared: Callable[[], AbstractAsyncContextManager[object]],
) -> MCPRequestGuard:
    """Streamable HTTP app whose lifespan also holds the process-wide state.

    The SDK app's own lifespan runs the session manager; ``hold_shared`` is
    entered around it, so the cache and HTTP client are created once before
    the first session and closed after the last.
    """
    app = mcp.streamable_http_app()
    session_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with hold_shared(), session_lifespan(app):
            yield

    app.router.lifespan_context = lifespan

    return MCPRequestGuard(app, allowed_origins=settings.server.allowed_origins)


def run_http_server(
    mcp: FastMCP,
    settings: Settings,
    hold_shared: Callable[[], AbstractAsyncContextManager[object]],
) -> None:
    """Start the MCP server with Streamable HTTP transport."""
    log.info(
        "http_server_starting",
        host=settings.server.host,
        port=settings.server.port,
        allowed_origins=settings.server.allowed_origins,
    )

    uvicorn.run(
        build_http_app(mcp, settings, hold_shared),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # Disable uvicorn's default logging; structlog handles it
    )
