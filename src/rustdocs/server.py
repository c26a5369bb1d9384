"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Build the process-wide AppState and hand it to every session via the lifespan
- Register tools and prompts
- Start the correct transport (stdio or HTTP)
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager, suppress
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import rustdocs.tools.get_crate_overview as t_overview
import rustdocs.tools.get_item_docs as t_item_docs
import rustdocs.tools.list_modules as t_list_modules
import rustdocs.tools.search_crates as t_search
from rustdocs import __version__
from rustdocs.cache import CachePolicy, TTLCache
from rustdocs.config import Settings
from rustdocs.crates_io import CratesIoClient
from rustdocs.errors import RustDocsError
from rustdocs.fetcher import DocsFetcher, build_http_client
from rustdocs.prompts import render_prompt
from rustdocs.schedulers import run_cache_sweeper
from rustdocs.state import AppState, Extractors
from rustdocs.transport import run_http_server

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable

    import httpx

log = structlog.get_logger()

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout carries the MCP JSON-RPC stream; logs go to stderr
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def build_state(settings: Settings, http_client: httpx.AsyncClient) -> AppState:
    """Wire the cache, fetcher, registry client and extraction strategies."""
    cache = TTLCache()
    policy = CachePolicy.from_settings(settings.cache)
    return AppState(
        settings=settings,
        http_client=http_client,
        cache=cache,
        policy=policy,
        fetcher=DocsFetcher(http_client, settings.docs),
        crates_io=CratesIoClient(http_client, cache, policy, settings.registry),
        extractors=Extractors.from_settings(settings.extraction, settings.docs),
    )


class SharedState:
    """The one AppState of this process, handed to every MCP session.

    FastMCP enters its lifespan once per session, and the Streamable HTTP
    transport runs a session per client, so the shared resources cannot live
    in the lifespan itself. The transport runner opens them once (``running``)
    and closes them at shutdown; a session that starts first, such as an
    in-memory session, opens them lazily and they stay open until ``close``.
    """

    def __init__(self) -> None:
        self.state: AppState | None = None
        self._sweeper: asyncio.Task[None] | None = None

    async def open(self, settings: Settings | None = None) -> AppState:
        if self.state is not None:
            return self.state

        settings = settings or Settings()
        _setup_logging(settings)

        log.info(
            "server_starting",
            version=__version__,
            transport=settings.server.transport,
        )

        if not settings.registry.contact:
            log.warning(
                "registry_contact_missing",
                message=(
                    "crates.io asks API clients to include contact details in the User-Agent. "
                    "Set RUSTDOCS__REGISTRY__CONTACT to an e-mail address or URL."
                ),
            )

        self.state = build_state(settings, build_http_client(settings.docs))
        self._sweeper = asyncio.create_task(run_cache_sweeper(self.state))

        log.info(
            "server_started",
            version=__version__,
            transport=settings.server.transport,
            docs_url=settings.docs.base_url,
            extraction=settings.extraction.model_dump(),
        )
        return self.state

    async def close(self) -> None:
        if self.state is None:
            return
        state, self.state = self.state, None
        if self._sweeper is not None:
            self._sweeper.cancel()
            with suppress(asyncio.CancelledError):
                await self._sweeper
            self._sweeper = None
        await state.http_client.aclose()
        log.info("server_stopping", cache_size=len(state.cache))

    @asynccontextmanager
    async def running(self, settings: Settings | None = None) -> AsyncIterator[AppState]:
        """Hold the shared state open for the lifetime of a transport."""
        state = await self.open(settings)
        try:
            yield state
        finally:
            await self.close()


shared = SharedState()


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[AppState]:
    """Give each MCP session the process-wide AppState."""
    yield await shared.open()


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("rustdocs", lifespan=lifespan)
# FastMCP has no version kwarg; set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: RustDocsError) -> CallToolResult:
    """Convert a RustDocsError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


async def _run_tool(tool: str, call: Awaitable[dict]) -> object:
    try:
        return await call
    except RustDocsError as exc:
        log.warning(
            "tool_error",
            tool=tool,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool=tool, exc_info=True)
        raise


@mcp.tool()
async def search_crates(query: str, ctx: Context, limit: int = 10) -> object:
    """Search for Rust crates on crates.io by name or keywords.

    Returns matching crates with their description, latest version, download
    count, documentation and repository URLs, plus the total number of matches.
    """
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("search_crates", t_search.handle(query, limit, state))


@mcp.tool()
async def get_crate_overview(crate: str, ctx: Context, version: str = "latest") -> object:
    """Get the main docs.rs page for a Rust crate.

    Returns the crate description and its modules, structs, enums, traits,
    functions, macros, type aliases and constants (or the page as markdown,
    depending on server configuration).
    """
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("get_crate_overview", t_overview.handle(crate, version, state))


@mcp.tool()
async def get_item_docs(
    crate: str,
    item_type: str,
    item_name: str,
    ctx: Context,
    version: str = "latest",
    module: str | None = None,
) -> object:
    """Get docs.rs documentation for one Rust item.

    item_type is 'struct', 'enum', 'trait', 'fn', 'macro' or 'type'. Pass
    module (e.g. 'async_runtime' or 'window/plugin') when the item is not at
    the crate root; use list_modules to find it.
    """
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool(
        "get_item_docs",
        t_item_docs.handle(crate, item_type, item_name, state, version=version, module=module),
    )


@mcp.tool()
async def list_modules(
    crate: str,
    ctx: Context,
    version: str = "latest",
    module: str | None = None,
) -> object:
    """List the modules and items of a Rust crate, or of one of its modules."""
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool(
        "list_modules",
        t_list_modules.handle(crate, state, version=version, module=module),
    )


# ---------------------------------------------------------------------------
# Workflow prompts
# ---------------------------------------------------------------------------


@mcp.prompt(name="implement-trait", description="Guide for implementing a trait for a type")
def implement_trait(
    trait_name: str,
    type_name: str,
    crate_name: str | None = None,
    version: str | None = None,
) -> str:
    return render_prompt(
        "implement-trait",
        {
            "trait_name": trait_name,
            "type_name": type_name,
            "crate_name": crate_name,
            "version": version,
        },
    )


@mcp.prompt(name="add-async-support", description="Guide for adding async support to a function")
def add_async_support(
    function_code: str,
    runtime: str | None = None,
    version: str | None = None,
) -> str:
    return render_prompt(
        "add-async-support",
        {"function_code": function_code, "runtime": runtime, "version": version},
    )


@mcp.prompt(
    name="handle-errors-idiomatically",
    description="Guide for idiomatic error handling in Rust",
)
def handle_errors_idiomatically(
    code: str,
    error_strategy: str | None = None,
    version: str | None = None,
) -> str:
    return render_prompt(
        "handle-errors-idiomatically",
        {"code": code, "error_strategy": error_strategy, "version": version},
    )


@mcp.prompt(name="add-send-sync-bounds", description="Guide for adding Send/Sync trait bounds")
def add_send_sync_bounds(
    code: str,
    use_case: str | None = None,
    version: str | None = None,
) -> str:
    return render_prompt(
        "add-send-sync-bounds",
        {"code": code, "use_case": use_case, "version": version},
    )


@mcp.prompt(
    name="fix-lifetime-errors",
    description="Guide for fixing lifetime-related compiler errors",
)
def fix_lifetime_errors(
    error_message: str,
    code: str | None = None,
    version: str | None = None,
) -> str:
    return render_prompt(
        "fix-lifetime-errors",
        {"error_message": error_message, "code": code, "version": version},
    )


@mcp.prompt(
    name="optimize-for-performance",
    description="Guide for optimizing Rust code for performance",
)
def optimize_for_performance(
    code: str,
    bottleneck: str | None = None,
    version: str | None = None,
) -> str:
    return render_prompt(
        "optimize-for-performance",
        {"code": code, "bottleneck": bottleneck, "version": version},
    )


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


async def _run_stdio(settings: Settings) -> None:
    async with shared.running(settings):
        await mcp.run_stdio_async()


def main() -> None:
    settings = Settings()

    if settings.server.transport == "http":
        _setup_logging(settings)
        run_http_server(mcp, settings, lambda: shared.running(settings))
        return

    asyncio.run(_run_stdio(settings))


if __name__ == "__main__":
    main()
