"""Tool handler for get_crate_overview.

Fetches the crate root page on docs.rs through the shared cache and extracts
it with the strategy configured for overviews. No MCP or FastMCP imports;
server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from rustdocs.errors import ErrorCode, RustDocsError, operation_failure
from rustdocs.models.docs import LATEST, DocumentQuery
from rustdocs.models.tools import GetCrateOverviewInput
from rustdocs.query import cache_kind, get_document

if TYPE_CHECKING:
    from rustdocs.state import AppState


async def handle(crate: str, version: str | None, state: AppState) -> dict:
    """Handle a get_crate_overview tool call."""
    log = structlog.get_logger().bind(tool="get_crate_overview", crate=crate)
    log.info("handler_called", version=version)

    try:
        validated = GetCrateOverviewInput(crate=crate, version=version or LATEST)
    except ValueError as exc:
        raise RustDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "Provide a crate name such as 'serde' or 'actix-web' and an optional version."
            ),
            recoverable=False,
        ) from exc

    query = DocumentQuery(crate=validated.crate, version=validated.version)
    strategy = state.extractors.overview

    try:
        result = await get_document(
            state, query, cache_kind("crate-overview", strategy), strategy.crate_overview
        )
    except Exception as exc:
        raise operation_failure(f"get crate overview for '{validated.crate}'", exc) from exc

    return result.model_dump(mode="json")
