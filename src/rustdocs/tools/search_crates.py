"""Tool handler for search_crates.

Receives AppState, delegates to the crates.io client, and returns a
structured dict. No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from rustdocs.errors import ErrorCode, RustDocsError, operation_failure
from rustdocs.models.tools import SearchCratesInput

if TYPE_CHECKING:
    from rustdocs.state import AppState


async def handle(query: str, limit: int, state: AppState) -> dict:
    """Handle a search_crates tool call."""
    log = structlog.get_logger().bind(tool="search_crates", query=query)
    log.info("handler_called", limit=limit)

    try:
        validated = SearchCratesInput(query=query, limit=limit)
    except ValueError as exc:
        raise RustDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide non-empty search terms (max 200 chars) and a limit of 1-100.",
            recoverable=False,
        ) from exc

    try:
        result = await state.crates_io.search(validated.query, validated.limit)
    except Exception as exc:
        raise operation_failure(f"search crates for '{validated.query}'", exc) from exc

    log.info("search_returned", count=len(result.crates), total=result.total)
    return result.model_dump(mode="json")
