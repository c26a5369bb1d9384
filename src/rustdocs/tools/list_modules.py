"""Tool handler for list_modules.

Lists the items of a crate root or of one of its modules. No MCP or FastMCP
imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from rustdocs.errors import ErrorCode, RustDocsError, operation_failure
from rustdocs.models.docs import LATEST, DocumentQuery
from rustdocs.models.tools import ListModulesInput
from rustdocs.query import cache_kind, get_document

if TYPE_CHECKING:
    from rustdocs.state import AppState


async def handle(
    crate: str,
    state: AppState,
    *,
    version: str | None = None,
    module: str | None = None,
) -> dict:
    """Handle a list_modules tool call."""
    log = structlog.get_logger().bind(tool="list_modules", crate=crate)
    log.info("handler_called", module=module, version=version)

    try:
        validated = ListModulesInput(crate=crate, version=version or LATEST, module=module)
    except ValueError as exc:
        raise RustDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a crate name and an optional module path such as 'window/plugin'.",
            recoverable=False,
        ) from exc

    query = DocumentQuery(
        crate=validated.crate,
        version=validated.version,
        module=validated.module,
    )
    strategy = state.extractors.modules

    try:
        result = await get_document(
            state, query, cache_kind("module-items", strategy), strategy.module_items
        )
    except Exception as exc:
        raise operation_failure(f"list modules for '{validated.crate}'", exc) from exc

    return result.model_dump(mode="json")
