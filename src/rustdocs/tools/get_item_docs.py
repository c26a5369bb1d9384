"""Tool handler for get_item_docs.

Fetches ``{item_type}.{item_name}.html`` on docs.rs, optionally under a module
path, and extracts it with the strategy configured for item pages. No MCP or
FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from rustdocs.errors import ErrorCode, RustDocsError, operation_failure
from rustdocs.models.docs import LATEST, DocumentQuery
from rustdocs.models.tools import GetItemDocsInput
from rustdocs.query import cache_kind, get_document

if TYPE_CHECKING:
    from rustdocs.state import AppState


async def handle(
    crate: str,
    item_type: str,
    item_name: str,
    state: AppState,
    *,
    version: str | None = None,
    module: str | None = None,
) -> dict:
    """Handle a get_item_docs tool call."""
    log = structlog.get_logger().bind(tool="get_item_docs", crate=crate, item=item_name)
    log.info("handler_called", item_type=item_type, module=module, version=version)

    try:
        validated = GetItemDocsInput(
            crate=crate,
            version=version or LATEST,
            item_type=item_type,
            item_name=item_name,
            module=module,
        )
    except ValueError as exc:
        raise RustDocsError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "Provide a crate name, an item_type of struct/enum/trait/fn/macro/type "
                "and the item's identifier, e.g. 'AppHandle'."
            ),
            recoverable=False,
        ) from exc

    query = DocumentQuery(
        crate=validated.crate,
        version=validated.version,
        module=validated.module,
        item_type=validated.item_type,
        item_name=validated.item_name,
    )
    strategy = state.extractors.item_docs

    try:
        result = await get_document(
            state, query, cache_kind("item-docs", strategy), strategy.item_docs
        )
    except Exception as exc:
        raise operation_failure(
            f"get item docs for '{validated.item_name}' in '{validated.crate}'", exc
        ) from exc

    return result.model_dump(mode="json")
