"""Cache, fetch and extract composition shared by the docs.rs tool handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from rustdocs.cache import cache_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from rustdocs.models.docs import DocumentQuery
    from rustdocs.protocols import ExtractionStrategy
    from rustdocs.state import AppState

T = TypeVar("T")


def cache_kind(base: str, strategy: ExtractionStrategy) -> str:
    """``item-docs`` for structured results, ``item-docs-markdown`` for markdown ones."""
    return base if strategy.mode == "structured" else f"{base}-{strategy.mode}"


def document_cache_key(kind: str, query: DocumentQuery) -> str:
    return cache_key(
        kind,
        query.crate,
        query.version,
        query.module,
        query.item_type,
        query.item_name,
    )


async def get_document(
    state: AppState,
    query: DocumentQuery,
    kind: str,
    extract: Callable[[str, DocumentQuery, str], T],
) -> T:
    """Return the extracted document for ``query``, fetching it on a cache miss.

    Pinned versions are cached for the versioned TTL, ``latest`` for the
    shorter latest TTL. Fetch and extraction errors propagate and leave the
    cache untouched.
    """

    async def compute() -> T:
        page = await state.fetcher.fetch(query)
        return extract(page.html, query, page.url)

    return await state.cache.get_or_compute(
        document_cache_key(kind, query),
        state.policy.for_version(query.version),
        compute,
    )
