"""Protocol interfaces for swappable components.

Tool handlers and AppState reference these protocols, not the concrete
implementations. This allows:
- Tests to use lightweight in-memory implementations
- The structured and markdown extraction strategies to be chosen per
  operation at startup without changing tool code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel

if TYPE_CHECKING:
    from rustdocs.models.docs import DocumentQuery, FetchedPage


class FetcherProtocol(Protocol):
    """Interface for the docs.rs page fetcher."""

    def url_for(self, query: DocumentQuery) -> str: ...

    async def fetch(self, query: DocumentQuery) -> FetchedPage: ...


class ExtractionStrategy(Protocol):
    """Turns a fetched docs.rs page into an immutable result object.

    ``mode`` is part of every cache key so results of different strategies
    never share an entry.
    """

    mode: str

    def crate_overview(self, html: str, query: DocumentQuery, url: str) -> BaseModel: ...

    def item_docs(self, html: str, query: DocumentQuery, url: str) -> BaseModel: ...

    def module_items(self, html: str, query: DocumentQuery, url: str) -> BaseModel: ...
