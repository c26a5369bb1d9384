"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan context
manager) and injected into every tool handler via the MCP Context object.
Extraction strategies are chosen per operation here, at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rustdocs.markdown import MarkdownRenderer
from rustdocs.parser import StructuredExtractor

if TYPE_CHECKING:
    import httpx

    from rustdocs.cache import CachePolicy, TTLCache
    from rustdocs.config import DocsSettings, ExtractionMode, ExtractionSettings, Settings
    from rustdocs.crates_io import CratesIoClient
    from rustdocs.protocols import ExtractionStrategy, FetcherProtocol


def build_strategy(mode: ExtractionMode, docs: DocsSettings) -> ExtractionStrategy:
    if mode == "markdown":
        return MarkdownRenderer()
    return StructuredExtractor(content_limit=docs.content_limit)


@dataclass(frozen=True)
class Extractors:
    """One extraction strategy per docs.rs query operation."""

    overview: ExtractionStrategy
    item_docs: ExtractionStrategy
    modules: ExtractionStrategy

    @classmethod
    def from_settings(cls, extraction: ExtractionSettings, docs: DocsSettings) -> Extractors:
        return cls(
            overview=build_strategy(extraction.overview, docs),
            item_docs=build_strategy(extraction.item_docs, docs),
            modules=build_strategy(extraction.modules, docs),
        )


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    http_client: httpx.AsyncClient
    cache: TTLCache
    policy: CachePolicy
    fetcher: FetcherProtocol
    crates_io: CratesIoClient
    extractors: Extractors
