from __future__ import annotations

from rustdocs.models.cache import CacheEntry, CacheStats
from rustdocs.models.docs import (
    CATEGORIES,
    LATEST,
    CrateOverview,
    CrateOverviewMarkdown,
    DocumentQuery,
    FetchedPage,
    ItemCategories,
    ItemDocs,
    ItemDocsMarkdown,
    ItemType,
    ModuleItems,
    ModuleItemsMarkdown,
    PageStatus,
)
from rustdocs.models.registry import CrateSummary, SearchResult
from rustdocs.models.tools import (
    GetCrateOverviewInput,
    GetItemDocsInput,
    ListModulesInput,
    SearchCratesInput,
)

__all__ = [
    # cache
    "CacheEntry",
    "CacheStats",
    # docs
    "CATEGORIES",
    "LATEST",
    "ItemType",
    "PageStatus",
    "DocumentQuery",
    "FetchedPage",
    "ItemCategories",
    "CrateOverview",
    "CrateOverviewMarkdown",
    "ItemDocs",
    "ItemDocsMarkdown",
    "ModuleItems",
    "ModuleItemsMarkdown",
    # registry
    "CrateSummary",
    "SearchResult",
    # tools
    "SearchCratesInput",
    "GetCrateOverviewInput",
    "GetItemDocsInput",
    "ListModulesInput",
]
