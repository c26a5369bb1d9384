from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

LATEST = "latest"

CATEGORIES: tuple[str, ...] = (
    "modules",
    "structs",
    "enums",
    "traits",
    "functions",
    "macros",
    "types",
    "constants",
)


class ItemType(StrEnum):
    """Item kinds addressable as ``{item_type}.{item_name}.html`` on docs.rs."""

    STRUCT = "struct"
    ENUM = "enum"
    TRAIT = "trait"
    FN = "fn"
    MACRO = "macro"
    TYPE = "type"


class PageStatus(StrEnum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


class DocumentQuery(BaseModel):
    """Logical identity of a docs.rs page: drives both the URL and the cache key."""

    model_config = ConfigDict(frozen=True)

    crate: str
    version: str = LATEST
    module: str | None = None
    item_type: ItemType | None = None
    item_name: str | None = None

    @property
    def is_item(self) -> bool:
        return self.item_type is not None and self.item_name is not None


class FetchedPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    html: str
    url: str
    status_code: int


# ---------------------------------------------------------------------------
# Extraction results (cached as-is, one per fetch)
# ---------------------------------------------------------------------------


class ItemCategories(BaseModel):
    """The eight item lists docs.rs shows on crate and module pages."""

    model_config = ConfigDict(frozen=True)

    modules: tuple[str, ...] = ()
    structs: tuple[str, ...] = ()
    enums: tuple[str, ...] = ()
    traits: tuple[str, ...] = ()
    functions: tuple[str, ...] = ()
    macros: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    constants: tuple[str, ...] = ()


class CrateOverview(ItemCategories):
    name: str
    version: str
    description: str
    content: str
    url: str


class ModuleItems(ItemCategories):
    url: str


class ItemDocs(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    signature: str
    description: str
    methods: tuple[str, ...] = ()
    variants: tuple[str, ...] = ()
    implementations: tuple[str, ...] = ()
    examples: str = ""
    url: str


class CrateOverviewMarkdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    markdown: str
    url: str


class ItemDocsMarkdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    markdown: str
    url: str


class ModuleItemsMarkdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    markdown: str
    url: str
