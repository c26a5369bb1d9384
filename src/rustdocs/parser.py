"""Structured field extraction for docs.rs pages.

docs.rs markup has changed several times and differs between page types, so
every item category is parsed by an ordered list of selection strategies.
Each strategy is a pure function of the category's section heading; the
first one that yields names wins. A category that no strategy can find is
reported as an empty list, never as an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, Tag

from rustdocs.models.docs import CATEGORIES, CrateOverview, ItemDocs, ModuleItems

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from rustdocs.models.docs import DocumentQuery

    SectionStrategy = Callable[[Tag, str], list[str]]

DEFAULT_CONTENT_LIMIT = 5000

# Anchor class docs.rs puts on links of each category
CATEGORY_ANCHOR_CLASS: dict[str, str] = {
    "modules": "mod",
    "structs": "struct",
    "enums": "enum",
    "traits": "trait",
    "functions": "fn",
    "macros": "macro",
    "types": "type",
    "constants": "constant",
}


def _texts(elements: Sequence[Tag]) -> list[str]:
    texts = (el.get_text().strip() for el in elements)
    return [text for text in texts if text]


def _item_table(section: Tag) -> Tag | None:
    """Return the element right after the section heading if it is an item table."""
    sibling = section.find_next_sibling()
    if isinstance(sibling, Tag) and "item-table" in (sibling.get("class") or []):
        return sibling
    return None


# ---------------------------------------------------------------------------
# Section strategies, tried in order
# ---------------------------------------------------------------------------


def item_table_entries(section: Tag, category: str) -> list[str]:
    """Current layout: ``h2#structs`` + ``dl.item-table`` + ``dt a``."""
    table = _item_table(section)
    if table is None:
        return []
    return _texts(table.select("dt a"))


def item_table_anchor_class(section: Tag, category: str) -> list[str]:
    """List layout: ``.item-table`` entries marked by a per-category anchor class."""
    table = _item_table(section)
    if table is None:
        return []
    return _texts(table.select(f"a.{CATEGORY_ANCHOR_CLASS[category]}"))


def legacy_item_left(section: Tag, category: str) -> list[str]:
    """Older pages: ``.item-left a`` anywhere under the section's parent."""
    parent = section.parent
    if not isinstance(parent, Tag):
        return []
    return _texts(parent.select(".item-left a"))


SECTION_STRATEGIES: list[SectionStrategy] = [
    item_table_entries,
    item_table_anchor_class,
    legacy_item_left,
]


def extract_items(
    soup: BeautifulSoup,
    category: str,
    strategies: Sequence[SectionStrategy] | None = None,
) -> list[str]:
    """Return the item names listed under the ``#<category>`` section."""
    section = soup.select_one(f"#{category}")
    if section is None:
        return []
    for strategy in strategies if strategies is not None else SECTION_STRATEGIES:
        items = strategy(section, category)
        if items:
            return items
    return []


def extract_categories(soup: BeautifulSoup) -> dict[str, tuple[str, ...]]:
    return {category: tuple(extract_items(soup, category)) for category in CATEGORIES}


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _first_text(soup: BeautifulSoup | Tag, selector: str) -> str:
    element = soup.select_one(selector)
    return element.get_text().strip() if element is not None else ""


def _child_texts(soup: BeautifulSoup, selector: str, child_selector: str) -> list[str]:
    names: list[str] = []
    for element in soup.select(selector):
        text = _first_text(element, child_selector)
        if text:
            names.append(text)
    return names


def page_text(soup: BeautifulSoup, limit: int = DEFAULT_CONTENT_LIMIT) -> str:
    """Plain text of ``<main>`` (or ``<body>``), cut hard at ``limit`` characters."""
    root = soup.select_one("main") or soup.body
    if root is None:
        return ""
    return root.get_text().strip()[:limit]


def parse_crate_overview(
    html: str,
    query: DocumentQuery,
    url: str,
    *,
    content_limit: int = DEFAULT_CONTENT_LIMIT,
) -> CrateOverview:
    soup = BeautifulSoup(html, "html.parser")
    return CrateOverview(
        name=query.crate,
        version=query.version,
        description=_first_text(soup, ".docblock"),
        content=page_text(soup, content_limit),
        url=url,
        **extract_categories(soup),
    )


def parse_item_docs(html: str, query: DocumentQuery, url: str) -> ItemDocs:
    soup = BeautifulSoup(html, "html.parser")

    examples = _texts(soup.select(".docblock pre.rust, .example-wrap pre.rust"))

    return ItemDocs(
        name=query.item_name or "",
        type=str(query.item_type or ""),
        signature=_first_text(soup, ".item-decl"),
        description=_first_text(soup, ".docblock"),
        methods=tuple(_child_texts(soup, ".method", ".code-header, .fn")),
        variants=tuple(_child_texts(soup, ".variant", ".code-header")),
        implementations=tuple(
            _texts(soup.select("#trait-implementations-list h3, #implementations-list h3"))
        ),
        examples="\n\n".join(examples),
        url=url,
    )


def parse_module_items(html: str, url: str) -> ModuleItems:
    soup = BeautifulSoup(html, "html.parser")
    return ModuleItems(url=url, **extract_categories(soup))


class StructuredExtractor:
    """Extraction strategy returning named fields and item lists."""

    mode = "structured"

    def __init__(self, content_limit: int = DEFAULT_CONTENT_LIMIT) -> None:
        self._content_limit = content_limit

    def crate_overview(self, html: str, query: DocumentQuery, url: str) -> CrateOverview:
        return parse_crate_overview(html, query, url, content_limit=self._content_limit)

    def item_docs(self, html: str, query: DocumentQuery, url: str) -> ItemDocs:
        return parse_item_docs(html, query, url)

    def module_items(self, html: str, query: DocumentQuery, url: str) -> ModuleItems:
        return parse_module_items(html, url)
