"""Whole-page markdown rendering for docs.rs pages.

The markdown strategy trades field structure for completeness: the entire
HTML document is converted, nothing is extracted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from markdownify import ASTERISK, ATX, MarkdownConverter

from rustdocs.models.docs import CrateOverviewMarkdown, ItemDocsMarkdown, ModuleItemsMarkdown

if TYPE_CHECKING:
    from bs4 import Tag

    from rustdocs.models.docs import DocumentQuery


def _code_language(el: Tag) -> str:
    """docs.rs marks Rust snippets with a ``rust`` class on the ``<pre>``."""
    return "rust" if "rust" in (el.get("class") or []) else ""


# ATX headings, fenced code blocks, asterisk emphasis/bold, inline links.
# Rust paths are full of underscores; escaping them only adds noise.
MARKDOWN_OPTIONS: dict[str, object] = {
    "heading_style": ATX,
    "strong_em_symbol": ASTERISK,
    "bullets": "*",
    "code_language_callback": _code_language,
    "escape_underscores": False,
}


def render_markdown(html: str) -> str:
    """Convert a full HTML document to markdown."""
    markdown = MarkdownConverter(**MARKDOWN_OPTIONS).convert(html)
    return markdown.strip()


class MarkdownRenderer:
    """Extraction strategy returning the page as a single markdown text."""

    mode = "markdown"

    def crate_overview(self, html: str, query: DocumentQuery, url: str) -> CrateOverviewMarkdown:
        return CrateOverviewMarkdown(
            name=query.crate,
            version=query.version,
            markdown=render_markdown(html),
            url=url,
        )

    def item_docs(self, html: str, query: DocumentQuery, url: str) -> ItemDocsMarkdown:
        return ItemDocsMarkdown(
            name=query.item_name or "",
            type=str(query.item_type or ""),
            markdown=render_markdown(html),
            url=url,
        )

    def module_items(self, html: str, query: DocumentQuery, url: str) -> ModuleItemsMarkdown:
        return ModuleItemsMarkdown(markdown=render_markdown(html), url=url)
