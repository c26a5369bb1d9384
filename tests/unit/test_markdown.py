"""Unit tests for whole-page markdown rendering."""

from __future__ import annotations

from rustdocs.markdown import MarkdownRenderer, render_markdown
from rustdocs.models.docs import DocumentQuery, ItemType

URL = "https://docs.rs/tokio/latest/tokio/"


class TestRenderMarkdown:
    def test_atx_headings(self) -> None:
        assert render_markdown("<h2>Modules</h2>") == "## Modules"

    def test_emphasis_and_bold_use_asterisks(self) -> None:
        md = render_markdown("<p><em>fast</em> and <strong>safe</strong></p>")
        assert "*fast*" in md
        assert "**safe**" in md

    def test_inline_links(self) -> None:
        md = render_markdown('<p>See <a href="https://docs.rs/serde">serde</a></p>')
        assert "[serde](https://docs.rs/serde)" in md

    def test_rust_code_block_is_fenced(self) -> None:
        md = render_markdown('<pre class="rust"><code>let x = 1;</code></pre>')
        assert "```rust\nlet x = 1;\n```" in md

    def test_underscores_are_not_escaped(self) -> None:
        md = render_markdown("<p>tokio_util::sync</p>")
        assert md == "tokio_util::sync"

    def test_result_is_stripped(self) -> None:
        md = render_markdown("<div>\n\n<p>text</p>\n\n</div>")
        assert md == "text"


class TestMarkdownRenderer:
    def test_crate_overview(self, crate_page: str) -> None:
        result = MarkdownRenderer().crate_overview(
            crate_page, DocumentQuery(crate="tokio", version="1.40.0"), URL
        )
        assert result.name == "tokio"
        assert result.version == "1.40.0"
        assert result.url == URL
        assert "## Modules" in result.markdown
        assert "```rust\nlet rt = Runtime::new();\n```" in result.markdown

    def test_item_docs(self, item_page: str) -> None:
        query = DocumentQuery(crate="tauri", item_type=ItemType.STRUCT, item_name="AppHandle")
        result = MarkdownRenderer().item_docs(item_page, query, URL)
        assert result.name == "AppHandle"
        assert result.type == "struct"
        assert "A handle to the currently running application." in result.markdown

    def test_module_items(self, crate_page: str) -> None:
        result = MarkdownRenderer().module_items(crate_page, DocumentQuery(crate="tokio"), URL)
        assert result.url == URL
        assert "[fs](fs/index.html" in result.markdown

    def test_mode(self) -> None:
        assert MarkdownRenderer.mode == "markdown"
