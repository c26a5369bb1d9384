"""Shared test fixtures for the rustdocs test suite."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from rustdocs.cache import CachePolicy, TTLCache
from rustdocs.config import CacheSettings, DocsSettings


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(clock=clock)


@pytest.fixture()
def policy() -> CachePolicy:
    return CachePolicy.from_settings(CacheSettings())


@pytest.fixture()
def docs_settings() -> DocsSettings:
    return DocsSettings()


# ---------------------------------------------------------------------------
# docs.rs page fixtures
# ---------------------------------------------------------------------------

CRATE_PAGE = """<!DOCTYPE html>
<html lang="en"><head><title>tokio - Rust</title></head>
<body class="rustdoc mod crate">
<nav class="sidebar"><a href="../tokio/index.html">tokio</a></nav>
<main><section id="main-content" class="content">
<div class="main-heading"><h1>Crate <span>tokio</span></h1></div>
<details class="toggle top-doc" open><summary>Expand description</summary>
<div class="docblock"><p>A runtime for writing <em>reliable</em> network applications.</p>
<div class="example-wrap"><pre class="rust rust-example-rendered"><code>let rt = Runtime::new();</code></pre></div>
</div></details>
<h2 id="modules" class="section-header">Modules<a href="#modules" class="anchor">§</a></h2>
<dl class="item-table">
<dt><a class="mod" href="fs/index.html" title="mod tokio::fs">fs</a></dt><dd>Asynchronous file utilities.</dd>
<dt><a class="mod" href="net/index.html" title="mod tokio::net">net</a></dt><dd>TCP/UDP/Unix bindings.</dd>
</dl>
<h2 id="structs" class="section-header">Structs<a href="#structs" class="anchor">§</a></h2>
<dl class="item-table">
<dt><a class="struct" href="struct.JoinHandle.html">Join<wbr>Handle</a></dt><dd>An owned permission to join on a task.</dd>
</dl>
<h2 id="functions" class="section-header">Functions<a href="#functions" class="anchor">§</a></h2>
<dl class="item-table">
<dt><a class="fn" href="fn.spawn.html">spawn</a></dt><dd>Spawns a new asynchronous task.</dd>
</dl>
<h2 id="macros" class="section-header">Macros<a href="#macros" class="anchor">§</a></h2>
<dl class="item-table">
<dt><a class="macro" href="macro.join.html">join</a></dt>
<dt><a class="macro" href="macro.select.html">select</a></dt>
</dl>
</section></main></body></html>
"""

ITEM_PAGE = """<!DOCTYPE html>
<html lang="en"><head><title>AppHandle in tauri - Rust</title></head>
<body class="rustdoc struct">
<main><section id="main-content" class="content">
<div class="main-heading"><h1>Struct <span class="struct">AppHandle</span></h1></div>
<pre class="rust item-decl"><code>pub struct AppHandle&lt;R: Runtime = Wry&gt; { /* private fields */ }</code></pre>
<details class="toggle top-doc" open><summary>Expand description</summary>
<div class="docblock"><p>A handle to the currently running application.</p>
<div class="example-wrap"><pre class="rust rust-example-rendered"><code>let handle = app.handle();</code></pre></div>
</div></details>
<h2 id="implementations" class="section-header">Implementations</h2>
<div id="implementations-list">
<details class="toggle implementors-toggle" open><summary>
<section id="impl-AppHandle%3CR%3E" class="impl"><h3 class="code-header">impl&lt;R: Runtime&gt; AppHandle&lt;R&gt;</h3></section>
</summary>
<div class="impl-items">
<details class="toggle method-toggle" open><summary>
<section id="method.exit" class="method"><h4 class="code-header">pub fn exit(&amp;self, exit_code: i32)</h4></section>
</summary><div class="docblock"><p>Exits the app by triggering the exit event.</p></div></details>
<section id="method.restart" class="method"><h4 class="code-header">pub fn restart(&amp;self) -&gt; !</h4></section>
</div></details>
</div>
<h2 id="trait-implementations" class="section-header">Trait Implementations</h2>
<div id="trait-implementations-list">
<details class="toggle implementors-toggle"><summary>
<section id="impl-Clone-for-AppHandle%3CR%3E" class="impl"><h3 class="code-header">impl&lt;R: Runtime&gt; Clone for AppHandle&lt;R&gt;</h3></section>
</summary></details>
</div>
</section></main></body></html>
"""

ENUM_PAGE = """<!DOCTYPE html>
<html lang="en"><head><title>Ordering in std::cmp - Rust</title></head><body>
<main><section id="main-content" class="content">
<pre class="rust item-decl"><code>pub enum Ordering { Less = -1, Equal = 0, Greater = 1 }</code></pre>
<details class="toggle top-doc" open><div class="docblock"><p>The result of a comparison between two values.</p></div></details>
<h2 id="variants" class="variants section-header">Variants</h2>
<div class="variants">
<section id="variant.Less" class="variant"><a href="#variant.Less" class="anchor">§</a><h3 class="code-header">Less = -1</h3></section>
<section id="variant.Equal" class="variant"><a href="#variant.Equal" class="anchor">§</a><h3 class="code-header">Equal = 0</h3></section>
<section id="variant.Greater" class="variant"><a href="#variant.Greater" class="anchor">§</a><h3 class="code-header">Greater = 1</h3></section>
</div>
</section></main></body></html>
"""

MISSING_CRATE_PAGE = """<!DOCTYPE html>
<html><head><title>docs.rs</title></head>
<body><div class="container"><h1>The requested crate does not exist</h1>
<p>crate not found</p></div></body></html>
"""


@pytest.fixture()
def crate_page() -> str:
    return CRATE_PAGE


@pytest.fixture()
def item_page() -> str:
    return ITEM_PAGE


@pytest.fixture()
def enum_page() -> str:
    return ENUM_PAGE


@pytest.fixture()
def missing_crate_page() -> str:
    return MISSING_CRATE_PAGE
