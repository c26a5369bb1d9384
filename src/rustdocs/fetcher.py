"""docs.rs page fetcher and URL policy.

All docs.rs requests go through a single DocsFetcher instance shared across
tool calls. The fetcher receives an httpx.AsyncClient via constructor
injection; the process-wide shared state owns the client lifecycle.

docs.rs answers some missing pages with a normal 200 HTML page, so a response
is classified by scanning its body for not-found marker phrases as well as by
status code. Rendered documentation content is left out of that scan.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urljoin, urlparse

import httpx
import structlog
from bs4 import BeautifulSoup

from rustdocs import __version__
from rustdocs.errors import ErrorCode, RustDocsError
from rustdocs.models.docs import FetchedPage, PageStatus

if TYPE_CHECKING:
    from rustdocs.config import DocsSettings
    from rustdocs.models.docs import DocumentQuery

log = structlog.get_logger()

USER_AGENT = f"rustdocs-mcp/{__version__}"

NOT_FOUND_MARKERS: tuple[str, ...] = (
    "404",
    "Not Found",
    "crate not found",
    "does not have",
)


def build_http_client(settings: DocsSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": USER_AGENT},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


# ---------------------------------------------------------------------------
# URL policy
# ---------------------------------------------------------------------------


def normalize_crate_name(name: str) -> str:
    """Crate names use hyphens on crates.io but underscores in docs.rs paths."""
    return name.strip().replace("-", "_")


def normalize_module_path(path: str | None) -> str:
    """Return ``a/b`` for ``a::b``, ``/a/b/`` or ``a/b``; empty for no module."""
    if not path:
        return ""
    segments = [s.replace("-", "_") for s in path.replace("::", "/").split("/") if s]
    return "/".join(segments)


def build_docs_url(query: DocumentQuery, base_url: str = "https://docs.rs") -> str:
    """Build the canonical docs.rs URL for a query.

    ``{base}/{crate}/{version}/{crate}/[{module}/][{item_type}.{item_name}.html]``
    """
    crate_path = normalize_crate_name(query.crate)
    url = f"{base_url.rstrip('/')}/{crate_path}/{query.version}/{crate_path}/"

    module_path = normalize_module_path(query.module)
    if module_path:
        url += f"{module_path}/"

    if query.is_item:
        url += f"{query.item_type}.{query.item_name}.html"
    return url


def _marker_scope(html: str) -> str:
    """The page with rendered rustdoc content (``#main-content``) removed.

    docs.rs error pages have no rustdoc content, so they are scanned whole;
    real documentation that mentions "404" or "does not have" is not.
    """
    if "main-content" not in html:
        return html
    soup = BeautifulSoup(html, "html.parser")
    for content in soup.select("#main-content"):
        content.decompose()
    return str(soup)


def is_not_found_page(html: str) -> bool:
    scope = _marker_scope(html)
    return any(marker in scope for marker in NOT_FOUND_MARKERS)


def classify_page(status_code: int, html: str) -> PageStatus:
    """Classify a docs.rs response.

    A marker phrase in the body means not-found whatever the status code.
    """
    if status_code == 404 or is_not_found_page(html):
        return PageStatus.NOT_FOUND
    if not 200 <= status_code < 300:
        return PageStatus.ERROR
    return PageStatus.SUCCESS


def not_found_error(query: DocumentQuery) -> RustDocsError:
    """Build the user-actionable error for a missing crate, module or item."""
    if query.is_item:
        where = f" module '{query.module}'" if query.module else ""
        return RustDocsError(
            code=ErrorCode.ITEM_NOT_FOUND,
            message=(
                f"Item '{query.item_name}' of type '{query.item_type}' not found "
                f"in crate '{query.crate}'{where}"
            ),
            suggestion=(
                "If this item exists, use the 'list_modules' tool to find its module path "
                "and call 'get_item_docs' again with the module parameter."
            ),
            recoverable=False,
        )
    if query.module:
        return RustDocsError(
            code=ErrorCode.MODULE_NOT_FOUND,
            message=f"Module '{query.module}' not found in crate '{query.crate}'",
            suggestion=(
                "Call 'list_modules' without a module to see the crate's top-level modules."
            ),
            recoverable=False,
        )
    return RustDocsError(
        code=ErrorCode.CRATE_NOT_FOUND,
        message=f"Crate '{query.crate}' not found on docs.rs (version '{query.version}')",
        suggestion="Use the 'search_crates' tool to find the exact crate name.",
        recoverable=False,
    )


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class DocsFetcher:
    """Fetches docs.rs pages, keeping every redirect hop on the docs host."""

    def __init__(self, client: httpx.AsyncClient, settings: DocsSettings) -> None:
        self._client = client
        self._base_url = settings.base_url
        self._host = urlparse(settings.base_url).hostname or ""
        self._max_redirects = settings.max_redirects

    def url_for(self, query: DocumentQuery) -> str:
        return build_docs_url(query, self._base_url)

    async def fetch(self, query: DocumentQuery) -> FetchedPage:
        """Fetch the page for ``query``.

        Returns the page on success. Raises RustDocsError with a not-found code
        when the page is missing and UPSTREAM_ERROR on network errors, non-2xx
        responses and redirects that leave the docs host.
        """
        url = self.url_for(query)
        current_url = url

        try:
            for hop in range(self._max_redirects + 1):
                response = await self._client.get(current_url)

                if response.is_redirect and "location" in response.headers:
                    if hop == self._max_redirects:
                        raise RustDocsError(
                            code=ErrorCode.UPSTREAM_ERROR,
                            message=f"Too many redirects fetching {url}",
                            suggestion="docs.rs returned an unusually long redirect chain.",
                            recoverable=False,
                        )
                    next_url = urljoin(current_url, response.headers["location"])
                    if urlparse(next_url).hostname != self._host:
                        log.warning("redirect_blocked", url=url, location=next_url)
                        raise RustDocsError(
                            code=ErrorCode.UPSTREAM_ERROR,
                            message=f"Redirect away from {self._host} fetching {url}",
                            suggestion="Only documentation pages on docs.rs are fetched.",
                            recoverable=False,
                        )
                    current_url = next_url
                    continue

                status = classify_page(response.status_code, response.text)
                if status is PageStatus.NOT_FOUND:
                    log.info("page_not_found", url=url, status_code=response.status_code)
                    raise not_found_error(query)
                if status is PageStatus.ERROR:
                    raise RustDocsError(
                        code=ErrorCode.UPSTREAM_ERROR,
                        message=(
                            f"docs.rs returned {response.status_code}: {response.reason_phrase}"
                        ),
                        suggestion="docs.rs may be temporarily unavailable. Try again later.",
                        recoverable=True,
                    )

                log.info(
                    "fetch_complete",
                    url=url,
                    status_code=response.status_code,
                    content_length=len(response.text),
                )
                return FetchedPage(html=response.text, url=url, status_code=response.status_code)

        except RustDocsError:
            raise
        except httpx.HTTPError as exc:
            raise RustDocsError(
                code=ErrorCode.UPSTREAM_ERROR,
                message=f"Network error fetching {url}: {exc}",
                suggestion="docs.rs may be temporarily unavailable. Try again later.",
                recoverable=True,
            ) from exc

        # Unreachable but satisfies the type checker
        raise RustDocsError(
            code=ErrorCode.UPSTREAM_ERROR,
            message="Redirect loop",
            suggestion="",
            recoverable=False,
        )
