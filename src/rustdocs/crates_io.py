"""crates.io search client.

API documentation: https://crates.io/data-access. crates.io requires every
API client to send a User-Agent naming the tool and a way to contact its
operator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from rustdocs import __version__
from rustdocs.cache import TTLClass, cache_key
from rustdocs.errors import ErrorCode, RustDocsError
from rustdocs.models.registry import CrateSummary, SearchResult

if TYPE_CHECKING:
    from rustdocs.cache import CachePolicy, TTLCache
    from rustdocs.config import RegistrySettings

log = structlog.get_logger()


def registry_user_agent(contact: str | None) -> str:
    agent = f"rustdocs-mcp/{__version__}"
    return f"{agent} ({contact})" if contact else agent


def parse_search_response(data: dict) -> SearchResult:
    """Map a ``GET /crates`` page into a flat crate list plus total count.

    ``meta.total`` counts every match, not just this page; fall back to the
    page length when the registry omits it.
    """
    crates = tuple(
        CrateSummary(
            name=raw["name"],
            description=raw.get("description"),
            version=raw.get("max_stable_version") or raw.get("max_version") or "",
            downloads=raw.get("downloads") or 0,
            documentation=raw.get("documentation"),
            repository=raw.get("repository"),
            keywords=raw.get("keywords"),
        )
        for raw in data.get("crates") or []
    )
    total = (data.get("meta") or {}).get("total")
    return SearchResult(crates=crates, total=total if isinstance(total, int) else len(crates))


class CratesIoClient:
    """Searches crates.io through the shared TTL cache."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: TTLCache,
        policy: CachePolicy,
        settings: RegistrySettings,
    ) -> None:
        self._client = client
        self._cache = cache
        self._policy = policy
        self._api_url = settings.api_url.rstrip("/")
        self._headers = {"User-Agent": registry_user_agent(settings.contact)}

    async def search(self, query: str, limit: int = 10) -> SearchResult:
        key = cache_key("search", query, str(limit))
        return await self._cache.get_or_compute(
            key,
            self._policy.ttl_for(TTLClass.SEARCH),
            lambda: self._fetch_search(query, limit),
        )

    async def _fetch_search(self, query: str, limit: int) -> SearchResult:
        url = f"{self._api_url}/crates"
        try:
            response = await self._client.get(
                url,
                params={"q": query, "per_page": limit},
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            raise RustDocsError(
                code=ErrorCode.SEARCH_FAILED,
                message=f"Network error searching crates.io: {exc}",
                suggestion="crates.io may be temporarily unavailable. Try again later.",
                recoverable=True,
            ) from exc

        if not response.is_success:
            raise RustDocsError(
                code=ErrorCode.SEARCH_FAILED,
                message=(
                    f"crates.io API error: {response.status_code} {response.reason_phrase}"
                ),
                suggestion="crates.io may be temporarily unavailable. Try again later.",
                recoverable=True,
            )

        result = parse_search_response(response.json())
        log.info("search_complete", query=query, count=len(result.crates), total=result.total)
        return result
