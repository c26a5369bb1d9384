"""Integration test fixtures.

Provides a fully wired AppState (TTL cache on a fake clock, real fetcher and
crates.io client over a shared httpx client) for the tool handler tests, and
a baseline environment for the subprocess-based MCP wire tests. Page fixtures
come from tests/conftest.py.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import httpx
import pytest

from rustdocs.cache import CachePolicy, TTLCache
from rustdocs.config import ExtractionSettings, Settings
from rustdocs.crates_io import CratesIoClient
from rustdocs.fetcher import DocsFetcher, build_http_client
from rustdocs.state import AppState, Extractors

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tests.conftest import FakeClock


def make_state(settings: Settings, client: httpx.AsyncClient, clock: FakeClock) -> AppState:
    cache = TTLCache(clock=clock)
    policy = CachePolicy.from_settings(settings.cache)
    return AppState(
        settings=settings,
        http_client=client,
        cache=cache,
        policy=policy,
        fetcher=DocsFetcher(client, settings.docs),
        crates_io=CratesIoClient(client, cache, policy, settings.registry),
        extractors=Extractors.from_settings(settings.extraction, settings.docs),
    )


@pytest.fixture()
async def app_state(clock: FakeClock) -> AsyncIterator[AppState]:
    """AppState with the default (structured) extraction for every operation."""
    settings = Settings()
    async with build_http_client(settings.docs) as client:
        yield make_state(settings, client, clock)


@pytest.fixture()
async def markdown_state(clock: FakeClock) -> AsyncIterator[AppState]:
    """AppState rendering every docs.rs page as markdown."""
    settings = Settings(
        extraction=ExtractionSettings(overview="markdown", item_docs="markdown", modules="markdown")
    )
    async with build_http_client(settings.docs) as client:
        yield make_state(settings, client, clock)


@pytest.fixture()
def subprocess_env() -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Forces stdio transport and points both upstreams at an unroutable port so
    a test that accidentally reaches the network fails fast.
    """
    env = os.environ.copy()
    env["RUSTDOCS__SERVER__TRANSPORT"] = "stdio"
    env["RUSTDOCS__DOCS__BASE_URL"] = "http://127.0.0.1:1"
    env["RUSTDOCS__REGISTRY__API_URL"] = "http://127.0.0.1:1/api/v1"
    env["RUSTDOCS__REGISTRY__CONTACT"] = "tests@example.com"
    return env
