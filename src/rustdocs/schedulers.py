"""Background scheduler coroutines."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from rustdocs.state import AppState

log = structlog.get_logger()


async def run_cache_sweeper(state: AppState) -> None:
    """Drop expired cache entries on the configured interval (HTTP mode only).

    A stdio server lives as long as one agent session, so expiry-on-read is
    enough there; a long-running HTTP server would otherwise keep every
    expired page in memory.
    """
    if state.settings.server.transport != "http":
        return

    interval_seconds = state.settings.cache.sweep_interval_minutes * 60
    while True:
        await asyncio.sleep(interval_seconds)
        removed = state.cache.purge_expired()
        log.info("cache_sweep_complete", removed=removed, remaining=len(state.cache))
