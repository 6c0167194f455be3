"""Live fetch with write-through caching and cache fallback."""

from __future__ import annotations

from typing import Callable

from tba_sync import EventSnapshot, FetchOutcome, Origin
from tba_sync.cache import SnapshotStore
from tba_sync.errors import CombinedError, SyncError
from tba_sync.fetcher import DEFAULT_TIMEOUT, fetch_event_data
from tba_sync.log import get_logger

logger = get_logger(__name__)

Fetch = Callable[..., EventSnapshot]


def sync_event_data(
    api_key: str,
    event_key: str,
    store: SnapshotStore,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    fetch: Fetch = fetch_event_data,
) -> FetchOutcome:
    """Fetch fresh event data, or fall back to the last cached snapshot.

    A fresh snapshot is written to the store, but a failed write never
    turns a good fetch into an error. If the fetch fails and nothing usable
    is cached, a CombinedError carrying both failures is raised.
    """
    try:
        snapshot = fetch(api_key, event_key, timeout=timeout)
    except SyncError as fetch_error:
        logger.warning(
            "event_fetch_failed",
            event_key=event_key,
            error_type=fetch_error.error_type.value,
            error=fetch_error.message,
        )
        try:
            cached = store.load(event_key)
        except SyncError as cache_error:
            logger.error(
                "event_cache_unavailable",
                event_key=event_key,
                error_type=cache_error.error_type.value,
                error=cache_error.message,
            )
            raise CombinedError(fetch_error, cache_error) from fetch_error

        logger.warning(
            "event_fetch_failed_using_cache",
            event_key=event_key,
            error_type=fetch_error.error_type.value,
            matches=len(cached.matches),
            teams=len(cached.teams),
        )
        return FetchOutcome(snapshot=cached, origin=Origin.CACHED)

    try:
        store.save(event_key, snapshot)
    except SyncError as e:
        logger.warning(
            "event_cache_write_failed",
            event_key=event_key,
            error_type=e.error_type.value,
            error=e.message,
        )

    return FetchOutcome(snapshot=snapshot, origin=Origin.FRESH)


def summarize(event_key: str, outcome: FetchOutcome) -> str:
    """One-line status for a completed sync."""
    matches = len(outcome.snapshot.matches)
    teams = len(outcome.snapshot.teams)
    if outcome.is_cached:
        return (
            f"Using cached data for event '{event_key}' (offline mode). "
            f"{matches} matches, {teams} teams available."
        )
    return (
        f"Successfully pulled data for event '{event_key}'. "
        f"{matches} matches, {teams} teams downloaded."
    )
