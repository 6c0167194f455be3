#!/usr/bin/env python3
"""
TBA Event Sync

Pulls match and team data for an event from The Blue Alliance and keeps a
local copy, so the dashboard still has data when the venue network drops.

Usage:
    python sync_event.py events                # List this season's events
    python sync_event.py sync 2026caoc         # Fetch (or fall back to cache)
    python sync_event.py clear 2026caoc        # Delete the cached snapshot

The API key comes from TBA_AUTH_KEY unless --api-key is given.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from tba_sync.cache import SnapshotCache
from tba_sync.config import Settings, parse_timeout
from tba_sync.errors import SyncError, user_message
from tba_sync.fetcher import SEASON, fetch_events
from tba_sync.log import setup_logging
from tba_sync.notify import notify_sync
from tba_sync.sync import summarize, sync_event_data


def timeout_arg(value: str) -> float:
    try:
        return parse_timeout(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync FRC event data from The Blue Alliance")
    parser.add_argument("--api-key", help="TBA read API key (default: $TBA_AUTH_KEY)")
    parser.add_argument("--cache-dir", type=Path, help="Snapshot directory (default: $TBA_CACHE_DIR or ./cache)")
    parser.add_argument("--timeout", type=timeout_arg, help="Per-request timeout in seconds")
    parser.add_argument("--log-level", default=None, help="Log level (default: $TBA_LOG_LEVEL or INFO)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("events", help=f"List events for the {SEASON} season")
    sync_cmd = sub.add_parser("sync", help="Fetch event data, falling back to the cache")
    sync_cmd.add_argument("event_key")
    clear_cmd = sub.add_parser("clear", help="Delete the cached snapshot for an event")
    clear_cmd.add_argument("event_key")
    return parser


def cmd_events(settings: Settings) -> int:
    try:
        events = fetch_events(settings.api_key, timeout=settings.timeout)
    except SyncError as e:
        print(f"ERROR: {user_message(e)}")
        return 1

    print(f"Found {len(events)} events for {SEASON}")
    for event in events:
        print(f"  {event.key:<12} {event.start_date}  {event.short_name or event.name}")
    return 0


def cmd_sync(settings: Settings, event_key: str) -> int:
    print(f"Fetching data for event '{event_key}' from The Blue Alliance...")
    store = SnapshotCache(settings.cache_dir)

    try:
        outcome = sync_event_data(settings.api_key, event_key, store, timeout=settings.timeout)
    except SyncError as e:
        print(f"  ERROR: {user_message(e)}")
        notify_sync(event_key, e)
        return 1

    print(f"  {summarize(event_key, outcome)}")
    print(f"  {len(outcome.snapshot.team_keys)} unique teams")
    notify_sync(event_key, outcome)
    return 0


def cmd_clear(settings: Settings, event_key: str) -> int:
    store = SnapshotCache(settings.cache_dir)
    try:
        removed = store.delete(event_key)
    except SyncError as e:
        print(f"ERROR: {user_message(e)}")
        return 1

    if removed:
        print(f"Deleted cached data for event '{event_key}'")
    else:
        print(f"No cached data for event '{event_key}'")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 2
    if args.api_key:
        settings.api_key = args.api_key
    if args.cache_dir:
        settings.cache_dir = args.cache_dir
    if args.timeout is not None:
        settings.timeout = args.timeout

    if args.command == "events":
        return cmd_events(settings)
    if args.command == "sync":
        return cmd_sync(settings, args.event_key)
    return cmd_clear(settings, args.event_key)


if __name__ == "__main__":
    sys.exit(main())
