"""Event snapshot caching for fallback on fetch failures."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from tba_sync import EventSnapshot, Match, Team
from tba_sync.errors import CacheNotFoundError, DecodeError, StorageError
from tba_sync.fetcher import DECODE_ERRORS, parse_match, parse_team
from tba_sync.log import get_logger

logger = get_logger(__name__)


class SnapshotStore(Protocol):
    """What the sync orchestrator needs from a cache."""

    def load(self, event_key: str) -> EventSnapshot: ...

    def save(self, event_key: str, snapshot: EventSnapshot) -> None: ...


class SnapshotCache:
    """One JSON document per event key inside a local directory."""

    def __init__(self, cache_dir: Path | str) -> None:
        self.cache_dir = Path(cache_dir)

    def path_for(self, event_key: str) -> Path:
        if not event_key or "/" in event_key or "\\" in event_key or event_key in (".", ".."):
            raise StorageError(f"Invalid event key for cache: {event_key!r}")
        return self.cache_dir / f"{event_key}_event_data.json"

    def load(self, event_key: str) -> EventSnapshot:
        """Load the cached snapshot for an event."""
        cache_file = self.path_for(event_key)
        if not cache_file.exists():
            raise CacheNotFoundError(f"No cached data found for event '{event_key}'")

        try:
            text = cache_file.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Cached event data is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read cached event data: {e}") from e

        try:
            snapshot = snapshot_from_dict(json.loads(text))
        except DECODE_ERRORS as e:
            raise DecodeError(f"Failed to parse cached event data: {e}") from e

        logger.debug("event_cache_loaded", event_key=event_key, path=str(cache_file))
        return snapshot

    def save(self, event_key: str, snapshot: EventSnapshot) -> None:
        """Write the snapshot, replacing any earlier one for the event."""
        cache_file = self.path_for(event_key)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create cache directory: {e}") from e

        json_str = json.dumps(snapshot_to_dict(snapshot), indent=2, ensure_ascii=False)
        # Write beside the target and swap in, so a failed write keeps the old snapshot
        tmp_path: str | None = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.cache_dir, prefix=f".{event_key}_", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json_str)
            os.replace(tmp_path, cache_file)
        except OSError as e:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise StorageError(f"Failed to write event data to file: {e}") from e

        logger.debug("event_cache_saved", event_key=event_key, path=str(cache_file))

    def delete(self, event_key: str) -> bool:
        """Remove the cached snapshot. Returns False if there was none."""
        cache_file = self.path_for(event_key)
        try:
            cache_file.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete cached event data: {e}") from e
        return True


def team_to_dict(t: Team) -> dict:
    return {"key": t.key, "team_number": t.team_number, "nickname": t.nickname}


def match_to_dict(m: Match) -> dict:
    """Convert a Match to the same shape TBA serves it in."""
    return {
        "key": m.key,
        "comp_level": m.comp_level,
        "match_number": m.match_number,
        "alliances": {
            "red": {"team_keys": list(m.alliances.red.team_keys)},
            "blue": {"team_keys": list(m.alliances.blue.team_keys)},
        },
    }


def snapshot_to_dict(snapshot: EventSnapshot) -> dict:
    return {
        "matches": [match_to_dict(m) for m in snapshot.matches],
        "teams": [team_to_dict(t) for t in snapshot.teams],
        "team_keys": sorted(snapshot.team_keys),
    }


def snapshot_from_dict(data: Any) -> EventSnapshot:
    """Rebuild a snapshot written by snapshot_to_dict.

    Stored team_keys are kept as-is rather than re-derived, so a round trip
    returns exactly what was saved.
    """
    team_keys = data["team_keys"]
    if not isinstance(team_keys, list) or not all(isinstance(k, str) for k in team_keys):
        raise TypeError("'team_keys' must be a list of strings")
    matches = data["matches"]
    teams = data["teams"]
    if not isinstance(matches, list) or not isinstance(teams, list):
        raise TypeError("'matches' and 'teams' must be lists")
    return EventSnapshot(
        matches=[parse_match(m) for m in matches],
        teams=[parse_team(t) for t in teams],
        team_keys=set(team_keys),
    )
