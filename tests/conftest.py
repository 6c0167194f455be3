"""Shared fixtures: a fake TBA server and an in-memory snapshot store."""

from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any

import pytest
import requests

from tba_sync import EventSnapshot
from tba_sync.errors import CacheNotFoundError
from tba_sync.fetcher import TBA_BASE_URL

FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> Any:
    return json.loads((FIXTURE_DIR / name).read_text())


class FakeResponse:
    def __init__(self, status_code: int, body: Any) -> None:
        self.status_code = status_code
        self._body = body

    def json(self) -> Any:
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body


class FakeTBA:
    """Stands in for requests.get, answering per API path.

    A route is either (status, body) or an exception instance to raise.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.calls: list[dict[str, Any]] = []

    def route(self, path: str, status: int = 200, body: Any = None) -> None:
        self.routes[path] = (status, [] if body is None else body)

    def fail(self, path: str, exc: Exception) -> None:
        self.routes[path] = exc

    def fail_all(self, exc: Exception) -> None:
        self.routes.clear()
        self.routes["*"] = exc

    def __call__(self, url: str, headers: dict | None = None, timeout: float | None = None):
        path = url[len(TBA_BASE_URL):]
        self.calls.append({"path": path, "headers": headers, "timeout": timeout})
        route = self.routes.get(path, self.routes.get("*", (404, {"Error": "not found"})))
        if isinstance(route, Exception):
            raise route
        status, body = route
        return FakeResponse(status, body)


class MemoryStore:
    """In-memory stand-in for SnapshotCache."""

    def __init__(self) -> None:
        self.snapshots: dict[str, EventSnapshot] = {}
        self.save_error: Exception | None = None

    def load(self, event_key: str) -> EventSnapshot:
        if event_key not in self.snapshots:
            raise CacheNotFoundError(f"No cached data found for event '{event_key}'")
        return self.snapshots[event_key]

    def save(self, event_key: str, snapshot: EventSnapshot) -> None:
        if self.save_error is not None:
            raise self.save_error
        self.snapshots[event_key] = snapshot


@pytest.fixture
def tba(monkeypatch: pytest.MonkeyPatch) -> FakeTBA:
    fake = FakeTBA()
    monkeypatch.setattr(requests, "get", fake)
    return fake


@pytest.fixture
def caoc(tba: FakeTBA) -> FakeTBA:
    """Fake TBA serving the 2026caoc fixture event."""
    tba.route("/event/2026caoc/matches", body=load_fixture("2026caoc_matches.json"))
    tba.route("/event/2026caoc/teams", body=load_fixture("2026caoc_teams.json"))
    return tba


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


DEEPLY_NESTED_JSON = "[" * 100000 + "]" * 100000


class _ShortWrite:
    """File wrapper that writes a few bytes and then runs out of disk."""

    def __init__(self, f) -> None:
        self._f = f

    def __enter__(self) -> _ShortWrite:
        return self

    def __exit__(self, *exc) -> bool:
        self._f.close()
        return False

    def write(self, data: str) -> int:
        self._f.write(data[:10])
        self._f.flush()
        raise OSError(errno.ENOSPC, "No space left on device")


@pytest.fixture
def disk_full(monkeypatch: pytest.MonkeyPatch):
    """Make cache writes fail partway through, as on a full disk."""
    real_fdopen = os.fdopen

    def short_fdopen(fd, *args, **kwargs):
        return _ShortWrite(real_fdopen(fd, *args, **kwargs))

    def enable() -> None:
        monkeypatch.setattr(os, "fdopen", short_fdopen)

    return enable
