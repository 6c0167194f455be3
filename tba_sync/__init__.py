"""TBA Event Sync — shared data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Team:
    """A team registered for an event."""

    key: str
    team_number: int
    nickname: str | None = None


@dataclass(frozen=True)
class Alliance:
    """One side of a match, as an ordered list of team keys."""

    team_keys: tuple[str, ...]


@dataclass(frozen=True)
class Alliances:
    red: Alliance
    blue: Alliance


@dataclass(frozen=True)
class Match:
    """A single scheduled or played match."""

    key: str
    comp_level: str
    match_number: int
    alliances: Alliances

    @property
    def team_keys(self) -> tuple[str, ...]:
        return self.alliances.red.team_keys + self.alliances.blue.team_keys


@dataclass
class EventSnapshot:
    """Matches and teams for one event at one point in time."""

    matches: list[Match] = field(default_factory=list)
    teams: list[Team] = field(default_factory=list)
    team_keys: set[str] = field(default_factory=set)

    @classmethod
    def build(cls, matches: list[Match], teams: list[Team]) -> EventSnapshot:
        """Create a snapshot, deriving team_keys from alliances and the team list."""
        team_keys = {key for m in matches for key in m.team_keys}
        team_keys.update(t.key for t in teams)
        return cls(matches=list(matches), teams=list(teams), team_keys=team_keys)


@dataclass(frozen=True)
class Event:
    """An event from the season listing. Never persisted."""

    key: str
    name: str
    start_date: str
    end_date: str
    short_name: str | None = None


class Origin(str, Enum):
    FRESH = "fresh"
    CACHED = "cached"


@dataclass
class FetchOutcome:
    """A snapshot plus where it came from."""

    snapshot: EventSnapshot
    origin: Origin

    @property
    def is_cached(self) -> bool:
        return self.origin is Origin.CACHED
