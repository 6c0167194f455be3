"""The Blue Alliance client for season events, event matches and teams."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import requests

from tba_sync import Alliance, Alliances, Event, EventSnapshot, Match, Team
from tba_sync.errors import (
    DecodeError,
    NetworkError,
    RemoteRejectedError,
    UnauthorizedError,
)
from tba_sync.log import get_logger

TBA_BASE_URL = "https://www.thebluealliance.com/api/v3"
SEASON = 2026
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "TBAEventSync/1.0 (event dashboard data sync)"

AUTH_FAILURE_CODES = (401, 403)
# RecursionError covers pathologically nested JSON
DECODE_ERRORS = (ValueError, KeyError, TypeError, RecursionError)

logger = get_logger(__name__)

T = TypeVar("T")


def fetch_events(api_key: str, timeout: float = DEFAULT_TIMEOUT) -> list[Event]:
    """Fetch all events of the current season, in the order TBA returns them."""
    _require_api_key(api_key)
    response = _get(f"/events/{SEASON}", api_key, timeout, "events")

    status = response.status_code
    if status in AUTH_FAILURE_CODES:
        raise UnauthorizedError()
    if not _is_success(status):
        raise RemoteRejectedError(
            f"TBA API error ({status}): Server error or event not found", status=status
        )

    try:
        events = _parse_list(response.json(), parse_event)
    except DECODE_ERRORS as e:
        raise DecodeError(f"Failed to parse event data: {e}") from e

    logger.info("events_fetched", season=SEASON, count=len(events))
    return events


def fetch_event_data(
    api_key: str, event_key: str, timeout: float = DEFAULT_TIMEOUT
) -> EventSnapshot:
    """Fetch matches and teams for an event and combine them into a snapshot.

    Both requests are issued before either outcome is judged, so a rejected
    credential or a missing event is reported the same way whichever
    request happened to fail first.
    """
    _require_api_key(api_key)

    results: dict[str, requests.Response | NetworkError] = {}
    for resource in ("matches", "teams"):
        try:
            results[resource] = _get(
                f"/event/{event_key}/{resource}", api_key, timeout, resource
            )
        except NetworkError as e:
            results[resource] = e

    matches_result = results["matches"]
    teams_result = results["teams"]
    responses = [r for r in results.values() if not isinstance(r, NetworkError)]

    if any(r.status_code in AUTH_FAILURE_CODES for r in responses):
        raise UnauthorizedError()

    if not isinstance(teams_result, NetworkError) and teams_result.status_code == 404:
        raise RemoteRejectedError(f"Event '{event_key}' not found", status=404)

    for result in (matches_result, teams_result):
        if isinstance(result, NetworkError):
            raise result

    # 404 on matches means nothing is scheduled yet
    if matches_result.status_code == 404:
        matches: list[Match] = []
    elif _is_success(matches_result.status_code):
        matches = _decode_partial(matches_result, parse_match, "matches", event_key)
    else:
        raise RemoteRejectedError(
            f"TBA API error ({matches_result.status_code}): Failed to fetch matches",
            status=matches_result.status_code,
        )

    if not _is_success(teams_result.status_code):
        raise RemoteRejectedError(
            f"TBA API error ({teams_result.status_code}): Failed to fetch teams",
            status=teams_result.status_code,
        )
    teams = _decode_partial(teams_result, parse_team, "teams", event_key)

    if not matches and not teams:
        raise RemoteRejectedError(
            f"No data available for event '{event_key}' - event may not exist "
            "or has no scheduled matches/teams yet"
        )

    snapshot = EventSnapshot.build(matches, teams)
    logger.info(
        "event_data_fetched",
        event_key=event_key,
        matches=len(snapshot.matches),
        teams=len(snapshot.teams),
        team_keys=len(snapshot.team_keys),
    )
    return snapshot


def parse_event(raw: dict[str, Any]) -> Event:
    return Event(
        key=_require_str(raw, "key"),
        name=_require_str(raw, "name"),
        short_name=_optional_str(raw, "short_name"),
        start_date=_require_str(raw, "start_date"),
        end_date=_require_str(raw, "end_date"),
    )


def parse_team(raw: dict[str, Any]) -> Team:
    return Team(
        key=_require_str(raw, "key"),
        team_number=_require_int(raw, "team_number"),
        nickname=_optional_str(raw, "nickname"),
    )


def parse_match(raw: dict[str, Any]) -> Match:
    alliances = raw["alliances"]
    return Match(
        key=_require_str(raw, "key"),
        comp_level=_require_str(raw, "comp_level"),
        match_number=_require_int(raw, "match_number"),
        alliances=Alliances(
            red=_parse_alliance(alliances["red"]),
            blue=_parse_alliance(alliances["blue"]),
        ),
    )


def _parse_alliance(raw: dict[str, Any]) -> Alliance:
    team_keys = raw["team_keys"]
    if not isinstance(team_keys, list) or not all(isinstance(k, str) for k in team_keys):
        raise TypeError("'team_keys' must be a list of strings")
    return Alliance(team_keys=tuple(team_keys))


def _parse_list(payload: Any, parse: Callable[[dict[str, Any]], T]) -> list[T]:
    if not isinstance(payload, list):
        raise TypeError(f"expected a JSON array, got {type(payload).__name__}")
    return [parse(item) for item in payload]


def _decode_partial(
    response: requests.Response,
    parse: Callable[[dict[str, Any]], T],
    resource: str,
    event_key: str,
) -> list[T]:
    """Decode a sub-resource body, treating a malformed body as empty.

    TBA occasionally serves truncated bodies; the rest of the event is
    still worth keeping.
    """
    try:
        return _parse_list(response.json(), parse)
    except DECODE_ERRORS as e:
        logger.warning(
            "fetch_payload_discarded",
            event_key=event_key,
            resource=resource,
            error=str(e),
        )
        return []


def _get(path: str, api_key: str, timeout: float, label: str) -> requests.Response:
    """GET a TBA path, mapping transport failures to NetworkError."""
    url = f"{TBA_BASE_URL}{path}"
    headers = {"X-TBA-Auth-Key": api_key, "User-Agent": USER_AGENT}
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        raise NetworkError(
            f"Timed out after {timeout}s waiting for TBA {label}", timeout=True
        ) from e
    except requests.RequestException as e:
        raise NetworkError(f"Failed to connect to TBA for {label}: {e}") from e

    logger.debug("tba_response", path=path, status=response.status_code)
    return response


def _require_api_key(api_key: str) -> None:
    if not api_key:
        raise UnauthorizedError("Missing API key")


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _require_str(raw: dict[str, Any], field: str) -> str:
    value = raw[field]
    if not isinstance(value, str):
        raise TypeError(f"'{field}' must be a string")
    return value


def _optional_str(raw: dict[str, Any], field: str) -> str | None:
    value = raw.get(field)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"'{field}' must be a string or null")
    return value


def _require_int(raw: dict[str, Any], field: str) -> int:
    value = raw[field]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"'{field}' must be an integer")
    return value
