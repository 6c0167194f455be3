"""Pushover alerts for syncs that fell back to the cache or failed outright."""

from __future__ import annotations

import os

import requests

from tba_sync import FetchOutcome
from tba_sync.errors import SyncError, user_message
from tba_sync.log import get_logger

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"

logger = get_logger(__name__)


def notify_sync(event_key: str, result: FetchOutcome | SyncError) -> bool:
    """Alert the operator about a degraded or failed sync.

    Fresh outcomes need no alert. Returns True only if a message was sent;
    Pushover credentials come from PUSHOVER_USER_KEY and PUSHOVER_API_TOKEN.
    """
    if isinstance(result, SyncError):
        title = "Event Sync Failed"
        message = f"Sync failed for {event_key} ({result.error_type.value}):\n\n{user_message(result)}"
    elif result.is_cached:
        snapshot = result.snapshot
        title = "Event Sync Degraded"
        message = (
            f"Live fetch failed for {event_key}; serving cached data "
            f"({len(snapshot.matches)} matches, {len(snapshot.teams)} teams)."
        )
    else:
        return False

    user_key = os.environ.get("PUSHOVER_USER_KEY", "")
    api_token = os.environ.get("PUSHOVER_API_TOKEN", "")
    if not user_key or not api_token:
        logger.debug("pushover_not_configured", event_key=event_key)
        return False

    try:
        resp = requests.post(
            PUSHOVER_URL,
            data={"token": api_token, "user": user_key, "title": title, "message": message},
            timeout=10,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.warning("sync_alert_failed", event_key=event_key, error=str(e))
        return False

    logger.info("sync_alert_sent", event_key=event_key, title=title)
    return True
