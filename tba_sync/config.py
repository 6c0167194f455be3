"""Runtime settings read from the environment."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path

from tba_sync.fetcher import DEFAULT_TIMEOUT


def parse_timeout(value: str) -> float:
    """Parse a timeout in seconds; it must be finite and positive."""
    timeout = float(value)
    if not math.isfinite(timeout) or timeout <= 0:
        raise ValueError(f"timeout must be a finite positive number of seconds, got {value!r}")
    return timeout


@dataclass
class Settings:
    api_key: str = ""
    cache_dir: Path = Path("cache")
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from TBA_AUTH_KEY, TBA_CACHE_DIR and TBA_TIMEOUT."""
        raw_timeout = os.environ.get("TBA_TIMEOUT", "")
        timeout = parse_timeout(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT

        return cls(
            api_key=os.environ.get("TBA_AUTH_KEY", ""),
            cache_dir=Path(os.environ.get("TBA_CACHE_DIR", "") or "cache"),
            timeout=timeout,
        )
