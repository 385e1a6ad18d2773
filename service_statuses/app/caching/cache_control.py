"""
Cache-Control directives for edge caching of rendered pages.

Pages are never cached in-process; freshness is delegated to shared caches
(CDN) with ``s-maxage`` and ``stale-while-revalidate``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import MutableMapping


SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def seconds_from_minutes(minutes: int) -> int:
    return SECONDS_PER_MINUTE * minutes


def seconds_from_hours(hours: int) -> int:
    return SECONDS_PER_HOUR * hours


def seconds_from_days(days: int) -> int:
    return SECONDS_PER_DAY * days


@dataclass(frozen=True)
class CacheControlPolicy:
    """Shared-cache directive with a fresh window and a revalidate window."""

    s_maxage: int
    stale_while_revalidate: int

    def __post_init__(self) -> None:
        for name in ("s_maxage", "stale_while_revalidate"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive number of seconds, got {value!r}")

    @classmethod
    def from_durations(cls, *, fresh_minutes: int, stale_days: int) -> "CacheControlPolicy":
        return cls(
            s_maxage=seconds_from_minutes(fresh_minutes),
            stale_while_revalidate=seconds_from_days(stale_days),
        )

    def header_value(self) -> str:
        return f"public, s-maxage={self.s_maxage}, stale-while-revalidate={self.stale_while_revalidate}"

    def apply(self, headers: MutableMapping[str, str]) -> None:
        """Set ``Cache-Control`` on an outgoing header mapping."""
        headers["Cache-Control"] = self.header_value()
