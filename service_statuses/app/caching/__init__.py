"""
Statuses caching package.

Only HTTP caching directives live here: rendered pages are cached by shared
caches downstream, never inside the service.
"""

from .cache_control import (
    CacheControlPolicy,
    seconds_from_days,
    seconds_from_hours,
    seconds_from_minutes,
)

__all__ = [
    "CacheControlPolicy",
    "seconds_from_days",
    "seconds_from_hours",
    "seconds_from_minutes",
]
