"""
Unit tests for Cache-Control composition.
"""

import pytest

from service_statuses.app.caching import (
    CacheControlPolicy,
    seconds_from_days,
    seconds_from_hours,
    seconds_from_minutes,
)


class TestUnitConversion:
    """Test cases for duration helpers."""

    def test_minutes(self):
        assert seconds_from_minutes(1) == 60
        assert seconds_from_minutes(10) == 600

    def test_hours(self):
        assert seconds_from_hours(1) == 3600
        assert seconds_from_hours(24) == seconds_from_days(1)

    def test_days(self):
        assert seconds_from_days(30) == 2592000


class TestCacheControlPolicy:
    """Test cases for CacheControlPolicy."""

    def test_ten_minutes_thirty_days(self):
        """Test the default page directive."""
        policy = CacheControlPolicy.from_durations(fresh_minutes=10, stale_days=30)
        assert policy.header_value() == "public, s-maxage=600, stale-while-revalidate=2592000"

    def test_apply_sets_header(self):
        headers = {}
        CacheControlPolicy(s_maxage=60, stale_while_revalidate=120).apply(headers)
        assert headers == {"Cache-Control": "public, s-maxage=60, stale-while-revalidate=120"}

    @pytest.mark.parametrize("s_maxage,swr", [(0, 10), (10, 0), (-1, 10), (1.5, 10), (True, 10), ("60", 10)])
    def test_rejects_non_positive_or_non_integer(self, s_maxage, swr):
        with pytest.raises(ValueError):
            CacheControlPolicy(s_maxage=s_maxage, stale_while_revalidate=swr)
