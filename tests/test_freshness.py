from datetime import datetime, timedelta, timezone

import pytest

from core.categories import Category
from processing.freshness import effective_max_age_hours, has_stale_marker, is_fresh

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


def hours_ago(hours: float) -> datetime:
    return NOW - timedelta(hours=hours)


class TestIsFresh:
    def test_weather_alert_limit(self):
        assert not is_fresh(hours_ago(7), Category.WEATHER_ALERTS, 60, NOW)
        assert is_fresh(hours_ago(5), Category.WEATHER_ALERTS, 60, NOW)

    def test_alert_limit(self):
        assert is_fresh(hours_ago(10), Category.ALERTS, 60, NOW)
        assert not is_fresh(hours_ago(13), Category.ALERTS, 60, NOW)

    def test_default_limit(self):
        assert is_fresh(hours_ago(59), Category.EVENTS, 60, NOW)
        assert not is_fresh(hours_ago(61), Category.EVENTS, 60, NOW)

    def test_configured_limit_is_stricter(self):
        assert not is_fresh(hours_ago(30), Category.GENERAL, 24, NOW)

    def test_festival_window_caps_generous_setting(self):
        assert is_fresh(hours_ago(300), Category.FESTIVALS, 500, NOW)
        assert not is_fresh(hours_ago(400), Category.FESTIVALS, 500, NOW)

    def test_missing_timestamp_is_never_fresh(self):
        assert not is_fresh(None, Category.GENERAL, 60, NOW)

    def test_naive_timestamp_read_as_utc(self):
        published = datetime(2026, 1, 10, 2, 0)
        assert is_fresh(published, Category.ALERTS, 60, NOW)

    def test_effective_limit(self):
        assert effective_max_age_hours(Category.ALERTS, 60) == 12
        assert effective_max_age_hours(Category.ALERTS, 4) == 4
        assert effective_max_age_hours(Category.MOVIES, 60) == 60


class TestStaleMarkers:
    @pytest.mark.parametrize(
        "text",
        [
            "cafe opens in nungambakkam • 2mo",
            "concert tickets - 5 weeks ago",
            "published 3 months ago",
            "match preview • 1y",
        ],
    )
    def test_stale(self, text):
        assert has_stale_marker(text)

    @pytest.mark.parametrize(
        "text",
        [
            "2 min read",
            "bumrah - 5 wickets on day one",
            "• 3 days ago",
            "",
        ],
    )
    def test_not_stale(self, text):
        assert not has_stale_marker(text)
