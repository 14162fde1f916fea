import asyncio
from datetime import datetime, timezone
from typing import List

import pytest

from core.categories import Category
from ingestion.base import RawFeedItem, SourceAdapter
from ingestion.fetcher import fetch_all
from ingestion.google_news import GoogleNewsAdapter, search_url
from ingestion.rss import RSSAdapter, parse_feed
from ingestion.source_factory import (
    CATEGORY_QUERIES,
    STATIC_FEEDS,
    build_queries,
    create_adapters_from_settings,
)
from services.config import UpAheadSettings

from conftest import StaticSource

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>City news</title>
    <item>
      <title>Power cut in Chennai tomorrow</title>
      <link>https://example.com/power</link>
      <guid>power-1</guid>
      <description>&lt;b&gt;TANGEDCO&lt;/b&gt; maintenance</description>
      <pubDate>Sat, 10 Jan 2026 06:30:00 GMT</pubDate>
    </item>
    <item>
      <title>Flower show</title>
      <link>https://example.com/flowers</link>
    </item>
  </channel>
</rss>
"""


class FailingSource(SourceAdapter):
    name = "failing"

    async def fetch_items(self) -> List[RawFeedItem]:
        raise RuntimeError("feed down")


class SlowSource(SourceAdapter):
    name = "slow"

    async def fetch_items(self) -> List[RawFeedItem]:
        await asyncio.sleep(5)
        return [RawFeedItem(title="too late")]


class TestRawFeedItem:
    def test_rfc_2822_date(self):
        item = RawFeedItem(title="x", published_at="Sat, 10 Jan 2026 06:30:00 GMT")
        assert item.published_at == datetime(2026, 1, 10, 6, 30, tzinfo=timezone.utc)

    def test_iso_date(self):
        item = RawFeedItem(title="x", published_at="2026-01-10T06:30:00+05:30")
        assert item.published_at.utcoffset().total_seconds() == 5.5 * 3600

    def test_naive_date_is_utc(self):
        item = RawFeedItem(title="x", published_at="2026-01-10T06:30:00")
        assert item.published_at.tzinfo == timezone.utc

    def test_garbage_date_is_absent(self):
        assert RawFeedItem(title="x", published_at="sometime soon").published_at is None

    def test_none_fields(self):
        item = RawFeedItem(title=None, description=None, link=None)
        assert (item.title, item.description, item.link) == ("", "", "")


class TestParseFeed:
    def test_entries(self):
        items = parse_feed(RSS, "city", category="alerts")

        assert [i.title for i in items] == ["Power cut in Chennai tomorrow", "Flower show"]
        first = items[0]
        assert first.guid == "power-1"
        assert first.link == "https://example.com/power"
        assert "TANGEDCO" in first.description
        assert first.published_at == datetime(2026, 1, 10, 6, 30, tzinfo=timezone.utc)
        assert first.source == "city"
        assert first.category == "alerts"

    def test_missing_date(self):
        assert parse_feed(RSS, "city")[1].published_at is None

    def test_not_a_feed(self):
        assert parse_feed("<html>nope</html>", "city") == []


class TestGoogleNews:
    def test_search_url(self):
        url = search_url("power cut Chennai", "7d")
        assert url.startswith("https://news.google.com/rss/search?q=power%20cut%20Chennai+when:7d")
        assert url.endswith("&hl=en-IN&gl=IN&ceid=IN:en")

    def test_adapter(self):
        adapter = GoogleNewsAdapter("concert tickets Muscat", window="3d")
        assert isinstance(adapter, RSSAdapter)
        assert adapter.name == "concert tickets Muscat"
        assert adapter.category is None
        assert "when:3d" in adapter.feed_url


class TestSourceFactory:
    def test_location_scoped_queries(self):
        queries = build_queries(Category.EVENTS, ["Chennai", "Muscat"])
        assert len(queries) == 2 * len(CATEGORY_QUERIES[Category.EVENTS])
        assert "concert tickets Muscat" in queries

    def test_country_skipped_for_hyper_local(self):
        assert not any(q.endswith("India") for q in build_queries(Category.ALERTS, ["India"]))
        assert any(q.endswith("India") for q in build_queries(Category.MOVIES, ["India"]))

    def test_unscoped_queries(self):
        assert build_queries(Category.FESTIVALS, ["Chennai"]) == CATEGORY_QUERIES[Category.FESTIVALS]

    def test_only_enabled_categories(self):
        settings = UpAheadSettings(categories={c.value: c == Category.FESTIVALS for c in Category})

        adapters = create_adapters_from_settings(settings)

        static = [a for a in adapters if not isinstance(a, GoogleNewsAdapter)]
        assert [a.feed_url for a in static] == STATIC_FEEDS[Category.FESTIVALS]
        assert static[0].category == "festivals"
        assert len(adapters) == len(STATIC_FEEDS[Category.FESTIVALS]) + len(
            CATEGORY_QUERIES[Category.FESTIVALS]
        )

    def test_unique_urls(self):
        adapters = create_adapters_from_settings(UpAheadSettings(locations=["Chennai", "Chennai"]))
        urls = [a.feed_url for a in adapters]
        assert len(urls) == len(set(urls))


class TestFetchAll:
    @pytest.mark.asyncio
    async def test_failing_source_is_isolated(self):
        good = StaticSource("good", [RawFeedItem(title="Flower show")])

        items = await fetch_all([FailingSource(), good])

        assert [i.title for i in items] == ["Flower show"]

    @pytest.mark.asyncio
    async def test_slow_source_times_out(self):
        good = StaticSource("good", [RawFeedItem(title="Flower show")])

        items = await fetch_all([SlowSource(), good], timeout=0.05)

        assert [i.title for i in items] == ["Flower show"]

    @pytest.mark.asyncio
    async def test_source_order_is_kept(self):
        sources = [
            StaticSource(f"s{i}", [RawFeedItem(title=f"item {i}")]) for i in range(5)
        ]

        items = await fetch_all(sources, concurrency=2)

        assert [i.title for i in items] == [f"item {i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_no_sources(self):
        assert await fetch_all([]) == []
