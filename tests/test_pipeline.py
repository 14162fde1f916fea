"""End-to-end runs through fetch, normalize, aggregate and the planner store."""

from datetime import timedelta

import pytest

from core.categories import Category
from core.entities import ExtractedDate
from ingestion.base import RawFeedItem
from processing.dates import to_local_date
from services.config import Config, UpAheadSettings
from workflows import UpAheadPipeline, build_digest
from workflows import up_ahead

from conftest import NOW, StaticSource

PUBLISHED = NOW - timedelta(hours=2)


def power_cut() -> RawFeedItem:
    return RawFeedItem(
        title="Chennai power cut scheduled tomorrow in Adyar",
        description="TANGEDCO maintenance in Besant Nagar",
        link="https://example.com/power",
        published_at=PUBLISHED,
    )


def movie_review() -> RawFeedItem:
    return RawFeedItem(
        title="Film review: a slow burn",
        link="https://example.com/review",
        published_at=PUBLISHED,
    )


class TestBuildDigest:
    @pytest.mark.asyncio
    async def test_chennai_power_cut(self, planner):
        expected = (to_local_date(PUBLISHED) + timedelta(days=1)).isoformat()

        result = await build_digest([power_cut(), movie_review()], planner=planner, now=NOW)
        digest = result.digest

        assert [day.date_key for day in digest.timeline] == [expected]
        entry = digest.timeline[0].items[0]
        assert entry.title == "Chennai power cut scheduled tomorrow in Adyar"
        assert entry.type == "alert"
        assert [s.title for s in digest.sections["alerts"]] == ["Chennai power cut scheduled tomorrow in Adyar"]
        assert result.stats.dropped["negative_keyword"] == 1

        stored = await planner.get_day(expected)
        assert [r.id for r in stored] == ["https://example.com/power"]
        assert stored[0].category == "alerts"

    @pytest.mark.asyncio
    async def test_title_only_power_cut_with_alerts_enabled(self):
        published = NOW - timedelta(hours=2)
        tomorrow = to_local_date(published) + timedelta(days=1)
        item = RawFeedItem(
            title="Chennai power cut scheduled tomorrow in Adyar",
            description="",
            link="https://example.com/power",
            published_at=published,
        )
        settings = UpAheadSettings(categories={"alerts": True}, locations=["Chennai"])

        result = await build_digest([item], settings, now=NOW)

        [kept] = result.kept
        assert kept.category == Category.ALERTS
        assert kept.extracted_date == ExtractedDate(start=tomorrow, end=None, kind="relative")
        assert [day.date_key for day in result.digest.timeline] == [tomorrow.isoformat()]
        assert [s.title for s in result.digest.sections["alerts"]] == [item.title]

    @pytest.mark.asyncio
    async def test_outside_locations(self):
        settings = UpAheadSettings(locations=["Muscat"])

        result = await build_digest([power_cut()], settings, now=NOW)

        assert result.digest.timeline == []
        assert result.stats.dropped["location"] == 1

    @pytest.mark.asyncio
    async def test_planner_failure_does_not_break_digest(self, planner, monkeypatch):
        async def broken(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(planner, "merge_items", broken)

        result = await build_digest([power_cut()], planner=planner, now=NOW)

        assert result.digest.timeline_count == 1


class TestUpAheadPipeline:
    @pytest.mark.asyncio
    async def test_run(self, planner):
        sources = [StaticSource("city", [power_cut(), movie_review()])]
        pipeline = UpAheadPipeline(Config(), planner=planner, sources=sources)

        digest = await pipeline.run(now=NOW)

        assert digest is not None
        assert digest.timeline_count == 1
        assert pipeline.last_result.stats.received == 2

    @pytest.mark.asyncio
    async def test_empty_fetch(self):
        pipeline = UpAheadPipeline(Config(), sources=[])

        digest = await pipeline.run(now=NOW)

        assert digest.timeline == []
        assert len(digest.weekly_plan) == 7

    @pytest.mark.asyncio
    async def test_failure_returns_none(self, monkeypatch):
        async def broken(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(up_ahead, "build_digest", broken)
        pipeline = UpAheadPipeline(Config(), sources=[])

        assert await pipeline.run(now=NOW) is None

    def test_sources_from_settings(self):
        pipeline = UpAheadPipeline(Config())
        assert pipeline.sources
        assert pipeline.name == "up_ahead"
