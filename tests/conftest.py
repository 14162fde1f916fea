from datetime import date, datetime, timezone
from typing import List, Optional

import pytest

from core.categories import Category
from core.entities import ExtractedDate, NormalizedItem, SubItem
from ingestion.base import RawFeedItem, SourceAdapter
from services.database import Database
from services.planner_store import PlannerStore

# Fixed wall clock shared by the pipeline tests
NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


def make_item(
    title: str,
    category: Category = Category.GENERAL,
    description: str = "",
    item_id: Optional[str] = None,
    published_at: Optional[datetime] = NOW,
    extracted_date: Optional[ExtractedDate] = None,
    is_roundup: bool = False,
    sub_items: Optional[List[SubItem]] = None,
) -> NormalizedItem:
    return NormalizedItem(
        id=item_id or title,
        title=title,
        description=description,
        link=f"https://example.com/{(item_id or title).replace(' ', '-').lower()}",
        published_at=published_at,
        extracted_date=extracted_date,
        category=category,
        is_roundup=is_roundup,
        sub_items=sub_items or [],
    )


def on(day: date) -> ExtractedDate:
    return ExtractedDate(start=day, end=None, kind="named")


class StaticSource(SourceAdapter):
    """Serves a fixed list of items."""

    def __init__(self, name: str, items: List[RawFeedItem]):
        self.name = name
        self.items = items

    async def fetch_items(self) -> List[RawFeedItem]:
        return list(self.items)


@pytest.fixture
def planner(tmp_path):
    today = NOW.date()
    return PlannerStore(Database(str(tmp_path / "planner.db")), clock=lambda: today)
