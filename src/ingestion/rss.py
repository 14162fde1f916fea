"""
Ingestion from RSS sources
"""
import logging
from calendar import timegm
from datetime import datetime, timezone
from typing import List, Optional

import feedparser
import httpx

from ingestion.base import SourceAdapter, RawFeedItem

logger = logging.getLogger(__name__)

USER_AGENT = "up-ahead/1.0 (+feed reader)"


def _published(entry) -> Optional[datetime]:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    try:
        return datetime.fromtimestamp(timegm(parsed), tz=timezone.utc)
    except (OverflowError, ValueError, TypeError):
        return None


def parse_feed(text: str, source_name: str, category: Optional[str] = None) -> List[RawFeedItem]:
    """Turn an RSS/Atom document into raw feed items."""
    feed = feedparser.parse(text)
    items: List[RawFeedItem] = []

    for entry in feed.entries:
        items.append(
            RawFeedItem(
                title=entry.get("title", ""),
                description=entry.get("summary", "") or entry.get("description", ""),
                link=entry.get("link", ""),
                published_at=_published(entry),
                guid=entry.get("id"),
                source=source_name,
                category=category,
            )
        )

    return items


class RSSAdapter(SourceAdapter):
    def __init__(
        self,
        feed_url: str,
        source_name: str,
        category: Optional[str] = None,
        timeout: float = 15.0,
    ):
        self.feed_url = feed_url
        self.name = source_name
        self.category = category
        self.timeout = timeout

    async def fetch_items(self) -> List[RawFeedItem]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
            ) as client:
                resp = await client.get(self.feed_url)
                resp.raise_for_status()

            return parse_feed(resp.text, self.name, self.category)

        except Exception as e:
            logger.warning(f"Failed to fetch feed {self.feed_url}: {e}")
            return []
