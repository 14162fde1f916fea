"""
Base classes for Ingestion
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class RawFeedItem(BaseModel):
    """
    One record as handed over by a feed or search source.
    """
    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""
    link: str = ""
    published_at: Optional[datetime] = None
    guid: Optional[str] = None
    source: str = "feed"
    category: Optional[str] = None  # set by static per-category feeds

    @field_validator("title", "description", "link", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("published_at", mode="before")
    @classmethod
    def _parse_published(cls, value):
        # Unparseable timestamps become "absent" instead of failing the record
        if value in (None, ""):
            return None
        if isinstance(value, datetime):
            return value
        text = str(value).strip()
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
        try:
            # RSS pubDate: "Mon, 01 Jan 2024 12:00:00 GMT"
            return parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None

    @field_validator("published_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class SourceAdapter(ABC):
    """
    Base interface for all ingestion sources.
    """

    name: str

    @abstractmethod
    async def fetch_items(self) -> List[RawFeedItem]:
        """
        Fetch the source's current items.
        Must NEVER raise uncaught exceptions.
        """
        raise NotImplementedError
