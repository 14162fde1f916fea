from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from core.categories import Category


DATE_KINDS = ("iso", "numeric", "named", "range", "relative", "deadline")


@dataclass(frozen=True)
class ExtractedDate:
    """
    Event date (or date span) recovered from free text.
    """
    start: date
    end: Optional[date]
    kind: str

    def __post_init__(self):
        if self.kind not in DATE_KINDS:
            raise ValueError(f"Unknown date kind: {self.kind}")

    @property
    def last_day(self) -> date:
        return self.end or self.start


@dataclass(frozen=True)
class SubItem:
    """
    One entry parsed out of a roundup article body.
    """
    title: str
    date: Optional[date]
    platform: str


@dataclass(frozen=True)
class NormalizedItem:
    """
    Canonical representation of one feed record inside a single ingestion run.
    """
    id: str
    title: str
    description: str
    link: str
    published_at: Optional[datetime]
    extracted_date: Optional[ExtractedDate]
    category: Category
    is_roundup: bool = False
    sub_items: List[SubItem] = field(default_factory=list)
    source: str = "feed"

    @property
    def full_text(self) -> str:
        return f"{self.title} {self.description}"
