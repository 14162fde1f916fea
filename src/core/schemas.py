"""
Pydantic schemas for the digest handed to the presentation layer
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _OutputModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SubItemSchema(_OutputModel):
    title: str
    date: Optional[str] = None
    platform: str


class TimelineItem(_OutputModel):
    """
    One entry on a timeline day
    """
    id: str
    type: str
    title: str
    subtitle: str
    description: str
    tags: List[str]
    link: str
    is_roundup: bool = Field(default=False, alias="isRoundup")
    sub_items: List[SubItemSchema] = Field(default_factory=list, alias="subItems")


class TimelineDay(_OutputModel):
    date_key: str = Field(..., alias="dateKey")
    label: str
    items: List[TimelineItem]


class SectionItem(_OutputModel):
    """
    Simplified display record for a "worth knowing" list
    """
    title: str
    link: str
    date: Optional[str] = None
    text: str
    is_roundup: bool = Field(default=False, alias="isRoundup")
    sub_items_count: int = Field(default=0, alias="subItemsCount")


class PlanItem(_OutputModel):
    title: str
    type: str
    icon: str
    link: str


class UpAheadDigest(_OutputModel):
    """
    Complete output of one aggregation run
    """
    timeline: List[TimelineDay]
    sections: Dict[str, List[SectionItem]]
    weekly_plan: Dict[str, List[PlanItem]]
    last_updated: str = Field(..., alias="lastUpdated")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @property
    def timeline_count(self) -> int:
        return sum(len(day.items) for day in self.timeline)
