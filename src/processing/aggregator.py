"""
Aggregates normalized items into the timeline, sections and weekly plan.

Per item: id dedup -> category switch -> freshness gate -> stale markers
-> relevance filter -> section / timeline bucketing. Then the batch is
sorted, trimmed and the weekly plan derived from the timeline.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from core.categories import (
    IMMEDIATE_CATEGORIES,
    SECTION_CATEGORIES,
    SECTION_PLANNER_CATEGORIES,
    Category,
    item_icon,
    item_type,
)
from core.entities import NormalizedItem
from core.schemas import (
    PlanItem,
    SectionItem,
    SubItemSchema,
    TimelineDay,
    TimelineItem,
    UpAheadDigest,
)
from processing.dates import to_local_date
from processing.deduplicator import dedupe_batch
from processing.freshness import has_stale_marker, is_fresh
from processing.relevance import RelevanceFilter
from services.config import UpAheadSettings

logger = logging.getLogger(__name__)

SECTION_LIMIT = 5
WEEKLY_PLAN_DAYS = 7
# Festival mentions may trail the day itself by this much
FESTIVAL_GRACE_DAYS = 3
IMMEDIATE_WINDOW = timedelta(hours=24)


@dataclass
class FilterStats:
    """
    Per-stage counters; drops are otherwise silent.
    """
    received: int = 0
    kept: int = 0
    timeline: int = 0
    sections: int = 0
    dropped: Counter = field(default_factory=Counter)

    def drop(self, reason: str) -> None:
        self.dropped[reason] += 1

    def as_dict(self) -> Dict[str, int]:
        return {
            "received": self.received,
            "kept": self.kept,
            "timeline": self.timeline,
            "sections": self.sections,
            **{f"dropped_{k}": v for k, v in sorted(self.dropped.items())},
        }


@dataclass(frozen=True)
class AggregationResult:
    digest: UpAheadDigest
    stats: FilterStats
    kept: List[NormalizedItem] = field(default_factory=list)

    @property
    def dated_items(self) -> List[NormalizedItem]:
        """Kept items with an event date, for the planner store."""
        return [item for item in self.kept if item.extracted_date is not None]


def day_label(target: date, today: date) -> str:
    if target == today:
        return "Today"
    if target == today + timedelta(days=1):
        return "Tomorrow"
    return f"{target:%A}, {target:%b} {target.day}"


def _section_item(item: NormalizedItem) -> SectionItem:
    extracted = item.extracted_date
    return SectionItem(
        title=item.title,
        link=item.link,
        date=extracted.start.isoformat() if extracted else None,
        text=item.title,
        is_roundup=item.is_roundup,
        sub_items_count=len(item.sub_items),
    )


def _timeline_item(item: NormalizedItem) -> TimelineItem:
    if item.is_roundup:
        subtitle = f"{len(item.sub_items) or 'Multiple'} ITEMS"
    else:
        subtitle = item.category.value.upper()

    return TimelineItem(
        id=item.id,
        type=item_type(item.category),
        title=item.title,
        subtitle=subtitle,
        description=item.description,
        tags=[item.category.value],
        link=item.link,
        is_roundup=item.is_roundup,
        sub_items=[
            SubItemSchema(
                title=sub.title,
                date=sub.date.isoformat() if sub.date else None,
                platform=sub.platform,
            )
            for sub in item.sub_items
        ],
    )


def qualifies_for_section(item: NormalizedItem, today: date) -> bool:
    """
    Planner sections want a real event date (roundups excepted) that is
    not already behind us; alerts imply "now" and need none.
    """
    if item.category not in SECTION_CATEGORIES:
        return False

    if item.category not in SECTION_PLANNER_CATEGORIES:
        return True

    extracted = item.extracted_date
    if extracted is None:
        return item.is_roundup

    if item.category == Category.FESTIVALS:
        return (extracted.start - today).days >= -FESTIVAL_GRACE_DAYS
    return extracted.start >= today


def timeline_target(item: NormalizedItem, today: date, now: datetime) -> Optional[date]:
    """Day the item belongs on, or None when it has no place on the timeline."""
    if item.extracted_date is not None:
        return item.extracted_date.start

    if item.category in IMMEDIATE_CATEGORIES and item.published_at is not None:
        if now - _as_utc(item.published_at) < IMMEDIATE_WINDOW:
            return today

    if item.is_roundup:
        return today

    return None


def build_weekly_plan(timeline: List[TimelineDay], today: date) -> Dict[str, List[PlanItem]]:
    days = {day.date_key: day for day in timeline}
    plan: Dict[str, List[PlanItem]] = {}

    for offset in range(WEEKLY_PLAN_DAYS):
        current = today + timedelta(days=offset)
        timeline_day = days.get(current.isoformat())
        plan[f"{current:%A}"] = [
            PlanItem(
                title=entry.title,
                type=entry.type,
                icon=item_icon(entry.type),
                link=entry.link,
            )
            for entry in (timeline_day.items if timeline_day else [])
        ]

    return plan


def _normalize_now(now: Optional[datetime]) -> datetime:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.astimezone()
    return now


def _as_utc(value: datetime) -> datetime:
    # Feeds without a zone are read as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def aggregate(
    items: Iterable[NormalizedItem],
    settings: Optional[UpAheadSettings] = None,
    now: Optional[datetime] = None,
) -> AggregationResult:
    """
    Build the digest for one batch.

    Args:
        items: Normalized items in arrival order
        settings: User settings; defaults when None
        now: Wall clock for the run; the same batch, settings and now
            always produce the same digest

    Returns:
        AggregationResult with the digest and per-stage counters
    """
    settings = settings or UpAheadSettings()
    now = _normalize_now(now)
    today = to_local_date(now)
    stats = FilterStats()

    relevance = RelevanceFilter(
        keywords=settings.keywords,
        locations=settings.effective_locations,
    )

    items = list(items)
    unique = dedupe_batch(items)
    stats.received = len(items)
    if len(unique) < len(items):
        stats.dropped["duplicate"] += len(items) - len(unique)

    kept: List[NormalizedItem] = []
    timeline_map: Dict[str, List[Tuple[int, TimelineItem]]] = {}
    section_candidates: Dict[Category, List[Tuple[int, datetime, SectionItem]]] = {
        category: [] for category in SECTION_CATEGORIES
    }

    for item in unique:
        if not settings.is_enabled(item.category):
            stats.drop("disabled_category")
            continue

        if item.published_at is None:
            stats.drop("no_timestamp")
            continue

        if not is_fresh(item.published_at, item.category, settings.hide_older_than_hours, now):
            stats.drop("too_old")
            continue

        if has_stale_marker(item.full_text.lower()):
            stats.drop("stale_marker")
            continue

        verdict = relevance.evaluate(item)
        if not verdict.keep:
            stats.drop(verdict.reason or "irrelevant")
            logger.debug(f"Dropped {item.title!r}: {verdict.reason}")
            continue

        stats.kept += 1
        kept.append(item)

        if qualifies_for_section(item, today):
            section_candidates[item.category].append(
                (verdict.forward_score, _as_utc(item.published_at), _section_item(item))
            )

        target = timeline_target(item, today, now)
        if target is not None and target >= today:
            timeline_map.setdefault(target.isoformat(), []).append(
                (verdict.forward_score, _timeline_item(item))
            )

    timeline: List[TimelineDay] = []
    for date_key in sorted(timeline_map):
        # sorted() is stable, so equal scores keep arrival order
        ranked = sorted(timeline_map[date_key], key=lambda pair: pair[0], reverse=True)
        timeline.append(
            TimelineDay(
                date_key=date_key,
                label=day_label(date.fromisoformat(date_key), today),
                items=[entry for _, entry in ranked],
            )
        )

    sections: Dict[str, List[SectionItem]] = {}
    for category, candidates in section_candidates.items():
        ranked = sorted(candidates, key=lambda c: (c[0], c[1]), reverse=True)
        sections[category.value] = [entry for _, _, entry in ranked[:SECTION_LIMIT]]

    stats.timeline = sum(len(day.items) for day in timeline)
    stats.sections = sum(len(entries) for entries in sections.values())

    digest = UpAheadDigest(
        timeline=timeline,
        sections=sections,
        weekly_plan=build_weekly_plan(timeline, today),
        last_updated=now.isoformat(),
    )

    logger.info(f"Aggregation stats: {stats.as_dict()}")
    return AggregationResult(digest=digest, stats=stats, kept=kept)
