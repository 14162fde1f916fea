import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.categories import CATEGORY_MAX_AGE_HOURS, Category

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_HOURS = 60

# Aggregators (MSN, Yahoo) republish old stories with a fresh crawl time and
# leave the original age in the snippet: "• 2mo", "- 5 weeks ago",
# "published 3 months ago". "2 min read" must not match.
_STALE_MARKER_RE = re.compile(
    r"(?:•|-|published)\s*(\d+)\s*(months?|mo|weeks?|w|years?|y)\b\s*(?:ago)?",
    re.IGNORECASE,
)


def effective_max_age_hours(category: Category, max_age_hours: float) -> float:
    """The stricter of the configured limit and the category's own limit."""
    override = CATEGORY_MAX_AGE_HOURS.get(category)
    if override is None:
        return max_age_hours
    return min(max_age_hours, override)


def is_fresh(
    published_at: Optional[datetime],
    category: Category,
    max_age_hours: float = DEFAULT_MAX_AGE_HOURS,
    now: Optional[datetime] = None,
) -> bool:
    """
    Whether an item is recent enough to be actionable.

    Items without a publish timestamp are never fresh; their age cannot be
    verified.
    """
    if published_at is None:
        return False

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.astimezone()
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)

    age = now - published_at
    return age <= timedelta(hours=effective_max_age_hours(category, max_age_hours))


def has_stale_marker(text: str) -> bool:
    match = _STALE_MARKER_RE.search(text or "")
    if not match:
        return False

    quantity = int(match.group(1))
    unit = match.group(2).lower()

    if unit.startswith("mo") or unit.startswith("y"):
        return True
    if unit.startswith("w") and quantity >= 1:
        return True
    return False
