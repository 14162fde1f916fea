"""
Category labels and the per-category constants shared across the pipeline.
"""
from enum import StrEnum
from typing import Dict, FrozenSet


class Category(StrEnum):
    MOVIES = "movies"
    EVENTS = "events"
    FESTIVALS = "festivals"
    ALERTS = "alerts"
    SPORTS = "sports"
    SHOPPING = "shopping"
    CIVIC = "civic"
    WEATHER_ALERTS = "weather_alerts"
    GENERAL = "general"


# Categories that get a "worth knowing" section in the output
SECTION_CATEGORIES = (
    Category.MOVIES,
    Category.FESTIVALS,
    Category.ALERTS,
    Category.EVENTS,
    Category.SPORTS,
    Category.SHOPPING,
    Category.CIVIC,
    Category.WEATHER_ALERTS,
)

# Must match a positive keyword or carry a forward-looking signal
RELEVANCE_PLANNER_CATEGORIES: FrozenSet[Category] = frozenset({
    Category.MOVIES,
    Category.EVENTS,
    Category.SPORTS,
    Category.SHOPPING,
})

# Need a resolved event date (or a roundup) to appear in their section
SECTION_PLANNER_CATEGORIES: FrozenSet[Category] = frozenset({
    Category.MOVIES,
    Category.FESTIVALS,
    Category.EVENTS,
    Category.SPORTS,
    Category.SHOPPING,
    Category.CIVIC,
})

# Only useful when they name one of the user's locations
LOCATION_GATED_CATEGORIES: FrozenSet[Category] = frozenset({
    Category.ALERTS,
    Category.CIVIC,
})

# Imply "right now"; may land on today's timeline without an extracted date
IMMEDIATE_CATEGORIES: FrozenSet[Category] = frozenset({
    Category.ALERTS,
    Category.WEATHER_ALERTS,
})

CATEGORY_MAX_AGE_HOURS: Dict[Category, int] = {
    Category.WEATHER_ALERTS: 6,
    Category.ALERTS: 12,
    Category.FESTIVALS: 336,
}

ITEM_TYPES: Dict[Category, str] = {
    Category.MOVIES: "movie",
    Category.EVENTS: "event",
    Category.FESTIVALS: "festival",
    Category.ALERTS: "alert",
    Category.SPORTS: "sport",
    Category.SHOPPING: "shopping",
    Category.CIVIC: "civic",
    Category.WEATHER_ALERTS: "weather_alert",
}

ITEM_ICONS: Dict[str, str] = {
    "movie": "🎬",
    "event": "🎭",
    "festival": "🎊",
    "alert": "⚠️",
    "sport": "⚽",
    "shopping": "🛒",
    "civic": "🏛️",
    "weather_alert": "🌪️",
    "general": "📅",
}


def item_type(category: Category) -> str:
    return ITEM_TYPES.get(category, "event")


def item_icon(kind: str) -> str:
    return ITEM_ICONS.get(kind, "📅")


def parse_category(value: str | None) -> Category | None:
    """Map a loose category name onto a Category, or None if unknown."""
    if not value:
        return None
    try:
        return Category(value.strip().lower())
    except ValueError:
        return None
