"""
Source Factory - Creates ingestion adapters from settings.
"""
import logging
from typing import Dict, List

from core.categories import Category
from ingestion.base import SourceAdapter
from ingestion.google_news import GoogleNewsAdapter
from ingestion.rss import RSSAdapter
from services.config import UpAheadSettings

logger = logging.getLogger(__name__)

CATEGORY_QUERIES: Dict[Category, List[str]] = {
    Category.MOVIES: [
        "Tamil movie release this week",
        "new movie release OTT",
        "BookMyShow movies",
        "upcoming movies Kollywood",
        "movie tickets showtimes",
    ],
    Category.EVENTS: [
        "events this week",
        "concert tickets",
        "standup comedy show",
        "exhibition workshops",
        "things to do weekend",
        "theatre shows this week",
        "art exhibition",
        "food festival",
        "cultural event",
        "music sabha",
    ],
    Category.FESTIVALS: [
        "upcoming festivals Tamil Nadu",
        "bank holidays India upcoming",
        "public holidays Tamil Nadu",
        "religious festivals this month India",
        "Oman festivals holidays",
    ],
    Category.ALERTS: [
        "power cut tomorrow",
        "power shutdown schedule",
        "traffic advisory today",
        "metro maintenance",
        "water supply disruption",
        "road closure",
    ],
    Category.WEATHER_ALERTS: [
        "IMD Chennai weather warning",
        "Tamil Nadu heavy rain alert",
        "cyclone warning Chennai",
        "heat wave advisory Tamil Nadu",
        "Oman weather warning Muscat",
    ],
    Category.SPORTS: [
        "IPL schedule matches",
        "cricket match Chennai CSK",
        "ISL football match schedule",
        "Pro Kabaddi schedule",
        "sports events Chennai this week",
    ],
    Category.SHOPPING: [
        "sale offers discount today Chennai",
        "exhibition sale Chennai",
        "Pongal sale Tamil Nadu",
        "Diwali offers Chennai",
        "end of season sale mall Chennai",
        "Muscat shopping festival offers",
    ],
    Category.CIVIC: [
        "VIP visit Chennai road closure",
        "minister visit Tamil Nadu traffic",
        "protest bandh Chennai tomorrow",
        "Chennai corporation announcement",
        "Muscat road closure traffic",
    ],
}

STATIC_FEEDS: Dict[Category, List[str]] = {
    Category.MOVIES: [
        "https://www.hindustantimes.com/feeds/rss/entertainment/tamil-cinema/rssfeed.xml",
        "https://www.hindustantimes.com/feeds/rss/entertainment/bollywood/rssfeed.xml",
    ],
    Category.SPORTS: [
        "https://www.espn.com/espn/rss/news",
    ],
    Category.FESTIVALS: [
        "https://www.timeanddate.com/holidays/india/feed",
    ],
    Category.EVENTS: [
        "https://www.thehindu.com/news/cities/chennai/feeder/default.rss",
    ],
}

# Queries for these are combined with every configured location
LOCATION_SCOPED = frozenset({Category.EVENTS, Category.ALERTS, Category.MOVIES})
# Country-wide "locations" only add noise to hyper-local queries
HYPER_LOCAL = frozenset({Category.EVENTS, Category.ALERTS})
COUNTRY_LOCATIONS = frozenset({"india"})


def build_queries(category: Category, locations: List[str]) -> List[str]:
    queries: List[str] = []
    for base_query in CATEGORY_QUERIES.get(category, []):
        if category not in LOCATION_SCOPED:
            queries.append(base_query)
            continue
        for location in locations:
            if location.lower() in COUNTRY_LOCATIONS and category in HYPER_LOCAL:
                continue
            queries.append(f"{base_query} {location}")
    return queries


def create_adapters_from_settings(
    settings: UpAheadSettings,
    window: str = "7d",
    timeout: float = 15.0,
) -> List[SourceAdapter]:
    """
    Create the static feeds and search adapters for all enabled categories.
    Sources are unique by URL; the first one registered wins.
    """
    adapters: Dict[str, SourceAdapter] = {}
    locations = settings.effective_locations

    for category in settings.enabled_categories():
        for url in STATIC_FEEDS.get(category, []):
            adapters.setdefault(
                url,
                RSSAdapter(feed_url=url, source_name=url, category=category.value, timeout=timeout),
            )

        for query in build_queries(category, locations):
            adapter = GoogleNewsAdapter(query, window=window, timeout=timeout)
            adapters.setdefault(adapter.feed_url, adapter)

    logger.info(f"Prepared {len(adapters)} feeds to fetch")
    return list(adapters.values())
