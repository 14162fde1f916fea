"""
Google News search queries exposed as RSS sources
"""
from urllib.parse import quote

from ingestion.rss import RSSAdapter

GOOGLE_NEWS_SEARCH_URL = "https://news.google.com/rss/search"


def search_url(query: str, window: str = "7d") -> str:
    # "when:7d" keeps Google from returning archive results
    return f"{GOOGLE_NEWS_SEARCH_URL}?q={quote(query)}+when:{window}&hl=en-IN&gl=IN&ceid=IN:en"


class GoogleNewsAdapter(RSSAdapter):
    """
    Search results carry no category; the classifier decides per item.
    """

    def __init__(self, query: str, window: str = "7d", timeout: float = 15.0):
        super().__init__(
            feed_url=search_url(query, window),
            source_name=query,
            category=None,
            timeout=timeout,
        )
        self.query = query

    def __repr__(self) -> str:
        return f"GoogleNewsAdapter(query={self.query!r})"
