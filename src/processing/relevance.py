"""
Three-layer keyword relevance filter plus the location gate.
"""
import logging
import re
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from core.categories import (
    Category,
    LOCATION_GATED_CATEGORIES,
    RELEVANCE_PLANNER_CATEGORIES,
)
from core.entities import NormalizedItem
from processing.keywords import (
    ALL_NEGATIVE_KEYWORDS,
    CATEGORY_POSITIVE_KEYWORDS,
    FORWARD_LOOKING_SIGNALS,
)

logger = logging.getLogger(__name__)

_ROUNDUP_COUNT_RE = re.compile(r"\d+ new", re.IGNORECASE)
_ROUNDUP_WORD_RE = re.compile(r"ott|releases|week", re.IGNORECASE)


def is_roundup(title: str) -> bool:
    """Multi-item list article such as "12 new OTT releases this week"."""
    return bool(_ROUNDUP_COUNT_RE.search(title) and _ROUNDUP_WORD_RE.search(title))


class KeywordMatcher:
    """
    Keyword matching with word-boundary safety for single words.

    "review" must not hit "preview" and "fair" must not hit "unfair", so
    single words go through a compiled \\b...\\b pattern. Phrases with a
    space cannot collide that way and use substring containment.

    Compiled patterns are cached for the life of the process and never
    replaced once stored.
    """

    def __init__(self) -> None:
        self._cache: Dict[str, re.Pattern] = {}
        self._lock = threading.Lock()

    def _pattern(self, word: str) -> re.Pattern:
        pattern = self._cache.get(word)
        if pattern is None:
            with self._lock:
                pattern = self._cache.get(word)
                if pattern is None:
                    pattern = re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)
                    self._cache[word] = pattern
        return pattern

    def matches(self, text: str, keyword: str) -> bool:
        keyword = keyword.lower()
        if " " in keyword:
            return keyword in text
        return bool(self._pattern(keyword).search(text))

    def matches_any(self, text: str, keywords: Iterable[str]) -> bool:
        return any(self.matches(text, k) for k in keywords if k)

    def cached_count(self) -> int:
        return len(self._cache)


_matcher = KeywordMatcher()


def get_matcher() -> KeywordMatcher:
    return _matcher


def forward_score(text: str, signals: Sequence[str] = FORWARD_LOOKING_SIGNALS) -> int:
    """Number of forward-looking signals contained in the lower-cased text."""
    return sum(1 for signal in signals if signal in text)


@dataclass(frozen=True)
class RelevanceVerdict:
    keep: bool
    forward_score: int
    reason: Optional[str] = None


class RelevanceFilter:
    """
    Keyword tables merged with user additions once per batch.

    keywords maps a category name (or "negative") to extra keywords;
    locations are the user's places, matched case-insensitively.
    """

    def __init__(
        self,
        keywords: Optional[Mapping[str, Iterable[str]]] = None,
        locations: Optional[Iterable[str]] = None,
        matcher: Optional[KeywordMatcher] = None,
    ):
        keywords = keywords or {}
        self.matcher = matcher or get_matcher()

        self.negatives: List[str] = [
            *ALL_NEGATIVE_KEYWORDS,
            *(k.lower() for k in keywords.get("negative", []) if k),
        ]
        self.positives: Dict[Category, List[str]] = {
            category: [
                *CATEGORY_POSITIVE_KEYWORDS.get(category, []),
                *(k.lower() for k in keywords.get(category.value, []) if k),
            ]
            for category in Category
        }
        self.locations: List[str] = [loc.lower() for loc in (locations or []) if loc]

    def evaluate(self, item: NormalizedItem) -> RelevanceVerdict:
        text = item.full_text.lower()

        # Layer 1: backward-looking noise; roundups mix tenses legitimately
        if not item.is_roundup and self.matcher.matches_any(text, self.negatives):
            return RelevanceVerdict(keep=False, forward_score=0, reason="negative_keyword")

        # Layer 2: scored, never filters on its own
        score = forward_score(text)

        # Layer 3
        if item.category in RELEVANCE_PLANNER_CATEGORIES:
            positives = self.positives.get(item.category, [])
            if score == 0 and not self.matcher.matches_any(text, positives):
                return RelevanceVerdict(keep=False, forward_score=score, reason="no_positive_match")

        # Layer 4
        if item.category in LOCATION_GATED_CATEGORIES:
            if not any(loc in text for loc in self.locations):
                return RelevanceVerdict(keep=False, forward_score=score, reason="location")

        return RelevanceVerdict(keep=True, forward_score=score)


def is_relevant(
    item: NormalizedItem,
    keywords: Optional[Mapping[str, Iterable[str]]] = None,
    locations: Optional[Iterable[str]] = None,
) -> bool:
    return RelevanceFilter(keywords, locations).evaluate(item).keep
