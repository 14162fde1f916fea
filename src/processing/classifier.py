import logging
from typing import Iterable, Tuple

from core.categories import Category
from processing.keywords import CATEGORY_RULES

logger = logging.getLogger(__name__)


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(k in text for k in keywords)


def classify(
    text: str,
    rules: Iterable[Tuple[Category, Tuple[str, ...]]] = CATEGORY_RULES,
) -> Category:
    """
    Assign a category by the first matching keyword group.

    Matching is plain substring containment on the lower-cased text, which
    favours recall; the relevance filter applies the stricter matching.
    """
    lowered = (text or "").lower()

    for category, keywords in rules:
        if contains_any(lowered, keywords):
            return category

    return Category.GENERAL
