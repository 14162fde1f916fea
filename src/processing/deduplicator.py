import logging
import string
from typing import Any, Iterable, List, Mapping, Optional, Set, Tuple

from core.entities import NormalizedItem

logger = logging.getLogger(__name__)

# Tuned; stored planner records rely on this exact cut-off
SIMILARITY_THRESHOLD = 0.7


def _words(title: str) -> Set[str]:
    # "Weekend!!" and "weekend" are the same word
    tokens = (token.strip(string.punctuation) for token in title.lower().split())
    return {token for token in tokens if token}


def title_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the lower-cased word sets of two titles."""
    words_a = _words(a)
    words_b = _words(b)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def is_duplicate(
    existing: Iterable[Mapping[str, Any]],
    candidate: Mapping[str, Any],
    similarity_threshold: float = SIMILARITY_THRESHOLD,
) -> Tuple[bool, Optional[str]]:
    """
    Check a record against the records already stored for a day.

    Returns:
        Tuple of (is_duplicate, reason)
    """
    title = candidate.get("title") or ""

    for record in existing:
        if record.get("id") == candidate.get("id"):
            return True, "same_id"

        other = record.get("title") or ""
        if title and other:
            score = title_similarity(other, title)
            if score > similarity_threshold:
                return True, f"similar_title_{score:.3f}"

    return False, None


def dedupe_batch(items: Iterable[NormalizedItem]) -> List[NormalizedItem]:
    """First occurrence of each id wins; later ones are dropped."""
    unique: List[NormalizedItem] = []
    seen_ids = set()

    for item in items:
        if item.id in seen_ids:
            logger.debug(f"Skipping batch duplicate: {item.title}")
            continue
        seen_ids.add(item.id)
        unique.append(item)

    return unique
