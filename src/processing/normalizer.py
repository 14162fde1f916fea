"""
Turns raw feed records into NormalizedItem objects.
"""
import html
import logging
import re
from datetime import date, datetime
from typing import List, Optional

from core.categories import Category, parse_category
from core.entities import NormalizedItem, SubItem
from ingestion.base import RawFeedItem
from processing.classifier import classify
from processing.dates import extract_date
from processing.relevance import is_roundup

logger = logging.getLogger(__name__)

_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&quot;": '"',
    "&#39;": "'",
    "&lt;": "<",
    "&gt;": ">",
}
_ENTITY_RE = re.compile(r"&[a-z0-9#]+;", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"</?[^>]+(?:>|$)")

_ROUNDUP_LINE_SPLIT_RE = re.compile(r"<br\s*/?>|\n|</li>|</p>|•", re.IGNORECASE)
_NUMBERING_RE = re.compile(r"^\d+\.\s*")
_LEADING_DASH_RE = re.compile(r"^[-–—]\s*")
_PARENS_RE = re.compile(r"\(.*\)")

OTT_PLATFORMS = [
    "netflix", "prime", "prime video", "hotstar", "sony liv", "zee5",
    "jiocinema", "aha", "sunnxt", "hulu", "disney",
]
# Longest first so "prime video" wins over "prime"
_PLATFORM_RE = re.compile(
    r"\b(" + "|".join(re.escape(p) for p in sorted(OTT_PLATFORMS, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)


def strip_html(text: Optional[str]) -> str:
    """Decode common entities and drop markup, scripts and styles."""
    if not text:
        return ""

    text = _ENTITY_RE.sub(lambda m: _ENTITIES.get(m.group(0).lower(), m.group(0)), str(text))
    text = _SCRIPT_RE.sub("", text)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    return text.strip()


def parse_roundup_content(raw_html: str, reference: date | datetime | None = None) -> List[SubItem]:
    """
    Best-effort extraction of the entries listed in a roundup body.

    Looks for lines such as "1. Movie Name (Netflix) - Feb 5" that name a
    streaming platform or carry a date.
    """
    items: List[SubItem] = []

    for line in _ROUNDUP_LINE_SPLIT_RE.split(raw_html or ""):
        clean = html.unescape(strip_html(line)).strip()
        if len(clean) < 5:
            continue

        platform_match = _PLATFORM_RE.search(clean)
        extracted = extract_date(clean, reference)
        if not platform_match and extracted is None:
            continue

        title = _NUMBERING_RE.sub("", clean)
        title = _LEADING_DASH_RE.sub("", title)
        title = _PARENS_RE.sub("", title).strip()
        if len(title) < 3:
            continue

        platform = platform_match.group(0).capitalize() if platform_match else "OTT"
        items.append(
            SubItem(
                title=title,
                date=extracted.start if extracted else None,
                platform=platform,
            )
        )

    return items


def normalize_item(raw: RawFeedItem, reference: Optional[datetime] = None) -> NormalizedItem:
    """
    Build the structured item for one raw record.

    The publish timestamp (or reference, for undated records) anchors
    relative dates and missing years. The category comes from the static
    feed when it has one, otherwise from the classifier.
    """
    title = strip_html(raw.title)
    description = strip_html(raw.description)
    full_text = f"{title} {description}"

    anchor = raw.published_at or reference
    extracted = extract_date(full_text, anchor)

    category = parse_category(raw.category) or classify(full_text)

    roundup = is_roundup(title)
    sub_items: List[SubItem] = []
    if roundup and category == Category.MOVIES:
        # The raw description keeps the list markup the parser splits on
        sub_items = parse_roundup_content(raw.description, anchor)

    return NormalizedItem(
        id=raw.guid or raw.link or title,
        title=title,
        description=description,
        link=raw.link,
        published_at=raw.published_at,
        extracted_date=extracted,
        category=category,
        is_roundup=roundup,
        sub_items=sub_items,
        source=raw.source,
    )


def normalize_batch(
    raw_items: List[RawFeedItem],
    reference: Optional[datetime] = None,
) -> List[NormalizedItem]:
    normalized: List[NormalizedItem] = []
    for raw in raw_items:
        try:
            normalized.append(normalize_item(raw, reference))
        except Exception as e:
            logger.warning(f"Failed to normalize item {raw.title!r}: {e}")
    return normalized
