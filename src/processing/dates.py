"""
Date extraction for feed snippets.

Layers are tried in a fixed order and the first hit wins:

1. ISO / numeric   "2026-02-14", "14/02/2026"
2. Named           "February 14", "Feb 14, 2026", "14th February"
3. Range           "Feb 10 to Feb 24", "March 3 - 9", "10-24 February"
4. Relative        "tomorrow", "next week", "this Friday", "this weekend"
5. Deadline        "ends Feb 12", "last date March 1"

The order matters because the patterns overlap; an explicit numeric date
must beat a looser relative phrase in the same text.
"""
import logging
import re
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Sequence, Tuple

from core.entities import ExtractedDate

logger = logging.getLogger(__name__)

MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

# Past dates within this window are read as "just happened", not next year
PAST_TOLERANCE_DAYS = 30

# Longest first so "june" is tried before "jun"
_MONTH = "|".join(sorted(MONTHS, key=len, reverse=True))
_DAY = r"(\d{1,2})(?:st|nd|rd|th)?"
_YEAR = r"((?:19|20)\d{2})"
_DASH = r"(?:to|through|–|—|-)"

_ISO_RE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_DMY_RE = re.compile(r"\b(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})\b")

_MONTH_DAY_RE = re.compile(rf"\b({_MONTH})\.?\s+{_DAY}(?:[,\s]+{_YEAR})?\b", re.IGNORECASE)
_DAY_MONTH_RE = re.compile(rf"\b{_DAY}\s+({_MONTH})(?:,?\s+{_YEAR})?\b", re.IGNORECASE)

_RANGE_TWO_MONTHS_RE = re.compile(
    rf"\b({_MONTH})\.?\s+(\d{{1,2}})\s*{_DASH}\s*({_MONTH})\.?\s+(\d{{1,2}})\b", re.IGNORECASE
)
_RANGE_SAME_MONTH_RE = re.compile(
    rf"\b({_MONTH})\.?\s+(\d{{1,2}})\s*{_DASH}\s*(\d{{1,2}})\b", re.IGNORECASE
)
_RANGE_DAYS_FIRST_RE = re.compile(
    rf"\b(\d{{1,2}})\s*{_DASH}\s*(\d{{1,2}})\s+({_MONTH})\b", re.IGNORECASE
)

_DEADLINE_RE = re.compile(
    rf"\b(?:ends?|last date|deadline|valid (?:till|until)|expires?|before)\s+(?:on\s+)?"
    rf"({_MONTH})\.?\s+{_DAY}(?:[,\s]+{_YEAR})?\b",
    re.IGNORECASE,
)

_TOMORROW_RE = re.compile(r"\btomorrow\b")
_TODAY_RE = re.compile(r"\btoday\b")
_NEXT_N_RE = re.compile(r"\bnext\s+(\d+)\s+(day|week)s?\b")
_NEXT_WEEK_RE = re.compile(r"\bnext week\b")
_THIS_WEEKEND_RE = re.compile(r"\bthis weekend\b")
_WEEKDAY_RES = [
    (index, re.compile(rf"\b(?:this|next|coming)\s+{name}\b"))
    for index, name in enumerate(WEEKDAYS)
]


def to_local_date(value: date | datetime | None) -> date:
    """Calendar day of a timestamp in local time (today when None)."""
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def month_number(token: str) -> int:
    return MONTHS[token.lower()]


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def infer_year(month: int, day: int, ref: date) -> Optional[date]:
    """
    Resolve a month/day without a year against the reference date.

    Picks the earliest of last year, this year and next year that is not
    more than PAST_TOLERANCE_DAYS before the reference date.
    """
    for year in (ref.year - 1, ref.year, ref.year + 1):
        candidate = _safe_date(year, month, day)
        if candidate is None:
            continue
        if (ref - candidate).days <= PAST_TOLERANCE_DAYS:
            return candidate
    return None


def _resolve(month: int, day: int, year: Optional[str], ref: date) -> Optional[date]:
    if year:
        return _safe_date(int(year), month, day)
    return infer_year(month, day, ref)


def _find_range(text: str) -> Optional[Tuple[int, re.Match]]:
    for index, pattern in enumerate(
        (_RANGE_TWO_MONTHS_RE, _RANGE_SAME_MONTH_RE, _RANGE_DAYS_FIRST_RE)
    ):
        match = pattern.search(text)
        if match:
            return index, match
    return None


def _defers_to_later_layer(text: str, match: re.Match) -> bool:
    """A named date that opens a range or closes a deadline belongs to that layer."""
    spans = []
    found = _find_range(text)
    if found:
        spans.append(found[1].span())
    deadline = _DEADLINE_RE.search(text)
    if deadline:
        spans.append(deadline.span())
    return any(start <= match.start() < end for start, end in spans)


# Layer 1
def extract_iso(text: str, ref: date) -> Optional[ExtractedDate]:
    for iso in _ISO_RE.finditer(text):
        start = _safe_date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))
        if start:
            return ExtractedDate(start=start, end=None, kind="iso")

    for dmy in _DMY_RE.finditer(text):
        start = _safe_date(int(dmy.group(3)), int(dmy.group(2)), int(dmy.group(1)))
        if start:
            return ExtractedDate(start=start, end=None, kind="numeric")

    return None


# Layer 2
def extract_named(text: str, ref: date) -> Optional[ExtractedDate]:
    match = _MONTH_DAY_RE.search(text)
    if match:
        month, day, year = month_number(match.group(1)), int(match.group(2)), match.group(3)
    else:
        match = _DAY_MONTH_RE.search(text)
        if not match:
            return None
        month, day, year = month_number(match.group(2)), int(match.group(1)), match.group(3)

    if _defers_to_later_layer(text, match):
        return None

    start = _resolve(month, day, year, ref)
    if start is None:
        return None
    return ExtractedDate(start=start, end=None, kind="named")


# Layer 3
def extract_range(text: str, ref: date) -> Optional[ExtractedDate]:
    found = _find_range(text)
    if not found:
        return None

    index, match = found
    groups = match.groups()
    if index == 0:
        start = infer_year(month_number(groups[0]), int(groups[1]), ref)
        end = infer_year(month_number(groups[2]), int(groups[3]), ref)
    elif index == 1:
        month = month_number(groups[0])
        start = infer_year(month, int(groups[1]), ref)
        end = infer_year(month, int(groups[2]), ref)
    else:
        month = month_number(groups[2])
        start = infer_year(month, int(groups[0]), ref)
        end = infer_year(month, int(groups[1]), ref)

    if start is None or end is None:
        return None
    if end < start:
        # "Dec 28 to Jan 3" crosses the year boundary
        end = _safe_date(end.year + 1, end.month, end.day) or start
    return ExtractedDate(start=start, end=end, kind="range")


# Layer 4
def extract_relative(text: str, ref: date) -> Optional[ExtractedDate]:
    lower = text.lower()

    if _TOMORROW_RE.search(lower):
        return ExtractedDate(start=ref + timedelta(days=1), end=None, kind="relative")

    if _TODAY_RE.search(lower):
        return ExtractedDate(start=ref, end=None, kind="relative")

    next_n = _NEXT_N_RE.search(lower)
    if next_n:
        unit = 7 if next_n.group(2) == "week" else 1
        end = ref + timedelta(days=int(next_n.group(1)) * unit)
        return ExtractedDate(start=ref, end=end, kind="relative")

    if _NEXT_WEEK_RE.search(lower):
        monday = ref + timedelta(days=7 - ref.weekday())
        return ExtractedDate(start=monday, end=monday + timedelta(days=6), kind="relative")

    for index, pattern in _WEEKDAY_RES:
        if pattern.search(lower):
            diff = (index - ref.weekday()) % 7 or 7
            return ExtractedDate(start=ref + timedelta(days=diff), end=None, kind="relative")

    if _THIS_WEEKEND_RE.search(lower):
        saturday = ref + timedelta(days=(5 - ref.weekday()) % 7)
        return ExtractedDate(start=saturday, end=saturday + timedelta(days=1), kind="relative")

    return None


# Layer 5
def extract_deadline(text: str, ref: date) -> Optional[ExtractedDate]:
    match = _DEADLINE_RE.search(text)
    if not match:
        return None
    end = _resolve(month_number(match.group(1)), int(match.group(2)), match.group(3), ref)
    if end is None:
        return None
    return ExtractedDate(start=ref, end=end, kind="deadline")


LAYERS: Sequence[Callable[[str, date], Optional[ExtractedDate]]] = (
    extract_iso,
    extract_named,
    extract_range,
    extract_relative,
    extract_deadline,
)


def extract_date(
    text: str,
    reference: date | datetime | None = None,
) -> Optional[ExtractedDate]:
    """
    Best-effort event date for a snippet of text.

    Args:
        text: Title and description of the item
        reference: Publication timestamp used to anchor relative phrases
            and missing years; today when None

    Returns:
        The first layer's result, or None when nothing matches
    """
    if not text:
        return None

    ref = to_local_date(reference)
    for layer in LAYERS:
        result = layer(text, ref)
        if result is not None:
            return result
    return None


def expand_date_keys(result: Optional[ExtractedDate], max_days: int = 14) -> List[str]:
    """YYYY-MM-DD keys covered by the result, capped at max_days."""
    if result is None:
        return []

    keys: List[str] = []
    current = result.start
    while current <= result.last_day and len(keys) < max_days:
        keys.append(current.isoformat())
        current += timedelta(days=1)
    return keys
