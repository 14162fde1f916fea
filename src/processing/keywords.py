"""
Keyword tables for classification and relevance filtering.

Kept as data so precedence and coverage can be audited in one place.
Single words are matched on word boundaries by the relevance filter;
entries containing a space are matched as plain substrings.
"""
from typing import Dict, List, Tuple

from core.categories import Category

# ----------------------------
# Category classification
# ----------------------------
# Checked in order against the lower-cased text by substring containment.
# The first group with a hit decides the category, so more specific groups
# come first ("show" appears in sports and events copy alike).
CATEGORY_RULES: List[Tuple[Category, Tuple[str, ...]]] = [
    (Category.ALERTS, ("power cut", "power shutdown", "tangedco", "tneb")),
    (Category.ALERTS, ("traffic advisory", "road closure", "water supply")),
    (Category.WEATHER_ALERTS, ("cyclone", "heavy rain", "weather warning", "heat wave", "imd")),
    (Category.MOVIES, ("movie", "release", "trailer", "film", "cinema", "ott", "booking")),
    (Category.SPORTS, ("cricket", "ipl", "match", "football", "kabaddi", "tournament")),
    (Category.FESTIVALS, (
        "festival", "holiday", "jayanti", "puja", "pongal", "diwali", "ramadan", "eid",
    )),
    (Category.SHOPPING, ("sale", "offer", "discount", "shopping", "deal", "expo")),
    (Category.CIVIC, ("minister", "vip visit", "rally", "protest", "bandh", "corporation")),
    (Category.EVENTS, (
        "concert", "exhibition", "show", "workshop", "theatre", "opera", "sabha", "comedy",
    )),
    (Category.ALERTS, ("alert", "warning", "shut")),
]

# ----------------------------
# Layer 1: negative keywords
# ----------------------------
# Backward-looking or non-plannable copy, grouped by noise type.
NEGATIVE_KEYWORDS: Dict[str, List[str]] = {
    "commentary": [
        "review", "reviewed", "reviews",
        "opinion", "editorial", "column", "op-ed",
        "analysis", "deep dive", "explainer", "explained",
        "interview", "memoir", "podcast", "recap",
        "retrospective", "lookback", "throwback",
    ],
    "gossip": [
        "gossip", "rumour", "rumor", "spotted", "dating",
        "divorce", "controversy", "trolled", "slammed",
        "reacts", "reaction", "claps back", "feud",
        "leaked", "wardrobe malfunction", "breakup",
    ],
    "crime": [
        "arrested", "murder", "stabbed", "robbery",
        "scam", "fraud", "accused", "chargesheet",
        "sentenced", "bail", "fir filed", "kidnap",
        "suicide", "death toll", "fatal",
    ],
    "finance_noise": [
        "quarterly results", "earnings call", "dividend",
        "stock split", "ipo allotment", "listing gains",
        "shareholding pattern", "promoter stake",
        "mutual fund nav", "portfolio rebalancing",
    ],
    "political_noise": [
        "alleges", "slams", "hits out", "war of words",
        "defamation", "no confidence", "horse trading",
        "exit poll", "poll prediction", "meme",
    ],
    "past_tense": [
        "was held", "concluded", "wrapped up",
        "came to an end", "successfully completed",
        "inaugurated by", "flagged off",
        "took place", "was celebrated",
    ],
    "obituary": [
        "passes away", "passed away", "demise", "rip",
        "condolences", "last rites", "funeral",
        "pays tribute", "mourns", "obituary",
    ],
    "listicle": [
        "top 10", "top 5", "best of", "worst of",
        "reasons why", "things you", "ranked",
        "all you need to know", "everything we know",
    ],
    "collection_reports": [
        "box office collection", "day 1 collection",
        "total collection", "worldwide gross",
        "opening weekend", "first week collection",
        "crosses crore", "nett collection",
    ],
    "clickbait": [
        "shocking", "you won't believe", "jaw dropping",
        "gone viral", "breaks the internet", "exclusive",
    ],
}

ALL_NEGATIVE_KEYWORDS: Tuple[str, ...] = tuple(
    keyword for group in NEGATIVE_KEYWORDS.values() for keyword in group
)

# ----------------------------
# Layer 2: forward-looking signals
# ----------------------------
FORWARD_LOOKING_SIGNALS: Tuple[str, ...] = (
    # something is coming
    "upcoming", "scheduled", "starting", "launches", "opens",
    "begins", "commences", "from today", "this weekend",
    "next week", "releasing", "premieres", "debuts",
    "kicks off", "set to", "slated for", "expected on",
    "effective from", "valid till", "last date", "deadline",
    "registrations open", "bookings open", "doors open",
    # something to do
    "book now", "tickets available", "grab your", "register",
    "rsvp", "sign up", "enroll", "apply before",
    "limited seats", "early bird", "pre-order",
    "advance booking", "buy tickets", "entry free",
    # physical venue
    "venue", "stadium", "auditorium", "convention centre",
    "exhibition hall", "multiplex", "arena", "grounds",
    # structured timing
    "schedule", "timetable", "lineup", "itinerary",
    "match day", "race day", "show timings", "showtimes",
    "time slot", "batch",
)

# ----------------------------
# Layer 3: category positives
# ----------------------------
CATEGORY_POSITIVE_KEYWORDS: Dict[Category, List[str]] = {
    Category.MOVIES: [
        "release date", "releasing", "in theatres", "in theaters",
        "first day", "advance booking", "fdfs",
        "premiere", "preview", "sneak peek", "special screening",
        "ott release", "streaming from", "now streaming",
        "available on", "direct to ott", "digital premiere",
        "tickets", "showtimes", "book now", "bookmyshow",
        "ticketnew", "paytm movies",
        "trailer launch", "teaser release", "motion poster",
    ],
    Category.EVENTS: [
        "concert", "live music", "standup", "comedy show",
        "theatre", "theater", "drama", "stage play",
        "dance recital", "sabha", "kutcheri", "kutchery",
        "exhibition", "expo", "book fair", "trade fair",
        "flea market", "art gallery", "trade show",
        "workshop", "masterclass", "bootcamp", "seminar",
        "webinar", "hackathon", "meetup",
        "food festival", "pop-up", "tasting", "brunch",
        "food walk", "heritage walk", "night market",
        "entry fee", "passes available", "gate open",
        "limited slots", "registration",
    ],
    Category.SPORTS: [
        # padded so "vs" is never matched inside a word
        " vs ", " v/s ", "match", "fixture", "squad announced",
        "playing xi", "toss", "innings",
        "schedule", "points table", "qualifier",
        "semi final", "final", "playoffs",
        "stadium", "live on", "broadcast", "streaming",
        "start time", "kick off", "first ball",
    ],
    Category.FESTIVALS: [
        "holiday", "bank holiday", "gazetted",
        "declared holiday", "government holiday",
        "pongal", "diwali", "deepavali", "navratri",
        "dussehra", "eid", "ramadan", "christmas",
        "onam", "vishu", "ugadi", "holi", "ganesh",
        "jayanti", "puja", "pooja", "thai pusam",
        "observed on", "falls on", "celebrated on",
        "auspicious", "muhurtham", "tithi",
    ],
    Category.SHOPPING: [
        "sale", "mega sale", "flash sale", "clearance",
        "end of season", "flat discount", "upto off",
        "cashback", "coupon", "promo code",
        "shopping festival", "exhibition sale",
        "trade fair", "grand opening",
        "limited period", "ends today", "last day",
        "offer valid", "while stocks last", "hurry",
    ],
    Category.ALERTS: [
        "power cut", "power shutdown", "load shedding",
        "tangedco", "tneb", "scheduled maintenance",
        "water cut", "water supply", "disruption",
        "traffic advisory", "road closure", "diversion",
        "metro shutdown", "bus route change",
        "train cancelled", "flight delayed",
        "boil water advisory", "mosquito fogging",
        "tree trimming", "construction zone",
    ],
    Category.WEATHER_ALERTS: [
        "warning", "alert", "advisory", "watch",
        "red alert", "orange alert", "yellow alert",
        "heavy rain", "very heavy rain", "cyclone",
        "thunderstorm", "heat wave", "cold wave",
        "fog", "flooding", "high tide", "storm surge",
        "imd", "met department", "weather bulletin",
    ],
    Category.CIVIC: [
        "vip movement", "vip visit", "road block",
        "security arrangement", "route change",
        "bandh", "hartal", "strike", "protest march",
        "rasta roko", "rail roko",
        "corporation notice", "tender", "public hearing",
        "ward meeting", "grievance day",
    ],
}
