"""Tests for classification, the relevance layers and the location gate."""

import pytest

from core.categories import Category
from processing.classifier import classify
from processing.relevance import (
    KeywordMatcher,
    RelevanceFilter,
    forward_score,
    is_relevant,
    is_roundup,
)

from conftest import make_item


# ── classify ────────────────────────────────────────────────────────────

class TestClassify:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Power cut in Adyar tomorrow", Category.ALERTS),
            ("Heavy rain warning for Chennai", Category.WEATHER_ALERTS),
            ("Cyclone forces cinema closure", Category.WEATHER_ALERTS),
            ("New movie trailer out", Category.MOVIES),
            ("IPL match at Chepauk", Category.SPORTS),
            ("Pongal holiday declared", Category.FESTIVALS),
            ("Mega sale this weekend", Category.SHOPPING),
            ("Carnatic concert at Music Academy", Category.EVENTS),
            ("Minister to inaugurate flyover", Category.CIVIC),
        ],
    )
    def test_precedence(self, text, expected):
        assert classify(text) == expected

    def test_fallback_is_general(self):
        assert classify("Stock index closes higher") == Category.GENERAL

    def test_empty_text(self):
        assert classify("") == Category.GENERAL

    def test_custom_rules(self):
        rules = [(Category.SPORTS, ("chess",))]
        assert classify("Chess olympiad", rules) == Category.SPORTS


# ── roundups ────────────────────────────────────────────────────────────

class TestRoundup:
    def test_count_and_word(self):
        assert is_roundup("12 new OTT releases this week")

    def test_needs_count(self):
        assert not is_roundup("New OTT release on Friday")

    def test_needs_list_word(self):
        assert not is_roundup("5 new cafes open in Besant Nagar")


# ── KeywordMatcher ──────────────────────────────────────────────────────

class TestKeywordMatcher:
    def test_single_word_respects_boundaries(self):
        matcher = KeywordMatcher()
        assert not matcher.matches("preview screening announced", "review")
        assert matcher.matches("a harsh review", "review")

    def test_phrase_uses_substring(self):
        matcher = KeywordMatcher()
        assert matcher.matches("the book fair opens", "book fair")
        assert matcher.cached_count() == 0

    def test_patterns_are_cached(self):
        matcher = KeywordMatcher()
        matcher.matches("one", "fair")
        matcher.matches("two", "fair")
        assert matcher.cached_count() == 1

    def test_matches_any_skips_empty(self):
        matcher = KeywordMatcher()
        assert not matcher.matches_any("anything", ["", "zebra"])


# ── forward score ───────────────────────────────────────────────────────

def test_forward_score_counts_signals():
    assert forward_score("upcoming concert at the venue, book now") == 3
    assert forward_score("nothing to see") == 0


# ── RelevanceFilter ─────────────────────────────────────────────────────

class TestNegativeLayer:
    def test_preview_is_not_review(self):
        item = make_item("Preview screening announced", Category.MOVIES)
        assert RelevanceFilter().evaluate(item).keep

    def test_review_is_dropped(self):
        item = make_item("This movie review is harsh", Category.MOVIES)
        verdict = RelevanceFilter().evaluate(item)
        assert not verdict.keep
        assert verdict.reason == "negative_keyword"

    def test_user_negative_respects_boundaries(self):
        relevance = RelevanceFilter(keywords={"negative": ["fair"]})
        kept = make_item("Unfair queue at the expo venue", Category.EVENTS)
        dropped = make_item("Trade fair at the venue", Category.EVENTS)
        assert relevance.evaluate(kept).keep
        assert not relevance.evaluate(dropped).keep

    def test_roundups_are_exempt(self):
        item = make_item(
            "12 new OTT releases this week",
            Category.MOVIES,
            description="Our review of what to stream",
            is_roundup=True,
        )
        assert RelevanceFilter().evaluate(item).keep


class TestPositiveLayer:
    def test_planner_category_without_signal_is_dropped(self):
        item = make_item("Team news from the dressing room", Category.SPORTS)
        verdict = RelevanceFilter().evaluate(item)
        assert not verdict.keep
        assert verdict.reason == "no_positive_match"

    def test_forward_signal_is_enough(self):
        item = make_item("New store launches in Phoenix mall", Category.SHOPPING)
        verdict = RelevanceFilter().evaluate(item)
        assert verdict.keep
        assert verdict.forward_score == 1

    def test_user_positive_keyword(self):
        item = make_item("Kutcheri at Narada Gana Sabha", Category.EVENTS)
        assert RelevanceFilter().evaluate(item).keep

        item = make_item("Nadaswaram evening in Mylapore", Category.EVENTS)
        assert not RelevanceFilter().evaluate(item).keep
        assert RelevanceFilter(keywords={"events": ["Nadaswaram"]}).evaluate(item).keep

    def test_general_skips_positive_layer(self):
        item = make_item("City council budget", Category.GENERAL)
        assert RelevanceFilter().evaluate(item).keep


class TestLocationGate:
    def test_alert_without_location_is_dropped(self):
        item = make_item("Power cut in Adyar tomorrow", Category.ALERTS)
        verdict = RelevanceFilter(locations=["Chennai"]).evaluate(item)
        assert not verdict.keep
        assert verdict.reason == "location"

    def test_alert_with_location_is_kept(self):
        item = make_item(
            "Power cut in Adyar tomorrow",
            Category.ALERTS,
            description="TANGEDCO lists Chennai areas",
        )
        assert is_relevant(item, locations=["Chennai"])

    def test_location_match_is_case_insensitive(self):
        item = make_item("Road closure near muscat airport", Category.CIVIC)
        assert is_relevant(item, locations=["MUSCAT"])

    def test_other_categories_are_not_gated(self):
        item = make_item("Heavy rain warning issued", Category.WEATHER_ALERTS)
        assert is_relevant(item, locations=["Chennai"])
