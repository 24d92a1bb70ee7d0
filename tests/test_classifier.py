"""
Tests for the keyword classifier.
Run with: pytest tests/test_classifier.py
"""

import pytest

from pocketpm.metadata.classifier import (
    CATEGORIES,
    CATEGORY_FILTERS,
    DEFAULT_CATEGORY,
    classify,
)
from pocketpm.storage.models import Message


def _transcript(user_text: str, ai_text: str) -> list[Message]:
    return [Message(text=user_text, is_user=True), Message(text=ai_text, is_user=False)]


DOG_WALKERS = _transcript(
    "I want to build an app for booking dog walkers",
    "This addresses a real need in the pet care market. Users can find walkers "
    "quickly. This is a Platform for pet owners.",
)


def test_market_keyword_beats_later_groups():
    """'market' is found before any User Research keyword like 'user'."""
    assert classify(DOG_WALKERS) == "Market Research"


def test_priority_order_wins_over_position():
    """Product Strategy outranks Growth even when growth appears first."""
    msgs = _transcript("growth growth growth", "then a product")
    assert classify(msgs) == "Product Strategy"


@pytest.mark.parametrize("user_text, ai_text, expected", [
    ("We should run a survey", "Surveys help a lot", "User Research"),
    ("How do I improve retention?", "Try a referral loop.", "Growth"),
    ("Which kpi matters?", "Watch churn closely.", "Analytics"),
    ("Who are the competitors?", "Three big ones.", "Market Research"),
    ("Should we ship an MVP first?", "Yes.", "Product Strategy"),
])
def test_each_group(user_text, ai_text, expected):
    assert classify(_transcript(user_text, ai_text)) == expected


def test_substring_matching():
    """Keywords match inside longer words: 'users' hits 'user'."""
    assert classify(_transcript("My users are unhappy", "Talk to them.")) == "User Research"


def test_case_insensitive():
    assert classify(_transcript("THE MARKET IS HUGE", "OK")) == "Market Research"


def test_unmatched_defaults_to_product_strategy():
    assert classify(_transcript("hello there", "hi friend")) == DEFAULT_CATEGORY
    assert DEFAULT_CATEGORY == "Product Strategy"


def test_empty_text_messages_do_not_break():
    msgs = [Message(text="", is_user=True), Message(text="", is_user=False)]
    assert classify(msgs) == DEFAULT_CATEGORY


def test_deterministic():
    assert classify(DOG_WALKERS) == classify(DOG_WALKERS)


def test_category_tables():
    assert CATEGORIES == (
        "Product Strategy", "Market Research", "User Research", "Growth", "Analytics",
    )
    assert CATEGORY_FILTERS[0] == "All"
    assert CATEGORY_FILTERS[1:] == CATEGORIES
