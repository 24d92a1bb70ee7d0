"""
Tests for title generation.
Keyword titles are deliberately lexical — the expectations below include
the awkward ones.
"""

import pytest

from pocketpm.metadata.titles import (
    extract_business_type,
    extract_keywords,
    generate_keyword_title,
    generate_title,
)
from pocketpm.storage.models import ChunkedData, Message


def _user(text: str) -> Message:
    return Message(text=text, is_user=True)


def _ai(text: str, analysis_id: str | None = None) -> Message:
    chunked = ChunkedData(analysis_id=analysis_id, current_chunk=1, total_chunks=3) if analysis_id is not None else None
    return Message(text=text, is_user=False, chunked_data=chunked)


DOG_USER = "I want to build an app for booking dog walkers"
DOG_AI = (
    "This addresses a real need in the pet care market. Users can find walkers "
    "quickly. This is a Platform for pet owners."
)


# ---------------------------------------------------------------------------
# generate_title
# ---------------------------------------------------------------------------

def test_dog_walker_title():
    """'build', 'app' and 'for' are stopwords; 'Platform' comes from the AI text."""
    assert generate_title([_user(DOG_USER), _ai(DOG_AI)]) == "Want Booking Dog Platform"


def test_no_user_message():
    assert generate_title([_ai("Welcome!"), _ai("Anything else?")]) == "New Conversation"


def test_blank_user_message_counts_as_missing():
    assert generate_title([_user("   "), _ai(DOG_AI)]) == "New Conversation"


def test_analysis_id_takes_precedence():
    msgs = [_user(DOG_USER), _ai(DOG_AI, analysis_id="Dog Walker Marketplace Analysis")]
    assert generate_title(msgs) == "Dog Walker Marketplace Analysis"


def test_analysis_id_on_later_message_still_wins():
    msgs = [
        _user(DOG_USER),
        _ai(DOG_AI),
        _user("continue"),
        _ai("Part two.", analysis_id="PetPal Deep Dive"),
    ]
    assert generate_title(msgs) == "PetPal Deep Dive"


def test_empty_analysis_id_is_ignored():
    msgs = [_user(DOG_USER), _ai(DOG_AI, analysis_id="")]
    assert generate_title(msgs) == "Want Booking Dog Platform"


def test_no_ai_text_uses_keywords_only():
    assert generate_title([_user("taxes helper"), _ai("")]) == "Taxes Helper App"


def test_no_ai_text_and_no_keywords():
    assert generate_title([_user("an app"), _ai("  ")]) == "Business Concept"


# ---------------------------------------------------------------------------
# extract_keywords
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text, expected", [
    (DOG_USER, ["Want", "Booking", "Dog"]),
    ("I have an idea for a recipe sharing network", ["Recipe", "Sharing", "Network"]),
    ("I'm looking for a budgeting tool!", ["Budgeting"]),
    ("Help me with my garden planner", ["Garden", "Planner"]),
    ("Please help me with taxes", ["Please", "Help", "With"]),
    ("Uber-for-dogs, really?", ["Uberfordogs", "Really"]),
    ("an app", []),
])
def test_extract_keywords(text, expected):
    assert extract_keywords(text) == expected


def test_keywords_capped_at_three():
    assert len(extract_keywords("alpha bravo charlie delta echo")) == 3


# ---------------------------------------------------------------------------
# extract_business_type / generate_keyword_title
# ---------------------------------------------------------------------------

def test_business_type_list_order_not_text_order():
    assert extract_business_type("A dashboard and a marketplace") == "Marketplace"


def test_business_type_substring():
    """'happy' contains 'app'."""
    assert extract_business_type("Happy customers") == "App"


def test_business_type_none():
    assert extract_business_type("Hello there") is None


@pytest.mark.parametrize("user_text, ai_text, expected", [
    ("taxes", "A useful Tracker", "Taxes Tracker"),
    ("taxes", "Sounds good", "Taxes App"),
    ("an app", "A Tracker", "New Tracker"),
    ("an app", "ok", "Business Concept"),
])
def test_generate_keyword_title(user_text, ai_text, expected):
    assert generate_keyword_title(user_text, ai_text) == expected
