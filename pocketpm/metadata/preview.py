"""
Preview snippet for the history list.

Works on the first substantive AI reply (the onboarding greeting is
skipped). Tries to pull out what the business *does*, then what it's
*worth* to users, then any plain sentence, then a canned line.
"""

import re

from pocketpm.metadata.rules import ExtractionRule, first_match, rule
from pocketpm.metadata.text import strip_emoji, truncate
from pocketpm.storage.models import Message

ONBOARDING_MARKER = "What ideas would you like to share"

NO_AI_PREVIEW = "Business analysis and recommendations"
DEFAULT_PREVIEW = "Comprehensive business analysis and strategic recommendations"

SENTENCE_MIN_LENGTH = 30
SENTENCE_MAX_LENGTH = 100

DESCRIPTION_RULES: tuple[ExtractionRule, ...] = (
    rule(r"(?:creates?|provides?|offers?|delivers?|enables?|helps?)\s+([^.]{30,100})", 25, 90, "verb"),
    rule(r"(?:is\s+designed\s+to|aims\s+to|focuses\s+on)\s+([^.]{30,100})", 25, 90, "purpose"),
    rule(r"(?:allows?\s+users?\s+to|enables?\s+users?\s+to)\s+([^.]{30,100})", 25, 90, "users-to"),
    rule(r"(?:solution\s+for|platform\s+for|app\s+for)\s+([^.]{30,100})", 25, 90, "for"),
    rule(r"(?:addresses|solves|tackles)\s+([^.]{30,100})", 25, 90, "problem"),
)

VALUE_RULES: tuple[ExtractionRule, ...] = (
    rule(r"(?:key\s+benefits?|main\s+benefits?)[\s:]*([^.\n]{25,80})", 25, 80, "benefits"),
    rule(r"(?:users?\s+can|customers?\s+can)\s+([^.]{25,80})", 25, 80, "can"),
    rule(r"(?:saves?|improves?|increases?|reduces?|optimizes?)\s+([^.]{25,80})", 25, 80, "impact"),
    rule(r"(?:provides?\s+|offers?\s+)([^.]{25,80})", 25, 80, "offer"),
)

_SECTION_MARKER = re.compile(r"\[.*?\]")
_MARKDOWN = re.compile(r"[#*]")
_SECTION_HEADERS = tuple(
    re.compile(header + r":?", re.IGNORECASE)
    for header in (
        r"Business Concept Analysis",
        r"Market Analysis",
        r"Execution Strategy",
        r"Action Plan",
    )
)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def extract_business_description(text: str) -> str | None:
    return first_match(text, DESCRIPTION_RULES)


def extract_value_proposition(text: str) -> str | None:
    return first_match(text, VALUE_RULES)


def first_plain_sentence(text: str) -> str | None:
    """First long sentence once markers, headers and markdown are stripped."""
    text = _SECTION_MARKER.sub("", text)
    text = strip_emoji(text)
    text = _MARKDOWN.sub("", text)
    for header in _SECTION_HEADERS:
        text = header.sub("", text, count=1)

    for sentence in _SENTENCE_SPLIT.split(text):
        sentence = sentence.strip()
        if (
            len(sentence) > SENTENCE_MIN_LENGTH
            and "analysis" not in sentence
            and "concept" not in sentence
        ):
            return truncate(sentence, SENTENCE_MAX_LENGTH)
    return None


def generate_preview(messages: list[Message]) -> str:
    ai_messages = [
        m for m in messages
        if not m.is_user and m.has_text and ONBOARDING_MARKER not in m.text
    ]
    if not ai_messages:
        return NO_AI_PREVIEW

    text = ai_messages[0].text
    return (
        extract_business_description(text)
        or extract_value_proposition(text)
        or first_plain_sentence(text)
        or DEFAULT_PREVIEW
    )
