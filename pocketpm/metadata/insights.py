"""Key-insight blurb: the one line of advice shown under a history entry."""

import re

from pocketpm.metadata.rules import ExtractionRule, first_match, rule
from pocketpm.metadata.text import clean_fragment, truncate
from pocketpm.storage.models import Message

NO_INSIGHTS = "No insights available"
DEFAULT_INSIGHT = "Comprehensive business analysis with actionable insights"

LABELLED_RULES: tuple[ExtractionRule, ...] = (
    rule(r"(?:key\s+insights?|main\s+takeaways?)[\s:]*([^.\n]{30,100})", 30, 100, "insights"),
    rule(r"(?:focus\s+on|key\s+benefits?)[\s:]*([^.\n]{30,100})", 30, 100, "focus"),
    rule(r"(?:opportunity|market\s+potential)[\s:]*([^.\n]{30,100})", 30, 100, "opportunity"),
    rule(r"(?:recommend|suggestion|next\s+steps?)[\s:]*([^.\n]{30,100})", 30, 100, "advice"),
)

# Any of •, -, * counts as a marker, including a hyphen mid-word
BULLET_RULE = rule(r"[•\-*]\s*([^.\n]{20,80})", 1, 80, "bullet")

INSIGHT_KEYWORDS: tuple[str, ...] = (
    "key", "important", "focus", "opportunity", "challenge", "recommend", "critical",
)
SENTENCE_MIN_LENGTH = 30
SENTENCE_MAX_LENGTH = 100

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def keyword_sentence(text: str) -> str | None:
    for sentence in _SENTENCE_SPLIT.split(text):
        lowered = sentence.lower()
        if len(sentence.strip()) > SENTENCE_MIN_LENGTH and any(k in lowered for k in INSIGHT_KEYWORDS):
            cleaned = clean_fragment(sentence)
            if cleaned:
                return truncate(cleaned, SENTENCE_MAX_LENGTH)
    return None


def extract_key_insights(messages: list[Message]) -> str:
    ai_messages = [m for m in messages if not m.is_user]
    if not ai_messages:
        return NO_INSIGHTS

    full_text = " ".join(m.text or "" for m in ai_messages)
    return (
        first_match(full_text, LABELLED_RULES)
        or BULLET_RULE.apply(full_text)
        or keyword_sentence(full_text)
        or DEFAULT_INSIGHT
    )
