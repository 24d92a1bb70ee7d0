"""
Title generation for saved conversations.

Precedence:
  1. analysisId carried on a chunked AI response — used verbatim
  2. keywords from the first user message + business type named by the AI
  3. keywords alone

This is a lexical heuristic. It happily produces titles like
"Want Booking Dog Platform"; callers should not expect a summary.
"""

import re

from pocketpm.storage.models import Message

NEW_CONVERSATION_TITLE = "New Conversation"
FALLBACK_TITLE = "Business Concept"
DEFAULT_BUSINESS_TYPE = "App"
MAX_KEYWORDS = 3

_FILLER_PREFIX = re.compile(
    r"^(i\s+have\s+an\s+idea|i'm\s+looking\s+for|i\s+want\s+to\s+create|help\s+me\s+with)",
    re.IGNORECASE,
)
_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)

STOP_WORDS = frozenset({
    "that", "for", "app", "application", "idea", "business", "product",
    "service", "platform", "tool", "system", "solution", "website", "mobile",
    "web", "about", "like", "would", "could", "should", "will", "can",
    "make", "create", "build", "develop",
})

# Checked in order; "App" before "Platform" means "app" anywhere wins
BUSINESS_TYPES: tuple[str, ...] = (
    "App", "Platform", "Service", "Tool", "Solution", "System",
    "Marketplace", "Network", "Dashboard", "Assistant", "Tracker",
    "Manager", "Optimizer", "Analyzer", "Generator", "Builder",
)


def extract_keywords(text: str) -> list[str]:
    """Up to three capitalized content words from the user's opening message."""
    clean = _FILLER_PREFIX.sub("", text.lower(), count=1)
    clean = _NON_WORD.sub("", clean).strip()

    words = [
        w for w in clean.split()
        if len(w) > 2 and w not in STOP_WORDS
    ][:MAX_KEYWORDS]
    return [w[0].upper() + w[1:] for w in words]


def extract_business_type(text: str) -> str | None:
    lowered = text.lower()
    for business_type in BUSINESS_TYPES:
        if business_type.lower() in lowered:
            return business_type
    return None


def generate_keyword_title(user_text: str, ai_text: str) -> str:
    keywords = extract_keywords(user_text)
    business_type = extract_business_type(ai_text)

    if keywords and business_type:
        return f"{' '.join(keywords)} {business_type}"
    if keywords:
        return f"{' '.join(keywords)} {DEFAULT_BUSINESS_TYPE}"
    if business_type:
        return f"New {business_type}"
    return FALLBACK_TITLE


def generate_title(messages: list[Message]) -> str:
    first_user = next((m for m in messages if m.is_user and m.has_text), None)
    if first_user is None:
        return NEW_CONVERSATION_TITLE

    for m in messages:
        if not m.is_user and m.chunked_data and m.chunked_data.analysis_id:
            return m.chunked_data.analysis_id

    first_ai = next((m for m in messages if not m.is_user and m.has_text), None)
    if first_ai is not None:
        return generate_keyword_title(first_user.text, first_ai.text)

    keywords = extract_keywords(first_user.text)
    if keywords:
        return f"{' '.join(keywords)} {DEFAULT_BUSINESS_TYPE}"
    return FALLBACK_TITLE
