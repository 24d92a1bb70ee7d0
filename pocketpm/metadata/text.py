"""
Fragment cleanup shared by the preview and insight extractors.

AI replies arrive as lightly formatted markdown with decorative emoji and
bullet prefixes. Everything captured out of them goes through
clean_fragment() before it is length-checked or shown in the history list.
"""

import re

EMOJI_PATTERN = re.compile("[\U0001F300-\U0001F9FF]")
BOLD_PATTERN = re.compile(r"\*\*([^*]+)\*\*")
LEADING_BULLET_PATTERN = re.compile(r"^\s*[-•]\s*")
WHITESPACE_PATTERN = re.compile(r"\s+")

ELLIPSIS = "..."


def strip_emoji(text: str) -> str:
    return EMOJI_PATTERN.sub("", text)


def clean_fragment(text: str) -> str:
    """Unwrap **bold**, drop asterisks and emoji, strip one leading bullet, collapse whitespace."""
    text = text.strip()
    text = BOLD_PATTERN.sub(r"\1", text)
    text = text.replace("*", "")
    text = strip_emoji(text)
    text = LEADING_BULLET_PATTERN.sub("", text, count=1)
    text = WHITESPACE_PATTERN.sub(" ", text)
    return text.strip()


def truncate(text: str, limit: int) -> str:
    """Cut to `limit` characters and mark the cut with an ellipsis."""
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text
