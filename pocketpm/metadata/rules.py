"""
Ordered extraction cascades.

Each extractor is a tuple of ExtractionRule evaluated top to bottom; the
first rule whose capture survives cleaning at min_length wins. Only the
first match of each pattern is considered; a capture that cleans down
too short falls through to the next rule, not the next match.
"""

import re
from dataclasses import dataclass

from pocketpm.metadata.text import clean_fragment, truncate


@dataclass(frozen=True)
class ExtractionRule:
    """A capture pattern plus its length bounds."""
    pattern: re.Pattern
    min_length: int        # cleaned capture must be at least this long
    max_length: int        # longer captures are cut here + "..."
    name: str = ""

    def apply(self, text: str) -> str | None:
        match = self.pattern.search(text)
        if not match or not match.group(1):
            return None
        fragment = clean_fragment(match.group(1))
        if not fragment or len(fragment) < self.min_length:
            return None
        return truncate(fragment, self.max_length)


def rule(regex: str, min_length: int, max_length: int, name: str = "") -> ExtractionRule:
    """Build a case-insensitive rule. Group 1 of `regex` is the capture."""
    return ExtractionRule(re.compile(regex, re.IGNORECASE), min_length, max_length, name)


def first_match(text: str, rules: tuple[ExtractionRule, ...]) -> str | None:
    """Run `rules` in order against text; return the first hit or None."""
    for r in rules:
        result = r.apply(text)
        if result is not None:
            return result
    return None
