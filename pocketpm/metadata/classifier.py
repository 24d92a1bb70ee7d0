"""
Keyword classifier — assigns a history category to a transcript.

Groups are checked in priority order against the lowercased text of every
message; the first group with any keyword present as a substring wins.
Substring, not word, matching: "size" fires on "sized", "user" on "users".
"""

import logging

from pocketpm.storage.models import Message

logger = logging.getLogger(__name__)

CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Product Strategy", (
        "product", "feature", "roadmap", "strategy",
        "development", "pricing", "launch", "mvp",
    )),
    ("Market Research", (
        "market", "competitor", "industry", "customers",
        "target audience", "demand", "size", "opportunity",
    )),
    ("User Research", (
        "user", "customer journey", "persona", "behavior",
        "interview", "survey", "feedback", "testing",
    )),
    ("Growth", (
        "growth", "acquisition", "retention", "marketing",
        "viral", "funnel", "conversion", "metrics",
    )),
    ("Analytics", (
        "analytics", "data", "metrics", "kpi",
        "tracking", "measurement", "performance", "roi",
    )),
)

CATEGORIES: tuple[str, ...] = tuple(name for name, _ in CATEGORY_KEYWORDS)
DEFAULT_CATEGORY = CATEGORIES[0]

# Filter chip shown ahead of the categories in the history list
ALL_CATEGORIES = "All"
CATEGORY_FILTERS: tuple[str, ...] = (ALL_CATEGORIES,) + CATEGORIES


def classify(messages: list[Message]) -> str:
    """Return the category for a transcript. Pure; defaults to Product Strategy."""
    full_text = " ".join(m.text or "" for m in messages).lower()

    for category, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if keyword in full_text:
                logger.debug("Classified as %s (matched %r)", category, keyword)
                return category

    return DEFAULT_CATEGORY
