"""
Conversation metadata pipeline.

    from pocketpm.metadata import build_metadata
    meta = build_metadata(messages)   # {"title", "category", "preview", "analysis"}
"""

from pocketpm.metadata.classifier import (
    ALL_CATEGORIES,
    CATEGORIES,
    CATEGORY_FILTERS,
    DEFAULT_CATEGORY,
    classify,
)
from pocketpm.metadata.insights import extract_key_insights
from pocketpm.metadata.preview import generate_preview
from pocketpm.metadata.titles import generate_title
from pocketpm.storage.models import Message


def build_metadata(messages: list[Message]) -> dict:
    """Run classification, title, preview and insight extraction in that order."""
    return {
        "category": classify(messages),
        "title": generate_title(messages),
        "preview": generate_preview(messages),
        "analysis": extract_key_insights(messages),
    }


__all__ = [
    "ALL_CATEGORIES",
    "CATEGORIES",
    "CATEGORY_FILTERS",
    "DEFAULT_CATEGORY",
    "build_metadata",
    "classify",
    "extract_key_insights",
    "generate_preview",
    "generate_title",
]
