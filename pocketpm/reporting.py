"""
Display and export helpers for the history list.

  format_relative_date  — "Today" / "3 days ago" / "2 weeks ago" labels
  transcript_stats      — message counts and session duration for a transcript
  export_transcript     — role/content view of a record for evaluation tooling
  category_counts       — per-chip totals for the category filter bar
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pocketpm.metadata import ALL_CATEGORIES, CATEGORIES
from pocketpm.storage.models import ConversationRecord, Message


def _parse_timestamp(value: Any) -> datetime | None:
    """Accept ISO strings, epoch milliseconds or datetimes. None if unparseable."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value:
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_relative_date(date: Any, now: datetime | None = None) -> str:
    """
    Label a record date the way the history list shows it.

    Days are counted between UTC calendar dates, so anything saved earlier
    today reads "Today". Older than four weeks falls back to the
    calendar date.
    """
    dt = _parse_timestamp(date)
    if dt is None:
        return str(date)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff_days = abs((now.astimezone(timezone.utc).date() - dt.astimezone(timezone.utc).date()).days)

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    if diff_days < 7:
        return f"{diff_days} days ago"
    if diff_days < 30:
        return f"{math.ceil(diff_days / 7)} weeks ago"
    return dt.date().isoformat()


def session_duration_ms(messages: list[Message]) -> int:
    """Milliseconds between the earliest and latest parseable timestamps."""
    stamps = [t for t in (_parse_timestamp(m.timestamp) for m in messages) if t is not None]
    if len(stamps) < 2:
        return 0
    return int((max(stamps) - min(stamps)).total_seconds() * 1000)


def transcript_stats(messages: list[Message]) -> dict:
    spoken = [m for m in messages if m.has_text]
    return {
        "conversation_length": len(spoken),
        "user_messages": sum(1 for m in spoken if m.is_user),
        "assistant_messages": sum(1 for m in spoken if not m.is_user),
        "has_chunked_response": any(m.chunked_data is not None for m in spoken),
        "duration_ms": session_duration_ms(messages),
    }


def export_transcript(record: ConversationRecord) -> dict:
    """
    Role/content rendering of one record, blank turns dropped:
        {"id", "title", "category", "date", "userId", "messages": [...], "stats": {...}}
    """
    return {
        "id": record.id,
        "title": record.title,
        "category": record.category,
        "date": record.date,
        "userId": record.user_id,
        "messages": [
            {
                "role": "user" if m.is_user else "assistant",
                "content": m.text.strip(),
                "timestamp": m.timestamp,
                "chunkedData": m.chunked_data.to_dict() if m.chunked_data else None,
            }
            for m in record.messages
            if m.has_text
        ],
        "stats": transcript_stats(record.messages),
    }


def export_conversations(records: list[ConversationRecord]) -> list[dict]:
    return [export_transcript(r) for r in records]


def category_counts(records: list[ConversationRecord]) -> dict[str, int]:
    """Count per filter chip; "All" is the total."""
    counts = {ALL_CATEGORIES: len(records)}
    for category in CATEGORIES:
        counts[category] = sum(1 for r in records if r.category == category)
    return counts
