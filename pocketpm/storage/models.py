"""
Data models for transcripts and saved history entries.

Records are stored with the mobile client's camelCase keys so the JSON
written here is the same shape the app keeps locally. Keys the client sends
that we don't model (chunkTitle etc.) ride along in `extra`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _text(value: Any) -> str:
    """Client JSON is loosely typed; string fields are coerced on the way in."""
    return "" if value is None else str(value)


@dataclass
class ChunkedData:
    """Segment info for an AI answer delivered over several messages."""
    analysis_id: str = ""
    current_chunk: int = 0
    total_chunks: int = 0
    next_prompt: str = ""

    def to_dict(self) -> dict:
        return {
            "analysisId": self.analysis_id,
            "currentChunk": self.current_chunk,
            "totalChunks": self.total_chunks,
            "nextPrompt": self.next_prompt,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ChunkedData:
        return cls(
            analysis_id=_text(data.get("analysisId")),
            current_chunk=int(data.get("currentChunk") or 0),
            total_chunks=int(data.get("totalChunks") or 0),
            next_prompt=_text(data.get("nextPrompt")),
        )


_MESSAGE_KEYS = {"id", "text", "isUser", "timestamp", "chunkedData"}


@dataclass
class Message:
    """One transcript turn."""
    text: str = ""
    is_user: bool = False
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: Any = field(default_factory=_now_iso)
    chunked_data: ChunkedData | None = None
    extra: dict = field(default_factory=dict)

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())

    def to_dict(self) -> dict:
        d = dict(self.extra)
        d.update({
            "id": self.id,
            "text": self.text,
            "isUser": self.is_user,
            "timestamp": self.timestamp,
        })
        if self.chunked_data is not None:
            d["chunkedData"] = self.chunked_data.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Message:
        chunked = data.get("chunkedData")
        return cls(
            text=_text(data.get("text")),
            is_user=bool(data.get("isUser", False)),
            id=str(data.get("id") or uuid4().hex),
            timestamp=data.get("timestamp") or _now_iso(),
            chunked_data=ChunkedData.from_dict(chunked) if isinstance(chunked, dict) else None,
            extra={k: v for k, v in data.items() if k not in _MESSAGE_KEYS},
        )


@dataclass
class ConversationRecord:
    """One saved history entry."""
    title: str
    category: str
    preview: str
    analysis: str
    user_id: str
    messages: list[Message] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid4().hex)
    date: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "date": self.date,
            "messages": [m.to_dict() for m in self.messages],
            "preview": self.preview,
            "analysis": self.analysis,
            "userId": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ConversationRecord:
        return cls(
            id=_text(data.get("id")) or uuid4().hex,
            title=_text(data.get("title")),
            category=_text(data.get("category")),
            date=_text(data.get("date")),
            messages=[Message.from_dict(m) for m in data.get("messages") or []],
            preview=_text(data.get("preview")),
            analysis=_text(data.get("analysis")),
            user_id=_text(data.get("userId")),
        )


def coerce_messages(messages: list) -> list[Message]:
    """Accept Message objects or client dicts; return Message objects."""
    return [m if isinstance(m, Message) else Message.from_dict(m) for m in messages or []]
