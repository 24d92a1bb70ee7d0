"""
ConversationRepository — per-user, size-bounded conversation history.

Each user's history is one JSON array stored under `conversations_<user_id>`
in a KeyValueStore, newest first, capped at MAX_CONVERSATIONS.

Reads never raise: a missing key, a backend error or a corrupt value all
come back as an empty list (and are logged). Entries that fail to parse are
skipped one at a time so the rest of the list survives.

Writes raise whatever the backend raised, after logging it. delete and
regenerate rewrite the list they read, so for them an unreadable value is
an error and the stored value is left alone. save keeps the lenient read:
an unreadable history is replaced by the new entry.

Concurrency: every write is read-whole-list → mutate → write-whole-list
with no version check. Two writers racing on the same user lose one
update. That's accepted for the one-user-one-device model this serves;
don't share a user_id across processes that save concurrently.
"""

import json
import logging
from dataclasses import replace

from pocketpm.metadata import ALL_CATEGORIES, build_metadata
from pocketpm.storage.backends import KeyValueStore
from pocketpm.storage.models import ConversationRecord, coerce_messages

logger = logging.getLogger(__name__)

MAX_CONVERSATIONS = 50
MIN_MESSAGES = 2  # one user turn + one AI turn
DEFAULT_USER = "default"


class ConversationRepository:
    """Builds history entries from transcripts and keeps them in a KeyValueStore."""

    def __init__(self, store: KeyValueStore, key_prefix: str = "conversations"):
        self.store = store
        self.key_prefix = key_prefix

    @classmethod
    def from_config(cls, cfg: dict | None = None) -> "ConversationRepository":
        """Build a repository from the `storage` section of config.yaml."""
        from pocketpm.config import get_config
        from pocketpm.storage.backends import backend_from_config

        cfg = cfg or get_config()
        storage_cfg = cfg.get("storage", {})
        store = backend_from_config(storage_cfg)
        return cls(store, key_prefix=storage_cfg.get("key_prefix", "conversations"))

    def _key(self, user_id: str) -> str:
        return f"{self.key_prefix}_{user_id}"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _read(self, user_id: str) -> list[ConversationRecord]:
        """Load a user's list, raising on backend or JSON errors. Malformed entries are skipped."""
        raw = self.store.get(self._key(user_id))
        if not raw:
            return []
        entries = json.loads(raw)
        if not isinstance(entries, list):
            raise ValueError(f"expected a JSON array, got {type(entries).__name__}")

        records = []
        for i, entry in enumerate(entries):
            try:
                records.append(ConversationRecord.from_dict(entry))
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed conversation #%d for user %s: %s", i, user_id, e)
        return records

    def _load(self, user_id: str) -> list[ConversationRecord]:
        try:
            return self._read(user_id)
        except Exception as e:
            logger.warning("Failed to load conversations for user %s: %s", user_id, e)
            return []

    def _write(self, user_id: str, records: list[ConversationRecord]) -> None:
        # Serialize first: a failure here leaves the stored value untouched
        payload = json.dumps([r.to_dict() for r in records])
        self.store.set(self._key(user_id), payload)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def save_conversation(
        self, messages: list, user_id: str = DEFAULT_USER
    ) -> ConversationRecord | None:
        """
        Derive metadata for a finished transcript and prepend it to the
        user's history. Returns the new record, or None (nothing written)
        when the transcript has fewer than two messages.
        """
        messages = coerce_messages(messages)
        if len(messages) < MIN_MESSAGES:
            logger.debug("Skipping save for user %s: %d message(s)", user_id, len(messages))
            return None

        record = ConversationRecord(
            messages=messages,
            user_id=user_id,
            **build_metadata(messages),
        )

        try:
            existing = self._load(user_id)
            updated = [record] + existing
            evicted = max(len(updated) - MAX_CONVERSATIONS, 0)
            self._write(user_id, updated[:MAX_CONVERSATIONS])
        except Exception as e:
            logger.error("Error saving conversation for user %s: %s", user_id, e)
            raise

        logger.info(
            "Saved conversation %s for user %s (category=%s, title=%r, evicted=%d)",
            record.id, user_id, record.category, record.title, evicted,
        )
        return record

    def get_conversations(self, user_id: str = DEFAULT_USER) -> list[ConversationRecord]:
        """All of a user's records, newest first. Never raises."""
        return self._load(user_id)

    def get_conversation(
        self, conversation_id: str, user_id: str = DEFAULT_USER
    ) -> ConversationRecord | None:
        for record in self._load(user_id):
            if record.id == conversation_id:
                return record
        return None

    def delete_conversation(
        self, conversation_id: str, user_id: str = DEFAULT_USER
    ) -> list[ConversationRecord]:
        """Remove one record permanently. Returns the remaining list."""
        try:
            records = self._read(user_id)
            remaining = [r for r in records if r.id != conversation_id]
            self._write(user_id, remaining)
        except Exception as e:
            logger.error("Error deleting conversation %s for user %s: %s", conversation_id, user_id, e)
            raise

        if len(remaining) == len(records):
            logger.info("Delete: conversation %s not found for user %s", conversation_id, user_id)
        else:
            logger.info("Deleted conversation %s for user %s", conversation_id, user_id)
        return remaining

    def get_conversations_by_category(
        self, category: str, user_id: str = DEFAULT_USER
    ) -> list[ConversationRecord]:
        records = self._load(user_id)
        if category == ALL_CATEGORIES:
            return records
        return [r for r in records if r.category == category]

    def search_conversations(
        self, query: str, user_id: str = DEFAULT_USER
    ) -> list[ConversationRecord]:
        """Case-insensitive substring match on title, preview and category."""
        q = query.lower()
        return [
            r for r in self._load(user_id)
            if q in r.title.lower()
            or q in r.preview.lower()
            or q in r.category.lower()
        ]

    def regenerate_conversation_data(self, user_id: str = DEFAULT_USER) -> list[ConversationRecord]:
        """
        Recompute title/category/preview/analysis for every stored record
        from its saved messages. id, date and messages are kept. Running
        this twice gives the same result.
        """
        try:
            records = self._read(user_id)
            updated = [replace(r, **build_metadata(r.messages)) for r in records]
            self._write(user_id, updated)
        except Exception as e:
            logger.error("Error regenerating conversation data for user %s: %s", user_id, e)
            raise

        changed = sum(1 for old, new in zip(records, updated) if old != new)
        logger.info("Regenerated %d conversation(s) for user %s (%d changed)", len(updated), user_id, changed)
        return updated

    def clear_all_conversations(self, user_id: str = DEFAULT_USER) -> None:
        try:
            self.store.delete(self._key(user_id))
        except Exception as e:
            logger.error("Error clearing conversations for user %s: %s", user_id, e)
            raise
        logger.info("Cleared all conversations for user %s", user_id)


__all__ = ["ConversationRepository", "MAX_CONVERSATIONS"]
