"""
KeyValueStore — abstract base for history storage backends.

All backends must implement three primitives:
  get     — return the stored string for a key, or None
  set     — replace the value for a key
  delete  — remove a key (no error if absent)

Serialization stays in ConversationRepository (the caller), not here.
Backends only move strings around; a failed set() must leave the old
value in place.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract string key-value backend."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None if missing."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Missing keys are not an error."""
        ...
