"""In-process dict backend. Nothing survives a restart; used by tests and `storage.backend: memory`."""

import logging

from .base import KeyValueStore

logger = logging.getLogger(__name__)


class MemoryStore(KeyValueStore):

    def __init__(self, **_ignored):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"MemoryStore values must be str, got {type(value).__name__}")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)
