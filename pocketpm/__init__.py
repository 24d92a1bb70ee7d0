"""PocketPM conversation history: metadata pipeline and per-user storage."""

__version__ = "0.3.0"
