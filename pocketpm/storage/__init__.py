"""Persistence: data models and key-value backends."""
