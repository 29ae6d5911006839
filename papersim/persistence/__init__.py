"""Persistence — key-value хранилище состояния paper-счёта и watchlist."""

from .storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    PersistenceFailure,
    atomic_write_text,
)

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "PersistenceFailure",
    "atomic_write_text",
]
