"""
Storage Services Package

Provides the key-value store interface and its implementations.
JSON files on disk are the default backend; the in-memory store is used for
tests and ephemeral sessions.
"""

from finance_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    NotFoundError,
    PersistenceError,
    StorageError,
)
from finance_tracker.services.storage.json_file import JsonFileStore
from finance_tracker.services.storage.memory import InMemoryStore

__all__ = [
    # Interface
    "KeyValueStoreInterface",
    # Exceptions
    "NotFoundError",
    "PersistenceError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
]
