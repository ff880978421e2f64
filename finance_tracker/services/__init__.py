"""Services package."""

from finance_tracker.services.seed import SeedLoader
from finance_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
    NotFoundError,
    PersistenceError,
    StorageError,
)
from finance_tracker.services.transfer import (
    MalformedImportError,
    clean_entries,
    export_document,
    parse_import_document,
)

__all__ = [
    # Seed data
    "SeedLoader",
    # Storage services
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStoreInterface",
    "NotFoundError",
    "PersistenceError",
    "StorageError",
    # Import / export
    "MalformedImportError",
    "clean_entries",
    "export_document",
    "parse_import_document",
]
