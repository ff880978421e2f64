"""
Abstract Storage Interface

The tracker persists everything as named text blobs in a key-value store.
Defining the store as an interface allows us to:
1. Keep data in JSON files on disk for normal use
2. Use in-memory storage for testing
3. Swap in another backend without touching the repository

The interface is intentionally tiny: the repository always rewrites whole
documents, so get/set/delete is all it needs.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the key-value store.

    Values are opaque strings; no schema is enforced at this layer.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the blob stored under a key.

        Returns:
            The stored value, or None if the key has never been written

        Raises:
            PersistenceError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the blob stored under a key.

        Raises:
            PersistenceError: If the write did not complete
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed

        Raises:
            PersistenceError: If the backend cannot be modified
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class PersistenceError(StorageError):
    """The underlying store could not be read or written."""
    pass
