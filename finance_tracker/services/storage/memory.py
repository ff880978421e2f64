"""In-memory key-value store for tests and throwaway sessions."""

from typing import Optional

from finance_tracker.services.storage.interface import KeyValueStoreInterface


class InMemoryStore(KeyValueStoreInterface):
    """Dict-backed store. Contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)
