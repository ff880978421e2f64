"""
JSON File Storage Implementation

Each key is stored as its own file (`<data_dir>/<key>.json`). Writes go to a
temporary file first and are moved into place, so a crash mid-write never
leaves a truncated document behind.

Transient filesystem errors are retried a few times before the write is
reported as failed.
"""

from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    PersistenceError,
)


logger = structlog.get_logger(__name__)


class JsonFileStore(KeyValueStoreInterface):
    """File-backed key-value store."""

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write(self, path: Path, value: str) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            f.write(value)
        tmp.replace(path)

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self._write(self._path_for(key), value)
        except OSError as e:
            logger.error("store_write_failed", key=key, error=str(e))
            raise PersistenceError(f"Failed to write '{key}': {e}") from e

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Failed to delete '{key}': {e}") from e
        return True
