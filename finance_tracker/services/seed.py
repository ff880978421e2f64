"""
First-Run Seed Loader

Fetches sample transactions (a JSON array) from a local file or an http(s)
URL. Seeding is best effort: any failure resolves to None and is only
logged, never raised.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional
from urllib.error import URLError
from urllib.request import Request, urlopen

import structlog


logger = structlog.get_logger(__name__)


class SeedLoader:
    """Reads candidate seed records from a path or URL."""

    def __init__(self, source: Optional[str], timeout_seconds: float = 5.0):
        self._source = source
        self._timeout = timeout_seconds

    @property
    def source(self) -> Optional[str]:
        return self._source

    def _is_url(self) -> bool:
        return bool(self._source) and self._source.startswith(("http://", "https://"))

    def _read(self) -> str:
        if self._is_url():
            request = Request(
                url=self._source,
                headers={"Accept": "application/json"},
                method="GET",
            )
            with urlopen(request, timeout=self._timeout) as response:  # noqa: S310 - URL comes from trusted settings
                return response.read().decode("utf-8")
        return Path(self._source).read_text(encoding="utf-8")

    def load(self) -> Optional[list[dict[str, Any]]]:
        """Blocking fetch. Returns None when there is no usable seed."""
        if not self._source:
            return None

        try:
            data = json.loads(self._read())
        except (OSError, URLError, ValueError) as e:
            # JSONDecodeError and UnicodeDecodeError are ValueErrors
            logger.info("seed_unavailable", source=self._source, error=str(e))
            return None

        if not isinstance(data, list):
            logger.info("seed_ignored", source=self._source, reason="not a JSON array")
            return None

        return data

    async def fetch(self) -> Optional[list[dict[str, Any]]]:
        """Fetch without blocking the event loop."""
        return await asyncio.to_thread(self.load)
