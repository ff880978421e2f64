"""
Search Debouncer

Delays running a search until typing pauses. Each new keystroke cancels the
pending search and schedules a fresh one, so only the latest text is
searched.
"""

import asyncio
from typing import Callable, Optional

import structlog


logger = structlog.get_logger(__name__)


class SearchDebouncer:
    """
    Last-writer-wins delay on the running asyncio loop.

    Must be triggered from inside a running event loop.
    """

    def __init__(self, delay_seconds: float, callback: Callable[[str], None]):
        if delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")
        self._delay = delay_seconds
        self._callback = callback
        self._pending: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def trigger(self, text: str) -> asyncio.Task:
        """Schedule a search for `text`, superseding any pending one."""
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._run(text))
        return self._pending

    def cancel(self) -> None:
        if self.pending:
            self._pending.cancel()
        self._pending = None

    async def _run(self, text: str) -> None:
        await asyncio.sleep(self._delay)
        try:
            self._callback(text)
        except Exception as e:
            logger.error("debounced_search_failed", text=text, error=str(e))
