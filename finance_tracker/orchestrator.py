"""
Main Orchestrator for the Finance Tracker

This module ties the components together and defines the session flows:
1. Display (repository → search → filter → sort → view)
2. Summary (repository → stats)
3. First run (seed fetch → populate only if still empty)

DESIGN DECISION: The orchestrator owns the only repository instance.
Nothing else holds transaction state, and every view is recomputed from the
repository on demand.
"""

import asyncio
from datetime import date
from typing import Callable, Optional

import structlog

from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import Settings, get_settings
from finance_tracker.models.audit import AuditEvent
from finance_tracker.models.transaction import QueryResult, Stats, TransactionQuery
from finance_tracker.queries import QueryExecutor, SearchDebouncer, compute_stats
from finance_tracker.repository import TransactionRepository
from finance_tracker.services.seed import SeedLoader
from finance_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
)


logger = structlog.get_logger(__name__)

ViewListener = Callable[[QueryResult], None]


class TrackerApp:
    """
    One user session over a loaded repository.

    Holds the current display query (search text and sort order) and pushes
    a fresh view to `on_view_change` whenever the data or the query changes.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        executor: Optional[QueryExecutor] = None,
        seed_loader: Optional[SeedLoader] = None,
        audit_logger: Optional[AuditLogger] = None,
        debounce_seconds: float = 0.3,
        case_insensitive: bool = True,
        on_view_change: Optional[ViewListener] = None,
    ):
        self._repository = repository
        self._executor = executor or QueryExecutor()
        self._seed_loader = seed_loader
        self._audit_logger = audit_logger
        self._on_view_change = on_view_change
        self._query = TransactionQuery(case_insensitive=case_insensitive)
        self._debouncer = SearchDebouncer(debounce_seconds, self._apply_search)
        self._seed_task: Optional[asyncio.Task] = None

        self._unsubscribe = repository.subscribe(self._on_repository_change)

    @property
    def repository(self) -> TransactionRepository:
        return self._repository

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    @property
    def query(self) -> TransactionQuery:
        return self._query

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def view(self) -> QueryResult:
        """The transactions to display under the current search and sort."""
        return self._executor.execute(self._repository.list(), self._query)

    def stats(self, today: Optional[date] = None) -> Stats:
        """Summary figures over all transactions (not just the filtered view)."""
        return compute_stats(self._repository.list(), self._repository.settings, today)

    def search(self, text: str) -> asyncio.Task:
        """
        Debounced search. Must be called from a running event loop.

        Returns:
            The pending task; awaiting it waits for the search to apply
        """
        return self._debouncer.trigger(text)

    def search_now(self, text: str) -> QueryResult:
        """Apply a search immediately, dropping any pending debounced one."""
        self._debouncer.cancel()
        self._apply_search(text)
        return self.view()

    def set_sort(self, method: str) -> QueryResult:
        """
        Change the sort order, e.g. 'amount-asc'.

        Unknown methods fall back to newest first.
        """
        self._query = self._query.model_copy(update={"sort_method": method})
        self._refresh()
        return self.view()

    def _apply_search(self, text: str) -> None:
        self._query = self._query.model_copy(update={"search_text": text})
        self._refresh()

    def _on_repository_change(self, event: AuditEvent) -> None:
        self._refresh()

    def _refresh(self) -> None:
        if self._on_view_change is None:
            return
        try:
            self._on_view_change(self.view())
        except Exception as e:
            logger.error("view_listener_failed", error=str(e))

    # -------------------------------------------------------------------------
    # First run
    # -------------------------------------------------------------------------

    def start_seed(self) -> Optional[asyncio.Task]:
        """
        Fire-and-forget sample data fetch. Must be called from a running loop.

        Returns:
            The background task, or None when seeding does not apply
        """
        if self._seed_loader is None or len(self._repository) > 0:
            return None
        if self._seed_task is not None and not self._seed_task.done():
            return self._seed_task

        self._seed_task = asyncio.get_running_loop().create_task(self._seed())
        return self._seed_task

    async def _seed(self) -> int:
        try:
            candidates = await self._seed_loader.fetch()
            # The user may have added data while the fetch was in flight
            count = self._repository.seed_if_empty(candidates)
        except Exception as e:
            logger.error("seed_failed", source=self._seed_loader.source, error=str(e))
            return 0

        if count:
            logger.info("seed_applied", count=count)
        return count

    def close(self) -> None:
        """Cancel pending work and detach from the repository."""
        self._debouncer.cancel()
        if self._seed_task is not None and not self._seed_task.done():
            self._seed_task.cancel()
        self._unsubscribe()


def create_app_components(
    use_storage: bool = True,
    settings: Optional[Settings] = None,
    on_view_change: Optional[ViewListener] = None,
) -> TrackerApp:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to JSON files under the configured
                    data directory. Set to False for an ephemeral in-memory
                    session (tests, demos).
        settings: Settings to use instead of get_settings()
        on_view_change: Called with the new view whenever it changes

    Returns:
        A TrackerApp over a loaded repository
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level, app_settings.log_json)

    storage_settings = settings.storage
    store: KeyValueStoreInterface
    if use_storage:
        store = JsonFileStore(storage_settings.data_dir)
    else:
        store = InMemoryStore()

    repository = TransactionRepository(
        store,
        data_key=storage_settings.data_key,
        preferences_key=storage_settings.preferences_key,
    )
    audit_logger = AuditLogger()
    repository.subscribe(audit_logger)

    if not repository.load():
        logger.warning("storage_unavailable", data_dir=str(storage_settings.data_dir))

    seed_settings = settings.seed
    seed_loader = None
    if seed_settings.source:
        seed_loader = SeedLoader(seed_settings.source, seed_settings.timeout_seconds)

    search_settings = settings.search
    return TrackerApp(
        repository,
        executor=QueryExecutor(),
        seed_loader=seed_loader,
        audit_logger=audit_logger,
        debounce_seconds=search_settings.debounce_seconds,
        case_insensitive=search_settings.case_insensitive,
        on_view_change=on_view_change,
    )
