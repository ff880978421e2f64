"""Tests for the composition root and session flows."""

import asyncio
import json
from datetime import date

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.config import Settings, get_settings, validate_all_settings
from finance_tracker.orchestrator import TrackerApp, create_app_components
from finance_tracker.repository import TransactionRepository
from finance_tracker.services.seed import SeedLoader
from finance_tracker.services.storage import InMemoryStore, JsonFileStore


@pytest.fixture
def tracker_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TRACKER_STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("TRACKER_SEARCH_DEBOUNCE_MS", "10")
    monkeypatch.setenv("LOG_JSON", "false")
    return tmp_path


def fields(description, amount="5.00", category="Food", day="2024-06-01"):
    return {"description": description, "amount": amount, "category": category, "date": day}


@pytest.fixture
def app(repository):
    return TrackerApp(repository, debounce_seconds=0)


class TestCreateAppComponents:
    """Tests for the factory."""

    def test_builds_in_memory_session(self, tracker_env):
        """Test an ephemeral session."""
        app = create_app_components(use_storage=False, settings=Settings())
        assert isinstance(app.repository, TransactionRepository)
        assert isinstance(app.audit_logger, AuditLogger)
        assert app.view().result_count == 0

    def test_persists_to_configured_directory(self, tracker_env):
        """Test that the JSON file store writes under TRACKER_STORAGE_DATA_DIR."""
        app = create_app_components(settings=Settings())
        app.repository.add(fields("Lunch"))

        stored = tracker_env / "data" / "moneyTrackerData.json"
        assert len(json.loads(stored.read_text(encoding="utf-8"))["transactions"]) == 1

        reopened = create_app_components(settings=Settings())
        assert reopened.view().result_count == 1

    def test_audit_logger_sees_changes(self, tracker_env):
        """Test that repository events reach the audit logger."""
        app = create_app_components(use_storage=False, settings=Settings())
        before = app.audit_logger.event_count
        app.repository.add(fields("Lunch"))
        assert app.audit_logger.event_count == before + 1

    def test_seed_loader_configured_from_settings(self, tracker_env, monkeypatch):
        """Test that a seed source enables first-run seeding."""
        seed = tracker_env / "seed.json"
        seed.write_text(json.dumps([{"description": "Sample", "amount": "1.00"}]), encoding="utf-8")
        monkeypatch.setenv("TRACKER_SEED_SOURCE", str(seed))
        app = create_app_components(use_storage=False, settings=Settings())

        async def run():
            return await app.start_seed()

        assert asyncio.run(run()) == 1
        assert app.view().result_count == 1


class TestTrackerApp:
    """Tests for display, stats and seeding flows."""

    def test_view_and_sort(self, app):
        """Test sorting the displayed list."""
        app.repository.add(fields("Cheap", amount="1.00", day="2024-06-02"))
        app.repository.add(fields("Pricey", amount="9.00", day="2024-06-01"))

        assert [t.description for t in app.view().transactions] == ["Cheap", "Pricey"]
        result = app.set_sort("amount-desc")
        assert [t.description for t in result.transactions] == ["Pricey", "Cheap"]
        assert app.query.sort_method == "amount-desc"

    def test_unknown_sort_falls_back(self, app):
        """Test that a bogus sort method keeps newest-first order."""
        app.repository.add(fields("Old", day="2024-01-01"))
        app.repository.add(fields("New", day="2024-06-01"))
        result = app.set_sort("sideways")
        assert [t.description for t in result.transactions] == ["New", "Old"]

    def test_debounced_search(self, app):
        """Test that the search applies once the debounce settles."""
        app.repository.add(fields("Coffee"))
        app.repository.add(fields("Bus ticket", category="Transport"))

        async def run():
            app.search("co")
            await app.search("coffee")

        asyncio.run(run())
        assert app.query.search_text == "coffee"
        assert [t.description for t in app.view().transactions] == ["Coffee"]

    def test_search_now_with_malformed_pattern(self, app):
        """Test that a broken regex never breaks the view."""
        app.repository.add(fields("Coffee"))
        assert app.search_now("(coffee").result_count == 0
        assert app.search_now("").result_count == 1

    def test_stats(self, app, today):
        """Test stats over the repository."""
        app.repository.add(fields("A", amount="10.00", day=today.isoformat()))
        app.repository.add(fields("B", amount="5.00", day=today.isoformat()))
        app.repository.update_settings({"budgetCap": 10})

        stats = app.stats(today)
        assert stats.total_count == 2
        assert stats.budget_status.is_over is True
        assert stats.trend[-1].day == today

    def test_view_listener_refreshes_on_change(self, repository):
        """Test that every repository change pushes a new view."""
        views = []
        app = TrackerApp(repository, on_view_change=views.append)
        app.repository.add(fields("Lunch"))
        app.set_sort("amount-asc")
        assert [v.result_count for v in views] == [1, 1]

    def test_seed_skipped_when_data_exists(self, repository, tmp_path):
        """Test that start_seed does nothing for a non-empty repository."""
        repository.add(fields("Mine"))
        app = TrackerApp(repository, seed_loader=SeedLoader(str(tmp_path / "seed.json")))

        async def run():
            return app.start_seed()

        assert asyncio.run(run()) is None

    def test_failed_seed_is_harmless(self, repository, tmp_path):
        """Test that an unreachable seed leaves the repository empty."""
        app = TrackerApp(repository, seed_loader=SeedLoader(str(tmp_path / "missing.json")))

        async def run():
            return await app.start_seed()

        assert asyncio.run(run()) == 0
        assert app.view().result_count == 0

    def test_close_detaches_listener(self, repository):
        """Test that a closed app stops receiving changes."""
        views = []
        app = TrackerApp(repository, on_view_change=views.append)
        app.close()
        repository.add(fields("Lunch"))
        assert views == []


class TestSettings:
    """Tests for configuration loading."""

    def test_environment_overrides(self, tracker_env):
        """Test prefixed environment variables."""
        settings = Settings()
        assert settings.storage.data_dir == tracker_env / "data"
        assert settings.search.debounce_seconds == 0.01
        assert settings.app.log_json is False

    def test_invalid_key_rejected(self, monkeypatch):
        """Test that storage keys cannot contain path separators."""
        monkeypatch.setenv("TRACKER_STORAGE_DATA_KEY", "../escape")
        with pytest.raises(ValueError):
            Settings().storage

    def test_validate_all_settings_reports_failures(self, monkeypatch):
        """Test the startup check."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        get_settings.cache_clear()
        try:
            results = validate_all_settings()
        finally:
            get_settings.cache_clear()
        assert results["storage"] is True
        assert results["app"] is False
        assert "app_error" in results
