"""Tests for the async edges: seed loading and search debouncing."""

import asyncio
import json

import pytest

from finance_tracker.queries import SearchDebouncer
from finance_tracker.services.seed import SeedLoader


class TestSeedLoader:
    """Tests for SeedLoader."""

    def test_loads_array_from_file(self, tmp_path):
        """Test reading a local JSON array."""
        path = tmp_path / "seed.json"
        path.write_text(json.dumps([{"description": "x", "amount": "1.00"}]), encoding="utf-8")
        assert SeedLoader(str(path)).load() == [{"description": "x", "amount": "1.00"}]

    def test_no_source(self):
        """Test that no configured source means no seed."""
        assert SeedLoader(None).load() is None

    def test_missing_file_is_ignored(self, tmp_path):
        """Test that an unreachable seed resolves to None."""
        assert SeedLoader(str(tmp_path / "missing.json")).load() is None

    def test_invalid_json_is_ignored(self, tmp_path):
        """Test that a corrupt seed resolves to None."""
        path = tmp_path / "seed.json"
        path.write_text("{oops", encoding="utf-8")
        assert SeedLoader(str(path)).load() is None

    def test_non_array_is_ignored(self, tmp_path):
        """Test that a JSON object is not a seed."""
        path = tmp_path / "seed.json"
        path.write_text('{"transactions": []}', encoding="utf-8")
        assert SeedLoader(str(path)).load() is None

    def test_unreachable_url_is_ignored(self):
        """Test that a refused connection resolves to None."""
        loader = SeedLoader("http://127.0.0.1:9/seed.json", timeout_seconds=0.5)
        assert loader.load() is None

    def test_fetch_runs_off_the_loop(self, tmp_path):
        """Test the async wrapper."""
        path = tmp_path / "seed.json"
        path.write_text("[]", encoding="utf-8")
        assert asyncio.run(SeedLoader(str(path)).fetch()) == []


class TestSearchDebouncer:
    """Tests for SearchDebouncer."""

    def test_negative_delay_rejected(self):
        """Test constructor validation."""
        with pytest.raises(ValueError):
            SearchDebouncer(-1, lambda text: None)

    def test_last_keystroke_wins(self):
        """Test that only the latest text is searched."""
        calls = []
        debouncer = SearchDebouncer(0.05, calls.append)

        async def type_quickly():
            debouncer.trigger("c")
            debouncer.trigger("co")
            task = debouncer.trigger("cof")
            await task

        asyncio.run(type_quickly())
        assert calls == ["cof"]

    def test_cancel_drops_pending_search(self):
        """Test explicit cancellation."""
        calls = []
        debouncer = SearchDebouncer(0.05, calls.append)

        async def type_then_cancel():
            debouncer.trigger("tea")
            assert debouncer.pending is True
            debouncer.cancel()
            assert debouncer.pending is False
            await asyncio.sleep(0.1)

        asyncio.run(type_then_cancel())
        assert calls == []

    def test_callback_error_is_contained(self):
        """Test that a failing search callback does not propagate."""
        def explode(text):
            raise RuntimeError("render failed")

        debouncer = SearchDebouncer(0, explode)

        async def run():
            await debouncer.trigger("x")

        asyncio.run(run())
        assert debouncer.pending is False
