"""Tests for search and filtering."""

from datetime import date

import pytest

from conftest import make_transaction
from finance_tracker.queries import (
    MalformedPatternError,
    check_pattern,
    compile_pattern,
    compile_safe,
    filter_by_category,
    filter_by_date_range,
    filter_records,
)


@pytest.fixture
def records():
    return [
        make_transaction(id="1", description="Food court lunch", category="Food", date="2024-06-10"),
        make_transaction(id="2", description="Bus pass", amount="45.00", category="Transport", date="2024-06-11"),
        make_transaction(id="3", description="Groceries", category="Food", date="2024-06-12"),
        make_transaction(id="4", description="Novel [paperback]", amount="8.99", category="Books", date="2024-05-30"),
    ]


class TestPatternCompilation:
    """Tests for regex compilation and fallback."""

    def test_strict_compile_raises_malformed_pattern(self):
        """Test that the strict compiler reports the bad pattern."""
        with pytest.raises(MalformedPatternError) as exc_info:
            compile_pattern("[abc")
        assert exc_info.value.pattern == "[abc"

    def test_safe_compile_falls_back_to_literal(self):
        """Test that a malformed pattern is searched literally."""
        regex = compile_safe("[abc")
        assert regex is not None
        assert regex.search("xx[abcxx")
        assert not regex.search("b")

    def test_blank_pattern_compiles_to_none(self):
        """Test that whitespace-only input means no pattern."""
        assert compile_safe("   ") is None

    def test_check_pattern_for_inline_feedback(self):
        """Test pattern validity feedback."""
        assert check_pattern("fo+d").valid is True
        assert check_pattern("(unclosed").valid is False


class TestFilterRecords:
    """Tests for free-text search."""

    def test_blank_pattern_keeps_everything(self, records):
        """Test that an empty search returns all records."""
        assert filter_records(records, "") == records

    def test_matches_any_field(self, records):
        """Test matching on description, category, date and amount."""
        assert [r.id for r in filter_records(records, "food")] == ["1", "3"]
        assert [r.id for r in filter_records(records, "transport")] == ["2"]
        assert [r.id for r in filter_records(records, "2024-05")] == ["4"]
        assert [r.id for r in filter_records(records, r"^45\.")] == ["2"]

    def test_case_sensitivity_flag(self, records):
        """Test case-sensitive search."""
        assert filter_records(records, "food", case_insensitive=False) == []
        assert [r.id for r in filter_records(records, "Food", case_insensitive=False)] == ["1", "3"]

    def test_regex_search(self, records):
        """Test a real regular expression."""
        assert [r.id for r in filter_records(records, "^(bus|novel)")] == ["2", "4"]

    def test_malformed_pattern_never_raises(self, records):
        """Test that an unbalanced bracket falls back to a literal search."""
        assert filter_records(records, "[abc") == []
        assert [r.id for r in filter_records(records, "[paper")] == ["4"]

    def test_order_preserved_and_input_untouched(self, records):
        """Test that filtering is order-preserving and non-mutating."""
        before = list(records)
        result = filter_records(records, "o")
        assert result == [r for r in before if r in result]
        assert records == before


class TestStructuredFilters:
    """Tests for category and date range filters."""

    def test_filter_by_category(self, records):
        """Test exact category filtering."""
        assert [r.id for r in filter_by_category(records, "Food")] == ["1", "3"]
        assert filter_by_category(records, None) == records

    def test_filter_by_date_range_is_inclusive(self, records):
        """Test inclusive date bounds."""
        result = filter_by_date_range(records, date(2024, 6, 10), date(2024, 6, 11))
        assert [r.id for r in result] == ["1", "2"]

    def test_open_ended_range(self, records):
        """Test a range with only a lower bound."""
        result = filter_by_date_range(records, date_from=date(2024, 6, 12))
        assert [r.id for r in result] == ["3"]
