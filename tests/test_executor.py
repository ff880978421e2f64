"""Tests for display query execution."""

from datetime import date

import pytest

from conftest import make_transaction
from finance_tracker.models import TransactionQuery
from finance_tracker.queries import QueryExecutor


@pytest.fixture
def executor():
    return QueryExecutor()


@pytest.fixture
def records():
    return [
        make_transaction(id="1", description="Lunch", amount="12.00", category="Food", date="2024-06-10"),
        make_transaction(id="2", description="Bus", amount="2.50", category="Transport", date="2024-06-12"),
        make_transaction(id="3", description="Dinner", amount="30.00", category="Food", date="2024-06-11"),
    ]


class TestQueryExecutor:
    """Tests for QueryExecutor.execute."""

    def test_default_query_is_newest_first(self, executor, records):
        """Test the default date-desc ordering."""
        result = executor.execute(records, TransactionQuery())
        assert [r.id for r in result.transactions] == ["2", "3", "1"]
        assert result.result_count == 3
        assert result.data_found is True

    def test_search_then_sort(self, executor, records):
        """Test search combined with an explicit sort method."""
        query = TransactionQuery(search_text="food", sort_method="amount-asc")
        result = executor.execute(records, query)
        assert [r.id for r in result.transactions] == ["1", "3"]

    def test_category_and_date_range(self, executor, records):
        """Test structured filters."""
        query = TransactionQuery(category="Food", date_from=date(2024, 6, 11))
        result = executor.execute(records, query)
        assert [r.id for r in result.transactions] == ["3"]

    def test_no_matches(self, executor, records):
        """Test an empty result."""
        result = executor.execute(records, TransactionQuery(search_text="zzz"))
        assert result.data_found is False
        assert result.result_count == 0

    def test_description(self, executor):
        """Test the human-readable query description."""
        query = TransactionQuery(
            search_text="food",
            sort_method="amount-desc",
            date_from=date(2024, 6, 1),
            date_to=date(2024, 6, 30),
        )
        description = executor.describe(query)
        assert 'matching "food"' in description
        assert "in June 2024" in description
        assert description.endswith("sorted by amount (desc)")

    def test_partial_month_prints_both_ends(self, executor):
        """Test that a range inside one month is not described as the whole month."""
        query = TransactionQuery(date_from=date(2024, 6, 5), date_to=date(2024, 6, 10))
        description = executor.describe(query)
        assert "from 05 Jun to 10 Jun 2024" in description
        assert "June" not in description
