"""
Query Execution Engine

Turns a TransactionQuery (search text, category, date range, sort order)
into the list of transactions to display.

Steps run in a fixed order: search, category filter, date range, sort.
Filtering keeps repository order, so only the final sort decides what the
user sees first.
"""

import calendar
from datetime import date
from typing import Iterable, Optional

from finance_tracker.models.transaction import (
    QueryResult,
    Transaction,
    TransactionQuery,
)
from finance_tracker.queries.search import (
    filter_by_category,
    filter_by_date_range,
    filter_records,
)
from finance_tracker.queries.sort import parse_sort_method, sort_records


class QueryExecutor:
    """Executes display queries against an in-memory transaction list."""

    def execute(
        self,
        records: Iterable[Transaction],
        query: TransactionQuery,
    ) -> QueryResult:
        transactions = filter_records(records, query.search_text, query.case_insensitive)
        transactions = filter_by_category(transactions, query.category)
        transactions = filter_by_date_range(transactions, query.date_from, query.date_to)

        field, ascending = parse_sort_method(query.sort_method)
        transactions = sort_records(transactions, field, ascending)

        return QueryResult(
            transactions=transactions,
            result_count=len(transactions),
            data_found=len(transactions) > 0,
            query_description=self.describe(query),
        )

    def describe(self, query: TransactionQuery) -> str:
        """Human-readable summary, e.g. 'Listing transactions | matching "food" | sorted by amount (desc)'."""
        desc_parts = ["Listing transactions"]
        if query.search_text.strip():
            desc_parts.append(f'matching "{query.search_text}"')
        if query.category:
            desc_parts.append(f"category: {query.category}")
        if query.date_from or query.date_to:
            desc_parts.append(self._date_range_str(query.date_from, query.date_to))

        field, ascending = parse_sort_method(query.sort_method)
        desc_parts.append(f"sorted by {field} ({'asc' if ascending else 'desc'})")
        return " | ".join(desc_parts)

    def _date_range_str(
        self,
        date_from: Optional[date],
        date_to: Optional[date],
    ) -> str:
        """Format date range for description."""
        if date_from and date_to:
            if date_from == date_to:
                return f"on {date_from.strftime('%d %b %Y')}"
            elif self._is_whole_month(date_from, date_to):
                return f"in {date_from.strftime('%B %Y')}"
            elif date_from.year == date_to.year:
                return f"from {date_from.strftime('%d %b')} to {date_to.strftime('%d %b %Y')}"
            else:
                return f"from {date_from.strftime('%d %b %Y')} to {date_to.strftime('%d %b %Y')}"
        elif date_from:
            return f"from {date_from.strftime('%d %b %Y')}"
        elif date_to:
            return f"until {date_to.strftime('%d %b %Y')}"
        return ""

    @staticmethod
    def _is_whole_month(date_from: date, date_to: date) -> bool:
        """True when the range runs from the 1st to the last day of one month."""
        if (date_from.year, date_from.month) != (date_to.year, date_to.month):
            return False
        last_day = calendar.monthrange(date_to.year, date_to.month)[1]
        return date_from.day == 1 and date_to.day == last_day
