"""Search, sort, statistics and display query package."""

from finance_tracker.queries.debounce import SearchDebouncer
from finance_tracker.queries.executor import QueryExecutor
from finance_tracker.queries.search import (
    MalformedPatternError,
    check_pattern,
    compile_pattern,
    compile_safe,
    filter_by_category,
    filter_by_date_range,
    filter_records,
)
from finance_tracker.queries.sort import parse_sort_method, sort_records
from finance_tracker.queries.stats import compute_stats

__all__ = [
    "MalformedPatternError",
    "QueryExecutor",
    "SearchDebouncer",
    "check_pattern",
    "compile_pattern",
    "compile_safe",
    "compute_stats",
    "filter_by_category",
    "filter_by_date_range",
    "filter_records",
    "parse_sort_method",
    "sort_records",
]
