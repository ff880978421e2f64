"""
Search & Filter Engine

Users type free text or regular expressions into the search box. A pattern
that is not a valid regex is searched for literally instead, so a stray
"[" or "(" never breaks the transaction list.

Filtering never reorders and never mutates its input.
"""

import re
from datetime import date
from typing import Iterable, Optional, Pattern

import structlog

from finance_tracker.models.transaction import FieldCheck, Transaction


logger = structlog.get_logger(__name__)


class MalformedPatternError(ValueError):
    """A search pattern could not be compiled as a regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid search pattern {pattern!r}: {reason}")


def _flags(case_insensitive: bool) -> int:
    return re.IGNORECASE if case_insensitive else 0


def compile_pattern(pattern: str, case_insensitive: bool = True) -> Pattern[str]:
    """
    Compile a pattern exactly as given.

    Raises:
        MalformedPatternError: If the pattern is not a valid regex
    """
    try:
        return re.compile(pattern, _flags(case_insensitive))
    except re.error as e:
        raise MalformedPatternError(pattern, str(e)) from e


def compile_safe(
    pattern: Optional[str],
    case_insensitive: bool = True,
) -> Optional[Pattern[str]]:
    """
    Compile a user-supplied pattern without ever raising.

    Returns:
        None for a blank pattern or when even the escaped literal fails,
        otherwise the compiled regex (or its literal fallback)
    """
    if pattern is None or not str(pattern).strip():
        return None
    pattern = str(pattern)

    try:
        return compile_pattern(pattern, case_insensitive)
    except MalformedPatternError as e:
        logger.debug("search_pattern_fallback", pattern=pattern, reason=e.reason)

    try:
        return re.compile(re.escape(pattern), _flags(case_insensitive))
    except re.error as e:
        logger.warning("search_pattern_unusable", pattern=pattern, error=str(e))
        return None


def check_pattern(pattern: str) -> FieldCheck:
    """Report whether a pattern compiles as a regex, for inline feedback."""
    if not pattern.strip():
        return FieldCheck(valid=True, normalized=None)
    try:
        compiled = compile_pattern(pattern)
    except MalformedPatternError:
        return FieldCheck(valid=False, message="Invalid search pattern", normalized=None)
    return FieldCheck(valid=True, normalized=compiled)


def _searchable_fields(record: Transaction) -> tuple[str, str, str, str]:
    return (record.description, record.category, record.date, record.amount)


def filter_records(
    records: Iterable[Transaction],
    pattern: Optional[str],
    case_insensitive: bool = True,
) -> list[Transaction]:
    """
    Keep records whose description, category, date or amount matches.

    A blank pattern keeps everything. A pattern that cannot be compiled at
    all yields no results.
    """
    records = list(records)
    if pattern is None or not str(pattern).strip():
        return records

    regex = compile_safe(pattern, case_insensitive)
    if regex is None:
        return []

    return [
        record for record in records
        if any(regex.search(field) for field in _searchable_fields(record))
    ]


def filter_by_category(
    records: Iterable[Transaction],
    category: Optional[str],
) -> list[Transaction]:
    """Exact category match; no category keeps everything."""
    if not category:
        return list(records)
    return [record for record in records if record.category == category]


def filter_by_date_range(
    records: Iterable[Transaction],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[Transaction]:
    """Inclusive date range. ISO date strings compare correctly as text."""
    start = date_from.isoformat() if date_from else None
    end = date_to.isoformat() if date_to else None
    return [
        record for record in records
        if (start is None or record.date >= start)
        and (end is None or record.date <= end)
    ]
