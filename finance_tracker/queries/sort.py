"""
Sort Engine

Sorting is non-destructive and stable: records with equal keys keep their
relative order, in both directions.
"""

from datetime import date
from typing import Any, Callable, Iterable

from finance_tracker.models.transaction import Transaction, to_decimal


DEFAULT_SORT = ("date", False)


def _date_key(record: Transaction) -> date:
    try:
        return date.fromisoformat(record.date)
    except ValueError:
        return date.min


SORT_KEYS: dict[str, Callable[[Transaction], Any]] = {
    "amount": lambda record: to_decimal(record.amount),
    "description": lambda record: record.description.lower(),
    "category": lambda record: record.category.lower(),
    "date": _date_key,
}


def sort_records(
    records: Iterable[Transaction],
    field: str = "date",
    ascending: bool = True,
) -> list[Transaction]:
    """
    Return a new list ordered by `field`.

    Unknown fields fall back to newest date first.
    """
    if field not in SORT_KEYS:
        field, ascending = DEFAULT_SORT
    # sorted() keeps equal elements in input order even with reverse=True
    return sorted(records, key=SORT_KEYS[field], reverse=not ascending)


def parse_sort_method(method: str) -> tuple[str, bool]:
    """
    Split a sort method such as 'amount-desc' into (field, ascending).

    Anything unrecognised maps to the default newest-first order.
    """
    field, _, direction = (method or "").strip().lower().rpartition("-")
    if field not in SORT_KEYS or direction not in ("asc", "desc"):
        return DEFAULT_SORT
    return field, direction == "asc"
