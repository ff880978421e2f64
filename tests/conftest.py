"""Shared fixtures for the finance tracker tests."""

from datetime import date, timedelta
from typing import Optional

import pytest

from finance_tracker.models import Transaction
from finance_tracker.repository import TransactionRepository
from finance_tracker.services.storage import (
    InMemoryStore,
    KeyValueStoreInterface,
    PersistenceError,
)
from finance_tracker.validation import TransactionValidator


TODAY = date(2024, 6, 15)


class FlakyStore(KeyValueStoreInterface):
    """In-memory store whose writes can be switched off."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.fail_writes = False
        self.fail_reads = False

    def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise PersistenceError("read failed")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError("disk full")
        self.data[key] = value

    def delete(self, key: str) -> bool:
        if self.fail_writes:
            raise PersistenceError("disk full")
        return self.data.pop(key, None) is not None


def make_transaction(
    id: str = "item_1",
    description: str = "Lunch",
    amount: str = "10.00",
    category: str = "Food",
    date: str = TODAY.isoformat(),
) -> Transaction:
    return Transaction(
        id=id,
        description=description,
        amount=amount,
        category=category,
        date=date,
    )


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def yesterday() -> date:
    return TODAY - timedelta(days=1)


@pytest.fixture
def validator() -> TransactionValidator:
    return TransactionValidator(today_provider=lambda: TODAY)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def flaky_store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def repository(store, validator) -> TransactionRepository:
    repo = TransactionRepository(store, validator=validator)
    repo.load()
    return repo


@pytest.fixture
def valid_fields() -> dict:
    return {
        "description": "Coffee beans",
        "amount": "12.50",
        "category": "Food",
        "date": TODAY.isoformat(),
    }
