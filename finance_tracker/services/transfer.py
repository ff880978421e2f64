"""
Import / Export of the Tracker Document

Export produces the persisted document as pretty-printed JSON. Import
accepts the same shape and is all-or-nothing at the document level:
- a document that is not JSON, not an object, has a non-list
  `transactions` or unusable `settings` is rejected outright
- individual entries that are structurally broken (not an object, missing
  id/description/amount, or a repeated id) are dropped and counted
"""

import json
from typing import Any, Iterable, Union

import structlog
from pydantic import ValidationError

from finance_tracker.models.transaction import (
    TrackerDocument,
    TrackerSettings,
    Transaction,
    new_transaction_id,
)


logger = structlog.get_logger(__name__)


class MalformedImportError(ValueError):
    """The imported document cannot be used at all."""
    pass


def export_document(document: TrackerDocument) -> str:
    return json.dumps(document.to_storage_dict(), ensure_ascii=False, indent=2)


def _is_structurally_valid(entry: Any, require_id: bool = True) -> bool:
    if not isinstance(entry, dict):
        return False
    if require_id and not entry.get("id"):
        return False
    return bool(entry.get("description")) and entry.get("amount") is not None


def clean_entries(
    entries: Iterable[Any],
    assign_ids: bool = False,
) -> tuple[list[Transaction], int]:
    """
    Keep the usable transaction entries.

    Args:
        entries: Raw decoded entries
        assign_ids: Give entries without an id a fresh one instead of
                    dropping them (used for seed data)

    Returns:
        (transactions, skipped_count)
    """
    transactions = []
    seen_ids = set()
    skipped = 0

    for entry in entries:
        if not _is_structurally_valid(entry, require_id=not assign_ids):
            skipped += 1
            continue

        if assign_ids and not entry.get("id"):
            entry = {**entry, "id": new_transaction_id()}

        try:
            transaction = Transaction.model_validate(entry)
        except ValidationError as e:
            logger.debug("entry_rejected", entry_id=entry.get("id"), error=str(e))
            skipped += 1
            continue

        if transaction.id in seen_ids:
            skipped += 1
            continue

        seen_ids.add(transaction.id)
        transactions.append(transaction)

    return transactions, skipped


def parse_import_document(text: Union[str, bytes]) -> tuple[TrackerDocument, int]:
    """
    Decode an exported document.

    Returns:
        (document, skipped_entry_count)

    Raises:
        MalformedImportError: If the document as a whole is unusable
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError, RecursionError) as e:
        raise MalformedImportError(f"Invalid JSON data: {e}") from e

    if not isinstance(data, dict):
        raise MalformedImportError("Invalid data format: expected a JSON object")

    raw_transactions = data.get("transactions", [])
    if raw_transactions is None:
        raw_transactions = []
    if not isinstance(raw_transactions, list):
        raise MalformedImportError("Transactions must be a list")

    raw_settings = data.get("settings") or {}
    if not isinstance(raw_settings, dict):
        raise MalformedImportError("Settings must be an object")
    try:
        settings = TrackerSettings.model_validate(raw_settings)
    except ValidationError as e:
        raise MalformedImportError(f"Invalid settings: {e}") from e

    transactions, skipped = clean_entries(raw_transactions)
    return TrackerDocument(transactions=transactions, settings=settings), skipped
