"""
Transaction Repository

Owns the authoritative in-memory transaction list for a session and mirrors
it to the key-value store after every change (write-through).

GUARANTEES:
- Invalid input never reaches the list or the store
- New transactions are prepended, so list order is most-recent-first
- Every successful change rewrites the whole persisted document
- Failures are reported in return values; nothing is raised to the caller

If a store write fails, the in-memory change stays applied and the result
says the change may not have been saved. Imports and resets are the
exception: they only take effect once the store has accepted them.
"""

import json
from typing import Any, Callable, Iterable, Mapping, Optional

import structlog
from pydantic import ValidationError

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder
from finance_tracker.models.transaction import (
    ImportResult,
    MutationResult,
    TrackerDocument,
    TrackerSettings,
    Transaction,
    UserPreferences,
    ValidationResult,
    new_transaction_id,
    utc_now,
)
from finance_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    NotFoundError,
    PersistenceError,
)
from finance_tracker.services.transfer import (
    MalformedImportError,
    clean_entries,
    export_document,
    parse_import_document,
)
from finance_tracker.validation.validator import (
    TransactionValidationError,
    TransactionValidator,
)


logger = structlog.get_logger(__name__)

DEFAULT_DATA_KEY = "moneyTrackerData"
DEFAULT_PREFERENCES_KEY = "userPreferences"

EDITABLE_FIELDS = ("description", "amount", "category", "date")

NOT_SAVED_MESSAGE = "The change was applied but may not have been saved"

Subscriber = Callable[[AuditEvent], None]


class TransactionRepository:
    """
    In-memory transaction list with write-through persistence.

    The store is injected; the repository never reaches for global state.
    Call load() once before use.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        validator: Optional[TransactionValidator] = None,
        data_key: str = DEFAULT_DATA_KEY,
        preferences_key: str = DEFAULT_PREFERENCES_KEY,
    ):
        self._store = store
        self._validator = validator or TransactionValidator()
        self._data_key = data_key
        self._preferences_key = preferences_key

        self._transactions: list[Transaction] = []
        self._settings = TrackerSettings()
        self._preferences = UserPreferences()
        self._subscribers: list[Subscriber] = []
        self._last_save_ok = True

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            A function that removes the listener again
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: AuditEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                logger.error(
                    "subscriber_failed",
                    event_type=event.event_type.value,
                    error=str(e),
                )

    # -------------------------------------------------------------------------
    # Loading & persistence
    # -------------------------------------------------------------------------

    def load(self) -> bool:
        """
        Read transactions, settings and preferences from the store.

        Missing or corrupt documents fall back to defaults.

        Returns:
            False if the store itself could not be read
        """
        read_ok = True
        document = TrackerDocument()
        preferences = UserPreferences()

        try:
            raw_document = self._store.get(self._data_key)
            raw_preferences = self._store.get(self._preferences_key)
        except (PersistenceError, OSError) as e:
            logger.error("load_failed", error=str(e))
            self._notify(AuditEventBuilder.load_failed(str(e)))
            raw_document = raw_preferences = None
            read_ok = False

        if raw_document:
            try:
                document, skipped = parse_import_document(raw_document)
                if skipped:
                    logger.warning("stored_entries_skipped", count=skipped)
            except MalformedImportError as e:
                logger.warning("stored_document_corrupt", key=self._data_key, error=str(e))

        if raw_preferences:
            try:
                preferences = UserPreferences.model_validate(json.loads(raw_preferences))
            except ValueError as e:
                logger.warning("stored_preferences_corrupt", key=self._preferences_key, error=str(e))

        self._transactions = list(document.transactions)
        self._settings = document.settings
        self._preferences = preferences
        self._notify(AuditEventBuilder.data_loaded(len(self._transactions)))
        return read_ok

    @property
    def last_save_ok(self) -> bool:
        """Whether the most recent write reached the store."""
        return self._last_save_ok

    def _document(self) -> TrackerDocument:
        return TrackerDocument(transactions=list(self._transactions), settings=self._settings)

    def _save(self, operation: str) -> bool:
        """Write the whole document. Failures are logged and announced, not raised."""
        try:
            self._store.set(self._data_key, export_document(self._document()))
        except (PersistenceError, OSError) as e:
            self._last_save_ok = False
            logger.error("save_failed", operation=operation, error=str(e))
            self._notify(AuditEventBuilder.save_failed(operation, str(e)))
            return False

        self._last_save_ok = True
        return True

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def list(self) -> list[Transaction]:
        """All transactions, most recent first. The returned list is a copy."""
        return list(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def _index_of(self, transaction_id: str) -> int:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                return index
        raise NotFoundError(f"Item not found: {transaction_id}")

    def _validated(self, fields: Mapping[str, Any]) -> ValidationResult:
        result = self._validator.validate(fields)
        if not result.is_valid:
            raise TransactionValidationError(result)
        return result

    @staticmethod
    def _validation_failure(result: ValidationResult) -> MutationResult:
        return MutationResult(
            ok=False,
            errors=result.errors,
            warnings=result.warnings,
            error_kind="validation",
            persisted=False,
            message="Please fix the highlighted fields",
        )

    def add(self, fields: Mapping[str, Any]) -> MutationResult:
        """
        Validate and prepend a new transaction.

        Args:
            fields: description, amount, category and date as entered

        Returns:
            MutationResult carrying the stored transaction, or field errors
        """
        try:
            result = self._validated(fields)
        except TransactionValidationError as e:
            logger.info("add_rejected", errors=e.result.errors)
            return self._validation_failure(e.result)

        now = utc_now()
        transaction = Transaction(
            id=new_transaction_id(),
            created_at=now,
            updated_at=now,
            **result.clean_data,
        )
        self._transactions.insert(0, transaction)

        persisted = self._save("add")
        self._notify(AuditEventBuilder.transaction_added(
            transaction.id, transaction.amount, transaction.category
        ))
        return MutationResult(
            ok=True,
            transaction=transaction,
            warnings=result.warnings,
            persisted=persisted,
            message="Item added successfully" if persisted else NOT_SAVED_MESSAGE,
        )

    def update(self, transaction_id: str, patch: Mapping[str, Any]) -> MutationResult:
        """
        Merge `patch` onto an existing transaction.

        Only description, amount, category and date can change; other keys
        are ignored. The merged record is validated as a whole, and the
        original is left untouched if it fails.
        """
        try:
            index = self._index_of(transaction_id)
        except NotFoundError as e:
            logger.info("update_missing", transaction_id=transaction_id)
            return MutationResult(
                ok=False,
                error_kind="not_found",
                persisted=False,
                message=str(e),
            )

        existing = self._transactions[index]
        merged = {name: getattr(existing, name) for name in EDITABLE_FIELDS}
        merged.update({k: v for k, v in patch.items() if k in EDITABLE_FIELDS})

        try:
            result = self._validated(merged)
        except TransactionValidationError as e:
            logger.info("update_rejected", transaction_id=transaction_id, errors=e.result.errors)
            return self._validation_failure(e.result)

        updated = existing.model_copy(update={**result.clean_data, "updated_at": utc_now()})
        self._transactions[index] = updated

        persisted = self._save("update")
        changed = [
            name for name in EDITABLE_FIELDS
            if getattr(updated, name) != getattr(existing, name)
        ]
        self._notify(AuditEventBuilder.transaction_updated(transaction_id, changed))
        return MutationResult(
            ok=True,
            transaction=updated,
            warnings=result.warnings,
            persisted=persisted,
            message="Item updated successfully" if persisted else NOT_SAVED_MESSAGE,
        )

    def delete(self, transaction_id: str) -> bool:
        """
        Remove a transaction.

        Returns:
            True if a transaction was removed; unknown IDs change nothing
        """
        try:
            index = self._index_of(transaction_id)
        except NotFoundError:
            logger.info("delete_missing", transaction_id=transaction_id)
            return False

        del self._transactions[index]
        self._save("delete")
        self._notify(AuditEventBuilder.transaction_deleted(transaction_id))
        return True

    # -------------------------------------------------------------------------
    # Settings & preferences
    # -------------------------------------------------------------------------

    @property
    def settings(self) -> TrackerSettings:
        return self._settings

    def update_settings(self, changes: Mapping[str, Any]) -> MutationResult:
        """Merge tracker settings (budget cap, currency, categories)."""
        try:
            settings = self._settings.merged(dict(changes))
        except ValidationError as e:
            errors = {
                ".".join(str(part) for part in error["loc"]) or "settings": error["msg"]
                for error in e.errors()
            }
            return MutationResult(
                ok=False,
                errors=errors,
                error_kind="validation",
                persisted=False,
                message="Invalid settings",
            )

        self._settings = settings
        persisted = self._save("settings")
        self._notify(AuditEventBuilder.settings_updated(sorted(changes)))
        return MutationResult(
            ok=True,
            persisted=persisted,
            message="Settings saved" if persisted else NOT_SAVED_MESSAGE,
        )

    @property
    def preferences(self) -> UserPreferences:
        return self._preferences

    def update_preferences(self, changes: Mapping[str, Any]) -> bool:
        """
        Merge and save presentation preferences.

        Preferences only change in memory once the store has accepted them.
        """
        try:
            preferences = self._preferences.merged(dict(changes))
        except ValidationError as e:
            logger.info("preferences_rejected", error=str(e))
            return False

        try:
            self._store.set(
                self._preferences_key,
                json.dumps(preferences.to_storage_dict(), indent=2),
            )
        except (PersistenceError, OSError) as e:
            logger.error("save_failed", operation="preferences", error=str(e))
            self._notify(AuditEventBuilder.save_failed("preferences", str(e)))
            return False

        self._preferences = preferences
        self._notify(AuditEventBuilder.preferences_updated(sorted(changes)))
        return True

    # -------------------------------------------------------------------------
    # Whole-document operations
    # -------------------------------------------------------------------------

    def export_json(self) -> str:
        """The persisted document as pretty-printed JSON."""
        return export_document(self._document())

    def import_json(self, text: str) -> ImportResult:
        """
        Replace all transactions and settings with an exported document.

        Nothing changes unless the document parses and the store accepts it.
        """
        try:
            document, skipped = parse_import_document(text)
        except MalformedImportError as e:
            logger.warning("import_rejected", error=str(e))
            return ImportResult(ok=False, error=str(e))

        try:
            self._store.set(self._data_key, export_document(document))
        except (PersistenceError, OSError) as e:
            logger.error("save_failed", operation="import", error=str(e))
            self._notify(AuditEventBuilder.save_failed("import", str(e)))
            return ImportResult(ok=False, error=f"Imported data could not be saved: {e}")

        self._transactions = list(document.transactions)
        self._settings = document.settings
        self._last_save_ok = True
        self._notify(AuditEventBuilder.data_imported(len(self._transactions), skipped))
        return ImportResult(
            ok=True,
            imported_count=len(self._transactions),
            skipped_count=skipped,
        )

    def reset(self) -> bool:
        """Delete all stored data and return to defaults."""
        try:
            self._store.delete(self._data_key)
            self._store.delete(self._preferences_key)
        except (PersistenceError, OSError) as e:
            logger.error("reset_failed", error=str(e))
            return False

        self._transactions = []
        self._settings = TrackerSettings()
        self._preferences = UserPreferences()
        self._last_save_ok = True
        self._notify(AuditEventBuilder.data_reset())
        return True

    def seed_if_empty(self, candidates: Optional[Iterable[Any]]) -> int:
        """
        Populate an empty repository with sample transactions.

        Returns:
            Number of transactions added (0 if the repository already has data)
        """
        if self._transactions or not candidates:
            return 0

        transactions, skipped = clean_entries(candidates, assign_ids=True)
        if not transactions:
            logger.info("seed_empty", skipped=skipped)
            return 0

        self._transactions = transactions
        self._save("seed")
        self._notify(AuditEventBuilder.seed_loaded(len(transactions)))
        return len(transactions)
