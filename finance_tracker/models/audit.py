"""
Audit Models for Finance Tracker

Every change to the repository produces an AuditEvent. Events are handed to
repository subscribers (the audit logger, a UI layer, tests), which replaces
ad hoc change notifications with one explicit observer interface.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_tracker.models.transaction import utc_now


class AuditEventType(str, Enum):
    """Types of repository changes we announce."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Whole-document changes
    DATA_LOADED = "data_loaded"
    DATA_IMPORTED = "data_imported"
    DATA_RESET = "data_reset"
    SEED_LOADED = "seed_loaded"

    # Settings
    SETTINGS_UPDATED = "settings_updated"
    PREFERENCES_UPDATED = "preferences_updated"

    # Failures
    SAVE_FAILED = "save_failed"
    LOAD_FAILED = "load_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single repository change."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    entity_id: Optional[str] = Field(
        default=None,
        description="Transaction ID the event relates to, if any"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "12.50")
        event = AuditEventBuilder.save_failed("add", "disk full")
    """

    @staticmethod
    def transaction_added(transaction_id: str, amount: str, category: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_id=transaction_id,
            description=f"Transaction added: {amount} in {category}",
            details={"amount": amount, "category": category},
        )

    @staticmethod
    def transaction_updated(transaction_id: str, changed_fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_id=transaction_id,
            description=f"Transaction updated: {', '.join(changed_fields) or 'no changes'}",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def data_loaded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            severity=AuditSeverity.DEBUG,
            description=f"Loaded {count} transactions from storage",
            details={"count": count},
        )

    @staticmethod
    def data_imported(imported: int, skipped: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_IMPORTED,
            description=f"Imported {imported} transactions ({skipped} skipped)",
            details={"imported": imported, "skipped": skipped},
        )

    @staticmethod
    def data_reset() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_RESET,
            severity=AuditSeverity.WARNING,
            description="All data has been reset",
        )

    @staticmethod
    def seed_loaded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SEED_LOADED,
            description=f"Loaded {count} sample transactions",
            details={"count": count},
        )

    @staticmethod
    def settings_updated(changed_fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTINGS_UPDATED,
            description="Settings updated",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def preferences_updated(changed_fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCES_UPDATED,
            description="Preferences updated",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def save_failed(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Changes from '{operation}' may not have been saved",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def load_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            description="Stored data could not be read; starting empty",
            error_message=error_message,
        )
