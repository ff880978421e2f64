"""
Data Models Package

This package contains all Pydantic models used by the Finance Tracker.
All data flowing through the repository must conform to these schemas.
"""

from finance_tracker.models.transaction import (
    DEFAULT_CATEGORIES,
    BudgetStatus,
    FieldCheck,
    ImportResult,
    MutationResult,
    QueryResult,
    Stats,
    TrackerDocument,
    TrackerSettings,
    Transaction,
    TransactionQuery,
    TrendBucket,
    UserPreferences,
    ValidationIssue,
    ValidationResult,
    format_amount,
    new_transaction_id,
    to_decimal,
    utc_now,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "DEFAULT_CATEGORIES",
    "BudgetStatus",
    "FieldCheck",
    "ImportResult",
    "MutationResult",
    "QueryResult",
    "Stats",
    "TrackerDocument",
    "TrackerSettings",
    "Transaction",
    "TransactionQuery",
    "TrendBucket",
    "UserPreferences",
    "ValidationIssue",
    "ValidationResult",
    "format_amount",
    "new_transaction_id",
    "to_decimal",
    "utc_now",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
