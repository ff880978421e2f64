"""
Core Data Models for Finance Tracker

These models define the schemas for everything the tracker stores or derives:
1. Transactions and the persisted document they live in
2. Tracker settings and presentation preferences
3. Validation results returned to callers
4. Derived statistics and display queries

Persisted documents use camelCase keys. Models accept both the camelCase
key and the Python attribute name, plus the legacy keys older documents
used (`spendingLimit`, `mainCurrency`, `baseCurrency`).
"""

import secrets
import string
import time
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, ClassVar, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


CENTS = Decimal("0.01")
ZERO = Decimal("0")

DEFAULT_CATEGORIES = ["Food", "Books", "Transport", "Entertainment", "Fees", "Other"]

_ID_ALPHABET = string.digits + string.ascii_lowercase


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_transaction_id() -> str:
    """Millisecond timestamp plus a random base36 suffix, e.g. item_1718000000000_k3x9qa."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"item_{int(time.time() * 1000)}_{suffix}"


def to_decimal(value: Any) -> Decimal:
    """
    Lenient numeric conversion used by sorting and statistics.

    Anything that is not a finite number counts as zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def format_amount(value: Any) -> str:
    """
    Format a number as a fixed two-decimal string.

    Raises:
        ValueError: If the value is not a finite number or has too many
                    digits to carry cents
    """
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            raise ValueError(f"Amount is not a finite number: {value}")
        return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))
    except InvalidOperation as e:
        raise ValueError(f"Amount cannot be represented: {value}") from e


# =============================================================================
# BASE
# =============================================================================

class CamelModel(BaseModel):
    """
    Base for models persisted with camelCase keys.

    Input keys are canonicalised before validation, so callers may pass
    either `budget_cap` or `budgetCap` (or a legacy key).
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    legacy_keys: ClassVar[dict[str, str]] = {}

    @classmethod
    def canonical_keys(cls, data: dict) -> dict:
        renames = {
            name: field.alias
            for name, field in cls.model_fields.items()
            if field.alias
        }
        renames.update(cls.legacy_keys)

        result = {}
        for key, value in data.items():
            target = renames.get(key, key)
            # The canonical key wins over a synonym supplied alongside it
            if target != key and target in data:
                continue
            result[target] = value
        return result

    @model_validator(mode='before')
    @classmethod
    def apply_canonical_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return cls.canonical_keys(data)
        return data

    def merged(self, changes: dict) -> "CamelModel":
        """Return a re-validated copy with `changes` applied on top."""
        data = self.model_dump(by_alias=True)
        data.update(self.canonical_keys(changes))
        return type(self).model_validate(data)

    def to_storage_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# TRANSACTION
# =============================================================================

class Transaction(CamelModel):
    """
    A single expense entry.

    Records created through the repository are fully validated first. Records
    arriving through import or seeding only need the structural fields, so
    this model stays lenient about content: an unparsable amount string is
    kept and later counts as zero.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique transaction ID"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: str = Field(
        ...,
        description="Amount as a fixed two-decimal string"
    )
    category: str = Field(
        default="",
        description="Spending category"
    )
    date: str = Field(
        default="",
        description="Transaction date (YYYY-MM-DD)"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        alias="createdAt",
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        alias="updatedAt",
    )

    @field_validator('id', 'description', mode='before')
    @classmethod
    def numbers_as_text(cls, v: Any) -> Any:
        """Older exports carry numeric IDs (epoch millis) and bare numbers."""
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('category', 'date', mode='before')
    @classmethod
    def missing_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Any:
        """Numbers are stored as fixed two-decimal strings."""
        if isinstance(v, bool):
            raise ValueError("Amount must be a number or a string")
        if isinstance(v, (int, float, Decimal)):
            return format_amount(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def amount_value(self) -> Decimal:
        return to_decimal(self.amount)


# =============================================================================
# SETTINGS & PREFERENCES
# =============================================================================

class TrackerSettings(CamelModel):
    """Settings stored alongside the transactions."""

    legacy_keys: ClassVar[dict[str, str]] = {
        "spendingLimit": "budgetCap",
        "mainCurrency": "currency",
        "baseCurrency": "currency",
    }

    budget_cap: Decimal = Field(
        default=ZERO,
        ge=0,
        alias="budgetCap",
        description="Spending ceiling; 0 means no cap"
    )
    currency: str = Field(
        default="USD",
        min_length=1,
        max_length=10,
    )
    categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES)
    )

    @field_validator('budget_cap', mode='before')
    @classmethod
    def empty_cap_is_zero(cls, v: Any) -> Any:
        if v is None or v == "":
            return ZERO
        return v

    @field_serializer('budget_cap', when_used='json')
    def serialize_budget_cap(self, v: Decimal) -> float:
        return float(v)


class UserPreferences(CamelModel):
    """Presentation preferences, persisted under their own key."""

    color_theme: str = Field(default="default", alias="colorTheme")
    text_size: str = Field(default="medium", alias="textSize")
    date_style: str = Field(default="yyyy-mm-dd", alias="dateStyle")
    money_style: str = Field(default="symbol", alias="moneyStyle")
    auto_save: bool = Field(default=True, alias="autoSave")
    show_graphs: bool = Field(default=True, alias="showGraphs")
    ask_before_delete: bool = Field(default=True, alias="askBeforeDelete")


class TrackerDocument(CamelModel):
    """The single blob persisted under the data key."""

    transactions: list[Transaction] = Field(default_factory=list)
    settings: TrackerSettings = Field(default_factory=TrackerSettings)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class FieldCheck(BaseModel):
    """Result of checking a single field."""

    valid: bool
    message: str = ""
    normalized: Any = None
    is_warning: bool = Field(
        default=False,
        description="True when the message is advisory and the value is usable"
    )


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_format', 'future_date', 'duplicate_words')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a whole transaction.

    Only error-level issues block persistence. Warnings (repeated words,
    missing cents) are informational.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    clean_data: dict[str, Any] = Field(
        default_factory=dict,
        description="Normalized field values"
    )

    @property
    def errors(self) -> dict[str, str]:
        """Blocking messages keyed by field name."""
        return {i.field: i.message for i in self.issues if i.severity == "error"}

    @property
    def warnings(self) -> dict[str, str]:
        """Non-blocking messages keyed by issue type."""
        return {i.issue_type: i.message for i in self.issues if i.severity == "warning"}

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")


# =============================================================================
# REPOSITORY RESULTS
# =============================================================================

class MutationResult(BaseModel):
    """
    Outcome of add/update/settings changes.

    Failures are reported here instead of raised so callers can render
    per-field feedback.
    """

    ok: bool
    transaction: Optional[Transaction] = None
    errors: dict[str, str] = Field(default_factory=dict)
    warnings: dict[str, str] = Field(default_factory=dict)
    error_kind: Optional[str] = Field(
        default=None,
        pattern="^(validation|not_found)$",
    )
    persisted: bool = Field(
        default=True,
        description="False when the change is in memory but the store write failed"
    )
    message: str = ""


class ImportResult(BaseModel):
    """Outcome of replacing the repository from an exported document."""

    ok: bool
    imported_count: int = Field(default=0, ge=0)
    skipped_count: int = Field(default=0, ge=0)
    error: Optional[str] = None


# =============================================================================
# STATISTICS
# =============================================================================

class BudgetStatus(BaseModel):
    remaining: Decimal
    is_over: bool


class TrendBucket(BaseModel):
    """Spending on one calendar day."""

    day: date
    amount: Decimal = ZERO


class Stats(BaseModel):
    """Aggregates derived from the current transaction list."""

    total_count: int = Field(ge=0)
    total_amount: Decimal
    category_totals: dict[str, Decimal] = Field(default_factory=dict)
    top_category: Optional[str] = None
    budget_status: Optional[BudgetStatus] = None
    trend: list[TrendBucket] = Field(
        default_factory=list,
        description="Last 7 days, oldest first, today last"
    )

    @property
    def trend_amounts(self) -> list[Decimal]:
        return [bucket.amount for bucket in self.trend]


# =============================================================================
# DISPLAY QUERIES
# =============================================================================

class TransactionQuery(BaseModel):
    """What the transaction list should currently show."""

    search_text: str = ""
    case_insensitive: bool = True
    sort_method: str = Field(
        default="date-desc",
        description="'<field>-<asc|desc>', e.g. 'amount-asc'"
    )
    category: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class QueryResult(BaseModel):
    """Result of executing a TransactionQuery."""

    transactions: list[Transaction] = Field(default_factory=list)
    result_count: int = Field(ge=0)
    data_found: bool
    query_description: str = Field(
        ...,
        description="Human-readable description of what was queried"
    )
