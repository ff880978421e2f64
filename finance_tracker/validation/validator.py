"""
Transaction Validation

Validation is split into per-field checks and a whole-record pass:

FIELD CHECKS (pure functions, one per field):
- Description: no leading/trailing whitespace, internal runs collapsed
- Amount: non-negative, at most two decimals, normalized to "x.yy"
- Date: strict YYYY-MM-DD, a real calendar date, not after today
- Category: letter runs separated by single spaces or hyphens

ADVISORY CHECKS (never block):
- Immediately repeated words in the description ("coffee coffee")
- Amounts entered without cents

The whole-record pass collects both kinds into one ValidationResult. Only
error-severity issues make a record invalid.
"""

import re
from datetime import date
from decimal import InvalidOperation
from typing import Any, Callable, Mapping, Optional

from finance_tracker.models.transaction import (
    FieldCheck,
    ValidationIssue,
    ValidationResult,
    format_amount,
)


DESCRIPTION_PATTERN = re.compile(r"\S(?:.*\S)?", re.DOTALL)
AMOUNT_PATTERN = re.compile(r"(0|[1-9]\d*)(\.\d{1,2})?", re.ASCII)
DATE_PATTERN = re.compile(r"\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])", re.ASCII)
CATEGORY_PATTERN = re.compile(r"[A-Za-z]+(?:[ -][A-Za-z]+)*")
DUPLICATE_WORD_PATTERN = re.compile(r"\b(\w+)\s+\1\b", re.IGNORECASE)
CENTS_PATTERN = re.compile(r"\.\d{2}\b", re.ASCII)

DESCRIPTION_MESSAGE = "Description cannot have spaces at start or end"
AMOUNT_MESSAGE = "Amount must be a positive number with up to 2 decimal places"
DATE_FORMAT_MESSAGE = "Date must be in YYYY-MM-DD format"
FUTURE_DATE_MESSAGE = "Date cannot be in the future"
CATEGORY_MESSAGE = "Category can only contain letters, spaces, and hyphens"
DUPLICATE_WORDS_MESSAGE = "Description contains repeated words"
MONEY_FORMAT_MESSAGE = "Consider adding cents for better tracking"

REQUIRED_FIELDS = ("description", "amount", "category", "date")


class TransactionValidationError(Exception):
    """Raised when a transaction fails blocking validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(
            "; ".join(f"{name}: {msg}" for name, msg in result.errors.items())
        )


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def validate_description(value: Any) -> FieldCheck:
    text = _as_text(value)
    if DESCRIPTION_PATTERN.fullmatch(text) is None:
        return FieldCheck(valid=False, message=DESCRIPTION_MESSAGE, normalized=value)
    return FieldCheck(valid=True, normalized=re.sub(r"\s+", " ", text))


def validate_amount(value: Any) -> FieldCheck:
    text = _as_text(value)
    if isinstance(value, bool) or AMOUNT_PATTERN.fullmatch(text) is None:
        return FieldCheck(valid=False, message=AMOUNT_MESSAGE, normalized=value)
    try:
        normalized = format_amount(text)
    except (InvalidOperation, ValueError):
        return FieldCheck(valid=False, message=AMOUNT_MESSAGE, normalized=value)
    return FieldCheck(valid=True, normalized=normalized)


def validate_date(value: Any, today: Optional[date] = None) -> FieldCheck:
    """
    Check a YYYY-MM-DD date.

    Any time on `today` is accepted; only dates strictly after it are
    rejected as future dates.
    """
    text = _as_text(value)
    if DATE_PATTERN.fullmatch(text) is None:
        return FieldCheck(valid=False, message=DATE_FORMAT_MESSAGE, normalized=value)
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        # Matches the pattern but is not a real day, e.g. 2024-02-30
        return FieldCheck(valid=False, message=DATE_FORMAT_MESSAGE, normalized=value)

    if parsed > (today or date.today()):
        return FieldCheck(valid=False, message=FUTURE_DATE_MESSAGE, normalized=text)
    return FieldCheck(valid=True, normalized=text)


def validate_category(value: Any) -> FieldCheck:
    text = _as_text(value)
    if CATEGORY_PATTERN.fullmatch(text) is None:
        return FieldCheck(valid=False, message=CATEGORY_MESSAGE, normalized=value)
    return FieldCheck(valid=True, normalized=text.strip())


def check_duplicate_words(value: Any) -> FieldCheck:
    text = _as_text(value)
    if DUPLICATE_WORD_PATTERN.search(text):
        return FieldCheck(
            valid=False,
            message=DUPLICATE_WORDS_MESSAGE,
            normalized=text,
            is_warning=True,
        )
    return FieldCheck(valid=True, normalized=text)


def check_money_format(value: Any) -> FieldCheck:
    text = _as_text(value)
    if CENTS_PATTERN.search(text):
        return FieldCheck(valid=True, normalized=value)
    return FieldCheck(
        valid=True,
        message=MONEY_FORMAT_MESSAGE,
        normalized=value,
        is_warning=True,
    )


def validate_field(name: str, value: Any, today: Optional[date] = None) -> FieldCheck:
    """
    Real-time check for a single form field.

    Description and amount report their advisory message when the value
    itself is acceptable, flagged with is_warning.
    """
    if name == "description":
        result = validate_description(value)
        if not result.valid:
            return result
        duplicate = check_duplicate_words(value)
        return FieldCheck(
            valid=True,
            message=duplicate.message,
            normalized=result.normalized,
            is_warning=duplicate.is_warning,
        )
    if name == "amount":
        result = validate_amount(value)
        if not result.valid:
            return result
        cents = check_money_format(value)
        return FieldCheck(
            valid=True,
            message=cents.message,
            normalized=result.normalized,
            is_warning=cents.is_warning,
        )
    if name == "category":
        return validate_category(value)
    if name == "date":
        return validate_date(value, today)
    return FieldCheck(valid=True, normalized=value)


class TransactionValidator:
    """
    Validates a complete transaction.

    The validator is stateless apart from where it gets "today" from, which
    tests can pin.
    """

    def __init__(self, today_provider: Optional[Callable[[], date]] = None):
        self._today = today_provider or date.today

    def today(self) -> date:
        return self._today()

    def validate_field(self, name: str, value: Any) -> FieldCheck:
        return validate_field(name, value, self._today())

    def validate(self, fields: Mapping[str, Any]) -> ValidationResult:
        """
        Validate all four fields and collect advisory warnings.

        Returns:
            ValidationResult whose clean_data holds the normalized values
        """
        issues = []
        clean_data = {}
        checks = {
            "description": validate_description,
            "amount": validate_amount,
            "category": validate_category,
            "date": lambda v: validate_date(v, self._today()),
        }

        for name in REQUIRED_FIELDS:
            value = fields.get(name)
            if value is None:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="missing",
                    message=f"{name.capitalize()} is required",
                    severity="error",
                ))
                continue

            result = checks[name](value)
            clean_data[name] = result.normalized
            if not result.valid:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type=(
                        "future_date"
                        if result.message == FUTURE_DATE_MESSAGE
                        else "invalid_format"
                    ),
                    message=result.message,
                    severity="error",
                ))

        description = fields.get("description")
        if description is not None:
            duplicate = check_duplicate_words(description)
            if duplicate.is_warning:
                issues.append(ValidationIssue(
                    field="description",
                    issue_type="duplicate_words",
                    message=duplicate.message,
                    severity="warning",
                ))

        amount = fields.get("amount")
        if amount is not None and "amount" not in {i.field for i in issues}:
            cents = check_money_format(amount)
            if cents.is_warning:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="money_format",
                    message=cents.message,
                    severity="warning",
                ))

        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
            clean_data=clean_data,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Summarize validation results for display next to a form."""
        if result.is_valid and not result.warnings:
            return "All fields look good."

        lines = []
        if result.has_errors:
            lines.append("Please fix the following:")
            for field, message in result.errors.items():
                lines.append(f"   • {field}: {message}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("You may want to check:")
            for message in result.warnings.values():
                lines.append(f"   • {message}")

        return "\n".join(lines)
