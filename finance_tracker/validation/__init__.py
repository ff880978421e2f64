"""Transaction validation package."""

from finance_tracker.validation.validator import (
    TransactionValidationError,
    TransactionValidator,
    check_duplicate_words,
    check_money_format,
    validate_amount,
    validate_category,
    validate_date,
    validate_description,
    validate_field,
)

__all__ = [
    "TransactionValidationError",
    "TransactionValidator",
    "check_duplicate_words",
    "check_money_format",
    "validate_amount",
    "validate_category",
    "validate_date",
    "validate_description",
    "validate_field",
]
