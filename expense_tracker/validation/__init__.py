"""Account validation package."""

from expense_tracker.validation.validator import (
    AccountValidator,
    ValidationError,
    is_valid_email,
    is_valid_username,
)

__all__ = [
    "AccountValidator",
    "ValidationError",
    "is_valid_email",
    "is_valid_username",
]
