"""
Two-Stage Account Validation

STAGE 1 - FORMAT VALIDATION:
- Username shape (letters, digits, underscore; 3-20 characters)
- Email shape (permissive local@domain)
- Password length

STAGE 2 - UNIQUENESS:
- Username must not already be registered
- Needs the record store, so it only runs when stage 1 passed

IMPORTANT: Validation NEVER silently fixes input.
It reports issues for the caller to show.
"""

import re
from typing import Optional

from expense_tracker.models.validation import ValidationIssue, ValidationResult
from expense_tracker.services.storage import RecordStoreInterface

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,20}$")
EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@(.+)$")
MIN_PASSWORD_LENGTH = 6


class ValidationError(Exception):
    """
    Registration input was rejected.

    `field` names the first offending field; `issues` carries all of them.
    """

    def __init__(
        self,
        field: str,
        message: str,
        issues: Optional[list[ValidationIssue]] = None,
    ):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
        self.issues = issues or []

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationError":
        first = result.first_error
        if first is None:
            raise ValueError("ValidationResult has no errors")
        return cls(first.field, first.message, list(result.issues))


class AccountValidator:
    """
    Validates registration input through a two-stage pipeline.

    Stage 1: Format validation (can run without storage)
    Stage 2: Uniqueness (needs storage)
    """

    def __init__(self, store: Optional[RecordStoreInterface] = None):
        """
        Args:
            store: Record store for the duplicate-username check.
                   If None, stage 2 is skipped.
        """
        self._store = store

    def validate_registration(
        self,
        username: str,
        password: str,
        email: str,
    ) -> ValidationResult:
        format_issues = self._validate_format(username, password, email)
        format_valid = not any(i.severity == "error" for i in format_issues)

        unique_issues = []
        if format_valid:
            unique_issues = self._validate_uniqueness(username)

        return ValidationResult(
            format_valid=format_valid,
            unique=format_valid and not unique_issues,
            issues=format_issues + unique_issues,
        )

    def _validate_format(
        self,
        username: str,
        password: str,
        email: str,
    ) -> list[ValidationIssue]:
        issues = []

        if not is_valid_username(username):
            issues.append(ValidationIssue(
                field="username",
                issue_type="invalid_format",
                message="Invalid username",
                suggested_fix="Use 3-20 letters, digits or underscores",
            ))

        if not is_valid_email(email):
            issues.append(ValidationIssue(
                field="email",
                issue_type="invalid_format",
                message="Invalid email",
                suggested_fix="Use the form name@domain",
            ))

        if password is None or len(password) < MIN_PASSWORD_LENGTH:
            issues.append(ValidationIssue(
                field="password",
                issue_type="too_short",
                message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            ))

        return issues

    def _validate_uniqueness(self, username: str) -> list[ValidationIssue]:
        if self._store is None:
            return []

        if self._store.user_exists(username):
            return [ValidationIssue(
                field="username",
                issue_type="duplicate",
                message="Username already exists",
                suggested_fix="Choose a different username",
            )]
        return []


def is_valid_username(username: Optional[str]) -> bool:
    return username is not None and USERNAME_PATTERN.fullmatch(username) is not None


def is_valid_email(email: Optional[str]) -> bool:
    return email is not None and EMAIL_PATTERN.fullmatch(email) is not None
