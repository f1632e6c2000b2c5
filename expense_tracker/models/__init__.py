"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the record store must conform to these schemas.
"""

from expense_tracker.models.records import (
    DEFAULT_CATEGORIES,
    Category,
    Expense,
    PaymentMethod,
    User,
    to_decimal,
)
from expense_tracker.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventType,
    AuditSeverity,
)
from expense_tracker.models.report import (
    CategoryShare,
    DailySummary,
    MonthlySummary,
    MonthlyTrend,
    MonthTrendPoint,
)

__all__ = [
    # Record models
    "DEFAULT_CATEGORIES",
    "Category",
    "Expense",
    "PaymentMethod",
    "User",
    "to_decimal",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventType",
    "AuditSeverity",
    # Report models
    "CategoryShare",
    "DailySummary",
    "MonthlySummary",
    "MonthlyTrend",
    "MonthTrendPoint",
]
