"""
Audit Logger

DESIGN DECISION: Every account and ledger change is logged.
This provides:
1. Traceability of who changed what and when
2. Debugging capability when a write fails
3. One place that keeps credentials out of the logs

The audit logger:
- Only logs locally (structlog); events are not persisted
- Gracefully handles failures (never breaks the caller if logging fails)
"""

import logging
import sys
from decimal import Decimal
from typing import Optional

import structlog

from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventType,
    AuditSeverity,
)


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Called once by the composition root.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    The account directory and the ledger report through this class;
    nothing here raises.
    """

    def __init__(self, logger=None):
        self._logger = logger or structlog.get_logger("expense_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was handed to the logger, False if the
        logger raised. The log_* helpers drop it: an audit failure never
        changes the result of the audited call.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # A broken log handler must not break the account or ledger call
            return False
        return True

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def log_user_registered(self, username: str) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=username,
            description=f"User registered: {username}",
        ))

    def log_registration_rejected(self, username: str, field: str, message: str) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            entity_id=username,
            description="Registration rejected",
            details={"field": field, "reason": message},
        ))

    def log_login(self, username: str, success: bool) -> None:
        if success:
            event = AuditEvent(
                event_type=AuditEventType.LOGIN_SUCCEEDED,
                entity_type="user",
                entity_id=username,
                description=f"User logged in: {username}",
            )
        else:
            event = AuditEvent(
                event_type=AuditEventType.LOGIN_FAILED,
                severity=AuditSeverity.WARNING,
                entity_type="user",
                entity_id=username,
                description="Login failed",
            )
        self.log(event)

    def log_logout(self, username: str) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.LOGGED_OUT,
            entity_type="user",
            entity_id=username,
            description=f"User logged out: {username}",
        ))

    def log_profile_updated(self, username: str, monthly_budget: Decimal) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.PROFILE_UPDATED,
            entity_type="user",
            entity_id=username,
            description="Profile updated",
            details={"monthly_budget": str(monthly_budget)},
        ))

    def log_password_changed(self, username: str, success: bool) -> None:
        self.log(AuditEvent(
            event_type=(
                AuditEventType.PASSWORD_CHANGED
                if success
                else AuditEventType.PASSWORD_CHANGE_REJECTED
            ),
            severity=AuditSeverity.INFO if success else AuditSeverity.WARNING,
            entity_type="user",
            entity_id=username,
            description="Password changed" if success else "Password change rejected",
        ))

    # -------------------------------------------------------------------------
    # Ledger
    # -------------------------------------------------------------------------

    def log_expense_added(self, username: str, expense_id: int, amount: Decimal) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=f"{username}:{expense_id}",
            description="Expense added",
            details={"amount": str(amount)},
        ))

    def log_expense_updated(self, username: str, expense_id: int) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=f"{username}:{expense_id}",
            description="Expense updated",
        ))

    def log_expense_deleted(self, username: str, expense_id: int) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=f"{username}:{expense_id}",
            description="Expense deleted",
        ))

    def log_category_budget_updated(self, category_id: int, budget_limit: Decimal) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.CATEGORY_BUDGET_UPDATED,
            entity_type="category",
            entity_id=str(category_id),
            description="Category budget limit updated",
            details={"budget_limit": str(budget_limit)},
        ))

    # -------------------------------------------------------------------------
    # Failures
    # -------------------------------------------------------------------------

    def log_storage_failure(
        self,
        operation: str,
        error_message: str,
        entity_id: Optional[str] = None,
    ) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_id=entity_id,
            description=f"Storage write failed during {operation}",
            error_message=error_message,
            is_user_action=False,
        ))
