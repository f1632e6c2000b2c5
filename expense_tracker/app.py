"""
Composition Root for the Expense Tracker

This module ties the components together for a presentation layer
(CLI, GUI) to use:
1. One record store for the process
2. One account directory holding the session
3. Ledgers and report builders bound to a username on demand

DESIGN DECISION: There is no global store. The store is created here and
passed down explicitly, so tests and embedders can swap it.
"""

from datetime import date
from typing import Callable, Optional

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.auth import AccountDirectory
from expense_tracker.config import AppSettings, Settings, get_settings
from expense_tracker.ledger import ExpenseLedger
from expense_tracker.queries import ReportBuilder
from expense_tracker.services.storage import JsonFileRecordStore, RecordStoreInterface


class AppComponents:
    """Everything a presentation layer needs, built once per process."""

    def __init__(
        self,
        store: RecordStoreInterface,
        directory: AccountDirectory,
        audit_logger: AuditLogger,
        today: Callable[[], date] = date.today,
        app_settings: Optional[AppSettings] = None,
    ):
        self.store = store
        self.directory = directory
        self.audit_logger = audit_logger
        self.app_settings = app_settings or AppSettings()
        self._today = today

    def ledger_for(self, username: str) -> ExpenseLedger:
        return ExpenseLedger(
            self.store,
            username,
            audit_logger=self.audit_logger,
            today=self._today,
        )

    def current_ledger(self) -> Optional[ExpenseLedger]:
        """A ledger for the logged-in user, or None without a session."""
        user = self.directory.get_current_user()
        if user is None:
            return None
        return self.ledger_for(user.username)

    def reports_for(self, username: str) -> ReportBuilder:
        """Report builder using the configured trend span and recent-list length."""
        return ReportBuilder(
            self.ledger_for(username),
            trend_months=self.app_settings.trend_months,
            recent_limit=self.app_settings.recent_expenses_limit,
        )


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[RecordStoreInterface] = None,
    configure_logs: bool = True,
    today: Optional[Callable[[], date]] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to get_settings()
        store: Record store to use; defaults to a JSON store on the
               configured data directory
        configure_logs: Install the structlog configuration
        today: Clock for month-relative figures; defaults to date.today

    Returns:
        AppComponents with an initialized store
    """
    settings = settings or get_settings()
    app_settings = settings.app

    if configure_logs:
        configure_logging(app_settings.log_level, app_settings.log_json)

    if store is None:
        storage_settings = settings.storage
        store = JsonFileRecordStore(
            storage_settings.data_dir,
            users_file=storage_settings.users_file,
            expenses_file=storage_settings.expenses_file,
            categories_file=storage_settings.categories_file,
        )
    store.initialize()

    audit_logger = AuditLogger()
    directory = AccountDirectory(store, audit_logger=audit_logger)

    return AppComponents(
        store=store,
        directory=directory,
        audit_logger=audit_logger,
        today=today or date.today,
        app_settings=app_settings,
    )
