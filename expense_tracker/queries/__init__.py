"""Report queries package."""

from expense_tracker.queries.reports import ReportBuilder, shift_month

__all__ = ["ReportBuilder", "shift_month"]
