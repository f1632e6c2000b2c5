"""Account and session package."""

from expense_tracker.auth.directory import AccountDirectory

__all__ = ["AccountDirectory"]
