"""Expense ledger package."""

from expense_tracker.ledger.ledger import ExpenseLedger, sum_amounts

__all__ = ["ExpenseLedger", "sum_amounts"]
