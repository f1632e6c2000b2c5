"""
Expense Tracker - Source Package

Persistence and aggregation core of a personal finance tracker:
users, shared categories, and dated per-user expenses, with the
totals and breakdowns the reports are built from.

DESIGN PRINCIPLES:
1. One user's data never leaks into another user's figures
2. Reads degrade, writes report
3. Storage layer is swappable
4. Money is Decimal
"""

__version__ = "1.0.0"
