"""
Expense Ledger

Per-user expense CRUD and every read-side aggregation the reports need.

GUARANTEES:
- A ledger only ever reads or writes its own user's expenses
- New expense ids are max(existing ids of this user) + 1, starting at 1.
  Ids are NOT unique across users; use Expense.key outside the ledger.
- Totals are exact Decimal sums

The ledger does not check that amounts are positive. Callers validate user
input before calling in.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Union

from expense_tracker.audit import AuditLogger
from expense_tracker.models.records import (
    Category,
    Expense,
    PaymentMethod,
    to_decimal,
)
from expense_tracker.services.storage import RecordStoreInterface, StorageError

Amount = Union[Decimal, int, float, str]

ZERO = Decimal("0")


def sum_amounts(expenses: list[Expense]) -> Decimal:
    return sum((e.amount for e in expenses), ZERO)


class ExpenseLedger:
    """
    Expense operations bound to one username for the ledger's lifetime.

    `today` is the clock used for anything relative to the current month.
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        username: str,
        audit_logger: Optional[AuditLogger] = None,
        today: Callable[[], date] = date.today,
    ):
        self._store = store
        self._username = username
        self._audit = audit_logger or AuditLogger()
        self._today = today

    @property
    def username(self) -> str:
        return self._username

    @property
    def today(self) -> Callable[[], date]:
        return self._today

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def add_expense(
        self,
        title: str,
        amount: Amount,
        category_id: int,
        expense_date: date,
        description: Optional[str] = None,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        is_recurring: bool = False,
    ) -> bool:
        """
        Record a new expense.

        Returns:
            False if the category does not exist or the write failed
        """
        if self._store.get_category_by_id(category_id) is None:
            return False

        expense = Expense(
            id=self._next_id(),
            username=self._username,
            title=title,
            description=description,
            amount=to_decimal(amount),
            category_id=category_id,
            expense_date=expense_date,
            payment_method=payment_method,
            is_recurring=is_recurring,
        )
        try:
            self._store.save_expense(expense)
        except StorageError as e:
            self._audit.log_storage_failure("add_expense", str(e), entity_id=self._username)
            return False

        self._audit.log_expense_added(self._username, expense.id, expense.amount)
        return True

    def _next_id(self) -> int:
        return max((e.id for e in self.get_expenses()), default=0) + 1

    def update_expense(
        self,
        expense_id: int,
        title: str,
        amount: Amount,
        category_id: int,
        expense_date: date,
        description: Optional[str] = None,
    ) -> bool:
        """
        Overwrite an expense's editable fields and persist the result.

        Payment method, recurrence flag and creation time are kept.

        Returns:
            False if the expense or the new category does not exist,
            or the write failed
        """
        existing = self.get_expense(expense_id)
        if existing is None:
            return False
        if self._store.get_category_by_id(category_id) is None:
            return False

        updated = existing.model_copy(update={
            "title": title,
            "amount": to_decimal(amount),
            "category_id": category_id,
            "expense_date": expense_date,
            "description": description,
        })
        try:
            if not self._store.update_expense(updated):
                return False
        except StorageError as e:
            self._audit.log_storage_failure(
                "update_expense", str(e), entity_id=f"{self._username}:{expense_id}"
            )
            return False

        self._audit.log_expense_updated(self._username, expense_id)
        return True

    def delete_expense(self, expense_id: int) -> bool:
        try:
            deleted = self._store.delete_expense(expense_id, self._username)
        except StorageError as e:
            self._audit.log_storage_failure(
                "delete_expense", str(e), entity_id=f"{self._username}:{expense_id}"
            )
            return False

        if deleted:
            self._audit.log_expense_deleted(self._username, expense_id)
        return deleted

    def set_category_budget_limit(self, category_id: int, budget_limit: Amount) -> bool:
        """
        Persist a new budget limit on a shared category.

        Categories are shared, so this changes the limit for every user.
        """
        limit = to_decimal(budget_limit)
        if limit < 0:
            return False

        category = self._store.get_category_by_id(category_id)
        if category is None:
            return False

        try:
            self._store.save_category(category.model_copy(update={"budget_limit": limit}))
        except StorageError as e:
            self._audit.log_storage_failure(
                "set_category_budget_limit", str(e), entity_id=str(category_id)
            )
            return False

        self._audit.log_category_budget_updated(category_id, limit)
        return True

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_expenses(self) -> list[Expense]:
        """All of this user's expenses in storage order."""
        return self._store.get_user_expenses(self._username)

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        return next((e for e in self.get_expenses() if e.id == expense_id), None)

    def get_expenses_by_category(self, category_id: int) -> list[Expense]:
        return [e for e in self.get_expenses() if e.category_id == category_id]

    def get_expenses_by_month(self, year: int, month: int) -> list[Expense]:
        return [
            e for e in self.get_expenses()
            if e.expense_date.year == year and e.expense_date.month == month
        ]

    def get_all_categories(self) -> list[Category]:
        return self._store.get_all_categories()

    # -------------------------------------------------------------------------
    # Aggregations
    # -------------------------------------------------------------------------

    def get_total_expenses(self) -> Decimal:
        return sum_amounts(self.get_expenses())

    def get_monthly_total(self, year: int, month: int) -> Decimal:
        return sum_amounts(self.get_expenses_by_month(year, month))

    def get_category_wise_expenses(self) -> dict[Category, Decimal]:
        """
        Sum amounts per resolved category.

        Categories without expenses are absent. Expenses whose category no
        longer exists are left out.
        """
        categories = {c.id: c for c in self._store.get_all_categories()}
        totals: dict[Category, Decimal] = defaultdict(lambda: ZERO)

        for expense in self.get_expenses():
            category = categories.get(expense.category_id)
            if category is None:
                continue
            totals[category] += expense.amount

        return dict(totals)

    def get_daily_expenses(self, year: int, month: int) -> dict[str, Decimal]:
        """Totals per `YYYY-MM-DD` within one month, ascending by date."""
        totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for expense in self.get_expenses_by_month(year, month):
            totals[expense.date_key] += expense.amount

        return {day: totals[day] for day in sorted(totals)}

    def get_recent_expenses(self, limit: int) -> list[Expense]:
        """Newest first; same-day expenses are ordered by id, highest first."""
        if limit <= 0:
            return []
        expenses = sorted(
            self.get_expenses(),
            key=lambda e: (e.expense_date, e.id),
            reverse=True,
        )
        return expenses[:limit]

    def get_budget_utilization(self, monthly_budget: Amount) -> float:
        """
        Current calendar month's spend as a percentage of `monthly_budget`.

        Returns 0.0 when the budget is zero or negative.
        """
        budget = to_decimal(monthly_budget)
        if budget <= 0:
            return 0.0

        today = self._today()
        total = self.get_monthly_total(today.year, today.month)
        return float(total / budget * 100)
