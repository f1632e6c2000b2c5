"""
In-Memory Record Store

Same contract as the JSON file store without touching disk. Records are
copied on the way in and out so callers cannot mutate stored state by
holding on to a returned object.
"""

from typing import Optional

from expense_tracker.models.records import (
    DEFAULT_CATEGORIES,
    Category,
    Expense,
    User,
)
from expense_tracker.services.storage.interface import RecordStoreInterface


class InMemoryRecordStore(RecordStoreInterface):
    """Record store backed by plain Python containers."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._expenses: list[Expense] = []
        self._categories: dict[int, Category] = {}
        self._initialized = False

    def initialize(self) -> None:
        if not self._categories:
            self._categories = {c.id: c for c in DEFAULT_CATEGORIES}
        self._initialized = True

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    def save_user(self, user: User) -> None:
        self._ensure_initialized()
        self._users.pop(user.username, None)
        self._users[user.username] = user.model_copy(deep=True)

    def get_user(self, username: str) -> Optional[User]:
        self._ensure_initialized()
        user = self._users.get(username)
        return user.model_copy(deep=True) if user else None

    def get_all_users(self) -> list[User]:
        self._ensure_initialized()
        return [u.model_copy(deep=True) for u in self._users.values()]

    def save_expense(self, expense: Expense) -> None:
        self._ensure_initialized()
        self._expenses.append(expense.model_copy(deep=True))

    def get_user_expenses(self, username: str) -> list[Expense]:
        self._ensure_initialized()
        return [
            e.model_copy(deep=True)
            for e in self._expenses
            if e.username == username
        ]

    def update_expense(self, expense: Expense) -> bool:
        self._ensure_initialized()
        for idx, existing in enumerate(self._expenses):
            if existing.key == expense.key:
                self._expenses[idx] = expense.model_copy(deep=True)
                return True
        return False

    def delete_expense(self, expense_id: int, username: str) -> bool:
        self._ensure_initialized()
        for idx, existing in enumerate(self._expenses):
            if existing.id == expense_id and existing.username == username:
                del self._expenses[idx]
                return True
        return False

    # Categories are frozen, no copies needed
    def get_all_categories(self) -> list[Category]:
        self._ensure_initialized()
        return list(self._categories.values())

    def get_category_by_id(self, category_id: int) -> Optional[Category]:
        self._ensure_initialized()
        return self._categories.get(category_id)

    def save_category(self, category: Category) -> None:
        self._ensure_initialized()
        self._categories[category.id] = category
