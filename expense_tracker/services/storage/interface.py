"""
Abstract Record Store Interface

DESIGN DECISION: We define an abstract interface for the record store.
This allows us to:
1. Swap the JSON files for a real database later
2. Use in-memory storage for testing
3. Keep the account and ledger logic decoupled from file handling

The interface is intentionally simple - we're not building an ORM.
Each collection is loaded and saved as a whole.

FAILURE SEMANTICS:
- Reads never raise. A collection that cannot be read is treated as empty
  and the failure is logged.
- Writes raise StorageWriteError. Nothing is rolled back and nothing is
  retried.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_tracker.models.records import Category, Expense, User


class RecordStoreInterface(ABC):
    """
    Abstract interface for the users, categories and expenses collections.

    Any storage implementation must implement these methods. Implementations
    initialize themselves lazily on first access.
    """

    @abstractmethod
    def initialize(self) -> None:
        """
        Prepare the storage location and seed default categories.

        Idempotent. Categories are seeded if and only if the category
        collection is empty.
        """
        pass

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    @abstractmethod
    def save_user(self, user: User) -> None:
        """
        Upsert a user by username.

        Raises:
            StorageWriteError: If the collection cannot be written
        """
        pass

    @abstractmethod
    def get_user(self, username: str) -> Optional[User]:
        """Exact-match lookup by username."""
        pass

    @abstractmethod
    def get_all_users(self) -> list[User]:
        pass

    def user_exists(self, username: str) -> bool:
        return self.get_user(username) is not None

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    @abstractmethod
    def save_expense(self, expense: Expense) -> None:
        """
        Append an expense.

        Does not upsert: the caller guarantees (username, id) is new.

        Raises:
            StorageWriteError: If the collection cannot be written
        """
        pass

    @abstractmethod
    def get_user_expenses(self, username: str) -> list[Expense]:
        """All expenses of one user, in storage order."""
        pass

    @abstractmethod
    def update_expense(self, expense: Expense) -> bool:
        """
        Replace the stored expense with the same (username, id).

        Returns:
            True if a record was replaced, False if none matched

        Raises:
            StorageWriteError: If the collection cannot be written
        """
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int, username: str) -> bool:
        """
        Remove the first expense matching both id and username.

        Returns:
            True if a record was removed
        """
        pass

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_all_categories(self) -> list[Category]:
        pass

    @abstractmethod
    def get_category_by_id(self, category_id: int) -> Optional[Category]:
        pass

    @abstractmethod
    def save_category(self, category: Category) -> None:
        """
        Upsert a category by id.

        Raises:
            StorageWriteError: If the collection cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """A collection could not be read. Loads degrade to empty instead of raising this."""
    pass


class CorruptCollectionError(StorageReadError):
    """A collection file exists but does not hold valid records."""
    pass


class StorageWriteError(StorageError):
    """A collection could not be written."""
    pass
