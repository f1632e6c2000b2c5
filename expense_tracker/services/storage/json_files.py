"""
JSON File Record Store

DESIGN DECISION: Each collection lives in its own JSON file inside one data
directory (users.json, expenses.json, categories.json) because:
1. Users can open and back up their data directly
2. No database setup required
3. The flat array layout is easy to migrate later

TRADEOFFS:
- Every operation reads and rewrites a whole collection. Fine for one person.
- Writes go to a temporary file that is renamed over the target with
  os.replace. The rename is atomic on POSIX within one directory, but nothing
  is fsync'd, so a crash can still lose the latest write.
- The lock below only serializes callers inside this process. Two processes
  sharing a data directory can still lose updates.
- A file that cannot be parsed reads as an empty collection. Before that it
  is renamed to `<file>.corrupt` (replacing any earlier one), so the next
  write starts a fresh file instead of destroying the old records. A file
  that cannot be opened at all is left in place, and a following write will
  replace it.

Internally each operation loads the collection into a dict keyed by the
record's identity, mutates the dict, and writes it back as a flat array.
"""

import os
import threading
from pathlib import Path
from typing import Generic, Optional, TypeVar, Union

import structlog
from pydantic import TypeAdapter

from expense_tracker.models.records import (
    DEFAULT_CATEGORIES,
    Category,
    Expense,
    User,
)
from expense_tracker.services.storage.interface import (
    CorruptCollectionError,
    RecordStoreInterface,
    StorageReadError,
    StorageWriteError,
)

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", User, Category, Expense)


class JsonCollectionFile(Generic[RecordT]):
    """
    Low-level reader/writer for one collection file.

    Knows nothing about keys; it moves whole lists of records.
    """

    def __init__(self, path: Path, record_type: type[RecordT]):
        self.path = path
        self.name = path.stem
        self._adapter = TypeAdapter(list[record_type])

    def read(self) -> list[RecordT]:
        """
        Read every record in the file.

        A missing file is an empty collection.

        Raises:
            StorageReadError: If the file exists but cannot be parsed
        """
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StorageReadError(f"Failed to read {self.path}: {e}") from e

        if not raw.strip():
            return []
        try:
            return self._adapter.validate_json(raw)
        except ValueError as e:
            raise CorruptCollectionError(f"Invalid records in {self.path}: {e}") from e

    @property
    def corrupt_path(self) -> Path:
        return self.path.with_name(self.path.name + ".corrupt")

    def load(self) -> list[RecordT]:
        """
        Read the collection, degrading to empty on any read failure.

        A corrupt file is first moved to `corrupt_path`, so the next write
        cannot overwrite the only copy of its contents.
        """
        try:
            return self.read()
        except StorageReadError as e:
            logger.warning(
                "collection_load_failed",
                collection=self.name,
                path=str(self.path),
                error=str(e),
            )
            if isinstance(e, CorruptCollectionError):
                self._set_aside()
            return []

    def _set_aside(self) -> None:
        try:
            os.replace(self.path, self.corrupt_path)
        except OSError as e:
            logger.error(
                "collection_set_aside_failed",
                collection=self.name,
                path=str(self.path),
                error=str(e),
            )
            return
        logger.warning(
            "collection_set_aside",
            collection=self.name,
            path=str(self.corrupt_path),
        )

    def write(self, records: list[RecordT]) -> None:
        """
        Replace the file contents with `records`.

        Raises:
            StorageWriteError: If the file cannot be written
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            data = self._adapter.dump_json(records, by_alias=True, indent=2)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(
                "collection_save_failed",
                collection=self.name,
                path=str(self.path),
                error=str(e),
            )
            raise StorageWriteError(f"Failed to save {self.name}: {e}") from e


class JsonFileRecordStore(RecordStoreInterface):
    """
    JSON file implementation of the record store.

    One instance per data directory, owned by the application's composition
    root and passed to the account directory and the ledger.
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        users_file: str = "users.json",
        expenses_file: str = "expenses.json",
        categories_file: str = "categories.json",
    ):
        self._data_dir = Path(data_dir)
        self._users = JsonCollectionFile(self._data_dir / users_file, User)
        self._expenses = JsonCollectionFile(self._data_dir / expenses_file, Expense)
        self._categories = JsonCollectionFile(self._data_dir / categories_file, Category)
        self._lock = threading.RLock()
        self._initialized = False

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def initialize(self) -> None:
        with self._lock:
            try:
                self._data_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error("data_dir_create_failed", path=str(self._data_dir), error=str(e))
                raise StorageWriteError(f"Cannot create data directory {self._data_dir}: {e}") from e

            if not self._categories.load():
                self._categories.write(list(DEFAULT_CATEGORIES))
                logger.info("categories_seeded", count=len(DEFAULT_CATEGORIES))

            self._initialized = True

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        try:
            self.initialize()
        except StorageWriteError:
            # Already logged. Reads go on with whatever is on disk and the
            # next access tries again.
            pass

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def _user_index(self) -> dict[str, User]:
        return {user.username: user for user in self._users.load()}

    def save_user(self, user: User) -> None:
        with self._lock:
            self._ensure_initialized()
            users = self._user_index()
            # Re-inserting moves an existing user to the end, as a remove-then-append would
            users.pop(user.username, None)
            users[user.username] = user
            self._users.write(list(users.values()))

    def get_user(self, username: str) -> Optional[User]:
        with self._lock:
            self._ensure_initialized()
            return self._user_index().get(username)

    def get_all_users(self) -> list[User]:
        with self._lock:
            self._ensure_initialized()
            return self._users.load()

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def save_expense(self, expense: Expense) -> None:
        with self._lock:
            self._ensure_initialized()
            expenses = self._expenses.load()
            expenses.append(expense)
            self._expenses.write(expenses)

    def get_user_expenses(self, username: str) -> list[Expense]:
        with self._lock:
            self._ensure_initialized()
            return [e for e in self._expenses.load() if e.username == username]

    def update_expense(self, expense: Expense) -> bool:
        with self._lock:
            self._ensure_initialized()
            expenses = self._expenses.load()
            for idx, existing in enumerate(expenses):
                if existing.key == expense.key:
                    expenses[idx] = expense
                    self._expenses.write(expenses)
                    return True
            return False

    def delete_expense(self, expense_id: int, username: str) -> bool:
        with self._lock:
            self._ensure_initialized()
            expenses = self._expenses.load()
            for idx, existing in enumerate(expenses):
                if existing.id == expense_id and existing.username == username:
                    del expenses[idx]
                    self._expenses.write(expenses)
                    return True
            return False

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def _category_index(self) -> dict[int, Category]:
        return {category.id: category for category in self._categories.load()}

    def get_all_categories(self) -> list[Category]:
        with self._lock:
            self._ensure_initialized()
            return self._categories.load()

    def get_category_by_id(self, category_id: int) -> Optional[Category]:
        with self._lock:
            self._ensure_initialized()
            return self._category_index().get(category_id)

    def save_category(self, category: Category) -> None:
        with self._lock:
            self._ensure_initialized()
            categories = self._category_index()
            categories[category.id] = category
            self._categories.write(list(categories.values()))
