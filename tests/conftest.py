"""
Shared fixtures.

No test touches a real data directory: JSON stores live under tmp_path.
"""

from datetime import date

import pytest

from expense_tracker.auth import AccountDirectory
from expense_tracker.ledger import ExpenseLedger
from expense_tracker.services.storage import InMemoryRecordStore, JsonFileRecordStore

FIXED_TODAY = date(2024, 3, 15)


@pytest.fixture
def fixed_today():
    """Clock pinned to 15 March 2024."""
    return lambda: FIXED_TODAY


@pytest.fixture
def json_store(tmp_path):
    store = JsonFileRecordStore(tmp_path / "data")
    store.initialize()
    return store


@pytest.fixture
def memory_store():
    store = InMemoryRecordStore()
    store.initialize()
    return store


@pytest.fixture(params=["json", "memory"])
def store(request, tmp_path):
    """Runs a test against both store implementations."""
    if request.param == "json":
        store = JsonFileRecordStore(tmp_path / "data")
    else:
        store = InMemoryRecordStore()
    store.initialize()
    return store


@pytest.fixture
def directory(json_store):
    return AccountDirectory(json_store)


@pytest.fixture
def alice_ledger(json_store, fixed_today):
    return ExpenseLedger(json_store, "alice", today=fixed_today)


@pytest.fixture
def bob_ledger(json_store, fixed_today):
    return ExpenseLedger(json_store, "bob", today=fixed_today)
