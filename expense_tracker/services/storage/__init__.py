"""
Storage Services Package

Provides the abstract record store interface and its implementations.
The JSON file store is the default backend, but it is designed to be swappable.
"""

from expense_tracker.services.storage.interface import (
    CorruptCollectionError,
    RecordStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.json_files import (
    JsonCollectionFile,
    JsonFileRecordStore,
)
from expense_tracker.services.storage.memory import InMemoryRecordStore

__all__ = [
    # Interfaces
    "RecordStoreInterface",
    # Exceptions
    "CorruptCollectionError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryRecordStore",
    "JsonCollectionFile",
    "JsonFileRecordStore",
]
