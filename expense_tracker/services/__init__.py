"""Services package."""

from expense_tracker.services.storage import (
    InMemoryRecordStore,
    JsonCollectionFile,
    JsonFileRecordStore,
    RecordStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "InMemoryRecordStore",
    "JsonCollectionFile",
    "JsonFileRecordStore",
    "RecordStoreInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
