"""SQLite persistence for student records."""

from studentdb.storage.errors import (
    ClosedFault,
    SchemaFault,
    StorageFault,
    StoreFault,
    StoreOpenFault,
)
from studentdb.storage.store import StudentStore, get_store

__all__ = [
    "StudentStore",
    "get_store",
    "StoreFault",
    "StorageFault",
    "StoreOpenFault",
    "SchemaFault",
    "ClosedFault",
]
