"""Fault taxonomy for the student store and its asynchronous repository."""

from __future__ import annotations

__all__ = [
    "StoreFault",
    "StorageFault",
    "StoreOpenFault",
    "SchemaFault",
    "ClosedFault",
]


class StoreFault(RuntimeError):
    """Base class for every fault surfaced through a callback's error branch."""


class StorageFault(StoreFault):
    """Raised when the SQLite engine rejects an operation (constraint, I/O, corruption)."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")


class StoreOpenFault(StorageFault):
    """Raised when the shared store handle cannot be opened at all."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__("open", f"{path}: {message}")


class SchemaFault(StoreFault):
    """Raised when an expected table or column is absent, or the schema version is unusable."""


class ClosedFault(StoreFault):
    """Raised when work is submitted after shutdown or a closed store is used."""
