"""Public package interface for StudentDB."""

from studentdb.core.config import StoreConfig, load_config
from studentdb.core.models import Record
from studentdb.services.repository import StudentRepository
from studentdb.services.types import (
    Callback,
    Failure,
    FunctionCallback,
    Outcome,
    Success,
    outcome_of,
)
from studentdb.storage.errors import (
    ClosedFault,
    SchemaFault,
    StorageFault,
    StoreFault,
    StoreOpenFault,
)
from studentdb.storage.store import StudentStore, get_store

__all__ = [
    "Record",
    "StoreConfig",
    "load_config",
    "StudentStore",
    "get_store",
    "StudentRepository",
    "Callback",
    "FunctionCallback",
    "Success",
    "Failure",
    "Outcome",
    "outcome_of",
    "StoreFault",
    "StorageFault",
    "StoreOpenFault",
    "SchemaFault",
    "ClosedFault",
]
