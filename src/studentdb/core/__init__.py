"""Domain models, configuration and logging setup for StudentDB."""

from studentdb.core.config import StoreConfig, get_data_directory, load_config
from studentdb.core.models import Record

__all__ = [
    "Record",
    "StoreConfig",
    "get_data_directory",
    "load_config",
]
