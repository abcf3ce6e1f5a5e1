"""
SQLite-backed student store.

:class:`StudentStore` owns the single writer connection to the database file
and executes each CRUD operation synchronously. Writes are serialized on an
internal lock (single-writer); file-backed reads open their own short-lived
connection so they run alongside the writer under WAL (multi-reader). In-memory
stores route every statement through the writer connection.

One instance per process is handed out by :meth:`StudentStore.get_instance`;
:meth:`StudentStore.open` builds an independent handle for explicit injection.

Usage:
    store = StudentStore.get_instance("/data/dir")
    new_id = store.create(Record(name="Alice"))
    store.read_all()
    StudentStore.reset_instance()
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import ClassVar

from pydantic import ValidationError

from studentdb.core.config import MEMORY_DB, StoreConfig, load_config
from studentdb.core.models import Record
from studentdb.storage.errors import (
    ClosedFault,
    SchemaFault,
    StorageFault,
    StoreFault,
    StoreOpenFault,
)
from studentdb.storage.sqlite.schema import COLUMN_ID, COLUMN_NAME, TABLE_STUDENTS, ensure_schema
from studentdb.storage.sqlite.utils import (
    DEFAULT_BUSY_TIMEOUT_MS,
    apply_default_pragmas,
    checkpoint_full,
    db_cursor,
    is_schema_error,
    open_db,
    optimize,
    require_column,
    set_pragmas,
)

log = logging.getLogger(__name__)

__all__ = ["StudentStore", "get_store"]


def _translate(operation: str, exc: sqlite3.Error) -> StoreFault:
    if is_schema_error(exc):
        return SchemaFault(f"{operation}: {exc}")
    return StorageFault(operation, str(exc))


def _to_record(row: sqlite3.Row) -> Record:
    record_id = require_column(row, COLUMN_ID)
    name = require_column(row, COLUMN_NAME)
    try:
        return Record(id=record_id, name=name)
    except ValidationError as exc:
        raise StorageFault("read", f"row {record_id} is not a valid record: {exc}") from exc


class StudentStore:
    """Process-wide handle to the ``students`` table."""

    _instance: ClassVar[StudentStore | None] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, path: str | os.PathLike[str], *, config: StoreConfig | None = None) -> None:
        self.config = config if config is not None else load_config()
        self.path = MEMORY_DB if str(path) == MEMORY_DB else Path(path).as_posix()
        self._lock = threading.RLock()
        self._closed = False

        try:
            if not self.in_memory:
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            conn = open_db(self.path)
        except (OSError, sqlite3.Error) as exc:
            raise StoreOpenFault(self.path, str(exc)) from exc

        try:
            apply_default_pragmas(conn, in_memory=self.in_memory)
            self.previous_version = ensure_schema(conn, schema_version=self.config.version)
        except SchemaFault:
            conn.close()
            raise
        except sqlite3.Error as exc:
            conn.close()
            raise StoreOpenFault(self.path, str(exc)) from exc

        self._conn = conn
        log.info(f"Opened student store at {self.path} (schema v{self.config.version})")

    # ------------------------------------------------------------------ #
    # Construction                                                       #
    # ------------------------------------------------------------------ #
    @classmethod
    def open(
        cls,
        location: str | os.PathLike[str] | None = None,
        config: StoreConfig | None = None,
    ) -> StudentStore:
        """Open an independent handle under ``location`` (a directory)."""

        cfg = config if config is not None else load_config()
        return cls(cfg.database_path(location), config=cfg)

    @classmethod
    def get_instance(
        cls,
        location: str | os.PathLike[str] | None = None,
        config: StoreConfig | None = None,
    ) -> StudentStore:
        """Return the process-wide store, opening it on first use.

        Concurrent first callers observe exactly one construction. A failed
        construction caches nothing, so a later call can succeed once the
        cause is fixed.
        """

        with cls._instance_lock:
            instance = cls._instance
            if instance is None or instance.closed:
                instance = cls.open(location, config)
                cls._instance = instance
            elif location is not None or config is not None:
                cfg = config if config is not None else instance.config
                requested = cfg.database_path(location)
                if requested != instance.path:
                    log.warning(
                        f"Store already open at {instance.path}; ignoring request for {requested}"
                    )
            return instance

    @classmethod
    def reset_instance(cls) -> None:
        """Close and forget the process-wide store."""

        with cls._instance_lock:
            instance = cls._instance
            cls._instance = None
        if instance is not None:
            instance.close()

    # ------------------------------------------------------------------ #
    # State                                                              #
    # ------------------------------------------------------------------ #
    @property
    def in_memory(self) -> bool:
        return self.path == MEMORY_DB

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise ClosedFault(f"{operation}: store at {self.path} is closed")

    @contextmanager
    def _writing(self, operation: str) -> Iterator[sqlite3.Cursor]:
        with self._lock:
            self._check_open(operation)
            try:
                with db_cursor(self._conn) as cur:
                    yield cur
            except sqlite3.Error as exc:
                raise _translate(operation, exc) from exc

    @contextmanager
    def _reading(self, operation: str) -> Iterator[sqlite3.Cursor]:
        self._check_open(operation)
        if self.in_memory:
            with self._writing(operation) as cur:
                yield cur
            return

        conn: sqlite3.Connection | None = None
        try:
            conn = open_db(self.path, mode="rw")
            set_pragmas(conn, {"busy_timeout_ms": DEFAULT_BUSY_TIMEOUT_MS})
            with db_cursor(conn) as cur:
                yield cur
        except sqlite3.Error as exc:
            raise _translate(operation, exc) from exc
        finally:
            if conn is not None:
                conn.close()

    # ------------------------------------------------------------------ #
    # CRUD                                                               #
    # ------------------------------------------------------------------ #
    def create(self, record: Record) -> int:
        """Insert ``record.name`` and return the engine-assigned id."""

        with self._writing("create") as cur:
            cur.execute(f"INSERT INTO {TABLE_STUDENTS}({COLUMN_NAME}) VALUES (?)", (record.name,))
            new_id = cur.lastrowid
        if new_id is None:
            raise StorageFault("create", "engine did not report a row id")
        log.debug(f"Inserted student {new_id}")
        return int(new_id)

    def read_by_id(self, record_id: int) -> Record | None:
        with self._reading("read_by_id") as cur:
            cur.execute(f"SELECT * FROM {TABLE_STUDENTS} WHERE {COLUMN_ID} = ?", (record_id,))
            row = cur.fetchone()
            return None if row is None else _to_record(row)

    def read_all(self) -> list[Record]:
        """Return every student ordered by name."""

        with self._reading("read_all") as cur:
            cur.execute(f"SELECT * FROM {TABLE_STUDENTS} ORDER BY {COLUMN_NAME}, {COLUMN_ID}")
            return [_to_record(row) for row in cur.fetchall()]

    def update(self, record: Record) -> int:
        """Overwrite the name of the row matching ``record.id``; return rows affected."""

        with self._writing("update") as cur:
            cur.execute(
                f"UPDATE {TABLE_STUDENTS} SET {COLUMN_NAME} = ? WHERE {COLUMN_ID} = ?",
                (record.name, record.id),
            )
            affected = cur.rowcount
        log.debug(f"Updated student {record.id}: {affected} row(s)")
        return max(int(affected), 0)

    def delete(self, record_id: int) -> bool:
        with self._writing("delete") as cur:
            cur.execute(f"DELETE FROM {TABLE_STUDENTS} WHERE {COLUMN_ID} = ?", (record_id,))
            deleted = cur.rowcount
        log.debug(f"Deleted student {record_id}: {deleted} row(s)")
        return deleted > 0

    def count(self) -> int:
        with self._reading("count") as cur:
            cur.execute(f"SELECT COUNT(*) FROM {TABLE_STUDENTS}")
            row = cur.fetchone()
        return int(row[0]) if row is not None else 0

    # ------------------------------------------------------------------ #
    # Lifecycle                                                          #
    # ------------------------------------------------------------------ #
    def close(self) -> None:
        """Checkpoint and close the writer connection. Safe to call twice."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            if not self.in_memory:
                optimize(self._conn)
                checkpoint_full(self._conn)
            self._conn.close()
        log.info(f"Closed student store at {self.path}")

    def __enter__(self) -> StudentStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def get_store(
    location: str | os.PathLike[str] | None = None,
    config: StoreConfig | None = None,
) -> StudentStore:
    """Return the process-wide :class:`StudentStore`."""

    return StudentStore.get_instance(location, config)
