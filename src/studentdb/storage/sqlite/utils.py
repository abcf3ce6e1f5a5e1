"""
Utility helpers for the SQLite-backed student store.

Connection opening, pragmas, cursor scoping, checked column access and
close-time housekeeping.
"""

from __future__ import annotations

import contextlib
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, cast

from studentdb.storage.errors import SchemaFault

__all__ = [
    "open_db",
    "set_pragmas",
    "apply_default_pragmas",
    "db_cursor",
    "transaction",
    "require_column",
    "is_schema_error",
    "checkpoint_full",
    "optimize",
]

DEFAULT_BUSY_TIMEOUT_MS = 10000


# ---- Connections ------------------------------------------------------------


def open_db(
    path: str,
    *,
    mode: str = "rwc",
    apply_pragmas: bool = False,
    pragmas: Mapping[str, object] | None = None,
) -> sqlite3.Connection:
    """
    Open a SQLite database in autocommit mode, shareable across threads.

    mode: "ro" (read-only), "rw", "rwc" (create if needed). Default: "rwc".
    Every statement commits on its own; no implicit transactions are opened.
    """
    if path == ":memory:":
        conn = sqlite3.connect(":memory:", check_same_thread=False, isolation_level=None)
    else:
        uri = f"file:{path}?mode={mode}"
        conn = sqlite3.connect(uri, uri=True, check_same_thread=False, isolation_level=None)
    conn.row_factory = sqlite3.Row
    if apply_pragmas:
        set_pragmas(conn, pragmas or {})
    return conn


def _to_int(value: object) -> int:
    return int(cast(Any, value))


def set_pragmas(conn: sqlite3.Connection, opts: Mapping[str, object]) -> None:
    """Apply selected pragmas.

    Only keys present in ``opts`` are applied. Supported keys include
    ``foreign_keys``, ``journal_mode``, ``synchronous``, ``temp_store``,
    and ``busy_timeout_ms``.
    """

    norm = {str(key).lower(): value for key, value in opts.items()}
    for key, value in norm.items():
        if key == "foreign_keys":
            conn.execute(f"PRAGMA foreign_keys={'ON' if value else 'OFF'}")
        elif key == "journal_mode":
            conn.execute(f"PRAGMA journal_mode={value}")
        elif key == "synchronous":
            conn.execute(f"PRAGMA synchronous={value}")
        elif key == "temp_store":
            conn.execute(f"PRAGMA temp_store={value}")
        elif key == "busy_timeout_ms":
            conn.execute(f"PRAGMA busy_timeout={_to_int(value)}")


def apply_default_pragmas(conn: sqlite3.Connection, *, in_memory: bool = False) -> None:
    """
    Apply the writer-connection pragmas.

    WAL lets per-operation reader connections run alongside the single writer.
    In-memory databases have no journal file to switch.
    """
    opts: dict[str, object] = {
        "foreign_keys": True,
        "synchronous": "NORMAL",
        "temp_store": "MEMORY",
        "busy_timeout_ms": DEFAULT_BUSY_TIMEOUT_MS,
    }
    if not in_memory:
        opts["journal_mode"] = "WAL"
    set_pragmas(conn, opts)


# ---- Cursors / Transactions / Columns ---------------------------------------


@contextmanager
def db_cursor(conn: sqlite3.Connection) -> Iterator[sqlite3.Cursor]:
    """Context manager that closes the cursor after use."""

    cur = conn.cursor()
    try:
        yield cur
    finally:
        cur.close()


@contextmanager
def transaction(
    conn: sqlite3.Connection,
    *,
    begin: str = "BEGIN IMMEDIATE",
) -> Iterator[sqlite3.Connection]:
    """
    Transaction wrapper that commits on success and rolls back on error.
    Uses BEGIN IMMEDIATE by default to take the write lock up front.
    """

    conn.execute(begin)
    try:
        yield conn
        conn.execute("COMMIT")
    except BaseException:
        conn.execute("ROLLBACK")
        raise


def require_column(row: sqlite3.Row, column: str) -> Any:
    """Return ``row[column]``; raise :class:`SchemaFault` if the column is absent."""

    if column not in row.keys():
        raise SchemaFault(f"expected column {column!r} missing from result row")
    return row[column]


_SCHEMA_ERROR_MARKERS = ("no such table", "no such column", "has no column named")


def is_schema_error(exc: sqlite3.Error) -> bool:
    """Return True when ``exc`` reports a missing table or column."""

    message = str(exc).lower()
    return any(marker in message for marker in _SCHEMA_ERROR_MARKERS)


# ---- Housekeeping -----------------------------------------------------------


def checkpoint_full(conn: sqlite3.Connection) -> None:
    """Request a FULL WAL checkpoint, ignoring unsupported configurations."""

    with contextlib.suppress(sqlite3.Error):
        conn.execute("PRAGMA wal_checkpoint(FULL)")


def optimize(conn: sqlite3.Connection) -> None:
    """Run ``PRAGMA optimize`` when available."""

    with contextlib.suppress(sqlite3.Error):
        conn.execute("PRAGMA optimize")
