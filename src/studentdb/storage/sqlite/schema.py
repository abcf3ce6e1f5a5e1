"""
Schema provisioning for the ``students`` table, gated on ``PRAGMA user_version``.
"""

from __future__ import annotations

import logging
import sqlite3

from studentdb.storage.errors import SchemaFault
from studentdb.storage.sqlite.utils import transaction

log = logging.getLogger(__name__)

__all__ = [
    "TABLE_STUDENTS",
    "COLUMN_ID",
    "COLUMN_NAME",
    "ensure_schema",
    "create_tables",
    "upgrade",
    "get_user_version",
    "set_user_version",
]

TABLE_STUDENTS = "students"
COLUMN_ID = "id"
COLUMN_NAME = "name"


def create_tables(conn: sqlite3.Connection) -> None:
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {TABLE_STUDENTS} (
            {COLUMN_ID} INTEGER PRIMARY KEY AUTOINCREMENT,
            {COLUMN_NAME} TEXT NOT NULL
        )
        """
    )


def upgrade(conn: sqlite3.Connection, old_version: int, new_version: int) -> None:
    """Drop and recreate the table.

    Lossy: every stored row is discarded. Acceptable only while the table holds
    transient data that can be re-entered.
    """
    log.warning(
        f"Upgrading schema from v{old_version} to v{new_version}; "
        f"existing {TABLE_STUDENTS} rows are discarded"
    )
    conn.execute(f"DROP TABLE IF EXISTS {TABLE_STUDENTS}")
    create_tables(conn)


def ensure_schema(conn: sqlite3.Connection, *, schema_version: int) -> int:
    """
    Bring the database to ``schema_version`` and return the version found on disk.

    A fresh file (version 0) is provisioned, an older version is upgraded, a
    newer version is refused with :class:`SchemaFault`.
    """

    current = get_user_version(conn)
    if current > schema_version:
        raise SchemaFault(
            f"database schema v{current} is newer than supported v{schema_version}; "
            "downgrade is not supported"
        )

    with transaction(conn):
        if current == 0:
            log.info(f"Creating {TABLE_STUDENTS} schema v{schema_version}")
            create_tables(conn)
        elif current < schema_version:
            upgrade(conn, current, schema_version)
        else:
            create_tables(conn)

        if current != schema_version:
            set_user_version(conn, schema_version)
    return current


def get_user_version(conn: sqlite3.Connection) -> int:
    """Return the PRAGMA user_version value."""

    cur = conn.execute("PRAGMA user_version")
    try:
        row = cur.fetchone()
    finally:
        cur.close()
    return int(row[0]) if row and row[0] is not None else 0


def set_user_version(conn: sqlite3.Connection, version: int) -> None:
    """Update the PRAGMA user_version value."""

    conn.execute(f"PRAGMA user_version = {int(version)}")
