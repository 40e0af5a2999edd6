"""SQLite storage of X coordinates and their scalars."""

from __future__ import annotations

import os
import sqlite3

_U64_MASK = (1 << 64) - 1

_SQL_CREATE = "CREATE TABLE IF NOT EXISTS pts (x BLOB PRIMARY KEY, k INT) WITHOUT ROWID"
_SQL_INSERT = "INSERT OR IGNORE INTO pts (x, k) VALUES (?, ?)"
_SQL_LOOKUP = "SELECT k FROM pts WHERE x = ?"

_PRAGMAS = (
    "PRAGMA journal_mode=MEMORY",
    "PRAGMA synchronous=OFF",
    "PRAGMA temp_store=MEMORY",
    "PRAGMA locking_mode=EXCLUSIVE",
    "PRAGMA cache_size=-8000",
)


def _check_x(x: bytes) -> bytes:
    x = bytes(x)
    if len(x) != 32:
        raise ValueError("X coordinate must be 32 bytes")
    return x


class PointsDatabase:
    """A points table tuned for one large write, kept in one open transaction."""

    def __init__(self, path: str | os.PathLike) -> None:
        self._conn: sqlite3.Connection | None = sqlite3.connect(
            os.fspath(path), isolation_level=None
        )
        self._conn.execute(_SQL_CREATE)
        for pragma in _PRAGMAS:
            self._conn.execute(pragma)
        self._conn.execute("BEGIN IMMEDIATE")

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError("database is closed")
        return self._conn

    def insert(self, key: int, x: bytes, y_parity: int = 0) -> None:
        """Store ``key`` under ``x``; an existing entry for ``x`` is kept."""
        key &= _U64_MASK
        signed = key - (1 << 64) if key >= 1 << 63 else key
        self._connection().execute(_SQL_INSERT, (_check_x(x), signed))

    def lookup(self, x: bytes) -> int | None:
        """Return the scalar stored for ``x``, or None if there is none."""
        row = self._connection().execute(_SQL_LOOKUP, (_check_x(x),)).fetchone()
        if row is None:
            return None
        return row[0] & _U64_MASK

    def close(self) -> None:
        """Commit pending writes and close; further calls do nothing."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            if conn.in_transaction:
                conn.execute("COMMIT")
        finally:
            conn.close()

    def __enter__(self) -> PointsDatabase:
        return self

    def __exit__(self, *args) -> None:
        self.close()