"""Byte-oriented fragment stores.

A store maps string keys to opaque ``bytes`` values. It knows nothing about
fragment names, expiry, or meta records; those live one layer up in
FragmentCache and ExpiryController.

Unlike a read-through cache that degrades on infrastructure errors, the stores
here surface failures: SqliteFragmentStore wraps ``sqlite3.Error`` in
TimedFragmentError and raises it, and callers above this layer let it
propagate unchanged.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from timedfragment.errors import ErrorCode, TimedFragmentError

log = structlog.get_logger()

_CREATE_FRAGMENT_TABLE = """
CREATE TABLE IF NOT EXISTS fragments (
    key         TEXT PRIMARY KEY,
    value       BLOB NOT NULL,
    written_at  TEXT NOT NULL
)
"""


@runtime_checkable
class FragmentStore(Protocol):
    def read(self, key: str) -> bytes | None: ...

    def write(self, key: str, data: bytes) -> None: ...

    def delete(self, key: str) -> bool: ...

    def clear(self) -> None: ...


class MemoryFragmentStore:
    """Dict-backed store. Contents are lost when the process exits."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def read(self, key: str) -> bytes | None:
        return self._data.get(key)

    def write(self, key: str, data: bytes) -> None:
        if not isinstance(data, bytes):
            raise TypeError(f"Fragment store values must be bytes, got {type(data).__name__}")
        self._data[key] = data

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class SqliteFragmentStore:
    """SQLite-backed store implementing FragmentStore."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self._db = db

    @classmethod
    def open(cls, path: str) -> SqliteFragmentStore:
        """Open (and initialise) a store at ``path``, creating parent dirs.

        ``":memory:"`` gives a private in-memory database.
        """
        if path != ":memory:":
            db_path = Path(path).expanduser()
            db_path.parent.mkdir(parents=True, exist_ok=True)
            path = str(db_path)
        store = cls(sqlite3.connect(path))
        store.init_db()
        log.debug("fragment_store_opened", backend="sqlite", path=path)
        return store

    def init_db(self) -> None:
        """Create the fragments table and set WAL mode. Called once after connect."""
        try:
            self._db.execute("PRAGMA journal_mode = WAL")
            self._db.execute(_CREATE_FRAGMENT_TABLE)
            self._db.commit()
        except sqlite3.Error as exc:
            raise TimedFragmentError(
                ErrorCode.STORE_WRITE_FAILED, f"Could not initialise fragment table: {exc}"
            ) from exc

    def close(self) -> None:
        self._db.close()

    # ------------------------------------------------------------------
    # FragmentStore
    # ------------------------------------------------------------------

    def read(self, key: str) -> bytes | None:
        try:
            cursor = self._db.execute("SELECT value FROM fragments WHERE key = ?", (key,))
            row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise TimedFragmentError(
                ErrorCode.STORE_READ_FAILED, f"Fragment read failed: {exc}", key=key
            ) from exc
        if row is None:
            return None
        return bytes(row[0])

    def write(self, key: str, data: bytes) -> None:
        if not isinstance(data, bytes):
            raise TypeError(f"Fragment store values must be bytes, got {type(data).__name__}")
        try:
            self._db.execute(
                "INSERT OR REPLACE INTO fragments (key, value, written_at) VALUES (?, ?, ?)",
                (key, data, datetime.now(UTC).isoformat()),
            )
            self._db.commit()
        except sqlite3.Error as exc:
            raise TimedFragmentError(
                ErrorCode.STORE_WRITE_FAILED, f"Fragment write failed: {exc}", key=key
            ) from exc

    def delete(self, key: str) -> bool:
        try:
            cursor = self._db.execute("DELETE FROM fragments WHERE key = ?", (key,))
            self._db.commit()
        except sqlite3.Error as exc:
            raise TimedFragmentError(
                ErrorCode.STORE_DELETE_FAILED, f"Fragment delete failed: {exc}", key=key
            ) from exc
        return cursor.rowcount > 0

    def clear(self) -> None:
        try:
            cursor = self._db.execute("DELETE FROM fragments")
            self._db.commit()
        except sqlite3.Error as exc:
            raise TimedFragmentError(
                ErrorCode.STORE_DELETE_FAILED, f"Fragment clear failed: {exc}"
            ) from exc
        log.info("fragment_store_cleared", backend="sqlite", deleted=cursor.rowcount)
