"""A key/value store with expiring entries, kept in an SQLite table."""

from __future__ import annotations

import abc
import sqlite3
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union

Expiration = Union[float, int, timedelta]


class KVStore(abc.ABC):
    """Storage of byte values by string key."""

    @abc.abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the value for key, or None when it does not exist."""

    @abc.abstractmethod
    def set(self, key: str, value: bytes, expiration: Expiration = 0) -> None:
        """Store value under key; an expiration of 0 means it never expires.

        An empty key or value is ignored.
        """

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; a missing key is not an error."""

    @abc.abstractmethod
    def reset(self) -> None:
        """Remove every key."""

    @abc.abstractmethod
    def close(self) -> None:
        """Stop background work and release the storage."""


_DEFAULT_DATABASE = "./fiber.sqlite3"
_DEFAULT_TABLE = "fiber_storage"
_DEFAULT_GC_INTERVAL = 10.0
_DEFAULT_MAX_CONNS = 100
_DEFAULT_CONN_MAX_LIFETIME = 1.0


@dataclass
class Config:
    """Settings for SQLiteStore; durations are in seconds.

    Unset or invalid values are replaced by their defaults when the
    config is created.
    """

    database: str = _DEFAULT_DATABASE
    table: str = _DEFAULT_TABLE
    reset: bool = False
    gc_interval: float = _DEFAULT_GC_INTERVAL
    max_idle_conns: int = _DEFAULT_MAX_CONNS
    max_open_conns: int = _DEFAULT_MAX_CONNS
    conn_max_lifetime: float = _DEFAULT_CONN_MAX_LIFETIME

    def __post_init__(self) -> None:
        if not self.database:
            self.database = _DEFAULT_DATABASE
        if not self.table:
            self.table = _DEFAULT_TABLE
        if int(self.gc_interval) <= 0:
            self.gc_interval = _DEFAULT_GC_INTERVAL
        if self.max_idle_conns <= 0:
            self.max_idle_conns = _DEFAULT_MAX_CONNS
        if self.max_open_conns <= 0:
            self.max_open_conns = _DEFAULT_MAX_CONNS
        if self.conn_max_lifetime == 0:
            self.conn_max_lifetime = _DEFAULT_CONN_MAX_LIFETIME


def _seconds(expiration: Expiration) -> float:
    if isinstance(expiration, timedelta):
        return expiration.total_seconds()
    return float(expiration)


class SQLiteStore(KVStore):
    """KVStore on an SQLite table, with a background thread that purges
    expired entries every ``gc_interval`` seconds."""

    def __init__(self, config: Optional[Config] = None) -> None:
        cfg = config if config is not None else Config()
        self.config = cfg
        self._lock = threading.RLock()
        self._db = sqlite3.connect(
            cfg.database, check_same_thread=False, isolation_level=None
        )
        table = cfg.table
        try:
            self._db.execute("SELECT 1")
            if cfg.reset:
                self._db.execute(f"DROP TABLE IF EXISTS {table}")
            self._db.execute(
                f"CREATE TABLE IF NOT EXISTS {table} ("
                "k VARCHAR(64) PRIMARY KEY NOT NULL DEFAULT '', "
                "v BLOB NOT NULL, "
                "e BIGINT NOT NULL DEFAULT '0')"
            )
            self._db.execute(f"CREATE INDEX IF NOT EXISTS e ON {table} (e)")
        except sqlite3.Error:
            self._db.close()
            raise

        self._sql_select = f"SELECT v, e FROM {table} WHERE k=?"
        self._sql_insert = f"INSERT OR REPLACE INTO {table} (k, v, e) VALUES (?,?,?)"
        self._sql_delete = f"DELETE FROM {table} WHERE k=?"
        self._sql_reset = f"DELETE FROM {table}"
        self._sql_gc = f"DELETE FROM {table} WHERE e <= ? AND e != 0"

        self._done = threading.Event()
        self._closed = False
        self._gc_thread = threading.Thread(target=self._gc_loop, daemon=True)
        self._gc_thread.start()

    def get(self, key: str) -> Optional[bytes]:
        if not key:
            return None
        with self._lock:
            row = self._db.execute(self._sql_select, (key,)).fetchone()
        if row is None:
            return None
        data, exp = row
        if exp != 0 and exp <= int(time.time()):
            return None
        return bytes(data)

    def set(self, key: str, value: bytes, expiration: Expiration = 0) -> None:
        if not key or not value:
            return
        seconds = _seconds(expiration)
        exp = int(time.time() + seconds) if seconds != 0 else 0
        with self._lock:
            self._db.execute(self._sql_insert, (key, bytes(value), exp))

    def delete(self, key: str) -> None:
        if not key:
            return
        with self._lock:
            self._db.execute(self._sql_delete, (key,))

    def reset(self) -> None:
        """Remove every entry, including unexpired ones."""
        with self._lock:
            self._db.execute(self._sql_reset)

    def close(self) -> None:
        """Stop the purge thread and close the database; later calls do nothing."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._done.set()
        if self._gc_thread is not threading.current_thread():
            self._gc_thread.join()
        with self._lock:
            self._db.close()

    def gc(self, now: Union[None, float, datetime] = None) -> None:
        """Delete every entry that expired at or before now (default: the current time)."""
        if now is None:
            stamp = int(time.time())
        elif isinstance(now, datetime):
            stamp = int(now.timestamp())
        else:
            stamp = int(now)
        with self._lock:
            self._db.execute(self._sql_gc, (stamp,))

    def _gc_loop(self) -> None:
        while not self._done.wait(self.config.gc_interval):
            try:
                self.gc()
            except sqlite3.Error:
                pass

    def conn(self) -> sqlite3.Connection:
        """Return the underlying database connection."""
        return self._db

    def __enter__(self) -> "SQLiteStore":
        return self

    def __exit__(self, *args) -> None:
        self.close()