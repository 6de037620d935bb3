"""SQLite database adapter implementation."""

import logging
import re
import sqlite3
import threading
from pathlib import Path
from typing import Any, Sequence

from ...constants import MEMORY_DATABASE, READ_ONLY_ERROR
from ..results import NativeResult
from .base import BaseAdapter

logger = logging.getLogger(__name__)

_INSERT_STATEMENT = re.compile(r"^\s*(INSERT|REPLACE)\b", re.IGNORECASE)


class SQLiteAdapter(BaseAdapter):
    """SQLite adapter over a single shared connection.

    The connection is opened in autocommit mode and shared by worker
    threads; statements are serialized by a lock held for the whole
    execute/fetch cycle.
    """

    backend_name = "sqlite"
    driver_errors = (sqlite3.Error,)

    def __init__(self, config):
        """Initialize SQLite adapter.

        Args:
            config: SqlToolConfig; uses db_path, read_only and timeout
        """
        super().__init__(config)
        self.database_path = config.db_path
        self._lock = threading.Lock()

    def connect(self) -> sqlite3.Connection:
        """Open the database file, creating its directory if needed."""
        path = self.database_path
        if path != MEMORY_DATABASE:
            Path(path).parent.mkdir(parents=True, exist_ok=True)

        if self.config.read_only and path != MEMORY_DATABASE:
            target = f"{Path(path).resolve().as_uri()}?mode=ro"
            uri = True
        else:
            target = path
            uri = False

        connection = sqlite3.connect(
            target,
            timeout=self.config.timeout,
            uri=uri,
            check_same_thread=False,  # Used from asyncio worker threads
            isolation_level=None,  # Autocommit, each statement is its own transaction
        )

        # Enable dictionary-like rows
        connection.row_factory = sqlite3.Row

        # Wait on locks held by other processes instead of failing at once
        connection.execute(f"PRAGMA busy_timeout = {int(self.config.timeout * 1000)}")

        mode = "read-only" if uri else "read-write"
        logger.info(f"Connected to SQLite database ({mode}): {path}")
        return connection

    def run_script(self, handle: sqlite3.Connection, script: str) -> None:
        with self._lock:
            handle.executescript(script)

    def execute(self, handle: sqlite3.Connection, query: str, values: Sequence[Any]) -> NativeResult:
        with self._lock:
            cursor = handle.cursor()
            try:
                cursor.execute(query, tuple(values))
                rows = cursor.fetchall() if cursor.description is not None else []

                # lastrowid is connection-wide, only trust it for inserts that wrote rows
                lastrowid = None
                if cursor.rowcount > 0 and _INSERT_STATEMENT.match(query):
                    lastrowid = cursor.lastrowid

                return NativeResult(rows=rows, rowcount=cursor.rowcount, lastrowid=lastrowid)
            finally:
                cursor.close()

    def is_not_null_violation(self, error: Exception) -> bool:
        if not isinstance(error, sqlite3.IntegrityError):
            return False
        return (
            (getattr(error, "sqlite_errorname", None) or "") == "SQLITE_CONSTRAINT_NOTNULL"
            or "NOT NULL constraint failed" in str(error)
        )

    def is_read_only_violation(self, error: Exception) -> bool:
        if not isinstance(error, sqlite3.Error):
            return False
        if (getattr(error, "sqlite_errorname", None) or "").startswith("SQLITE_READONLY"):
            return True
        # Errors raised outside the sqlite3 C layer carry no error name
        return isinstance(error, sqlite3.OperationalError) and str(error) == READ_ONLY_ERROR

    def close(self, handle: sqlite3.Connection) -> None:
        """Close database connection."""
        with self._lock:
            handle.close()
        logger.info(f"Closed SQLite connection to {self.database_path}")
