"""Structured logging for database operations.

Every event is one JSON object on the ``sqltool.database`` logger:

- ``initialization``: connect plus optional script, per backend
- ``query``: one statement, executed or rejected by the trust screen
- ``pool``: connection pool bookkeeping (DEBUG)

Bound values never appear in the payloads; query text is reduced to a
hash, its leading keyword and a short preview.
"""

import hashlib
import json
import logging
import re
import time
from typing import Any, Optional

# Configure logger for database operations
db_logger = logging.getLogger("sqltool.database")

PREVIEW_LENGTH = 100

_LEADING_KEYWORD = re.compile(r"^\s*([A-Za-z]+)")


def sanitize_dsn(dsn: str) -> str:
    """Mask the user part of a connection string."""
    return re.sub(r'://([^@/]+)@', '://***@', dsn)


def hash_query(query: str) -> str:
    """SHA256 of the query text, first 16 hex characters."""
    return hashlib.sha256(query.encode()).hexdigest()[:16]


def preview_query(query: str) -> str:
    """Shorten a query for log output."""
    query = " ".join(query.split())
    return query[:PREVIEW_LENGTH] + ("..." if len(query) > PREVIEW_LENGTH else "")


def statement_keyword(query: str) -> str:
    """Leading SQL keyword, upper-cased (``SELECT``, ``INSERT``, ...)."""
    match = _LEADING_KEYWORD.match(query)
    return match.group(1).upper() if match else ""


def _emit(level: int, payload: dict) -> None:
    db_logger.log(level, json.dumps(payload, default=str))


def log_initialization(
    backend: str,
    dsn: str,
    success: bool,
    ran_script: bool = False,
    error: Optional[str] = None,
    duration: float = 0.0,
) -> None:
    """Log the outcome of opening a backend handle.

    Args:
        backend: Backend kind (postgresql, mysql, sqlite)
        dsn: Connection string without password
        success: Whether connect and script both succeeded
        ran_script: Whether an initialization script was part of the attempt
        error: Error message if failed
        duration: Time for connect plus script, in seconds
    """
    payload = {
        "event": "initialization",
        "backend": backend,
        "dsn": sanitize_dsn(dsn),
        "success": success,
        "ran_script": ran_script,
        "duration_seconds": round(duration, 3),
    }
    if error:
        payload["error"] = error

    _emit(logging.INFO if success else logging.ERROR, payload)


def log_query_execution(
    backend: str,
    query: str,
    dsn: str,
    success: bool,
    rows_returned: int = 0,
    affected_rows: int = 0,
    last_insert_id: Optional[Any] = None,
    duration: float = 0.0,
    error: Optional[str] = None,
    blocked_pattern: Optional[str] = None,
) -> None:
    """Log one statement.

    A statement rejected by the trust screen is logged at WARNING with the
    denylist entry it matched; driver failures at ERROR; successes at INFO.

    Args:
        backend: Backend kind (postgresql, mysql, sqlite)
        query: SQL text (hashed and previewed)
        dsn: Connection string without password
        success: Whether the statement succeeded
        rows_returned: Rows in the result set
        affected_rows: affectedRows reported to the caller
        last_insert_id: Generated key, if the backend reported one
        duration: Execution time in seconds
        error: Message returned to the caller on failure
        blocked_pattern: Denylist entry that rejected the statement
    """
    payload = {
        "event": "query",
        "backend": backend,
        "statement": statement_keyword(query),
        "query_hash": hash_query(query),
        "query_preview": preview_query(query),
        "dsn": sanitize_dsn(dsn),
        "success": success,
        "blocked": blocked_pattern is not None,
    }

    if blocked_pattern is not None:
        payload["blocked_pattern"] = blocked_pattern
        payload["error"] = error
        _emit(logging.WARNING, payload)
        return

    payload["duration_seconds"] = round(duration, 3)
    if success:
        payload["rows_returned"] = rows_returned
        payload["affected_rows"] = affected_rows
        if last_insert_id is not None:
            payload["last_insert_id"] = last_insert_id
        _emit(logging.INFO, payload)
    else:
        payload["error"] = error
        _emit(logging.ERROR, payload)


def log_pool_operation(dsn: str, operation: str, pool_size: int, open_connections: int, idle_connections: int) -> None:
    """Log connection pool bookkeeping.

    Args:
        dsn: Connection string without password
        operation: acquire, release, discard or close_all
        pool_size: Maximum number of connections
        open_connections: Connections currently open (idle or borrowed)
        idle_connections: Connections waiting in the pool
    """
    _emit(logging.DEBUG, {
        "event": "pool",
        "dsn": sanitize_dsn(dsn),
        "operation": operation,
        "pool_size": pool_size,
        "open_connections": open_connections,
        "borrowed_connections": open_connections - idle_connections,
    })


class QueryTimer:
    """Context manager for timing query execution."""

    def __init__(self):
        self.start_time: float = 0.0
        self.duration: float = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
