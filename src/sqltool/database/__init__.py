"""Database layer for sqltool.

Architecture:
- connection.py: DSN parsing, connection pooling and handle lifecycle
- validation.py: Trust screen run before every query
- results.py: Canonical QueryResult and the normalizer
- logging.py: Structured JSON logging of connections and queries
- adapters/: Backend-specific implementations (PostgreSQL, MySQL, SQLite)
"""

from sqltool.database.connection import ConnectionManager, ConnectionPool, parse_dsn
from sqltool.database.results import NativeResult, QueryResult, normalize_result
from sqltool.database.validation import check_query, is_trusted_query

__all__ = [
    "ConnectionManager",
    "ConnectionPool",
    "parse_dsn",
    "NativeResult",
    "QueryResult",
    "normalize_result",
    "check_query",
    "is_trusted_query",
]
