"""PostgreSQL database adapter implementation."""

import logging
from typing import Any, Sequence

try:
    import psycopg2
    import psycopg2.errors
    import psycopg2.extras
except ImportError:
    psycopg2 = None

from ..connection import ConnectionPool
from ..results import NativeResult
from .base import BaseAdapter

logger = logging.getLogger(__name__)

NOT_NULL_VIOLATION = "23502"
READ_ONLY_SQL_TRANSACTION = "25006"


class PostgreSQLAdapter(BaseAdapter):
    """PostgreSQL adapter backed by a pool of autocommit psycopg2 connections."""

    backend_name = "postgresql"

    def __init__(self, config):
        """Initialize PostgreSQL adapter.

        Args:
            config: SqlToolConfig with host, port, user, password, database,
                pool_size, read_only and timeout
        """
        if psycopg2 is None:
            raise ImportError(
                "psycopg2 is not installed. Install it with: pip install psycopg2-binary"
            )

        super().__init__(config)
        self.driver_errors = (psycopg2.Error,)

    def _open_connection(self):
        # Build connection parameters
        conn_params = {
            "host": self.config.host,
            "port": self.config.port,
            "dbname": self.config.database,
            "connect_timeout": int(self.config.timeout),
        }
        if self.config.user:
            conn_params["user"] = self.config.user
        if self.config.password:
            conn_params["password"] = self.config.password

        connection = psycopg2.connect(**conn_params)
        connection.autocommit = True

        if self.config.read_only:
            with connection.cursor() as cursor:
                cursor.execute("SET SESSION CHARACTERISTICS AS TRANSACTION READ ONLY")

        return connection

    def connect(self) -> ConnectionPool:
        """Create the pool and open its first connection.

        Raises:
            psycopg2.Error: If the server cannot be reached or rejects the login
        """
        pool = ConnectionPool(
            self._open_connection,
            pool_size=self.config.pool_size,
            dsn=self.dsn,
            is_usable=lambda connection: connection.closed == 0,
        )

        # Fail initialization on bad credentials instead of on first query
        with pool.connection():
            pass

        logger.info(f"Connected to PostgreSQL database: {self.config.database}@{self.config.host}")
        return pool

    def run_script(self, handle: ConnectionPool, script: str) -> None:
        with handle.connection() as connection:
            with connection.cursor() as cursor:
                cursor.execute(script)

    def execute(self, handle: ConnectionPool, query: str, values: Sequence[Any]) -> NativeResult:
        with handle.connection() as connection:
            # Execute with dict cursor for named columns
            with connection.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
                # No parameters means no %-placeholder processing of the text
                cursor.execute(query, tuple(values) if values else None)
                rows = cursor.fetchall() if cursor.description is not None else []
                return NativeResult(rows=rows, rowcount=cursor.rowcount)

    def is_not_null_violation(self, error: Exception) -> bool:
        return (
            isinstance(error, psycopg2.errors.NotNullViolation)
            or getattr(error, "pgcode", None) == NOT_NULL_VIOLATION
        )

    def is_read_only_violation(self, error: Exception) -> bool:
        return (
            isinstance(error, psycopg2.errors.ReadOnlySqlTransaction)
            or getattr(error, "pgcode", None) == READ_ONLY_SQL_TRANSACTION
        )

    def close(self, handle: ConnectionPool) -> None:
        """Close every pooled connection."""
        handle.close_all()
        logger.info(f"Closed PostgreSQL connections to {self.config.database}")
