"""MySQL database adapter implementation."""

import logging
from typing import Any, Sequence

import pymysql
import pymysql.cursors
from pymysql.constants import CLIENT

from ..connection import ConnectionPool
from ..results import NativeResult
from .base import BaseAdapter

logger = logging.getLogger(__name__)

# ER_BAD_NULL_ERROR, ER_NO_DEFAULT_FOR_FIELD
NOT_NULL_ERROR_CODES = {1048, 1364}
# ER_CANT_EXECUTE_IN_READ_ONLY_TRANSACTION
READ_ONLY_ERROR_CODES = {1792}
# ER_OPTION_PREVENTS_STATEMENT, raised for any blocking server option
OPTION_PREVENTS_STATEMENT = 1290


def _error_code(error: Exception) -> Any:
    return error.args[0] if error.args else None


class MySQLAdapter(BaseAdapter):
    """MySQL-specific database adapter using a pool of pymysql connections."""

    backend_name = "mysql"
    driver_errors = (pymysql.Error,)

    def _open_connection(self, client_flag: int = 0):
        connection_params = {
            "host": self.config.host,
            "port": self.config.port,
            "user": self.config.user,
            "password": self.config.password or "",
            "database": self.config.database,
            "connect_timeout": int(self.config.timeout),
            "charset": 'utf8mb4',
            "cursorclass": pymysql.cursors.DictCursor,
            "autocommit": True,
            "client_flag": client_flag,
        }
        connection = pymysql.connect(**connection_params)

        if self.config.read_only:
            with connection.cursor() as cursor:
                cursor.execute("SET SESSION TRANSACTION READ ONLY")

        return connection

    def connect(self) -> ConnectionPool:
        """Create the pool and open its first connection.

        Raises:
            pymysql.Error: If the server cannot be reached or rejects the login
        """
        pool = ConnectionPool(
            self._open_connection,
            pool_size=self.config.pool_size,
            dsn=self.dsn,
            is_usable=lambda connection: connection.open,
        )

        # Fail initialization on bad credentials instead of on first query
        with pool.connection():
            pass

        logger.info(f"Connected to MySQL database: {self.config.database}@{self.config.host}")
        return pool

    def run_script(self, handle: ConnectionPool, script: str) -> None:
        """Run the script on a dedicated multi-statement connection.

        Pooled connections never get CLIENT.MULTI_STATEMENTS.
        """
        connection = self._open_connection(client_flag=CLIENT.MULTI_STATEMENTS)
        try:
            with connection.cursor() as cursor:
                cursor.execute(script)
                # Errors in later statements surface while advancing
                while cursor.nextset():
                    pass
        finally:
            connection.close()

    def execute(self, handle: ConnectionPool, query: str, values: Sequence[Any]) -> NativeResult:
        with handle.connection() as connection:
            with connection.cursor() as cursor:
                # No parameters means no %-placeholder processing of the text
                cursor.execute(query, tuple(values) if values else None)
                rows = cursor.fetchall() if cursor.description is not None else []
                return NativeResult(
                    rows=list(rows),
                    rowcount=cursor.rowcount,
                    lastrowid=cursor.lastrowid or None,
                )

    def is_not_null_violation(self, error: Exception) -> bool:
        return isinstance(error, pymysql.Error) and _error_code(error) in NOT_NULL_ERROR_CODES

    def is_read_only_violation(self, error: Exception) -> bool:
        if not isinstance(error, pymysql.Error):
            return False
        code = _error_code(error)
        if code == OPTION_PREVENTS_STATEMENT:
            # Only --read-only and --super-read-only mean read-only storage
            return "read-only" in str(error).lower()
        return code in READ_ONLY_ERROR_CODES

    def close(self, handle: ConnectionPool) -> None:
        """Close every pooled connection."""
        handle.close_all()
        logger.info(f"Closed MySQL connections to {self.config.database}")
