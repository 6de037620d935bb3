"""Abstract base class for database adapters."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from ...constants import NOT_NULL_VIOLATION_ERROR, READ_ONLY_ERROR
from ..logging import QueryTimer, log_query_execution
from ..results import NativeResult, QueryResult, normalize_result

logger = logging.getLogger(__name__)

ROW_RETURNING_KEYWORD = "select"


class BaseAdapter(ABC):
    """Abstract base class for database-specific adapters.

    Each database type (PostgreSQL, MySQL, SQLite) implements this interface.
    Adapters do not keep the connection handle themselves: the
    ConnectionManager owns it and passes it into every call.
    """

    backend_name = "unknown"

    # Exceptions turned into failed results; anything else propagates
    driver_errors: tuple[type[BaseException], ...] = (Exception,)

    def __init__(self, config):
        """Initialize adapter with connection parameters.

        Args:
            config: SqlToolConfig with connection target and options
        """
        self.config = config

    @property
    def dsn(self) -> str:
        """Connection string for logging (password never included)."""
        return self.config.dsn

    @abstractmethod
    def connect(self) -> Any:
        """Open the connection handle (pool or single connection).

        Raises:
            ConnectionError: If connection fails
        """
        pass

    @abstractmethod
    def run_script(self, handle: Any, script: str) -> None:
        """Execute a (possibly multi-statement) initialization script.

        Raises:
            Driver error if any statement fails
        """
        pass

    @abstractmethod
    def execute(self, handle: Any, query: str, values: Sequence[Any]) -> NativeResult:
        """Execute one statement with positionally bound values.

        Args:
            handle: Handle returned by connect()
            query: SQL text using the driver's placeholder style
            values: Positional parameter values

        Returns:
            Driver result

        Raises:
            Driver error on failure
        """
        pass

    @abstractmethod
    def close(self, handle: Any) -> None:
        """Close the handle and release resources."""
        pass

    def is_row_returning(self, query: str) -> bool:
        """Lexical classification: does the statement start with SELECT?"""
        return query.strip().lower().startswith(ROW_RETURNING_KEYWORD)

    def is_not_null_violation(self, error: Exception) -> bool:
        return False

    def is_read_only_violation(self, error: Exception) -> bool:
        return False

    def map_error(self, error: Exception) -> str:
        """Map a driver error to the message returned to callers.

        Not-null and read-only violations get fixed, backend-independent
        messages; everything else keeps the driver's text.
        """
        if self.is_not_null_violation(error):
            return NOT_NULL_VIOLATION_ERROR
        if self.is_read_only_violation(error):
            return READ_ONLY_ERROR
        return str(error)

    def run(self, handle: Any, query: str, values: Sequence[Any]) -> QueryResult:
        """Execute, normalize and log one statement.

        Driver errors are converted into a failed QueryResult. The statement
        runs exactly once.
        """
        was_row_returning = self.is_row_returning(query)
        error_msg: Optional[str] = None

        with QueryTimer() as timer:
            try:
                native = self.execute(handle, query, values)
            except self.driver_errors as e:
                error_msg = self.map_error(e)
                logger.debug(f"{self.backend_name} query error: {e}")

        if error_msg is not None:
            log_query_execution(
                backend=self.backend_name,
                query=query,
                dsn=self.dsn,
                success=False,
                error=error_msg,
                duration=timer.duration,
            )
            return QueryResult.failure(error_msg)

        result = normalize_result(native, was_row_returning)
        log_query_execution(
            backend=self.backend_name,
            query=query,
            dsn=self.dsn,
            success=True,
            rows_returned=len(result.rows),
            affected_rows=result.affected_rows,
            last_insert_id=result.last_insert_id,
            duration=timer.duration,
        )
        return result
