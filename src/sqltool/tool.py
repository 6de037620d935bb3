"""Unified SQL tool: one query interface over PostgreSQL, MySQL and SQLite."""

import logging
from typing import Any, Mapping, Optional, Union

from .config import SqlToolConfig
from .constants import (
    INJECTION_DETECTED_ERROR,
    QUERY_REQUIRED_ERROR,
    STATUS_BAD_REQUEST,
    STATUS_OK,
    VALUES_NOT_ARRAY_ERROR,
)
from .database.adapters import BaseAdapter, create_adapter
from .database.connection import ConnectionManager
from .database.logging import log_query_execution
from .database.validation import check_query
from .errors import InitializationError

logger = logging.getLogger(__name__)


def _error_response(error: str) -> dict:
    return {"status": STATUS_BAD_REQUEST, "content": {"error": error, "success": False}}


class SqlTool:
    """Execute SQL against one configured backend.

    Every call returns a ``{"status": int, "content": dict}`` envelope.
    Query problems (missing query, screened query, constraint or backend
    errors) come back as status 400; only initialization failures raise.

    Example:
        tool = SqlTool({"type": "sqlite", "dbPath": ":memory:"})
        response = await tool.use({"query": "SELECT 1 as x"})
        # {"status": 200, "content": {"rows": [{"x": 1}], "affectedRows": 1, "success": True}}
    """

    def __init__(
        self,
        config: Union[SqlToolConfig, Mapping[str, Any]],
        adapter: Optional[BaseAdapter] = None,
    ):
        """Initialize the tool. No connection is opened until first use.

        Args:
            config: SqlToolConfig or a parameter mapping for SqlToolConfig.from_params
            adapter: Adapter to use instead of the one selected by the backend kind

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        if not isinstance(config, SqlToolConfig):
            config = SqlToolConfig.from_params(config)
        self.config = config
        self.type = config.backend.value
        self._manager = ConnectionManager(
            adapter if adapter is not None else create_adapter(config),
            initialization=config.initialization,
        )

    @property
    def is_initialized(self) -> bool:
        return self._manager.is_initialized

    async def initialize(self) -> None:
        """Connect and run the initialization script if not done yet.

        Raises:
            InitializationError: If connecting or the script fails
        """
        await self._manager.initialize()

    def cleanup(self) -> None:
        """Close the connection handle. Safe to call repeatedly."""
        self._manager.cleanup()

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()

    async def use(self, params: Mapping[str, Any]) -> dict:
        """Run one query.

        Args:
            params: {"query": str, "values": list of scalars or None (optional)}

        Returns:
            Response envelope {"status": 200 | 400, "content": {...}}

        Raises:
            InitializationError: If the lazy connection attempt fails
        """
        query = params.get("query") if isinstance(params, Mapping) else None
        if not isinstance(query, str) or not query.strip():
            return _error_response(QUERY_REQUIRED_ERROR)

        values = params.get("values")
        if values is None:
            values = []
        elif not isinstance(values, (list, tuple)):
            return _error_response(VALUES_NOT_ARRAY_ERROR)

        # Configuration problem, not a query problem: let it raise
        await self.initialize()

        try:
            is_trusted, pattern = check_query(
                query, values, screen_parameters=self.config.screen_parameters
            )
            if not is_trusted:
                log_query_execution(
                    backend=self.type,
                    query=query,
                    dsn=self.config.dsn,
                    success=False,
                    error=INJECTION_DETECTED_ERROR,
                    blocked_pattern=pattern,
                )
                return _error_response(INJECTION_DETECTED_ERROR)

            result = await self._manager.execute(query, values)
            return {
                "status": STATUS_OK if result.success else STATUS_BAD_REQUEST,
                "content": result.to_dict(),
            }

        except InitializationError:
            raise
        except Exception as e:
            logger.error(f"{self.type} query error: {type(e).__name__}: {e}")
            return _error_response(str(e))

    @staticmethod
    def init_schema() -> dict:
        """Construction parameters accepted by SqlToolConfig.from_params."""
        return {
            "type": {
                "type": "string",
                "required": True,
                "description": "Database type: postgresql, mysql, or sqlite",
            },
            # PostgreSQL and MySQL
            "host": {
                "type": "string",
                "required": False,
                "description": "Database host (required for PostgreSQL and MySQL)",
            },
            "user": {
                "type": "string",
                "required": False,
                "description": "Database user (PostgreSQL and MySQL)",
            },
            "password": {
                "type": "string",
                "required": False,
                "description": "Database password (PostgreSQL and MySQL)",
            },
            "database": {
                "type": "string",
                "required": False,
                "description": "Database name (required for PostgreSQL and MySQL)",
            },
            "port": {
                "type": "number",
                "required": False,
                "description": "Database port (defaults to 5432 / 3306)",
            },
            "maxConn": {
                "type": "number",
                "required": False,
                "description": "Maximum number of connections in pool (PostgreSQL and MySQL)",
            },
            # SQLite
            "dbPath": {
                "type": "string",
                "required": False,
                "description": "Path to SQLite database file or :memory: for in-memory database",
            },
            # Common
            "initialization": {
                "type": "string",
                "required": False,
                "description": "SQL statements to initialize the database",
            },
            "screen_parameters": {
                "type": "boolean",
                "required": False,
                "description": "Reject string values containing comment or terminator fragments",
            },
            "read_only": {
                "type": "boolean",
                "required": False,
                "description": "Open the database in read-only mode",
            },
        }

    @staticmethod
    def in_schema() -> dict:
        """JSON Schema of a query request."""
        return {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "SQL query to execute",
                },
                "values": {
                    "type": "array",
                    "items": {"type": ["string", "number", "integer", "boolean", "null"]},
                    "description": "Values for parameterized queries, bound positionally",
                },
            },
            "required": ["query"],
        }

    @staticmethod
    def out_schema() -> dict:
        """JSON Schema of the response envelope."""
        return {
            "type": "object",
            "properties": {
                "status": {"type": "number"},
                "content": {
                    "type": "object",
                    "properties": {
                        "rows": {"type": "array"},
                        "affectedRows": {"type": "number"},
                        "success": {"type": "boolean"},
                        "error": {"type": "string"},
                        "lastInsertId": {"type": "number"},
                    },
                },
            },
            "required": ["status", "content"],
        }

    @staticmethod
    def about() -> str:
        return (
            "A unified SQL tool that supports PostgreSQL, MySQL, and SQLite databases. "
            "Handles connection pooling, parameterized queries, and provides a consistent "
            "interface across different database types."
        )
