"""Database adapters for different database types."""

from ...config import BackendKind, SqlToolConfig
from .base import BaseAdapter
from .mysql import MySQLAdapter
from .postgresql import PostgreSQLAdapter
from .sqlite import SQLiteAdapter

__all__ = [
    "BaseAdapter",
    "MySQLAdapter",
    "PostgreSQLAdapter",
    "SQLiteAdapter",
    "create_adapter",
]


def create_adapter(config: SqlToolConfig) -> BaseAdapter:
    """Factory function to create the adapter for the configured backend.

    This is the only place that branches on the backend kind.

    Args:
        config: Tool configuration

    Returns:
        Appropriate database adapter instance

    Raises:
        ValueError: If backend is not supported
    """
    if config.backend is BackendKind.POSTGRESQL:
        return PostgreSQLAdapter(config)
    elif config.backend is BackendKind.MYSQL:
        return MySQLAdapter(config)
    elif config.backend is BackendKind.SQLITE:
        return SQLiteAdapter(config)
    else:
        raise ValueError(
            f"Unsupported database backend: {config.backend}\n"
            f"  Supported backends: postgresql, mysql, sqlite"
        )
