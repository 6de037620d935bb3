"""sqltool - one query interface over PostgreSQL, MySQL and SQLite."""

from sqltool.config import BackendKind, SqlToolConfig
from sqltool.errors import ConfigurationError, InitializationError, SqlToolError
from sqltool.tool import SqlTool

__all__ = [
    "BackendKind",
    "SqlToolConfig",
    "SqlTool",
    "SqlToolError",
    "ConfigurationError",
    "InitializationError",
]
