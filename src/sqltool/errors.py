"""Exceptions raised by sqltool.

Only configuration and initialization problems are raised to callers.
Query-shaped failures (validation, screening, constraint and backend errors)
are reported inside the response envelope instead.
"""


class SqlToolError(Exception):
    """Base class for sqltool errors."""


class ConfigurationError(SqlToolError, ValueError):
    """Invalid construction parameters (unknown backend, missing host, ...)."""


class InitializationError(SqlToolError, ConnectionError):
    """Connection, pool or initialization script failure."""
