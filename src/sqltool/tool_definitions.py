"""Tool descriptions for the sqltool MCP server."""

from .config import BackendKind
from .database.validation import UNSAFE_COMMANDS, UNSAFE_PATTERNS


class ToolDescriptions:
    """Centralized management of tool descriptions and per-backend examples."""

    PLACEHOLDER_STYLES = {
        BackendKind.POSTGRESQL: "%s",
        BackendKind.MYSQL: "%s",
        BackendKind.SQLITE: "?",
    }

    QUERY_EXAMPLES = {
        BackendKind.POSTGRESQL: [
            "SELECT * FROM pg_tables WHERE schemaname = %s",
            "INSERT INTO users (name, age) VALUES (%s, %s) RETURNING id",
        ],
        BackendKind.MYSQL: [
            "SHOW TABLES",
            "INSERT INTO users (name, age) VALUES (%s, %s)",
        ],
        BackendKind.SQLITE: [
            "SELECT name FROM sqlite_master WHERE type = ?",
            "INSERT INTO users (name, age) VALUES (?, ?)",
        ],
    }

    @classmethod
    def get_sql_tool_description(
        cls, backend: BackendKind, read_only: bool = False, screen_parameters: bool = True
    ) -> str:
        """Get the main description for the sql_query tool."""
        placeholder = cls.PLACEHOLDER_STYLES[backend]
        mode = "Read-only session: write statements fail." if read_only else "Read-write session."
        scope = (
            "in the query text and inside string values"
            if screen_parameters
            else "in the query text (string values are not screened)"
        )

        return f"""Execute one SQL statement against the configured {backend.value} database.

Returns JSON: {{"status": 200|400, "content": {{"rows", "affectedRows", "success", "error"?, "lastInsertId"?}}}}

Parameters: bind values with '{placeholder}' placeholders and the 'values' array.
Never paste user data into the query text.

Rejected before execution: {", ".join(UNSAFE_COMMANDS)} and the fragments {" ".join(UNSAFE_PATTERNS)}
{scope}. SQL comments are therefore not allowed.

One statement per call. {mode}"""

    @classmethod
    def get_query_description(cls, backend: BackendKind) -> str:
        """Get the query parameter description."""
        examples = "\n".join(f"  {example}" for example in cls.QUERY_EXAMPLES[backend])
        return f"SQL query to execute. Examples:\n{examples}"

    @classmethod
    def get_values_description(cls, backend: BackendKind) -> str:
        """Get the values parameter description."""
        placeholder = cls.PLACEHOLDER_STYLES[backend]
        return (
            f"Optional: Values for the '{placeholder}' placeholders, in order. "
            "Strings, numbers, booleans or null."
        )
