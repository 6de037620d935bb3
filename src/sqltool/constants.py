"""Constants and static configuration for the sqltool package."""

# Application constants
SERVER_NAME = "sqltool"
SERVER_VERSION = "1.0.0"
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

# Response status codes used in the {status, content} envelope
STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_SERVER_ERROR = 500

# Fixed error messages returned to callers
QUERY_REQUIRED_ERROR = "Query is required"
VALUES_NOT_ARRAY_ERROR = "Values must be an array"
INJECTION_DETECTED_ERROR = "Potential SQL injection detected"
NOT_NULL_VIOLATION_ERROR = "Cannot insert NULL into non-nullable column."
READ_ONLY_ERROR = "attempt to write a readonly database"

# Database constants
MEMORY_DATABASE = ":memory:"
DB_QUERY_TIMEOUT = 30.0  # seconds, used for connect and busy timeouts
DB_POOL_SIZE = 10  # Default connection pool size for server backends
DB_DEFAULT_PORTS = {
    "postgresql": 5432,
    "mysql": 3306,
}
DB_SUPPORTED_PROTOCOLS = ["postgresql", "mysql", "sqlite"]

# Environment variables read by SqlToolConfig.from_env
ENV_DSN = "SQLTOOL_DSN"
ENV_POOL_SIZE = "SQLTOOL_POOL_SIZE"
ENV_INIT_FILE = "SQLTOOL_INIT_FILE"
ENV_READ_ONLY = "SQLTOOL_READ_ONLY"

# Health check used by `sqltool --test`
TEST_QUERY = "SELECT 1 as x"
