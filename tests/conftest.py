"""Shared fixtures and test doubles."""

import pytest

from sqltool import SqlTool, SqlToolConfig
from sqltool.database.adapters.base import BaseAdapter
from sqltool.database.results import NativeResult

USERS_SCHEMA = """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY,
        name TEXT UNIQUE,
        age INTEGER
    );
"""


class FakeHandle:
    """Stands in for a pool or connection."""

    def __init__(self):
        self.closed = False


class RecordingAdapter(BaseAdapter):
    """Adapter double that records every call instead of touching a database."""

    backend_name = "fake"

    def __init__(self, config=None, native=None, error=None, script_error=None):
        super().__init__(config or SqlToolConfig())
        self.native = native
        self.error = error
        self.script_error = script_error
        self.connects = 0
        self.scripts = []
        self.calls = []
        self.closed = []

    def connect(self):
        self.connects += 1
        return FakeHandle()

    def run_script(self, handle, script):
        self.scripts.append(script)
        if self.script_error is not None:
            raise self.script_error

    def execute(self, handle, query, values):
        self.calls.append((query, list(values)))
        if self.error is not None:
            raise self.error
        if self.native is not None:
            return self.native
        return NativeResult(rows=[{"x": 1}], rowcount=1)

    def close(self, handle):
        handle.closed = True
        self.closed.append(handle)


@pytest.fixture()
def users_tool():
    """SQLite in-memory tool with a users(id, name UNIQUE, age) table."""
    tool = SqlTool({"type": "sqlite", "dbPath": ":memory:", "initialization": USERS_SCHEMA})
    yield tool
    tool.cleanup()


@pytest.fixture()
def memory_tool():
    """SQLite in-memory tool without schema."""
    tool = SqlTool({"type": "sqlite"})
    yield tool
    tool.cleanup()


@pytest.fixture()
def recording_adapter():
    return RecordingAdapter()
