"""
Unit tests for sqltool/database/connection.py - ConnectionPool and ConnectionManager
"""
import asyncio
import threading

import pytest

from conftest import RecordingAdapter
from sqltool.database.connection import ConnectionManager, ConnectionPool
from sqltool.errors import InitializationError


class FakeConnection:
    """Driver connection double."""

    def __init__(self, number):
        self.number = number
        self.usable = True
        self.closed = False

    def close(self):
        self.closed = True


class ConnectionFactory:
    def __init__(self):
        self.opened = []

    def __call__(self):
        connection = FakeConnection(len(self.opened) + 1)
        self.opened.append(connection)
        return connection


class TestConnectionPool:
    """Test ConnectionPool."""

    def test_opens_lazily_and_reuses(self):
        factory = ConnectionFactory()
        pool = ConnectionPool(factory, pool_size=3)
        assert factory.opened == []

        first = pool.acquire()
        pool.release(first)
        second = pool.acquire()
        pool.release(second)

        assert first is second
        assert len(factory.opened) == 1
        assert pool.active_connections == 1

    def test_concurrent_borrowers_get_distinct_connections(self):
        factory = ConnectionFactory()
        pool = ConnectionPool(factory, pool_size=2)

        a = pool.acquire()
        b = pool.acquire()
        assert a is not b
        assert pool.active_connections == 2

        pool.release(a)
        pool.release(b)

    def test_acquire_waits_for_free_slot(self):
        pool = ConnectionPool(ConnectionFactory(), pool_size=1)
        held = pool.acquire()
        acquired = threading.Event()

        def borrower():
            connection = pool.acquire()
            acquired.set()
            pool.release(connection)

        thread = threading.Thread(target=borrower)
        thread.start()

        assert not acquired.wait(0.2)
        pool.release(held)
        assert acquired.wait(2)
        thread.join(2)

    def test_unusable_connection_is_discarded(self):
        factory = ConnectionFactory()
        pool = ConnectionPool(factory, pool_size=2, is_usable=lambda c: c.usable)

        connection = pool.acquire()
        connection.usable = False
        pool.release(connection)

        assert connection.closed
        assert pool.active_connections == 0
        assert pool.acquire() is not connection

    def test_connect_failure_frees_slot(self):
        def failing():
            raise ConnectionError("refused")

        pool = ConnectionPool(failing, pool_size=1)
        for _ in range(2):
            with pytest.raises(ConnectionError):
                pool.acquire()
        assert pool.active_connections == 0

    def test_close_all(self):
        factory = ConnectionFactory()
        pool = ConnectionPool(factory, pool_size=2)
        idle = pool.acquire()
        borrowed = pool.acquire()
        pool.release(idle)

        pool.close_all()
        assert idle.closed
        assert not borrowed.closed

        pool.release(borrowed)
        assert borrowed.closed
        assert pool.active_connections == 0

        with pytest.raises(ConnectionError):
            pool.acquire()

    def test_connection_context_manager_releases(self):
        factory = ConnectionFactory()
        pool = ConnectionPool(factory, pool_size=1)

        with pytest.raises(RuntimeError):
            with pool.connection():
                raise RuntimeError("boom")

        with pool.connection() as connection:
            assert connection is factory.opened[0]


class TestConnectionManager:
    """Test ConnectionManager lifecycle."""

    @pytest.mark.asyncio
    async def test_initialize_runs_script_once(self):
        adapter = RecordingAdapter()
        manager = ConnectionManager(adapter, initialization="CREATE TABLE t (id INTEGER)")

        await manager.initialize()
        await manager.initialize()

        assert manager.is_initialized
        assert adapter.connects == 1
        assert adapter.scripts == ["CREATE TABLE t (id INTEGER)"]

    @pytest.mark.asyncio
    async def test_concurrent_initialize_is_single_flight(self):
        adapter = RecordingAdapter()
        manager = ConnectionManager(adapter)

        await asyncio.gather(*(manager.initialize() for _ in range(5)))

        assert adapter.connects == 1

    @pytest.mark.asyncio
    async def test_script_failure_releases_handle(self):
        adapter = RecordingAdapter(script_error=ValueError("syntax error"))
        manager = ConnectionManager(adapter, initialization="INVALID SQL")

        with pytest.raises(InitializationError, match="Failed to initialize fake database: syntax error"):
            await manager.initialize()

        assert not manager.is_initialized
        assert len(adapter.closed) == 1

    @pytest.mark.asyncio
    async def test_connect_failure(self):
        def refuse():
            raise ConnectionError("refused")

        adapter = RecordingAdapter()
        adapter.connect = refuse
        manager = ConnectionManager(adapter)

        with pytest.raises(InitializationError, match="refused"):
            await manager.initialize()
        assert not manager.is_initialized

    @pytest.mark.asyncio
    async def test_execute_requires_initialization(self):
        manager = ConnectionManager(RecordingAdapter())
        with pytest.raises(ConnectionError):
            await manager.execute("SELECT 1", [])

    @pytest.mark.asyncio
    async def test_cleanup_is_idempotent_and_allows_reinit(self):
        adapter = RecordingAdapter()
        manager = ConnectionManager(adapter)

        manager.cleanup()
        await manager.initialize()
        manager.cleanup()
        manager.cleanup()

        assert not manager.is_initialized
        assert len(adapter.closed) == 1

        await manager.initialize()
        assert adapter.connects == 2

    @pytest.mark.asyncio
    async def test_cleanup_swallows_close_errors(self):
        adapter = RecordingAdapter()

        def failing_close(handle):
            raise OSError("already closed")

        adapter.close = failing_close
        manager = ConnectionManager(adapter)
        await manager.initialize()

        manager.cleanup()
        assert not manager.is_initialized
