"""
Pytest configuration and fixtures for CData MCP Server tests.
"""

import sys
import threading
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import pytest
from unittest.mock import AsyncMock


TEST_ENV = {
    "CDATA_CONNECT_CLOUD_CATALOG_NAME": "TestCatalog",
    "CDATA_CONNECT_CLOUD_USER": "user@example.com",
    "CDATA_CONNECT_CLOUD_PAT": "secret-token",
}


class FakeDatabaseError(Exception):
    """Stands in for pymssql.Error."""
    pass


class FakeCursor:
    """Cursor returning the rows configured on the service."""

    def __init__(self, service, as_dict):
        self.service = service
        self.as_dict = as_dict
        self.description = None
        self.closed = False

    def execute(self, operation, params=None):
        self.service.executed.append((operation, params))
        if self.service.execute_error is not None:
            raise self.service.execute_error
        if self.service.rows is not None:
            columns = list(self.service.rows[0]) if self.service.rows else ["x"]
            self.description = [(name,) for name in columns]

    def fetchall(self):
        if self.service.fetch_error is not None:
            raise self.service.fetch_error
        return [dict(row) for row in self.service.rows]

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, service):
        self.service = service

    def cursor(self, as_dict=False):
        return FakeCursor(self.service, as_dict)

    def close(self):
        with self.service.lock:
            self.service.closed += 1


class FakeService:
    """
    Fake pymssql module recording connection opens and closes.

    Set ``connect_error``, ``execute_error`` or ``fetch_error`` to inject a
    failure at that stage. Set ``connect_gate`` to a ``threading.Event`` to
    hold ``connect`` until it is set.
    """

    Error = FakeDatabaseError

    def __init__(self):
        self.lock = threading.Lock()
        self.opened = 0
        self.closed = 0
        self.connect_calls = []
        self.executed = []
        self.rows = []
        self.connect_error = None
        self.execute_error = None
        self.fetch_error = None
        self.connect_gate = None

    @property
    def connect_attempts(self):
        return len(self.connect_calls)

    def connect(self, **kwargs):
        self.connect_calls.append(kwargs)
        if self.connect_gate is not None:
            self.connect_gate.wait(timeout=5)
        if self.connect_error is not None:
            raise self.connect_error
        with self.lock:
            self.opened += 1
        return FakeConnection(self)


@pytest.fixture
def app_config():
    """Configuration built from a complete test environment."""
    from cdata_mcp_server.config import AppConfig
    return AppConfig.from_environment(TEST_ENV)


@pytest.fixture
def fake_service(monkeypatch):
    """Replace pymssql inside the executor with a recording fake."""
    service = FakeService()
    monkeypatch.setattr("cdata_mcp_server.core.database.pymssql", service)
    return service


@pytest.fixture
def executor(app_config, fake_service):
    from cdata_mcp_server.core.database import SessionExecutor
    return SessionExecutor(app_config.database)


@pytest.fixture
def registry(executor):
    from cdata_mcp_server.registry import build_registry
    return build_registry(executor)


@pytest.fixture
def dispatcher(registry):
    from cdata_mcp_server.dispatcher import Dispatcher
    return Dispatcher(registry)


@pytest.fixture
def mock_context():
    """Create a mock FastMCP context."""
    mock_ctx = AsyncMock()
    mock_ctx.info = AsyncMock()
    mock_ctx.error = AsyncMock()
    mock_ctx.warning = AsyncMock()
    return mock_ctx


@pytest.fixture
def test_env():
    """A complete set of required environment variables."""
    return dict(TEST_ENV)
