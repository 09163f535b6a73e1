"""Shared test fixtures for the gateway test suite."""

from unittest.mock import MagicMock, patch

import pymysql
import pytest
from pymysql.cursors import DictCursor

from dbgateway.config import ConnectionConfig


# ---------------------------------------------------------------------------
# Environment fixtures
# ---------------------------------------------------------------------------

DB_VARS = ("DB_HOST", "DB_PORT", "DB_NAME", "DB_CHARSET", "DB_USER", "DB_PASS")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every DB_* variable."""
    for name in DB_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("DB_LOG_LEVEL", raising=False)
    return monkeypatch


@pytest.fixture
def db_env(clean_env):
    """Set database environment variables for tests."""
    clean_env.setenv("DB_HOST", "db.internal")
    clean_env.setenv("DB_PORT", "3307")
    clean_env.setenv("DB_NAME", "shop")
    clean_env.setenv("DB_USER", "app")
    clean_env.setenv("DB_PASS", "s3cret")
    return clean_env


# ---------------------------------------------------------------------------
# Driver fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_cursor():
    """Mock DictCursor that tracks executed SQL."""
    cursor = MagicMock()
    cursor.fetchone.return_value = None
    cursor.fetchall.return_value = ()
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def mock_connection(mock_cursor):
    """Mock pymysql connection handing out mock_cursor."""
    conn = MagicMock()
    conn.open = True
    conn.cursor.return_value = mock_cursor
    return conn


@pytest.fixture
def mock_connect(mock_connection):
    """Stand-in for pymysql.connect."""
    return MagicMock(return_value=mock_connection)


@pytest.fixture
def config():
    return ConnectionConfig(password="s3cret", host="db.internal", database="shop", user="app")


@pytest.fixture
def gateway(config, mock_connect):
    """Gateway wired to the mock driver."""
    from dbgateway.gateway import ConnectionGateway
    return ConnectionGateway(config=config, connect=mock_connect)


@pytest.fixture
def offline_connection():
    """Real pymysql connection object that never opens a socket."""
    conn = pymysql.connections.Connection(defer_connect=True, charset="utf8mb4", cursorclass=DictCursor)
    conn.server_status = 0
    return conn


@pytest.fixture
def sent_sql(offline_connection):
    """Record the final SQL each DictCursor would send to the server."""
    sent = []

    def _query(cursor, q):
        sent.append(q)
        return 1

    with patch.object(DictCursor, "_query", autospec=True, side_effect=_query):
        yield sent


@pytest.fixture
def driver_gateway(config, offline_connection, sent_sql):
    """Gateway running real PyMySQL cursors without a server."""
    from dbgateway.gateway import ConnectionGateway
    return ConnectionGateway(config=config, connect=MagicMock(return_value=offline_connection))


@pytest.fixture(autouse=True)
def _reset_default_gateway():
    """Keep the process-wide gateway from leaking between tests."""
    from dbgateway.gateway import reset_gateway
    reset_gateway()
    yield
    reset_gateway()
