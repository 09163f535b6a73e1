"""Shared MySQL connection with thin query helpers.

A ConnectionGateway opens one connection on first use and runs every
statement through it. Values are always bound by the driver
(``cursor.execute(sql, params)``); SQL text is never built from them.

Placeholders follow PyMySQL: ``%s`` with a sequence of params, or
``%(name)s`` with a mapping.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Mapping, Optional, Sequence, Union

import pymysql
from pymysql.constants import CLIENT
from pymysql.cursors import DictCursor

from .config import ConnectionConfig
from .errors import DatabaseConnectionError, QueryError, driver_error_details

logger = logging.getLogger(__name__)

Params = Optional[Union[Sequence[Any], Mapping[str, Any]]]


def _query_error(exc: Exception) -> QueryError:
    message, code = driver_error_details(exc)
    logger.error("Query failed (code %s): %s", code, message)
    return QueryError(message, code)


def _binding_error(exc: Exception) -> QueryError:
    message = f"Parameter binding failed: {exc!r}"
    logger.error("Query failed: %s", message)
    return QueryError(message)


class ConnectionGateway:
    """Lazily opened single connection plus fetch/execute helpers.

    Access to the connection is serialized with a lock; the connection
    itself is not safe for concurrent use.
    """

    def __init__(self, config: Optional[ConnectionConfig] = None, connect: Optional[Callable[..., Any]] = None):
        self._config = config
        self._connect = connect
        self._conn = None
        self._lock = threading.RLock()

    def __enter__(self) -> "ConnectionGateway":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def config(self) -> Optional[ConnectionConfig]:
        """Config in use; None until the first acquire() when read from env."""
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def acquire(self):
        """Return the shared connection, opening it on first call."""
        conn = self._conn
        if conn is not None:
            return conn
        with self._lock:
            if self._conn is None:
                self._conn = self._open()
            return self._conn

    def _open(self):
        if self._config is None:
            self._config = ConnectionConfig.from_env()
        config = self._config
        connect = self._connect or pymysql.connect

        logger.info("Connecting to %s", config.describe())
        try:
            conn = connect(
                **config.connect_kwargs(),
                cursorclass=DictCursor,
                autocommit=True,
                client_flag=CLIENT.FOUND_ROWS,
            )
        except pymysql.MySQLError as e:
            message, code = driver_error_details(e)
            logger.error("Connection to %s failed (code %s): %s", config.describe(), code, message)
            raise DatabaseConnectionError(
                f"Failed to connect to database: {message}", code, driver_message=message
            ) from e
        logger.info("Connected to %s", config.describe())
        return conn

    def close(self) -> None:
        """Close the cached connection; the next acquire() reconnects."""
        with self._lock:
            conn, self._conn = self._conn, None
        if conn is not None and conn.open:
            conn.close()
            logger.info("Closed connection to %s", self._config.describe() if self._config else "database")

    def run_query(self, query: str, params: Params = None):
        """Execute `query` with bound `params` and return the live cursor.

        The caller owns the cursor and should close it. On failure the
        cursor is closed and QueryError is raised.
        """
        with self._lock:
            cursor = self.acquire().cursor()
            logger.debug("Executing: %s", query)
            try:
                cursor.execute(query, params)
            except pymysql.MySQLError as e:
                cursor.close()
                raise _query_error(e) from e
            except (KeyError, TypeError, ValueError) as e:
                # Placeholder binding failed client-side (missing name, bad format)
                cursor.close()
                raise _binding_error(e) from e
            return cursor

    @contextmanager
    def _statement(self, query: str, params: Params):
        """Run a statement and close its cursor on exit."""
        with self._lock:
            cursor = self.run_query(query, params)
            try:
                yield cursor
            except pymysql.MySQLError as e:
                raise _query_error(e) from e
            finally:
                cursor.close()

    def fetch_one(self, query: str, params: Params = None) -> Optional[dict]:
        """First row as a dict, or None when the result set is empty."""
        with self._statement(query, params) as cur:
            return cur.fetchone()

    def fetch_all(self, query: str, params: Params = None) -> list[dict]:
        """All rows as a list of dicts."""
        with self._statement(query, params) as cur:
            return list(cur.fetchall())

    def execute(self, query: str, params: Params = None) -> int:
        """Run a data-modifying statement and return the affected row count.

        Counts matched rows (CLIENT.FOUND_ROWS), so an UPDATE that matches a
        row but leaves it unchanged still counts it.
        """
        with self._statement(query, params) as cur:
            return cur.rowcount

    def ping(self) -> bool:
        """Round-trip a trivial query."""
        self.fetch_one("SELECT 1 AS ok")
        return True


# --- Process-wide default gateway ---

_default: Optional[ConnectionGateway] = None
_default_lock = threading.Lock()


def get_gateway() -> ConnectionGateway:
    """Return the process-wide gateway, creating it on first call."""
    global _default
    with _default_lock:
        if _default is None:
            _default = ConnectionGateway()
        return _default


def reset_gateway() -> None:
    """Close and drop the process-wide gateway."""
    global _default
    with _default_lock:
        gateway, _default = _default, None
    if gateway is not None:
        gateway.close()


def query(sql: str, params: Params = None):
    return get_gateway().run_query(sql, params)


def fetch_one(sql: str, params: Params = None) -> Optional[dict]:
    return get_gateway().fetch_one(sql, params)


def fetch_all(sql: str, params: Params = None) -> list[dict]:
    return get_gateway().fetch_all(sql, params)


def execute(sql: str, params: Params = None) -> int:
    return get_gateway().execute(sql, params)
