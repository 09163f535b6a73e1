"""MySQL access helper: one shared connection, parameterized query helpers."""

from .config import ConnectionConfig
from .errors import ConfigurationError, DatabaseConnectionError, GatewayError, QueryError
from .gateway import (
    ConnectionGateway,
    execute,
    fetch_all,
    fetch_one,
    get_gateway,
    query,
    reset_gateway,
)

__all__ = [
    "ConfigurationError",
    "ConnectionConfig",
    "ConnectionGateway",
    "DatabaseConnectionError",
    "GatewayError",
    "QueryError",
    "execute",
    "fetch_all",
    "fetch_one",
    "get_gateway",
    "query",
    "reset_gateway",
]
