"""Typed errors raised by the gateway.

Driver exceptions are never replaced: each wrapper keeps the driver's
message and numeric code, and the original exception is chained as
``__cause__``.
"""

from typing import Optional


class GatewayError(Exception):
    """Base class for every error the gateway raises."""

    def __init__(self, message: str, code: Optional[int] = None, driver_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.driver_message = driver_message if driver_message is not None else message

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.message} (code {self.code})"


class ConfigurationError(GatewayError, ValueError):
    """Required connection setting is missing or invalid."""


class DatabaseConnectionError(GatewayError):
    """The driver could not open a connection."""


class QueryError(GatewayError):
    """The driver rejected or failed to run a statement."""


def driver_error_details(exc: Exception) -> tuple[str, Optional[int]]:
    """Return (message, code) from a PyMySQL exception.

    PyMySQL raises with ``args == (errno, errmsg)``; anything else falls back
    to ``str(exc)`` and no code.
    """
    args = getattr(exc, "args", ())
    if len(args) >= 2 and isinstance(args[0], int):
        return str(args[1]), args[0]
    return str(exc), None
