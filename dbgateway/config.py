"""Connection settings read from the environment."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from pymysql.charset import charset_by_name

from .errors import ConfigurationError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3306
DEFAULT_DATABASE = "db_name"
DEFAULT_CHARSET = "utf8mb4"
DEFAULT_USER = "db_user_login"


@dataclass(frozen=True)
class ConnectionConfig:
    """Credentials and target for the shared MySQL connection."""

    password: str = field(repr=False)
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    database: str = DEFAULT_DATABASE
    charset: str = DEFAULT_CHARSET
    user: str = DEFAULT_USER

    def __post_init__(self):
        if charset_by_name(self.charset) is None:
            raise ConfigurationError(f"Unknown character set {self.charset!r} (DB_CHARSET)")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ConnectionConfig":
        """Build config from DB_* environment variables.

        DB_PASS must be present (an empty value is accepted). Empty values
        for the other variables fall back to their defaults.
        """
        env = os.environ if environ is None else environ

        password = env.get("DB_PASS")
        if password is None:
            raise ConfigurationError("Database password is not set in environment variables (DB_PASS)")

        raw_port = env.get("DB_PORT") or str(DEFAULT_PORT)
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigurationError(f"DB_PORT must be an integer, got {raw_port!r}") from None

        return cls(
            password=password,
            host=env.get("DB_HOST") or DEFAULT_HOST,
            port=port,
            database=env.get("DB_NAME") or DEFAULT_DATABASE,
            charset=env.get("DB_CHARSET") or DEFAULT_CHARSET,
            user=env.get("DB_USER") or DEFAULT_USER,
        )

    def connect_kwargs(self) -> dict:
        """Keyword arguments for pymysql.connect()."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "charset": self.charset,
        }

    def describe(self) -> str:
        """Log-safe target description (no password)."""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"
