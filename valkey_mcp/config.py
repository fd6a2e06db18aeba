"""
valkey_mcp/config.py
====================

Runtime configuration for the Valkey MCP server.

Values are read from the process environment after ``load_dotenv()`` has
merged any local ``.env`` file, so a developer can keep connection details
out of the shell history::

    VALKEY_URL=valkey://localhost:6379
    VALKEY_PASSWORD=secret
    VALKEY_DB=0

URL schemes
-----------
Valkey speaks the same wire protocol as Redis, and the client library only
understands ``redis://`` / ``rediss://``.  ``Config.client_url`` rewrites the
Valkey schemes before the URL is handed to the client.
"""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()

DEFAULT_VALKEY_URL = "valkey://localhost:6379"
MAX_DB_INDEX = 15

_SCHEME_MAP = {
    "valkey": "redis",
    "valkeys": "rediss",
    "redis": "redis",
    "rediss": "rediss",
}


class ConfigError(ValueError):
    """Raised when a configuration value is malformed or out of range."""


def validate_valkey_url(url: str) -> None:
    """Check that ``url`` is a usable Valkey connection URL.

    Raises
    ------
    ConfigError
        If the URL is empty, uses an unsupported scheme, or has no host.
    """
    if not url:
        raise ConfigError("valkey URL cannot be empty")

    parsed = urlparse(url)
    if parsed.scheme not in _SCHEME_MAP:
        raise ConfigError(
            f"invalid valkey URL scheme {parsed.scheme!r}: "
            "must be one of valkey, valkeys, redis, rediss"
        )
    if not parsed.hostname:
        raise ConfigError("valkey URL must include a host")


def validate_db_index(db: int) -> None:
    """Check that ``db`` is a logical database index between 0 and 15."""
    if isinstance(db, bool) or not isinstance(db, int):
        raise ConfigError(f"database index must be an integer, got {db!r}")
    if db < 0 or db > MAX_DB_INDEX:
        raise ConfigError(f"database index must be between 0 and {MAX_DB_INDEX}, got {db}")


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass
class Config:
    """Configuration for the Valkey MCP server."""
    valkey_url: str = DEFAULT_VALKEY_URL
    valkey_password: Optional[str] = None
    valkey_db: int = 0

    # Connectivity check applied once at startup and by the ping tool
    ping_timeout: float = 5.0

    server_name: str = "valkey-mcp-server"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            valkey_url=os.getenv("VALKEY_URL", DEFAULT_VALKEY_URL),
            valkey_password=os.getenv("VALKEY_PASSWORD") or None,
            valkey_db=_int_env("VALKEY_DB", "0"),
            ping_timeout=_float_env("VALKEY_PING_TIMEOUT", "5"),
            server_name=os.getenv("MCP_SERVER_NAME", "valkey-mcp-server"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> None:
        validate_valkey_url(self.valkey_url)
        validate_db_index(self.valkey_db)
        if self.ping_timeout <= 0:
            raise ConfigError("ping timeout must be positive")

    @property
    def client_url(self) -> str:
        """The connection URL with Valkey schemes mapped to their Redis equivalents."""
        parsed = urlparse(self.valkey_url)
        scheme = _SCHEME_MAP.get(parsed.scheme, parsed.scheme)
        return parsed._replace(scheme=scheme).geturl()
