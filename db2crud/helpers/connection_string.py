"""Parse ADO.NET-style connection strings into driver parameters.

Example:
    >>> parse_connection_string("Server=db,1444;Database=Store;User Id=sa;Password=x")
    ConnectionParams(host='db', port=1444, database='Store', user='sa', ...)

Values may reference environment variables as ``${MSSQL_PASSWORD}``; they are
expanded before parsing so secrets can stay out of ``db2crud.yaml``. A bare
``$`` is literal, so passwords like ``Pa$$w0rd`` pass through unchanged.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from db2crud.core.errors import ConfigError, MissingEnvironmentVariableError

DEFAULT_MSSQL_PORT = 1433

_ENV_REFERENCE_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

_HOST_KEYS = frozenset({"server", "data source", "address", "addr", "network address"})
_DATABASE_KEYS = frozenset({"database", "initial catalog"})
_USER_KEYS = frozenset({"user id", "uid", "user", "username"})
_PASSWORD_KEYS = frozenset({"password", "pwd"})
_TIMEOUT_KEYS = frozenset({"connect timeout", "connection timeout", "timeout"})
_TRUSTED_KEYS = frozenset({"trusted_connection", "integrated security"})

_LOCAL_HOSTS = frozenset({".", "(local)", "(localdb)"})
_TRUE_VALUES = frozenset({"true", "yes", "sspi", "1"})


@dataclass(frozen=True)
class ConnectionParams:
    """Driver-level connection parameters."""

    host: str
    port: int = DEFAULT_MSSQL_PORT
    database: str = ""
    user: str | None = None
    password: str | None = None
    login_timeout: int | None = None
    trusted: bool = False

    def describe(self) -> str:
        """Return ``host:port/database`` without credentials."""
        return f"{self.host}:{self.port}/{self.database}"


def expand_env_references(value: str) -> str:
    """Expand ``${VAR}`` references, failing on unset variables.

    Raises:
        MissingEnvironmentVariableError: If a referenced variable is not set.
    """
    missing = sorted(
        {
            match.group(1)
            for match in _ENV_REFERENCE_PATTERN.finditer(value)
            if os.environ.get(match.group(1)) is None
        }
    )
    if missing:
        raise MissingEnvironmentVariableError(
            "Connection string references unset environment variable(s): "
            + ", ".join(missing)
        )
    return _ENV_REFERENCE_PATTERN.sub(lambda m: os.environ[m.group(1)], value)


def _split_pairs(conn: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for part in conn.split(";"):
        if not part.strip():
            continue
        key, sep, value = part.partition("=")
        if not sep:
            raise ConfigError(f"Malformed connection string segment: '{part.strip()}'")
        pairs[key.strip().lower()] = value.strip()
    return pairs


def _parse_server(raw: str) -> tuple[str, int | None]:
    server = raw.strip()
    if server.lower().startswith("tcp:"):
        server = server[4:]

    port: int | None = None
    host, sep, port_text = server.partition(",")
    if sep:
        try:
            port = int(port_text.strip())
        except ValueError as exc:
            raise ConfigError(f"Invalid port in server '{raw}'") from exc

    host = host.strip()
    if host.lower() in _LOCAL_HOSTS:
        host = "localhost"
    elif "\\" in host:
        base, _, instance = host.partition("\\")
        if base.lower() in _LOCAL_HOSTS:
            host = f"localhost\\{instance}"
    return host, port


def parse_connection_string(conn: str) -> ConnectionParams:
    """Parse a ``Key=Value;`` connection string.

    Keys are matched case-insensitively and unknown keys (for example
    ``TrustServerCertificate``) are ignored.

    Raises:
        ConfigError: If the string is malformed or names no server.
        MissingEnvironmentVariableError: If an env reference is unset.
    """
    pairs = _split_pairs(expand_env_references(conn))

    host: str | None = None
    port: int | None = None
    values: dict[str, str] = {}
    for key, value in pairs.items():
        if key in _HOST_KEYS:
            host, port = _parse_server(value)
        elif key in _DATABASE_KEYS:
            values["database"] = value
        elif key in _USER_KEYS:
            values["user"] = value
        elif key in _PASSWORD_KEYS:
            values["password"] = value
        elif key in _TIMEOUT_KEYS:
            values["timeout"] = value
        elif key in _TRUSTED_KEYS:
            values["trusted"] = value
        elif key == "port":
            values["port"] = value

    if not host:
        raise ConfigError("Connection string does not specify a server")

    if port is None and "port" in values:
        try:
            port = int(values["port"])
        except ValueError as exc:
            raise ConfigError(f"Invalid port '{values['port']}'") from exc

    login_timeout: int | None = None
    if "timeout" in values:
        try:
            login_timeout = int(values["timeout"])
        except ValueError as exc:
            raise ConfigError(f"Invalid connect timeout '{values['timeout']}'") from exc

    trusted = values.get("trusted", "").lower() in _TRUE_VALUES
    return ConnectionParams(
        host=host,
        port=port if port is not None else DEFAULT_MSSQL_PORT,
        database=values.get("database", ""),
        user=None if trusted else values.get("user"),
        password=None if trusted else values.get("password"),
        login_timeout=login_timeout,
        trusted=trusted,
    )
