# pyright: reportMissingImports=false
"""Single import point for pymssql.

All modules should import the driver from here instead of importing pymssql
directly, so a missing driver surfaces as one clear error.

Usage:
    from db2crud.helpers.mssql_loader import create_mssql_connection

    conn = create_mssql_connection(params)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from db2crud.helpers.connection_string import ConnectionParams
    from db2crud.helpers.connection_types import DbConnection, MSSQLModule

# ---------------------------------------------------------------------------
# Runtime import
# ---------------------------------------------------------------------------

_mssql_module: MSSQLModule | None = None

try:
    import pymssql as _pymssql_raw

    _mssql_module = cast("MSSQLModule", _pymssql_raw)
except ImportError:
    pass


_INSTALL_HINT = (
    "pymssql is not installed. Install it with: pip install pymssql\n"
    "Note: pymssql requires FreeTDS. On macOS: brew install freetds"
)


class MSSQLNotAvailableError(Exception):
    """Raised when pymssql is not installed but MSSQL operations are requested."""


def ensure_pymssql() -> MSSQLModule:
    """Return the pymssql module or raise with a helpful message.

    Raises:
        MSSQLNotAvailableError: If pymssql is not installed.
    """
    if _mssql_module is None:
        raise MSSQLNotAvailableError(_INSTALL_HINT)
    return _mssql_module


def create_mssql_connection(params: ConnectionParams) -> DbConnection:
    """Open a pymssql connection from parsed connection parameters.

    Only the keyword arguments that are set are forwarded, so a trusted
    connection goes out without user/password.

    Raises:
        MSSQLNotAvailableError: If pymssql is not installed.
    """
    mod = ensure_pymssql()
    kwargs: dict[str, Any] = {
        "server": params.host,
        "port": params.port,
    }
    if params.database:
        kwargs["database"] = params.database
    if params.user is not None:
        kwargs["user"] = params.user
    if params.password is not None:
        kwargs["password"] = params.password
    if params.login_timeout is not None:
        kwargs["login_timeout"] = params.login_timeout
    return mod.connect(**kwargs)


__all__ = [
    "MSSQLNotAvailableError",
    "create_mssql_connection",
    "ensure_pymssql",
]
