"""Typing protocols for the DB-API connection interface we use.

Only the calls made by the providers are described here. Used for type
checking so that providers can be exercised with mock connections.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol


class DbCursor(Protocol):
    """Cursor interface (pymssql-compatible)."""

    def execute(self, query: str, args: Sequence[object] | None = None) -> None:
        """Execute a SQL query."""
        ...

    def fetchall(self) -> list[Any]:
        """Fetch all remaining rows."""
        ...

    def close(self) -> None:
        """Close the cursor."""
        ...


class DbConnection(Protocol):
    """Connection interface (pymssql-compatible)."""

    def cursor(self, *, as_dict: bool = False) -> DbCursor:
        """Create a cursor. Use as_dict=True for dict rows."""
        ...

    def close(self) -> None:
        """Close the connection."""
        ...


class MSSQLModule(Protocol):
    """Type stub for the pymssql module interface."""

    def connect(self, **kwargs: Any) -> DbConnection:  # noqa: ANN401
        """Create a new MSSQL connection."""
        ...
