"""SQL Server catalog introspection through pymssql."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from db2crud.core.models import ColumnInfo, InventoryEntry
from db2crud.helpers.connection_string import parse_connection_string
from db2crud.helpers.identifiers import to_identifier
from db2crud.helpers.mssql_loader import create_mssql_connection
from db2crud.helpers.type_mapper import map_sql_server_type

if TYPE_CHECKING:
    from db2crud.core.models import TableInventory
    from db2crud.helpers.connection_types import DbConnection
    from db2crud.helpers.helpers_logging import Reporter


# ---------------------------------------------------------------------------
# Catalog queries
# ---------------------------------------------------------------------------

INVENTORY_QUERY = """
SELECT
    TABLE_SCHEMA,
    TABLE_NAME,
    CASE WHEN TABLE_TYPE = 'VIEW' THEN 1 ELSE 0 END AS IS_VIEW
FROM INFORMATION_SCHEMA.TABLES
WHERE TABLE_TYPE IN ('BASE TABLE', 'VIEW')
ORDER BY TABLE_SCHEMA, TABLE_NAME
"""

PRIMARY_KEY_QUERY = """
SELECT kcu.COLUMN_NAME
FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE kcu
  ON kcu.CONSTRAINT_SCHEMA = tc.CONSTRAINT_SCHEMA
 AND kcu.CONSTRAINT_NAME = tc.CONSTRAINT_NAME
WHERE tc.CONSTRAINT_TYPE = 'PRIMARY KEY'
  AND tc.TABLE_SCHEMA = %s
  AND tc.TABLE_NAME = %s
ORDER BY kcu.ORDINAL_POSITION
"""

COLUMNS_QUERY = """
SELECT
    COLUMN_NAME,
    IS_NULLABLE,
    DATA_TYPE,
    CHARACTER_MAXIMUM_LENGTH,
    NUMERIC_PRECISION,
    NUMERIC_SCALE
FROM INFORMATION_SCHEMA.COLUMNS
WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s
ORDER BY ORDINAL_POSITION
"""

NATIVE_COLUMNS_QUERY = """
SELECT
    c.name AS COLUMN_NAME,
    c.is_nullable AS IS_NULLABLE,
    t.name AS DATA_TYPE,
    c.max_length AS CHARACTER_MAXIMUM_LENGTH,
    c.precision AS NUMERIC_PRECISION,
    c.scale AS NUMERIC_SCALE
FROM sys.columns c
JOIN sys.types t   ON t.user_type_id = c.user_type_id
JOIN sys.objects o ON o.object_id    = c.object_id
JOIN sys.schemas s ON s.schema_id    = o.schema_id
WHERE o.type IN ('U', 'V')
  AND s.name = %s AND o.name = %s
ORDER BY c.column_id
"""


def _optional_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _is_nullable(value: object) -> bool:
    """INFORMATION_SCHEMA reports 'YES'/'NO'; sys.columns reports a bit."""
    if isinstance(value, str):
        return value.strip().upper() == "YES"
    return bool(value)


def column_from_row(row: dict[str, Any]) -> ColumnInfo:
    """Build a ColumnInfo from a catalog row (either query shape)."""
    name = str(row["COLUMN_NAME"])
    nullable = _is_nullable(row.get("IS_NULLABLE"))
    data_type = row.get("DATA_TYPE")
    return ColumnInfo(
        name=name,
        clr_type=map_sql_server_type(
            str(data_type) if data_type is not None else None,
            nullable,
            _optional_int(row.get("CHARACTER_MAXIMUM_LENGTH")),
            _optional_int(row.get("NUMERIC_PRECISION")),
            _optional_int(row.get("NUMERIC_SCALE")),
        ),
        is_nullable=nullable,
        cs_name=to_identifier(name),
    )


class SqlServerProvider:
    """Schema provider for SQL Server.

    One connection serves the inventory query and every per-table query.
    Per-table failures are reported as warnings and read as "no rows".
    """

    def __init__(self, conn: DbConnection, reporter: Reporter) -> None:
        self._conn = conn
        self._reporter = reporter

    @classmethod
    def connect(cls, connection: str, reporter: Reporter) -> SqlServerProvider:
        """Parse ``connection`` and open a pymssql connection."""
        params = parse_connection_string(connection)
        reporter.detail(f"Connecting to SQL Server: {params.describe()}")
        return cls(create_mssql_connection(params), reporter)

    def close(self) -> None:
        self._conn.close()

    def _fetch(self, query: str, args: tuple[str, ...] | None = None) -> list[dict[str, Any]]:
        cursor = self._conn.cursor(as_dict=True)
        try:
            cursor.execute(query, args)
            return cast(list[dict[str, Any]], cursor.fetchall())
        finally:
            cursor.close()

    def load_inventory(self) -> TableInventory:
        """List all base tables and views, ordered by schema and name."""
        rows = self._fetch(INVENTORY_QUERY)
        return tuple(
            InventoryEntry(
                schema=str(row["TABLE_SCHEMA"]),
                name=str(row["TABLE_NAME"]),
                is_view=_optional_int(row.get("IS_VIEW")) == 1,
            )
            for row in rows
        )

    def load_primary_key(self, schema: str, table: str) -> str | None:
        """Return the first primary-key column by ordinal, or None.

        Composite keys are not supported; the extra columns are reported.
        """
        try:
            rows = self._fetch(PRIMARY_KEY_QUERY, (schema, table))
        except Exception as e:
            self._reporter.warning(f"Error getting PK for [{schema}.{table}]: {e}")
            return None

        if not rows:
            return None
        key_columns = [str(row["COLUMN_NAME"]) for row in rows]
        if len(key_columns) > 1:
            self._reporter.warning(
                f"Composite primary key on [{schema}.{table}] ({', '.join(key_columns)}); "
                + f"using '{key_columns[0]}' only"
            )
        return key_columns[0]

    def _load_columns_via(self, query: str, source: str, schema: str, table: str) -> list[ColumnInfo]:
        try:
            rows = self._fetch(query, (schema, table))
        except Exception as e:
            self._reporter.warning(f"Error via {source} for [{schema}.{table}]: {e}")
            return []
        return [column_from_row(row) for row in rows]

    def load_columns(self, schema: str, table: str) -> tuple[ColumnInfo, ...]:
        """Load columns from INFORMATION_SCHEMA, falling back to sys.columns."""
        columns = self._load_columns_via(COLUMNS_QUERY, "INFORMATION_SCHEMA", schema, table)
        if not columns:
            columns = self._load_columns_via(NATIVE_COLUMNS_QUERY, "sys.columns", schema, table)
        if not columns:
            self._reporter.warning(f"No columns found for [{schema}.{table}]")
        return tuple(columns)
