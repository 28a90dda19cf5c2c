"""Immutable records passed between discovery, resolution, loading and rendering."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ColumnInfo:
    """One physical column.

    ``cs_name`` is always a valid, non-keyword C# identifier.
    """

    name: str
    clr_type: str
    is_nullable: bool
    cs_name: str


@dataclass(frozen=True)
class InventoryEntry:
    """One table or view as listed by the catalog."""

    schema: str
    name: str
    is_view: bool = False

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


# The full table/view listing, loaded once per run.
TableInventory = tuple[InventoryEntry, ...]


@dataclass(frozen=True)
class TableInfo:
    """A resolved table or view with its key and columns.

    Composite primary keys are not represented: ``key_column`` holds the
    first key column by ordinal, or None when the table has no key.
    """

    entity_name: str
    name: str
    schema: str | None = None
    key_column: str | None = None
    columns: tuple[ColumnInfo, ...] = field(default_factory=tuple)
    is_view: bool = False

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


@dataclass(frozen=True)
class ResolutionTarget:
    """Entity name plus the schema/table hints used to find its table."""

    entity_hint: str
    schema_hint: str
    table_hint: str

    @property
    def hint_label(self) -> str:
        return f"{self.schema_hint}.{self.table_hint}" if self.schema_hint else self.table_hint
