"""Shared fixtures for the db2crud test suite.

Provides a recording reporter, a scripted fake DB-API connection and a
sample .NET project directory with a reverse-engineered DbContext.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from db2crud.core.models import ColumnInfo, InventoryEntry, TableInfo

# ---------------------------------------------------------------------------
# Reporter
# ---------------------------------------------------------------------------


@dataclass
class RecordingReporter:
    """Reporter that keeps messages per severity."""

    infos: list[str] = field(default_factory=list)
    successes: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    details: list[str] = field(default_factory=list)

    def info(self, msg: str) -> None:
        self.infos.append(msg)

    def success(self, msg: str) -> None:
        self.successes.append(msg)

    def warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def error(self, msg: str) -> None:
        self.errors.append(msg)

    def detail(self, msg: str) -> None:
        self.details.append(msg)


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


# ---------------------------------------------------------------------------
# Fake pymssql connection
# ---------------------------------------------------------------------------

# Rows for a query, or an exception to raise from execute()
Script = list[tuple[str, "list[dict[str, Any]] | Exception"]]


class FakeCursor:
    """Cursor answering queries by the first matching script marker."""

    def __init__(self, conn: FakeConnection) -> None:
        self._conn = conn
        self._rows: list[dict[str, Any]] = []
        self.closed = False

    def execute(self, query: str, args: Any = None) -> None:  # noqa: ANN401
        self._conn.executed.append((query, args))
        for marker, outcome in self._conn.script:
            if marker in query:
                if isinstance(outcome, Exception):
                    raise outcome
                self._rows = outcome
                return
        self._rows = []

    def fetchall(self) -> list[dict[str, Any]]:
        return list(self._rows)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    """Connection whose cursors follow ``script``.

    ``script`` entries are ``(marker, rows_or_exception)``; the first
    marker found in the SQL text decides the outcome.
    """

    def __init__(self, script: Script | None = None) -> None:
        self.script: Script = script or []
        self.executed: list[tuple[str, Any]] = []
        self.closed = False

    def cursor(self, *, as_dict: bool = False) -> FakeCursor:
        assert as_dict, "providers must request dict rows"
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def make_connection() -> Callable[..., FakeConnection]:
    return FakeConnection


# ---------------------------------------------------------------------------
# In-memory provider
# ---------------------------------------------------------------------------


class StaticProvider:
    """SchemaProvider serving fixed metadata."""

    def __init__(
        self,
        inventory: tuple[InventoryEntry, ...],
        keys: dict[str, str | None] | None = None,
        columns: dict[str, tuple[ColumnInfo, ...]] | None = None,
    ) -> None:
        self.inventory = inventory
        self.keys = keys or {}
        self.columns = columns or {}
        self.inventory_loads = 0
        self.closed = False

    def load_inventory(self) -> tuple[InventoryEntry, ...]:
        self.inventory_loads += 1
        return self.inventory

    def load_primary_key(self, schema: str, table: str) -> str | None:
        return self.keys.get(f"{schema}.{table}")

    def load_columns(self, schema: str, table: str) -> tuple[ColumnInfo, ...]:
        return self.columns.get(f"{schema}.{table}", ())

    def close(self) -> None:
        self.closed = True


def col(name: str, clr_type: str = "string", nullable: bool = False, cs_name: str | None = None) -> ColumnInfo:
    """Shorthand ColumnInfo builder."""
    return ColumnInfo(name=name, clr_type=clr_type, is_nullable=nullable, cs_name=cs_name or name)


def table(
    entity: str,
    name: str | None = None,
    *,
    schema: str = "dbo",
    key: str | None = None,
    columns: tuple[ColumnInfo, ...] = (),
    is_view: bool = False,
) -> TableInfo:
    """Shorthand TableInfo builder."""
    return TableInfo(
        entity_name=entity,
        name=name or entity,
        schema=schema,
        key_column=key,
        columns=columns,
        is_view=is_view,
    )


# ---------------------------------------------------------------------------
# Sample project
# ---------------------------------------------------------------------------

SAMPLE_DBCONTEXT = """\
using Microsoft.EntityFrameworkCore;

namespace Store.Data;

public partial class StoreDbContext : DbContext
{
    public virtual DbSet<Category> Categories { get; set; }

    public virtual DbSet<Store.Entities.Product> Products { get; set; }

    public virtual DbSet<Person> People { get; set; }

    public virtual DbSet<SalesSummary> SalesSummaries { get; set; }

    protected override void OnModelCreating(ModelBuilder modelBuilder)
    {
        modelBuilder.Entity<Category>(entity =>
        {
            entity.HasKey(e => e.CategoryId);
        });

        modelBuilder.Entity<Product>(entity =>
        {
            entity.ToTable("Products", "sales");
            entity.Property(e => e.Name).HasMaxLength(100);
        });

        modelBuilder.Entity<SalesSummary>(entity =>
        {
            entity.HasNoKey();
            entity.ToView("vw_SalesSummary");
        });

        OnModelCreatingPartial(modelBuilder);
    }

    partial void OnModelCreatingPartial(ModelBuilder modelBuilder);
}
"""

SAMPLE_CSPROJ = """\
<Project Sdk="Microsoft.NET.Sdk.Web">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
    <RootNamespace>Store.Api</RootNamespace>
  </PropertyGroup>
</Project>
"""


@pytest.fixture()
def sample_project(tmp_path: Path) -> Path:
    """A .NET project directory with ``Data/StoreDbContext.cs`` and a csproj."""
    project = tmp_path / "Store.Api"
    (project / "Data").mkdir(parents=True)
    (project / "Data" / "StoreDbContext.cs").write_text(SAMPLE_DBCONTEXT)
    (project / "Store.Api.csproj").write_text(SAMPLE_CSPROJ)
    return project


@pytest.fixture()
def sample_provider() -> StaticProvider:
    """Provider matching the sample DbContext (People is missing on purpose)."""
    return StaticProvider(
        inventory=(
            InventoryEntry("dbo", "Categories"),
            InventoryEntry("dbo", "vw_SalesSummary", is_view=True),
            InventoryEntry("sales", "Products"),
        ),
        keys={"dbo.Categories": "CategoryId", "sales.Products": "ProductId"},
        columns={
            "dbo.Categories": (
                col("CategoryId", "int"),
                col("Name"),
            ),
            "sales.Products": (
                col("ProductId", "int"),
                col("Name"),
                col("Price", "decimal?", nullable=True),
                col("class", "string", cs_name="class_"),
            ),
            "dbo.vw_SalesSummary": (
                col("Total", "decimal"),
            ),
        },
    )
