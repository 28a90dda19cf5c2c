"""Schema providers: one per database family, selected by provider identifier.

A provider identifier is usually the EF provider package name
(``Microsoft.EntityFrameworkCore.SqlServer``). It selects the first
registered family whose name occurs in it, case-insensitively.

New families register a factory with :func:`register_provider`; dispatch
itself never changes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from db2crud.core.errors import UnsupportedProviderError

if TYPE_CHECKING:
    from db2crud.core.models import ColumnInfo, TableInventory
    from db2crud.helpers.helpers_logging import Reporter


class SchemaProvider(Protocol):
    """Catalog access needed to resolve and describe tables."""

    def load_inventory(self) -> TableInventory:
        """List every table and view. Failures propagate."""
        ...

    def load_primary_key(self, schema: str, table: str) -> str | None:
        """Return the first primary-key column, or None. Never raises."""
        ...

    def load_columns(self, schema: str, table: str) -> tuple[ColumnInfo, ...]:
        """Return columns in ordinal order, possibly empty. Never raises."""
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...


# Factory: (connection string, reporter) -> provider
ProviderFactory = Callable[[str, "Reporter"], SchemaProvider]

_REGISTRY: dict[str, ProviderFactory] = {}


def register_provider(family: str, factory: ProviderFactory) -> None:
    """Register (or replace) the factory for a provider family."""
    _REGISTRY[family.lower()] = factory


def registered_families() -> list[str]:
    """Registered family names in registration order."""
    return list(_REGISTRY)


def find_family(provider: str) -> str:
    """Return the registered family matching ``provider``.

    Raises:
        UnsupportedProviderError: If no family name occurs in ``provider``.
    """
    lowered = (provider or "").lower()
    for family in _REGISTRY:
        if family in lowered:
            return family
    known = ", ".join(_REGISTRY) or "none"
    raise UnsupportedProviderError(f"Provider '{provider}' is not supported (known: {known})")


def create_provider(provider: str, connection: str, reporter: Reporter) -> SchemaProvider:
    """Build the provider for ``provider``, opening its connection.

    Raises:
        UnsupportedProviderError: If the identifier matches no family.
        NotImplementedError: If the family is registered but not implemented.
    """
    return _REGISTRY[find_family(provider)](connection, reporter)


def _register_builtin_providers() -> None:
    from db2crud.providers.sqlserver import SqlServerProvider
    from db2crud.providers.stubs import mysql_provider, postgres_provider

    register_provider("sqlserver", SqlServerProvider.connect)
    register_provider("npgsql", postgres_provider)
    register_provider("mysql", mysql_provider)


_register_builtin_providers()

__all__ = [
    "ProviderFactory",
    "SchemaProvider",
    "create_provider",
    "find_family",
    "register_provider",
    "registered_families",
]
