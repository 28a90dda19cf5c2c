"""Load TableInfo records for resolution targets through a provider."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from db2crud.core.models import ResolutionTarget, TableInfo
from db2crud.core.table_resolver import resolve_table

if TYPE_CHECKING:
    from db2crud.helpers.helpers_logging import Reporter
    from db2crud.providers import SchemaProvider


def load_tables(
    provider: SchemaProvider,
    targets: Iterable[ResolutionTarget],
    reporter: Reporter,
) -> list[TableInfo]:
    """Resolve every target against one inventory and load its metadata.

    The inventory is queried once; a failure there propagates. Targets that
    do not resolve are reported and skipped.

    Args:
        provider: Open schema provider.
        targets: Entities with their schema/table hints.
        reporter: Receives warnings and per-table detail lines.

    Returns:
        One TableInfo per resolved target, in target order.
    """
    inventory = provider.load_inventory()
    reporter.detail(f"Inventory: {len(inventory)} tables/views")

    tables: list[TableInfo] = []
    for target in targets:
        entry = resolve_table(inventory, target.schema_hint, target.table_hint)
        if entry is None:
            reporter.warning(
                f"Could not resolve physical table for entity '{target.entity_hint}' "
                + f"(hint: {target.hint_label}). Skipping."
            )
            continue

        entity_name = target.entity_hint if target.entity_hint.strip() else entry.name
        key_column = provider.load_primary_key(entry.schema, entry.name)
        columns = provider.load_columns(entry.schema, entry.name)
        table = TableInfo(
            entity_name=entity_name,
            name=entry.name,
            schema=entry.schema,
            key_column=key_column,
            columns=columns,
            is_view=entry.is_view,
        )
        reporter.detail(
            f"[{table.qualified_name}] => {len(columns)} columns, "
            + f"PK={key_column or '(none)'} view={entry.is_view} -> Entity={entity_name}"
        )
        tables.append(table)

    return tables
