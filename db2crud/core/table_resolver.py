"""Resolve entity hints to physical tables in the cached inventory.

Resolution runs through ordered tiers and stops at the first tier with a
single acceptable candidate:

1. exact name (case-sensitive), schema exact when hinted
2. case-insensitive name and schema
3. singular/plural variations of the name, in generation order
4. schema not hinted: every entry matching the name or a variation,
   tie-broken by exact name, then base table over view, then inventory order

Without a schema hint, several hits in tiers 1-3 (the same name in more than
one schema) defer to tier 4. With a schema hint, the first hit in catalog
order is taken.

Returns None when nothing matches; callers warn and skip the entity.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from db2crud.core.models import InventoryEntry
from db2crud.helpers.pluralization import name_variations


def trim_brackets(value: str | None) -> str:
    """Strip whitespace and SQL Server ``[...]`` quoting from a hint."""
    if not value or not value.strip():
        return ""
    return value.strip().lstrip("[").rstrip("]")


def _first(
    inventory: Iterable[InventoryEntry],
    predicate: Callable[[InventoryEntry], bool],
) -> InventoryEntry | None:
    return next((entry for entry in inventory if predicate(entry)), None)


def _schema_matches_ci(entry: InventoryEntry, schema: str) -> bool:
    return not schema or entry.schema.lower() == schema.lower()


class _Ambiguous(Exception):
    """A tier matched more than one entry and no schema was hinted."""


def _single(candidates: list[InventoryEntry], schema: str) -> InventoryEntry | None:
    if not candidates:
        return None
    if len(candidates) > 1 and not schema:
        raise _Ambiguous
    return candidates[0]


def _match_exact(
    inventory: tuple[InventoryEntry, ...], schema: str, table: str
) -> InventoryEntry | None:
    return _single(
        [e for e in inventory if e.name == table and (not schema or e.schema == schema)],
        schema,
    )


def _match_case_insensitive(
    inventory: tuple[InventoryEntry, ...], schema: str, table: str
) -> InventoryEntry | None:
    lowered = table.lower()
    return _single(
        [e for e in inventory if e.name.lower() == lowered and _schema_matches_ci(e, schema)],
        schema,
    )


def _match_variations(
    inventory: tuple[InventoryEntry, ...], schema: str, variations: list[str]
) -> InventoryEntry | None:
    for variation in variations:
        match = _match_case_insensitive(inventory, schema, variation)
        if match is not None:
            return match
    return None


def _match_any_schema(
    inventory: tuple[InventoryEntry, ...], table: str, variations: list[str]
) -> InventoryEntry | None:
    wanted = {table.lower(), *(v.lower() for v in variations)}
    candidates = [e for e in inventory if e.name.lower() in wanted]
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    lowered = table.lower()
    exact_name = _first(candidates, lambda e: e.name.lower() == lowered)
    if exact_name is not None:
        return exact_name
    base_table = _first(candidates, lambda e: not e.is_view)
    if base_table is not None:
        return base_table
    return candidates[0]


def resolve_table(
    inventory: tuple[InventoryEntry, ...],
    schema_hint: str | None,
    table_hint: str | None,
) -> InventoryEntry | None:
    """Find the inventory entry that best matches the hints.

    Args:
        inventory: Tables and views in catalog order.
        schema_hint: Schema to constrain the match, or empty for any schema.
        table_hint: Table, view or entity name to look for.

    Returns:
        The chosen entry, or None when no tier matches.
    """
    schema = trim_brackets(schema_hint)
    table = trim_brackets(table_hint)
    if not table:
        return None

    variations = name_variations(table)
    try:
        match = _match_exact(inventory, schema, table)
        if match is not None:
            return match

        match = _match_case_insensitive(inventory, schema, table)
        if match is not None:
            return match

        match = _match_variations(inventory, schema, variations)
        if match is not None:
            return match
    except _Ambiguous:
        pass

    if not schema:
        return _match_any_schema(inventory, table, variations)
    return None
