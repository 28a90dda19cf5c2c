"""Discover entities and table hints in a reverse-engineered DbContext.

Entity names come from ``DbSet<T> Name { get; set; }`` properties. Table
hints come from ``.ToTable(...)`` / ``.ToView(...)`` calls inside the
``modelBuilder.Entity<T>(...)`` configuration block of each entity.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from pathlib import Path

from db2crud.core.errors import ModelSourceNotFoundError
from db2crud.core.models import ResolutionTarget

_DBSET_PATTERN = re.compile(
    r"DbSet<\s*([A-Za-z_][A-Za-z0-9_.]*)\s*>\s*\w+\s*{",
    re.MULTILINE,
)

_ENTITY_BLOCK_START = re.compile(r"\bEntity<\s*([A-Za-z_][A-Za-z0-9_.]*)\s*>")

_MAPPING_CALL = re.compile(
    r"\.To(?P<kind>Table|View)\(\s*"
    r"\"(?P<table>[^\"]+)\""
    r"(?:\s*,\s*(?:schema\s*:\s*)?\"(?P<schema>[^\"]*)\")?"
)


def _short_name(type_name: str) -> str:
    return type_name.rsplit(".", 1)[-1]


def extract_entity_names(model_source: str) -> list[str]:
    """Return distinct entity type names in first-seen order.

    Namespace qualifiers (``Store.Entities.Product``) are stripped.
    """
    names = (_short_name(m.group(1)) for m in _DBSET_PATTERN.finditer(model_source))
    return list(dict.fromkeys(names))


def read_model_source(path: Path) -> str:
    """Read the DbContext file.

    Raises:
        ModelSourceNotFoundError: If the file is missing or unreadable.
    """
    try:
        return path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise ModelSourceNotFoundError(f"DbContext file not found: {path}") from exc
    except OSError as exc:
        raise ModelSourceNotFoundError(f"Cannot read DbContext file {path}: {exc}") from exc


def _entity_blocks(model_source: str) -> dict[str, list[str]]:
    """Split the source into ``Entity<T>`` configuration blocks keyed by short name."""
    starts = list(_ENTITY_BLOCK_START.finditer(model_source))
    blocks: dict[str, list[str]] = {}
    for index, match in enumerate(starts):
        end = starts[index + 1].start() if index + 1 < len(starts) else len(model_source)
        name = _short_name(match.group(1))
        blocks.setdefault(name, []).append(model_source[match.end():end])
    return blocks


def resolve_targets(model_source: str, entity_names: Iterable[str]) -> list[ResolutionTarget]:
    """Build a resolution target for each entity.

    An explicit ``ToTable``/``ToView`` mapping supplies the literal table and
    optional schema. Without one the hint defaults to the entity name with no
    schema, leaving the rest to the table resolver.
    """
    blocks = _entity_blocks(model_source)
    targets: list[ResolutionTarget] = []
    for entity in entity_names:
        target = ResolutionTarget(entity_hint=entity, schema_hint="", table_hint=entity)
        for block in blocks.get(entity, []):
            mapping = _MAPPING_CALL.search(block)
            if mapping:
                target = ResolutionTarget(
                    entity_hint=entity,
                    schema_hint=mapping.group("schema") or "",
                    table_hint=mapping.group("table"),
                )
                break
        targets.append(target)
    return targets


def parse_table_reference(reference: str) -> tuple[str, str]:
    """Split ``schema.table`` (or bare ``table``) into ``(schema, table)``."""
    schema, sep, table = reference.strip().rpartition(".")
    if not sep:
        return "", reference.strip()
    return schema, table


def apply_overrides(
    targets: Iterable[ResolutionTarget],
    overrides: Mapping[str, str],
) -> list[ResolutionTarget]:
    """Replace discovered hints with explicit ``entity -> schema.table`` mappings.

    Entity names are matched case-insensitively.
    """
    by_entity = {entity.lower(): ref for entity, ref in overrides.items()}
    result: list[ResolutionTarget] = []
    for target in targets:
        reference = by_entity.get(target.entity_hint.lower())
        if reference:
            schema, table = parse_table_reference(reference)
            target = ResolutionTarget(target.entity_hint, schema, table)
        result.append(target)
    return result


def filter_included(entity_names: Iterable[str], include: Iterable[str]) -> list[str]:
    """Keep only entities named in ``include`` (case-insensitive); empty keeps all."""
    wanted = {name.strip().lower() for name in include if name.strip()}
    if not wanted:
        return list(entity_names)
    return [name for name in entity_names if name.lower() in wanted]
