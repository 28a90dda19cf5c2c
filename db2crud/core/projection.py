"""Project resolved tables into the models consumed by templates."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from db2crud.core.models import ColumnInfo, TableInfo
from db2crud.helpers.pluralization import fallback_singularize

DEFAULT_KEY_COLUMN = "Id"
DEFAULT_KEY_TYPE = "int"


@dataclass(frozen=True)
class EntityModel:
    """Per-entity generation model.

    Templates see it as ``t`` with the fields below; ``columns`` entries
    expose ``name``, ``cs_name``, ``clr_type`` and ``is_nullable``.
    """

    entity_name: str
    name: str
    key_column: str
    key_clr_type: str
    columns: tuple[ColumnInfo, ...]

    def to_template_dict(self) -> dict[str, Any]:
        return {
            "entity_name": self.entity_name,
            "name": self.name,
            "key_column": self.key_column,
            "key_clr_type": self.key_clr_type,
            "columns": [
                {
                    "name": c.name,
                    "cs_name": c.cs_name,
                    "clr_type": c.clr_type,
                    "is_nullable": c.is_nullable,
                }
                for c in self.columns
            ],
        }


def entity_name_for(table: TableInfo) -> str:
    """The table's entity name, or a singularized physical name when blank."""
    if table.entity_name and table.entity_name.strip():
        return table.entity_name
    return fallback_singularize(table.name)


def project(table: TableInfo) -> EntityModel:
    """Build the generation model for one table.

    Without a primary key the first column stands in as key, or ``Id`` when
    there are no columns. The key type comes from the matching column and
    defaults to ``int``.
    """
    columns = table.columns
    if table.key_column and table.key_column.strip():
        key_column = table.key_column
    elif columns:
        key_column = columns[0].name
    else:
        key_column = DEFAULT_KEY_COLUMN

    key_clr_type = next(
        (c.clr_type for c in columns if c.name == key_column),
        DEFAULT_KEY_TYPE,
    )
    return EntityModel(
        entity_name=entity_name_for(table),
        name=table.name,
        key_column=key_column,
        key_clr_type=key_clr_type,
        columns=columns,
    )


def project_all(tables: Iterable[TableInfo]) -> list[EntityModel]:
    """Project base tables only; views and nameless entities are dropped."""
    models: list[EntityModel] = []
    for table in tables:
        if table.is_view:
            continue
        model = project(table)
        if not model.entity_name.strip():
            continue
        models.append(model)
    return models
