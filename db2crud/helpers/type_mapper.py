"""Map native database column types to C# property types.

Loads a mapping file from ``db2crud/type-maps/``. Mapping files follow the
naming convention:
    {engine}-to-{language}.mapping.yaml

Each file contains:
    mappings:
        <native_type>: <target_type>
    reference_types: [string]
    fallback: string

Example:
    >>> mapper = TypeMapper("mssql", "csharp")
    >>> mapper.map_type("uniqueidentifier", is_nullable=True)
    'Guid?'
    >>> mapper.map_type("nvarchar", is_nullable=True)
    'string'
    >>> mapper.map_type("sql_variant", is_nullable=False)
    'string'
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from db2crud.helpers.yaml_loader import load_yaml_file

_TYPE_MAPS_DIR = Path(__file__).parent.parent / "type-maps"

_ARRAY_SUFFIX = "[]"
_NULLABLE_MARKER = "?"


class TypeMapper:
    """Native type to target-language type mapper.

    Lookups are case-insensitive and total: unknown or missing native types
    map to ``fallback``.

    Attributes:
        engine: Database engine identifier (e.g., 'mssql').
        language: Target language identifier (e.g., 'csharp').
        fallback: Type used when no mapping is found.
    """

    def __init__(self, engine: str, language: str) -> None:
        """Load the mapping file for the engine/language pair.

        Raises:
            FileNotFoundError: If no mapping file exists for the pair.
            ValueError: If the mapping file is malformed.
        """
        self.engine = engine
        self.language = language
        self.fallback = "string"
        self._mappings: dict[str, str] = {}
        self._reference_types: frozenset[str] = frozenset({"string"})
        self._load_mappings(_TYPE_MAPS_DIR / f"{engine}-to-{language}.mapping.yaml")

    def _load_mappings(self, file_path: Path) -> None:
        data = load_yaml_file(file_path)

        raw_mappings = data.get("mappings", {})
        if not isinstance(raw_mappings, dict):
            raise ValueError(f"Invalid mappings format in {file_path}")
        self._mappings = {
            str(native).lower(): str(target) for native, target in raw_mappings.items()
        }

        reference_types = data.get("reference_types")
        if isinstance(reference_types, list):
            self._reference_types = frozenset(str(t) for t in reference_types)

        fallback = data.get("fallback")
        if isinstance(fallback, str):
            self.fallback = fallback

    def map_type(
        self,
        native_type: str | None,
        is_nullable: bool,
        max_length: int | None = None,
        precision: int | None = None,
        scale: int | None = None,
    ) -> str:
        """Convert a native column type to the target type name.

        ``max_length``, ``precision`` and ``scale`` are accepted for callers
        that pass full column facets; the current mapping ignores them.

        Nullable value types get a ``?`` suffix. Reference types (string)
        and arrays (``byte[]``) are left undecorated.
        """
        core = self.fallback
        if native_type:
            core = self._mappings.get(native_type.strip().lower(), self.fallback)

        if core.endswith(_ARRAY_SUFFIX) or core in self._reference_types:
            return core
        return core + _NULLABLE_MARKER if is_nullable else core

    @property
    def available_native_types(self) -> list[str]:
        """Sorted list of native types that have a mapping."""
        return sorted(self._mappings)


@lru_cache(maxsize=None)
def get_type_mapper(engine: str = "mssql", language: str = "csharp") -> TypeMapper:
    """Return a cached mapper for the engine/language pair."""
    return TypeMapper(engine, language)


def map_sql_server_type(
    native_type: str | None,
    is_nullable: bool,
    max_length: int | None = None,
    precision: int | None = None,
    scale: int | None = None,
) -> str:
    """Map a SQL Server column type to a C# type name."""
    return get_type_mapper("mssql", "csharp").map_type(
        native_type, is_nullable, max_length, precision, scale
    )
