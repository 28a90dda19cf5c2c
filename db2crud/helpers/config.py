"""Run options: CLI values layered over ``db2crud.yaml`` and defaults.

Example ``db2crud.yaml``::

    provider: Microsoft.EntityFrameworkCore.SqlServer
    connection: Server=db,1433;Database=Store;User Id=sa;Password=${MSSQL_PASSWORD}
    context_name: StoreDbContext
    templates: .templates
    include: [Product, Category]
    mappings:
      Person: dbo.People
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from db2crud.core.errors import ConfigError
from db2crud.helpers.yaml_loader import ConfigDict, load_yaml_file

CONFIG_FILE_NAME = "db2crud.yaml"

DEFAULT_CONTEXT_NAME = "AppDbContext"
DEFAULT_TEMPLATES_DIR = "Templates"

_KNOWN_KEYS = frozenset({
    "provider",
    "connection",
    "context_name",
    "context_path",
    "templates",
    "include",
    "mappings",
})


@dataclass(frozen=True)
class Options:
    """Resolved options for one generation run."""

    provider: str
    connection: str
    project: Path = Path(".")
    context_name: str = DEFAULT_CONTEXT_NAME
    context_path: Path | None = None
    templates_dir: Path = Path(DEFAULT_TEMPLATES_DIR)
    include: tuple[str, ...] = ()
    mappings: Mapping[str, str] = field(default_factory=dict)
    verbose: bool = False
    dry_run: bool = False

    @property
    def dbcontext_path(self) -> Path:
        """DbContext source file: explicit path or ``<project>/Data/<Context>.cs``."""
        if self.context_path is not None:
            return self.context_path
        return self.project / "Data" / f"{self.context_name}.cs"


def split_list(value: object) -> tuple[str, ...]:
    """Accept a YAML list or a comma-separated string."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        raise ConfigError(f"Expected a list or comma-separated string, got {type(value).__name__}")
    return tuple(item.strip() for item in items if item.strip())


def parse_mapping_pairs(pairs: tuple[str, ...] | list[str]) -> dict[str, str]:
    """Parse ``Entity=schema.table`` strings from the command line."""
    mappings: dict[str, str] = {}
    for pair in pairs:
        entity, sep, reference = pair.partition("=")
        if not sep or not entity.strip() or not reference.strip():
            raise ConfigError(f"Invalid mapping '{pair}', expected ENTITY=SCHEMA.TABLE")
        mappings[entity.strip()] = reference.strip()
    return mappings


def _config_mappings(value: object) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError("'mappings' must be a mapping of entity -> schema.table")
    return {str(k): str(v) for k, v in value.items()}


def load_config_file(path: Path) -> ConfigDict:
    """Load ``db2crud.yaml``.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    try:
        data = load_yaml_file(path)
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"Unknown key(s) in {path}: {', '.join(unknown)}")
    return data


def find_config_file(project: Path, explicit: Path | None = None) -> Path | None:
    """Return the config file to use, if any.

    Raises:
        ConfigError: If an explicit path was given but does not exist.
    """
    if explicit is not None:
        if not explicit.exists():
            raise ConfigError(f"Config file not found: {explicit}")
        return explicit
    candidate = project / CONFIG_FILE_NAME
    return candidate if candidate.exists() else None


def _pick(cli_value: Any, file_value: Any, default: Any = None) -> Any:  # noqa: ANN401
    if cli_value not in (None, "", ()):
        return cli_value
    if file_value not in (None, ""):
        return file_value
    return default


def build_options(
    *,
    project: Path,
    provider: str | None = None,
    connection: str | None = None,
    context_name: str | None = None,
    context_path: Path | None = None,
    templates_dir: Path | None = None,
    include: tuple[str, ...] = (),
    mappings: tuple[str, ...] = (),
    config_path: Path | None = None,
    verbose: bool = False,
    dry_run: bool = False,
) -> Options:
    """Merge CLI values, the config file and defaults into Options.

    Relative ``templates`` and ``context_path`` values from the config file
    are taken relative to the project directory.

    Raises:
        ConfigError: If provider or connection is missing, or the config
            file is invalid.
    """
    file_path = find_config_file(project, config_path)
    data: ConfigDict = load_config_file(file_path) if file_path else {}

    resolved_provider = _pick(provider, data.get("provider"))
    resolved_connection = _pick(connection, data.get("connection"))
    if not resolved_provider or not resolved_connection:
        raise ConfigError("Missing required --provider or --conn.")

    file_templates = data.get("templates")
    file_context_path = data.get("context_path")

    merged_mappings = _config_mappings(data.get("mappings"))
    merged_mappings.update(parse_mapping_pairs(list(mappings)))

    return Options(
        provider=str(resolved_provider),
        connection=str(resolved_connection),
        project=project,
        context_name=str(_pick(context_name, data.get("context_name"), DEFAULT_CONTEXT_NAME)),
        context_path=_pick(
            context_path,
            project / str(file_context_path) if file_context_path else None,
        ),
        templates_dir=_pick(
            templates_dir,
            project / str(file_templates) if file_templates else None,
            Path(DEFAULT_TEMPLATES_DIR),
        ),
        include=_pick(include, split_list(data.get("include")), ()),
        mappings=merged_mappings,
        verbose=verbose,
        dry_run=dry_run,
    )
