"""YAML loading shared by the config layer and the type mapper."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union, cast

import yaml

# Recursive type for nested YAML structures
ConfigValue = Union[str, int, float, bool, None, "ConfigDict", list["ConfigValue"]]
ConfigDict = dict[str, ConfigValue]


def load_yaml_file(file_path: Path) -> ConfigDict:
    """Load a YAML mapping document.

    An empty file loads as an empty dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is not a mapping.
        yaml.YAMLError: If the YAML is malformed.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"YAML file not found: {file_path}")

    with file_path.open(encoding="utf-8") as f:
        raw: Any = yaml.safe_load(f)

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a mapping at the top of {file_path}")
    return cast(ConfigDict, raw)
