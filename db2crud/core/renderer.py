"""Render CRUD source files from entity models.

Templates are Jinja2 with ``StrictUndefined``: a template that references a
field the model does not provide fails the run instead of emitting broken
code.
"""

from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    UndefinedError,
)

from db2crud import __version__
from db2crud.core.errors import TemplateBindingError
from db2crud.core.models import TableInfo
from db2crud.core.projection import project_all
from db2crud.core.template_repository import (
    CONTROLLER_TEMPLATE,
    DI_TEMPLATE,
    DTOS_TEMPLATE,
    INTERFACE_TEMPLATE,
    SERVICE_TEMPLATE,
    TemplateRepository,
)

OUTPUT_DIRS: tuple[str, ...] = (
    "Controllers",
    "Interfaces",
    "Services",
    "Dtos",
    "Infrastructure/DependencyInjection",
)

# Single-file outputs from older versions of the generator
LEGACY_FILES: tuple[str, ...] = (
    "Controllers/CrudControllers.g.cs",
    "Interfaces/CrudInterfaces.g.cs",
    "Services/CrudServices.g.cs",
    "Dtos/CrudDtos.g.cs",
)

DI_OUTPUT = "Infrastructure/DependencyInjection/ServiceRegistration.g.cs"

_ROOT_NAMESPACE_PATTERN = re.compile(
    r"<RootNamespace>\s*([^<\s]+)\s*</RootNamespace>", re.IGNORECASE
)


# ---------------------------------------------------------------------------
# Template rendering
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Jinja2 environment over a template directory.

    Args:
        templates_dir: Directory searched first.
        fallback_dir: Directory used for names missing from ``templates_dir``.
    """

    def __init__(self, templates_dir: Path, fallback_dir: Path | None = None) -> None:
        search_path = [str(templates_dir)]
        if fallback_dir is not None:
            search_path.append(str(fallback_dir))
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )

    def render(self, template_name: str, model: dict[str, Any]) -> str:
        """Render ``template_name`` with ``model`` as its globals.

        Raises:
            TemplateBindingError: On undefined fields, missing templates or
                template syntax errors.
        """
        try:
            template = self.env.get_template(template_name)
            return template.render(model)
        except UndefinedError as e:
            raise TemplateBindingError(template_name, f"undefined field: {e}") from e
        except TemplateNotFound as e:
            raise TemplateBindingError(template_name, "template file not found") from e
        except TemplateError as e:
            raise TemplateBindingError(template_name, str(e)) from e


# ---------------------------------------------------------------------------
# File output
# ---------------------------------------------------------------------------


def write_file_atomic(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` via a temp file and rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def get_root_namespace(project_path: Path) -> str:
    """Root namespace of the .NET project at ``project_path``.

    Uses ``<RootNamespace>`` from the first ``*.csproj``, else the csproj
    file name, else the directory name.
    """
    full = project_path.resolve()
    csprojs = sorted(full.glob("*.csproj"))
    if csprojs:
        match = _ROOT_NAMESPACE_PATTERN.search(csprojs[0].read_text(encoding="utf-8-sig"))
        if match:
            return match.group(1).strip()
        return csprojs[0].stem
    return full.name


@dataclass
class GenerationResult:
    """Outcome of a render pass."""

    files: list[Path] = field(default_factory=list)
    entities: list[str] = field(default_factory=list)
    skipped_views: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def files_written(self) -> int:
        return 0 if self.dry_run else len(self.files)


class CrudRenderer:
    """Render controller, interface, service and DTO files per entity.

    Args:
        repository: Template directory.
        renderer: Template engine; defaults to one over ``repository``.
    """

    def __init__(self, repository: TemplateRepository, renderer: TemplateRenderer | None = None) -> None:
        self.repository = repository
        self.renderer = renderer or TemplateRenderer(repository.directory)

    def _base_model(self, root_namespace: str, context_name: str) -> dict[str, Any]:
        return {
            "root_namespace": root_namespace,
            "context_name": context_name,
            "generator_version": __version__,
        }

    def render_all(
        self,
        tables: Iterable[TableInfo],
        project_path: Path,
        context_name: str,
        dry_run: bool = False,
    ) -> GenerationResult:
        """Render every base table plus the shared DI registration file.

        Views are skipped. With ``dry_run`` everything is rendered (so
        template errors still surface) but nothing touches the disk.
        """
        table_list = list(tables)
        result = GenerationResult(dry_run=dry_run)
        result.skipped_views = [t.qualified_name for t in table_list if t.is_view]

        root_namespace = get_root_namespace(project_path)
        models = project_all(table_list)

        outputs: dict[Path, str] = {}
        for model in models:
            item_model = {"t": model.to_template_dict(), **self._base_model(root_namespace, context_name)}
            entity = model.entity_name
            outputs[project_path / f"Controllers/{entity}Controller.g.cs"] = self.renderer.render(
                CONTROLLER_TEMPLATE, item_model
            )
            outputs[project_path / f"Interfaces/I{entity}Service.g.cs"] = self.renderer.render(
                INTERFACE_TEMPLATE, item_model
            )
            outputs[project_path / f"Services/{entity}Service.g.cs"] = self.renderer.render(
                SERVICE_TEMPLATE, item_model
            )
            outputs[project_path / f"Dtos/{entity}Dtos.g.cs"] = self.renderer.render(
                DTOS_TEMPLATE, item_model
            )
            result.entities.append(entity)

        di_model = {
            "tables": [{"entity_name": m.entity_name} for m in models],
            **self._base_model(root_namespace, context_name),
        }
        outputs[project_path / DI_OUTPUT] = self.renderer.render(DI_TEMPLATE, di_model)

        result.files = list(outputs)
        if dry_run:
            return result

        for rel in OUTPUT_DIRS:
            (project_path / rel).mkdir(parents=True, exist_ok=True)
        for rel in LEGACY_FILES:
            (project_path / rel).unlink(missing_ok=True)
        for path, content in outputs.items():
            write_file_atomic(path, content)
        return result
