"""End-to-end generation run: discover, resolve, load, render."""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from db2crud.core.entity_discovery import (
    apply_overrides,
    extract_entity_names,
    filter_included,
    read_model_source,
    resolve_targets,
)
from db2crud.core.renderer import CrudRenderer, GenerationResult, TemplateRenderer
from db2crud.core.schema_reader import load_tables
from db2crud.core.template_repository import DEFAULT_TEMPLATES_DIR, TemplateRepository
from db2crud.providers import create_provider

if TYPE_CHECKING:
    from db2crud.core.models import TableInfo
    from db2crud.helpers.config import Options
    from db2crud.helpers.helpers_logging import Reporter
    from db2crud.providers import ProviderFactory

_VERBOSE_TABLE_PREVIEW = 10


@dataclass
class RunSummary:
    """What a run discovered, loaded and wrote."""

    entities: list[str] = field(default_factory=list)
    tables: list[TableInfo] = field(default_factory=list)
    result: GenerationResult | None = None


def run_generation(
    options: Options,
    reporter: Reporter,
    provider_factory: ProviderFactory | None = None,
) -> RunSummary:
    """Run the full pipeline for ``options``.

    Args:
        options: Resolved run options.
        reporter: Progress and warning sink.
        provider_factory: Overrides registry lookup (used by tests).

    Raises:
        Db2CrudError: On any fatal error (bad provider, missing DbContext,
            template binding failure).
        Exception: Connection and inventory failures propagate unchanged.
    """
    summary = RunSummary()

    reporter.info("[1/4] Discovering entities")
    model_source = read_model_source(options.dbcontext_path)
    names = extract_entity_names(model_source)
    reporter.info(f"Found {len(names)} entities.")
    if options.include:
        names = filter_included(names, options.include)
        reporter.info(f"{len(names)} entities selected by --include.")
    reporter.detail("Entities discovered: " + ", ".join(names))
    summary.entities = names

    reporter.info("[2/4] Resolving targets")
    targets = apply_overrides(resolve_targets(model_source, names), options.mappings)
    for target in targets:
        reporter.detail(f"  {target.entity_hint} -> {target.hint_label}")

    reporter.info("[3/4] Reading schema metadata")
    if provider_factory is None:
        provider = create_provider(options.provider, options.connection, reporter)
    else:
        provider = provider_factory(options.connection, reporter)
    with closing(provider):
        tables = load_tables(provider, targets, reporter)
    reporter.info(f"Loaded schema for {len(tables)} tables.")
    for table in tables[:_VERBOSE_TABLE_PREVIEW]:
        reporter.detail(
            f"  {table.qualified_name} -> Entity {table.entity_name}: "
            + f"key={table.key_column or '(none)'} cols={len(table.columns)}"
        )
    summary.tables = tables

    reporter.info("[4/4] Rendering CRUD files")
    repository = TemplateRepository(options.templates_dir, create=not options.dry_run)
    renderer: TemplateRenderer | None = None
    if options.dry_run:
        # Templates not present yet come from the packaged defaults
        renderer = TemplateRenderer(repository.directory, fallback_dir=DEFAULT_TEMPLATES_DIR)
    else:
        for path in repository.write_defaults_if_missing():
            reporter.detail(f"wrote default template {path}")
    result = CrudRenderer(repository, renderer).render_all(
        tables, options.project, options.context_name, dry_run=options.dry_run
    )
    for view in result.skipped_views:
        reporter.detail(f"skipped view {view}")
    verb = "would write" if options.dry_run else "wrote"
    for path in result.files:
        reporter.detail(f"{verb} {path}")
    summary.result = result

    reporter.success("Generation complete.")
    return summary
