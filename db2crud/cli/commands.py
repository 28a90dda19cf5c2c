"""db2crud CLI - Main Entry Point.

Usage:
    db2crud <command> [options]

Commands:
    generate        Generate CRUD controllers, services and DTOs from a DbContext
    init-templates  Write the default templates into a templates directory
    inspect         List tables and views visible through a connection

Examples:
    db2crud generate --provider Microsoft.EntityFrameworkCore.SqlServer \\
        --conn "Server=.;Database=Store;Trusted_Connection=True" \\
        --context-name StoreDbContext --project . --verbose
    db2crud generate --map Person=dbo.People --include Person,Product
    db2crud init-templates --templates .templates --force
"""

from __future__ import annotations

import sys
from contextlib import closing
from pathlib import Path
from typing import NoReturn

import click

from db2crud import __version__
from db2crud.core.errors import ConfigError, Db2CrudError
from db2crud.core.runner import run_generation
from db2crud.core.template_repository import TemplateRepository
from db2crud.helpers.config import DEFAULT_TEMPLATES_DIR, build_options, split_list
from db2crud.helpers.helpers_logging import (
    ConsoleReporter,
    print_error,
    print_header,
    print_info,
    print_success,
    set_color_enabled,
)
from db2crud.helpers.mssql_loader import MSSQLNotAvailableError
from db2crud.providers import create_provider

EXIT_FAILURE = 1


def _fail(exc: BaseException, title: str = "Generation failed:") -> NoReturn:
    print_error(title)
    print_error(str(exc))
    sys.exit(EXIT_FAILURE)


@click.group(name="db2crud", context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="db2crud")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors")
def cli(no_color: bool) -> None:
    """Generate CRUD API layers from an EF Core DbContext and a live database."""
    if no_color:
        set_color_enabled(False)


@cli.command(name="generate")
@click.option("--provider", help="EF provider package, e.g. Microsoft.EntityFrameworkCore.SqlServer")
@click.option("--conn", "connection", help="Database connection string")
@click.option("--project", type=click.Path(file_okay=False, path_type=Path), default=Path("."),
              show_default=True, help="API project directory")
@click.option("--context-name", help="DbContext class name (default: AppDbContext)")
@click.option("--context-path", type=click.Path(dir_okay=False, path_type=Path),
              help="DbContext source file (default: <project>/Data/<ContextName>.cs)")
@click.option("--templates", "templates_dir", type=click.Path(file_okay=False, path_type=Path),
              help=f"Templates directory (default: {DEFAULT_TEMPLATES_DIR})")
@click.option("--include", "include", multiple=True,
              help="Only generate these entities (repeatable or comma-separated)")
@click.option("--map", "mappings", multiple=True, metavar="ENTITY=SCHEMA.TABLE",
              help="Map an entity to an explicit table")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Config file (default: <project>/db2crud.yaml)")
@click.option("--dry-run", is_flag=True, help="Render everything but write nothing")
@click.option("-v", "--verbose", is_flag=True, help="Show per-table details")
def generate(
    provider: str | None,
    connection: str | None,
    project: Path,
    context_name: str | None,
    context_path: Path | None,
    templates_dir: Path | None,
    include: tuple[str, ...],
    mappings: tuple[str, ...],
    config_path: Path | None,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Generate controllers, interfaces, services, DTOs and DI wiring."""
    try:
        options = build_options(
            project=project,
            provider=provider,
            connection=connection,
            context_name=context_name,
            context_path=context_path,
            templates_dir=templates_dir,
            include=split_list(",".join(include)),
            mappings=mappings,
            config_path=config_path,
            verbose=verbose,
            dry_run=dry_run,
        )
    except ConfigError as e:
        _fail(e)

    print_header(f"db2crud starting for project: {options.project}")
    print_info(f"Provider: {options.provider}")

    reporter = ConsoleReporter(verbose=options.verbose)
    try:
        summary = run_generation(options, reporter)
    except (Db2CrudError, MSSQLNotAvailableError, NotImplementedError) as e:
        _fail(e)
    except Exception as e:
        # Driver errors from connecting or loading the inventory
        _fail(e, f"Generation failed ({type(e).__name__}):")

    if summary.result is not None and options.dry_run:
        print_info(f"Dry run: {len(summary.result.files)} files rendered, none written.")


@cli.command(name="init-templates")
@click.option("--templates", "templates_dir", type=click.Path(file_okay=False, path_type=Path),
              default=Path(DEFAULT_TEMPLATES_DIR), show_default=True,
              help="Templates directory")
@click.option("--force", is_flag=True, help="Overwrite existing templates")
def init_templates(templates_dir: Path, force: bool) -> None:
    """Write the default generation templates."""
    repository = TemplateRepository(templates_dir)
    written = repository.write_all_defaults() if force else repository.write_defaults_if_missing()
    if not written:
        print_info(f"All templates already present in {templates_dir}")
        return
    for path in written:
        print_success(f"wrote {path}")


@cli.command(name="inspect")
@click.option("--provider", required=True, help="EF provider package")
@click.option("--conn", "connection", required=True, help="Database connection string")
@click.option("--schema", help="Only list this schema")
def inspect_command(provider: str, connection: str, schema: str | None) -> None:
    """List tables and views visible through the connection."""
    reporter = ConsoleReporter(verbose=True)
    try:
        with closing(create_provider(provider, connection, reporter)) as schema_provider:
            inventory = schema_provider.load_inventory()
    except Exception as e:
        _fail(e, "Inspection failed:")

    entries = [e for e in inventory if not schema or e.schema.lower() == schema.lower()]
    for entry in entries:
        kind = "VIEW" if entry.is_view else "TABLE"
        click.echo(f"{entry.schema}.{entry.name}\t{kind}")
    print_info(f"{len(entries)} tables/views")


def main() -> None:
    """Console-script entry point."""
    cli()


if __name__ == "__main__":
    main()
