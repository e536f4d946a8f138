from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from field_migrator import __version__
from field_migrator.config import DEFAULT_CONFIG_PATH, RuntimeConfig, load_runtime_config, write_default_config
from field_migrator.db import open_store
from field_migrator.exceptions import ConfigurationError, FieldMigratorError
from field_migrator.migrate import run_migration
from field_migrator.models import MigrationResult, RenameRule
from field_migrator.reporting import print_failure, print_json, print_migration_summary


app = typer.Typer(no_args_is_help=True)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


def _rename_rule(config: RuntimeConfig) -> RenameRule:
    if not config.collection:
        raise ConfigurationError("Missing collection. Pass --collection or set 'collection' in .fmigrate.yml.")
    if not config.old_field:
        raise ConfigurationError("Missing old field. Pass --from or set 'old_field' in .fmigrate.yml.")
    if not config.new_field:
        raise ConfigurationError("Missing new field. Pass --to or set 'new_field' in .fmigrate.yml.")
    return RenameRule(collection=config.collection, old_field=config.old_field, new_field=config.new_field)


@app.command()
def version() -> None:
    console.print(f"field-migrator v{__version__}")


@app.command()
def init(path: Optional[Path] = typer.Option(None, "--path", help="Path for config file")) -> None:
    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        console.print(f"Config already exists at {config_path}")
        raise typer.Exit(code=0)

    write_default_config(config_path)
    console.print(f"Created config at {config_path}")


@app.command()
def rename(
    collection: Optional[str] = typer.Option(None, "--collection", help="Collection name"),
    old_field: Optional[str] = typer.Option(None, "--from", help="Field to rename"),
    new_field: Optional[str] = typer.Option(None, "--to", help="New field name"),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", help="Documents per committed batch"),
    backend: Optional[str] = typer.Option(None, "--backend", help="Store backend: mongodb or firestore"),
    uri: Optional[str] = typer.Option(None, "--uri", help="MongoDB URI"),
    db: Optional[str] = typer.Option(None, "--db", help="MongoDB database name"),
    project: Optional[str] = typer.Option(None, "--project", help="Google Cloud project for Firestore"),
    database: Optional[str] = typer.Option(None, "--database", help="Firestore database id"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write changes"),
    rate_limit_ms: int = typer.Option(0, "--rate-limit-ms", help="Delay between batches"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
    output: str = typer.Option("summary", "--output", help="Output format: summary or json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every queued document"),
) -> None:
    """Rename a field on every document of a collection that holds it."""
    _configure_logging(verbose)

    try:
        config = load_runtime_config(
            config_path or DEFAULT_CONFIG_PATH,
            backend=backend,
            mongodb_uri=uri,
            default_db=db,
            firestore_project=project,
            firestore_database=database,
            collection=collection,
            old_field=old_field,
            new_field=new_field,
            batch_size=batch_size,
        )
        rule = _rename_rule(config)
        store = open_store(config)
    except FieldMigratorError as exc:
        print_failure(exc)
        raise typer.Exit(code=1)

    async def _run() -> MigrationResult:
        try:
            return await run_migration(store, rule, config.batch_size, dry_run, rate_limit_ms)
        finally:
            await store.close()

    try:
        result = asyncio.run(_run())
    except FieldMigratorError as exc:
        print_failure(exc)
        raise typer.Exit(code=1)

    if output == "json":
        print_json(result.model_dump())
    else:
        print_migration_summary(result)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
