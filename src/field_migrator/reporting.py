"""Rich-based reporting utilities for the field-migrator CLI."""

from __future__ import annotations

import json
from typing import Any, Dict

from rich.console import Console
from rich.json import JSON
from rich.panel import Panel

from field_migrator.exceptions import CommitError, FieldMigratorError
from field_migrator.models import MigrationResult

console = Console()


def print_json(payload: Dict[str, Any]) -> None:
    """Print a JSON payload with syntax highlighting."""
    console.print(JSON(json.dumps(payload, indent=2, default=str)))


def print_migration_summary(result: MigrationResult) -> None:
    """Print the outcome of a run, keeping "nothing to migrate" distinct."""
    rename = f"[bold]{result.old_field}[/bold] → [bold]{result.new_field}[/bold]"

    if result.matched == 0:
        console.print(Panel(
            f"[green]✓ Nothing to migrate: no documents in '{result.collection}' hold "
            f"[bold]{result.old_field}[/bold].[/green]",
            title="Migration Result",
        ))
        return

    if result.dry_run:
        console.print(Panel(
            f"[yellow]Dry run:[/yellow] {result.processed} documents in '{result.collection}' "
            f"would be renamed {rename} in {result.batches} batches.",
            title="Migration Result",
            border_style="yellow",
        ))
        return

    console.print(Panel(
        f"[green]✓ Renamed {rename} on {result.committed} documents in '{result.collection}' "
        f"({result.batches} batches).[/green]",
        title="Migration Result",
    ))


def print_failure(error: FieldMigratorError) -> None:
    lines = [f"[red]{type(error).__name__}:[/red] {error}"]
    if isinstance(error, CommitError):
        lines.append(f"Failed batch: {error.batch_number}")
    lines.append(f"Documents migrated before the failure: [bold]{error.committed}[/bold]")
    if error.committed:
        lines.append("[dim]Re-running the migration resumes with the remaining documents.[/dim]")

    console.print(Panel("\n".join(lines), title="Migration Failed", border_style="red"))
