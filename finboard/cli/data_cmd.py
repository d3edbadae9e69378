"""Implementation of 'finboard data' command.

Manage stored records: export a JSON snapshot or clear everything.
"""

from datetime import date
from pathlib import Path

import typer

from finboard.cli.utils import console, open_ledger, workspace_option

# Create subcommand group
data_app = typer.Typer(help="Export or clear workspace data")


@data_app.command(name="clear")
def data_clear(
    confirm: bool = typer.Option(
        False,
        "--confirm",
        "-y",
        help="Confirm deletion (required)",
    ),
    workspace: Path = workspace_option(),
) -> None:
    """Delete all transactions, budgets, goals, investments and bills.

    This deletes ALL data from the database. Use with caution.
    Requires --confirm flag to execute.
    """
    _, ledger = open_ledger(workspace)

    counts = ledger.counts()
    total = sum(counts.values())
    if total == 0:
        console.print("[yellow]Database is already empty[/yellow]")
        raise typer.Exit(0)

    summary = ", ".join(f"[cyan]{n}[/cyan] {name}" for name, n in counts.items())
    console.print(f"Current data: {summary}")

    if not confirm:
        console.print()
        console.print("[yellow]This will delete ALL data![/yellow]")
        console.print("Run with [bold]--confirm[/bold] to proceed")
        raise typer.Exit(0)

    deleted = ledger.clear()
    console.print()
    console.print(f"[green]Deleted:[/green] {deleted} records")


@data_app.command(name="export")
def data_export(
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (default: reports/export-<date>.json)",
    ),
    workspace: Path = workspace_option(),
) -> None:
    """Export every record as a JSON snapshot."""
    ws, ledger = open_ledger(workspace)

    snapshot = ledger.context(ws.config.currency)
    output_path = output or ws.reports_dir / f"export-{date.today().isoformat()}.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")

    console.print(f"[green]Exported:[/green] {output_path}")
