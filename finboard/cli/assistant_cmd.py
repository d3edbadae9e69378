"""Implementation of 'finboard categorize', 'finboard ask' and 'finboard insights'."""

from pathlib import Path

import typer
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from finboard.cli.utils import console, open_ledger, workspace_option
from finboard.core.models import Priority
from finboard.engine.assistant import respond
from finboard.engine.categorizer import categorize
from finboard.engine.insights import derive_insights

PRIORITY_STYLES = {
    Priority.HIGH: "[red]high[/red]",
    Priority.MEDIUM: "[yellow]medium[/yellow]",
    Priority.LOW: "[green]low[/green]",
}


def categorize_command(
    description: str = typer.Argument(..., help="Transaction description"),
) -> None:
    """Suggest a category for a transaction description."""
    console.print(categorize(description))


def ask_command(
    query: str = typer.Argument("", help="Question about your finances"),
    workspace: Path = workspace_option(),
) -> None:
    """Ask the assistant about spending, budgets, goals or bills."""
    ws, ledger = open_ledger(workspace)
    answer = respond(query, ledger.context(ws.config.currency))
    console.print(Panel(Text(answer), title="Assistant", border_style="cyan"))


def insights_command(workspace: Path = workspace_option()) -> None:
    """Show insights derived from all transactions."""
    ws, ledger = open_ledger(workspace)
    insights = derive_insights(ledger.transactions.get_all(), ws.config.currency)

    if not insights:
        console.print("[yellow]No insights yet. Add more transactions to see patterns.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Insights", show_lines=True)
    table.add_column("Type")
    table.add_column("Priority")
    table.add_column("Insight")
    table.add_column("Suggested Action")
    for insight in insights:
        table.add_row(
            insight.type.value,
            PRIORITY_STYLES[insight.priority],
            f"[bold]{insight.title}[/bold]\n{insight.description}",
            insight.action or "-",
        )
    console.print(table)
