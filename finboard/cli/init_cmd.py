"""Implementation of 'finboard init' command."""

from pathlib import Path

import typer

from finboard.cli.utils import console
from finboard.core.exceptions import FinboardError, WorkspaceExistsError
from finboard.core.models import Theme
from finboard.core.workspace import CONFIG_FILE, create_workspace


def init_command(
    name: str = typer.Argument(..., help="Workspace name"),
    path: Path = typer.Option(
        None,
        "--path",
        "-p",
        help="Directory to create the workspace in (default: ./<name>)",
    ),
    currency: str = typer.Option("USD", "--currency", "-c", help="Currency code, e.g. USD or EUR"),
    theme: Theme = typer.Option(Theme.LIGHT, "--theme", help="Dashboard theme"),
) -> None:
    """Create a new workspace."""
    root = path or Path.cwd() / name

    try:
        ws = create_workspace(root, name, currency=currency, theme=theme)
    except WorkspaceExistsError:
        console.print(f"[red]Error:[/red] A workspace already exists at {root}")
        raise typer.Exit(1)
    except FinboardError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Created workspace:[/green] {ws.name}")
    console.print(f"  Config:   {ws.config_path}")
    console.print(f"  Currency: {ws.config.currency}")
    console.print()
    console.print(f"[dim]cd into {root} or pass --workspace to use it; edit {CONFIG_FILE} to change settings[/dim]")
