"""Shared helpers for CLI commands."""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, NoReturn, TypeVar

import typer
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler

from finboard.core.exceptions import FinboardError, WorkspaceNotFoundError
from finboard.core.workspace import Workspace, load_workspace
from finboard.engine.ledger import Ledger

console = Console()

InputT = TypeVar("InputT", bound=BaseModel)

WORKSPACE_ENVVAR = "FINBOARD_WORKSPACE"


def workspace_option() -> Any:
    """The ``--workspace`` option shared by every command."""
    return typer.Option(
        None,
        "--workspace",
        "-w",
        envvar=WORKSPACE_ENVVAR,
        help="Path to workspace (default: current directory)",
    )


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def open_workspace(path: Path | None) -> Workspace:
    """Load a workspace or exit with an error message."""
    try:
        return load_workspace(path)
    except WorkspaceNotFoundError:
        console.print(
            "[red]Error:[/red] No workspace found. "
            "Run 'finboard init <name>' or use --workspace"
        )
        raise typer.Exit(1)
    except FinboardError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def open_ledger(path: Path | None) -> tuple[Workspace, Ledger]:
    ws = open_workspace(path)
    return ws, Ledger(ws.storage, ws.config.default_alert_threshold)


def build_input(model: type[InputT], **fields: Any) -> InputT:
    """Build an input model from command options.

    Options left at None are not passed, so they stay unset and are not
    applied by edits.

    Raises:
        FinboardError: A value could not be parsed (bad amount or date).
    """
    values = {name: value for name, value in fields.items() if value is not None}
    try:
        return model(**values)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise FinboardError(f"Invalid value for {field}: {error['msg']}") from e


AMOUNT_ADAPTER = TypeAdapter(Decimal)


def parse_amount(value: str) -> Decimal:
    """Parse a finite decimal amount given on the command line.

    Raises:
        FinboardError: Not a number, or Infinity or NaN.
    """
    try:
        return AMOUNT_ADAPTER.validate_python(value)
    except PydanticValidationError as e:
        raise FinboardError(f"Invalid amount: {value} ({e.errors()[0]['msg']})") from e


def parse_tags(value: str | None) -> list[str] | None:
    """Split a comma-separated tag list."""
    if value is None:
        return None
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def fail(error: FinboardError) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)
