"""Finboard command line interface."""

import typer

from finboard import __version__
from finboard.cli.assistant_cmd import ask_command, categorize_command, insights_command
from finboard.cli.data_cmd import data_app
from finboard.cli.init_cmd import init_command
from finboard.cli.records import bill_app, budget_app, goal_app, invest_app, tx_app
from finboard.cli.report import report_command
from finboard.cli.status import status_command
from finboard.cli.utils import console, setup_logging

app = typer.Typer(
    name="finboard",
    help="Personal finance tracking: transactions, budgets, goals, investments and bills.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"finboard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Finboard: personal finance in a local workspace."""
    setup_logging(verbose)


app.command(name="init")(init_command)
app.command(name="status")(status_command)
app.command(name="report")(report_command)
app.command(name="categorize")(categorize_command)
app.command(name="ask")(ask_command)
app.command(name="insights")(insights_command)

app.add_typer(tx_app, name="tx")
app.add_typer(budget_app, name="budget")
app.add_typer(goal_app, name="goal")
app.add_typer(invest_app, name="invest")
app.add_typer(bill_app, name="bill")
app.add_typer(data_app, name="data")


if __name__ == "__main__":
    app()
