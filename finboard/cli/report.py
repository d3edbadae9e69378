"""Implementation of 'finboard report' command.

Generates a standalone HTML dashboard with tabs for overview, budgets,
goals and investments, bills, insights and transactions.
"""

from datetime import date
from pathlib import Path

import typer

from finboard.cli.utils import console, open_workspace, workspace_option
from finboard.dashboard import DashboardDataProvider, generate_dashboard_html, save_dashboard


def report_command(
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (default: reports/dashboard-<YYYY-MM>.html)",
    ),
    workspace: Path = workspace_option(),
) -> None:
    """Generate an HTML dashboard for the workspace."""
    ws = open_workspace(workspace)
    today = date.today()

    provider = DashboardDataProvider(ws)
    data = provider.get_dashboard_data(today)

    if data.metrics.transaction_count == 0:
        console.print("[yellow]No transactions recorded yet[/yellow]")
        # Still generate the dashboard (it will show empty state)

    html = generate_dashboard_html(data)
    output_path = output or ws.reports_dir / f"dashboard-{today:%Y-%m}.html"
    save_dashboard(html, output_path)

    console.print(f"[green]Dashboard generated:[/green] {output_path}")
    console.print(f"Open in browser: file://{output_path.absolute()}")
