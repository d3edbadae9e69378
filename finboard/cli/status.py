"""Implementation of 'finboard status' command.

Shows the month's income, spending, budgets and bills at a glance.
"""

from datetime import date
from pathlib import Path

import typer
from rich.panel import Panel

from finboard.cli.utils import console, open_ledger, workspace_option
from finboard.core.currency import format_currency, format_percentage
from finboard.core.models import BillState, BudgetState, TransactionType
from finboard.engine.calculator import (
    active_budgets,
    bill_statuses,
    budget_utilizations,
    category_breakdown,
    filter_by_date_range,
    financial_metrics,
    goal_progress,
)
from finboard.engine.periods import days_between, format_month, month_range, parse_month


def status_command(
    month: str = typer.Option(
        None,
        "--month",
        "-m",
        help="Month to show as YYYY-MM (default: current month)",
    ),
    workspace: Path = workspace_option(),
) -> None:
    """Show status for a month.

    Displays income and expenses, savings rate, budget usage, bills that
    need attention and the top spending categories.
    """
    ws, ledger = open_ledger(workspace)
    currency = ws.config.currency

    today = date.today()
    if month:
        try:
            anchor = parse_month(month)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
    else:
        anchor = today

    month_start, month_end = month_range(anchor)
    # Budgets and bills are evaluated at today, clamped into the chosen month
    reference = min(max(today, month_start), month_end)

    all_transactions = ledger.transactions.get_all()
    transactions = filter_by_date_range(all_transactions, month_start, month_end)
    metrics = financial_metrics(transactions)

    console.print()
    title = f"Status for {format_month(month_start)}"
    days_left = days_between(reference, month_end)
    if month_start <= today <= month_end and days_left > 0:
        title += f" ({days_left} days remaining)"
    console.print(Panel(f"[bold]{title}[/bold]", style="cyan"))
    console.print()

    warnings: list[str] = []

    # Income & expenses
    console.print("[bold]Income & Expenses[/bold]")
    if metrics.transaction_count == 0:
        console.print("  [yellow]No transactions found for this month[/yellow]")
    else:
        console.print(f"  Income:       {format_currency(metrics.income, currency):>14}")
        console.print(f"  Expenses:     {format_currency(metrics.expenses, currency):>14}")
        if metrics.balance >= 0:
            console.print(f"  [green]Net:          {format_currency(metrics.balance, currency):>14}[/green]")
        else:
            console.print(f"  [red]Net:          {format_currency(metrics.balance, currency):>14}[/red]")
            warnings.append(f"Spending exceeds income by {format_currency(-metrics.balance, currency)}")
        if metrics.income > 0:
            console.print(f"  Savings rate: {format_percentage(metrics.savings_rate):>14}")
    console.print()

    # Budgets
    budgets = active_budgets(ledger.budgets.get_all(), reference)
    if budgets:
        console.print("[bold]Budgets[/bold]")
        for u in budget_utilizations(budgets, all_transactions, reference):
            line = (
                f"  {u.budget.category}: {format_currency(u.spent_amount, currency)} / "
                f"{format_currency(u.budget.budget_amount, currency)} ({u.utilization:.1f}%)"
            )
            if u.state == BudgetState.OVER_BUDGET:
                console.print(f"[red]{line}[/red]")
                warnings.append(
                    f"{u.budget.category} over budget by {format_currency(-u.remaining_amount, currency)}"
                )
            elif u.state == BudgetState.NEAR_LIMIT:
                console.print(f"[yellow]{line}[/yellow]")
            else:
                console.print(line)
        console.print()

    # Bills
    pending = [
        s for s in bill_statuses(ledger.bills.get_all(), reference)
        if s.state in (BillState.OVERDUE, BillState.DUE_SOON)
    ]
    if pending:
        console.print("[bold]Bills Needing Attention[/bold]")
        for s in pending:
            amount = format_currency(s.bill.amount, currency)
            if s.state == BillState.OVERDUE:
                console.print(f"  [red]{s.bill.name}: {amount} overdue by {-s.days_until_due} days[/red]")
                warnings.append(f"{s.bill.name} is overdue")
            else:
                console.print(f"  [yellow]{s.bill.name}: {amount} due in {s.days_until_due} days[/yellow]")
        console.print()

    # Goals
    goals = [g for g in ledger.goals.get_all() if g.is_active]
    if goals:
        console.print("[bold]Goals[/bold]")
        for goal in goals:
            progress = goal_progress(goal)
            console.print(
                f"  {goal.title}: {format_currency(goal.current_amount, currency)} / "
                f"{format_currency(goal.target_amount, currency)} ({progress.progress:.0f}%)"
            )
        console.print()

    # Top categories
    top = category_breakdown(transactions, TransactionType.EXPENSE, limit=5)
    if top:
        console.print("[bold]Top Categories[/bold]")
        for share in top:
            console.print(
                f"  {share.category}: {format_currency(share.amount, currency):>12} ({share.percentage:.1f}%)"
            )
        console.print()

    if warnings:
        console.print("[bold yellow]⚠ Warnings[/bold yellow]")
        for w in warnings:
            console.print(f"  - {w}")
        console.print()

    console.print(f"[dim]Transactions: {metrics.transaction_count}[/dim]")
