"""Implementation of the record commands.

'finboard tx|budget|goal|invest|bill' add, edit, delete and list records
of a workspace. Amounts and dates are passed as text (``12.50``,
``2024-01-31``) and validated by the ledger.
"""

from datetime import date
from pathlib import Path

import typer
from rich.table import Table

from finboard.cli.utils import (
    build_input,
    console,
    fail,
    open_ledger,
    parse_amount,
    parse_tags,
    workspace_option,
)
from finboard.core.currency import format_currency
from finboard.core.exceptions import FinboardError
from finboard.core.models import (
    BillFrequency,
    BillInput,
    BillState,
    BudgetInput,
    BudgetPeriod,
    BudgetState,
    GoalCategory,
    GoalInput,
    InvestmentInput,
    InvestmentType,
    PaymentMethod,
    Priority,
    TransactionInput,
    TransactionType,
)
from finboard.engine.calculator import (
    bill_statuses,
    budget_utilizations,
    goal_progress,
    portfolio_summary,
)
from finboard.engine.categorizer import categorize
from finboard.engine.periods import month_range

tx_app = typer.Typer(help="Record income and expenses")
budget_app = typer.Typer(help="Manage category budgets")
goal_app = typer.Typer(help="Manage savings goals")
invest_app = typer.Typer(help="Manage investment holdings")
bill_app = typer.Typer(help="Manage bills and due dates")

BILL_STATE_STYLES = {
    BillState.OVERDUE: "[red]overdue[/red]",
    BillState.DUE_SOON: "[yellow]due soon[/yellow]",
    BillState.UPCOMING: "upcoming",
    BillState.PAID: "[green]paid[/green]",
}

BUDGET_STATE_STYLES = {
    BudgetState.OVER_BUDGET: "[red]over budget[/red]",
    BudgetState.NEAR_LIMIT: "[yellow]near limit[/yellow]",
    BudgetState.ON_TRACK: "[green]on track[/green]",
}


# -----------------------------------------------------------------------------
# Transactions
# -----------------------------------------------------------------------------


@tx_app.command(name="add")
def tx_add(
    amount: str = typer.Option(..., "--amount", "-a", help="Positive amount, e.g. 42.50"),
    description: str = typer.Option(..., "--description", "-d", help="What the transaction was for"),
    tx_type: TransactionType = typer.Option(TransactionType.EXPENSE, "--type", "-t", help="income or expense"),
    category: str = typer.Option(None, "--category", "-c", help="Category (default: suggested from description)"),
    on: str = typer.Option(None, "--date", help="Date as YYYY-MM-DD (default: today)"),
    merchant: str = typer.Option(None, "--merchant", "-m", help="Merchant name"),
    tags: str = typer.Option(None, "--tags", help="Comma-separated tags"),
    payment_method: PaymentMethod = typer.Option(None, "--payment-method", help="How it was paid"),
    notes: str = typer.Option(None, "--notes", help="Free-text notes"),
    recurring: bool = typer.Option(False, "--recurring", help="Mark as recurring"),
    workspace: Path = workspace_option(),
) -> None:
    """Add an income or expense transaction.

    When no category is given one is suggested from the description.
    """
    ws, ledger = open_ledger(workspace)

    if category is None and description:
        category = categorize(description)
        console.print(f"Suggested category: [cyan]{category}[/cyan]")

    try:
        candidate = build_input(
            TransactionInput,
            amount=amount,
            description=description,
            type=tx_type,
            category=category,
            date=on or date.today().isoformat(),
            merchant=merchant,
            tags=parse_tags(tags),
            payment_method=payment_method,
            notes=notes,
            is_recurring=recurring,
        )
        record = ledger.add_transaction(candidate)
    except FinboardError as e:
        fail(e)

    console.print(
        f"[green]Added {record.type.value}:[/green] "
        f"{format_currency(record.amount, ws.config.currency)} ({record.category}) [dim]{record.id}[/dim]"
    )


@tx_app.command(name="edit")
def tx_edit(
    record_id: str = typer.Argument(..., help="Transaction id"),
    amount: str = typer.Option(None, "--amount", "-a"),
    description: str = typer.Option(None, "--description", "-d"),
    tx_type: TransactionType = typer.Option(None, "--type", "-t"),
    category: str = typer.Option(None, "--category", "-c"),
    on: str = typer.Option(None, "--date", help="Date as YYYY-MM-DD"),
    merchant: str = typer.Option(None, "--merchant", "-m"),
    tags: str = typer.Option(None, "--tags", help="Comma-separated tags"),
    notes: str = typer.Option(None, "--notes"),
    workspace: Path = workspace_option(),
) -> None:
    """Edit fields of a transaction. Only the given options change."""
    _, ledger = open_ledger(workspace)
    try:
        patch = build_input(
            TransactionInput,
            amount=amount,
            description=description,
            type=tx_type,
            category=category,
            date=on,
            merchant=merchant,
            tags=parse_tags(tags),
            notes=notes,
        )
        ledger.update_transaction(record_id, patch)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Updated transaction:[/green] {record_id}")


@tx_app.command(name="delete")
def tx_delete(
    record_id: str = typer.Argument(..., help="Transaction id"),
    workspace: Path = workspace_option(),
) -> None:
    """Delete a transaction."""
    _, ledger = open_ledger(workspace)
    try:
        ledger.delete_transaction(record_id)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Deleted transaction:[/green] {record_id}")


@tx_app.command(name="list")
def tx_list(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of transactions to show (0 for all)"),
    category: str = typer.Option(None, "--category", "-c", help="Only this category"),
    tx_type: TransactionType = typer.Option(None, "--type", "-t", help="Only income or expense"),
    workspace: Path = workspace_option(),
) -> None:
    """List transactions, most recent first."""
    ws, ledger = open_ledger(workspace)
    currency = ws.config.currency

    transactions = sorted(ledger.transactions.get_all(), key=lambda tx: tx.date, reverse=True)
    if category:
        transactions = [tx for tx in transactions if tx.category.lower() == category.lower()]
    if tx_type:
        transactions = [tx for tx in transactions if tx.type == tx_type]

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        raise typer.Exit(0)

    shown = transactions[:limit] if limit > 0 else transactions
    table = Table(title=f"Transactions ({len(shown)} of {len(transactions)})")
    table.add_column("Date")
    table.add_column("Category")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    table.add_column("ID", style="dim")
    for tx in shown:
        style = "green" if tx.type == TransactionType.INCOME else "red"
        table.add_row(
            tx.date.isoformat(),
            tx.category,
            tx.description,
            f"[{style}]{format_currency(tx.signed_amount, currency)}[/{style}]",
            tx.id,
        )
    console.print(table)


# -----------------------------------------------------------------------------
# Budgets
# -----------------------------------------------------------------------------


@budget_app.command(name="add")
def budget_add(
    category: str = typer.Option(..., "--category", "-c", help="Category to limit"),
    amount: str = typer.Option(..., "--amount", "-a", help="Budgeted amount"),
    period: BudgetPeriod = typer.Option(BudgetPeriod.MONTHLY, "--period", "-p"),
    start: str = typer.Option(None, "--start", help="Start date YYYY-MM-DD (default: first of this month)"),
    end: str = typer.Option(None, "--end", help="End date YYYY-MM-DD (default: last of this month)"),
    threshold: int = typer.Option(None, "--threshold", help="Alert threshold in percent (1-100)"),
    rollover: bool = typer.Option(False, "--rollover", help="Carry unused budget forward"),
    workspace: Path = workspace_option(),
) -> None:
    """Add a budget for a category and date range."""
    ws, ledger = open_ledger(workspace)

    if start is None and end is None:
        first_day, last_day = month_range(date.today())
        start, end = first_day.isoformat(), last_day.isoformat()

    try:
        candidate = build_input(
            BudgetInput,
            category=category,
            budget_amount=amount,
            period=period,
            start_date=start,
            end_date=end,
            alert_threshold=threshold,
            rollover=rollover,
        )
        record = ledger.add_budget(candidate)
    except FinboardError as e:
        fail(e)

    console.print(
        f"[green]Added budget:[/green] {record.category} "
        f"{format_currency(record.budget_amount, ws.config.currency)} "
        f"({record.start_date} to {record.end_date}) [dim]{record.id}[/dim]"
    )


@budget_app.command(name="edit")
def budget_edit(
    record_id: str = typer.Argument(..., help="Budget id"),
    category: str = typer.Option(None, "--category", "-c"),
    amount: str = typer.Option(None, "--amount", "-a"),
    period: BudgetPeriod = typer.Option(None, "--period", "-p"),
    start: str = typer.Option(None, "--start"),
    end: str = typer.Option(None, "--end"),
    threshold: int = typer.Option(None, "--threshold"),
    workspace: Path = workspace_option(),
) -> None:
    """Edit fields of a budget. Only the given options change."""
    _, ledger = open_ledger(workspace)
    try:
        patch = build_input(
            BudgetInput,
            category=category,
            budget_amount=amount,
            period=period,
            start_date=start,
            end_date=end,
            alert_threshold=threshold,
        )
        ledger.update_budget(record_id, patch)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Updated budget:[/green] {record_id}")


@budget_app.command(name="delete")
def budget_delete(
    record_id: str = typer.Argument(..., help="Budget id"),
    workspace: Path = workspace_option(),
) -> None:
    """Delete a budget. Transactions are kept."""
    _, ledger = open_ledger(workspace)
    try:
        ledger.delete_budget(record_id)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Deleted budget:[/green] {record_id}")


@budget_app.command(name="list")
def budget_list(workspace: Path = workspace_option()) -> None:
    """List budgets with current utilization."""
    ws, ledger = open_ledger(workspace)
    currency = ws.config.currency

    utilizations = budget_utilizations(ledger.budgets.get_all(), ledger.transactions.get_all())
    if not utilizations:
        console.print("[yellow]No budgets found[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Budgets")
    table.add_column("Category")
    table.add_column("Period")
    table.add_column("Spent", justify="right")
    table.add_column("Budget", justify="right")
    table.add_column("Used", justify="right")
    table.add_column("Status")
    table.add_column("ID", style="dim")
    for u in utilizations:
        table.add_row(
            u.budget.category,
            f"{u.budget.start_date} to {u.budget.end_date}",
            format_currency(u.spent_amount, currency),
            format_currency(u.budget.budget_amount, currency),
            f"{u.utilization:.1f}%",
            BUDGET_STATE_STYLES[u.state],
            u.budget.id,
        )
    console.print(table)


# -----------------------------------------------------------------------------
# Goals
# -----------------------------------------------------------------------------


@goal_app.command(name="add")
def goal_add(
    title: str = typer.Option(..., "--title", help="Goal title"),
    target: str = typer.Option(..., "--target", help="Target amount"),
    target_date: str = typer.Option(..., "--date", help="Target date YYYY-MM-DD (in the future)"),
    current: str = typer.Option(None, "--current", help="Amount already saved"),
    category: GoalCategory = typer.Option(None, "--category", "-c"),
    priority: Priority = typer.Option(None, "--priority"),
    description: str = typer.Option(None, "--description", "-d"),
    workspace: Path = workspace_option(),
) -> None:
    """Add a savings goal."""
    ws, ledger = open_ledger(workspace)
    try:
        candidate = build_input(
            GoalInput,
            title=title,
            target_amount=target,
            target_date=target_date,
            current_amount=current,
            category=category,
            priority=priority,
            description=description,
        )
        record = ledger.add_goal(candidate)
    except FinboardError as e:
        fail(e)

    console.print(
        f"[green]Added goal:[/green] {record.title} "
        f"{format_currency(record.target_amount, ws.config.currency)} by {record.target_date} "
        f"[dim]{record.id}[/dim]"
    )


@goal_app.command(name="edit")
def goal_edit(
    record_id: str = typer.Argument(..., help="Goal id"),
    title: str = typer.Option(None, "--title"),
    target: str = typer.Option(None, "--target"),
    target_date: str = typer.Option(None, "--date"),
    current: str = typer.Option(None, "--current"),
    priority: Priority = typer.Option(None, "--priority"),
    active: bool = typer.Option(None, "--active/--inactive", help="Activate or archive the goal"),
    workspace: Path = workspace_option(),
) -> None:
    """Edit fields of a goal. Only the given options change."""
    _, ledger = open_ledger(workspace)
    try:
        patch = build_input(
            GoalInput,
            title=title,
            target_amount=target,
            target_date=target_date,
            current_amount=current,
            priority=priority,
            is_active=active,
        )
        ledger.update_goal(record_id, patch)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Updated goal:[/green] {record_id}")


@goal_app.command(name="progress")
def goal_progress_command(
    record_id: str = typer.Argument(..., help="Goal id"),
    amount: str = typer.Argument(..., help="Amount to add"),
    withdraw: bool = typer.Option(False, "--withdraw", help="Subtract the amount instead"),
    workspace: Path = workspace_option(),
) -> None:
    """Add money to (or withdraw from) a goal."""
    ws, ledger = open_ledger(workspace)
    try:
        value = parse_amount(amount)
        goal, completed = ledger.adjust_goal_progress(record_id, -value if withdraw else value)
    except FinboardError as e:
        fail(e)

    progress = goal_progress(goal)
    console.print(
        f"{goal.title}: {format_currency(goal.current_amount, ws.config.currency)} of "
        f"{format_currency(goal.target_amount, ws.config.currency)} ({progress.progress:.0f}%)"
    )
    if completed:
        console.print("[bold green]Goal completed![/bold green]")


@goal_app.command(name="delete")
def goal_delete(
    record_id: str = typer.Argument(..., help="Goal id"),
    workspace: Path = workspace_option(),
) -> None:
    """Delete a goal."""
    _, ledger = open_ledger(workspace)
    try:
        ledger.delete_goal(record_id)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Deleted goal:[/green] {record_id}")


@goal_app.command(name="list")
def goal_list(
    show_all: bool = typer.Option(False, "--all", help="Include inactive goals"),
    workspace: Path = workspace_option(),
) -> None:
    """List goals with progress."""
    ws, ledger = open_ledger(workspace)
    currency = ws.config.currency

    goals = [g for g in ledger.goals.get_all() if show_all or g.is_active]
    if not goals:
        console.print("[yellow]No goals found[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Goals")
    table.add_column("Title")
    table.add_column("Saved", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Target Date")
    table.add_column("ID", style="dim")
    for goal in goals:
        progress = goal_progress(goal)
        marker = "[green]✓[/green] " if progress.is_completed else ""
        table.add_row(
            f"{marker}{goal.title}",
            format_currency(goal.current_amount, currency),
            format_currency(goal.target_amount, currency),
            f"{progress.progress:.0f}%",
            goal.target_date.isoformat(),
            goal.id,
        )
    console.print(table)


# -----------------------------------------------------------------------------
# Investments
# -----------------------------------------------------------------------------


@invest_app.command(name="add")
def invest_add(
    symbol: str = typer.Option(..., "--symbol", "-s", help="Ticker symbol"),
    name: str = typer.Option(..., "--name", help="Holding name"),
    shares: str = typer.Option(..., "--shares", help="Number of shares"),
    price: str = typer.Option(..., "--price", help="Purchase price per share"),
    current_price: str = typer.Option(None, "--current-price", help="Current price (default: purchase price)"),
    purchased: str = typer.Option(None, "--date", help="Purchase date YYYY-MM-DD (default: today)"),
    inv_type: InvestmentType = typer.Option(None, "--type", "-t"),
    sector: str = typer.Option(None, "--sector"),
    workspace: Path = workspace_option(),
) -> None:
    """Add an investment holding."""
    ws, ledger = open_ledger(workspace)
    try:
        candidate = build_input(
            InvestmentInput,
            symbol=symbol,
            name=name,
            shares=shares,
            purchase_price=price,
            current_price=current_price or price,
            purchase_date=purchased or date.today().isoformat(),
            type=inv_type,
            sector=sector,
        )
        record = ledger.add_investment(candidate)
    except FinboardError as e:
        fail(e)

    console.print(
        f"[green]Added investment:[/green] {record.symbol} {record.shares} @ "
        f"{format_currency(record.purchase_price, ws.config.currency)} [dim]{record.id}[/dim]"
    )


@invest_app.command(name="edit")
def invest_edit(
    record_id: str = typer.Argument(..., help="Investment id"),
    current_price: str = typer.Option(None, "--current-price", help="Latest price per share"),
    shares: str = typer.Option(None, "--shares"),
    name: str = typer.Option(None, "--name"),
    sector: str = typer.Option(None, "--sector"),
    workspace: Path = workspace_option(),
) -> None:
    """Edit fields of an investment. Only the given options change."""
    _, ledger = open_ledger(workspace)
    try:
        patch = build_input(
            InvestmentInput,
            current_price=current_price,
            shares=shares,
            name=name,
            sector=sector,
        )
        ledger.update_investment(record_id, patch)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Updated investment:[/green] {record_id}")


@invest_app.command(name="delete")
def invest_delete(
    record_id: str = typer.Argument(..., help="Investment id"),
    workspace: Path = workspace_option(),
) -> None:
    """Delete an investment."""
    _, ledger = open_ledger(workspace)
    try:
        ledger.delete_investment(record_id)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Deleted investment:[/green] {record_id}")


@invest_app.command(name="list")
def invest_list(workspace: Path = workspace_option()) -> None:
    """List holdings with gain/loss and portfolio weight."""
    ws, ledger = open_ledger(workspace)
    currency = ws.config.currency

    summary = portfolio_summary(ledger.investments.get_all())
    if not summary.holdings:
        console.print("[yellow]No investments found[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Portfolio: {format_currency(summary.total_value, currency)} ({summary.percentage:+.1f}%)")
    table.add_column("Symbol")
    table.add_column("Shares", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Gain/Loss", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("ID", style="dim")
    for h in summary.holdings:
        style = "green" if h.gain_loss >= 0 else "red"
        table.add_row(
            h.investment.symbol,
            str(h.investment.shares),
            format_currency(h.current_value, currency),
            f"[{style}]{format_currency(h.gain_loss, currency)} ({h.gain_loss_percent:+.1f}%)[/{style}]",
            f"{h.portfolio_weight:.1f}%",
            h.investment.id,
        )
    console.print(table)


# -----------------------------------------------------------------------------
# Bills
# -----------------------------------------------------------------------------


@bill_app.command(name="add")
def bill_add(
    name: str = typer.Option(..., "--name", help="Bill name (unique)"),
    amount: str = typer.Option(..., "--amount", "-a"),
    due: str = typer.Option(..., "--due", help="Due date YYYY-MM-DD"),
    category: str = typer.Option(..., "--category", "-c"),
    recurring: bool = typer.Option(False, "--recurring"),
    frequency: BillFrequency = typer.Option(None, "--frequency", "-f"),
    auto_pay: bool = typer.Option(False, "--auto-pay", help="Paid automatically"),
    website: str = typer.Option(None, "--website"),
    workspace: Path = workspace_option(),
) -> None:
    """Add a bill."""
    ws, ledger = open_ledger(workspace)
    try:
        candidate = build_input(
            BillInput,
            name=name,
            amount=amount,
            due_date=due,
            category=category,
            is_recurring=recurring,
            frequency=frequency,
            auto_pay_enabled=auto_pay,
            website=website,
        )
        record = ledger.add_bill(candidate)
    except FinboardError as e:
        fail(e)

    console.print(
        f"[green]Added bill:[/green] {record.name} "
        f"{format_currency(record.amount, ws.config.currency)} due {record.due_date} "
        f"[dim]{record.id}[/dim]"
    )


@bill_app.command(name="edit")
def bill_edit(
    record_id: str = typer.Argument(..., help="Bill id"),
    name: str = typer.Option(None, "--name"),
    amount: str = typer.Option(None, "--amount", "-a"),
    due: str = typer.Option(None, "--due"),
    category: str = typer.Option(None, "--category", "-c"),
    frequency: BillFrequency = typer.Option(None, "--frequency", "-f"),
    workspace: Path = workspace_option(),
) -> None:
    """Edit fields of a bill. Only the given options change."""
    _, ledger = open_ledger(workspace)
    try:
        patch = build_input(
            BillInput,
            name=name,
            amount=amount,
            due_date=due,
            category=category,
            frequency=frequency,
        )
        ledger.update_bill(record_id, patch)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Updated bill:[/green] {record_id}")


@bill_app.command(name="pay")
def bill_pay(
    record_id: str = typer.Argument(..., help="Bill id"),
    workspace: Path = workspace_option(),
) -> None:
    """Mark a bill as paid."""
    _, ledger = open_ledger(workspace)
    try:
        bill = ledger.mark_bill_paid(record_id)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Paid:[/green] {bill.name}")


@bill_app.command(name="unpay")
def bill_unpay(
    record_id: str = typer.Argument(..., help="Bill id"),
    workspace: Path = workspace_option(),
) -> None:
    """Mark a bill as unpaid."""
    _, ledger = open_ledger(workspace)
    try:
        bill = ledger.mark_bill_unpaid(record_id)
    except FinboardError as e:
        fail(e)
    console.print(f"[yellow]Unpaid:[/yellow] {bill.name}")


@bill_app.command(name="delete")
def bill_delete(
    record_id: str = typer.Argument(..., help="Bill id"),
    workspace: Path = workspace_option(),
) -> None:
    """Delete a bill."""
    _, ledger = open_ledger(workspace)
    try:
        ledger.delete_bill(record_id)
    except FinboardError as e:
        fail(e)
    console.print(f"[green]Deleted bill:[/green] {record_id}")


@bill_app.command(name="list")
def bill_list(workspace: Path = workspace_option()) -> None:
    """List bills by due date with their status."""
    ws, ledger = open_ledger(workspace)
    currency = ws.config.currency

    statuses = bill_statuses(ledger.bills.get_all())
    if not statuses:
        console.print("[yellow]No bills found[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Bills")
    table.add_column("Name")
    table.add_column("Amount", justify="right")
    table.add_column("Due")
    table.add_column("Status")
    table.add_column("ID", style="dim")
    for status in statuses:
        table.add_row(
            status.bill.name,
            format_currency(status.bill.amount, currency),
            status.bill.due_date.isoformat(),
            BILL_STATE_STYLES[status.state],
            status.bill.id,
        )
    console.print(table)
