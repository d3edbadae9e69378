"""Aggregation engine.

Pure reducers over transaction, budget, investment, goal and bill
collections. Every ratio guards against a zero denominator by returning 0,
so results never contain NaN or Infinity and no function here raises on
well-typed input.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal

from finboard.core.models import (
    Bill,
    BillState,
    BillStatusInfo,
    Budget,
    BudgetOverview,
    BudgetState,
    BudgetUtilization,
    CategoryShare,
    FinancialMetrics,
    Goal,
    GoalProgress,
    Investment,
    InvestmentMetrics,
    MonthlySummary,
    PortfolioSummary,
    Transaction,
    TransactionType,
)
from finboard.engine.periods import days_between, format_month, iterate_months

DUE_SOON_DAYS = 3
CATEGORY_BREAKDOWN_LIMIT = 8
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def calculate_share(amount: Decimal, total: Decimal) -> Decimal:
    """Calculate ``amount`` as a percentage of ``total``.

    Args:
        amount: Part amount.
        total: Whole amount.

    Returns:
        Percentage (25 = 25%), or 0 if total is zero.
    """
    if total == 0:
        return Decimal(0)
    return amount / total * 100


def filter_by_date_range(
    transactions: list[Transaction],
    start: date,
    end: date,
) -> list[Transaction]:
    """Return transactions with ``start <= date <= end``."""
    return [tx for tx in transactions if start <= tx.date <= end]


def total_by_type(transactions: list[Transaction], tx_type: TransactionType) -> Decimal:
    """Sum of amounts over transactions of the given type.

    Args:
        transactions: Transactions to sum.
        tx_type: INCOME or EXPENSE.

    Returns:
        Total amount (0 for an empty collection).
    """
    return sum(
        (tx.amount for tx in transactions if tx.type == tx_type),
        Decimal(0),
    )


def financial_metrics(transactions: list[Transaction]) -> FinancialMetrics:
    """Calculate income, expenses, balance and savings rate.

    Savings rate = (income - expenses) / income * 100, or 0 without income.
    """
    income = total_by_type(transactions, TransactionType.INCOME)
    expenses = total_by_type(transactions, TransactionType.EXPENSE)
    balance = income - expenses

    return FinancialMetrics(
        income=income,
        expenses=expenses,
        balance=balance,
        savings_rate=calculate_share(balance, income),
        transaction_count=len(transactions),
    )


def monthly_breakdown(
    transactions: list[Transaction],
    months_back: int,
    anchor_date: date | None = None,
) -> list[MonthlySummary]:
    """Summarize income, expenses and savings per calendar month.

    Covers the last ``months_back`` months ending with the month containing
    ``anchor_date``, oldest first. Each month includes transactions from its
    first to its last day inclusive.

    Args:
        transactions: All transactions.
        months_back: Number of months to produce.
        anchor_date: Date inside the most recent month (default: today).

    Returns:
        List of MonthlySummary, one per month.
    """
    if anchor_date is None:
        anchor_date = date.today()

    months: list[MonthlySummary] = []
    for first_day, last_day in iterate_months(anchor_date, months_back):
        month_txs = filter_by_date_range(transactions, first_day, last_day)
        income = total_by_type(month_txs, TransactionType.INCOME)
        expenses = total_by_type(month_txs, TransactionType.EXPENSE)

        months.append(
            MonthlySummary(
                month=format_month(first_day),
                period_start=first_day,
                period_end=last_day,
                income=income,
                expenses=expenses,
                savings=income - expenses,
            )
        )

    return months


def category_breakdown(
    transactions: list[Transaction],
    tx_type: TransactionType = TransactionType.EXPENSE,
    limit: int = CATEGORY_BREAKDOWN_LIMIT,
) -> list[CategoryShare]:
    """Group transactions of a type by category.

    Percentages are relative to the total of *all* matching categories, so
    they sum to 100 only when no categories were cut by ``limit``.

    Args:
        transactions: Transactions to group.
        tx_type: Which transaction type to include.
        limit: Maximum number of categories returned.

    Returns:
        CategoryShare entries sorted by amount, largest first.
    """
    by_category: dict[str, Decimal] = defaultdict(Decimal)
    for tx in transactions:
        if tx.type == tx_type:
            by_category[tx.category] += tx.amount

    total = sum(by_category.values(), Decimal(0))

    shares = [
        CategoryShare(
            category=category,
            amount=amount,
            percentage=calculate_share(amount, total),
        )
        for category, amount in by_category.items()
    ]
    shares.sort(key=lambda s: s.amount, reverse=True)
    return shares[:limit]


def budget_transactions(budget: Budget, transactions: list[Transaction]) -> list[Transaction]:
    """Expenses in the budget's category within its date range (inclusive)."""
    return [
        tx
        for tx in transactions
        if tx.type == TransactionType.EXPENSE
        and tx.category == budget.category
        and budget.start_date <= tx.date <= budget.end_date
    ]


def budget_state(utilization: Decimal, alert_threshold: int) -> BudgetState:
    """Classify utilization against the budget's alert threshold."""
    if utilization > 100:
        return BudgetState.OVER_BUDGET
    if utilization > alert_threshold:
        return BudgetState.NEAR_LIMIT
    return BudgetState.ON_TRACK


def budget_utilization(
    budget: Budget,
    transactions: list[Transaction],
    today: date | None = None,
) -> BudgetUtilization:
    """Calculate spending, utilization and pace for a budget.

    Time math:
        total_days = end_date - start_date
        days_passed = today - start_date (unclamped)
        time_progress = days_passed / total_days * 100, clamped to [0, 100]
        daily_budget = budget_amount / total_days
        daily_spending = spent / days_passed (0 if days_passed <= 0)
        projected_spending = daily_spending * total_days

    Args:
        budget: The budget.
        transactions: All transactions (filtered here).
        today: Reference date (default: today).

    Returns:
        BudgetUtilization with spending and projection figures.
    """
    if today is None:
        today = date.today()

    matching = budget_transactions(budget, transactions)
    spent = sum((tx.amount for tx in matching), Decimal(0))
    utilization = calculate_share(spent, budget.budget_amount)

    total_days = days_between(budget.start_date, budget.end_date)
    days_remaining = days_between(today, budget.end_date)
    days_passed = total_days - days_remaining

    if total_days > 0:
        raw_progress = Decimal(days_passed) / Decimal(total_days) * 100
        time_progress = min(Decimal(100), max(Decimal(0), raw_progress))
        daily_budget = budget.budget_amount / total_days
    else:
        time_progress = Decimal(0)
        daily_budget = Decimal(0)

    daily_spending = spent / days_passed if days_passed > 0 else Decimal(0)
    projected = daily_spending * total_days

    return BudgetUtilization(
        budget=budget.model_copy(update={"spent_amount": spent}),
        spent_amount=spent,
        utilization=utilization,
        remaining_amount=budget.budget_amount - spent,
        transaction_count=len(matching),
        total_days=total_days,
        days_passed=days_passed,
        days_remaining=days_remaining,
        time_progress=time_progress,
        daily_budget=daily_budget,
        daily_spending=daily_spending,
        projected_spending=projected,
        state=budget_state(utilization, budget.alert_threshold),
    )


def budget_utilizations(
    budgets: list[Budget],
    transactions: list[Transaction],
    today: date | None = None,
) -> list[BudgetUtilization]:
    """Calculate utilization for every budget, preserving order."""
    return [budget_utilization(b, transactions, today) for b in budgets]


def budget_overview(utilizations: list[BudgetUtilization]) -> BudgetOverview:
    """Totals across all budgets."""
    total_budget = sum((u.budget.budget_amount for u in utilizations), Decimal(0))
    total_spent = sum((u.spent_amount for u in utilizations), Decimal(0))

    return BudgetOverview(
        total_budget=total_budget,
        total_spent=total_spent,
        remaining=total_budget - total_spent,
        overall_utilization=calculate_share(total_spent, total_budget),
        over_budget_count=sum(1 for u in utilizations if u.state == BudgetState.OVER_BUDGET),
        near_limit_count=sum(1 for u in utilizations if u.state == BudgetState.NEAR_LIMIT),
    )


def active_budgets(budgets: list[Budget], today: date | None = None) -> list[Budget]:
    """Budgets whose date range contains ``today``."""
    if today is None:
        today = date.today()
    return [b for b in budgets if b.start_date <= today <= b.end_date]


def portfolio_total(investments: list[Investment]) -> Decimal:
    """Sum of current market values."""
    return sum((inv.current_value for inv in investments), Decimal(0))


def investment_metrics(
    investment: Investment,
    portfolio_total: Decimal,
    today: date | None = None,
) -> InvestmentMetrics:
    """Calculate value, gain/loss, weight and annualized return.

    Annualized return = gain_loss_percent * 365 / days_since_purchase,
    or 0 when the position was bought today (or dated in the future).

    Args:
        investment: The holding.
        portfolio_total: Sum of current values of all holdings.
        today: Reference date (default: today).
    """
    if today is None:
        today = date.today()

    current_value = investment.current_value
    purchase_value = investment.purchase_value
    gain_loss = current_value - purchase_value
    gain_loss_percent = calculate_share(gain_loss, purchase_value)

    days_held = days_between(investment.purchase_date, today)
    annualized = gain_loss_percent * 365 / days_held if days_held > 0 else Decimal(0)

    return InvestmentMetrics(
        investment=investment,
        current_value=current_value,
        purchase_value=purchase_value,
        gain_loss=gain_loss,
        gain_loss_percent=gain_loss_percent,
        portfolio_weight=calculate_share(current_value, portfolio_total),
        days_since_purchase=days_held,
        annualized_return=annualized,
    )


def portfolio_summary(
    investments: list[Investment],
    today: date | None = None,
) -> PortfolioSummary:
    """Aggregate performance over all holdings."""
    total_value = portfolio_total(investments)
    total_cost = sum((inv.purchase_value for inv in investments), Decimal(0))
    gain_loss = total_value - total_cost

    return PortfolioSummary(
        total_value=total_value,
        total_cost=total_cost,
        gain_loss=gain_loss,
        percentage=calculate_share(gain_loss, total_cost),
        holdings=[investment_metrics(inv, total_value, today) for inv in investments],
    )


def bill_status(bill: Bill, today: date | None = None) -> BillStatusInfo:
    """Classify a bill by its due date.

    overdue:  unpaid and due before today
    due_soon: unpaid and due within the next 3 days (today included)
    upcoming: unpaid otherwise
    paid:     is_paid
    """
    if today is None:
        today = date.today()

    days_until_due = days_between(today, bill.due_date)

    if bill.is_paid:
        state = BillState.PAID
    elif days_until_due < 0:
        state = BillState.OVERDUE
    elif days_until_due <= DUE_SOON_DAYS:
        state = BillState.DUE_SOON
    else:
        state = BillState.UPCOMING

    return BillStatusInfo(bill=bill, days_until_due=days_until_due, state=state)


def bill_statuses(bills: list[Bill], today: date | None = None) -> list[BillStatusInfo]:
    """Status for every bill, soonest due first."""
    return sorted((bill_status(b, today) for b in bills), key=lambda s: s.bill.due_date)


def upcoming_bills(bills: list[Bill], today: date | None = None) -> list[Bill]:
    """Unpaid bills due today or later."""
    if today is None:
        today = date.today()
    return [b for b in bills if not b.is_paid and b.due_date >= today]


def overdue_bills(bills: list[Bill], today: date | None = None) -> list[Bill]:
    """Unpaid bills due before today."""
    if today is None:
        today = date.today()
    return [b for b in bills if not b.is_paid and b.due_date < today]


def goal_progress(goal: Goal) -> GoalProgress:
    """Progress toward a goal. Over-achievement shows as > 100%."""
    return GoalProgress(
        goal=goal,
        progress=calculate_share(goal.current_amount, goal.target_amount),
        remaining_amount=max(Decimal(0), goal.target_amount - goal.current_amount),
        is_completed=goal.current_amount >= goal.target_amount,
    )


def daily_spending_pattern(transactions: list[Transaction]) -> dict[str, Decimal]:
    """Average expense per transaction for each day of the week.

    Returns:
        Mapping Mon..Sun -> average amount (0 for days without expenses).
    """
    totals = [Decimal(0)] * 7
    counts = [0] * 7
    for tx in transactions:
        if tx.type != TransactionType.EXPENSE:
            continue
        weekday = tx.date.weekday()
        totals[weekday] += tx.amount
        counts[weekday] += 1

    return {
        label: totals[i] / counts[i] if counts[i] else Decimal(0)
        for i, label in enumerate(WEEKDAY_LABELS)
    }
