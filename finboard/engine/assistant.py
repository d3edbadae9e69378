"""Rule-based finance assistant.

Queries are answered from an ordered table of rules. The query is
lowercased and the first rule whose predicate matches renders the
response; values in responses are computed from the AssistantContext.
Nothing here is generative: add a rule to teach the assistant a new
question.
"""

from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import NamedTuple

from finboard.core.currency import format_currency
from finboard.core.models import (
    AssistantContext,
    BillState,
    BudgetState,
    Transaction,
    TransactionType,
)
from finboard.engine.calculator import (
    active_budgets,
    bill_statuses,
    budget_utilizations,
    calculate_share,
    category_breakdown,
    filter_by_date_range,
    financial_metrics,
    goal_progress,
    portfolio_summary,
    total_by_type,
)
from finboard.engine.periods import month_range

Predicate = Callable[[str], bool]
Renderer = Callable[[AssistantContext], str]


class ResponseRule(NamedTuple):
    name: str
    matches: Predicate
    render: Renderer


def contains_any(*keywords: str) -> Predicate:
    """Predicate: the query contains at least one keyword."""
    return lambda text: any(keyword in text for keyword in keywords)


def contains_all(*predicates: Predicate) -> Predicate:
    """Predicate: every sub-predicate matches."""
    return lambda text: all(p(text) for p in predicates)


# -----------------------------------------------------------------------------
# Context helpers
# -----------------------------------------------------------------------------


def _money(ctx: AssistantContext, amount: Decimal) -> str:
    return format_currency(amount, ctx.currency)


def _this_month(ctx: AssistantContext) -> list[Transaction]:
    start, end = month_range(ctx.today)
    return filter_by_date_range(ctx.transactions, start, end)


def _year_to_date(ctx: AssistantContext) -> list[Transaction]:
    return filter_by_date_range(ctx.transactions, date(ctx.today.year, 1, 1), ctx.today)


def _category_expenses(transactions: list[Transaction], *categories: str) -> Decimal:
    return sum(
        (
            tx.amount
            for tx in transactions
            if tx.type == TransactionType.EXPENSE and tx.category in categories
        ),
        Decimal(0),
    )


# -----------------------------------------------------------------------------
# Renderers
# -----------------------------------------------------------------------------


def render_food_spending(ctx: AssistantContext) -> str:
    month = _this_month(ctx)
    food = _category_expenses(month, "Groceries", "Dining Out")
    total = total_by_type(month, TransactionType.EXPENSE)
    if food == 0:
        return "You haven't recorded any grocery or dining expenses this month."

    share = calculate_share(food, total)
    response = (
        f"Based on your recent transactions, you've spent {_money(ctx, food)} on "
        f"groceries and dining out this month. This represents about {share:.0f}% "
        "of your total expenses."
    )
    if share > 15:
        response += " Consider meal planning to optimize this category."
    return response


def render_monthly_spending(ctx: AssistantContext) -> str:
    month = _this_month(ctx)
    total = total_by_type(month, TransactionType.EXPENSE)
    if total == 0:
        return "You haven't recorded any expenses this month yet."

    top = category_breakdown(month, TransactionType.EXPENSE, limit=3)
    areas = ", ".join(f"{s.category} ({_money(ctx, s.amount)})" for s in top)
    response = (
        f"Your total spending this month is {_money(ctx, total)} across all categories. "
        f"Your top spending areas are: {areas}."
    )

    budgeted = sum((b.budget_amount for b in active_budgets(ctx.budgets, ctx.today)), Decimal(0))
    if budgeted > 0:
        difference = calculate_share(budgeted - total, budgeted)
        if difference >= 0:
            response += f" You're currently {difference:.0f}% under your total monthly budget."
        else:
            response += f" You're currently {abs(difference):.0f}% over your total monthly budget."
    return response


def render_spending_help(ctx: AssistantContext) -> str:
    return (
        "I can help you analyze your spending by category, time period, or merchant. "
        "What specific spending information would you like to know?"
    )


def render_top_categories(ctx: AssistantContext) -> str:
    shares = category_breakdown(_this_month(ctx), TransactionType.EXPENSE, limit=5)
    if not shares:
        return "No expenses recorded this month yet, so there are no top categories to show."

    lines = [f"Your top {len(shares)} spending categories this month are:"]
    for i, share in enumerate(shares, start=1):
        lines.append(f"{i}. {share.category}: {_money(ctx, share.amount)} ({share.percentage:.0f}%)")
    lines.append("")
    lines.append("Would you like detailed analysis of any specific category?")
    return "\n".join(lines)


def render_over_budget(ctx: AssistantContext) -> str:
    utilizations = budget_utilizations(ctx.budgets, ctx.transactions, ctx.today)
    over = [u for u in utilizations if u.state == BudgetState.OVER_BUDGET]
    if not utilizations:
        return "You haven't set up any budgets yet. Create one to start tracking your limits."
    if not over:
        return "Good news! You're within budget in every category."

    details = ", ".join(
        f"{u.budget.category} ({_money(ctx, u.spent_amount)} spent vs "
        f"{_money(ctx, u.budget.budget_amount)} budgeted)"
        for u in over
    )
    noun = "category" if len(over) == 1 else "categories"
    return (
        f"You're currently over budget in {len(over)} {noun}: {details}. "
        "Consider reducing discretionary purchases or adjusting these budgets."
    )


def render_budget_status(ctx: AssistantContext) -> str:
    utilizations = budget_utilizations(ctx.budgets, ctx.transactions, ctx.today)
    if not utilizations:
        return "You haven't set up any budgets yet. Create one to start tracking your limits."

    lines = ["Budget Status Summary:"]
    for u in utilizations:
        used = (
            f"{u.budget.category}: {u.utilization:.0f}% used "
            f"({_money(ctx, u.spent_amount)}/{_money(ctx, u.budget.budget_amount)})"
        )
        if u.state == BudgetState.OVER_BUDGET:
            lines.append(f"⚠️ {used} - Over budget!")
        elif u.state == BudgetState.NEAR_LIMIT:
            lines.append(f"⚠️ {used} - Near limit")
        else:
            lines.append(f"✅ {used}")

    over = sum(1 for u in utilizations if u.state == BudgetState.OVER_BUDGET)
    lines.append("")
    if over == 0:
        lines.append("Overall, you're doing well with your budgets!")
    else:
        lines.append(f"{over} of {len(utilizations)} budgets need attention.")
    return "\n".join(lines)


def render_savings_tips(ctx: AssistantContext) -> str:
    utilizations = budget_utilizations(ctx.budgets, ctx.transactions, ctx.today)
    over = [u for u in utilizations if u.state == BudgetState.OVER_BUDGET]

    tips: list[str] = []
    for u in over[:2]:
        tips.append(
            f"**Reduce {u.budget.category.lower()} expenses** - You're "
            f"{_money(ctx, -u.remaining_amount)} over budget here"
        )
    tips.extend([
        "**Optimize subscriptions** - Review recurring payments",
        "**Meal prep** - Cooking at home trims food costs",
        "**Use the 24-hour rule** for non-essential purchases",
        "**Automate savings** - Set up automatic transfers",
    ])

    lines = ["Here are personalized savings tips based on your spending:", ""]
    lines.extend(f"{i}. {tip}" for i, tip in enumerate(tips, start=1))
    lines.append("")
    lines.append("Which area would you like specific advice on?")
    return "\n".join(lines)


def render_income(ctx: AssistantContext) -> str:
    metrics = financial_metrics(_this_month(ctx))
    if metrics.income == 0:
        return "You haven't recorded any income this month yet."

    response = (
        f"Your total income this month is {_money(ctx, metrics.income)}. After expenses of "
        f"{_money(ctx, metrics.expenses)}, you have {_money(ctx, metrics.balance)} remaining "
        f"({metrics.savings_rate:.1f}% savings rate)."
    )
    if metrics.savings_rate >= 20:
        response += " This meets the recommended 20% savings rate. Great job!"
    elif metrics.savings_rate >= 10:
        response += " This is close to the recommended 20% savings rate."
    else:
        response += " Aim for the recommended 20% savings rate."
    return response


def render_goals(ctx: AssistantContext) -> str:
    active = [g for g in ctx.goals if g.is_active]
    if not active:
        return "You don't have any active goals. Set one up to start tracking your progress."

    lines = ["Goal Progress Update:"]
    for goal in active:
        progress = goal_progress(goal)
        marker = "🎉" if progress.is_completed else "•"
        lines.append(
            f"{marker} {goal.title}: {progress.progress:.0f}% complete "
            f"({_money(ctx, goal.current_amount)}/{_money(ctx, goal.target_amount)})"
        )
    lines.append("")
    lines.append("You're making great progress! Which goal would you like to focus on?")
    return "\n".join(lines)


def render_health(ctx: AssistantContext) -> str:
    metrics = financial_metrics(_this_month(ctx))
    utilizations = budget_utilizations(ctx.budgets, ctx.transactions, ctx.today)
    within = sum(1 for u in utilizations if u.state != BudgetState.OVER_BUDGET)
    active = [g for g in ctx.goals if g.is_active]

    lines = ["Financial Health Snapshot:"]
    lines.append(f"• Savings rate this month: {metrics.savings_rate:.1f}%")
    if utilizations:
        lines.append(f"• Budgets within limit: {within} of {len(utilizations)}")
    if active:
        average = sum((goal_progress(g).progress for g in active), Decimal(0)) / len(active)
        lines.append(f"• Average goal progress: {average:.0f}%")
    if ctx.investments:
        portfolio = portfolio_summary(ctx.investments, ctx.today)
        lines.append(f"• Portfolio return: {portfolio.percentage:+.1f}%")
    lines.append("")
    if metrics.savings_rate < 20:
        lines.append("Focus on raising your savings rate toward 20% to improve your score.")
    else:
        lines.append("Your finances look healthy. Keep it up!")
    return "\n".join(lines)


def render_investments(ctx: AssistantContext) -> str:
    if not ctx.investments:
        return "You don't have any investments yet. Add holdings to track portfolio performance."

    portfolio = portfolio_summary(ctx.investments, ctx.today)
    lines = [
        "Investment Portfolio Summary:",
        f"Total Value: {_money(ctx, portfolio.total_value)} ({portfolio.percentage:+.1f}% return)",
        "",
        "Top Performers:",
    ]
    best = sorted(portfolio.holdings, key=lambda h: h.gain_loss_percent, reverse=True)[:2]
    for holding in best:
        arrow = "📈" if holding.gain_loss >= 0 else "📉"
        lines.append(
            f"{arrow} {holding.investment.symbol}: {holding.gain_loss_percent:+.1f}% "
            f"({_money(ctx, holding.current_value)} value)"
        )
    lines.append("")
    lines.append(
        "Consider diversifying with index funds and increasing your monthly "
        "contributions to reach your long-term goals."
    )
    return "\n".join(lines)


def render_bills(ctx: AssistantContext) -> str:
    if not ctx.bills:
        return "You don't have any bills set up yet."

    lines = ["Upcoming Bills:"]
    unpaid_total = Decimal(0)
    for status in bill_statuses(ctx.bills, ctx.today):
        bill = status.bill
        amount = _money(ctx, bill.amount)
        if status.state == BillState.PAID:
            lines.append(f"✅ {bill.name}: {amount} (paid)")
            continue
        unpaid_total += bill.amount
        if status.state == BillState.OVERDUE:
            lines.append(f"🚨 {bill.name}: {amount} overdue by {-status.days_until_due} days")
        elif status.state == BillState.DUE_SOON:
            lines.append(f"⚠️ {bill.name}: {amount} due in {status.days_until_due} days")
        else:
            lines.append(f"📅 {bill.name}: {amount} due in {status.days_until_due} days")
    lines.append("")
    lines.append(f"You have {_money(ctx, unpaid_total)} in unpaid bills.")
    return "\n".join(lines)


def render_taxes(ctx: AssistantContext) -> str:
    paid = _category_expenses(_year_to_date(ctx), "Taxes")
    return (
        "Tax Summary:\n"
        f"• You've paid {_money(ctx, paid)} in taxes this year\n"
        "• Based on your income, you should set aside about 25% for taxes\n"
        "• Consider maximizing tax-advantaged accounts like your 401(k) and HSA\n"
        "• Track your deductible expenses like charitable donations and business expenses\n\n"
        "Would you like more specific tax planning advice?"
    )


def render_debt(ctx: AssistantContext) -> str:
    paid = _category_expenses(_year_to_date(ctx), "Debt Payment")
    return (
        "Debt Overview:\n"
        f"• Debt payments this year: {_money(ctx, paid)}\n\n"
        "Recommendation: Focus on paying off high-interest debt such as credit cards "
        "first, then move on to lower-interest loans."
    )


def render_retirement(ctx: AssistantContext) -> str:
    contributed = _category_expenses(_year_to_date(ctx), "Retirement")
    return (
        "Retirement Planning:\n"
        f"• Retirement contributions this year: {_money(ctx, contributed)}\n\n"
        "Consider increasing your monthly contributions and taking full advantage "
        "of any employer match."
    )


def render_help(ctx: AssistantContext) -> str:
    return (
        "I can help you with:\n\n"
        "💰 **Spending Analysis** - Track expenses by category, merchant, or time\n"
        "📊 **Budget Monitoring** - Check budget status and get alerts\n"
        "🎯 **Goal Tracking** - Monitor progress toward financial goals\n"
        "💡 **Smart Insights** - Get personalized financial recommendations\n"
        "📈 **Investment Overview** - Portfolio performance and suggestions\n"
        "📋 **Bill Management** - Upcoming payments and reminders\n\n"
        "What would you like to explore?"
    )


FALLBACK_RESPONSE = (
    "I'm here to help with your finances! Try asking me about:\n\n"
    "• \"How much did I spend this month?\"\n"
    "• \"What's my budget status?\"\n"
    "• \"How are my goals progressing?\"\n"
    "• \"Give me some savings tips\"\n"
    "• \"What bills are due soon?\"\n"
    "• \"How's my financial health?\"\n\n"
    "What would you like to know?"
)

GREETING = (
    "Hello! I'm your financial assistant. I can help you analyze your spending "
    "patterns, track budgets, and provide personalized financial insights. "
    "What would you like to know?"
)

_SPENDING = contains_any("spend", "spent")

RESPONSE_RULES: tuple[ResponseRule, ...] = (
    ResponseRule(
        "food_spending",
        contains_all(_SPENDING, contains_any("food", "grocery", "groceries")),
        render_food_spending,
    ),
    ResponseRule(
        "monthly_spending",
        contains_all(_SPENDING, contains_any("month", "monthly")),
        render_monthly_spending,
    ),
    ResponseRule("spending", _SPENDING, render_spending_help),
    ResponseRule(
        "top_categories",
        contains_all(contains_any("top"), contains_any("categories", "category")),
        render_top_categories,
    ),
    ResponseRule(
        "over_budget",
        contains_all(contains_any("budget"), contains_any("over", "exceeded")),
        render_over_budget,
    ),
    ResponseRule("budget_status", contains_any("budget"), render_budget_status),
    ResponseRule("savings_tips", contains_any("save", "saving"), render_savings_tips),
    ResponseRule("income", contains_any("income"), render_income),
    ResponseRule("goals", contains_any("goal", "goals"), render_goals),
    ResponseRule("health", contains_any("health", "score"), render_health),
    ResponseRule("investments", contains_any("invest", "investment"), render_investments),
    ResponseRule("bills", contains_any("bill", "bills"), render_bills),
    ResponseRule("taxes", contains_any("tax", "taxes"), render_taxes),
    ResponseRule("debt", contains_any("debt", "loan"), render_debt),
    ResponseRule("retirement", contains_any("retire", "retirement"), render_retirement),
    ResponseRule("help", contains_any("help", "what can you"), render_help),
)


def match_rule(
    query: str,
    rules: tuple[ResponseRule, ...] = RESPONSE_RULES,
) -> ResponseRule | None:
    """Return the first rule matching the query, or None."""
    text = query.lower()
    for rule in rules:
        if rule.matches(text):
            return rule
    return None


def respond(
    query: str,
    context: AssistantContext | None = None,
    rules: tuple[ResponseRule, ...] = RESPONSE_RULES,
) -> str:
    """Answer a question about the user's finances.

    Args:
        query: Free-text question.
        context: Records to answer from (default: empty snapshot).
        rules: Ordered rule table; first match wins.

    Returns:
        The rendered response, a greeting for a blank query, or a fallback
        listing example questions.
    """
    if not query.strip():
        return GREETING
    if context is None:
        context = AssistantContext()

    rule = match_rule(query, rules)
    if rule is None:
        return FALLBACK_RESPONSE
    return rule.render(context)
