"""Statistical insights over transactions.

A fixed sequence of independent checks. Each check contributes zero or one
Insight and every applicable check fires; order of the output follows the
order of ``INSIGHT_CHECKS``.
"""

from collections import Counter
from collections.abc import Callable
from decimal import Decimal

from finboard.core.currency import format_currency
from finboard.core.models import (
    Insight,
    InsightType,
    Priority,
    Transaction,
    TransactionType,
)
from finboard.engine.calculator import calculate_share, category_breakdown, total_by_type

DOMINANT_CATEGORY_SHARE = Decimal(40)
DOMINANT_CATEGORY_HIGH_SHARE = Decimal(50)
OUTLIER_FACTOR = Decimal("2.5")
LOW_SAVINGS_RATE = Decimal(10)
HIGH_SAVINGS_RATE = Decimal(20)
FREQUENT_MERCHANT_VISITS = 3
WEEKEND_SPENDING_FACTOR = Decimal("1.5")
SUBSCRIPTION_SHARE = Decimal("0.1")
SUBSCRIPTION_KEYWORDS = ("subscription", "membership")


def _expenses(transactions: list[Transaction]) -> list[Transaction]:
    return [tx for tx in transactions if tx.type == TransactionType.EXPENSE]


def _mean(amounts: list[Decimal]) -> Decimal:
    return sum(amounts, Decimal(0)) / len(amounts)


def check_dominant_category(transactions: list[Transaction], currency: str) -> Insight | None:
    """Flag a top expense category above 40% of total expenses."""
    top = category_breakdown(transactions, TransactionType.EXPENSE, limit=1)
    if not top or top[0].amount <= 0:
        return None

    share = top[0]
    if share.percentage <= DOMINANT_CATEGORY_SHARE:
        return None

    return Insight(
        type=InsightType.PATTERN,
        title="Top Spending Category",
        description=(
            f"Your highest spending category is {share.category} with "
            f"{format_currency(share.amount, currency)} "
            f"({share.percentage:.1f}% of total expenses)."
        ),
        priority=Priority.HIGH if share.percentage > DOMINANT_CATEGORY_HIGH_SHARE else Priority.MEDIUM,
        category=share.category,
        actionable=True,
        action="Consider reviewing expenses in this category",
    )


def check_unusual_spending(transactions: list[Transaction], currency: str) -> Insight | None:
    """Flag expenses larger than 2.5x the mean expense."""
    expenses = _expenses(transactions)
    if not expenses:
        return None

    average = _mean([tx.amount for tx in expenses])
    large = [tx for tx in expenses if tx.amount > average * OUTLIER_FACTOR]
    if not large:
        return None

    return Insight(
        type=InsightType.ALERT,
        title="Unusual Spending Detected",
        description=(
            f"{len(large)} transaction(s) are significantly higher than your "
            f"average spending of {format_currency(average, currency)}."
        ),
        priority=Priority.HIGH,
        actionable=True,
        action="Review these large transactions for accuracy",
    )


def check_savings_rate(transactions: list[Transaction], currency: str) -> Insight | None:
    """Flag a savings rate below 10% or at/above 20%."""
    income = total_by_type(transactions, TransactionType.INCOME)
    if income <= 0:
        return None

    expenses = total_by_type(transactions, TransactionType.EXPENSE)
    rate = calculate_share(income - expenses, income)

    if rate < LOW_SAVINGS_RATE:
        return Insight(
            type=InsightType.TIP,
            title="Low Savings Rate",
            description=(
                f"Your current savings rate is {rate:.1f}%. Financial experts "
                "recommend saving at least 20% of income."
            ),
            priority=Priority.HIGH,
            actionable=True,
            action="Consider reducing expenses or increasing income",
        )
    if rate >= HIGH_SAVINGS_RATE:
        return Insight(
            type=InsightType.ACHIEVEMENT,
            title="Excellent Savings Rate",
            description=(
                f"Congratulations! Your savings rate of {rate:.1f}% exceeds "
                "the recommended 20%."
            ),
            priority=Priority.LOW,
            actionable=False,
        )
    return None


def check_frequent_merchant(transactions: list[Transaction], currency: str) -> Insight | None:
    """Flag the most visited merchant with at least 3 transactions."""
    counts = Counter(tx.merchant for tx in transactions if tx.merchant)
    if not counts:
        return None

    # most_common keeps first-seen order among ties
    merchant, visits = counts.most_common(1)[0]
    if visits < FREQUENT_MERCHANT_VISITS:
        return None

    return Insight(
        type=InsightType.PATTERN,
        title="Frequent Merchant",
        description=(
            f"You've made {visits} transactions at {merchant}. "
            "Consider if this aligns with your spending goals."
        ),
        priority=Priority.MEDIUM,
        actionable=True,
        action="Review spending patterns at frequent merchants",
    )


def check_weekend_spending(transactions: list[Transaction], currency: str) -> Insight | None:
    """Flag average weekend expenses above 1.5x the weekday average."""
    weekend: list[Decimal] = []
    weekday: list[Decimal] = []
    for tx in _expenses(transactions):
        (weekend if tx.date.weekday() >= 5 else weekday).append(tx.amount)

    if not weekend or not weekday:
        return None

    avg_weekend = _mean(weekend)
    avg_weekday = _mean(weekday)
    if avg_weekend <= avg_weekday * WEEKEND_SPENDING_FACTOR:
        return None

    return Insight(
        type=InsightType.PATTERN,
        title="Weekend Spending Spike",
        description=(
            f"Your average weekend spending ({format_currency(avg_weekend, currency)}) "
            f"is significantly higher than weekdays ({format_currency(avg_weekday, currency)})."
        ),
        priority=Priority.MEDIUM,
        actionable=True,
        action="Consider planning weekend activities with a budget in mind",
    )


def is_subscription(tx: Transaction) -> bool:
    """Subscriptions category, a subscription keyword, or a subscription tag."""
    if tx.category == "Subscriptions":
        return True
    description = tx.description.lower()
    if any(keyword in description for keyword in SUBSCRIPTION_KEYWORDS):
        return True
    return any("subscription" in tag.lower() for tag in tx.tags)


def check_subscription_costs(transactions: list[Transaction], currency: str) -> Insight | None:
    """Flag subscriptions above 10% of total expenses."""
    expenses = _expenses(transactions)
    subscriptions = [tx for tx in expenses if is_subscription(tx)]
    if not subscriptions:
        return None

    total_expenses = sum((tx.amount for tx in expenses), Decimal(0))
    total_subscriptions = sum((tx.amount for tx in subscriptions), Decimal(0))
    if total_subscriptions <= total_expenses * SUBSCRIPTION_SHARE:
        return None

    share = calculate_share(total_subscriptions, total_expenses)
    return Insight(
        type=InsightType.TIP,
        title="High Subscription Costs",
        description=(
            f"You're spending {format_currency(total_subscriptions, currency)} on "
            f"subscriptions, which is {share:.1f}% of your expenses."
        ),
        priority=Priority.MEDIUM,
        category="Subscriptions",
        actionable=True,
        action="Review your subscriptions and consider canceling unused ones",
    )


INSIGHT_CHECKS: tuple[Callable[[list[Transaction], str], Insight | None], ...] = (
    check_dominant_category,
    check_unusual_spending,
    check_savings_rate,
    check_frequent_merchant,
    check_weekend_spending,
    check_subscription_costs,
)


def derive_insights(transactions: list[Transaction], currency: str = "USD") -> list[Insight]:
    """Run every insight check over the transactions.

    Args:
        transactions: Transactions to analyze.
        currency: Currency code for amounts in descriptions.

    Returns:
        Insights in check order; empty when there are no transactions.
    """
    if not transactions:
        return []

    insights: list[Insight] = []
    for check in INSIGHT_CHECKS:
        insight = check(transactions, currency)
        if insight is not None:
            insights.append(insight)
    return insights
