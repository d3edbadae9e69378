"""Tests for the insight checks."""

from datetime import date
from decimal import Decimal

from finboard.core.models import InsightType, Priority, Transaction, TransactionType
from finboard.engine.insights import (
    check_dominant_category,
    check_frequent_merchant,
    check_savings_rate,
    check_subscription_costs,
    check_unusual_spending,
    check_weekend_spending,
    derive_insights,
    is_subscription,
)


def tx(
    amount: str,
    category: str = "Groceries",
    on: date = date(2024, 1, 3),
    tx_type: TransactionType = TransactionType.EXPENSE,
    description: str = "purchase",
    merchant: str | None = None,
    tags: list[str] | None = None,
) -> Transaction:
    return Transaction(
        amount=Decimal(amount),
        category=category,
        description=description,
        date=on,
        type=tx_type,
        merchant=merchant,
        tags=tags or [],
    )


class TestDominantCategory:
    """Tests for check_dominant_category."""

    def test_high_priority_above_half(self) -> None:
        """A category above 50% is high priority."""
        insight = check_dominant_category(
            [tx("60", "Rent"), tx("40", "Groceries")], "USD"
        )
        assert insight is not None
        assert insight.type == InsightType.PATTERN
        assert insight.priority == Priority.HIGH
        assert insight.category == "Rent"
        assert "$60.00" in insight.description

    def test_medium_priority(self) -> None:
        """Between 40% and 50% is medium priority."""
        insight = check_dominant_category(
            [tx("45", "Rent"), tx("30", "Groceries"), tx("25", "Travel")], "USD"
        )
        assert insight is not None
        assert insight.priority == Priority.MEDIUM

    def test_not_dominant(self) -> None:
        """At or below 40% nothing fires."""
        transactions = [tx("40", "Rent"), tx("30", "Groceries"), tx("30", "Travel")]
        assert check_dominant_category(transactions, "USD") is None


class TestUnusualSpending:
    """Tests for check_unusual_spending."""

    def test_outlier(self) -> None:
        """An expense far above the mean is flagged."""
        transactions = [tx("10") for _ in range(9)] + [tx("500")]
        insight = check_unusual_spending(transactions, "USD")
        assert insight is not None
        assert insight.type == InsightType.ALERT
        assert insight.description.startswith("1 transaction(s)")

    def test_uniform(self) -> None:
        """Equal expenses produce no alert."""
        assert check_unusual_spending([tx("10"), tx("10")], "USD") is None


class TestSavingsRate:
    """Tests for check_savings_rate."""

    def test_low(self) -> None:
        """Savings below 10% is a tip."""
        transactions = [
            tx("1000", "Salary", tx_type=TransactionType.INCOME),
            tx("950", "Rent"),
        ]
        insight = check_savings_rate(transactions, "USD")
        assert insight is not None
        assert insight.title == "Low Savings Rate"
        assert "5.0%" in insight.description

    def test_excellent(self) -> None:
        """Savings at 20% or more is an achievement."""
        transactions = [
            tx("1000", "Salary", tx_type=TransactionType.INCOME),
            tx("800", "Rent"),
        ]
        insight = check_savings_rate(transactions, "USD")
        assert insight is not None
        assert insight.type == InsightType.ACHIEVEMENT
        assert not insight.actionable

    def test_middle_band(self) -> None:
        """Between 10% and 20% nothing fires."""
        transactions = [
            tx("1000", "Salary", tx_type=TransactionType.INCOME),
            tx("850", "Rent"),
        ]
        assert check_savings_rate(transactions, "USD") is None

    def test_no_income(self) -> None:
        """Without income there is no rate to judge."""
        assert check_savings_rate([tx("10")], "USD") is None


class TestFrequentMerchant:
    """Tests for check_frequent_merchant."""

    def test_three_visits(self) -> None:
        """Three transactions at one merchant fire."""
        transactions = [tx("5", merchant="Starbucks") for _ in range(3)]
        insight = check_frequent_merchant(transactions, "USD")
        assert insight is not None
        assert "3 transactions at Starbucks" in insight.description

    def test_two_visits(self) -> None:
        """Two visits are not enough."""
        transactions = [tx("5", merchant="Starbucks") for _ in range(2)]
        assert check_frequent_merchant(transactions, "USD") is None


class TestWeekendSpending:
    """Tests for check_weekend_spending."""

    def test_spike(self) -> None:
        """Weekend average above 1.5x weekday average fires."""
        transactions = [
            tx("10", on=date(2024, 1, 3)),  # Wednesday
            tx("40", on=date(2024, 1, 6)),  # Saturday
        ]
        insight = check_weekend_spending(transactions, "USD")
        assert insight is not None
        assert insight.title == "Weekend Spending Spike"

    def test_weekend_only(self) -> None:
        """No weekday expenses means no comparison."""
        assert check_weekend_spending([tx("40", on=date(2024, 1, 7))], "USD") is None


class TestSubscriptions:
    """Tests for subscription detection."""

    def test_is_subscription(self) -> None:
        """Category, description keyword and tag all count."""
        assert is_subscription(tx("1", "Subscriptions"))
        assert is_subscription(tx("1", "Fitness", description="Gym membership"))
        assert is_subscription(tx("1", "Other", tags=["Subscription"]))
        assert not is_subscription(tx("1", "Groceries"))

    def test_high_costs(self) -> None:
        """Subscriptions above 10% of expenses fire."""
        transactions = [tx("20", "Subscriptions"), tx("80", "Groceries")]
        insight = check_subscription_costs(transactions, "USD")
        assert insight is not None
        assert "20.0%" in insight.description

    def test_exactly_ten_percent(self) -> None:
        """The 10% boundary does not fire."""
        transactions = [tx("10", "Subscriptions"), tx("90", "Groceries")]
        assert check_subscription_costs(transactions, "USD") is None


class TestDeriveInsights:
    """Tests for derive_insights."""

    def test_empty(self) -> None:
        """No transactions produce no insights."""
        assert derive_insights([]) == []

    def test_order_follows_checks(self) -> None:
        """Insights appear in check order."""
        transactions = [
            tx("1000", "Salary", tx_type=TransactionType.INCOME),
            tx("950", "Rent"),
        ]
        titles = [i.title for i in derive_insights(transactions)]
        assert titles[0] == "Top Spending Category"
        assert "Low Savings Rate" in titles
        assert titles.index("Top Spending Category") < titles.index("Low Savings Rate")
