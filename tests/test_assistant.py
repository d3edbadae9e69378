"""Tests for the rule-based assistant."""

from datetime import date
from decimal import Decimal

from finboard.core.models import (
    AssistantContext,
    Bill,
    Budget,
    Goal,
    Investment,
    Transaction,
    TransactionType,
)
from finboard.engine.assistant import (
    FALLBACK_RESPONSE,
    GREETING,
    ResponseRule,
    contains_any,
    match_rule,
    respond,
)

TODAY = date(2024, 3, 15)


def expense(amount: str, category: str, on: date = date(2024, 3, 5)) -> Transaction:
    return Transaction(
        amount=Decimal(amount),
        category=category,
        description="test",
        date=on,
        type=TransactionType.EXPENSE,
    )


def context(**overrides) -> AssistantContext:
    return AssistantContext(today=TODAY, **overrides)


class TestMatchRule:
    """Tests for rule ordering."""

    def test_food_before_generic_spending(self) -> None:
        """Food spending questions hit the food rule first."""
        assert match_rule("How much did I spend on groceries?").name == "food_spending"

    def test_monthly_spending(self) -> None:
        """Spending plus month picks the monthly rule."""
        assert match_rule("What did I spend this month").name == "monthly_spending"

    def test_generic_spending(self) -> None:
        """Plain spending questions fall through to the spending rule."""
        assert match_rule("Where have I spent money").name == "spending"

    def test_over_budget_before_status(self) -> None:
        """'over budget' wins over plain budget status."""
        assert match_rule("Am I over budget?").name == "over_budget"
        assert match_rule("Show my budget").name == "budget_status"

    def test_case_insensitive(self) -> None:
        """Queries are lowercased before matching."""
        assert match_rule("INVESTMENTS").name == "investments"

    def test_no_match(self) -> None:
        """Unrelated text matches nothing."""
        assert match_rule("tell me a joke") is None


class TestRespond:
    """Tests for respond function."""

    def test_fallback(self) -> None:
        """Unmatched queries get the fallback text."""
        assert respond("tell me a joke", context()) == FALLBACK_RESPONSE

    def test_blank_query_greets(self) -> None:
        """An empty or whitespace query gets the greeting."""
        assert respond("", context()) == GREETING
        assert respond("   ") == GREETING

    def test_empty_context_default(self) -> None:
        """A missing context is treated as no data."""
        assert respond("what are my bills") == "You don't have any bills set up yet."

    def test_food_spending_live_values(self) -> None:
        """Food spending is computed from this month's records."""
        ctx = context(transactions=[
            expense("150", "Groceries"),
            expense("50", "Dining Out"),
            expense("200", "Rent"),
            expense("999", "Groceries", on=date(2024, 2, 10)),
        ])
        answer = respond("How much did I spend on food?", ctx)
        assert "$200.00" in answer
        assert "50%" in answer

    def test_monthly_spending_empty(self) -> None:
        """No expenses this month gives a plain answer."""
        answer = respond("How much did I spend this month?", context())
        assert answer == "You haven't recorded any expenses this month yet."

    def test_over_budget_details(self) -> None:
        """Over-budget categories are listed with amounts."""
        budget = Budget(
            category="Groceries",
            budget_amount=Decimal(100),
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 31),
        )
        ctx = context(budgets=[budget], transactions=[expense("130", "Groceries")])
        answer = respond("am i over budget", ctx)
        assert answer.startswith("You're currently over budget in 1 category")
        assert "$130.00 spent vs $100.00 budgeted" in answer

    def test_within_budget(self) -> None:
        """No overspend gives the good-news answer."""
        budget = Budget(
            category="Groceries",
            budget_amount=Decimal(100),
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 31),
        )
        ctx = context(budgets=[budget], transactions=[expense("10", "Groceries")])
        assert respond("over budget?", ctx) == "Good news! You're within budget in every category."

    def test_goals(self) -> None:
        """Goal progress lists each active goal."""
        goal = Goal(
            title="Vacation",
            target_amount=Decimal(1000),
            current_amount=Decimal(250),
            target_date=date(2025, 1, 1),
        )
        answer = respond("How are my goals?", context(goals=[goal]))
        assert "Vacation: 25% complete ($250.00/$1,000.00)" in answer

    def test_investments(self) -> None:
        """Portfolio summary uses current prices."""
        holding = Investment(
            symbol="VTI",
            name="Total Market",
            shares=Decimal(10),
            purchase_price=Decimal(100),
            current_price=Decimal(110),
            purchase_date=date(2023, 3, 15),
        )
        answer = respond("how are my investments", context(investments=[holding]))
        assert "Total Value: $1,100.00 (+10.0% return)" in answer
        assert "VTI: +10.0%" in answer

    def test_bills(self) -> None:
        """Bills are listed with their state."""
        bill = Bill(name="Internet", amount=Decimal(60), due_date=date(2024, 3, 13), category="Utilities")
        answer = respond("any bills?", context(bills=[bill]))
        assert "Internet: $60.00 overdue by 2 days" in answer
        assert "You have $60.00 in unpaid bills." in answer

    def test_custom_rules(self) -> None:
        """A caller-supplied rule table replaces the default."""
        rules = (ResponseRule("ping", contains_any("ping"), lambda ctx: "pong"),)
        assert respond("PING", context(), rules) == "pong"
        assert respond("budget", context(), rules) == FALLBACK_RESPONSE
