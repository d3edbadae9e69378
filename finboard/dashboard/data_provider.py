"""Dashboard data provider.

Collects records from a workspace and runs the calculators needed for
dashboard generation.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from finboard.core.models import DashboardData, TransactionType
from finboard.engine.calculator import (
    CATEGORY_BREAKDOWN_LIMIT,
    bill_statuses,
    budget_overview,
    budget_utilizations,
    category_breakdown,
    daily_spending_pattern,
    financial_metrics,
    goal_progress,
    monthly_breakdown,
    portfolio_summary,
)
from finboard.engine.insights import derive_insights
from finboard.engine.ledger import Ledger

if TYPE_CHECKING:
    from finboard.core.workspace import Workspace

RECENT_TRANSACTIONS_LIMIT = 100


class DashboardDataProvider:
    """Provides all data needed for dashboard generation."""

    def __init__(self, workspace: "Workspace"):
        """Initialize data provider.

        Args:
            workspace: The workspace to get data from.
        """
        self.ws = workspace
        self.ledger = Ledger(workspace.storage, workspace.config.default_alert_threshold)

    def get_dashboard_data(self, today: date | None = None) -> DashboardData:
        """Get complete dashboard data.

        Args:
            today: Reference date for month windows and due dates.
                Defaults to the current date.

        Returns:
            DashboardData with metrics, breakdowns and record statuses.
        """
        today = today or date.today()
        config = self.ws.config
        ctx = self.ledger.context(config.currency, today)

        monthly = monthly_breakdown(ctx.transactions, config.analysis_months, today)
        utilizations = budget_utilizations(ctx.budgets, ctx.transactions, today)
        recent = sorted(ctx.transactions, key=lambda tx: tx.date, reverse=True)

        return DashboardData(
            workspace_name=self.ws.name,
            currency=config.currency,
            theme=config.theme,
            generated_at=datetime.now(),
            today=today,
            metrics=financial_metrics(ctx.transactions),
            current_month=monthly[-1] if monthly else None,
            monthly=monthly,
            expense_categories=category_breakdown(
                ctx.transactions, TransactionType.EXPENSE, CATEGORY_BREAKDOWN_LIMIT
            ),
            daily_pattern=daily_spending_pattern(ctx.transactions),
            budgets=utilizations,
            budget_overview=budget_overview(utilizations),
            portfolio=portfolio_summary(ctx.investments, today),
            bills=bill_statuses(ctx.bills, today),
            goals=[goal_progress(goal) for goal in ctx.goals if goal.is_active],
            insights=derive_insights(ctx.transactions, config.currency),
            recent_transactions=recent[:RECENT_TRANSACTIONS_LIMIT],
        )
