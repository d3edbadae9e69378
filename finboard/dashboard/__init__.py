"""Dashboard module for standalone HTML report generation.

Tabs:
    1. Overview - KPIs, monthly income vs expenses, category and weekday charts
    2. Budgets - utilization bars and totals
    3. Goals & Investments - goal progress, portfolio holdings
    4. Bills - due dates and payment status
    5. Insights - derived spending observations
    6. Transactions - most recent records
"""

from finboard.dashboard.data_provider import DashboardDataProvider
from finboard.dashboard.generator import generate_dashboard_html, save_dashboard

__all__ = [
    "DashboardDataProvider",
    "generate_dashboard_html",
    "save_dashboard",
]
