"""HTML dashboard generator with Plotly charts.

Generates a standalone HTML file with interactive charts and tables.
"""

import json
from html import escape
from pathlib import Path

from finboard.core.currency import CURRENCIES, format_compact_currency, format_currency
from finboard.core.models import (
    BillState,
    BillStatusInfo,
    BudgetState,
    BudgetUtilization,
    DashboardData,
    GoalProgress,
    Insight,
    InvestmentMetrics,
    Transaction,
)

BILL_STATE_LABELS = {
    BillState.OVERDUE: "Overdue",
    BillState.DUE_SOON: "Due soon",
    BillState.UPCOMING: "Upcoming",
    BillState.PAID: "Paid",
}

BUDGET_STATE_CLASSES = {
    BudgetState.OVER_BUDGET: "danger",
    BudgetState.NEAR_LIMIT: "warning",
    BudgetState.ON_TRACK: "ok",
}


def generate_dashboard_html(data: DashboardData) -> str:
    """Generate complete dashboard HTML.

    Args:
        data: DashboardData assembled by DashboardDataProvider.

    Returns:
        Complete HTML string.
    """
    currency = data.currency
    symbol = CURRENCIES[currency].symbol if currency in CURRENCIES else f"{currency} "
    metrics = data.metrics
    balance_class = "positive" if metrics.balance >= 0 else "negative"

    # Chart series
    month_labels = [m.month for m in data.monthly]
    month_income = [float(m.income) for m in data.monthly]
    month_expenses = [float(m.expenses) for m in data.monthly]
    month_savings = [float(m.savings) for m in data.monthly]
    category_labels = [c.category for c in data.expense_categories]
    category_values = [float(c.amount) for c in data.expense_categories]
    weekday_labels = list(data.daily_pattern.keys())
    weekday_values = [float(v) for v in data.daily_pattern.values()]

    current = data.current_month
    month_expenses_value = format_currency(current.expenses, currency) if current else "-"
    month_label = current.month if current else ""

    html = f"""<!DOCTYPE html>
<html lang="en" data-theme="{data.theme.value}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Finboard - {escape(data.workspace_name)}</title>
    <script src="https://cdn.plot.ly/plotly-2.27.0.min.js"></script>
    <style>
        :root {{
            --primary: #2563eb;
            --success: #16a34a;
            --warning: #ca8a04;
            --danger: #dc2626;
            --bg-secondary: #f9fafb;
            --text-primary: #1f2937;
            --text-secondary: #6b7280;
            --border-color: #e5e7eb;
            --card-bg: #ffffff;
            --card-shadow: 0 1px 3px rgba(0,0,0,0.1);
        }}
        [data-theme="dark"] {{
            --primary: #3b82f6;
            --success: #22c55e;
            --warning: #eab308;
            --danger: #ef4444;
            --bg-secondary: #141619;
            --text-primary: #d8d9da;
            --text-secondary: #8b8d8f;
            --border-color: #2c3039;
            --card-bg: #1e2126;
            --card-shadow: 0 1px 3px rgba(0,0,0,0.5);
        }}
        * {{ box-sizing: border-box; margin: 0; padding: 0; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.5;
            color: var(--text-primary);
            background: var(--bg-secondary);
        }}
        .header {{
            background: var(--card-bg);
            border-bottom: 1px solid var(--border-color);
            padding: 1rem 2rem;
            display: flex;
            justify-content: space-between;
            align-items: center;
        }}
        .header h1 {{ font-size: 1.5rem; font-weight: 600; }}
        .header .meta {{ color: var(--text-secondary); font-size: 0.875rem; }}
        .tabs {{
            background: var(--card-bg);
            border-bottom: 1px solid var(--border-color);
            display: flex;
            padding: 0 2rem;
        }}
        .tab {{
            padding: 1rem 1.5rem;
            cursor: pointer;
            border-bottom: 2px solid transparent;
            color: var(--text-secondary);
            font-weight: 500;
        }}
        .tab.active {{ color: var(--primary); border-bottom-color: var(--primary); }}
        .content {{ padding: 2rem; max-width: 1400px; margin: 0 auto; }}
        .tab-content {{ display: none; }}
        .tab-content.active {{ display: block; }}
        .cards {{
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
            gap: 1rem;
            margin-bottom: 2rem;
        }}
        .card, .chart-container {{
            background: var(--card-bg);
            border-radius: 12px;
            padding: 1.5rem;
            box-shadow: var(--card-shadow);
        }}
        .chart-container {{ margin-bottom: 2rem; }}
        .card-label {{ font-size: 0.875rem; color: var(--text-secondary); margin-bottom: 0.25rem; }}
        .card-value {{ font-size: 1.75rem; font-weight: 600; }}
        .chart-title {{ font-size: 1rem; font-weight: 600; margin-bottom: 1rem; }}
        .section-title {{ font-size: 1.25rem; font-weight: 600; margin: 2rem 0 1rem; }}
        table {{
            width: 100%;
            border-collapse: collapse;
            background: var(--card-bg);
            border-radius: 12px;
            overflow: hidden;
            box-shadow: var(--card-shadow);
            margin-bottom: 2rem;
        }}
        th, td {{ padding: 0.75rem 1rem; text-align: left; border-bottom: 1px solid var(--border-color); }}
        th {{ background: var(--bg-secondary); font-weight: 600; }}
        td.number {{ text-align: right; font-variant-numeric: tabular-nums; }}
        .positive {{ color: var(--success); }}
        .negative {{ color: var(--danger); }}
        .budget-bar {{ display: flex; align-items: center; gap: 1rem; margin-bottom: 0.75rem; }}
        .budget-bar .label {{ width: 150px; font-weight: 500; }}
        .budget-bar .bar-container {{
            flex: 1;
            height: 24px;
            background: var(--border-color);
            border-radius: 4px;
            overflow: hidden;
        }}
        .budget-bar .bar {{ height: 100%; }}
        .bar.ok {{ background: var(--success); }}
        .bar.warning {{ background: var(--warning); }}
        .bar.danger {{ background: var(--danger); }}
        .budget-bar .value {{ width: 260px; text-align: right; font-size: 0.875rem; }}
        .badge {{ padding: 0.125rem 0.5rem; border-radius: 9999px; font-size: 0.75rem; font-weight: 600; }}
        .badge.overdue {{ background: var(--danger); color: #fff; }}
        .badge.due_soon {{ background: var(--warning); color: #fff; }}
        .badge.upcoming {{ background: var(--border-color); }}
        .badge.paid {{ background: var(--success); color: #fff; }}
        .insight {{ border-left: 4px solid var(--primary); margin-bottom: 1rem; }}
        .insight.high {{ border-left-color: var(--danger); }}
        .insight.medium {{ border-left-color: var(--warning); }}
        .insight .action {{ color: var(--text-secondary); font-size: 0.875rem; margin-top: 0.5rem; }}
    </style>
</head>
<body>
    <div class="header">
        <h1>{escape(data.workspace_name)}</h1>
        <div class="meta">Generated {data.generated_at:%Y-%m-%d %H:%M} &middot; {currency}</div>
    </div>
    <div class="tabs">
        <div class="tab active" data-tab="tab-overview">Overview</div>
        <div class="tab" data-tab="tab-budgets">Budgets</div>
        <div class="tab" data-tab="tab-goals">Goals &amp; Investments</div>
        <div class="tab" data-tab="tab-bills">Bills</div>
        <div class="tab" data-tab="tab-insights">Insights</div>
        <div class="tab" data-tab="tab-transactions">Transactions</div>
    </div>

    <div class="content">
        <div class="tab-content active" id="tab-overview">
            <div class="cards">
                <div class="card">
                    <div class="card-label">Balance</div>
                    <div class="card-value {balance_class}">{format_currency(metrics.balance, currency)}</div>
                </div>
                <div class="card">
                    <div class="card-label">Total Income</div>
                    <div class="card-value">{format_compact_currency(metrics.income, currency)}</div>
                </div>
                <div class="card">
                    <div class="card-label">Total Expenses</div>
                    <div class="card-value">{format_compact_currency(metrics.expenses, currency)}</div>
                </div>
                <div class="card">
                    <div class="card-label">Savings Rate</div>
                    <div class="card-value">{metrics.savings_rate:.1f}%</div>
                </div>
                <div class="card">
                    <div class="card-label">Spent {month_label}</div>
                    <div class="card-value">{month_expenses_value}</div>
                </div>
            </div>
            <div class="chart-container">
                <div class="chart-title">Monthly Income vs Expenses</div>
                <div id="chart-monthly"></div>
            </div>
            <div class="chart-container">
                <div class="chart-title">Expenses by Category</div>
                <div id="chart-categories"></div>
            </div>
            <div class="chart-container">
                <div class="chart-title">Average Expense by Weekday</div>
                <div id="chart-weekday"></div>
            </div>
        </div>

        <div class="tab-content" id="tab-budgets">
            {_render_budget_section(data)}
        </div>

        <div class="tab-content" id="tab-goals">
            <div class="section-title">Goals</div>
            {_render_goal_rows(data.goals, currency)}
            <div class="section-title">Portfolio</div>
            <div class="cards">
                <div class="card">
                    <div class="card-label">Portfolio Value</div>
                    <div class="card-value">{format_currency(data.portfolio.total_value, currency)}</div>
                </div>
                <div class="card">
                    <div class="card-label">Gain / Loss</div>
                    <div class="card-value {'positive' if data.portfolio.gain_loss >= 0 else 'negative'}">{format_currency(data.portfolio.gain_loss, currency)} ({data.portfolio.percentage:+.1f}%)</div>
                </div>
            </div>
            {_render_holdings_table(data.portfolio.holdings, currency)}
        </div>

        <div class="tab-content" id="tab-bills">
            {_render_bills_table(data.bills, currency)}
        </div>

        <div class="tab-content" id="tab-insights">
            {_render_insights(data.insights)}
        </div>

        <div class="tab-content" id="tab-transactions">
            {_render_transactions_table(data.recent_transactions, currency)}
        </div>
    </div>

    <script>
        document.querySelectorAll('.tab').forEach(tab => {{
            tab.addEventListener('click', () => {{
                document.querySelectorAll('.tab').forEach(t => t.classList.remove('active'));
                document.querySelectorAll('.tab-content').forEach(c => c.classList.remove('active'));
                tab.classList.add('active');
                document.getElementById(tab.dataset.tab).classList.add('active');
                window.dispatchEvent(new Event('resize'));
            }});
        }});

        const currencySymbol = {json.dumps(symbol)};
        const isDarkTheme = document.documentElement.getAttribute('data-theme') === 'dark';
        const bg = isDarkTheme ? '#1e2126' : '#ffffff';
        const gridColor = isDarkTheme ? '#2c3039' : '#e5e7eb';
        const textColor = isDarkTheme ? '#d8d9da' : '#1f2937';
        const plotlyLayout = {{
            paper_bgcolor: bg,
            plot_bgcolor: bg,
            font: {{ color: textColor }},
            autosize: true,
            margin: {{ t: 30, r: 30, b: 50, l: 60 }},
            xaxis: {{ gridcolor: gridColor, automargin: true }},
            yaxis: {{ gridcolor: gridColor, automargin: true }},
            legend: {{ orientation: 'h', y: 1.1, bgcolor: 'rgba(0,0,0,0)' }},
        }};
        const plotlyConfig = {{ responsive: true, displayModeBar: false }};
        const currencyHover = '%{{x}}<br>%{{fullData.name}}: ' + currencySymbol + '%{{y:,.2f}}<extra></extra>';

        const monthLabels = {json.dumps(month_labels)};
        Plotly.newPlot('chart-monthly', [
            {{ x: monthLabels, y: {json.dumps(month_income)}, name: 'Income', type: 'bar', marker: {{ color: '#16a34a' }}, hovertemplate: currencyHover }},
            {{ x: monthLabels, y: {json.dumps(month_expenses)}, name: 'Expenses', type: 'bar', marker: {{ color: '#dc2626' }}, hovertemplate: currencyHover }},
            {{ x: monthLabels, y: {json.dumps(month_savings)}, name: 'Savings', type: 'scatter', line: {{ color: '#3b82f6' }}, hovertemplate: currencyHover }},
        ], {{ ...plotlyLayout, barmode: 'group', xaxis: {{ ...plotlyLayout.xaxis, type: 'category' }} }}, plotlyConfig);

        Plotly.newPlot('chart-categories', [{{
            labels: {json.dumps(category_labels)},
            values: {json.dumps(category_values)},
            type: 'pie',
            hole: 0.45,
            hovertemplate: '%{{label}}: ' + currencySymbol + '%{{value:,.2f}} (%{{percent}})<extra></extra>',
        }}], plotlyLayout, plotlyConfig);

        Plotly.newPlot('chart-weekday', [{{
            x: {json.dumps(weekday_labels)},
            y: {json.dumps(weekday_values)},
            name: 'Average',
            type: 'bar',
            marker: {{ color: '#8b5cf6' }},
            hovertemplate: currencyHover,
        }}], plotlyLayout, plotlyConfig);
    </script>
</body>
</html>
"""
    return html


def _render_budget_bar(utilization: BudgetUtilization, currency: str) -> str:
    """Render a budget progress bar with spent / budgeted amounts."""
    budget = utilization.budget
    bar_class = BUDGET_STATE_CLASSES[utilization.state]
    width = min(float(utilization.utilization), 100.0)
    return f"""
        <div class="budget-bar">
            <div class="label">{escape(budget.category)}</div>
            <div class="bar-container">
                <div class="bar {bar_class}" style="width: {width:.1f}%"></div>
            </div>
            <div class="value">
                {format_currency(utilization.spent_amount, currency)} /
                {format_currency(budget.budget_amount, currency)}
                ({utilization.utilization:.0f}%)
            </div>
        </div>
    """


def _render_budget_section(data: DashboardData) -> str:
    """Render budgets tab content."""
    if not data.budgets:
        return "<p>No budgets set up yet.</p>"

    currency = data.currency
    overview = data.budget_overview
    bars = "\n".join(_render_budget_bar(u, currency) for u in data.budgets)
    return f"""
        <div class="cards">
            <div class="card">
                <div class="card-label">Total Budget</div>
                <div class="card-value">{format_currency(overview.total_budget, currency)}</div>
            </div>
            <div class="card">
                <div class="card-label">Total Spent</div>
                <div class="card-value">{format_currency(overview.total_spent, currency)}</div>
            </div>
            <div class="card">
                <div class="card-label">Utilization</div>
                <div class="card-value">{overview.overall_utilization:.1f}%</div>
            </div>
            <div class="card">
                <div class="card-label">Over Budget</div>
                <div class="card-value {'negative' if overview.over_budget_count else ''}">{overview.over_budget_count}</div>
            </div>
        </div>
        <div class="chart-container">
            {bars}
        </div>
    """


def _render_goal_rows(goals: list[GoalProgress], currency: str) -> str:
    if not goals:
        return "<p>No active goals.</p>"

    rows = []
    for item in goals:
        goal = item.goal
        rows.append(f"""
            <tr>
                <td>{escape(goal.title)}</td>
                <td class="number">{format_currency(goal.current_amount, currency)}</td>
                <td class="number">{format_currency(goal.target_amount, currency)}</td>
                <td class="number {'positive' if item.is_completed else ''}">{item.progress:.0f}%</td>
                <td>{goal.target_date.isoformat()}</td>
            </tr>
        """)
    return f"""
        <table>
            <thead><tr><th>Goal</th><th>Saved</th><th>Target</th><th>Progress</th><th>Target Date</th></tr></thead>
            <tbody>{''.join(rows)}</tbody>
        </table>
    """


def _render_holdings_table(holdings: list[InvestmentMetrics], currency: str) -> str:
    if not holdings:
        return "<p>No investments.</p>"

    rows = []
    for h in holdings:
        css_class = "positive" if h.gain_loss >= 0 else "negative"
        rows.append(f"""
            <tr>
                <td>{escape(h.investment.symbol)}</td>
                <td>{escape(h.investment.name)}</td>
                <td class="number">{format_currency(h.current_value, currency)}</td>
                <td class="number {css_class}">{format_currency(h.gain_loss, currency)} ({h.gain_loss_percent:+.1f}%)</td>
                <td class="number">{h.portfolio_weight:.1f}%</td>
            </tr>
        """)
    return f"""
        <table>
            <thead><tr><th>Symbol</th><th>Name</th><th>Value</th><th>Gain / Loss</th><th>Weight</th></tr></thead>
            <tbody>{''.join(rows)}</tbody>
        </table>
    """


def _render_bills_table(bills: list[BillStatusInfo], currency: str) -> str:
    if not bills:
        return "<p>No bills set up yet.</p>"

    rows = []
    for status in bills:
        bill = status.bill
        rows.append(f"""
            <tr>
                <td>{escape(bill.name)}</td>
                <td>{escape(bill.category)}</td>
                <td>{bill.due_date.isoformat()}</td>
                <td class="number">{format_currency(bill.amount, currency)}</td>
                <td><span class="badge {status.state.value}">{BILL_STATE_LABELS[status.state]}</span></td>
            </tr>
        """)
    return f"""
        <table>
            <thead><tr><th>Bill</th><th>Category</th><th>Due</th><th>Amount</th><th>Status</th></tr></thead>
            <tbody>{''.join(rows)}</tbody>
        </table>
    """


def _render_insights(insights: list[Insight]) -> str:
    if not insights:
        return "<p>Not enough data for insights yet.</p>"

    blocks = []
    for insight in insights:
        action = f'<div class="action">{escape(insight.action)}</div>' if insight.action else ""
        blocks.append(f"""
            <div class="card insight {insight.priority.value}">
                <div class="chart-title">{escape(insight.title)}</div>
                <div>{escape(insight.description)}</div>
                {action}
            </div>
        """)
    return "\n".join(blocks)


def _render_transactions_table(transactions: list[Transaction], currency: str) -> str:
    if not transactions:
        return "<p>No transactions recorded.</p>"

    rows = []
    for tx in transactions:
        css_class = "positive" if tx.signed_amount >= 0 else "negative"
        rows.append(f"""
            <tr>
                <td>{tx.date.isoformat()}</td>
                <td>{escape(tx.category)}</td>
                <td>{escape(tx.description)}</td>
                <td class="number {css_class}">{format_currency(tx.signed_amount, currency)}</td>
            </tr>
        """)
    return f"""
        <table>
            <thead><tr><th>Date</th><th>Category</th><th>Description</th><th>Amount</th></tr></thead>
            <tbody>{''.join(rows)}</tbody>
        </table>
    """


def save_dashboard(html: str, output_path: Path) -> None:
    """Save dashboard HTML to file.

    Args:
        html: HTML content.
        output_path: Output file path.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
