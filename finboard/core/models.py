"""Domain models for Finboard.

All financial data structures are defined here using Pydantic v2. Stored
entities are validated at the mutation boundary (see
``finboard.engine.mutations``); the models themselves only enforce types.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field, field_validator


# Alias for input models whose field is itself named "date".
OptionalDate = date | None


def new_id(kind: str) -> str:
    """Generate a unique record identifier such as ``bill_3f2a...``."""
    return f"{kind}_{uuid4().hex}"


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class TransactionType(str, Enum):
    """Direction of a transaction. Amounts are always positive."""

    INCOME = "income"
    EXPENSE = "expense"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    DIGITAL_WALLET = "digital_wallet"
    CHECK = "check"
    AUTOMATIC_PAYMENT = "automatic_payment"
    MOBILE_PAYMENT = "mobile_payment"
    CRYPTO = "crypto"


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class GoalCategory(str, Enum):
    EMERGENCY = "emergency"
    VACATION = "vacation"
    HOUSE = "house"
    CAR = "car"
    EDUCATION = "education"
    RETIREMENT = "retirement"
    WEDDING = "wedding"
    BUSINESS = "business"
    DEBT = "debt"
    TECH = "tech"
    HEALTH = "health"
    GIFT = "gift"
    INVESTMENT = "investment"
    TRAVEL = "travel"
    HOBBY = "hobby"
    OTHER = "other"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InvestmentType(str, Enum):
    STOCK = "stock"
    BOND = "bond"
    ETF = "etf"
    CRYPTO = "crypto"
    MUTUAL_FUND = "mutual_fund"
    REIT = "reit"
    COMMODITY = "commodity"
    FOREX = "forex"
    OPTION = "option"
    FUTURES = "futures"


class BillFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIANNUALLY = "biannually"
    YEARLY = "yearly"


class BillState(str, Enum):
    """Status of a bill relative to today."""

    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    UPCOMING = "upcoming"
    PAID = "paid"


class BudgetState(str, Enum):
    """Status of a budget relative to its alert threshold.

    OVER_BUDGET: utilization > 100.
    NEAR_LIMIT:  alert_threshold < utilization <= 100.
    ON_TRACK:    utilization <= alert_threshold.
    """

    OVER_BUDGET = "over_budget"
    NEAR_LIMIT = "near_limit"
    ON_TRACK = "on_track"


class InsightType(str, Enum):
    PATTERN = "pattern"
    TIP = "tip"
    FORECAST = "forecast"
    ALERT = "alert"
    ACHIEVEMENT = "achievement"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


# -----------------------------------------------------------------------------
# Entities
# -----------------------------------------------------------------------------


class Transaction(BaseModel):
    """A single income or expense record.

    Attributes:
        id: Unique identifier (``transaction_<hex>``).
        amount: Positive amount. The sign is carried by ``type``.
        category: Category name, usually drawn from the taxonomy.
        description: Free-text description (used for categorization).
        date: Transaction date.
        type: Income adds to the balance, expense subtracts.
    """

    id: str = Field(default_factory=lambda: new_id("transaction"))
    amount: Decimal
    category: str
    description: str
    date: date
    type: TransactionType
    is_recurring: bool = False
    tags: list[str] = Field(default_factory=list)
    location: str | None = None
    payment_method: PaymentMethod | None = None
    merchant: str | None = None
    notes: str | None = None

    @property
    def signed_amount(self) -> Decimal:
        """Amount with income positive and expense negative."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount


class Budget(BaseModel):
    """Spending limit for a category over a date range.

    ``spent_amount`` is not authoritative: it is recomputed from
    transactions by ``budget_utilization`` whenever it is needed.
    """

    id: str = Field(default_factory=lambda: new_id("budget"))
    category: str
    budget_amount: Decimal
    spent_amount: Decimal = Decimal(0)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    alert_threshold: int = 80
    rollover: bool = False
    start_date: date
    end_date: date


class Goal(BaseModel):
    """A savings goal."""

    id: str = Field(default_factory=lambda: new_id("goal"))
    title: str
    description: str = ""
    target_amount: Decimal
    current_amount: Decimal = Decimal(0)
    target_date: date
    category: GoalCategory = GoalCategory.OTHER
    priority: Priority = Priority.MEDIUM
    is_active: bool = True
    created_at: date = Field(default_factory=date.today)

    @computed_field  # type: ignore[misc]
    @property
    def progress(self) -> Decimal:
        """Progress toward target in percent (may exceed 100)."""
        if self.target_amount == 0:
            return Decimal(0)
        return self.current_amount / self.target_amount * 100


class Investment(BaseModel):
    """A holding in the investment portfolio."""

    id: str = Field(default_factory=lambda: new_id("investment"))
    symbol: str
    name: str
    shares: Decimal
    purchase_price: Decimal
    current_price: Decimal
    purchase_date: date
    type: InvestmentType = InvestmentType.STOCK
    sector: str | None = None
    exchange: str | None = None
    dividend_yield: Decimal | None = None
    notes: str | None = None

    @property
    def current_value(self) -> Decimal:
        return self.shares * self.current_price

    @property
    def purchase_value(self) -> Decimal:
        return self.shares * self.purchase_price


class Bill(BaseModel):
    """A bill with a due date."""

    id: str = Field(default_factory=lambda: new_id("bill"))
    name: str
    amount: Decimal
    due_date: date
    category: str
    is_recurring: bool = False
    frequency: BillFrequency | None = None
    is_paid: bool = False
    payment_method: str | None = None
    notes: str | None = None
    account_number: str | None = None
    website: str | None = None
    auto_pay_enabled: bool = False


# -----------------------------------------------------------------------------
# Input models (create candidates and update patches)
# -----------------------------------------------------------------------------
#
# Every field is optional: required-field presence is checked by the
# mutation layer in a fixed order so the first violated rule is reported.
# For updates, only explicitly set fields are merged (exclude_unset).


class TransactionInput(BaseModel):
    amount: Decimal | None = None
    category: str | None = None
    description: str | None = None
    date: OptionalDate = None
    type: TransactionType | None = None
    is_recurring: bool | None = None
    tags: list[str] | None = None
    location: str | None = None
    payment_method: PaymentMethod | None = None
    merchant: str | None = None
    notes: str | None = None


class BudgetInput(BaseModel):
    category: str | None = None
    budget_amount: Decimal | None = None
    period: BudgetPeriod | None = None
    alert_threshold: int | None = None
    rollover: bool | None = None
    start_date: date | None = None
    end_date: date | None = None


class GoalInput(BaseModel):
    title: str | None = None
    description: str | None = None
    target_amount: Decimal | None = None
    current_amount: Decimal | None = None
    target_date: date | None = None
    category: GoalCategory | None = None
    priority: Priority | None = None
    is_active: bool | None = None


class InvestmentInput(BaseModel):
    symbol: str | None = None
    name: str | None = None
    shares: Decimal | None = None
    purchase_price: Decimal | None = None
    current_price: Decimal | None = None
    purchase_date: date | None = None
    type: InvestmentType | None = None
    sector: str | None = None
    exchange: str | None = None
    dividend_yield: Decimal | None = None
    notes: str | None = None


class BillInput(BaseModel):
    name: str | None = None
    amount: Decimal | None = None
    due_date: date | None = None
    category: str | None = None
    is_recurring: bool | None = None
    frequency: BillFrequency | None = None
    is_paid: bool | None = None
    payment_method: str | None = None
    notes: str | None = None
    account_number: str | None = None
    website: str | None = None
    auto_pay_enabled: bool | None = None


# -----------------------------------------------------------------------------
# Workspace Configuration
# -----------------------------------------------------------------------------


class WorkspaceConfig(BaseModel):
    """Configuration for a Finboard workspace.

    A workspace is a directory holding ``finboard.json`` and the SQLite
    database with all records.
    """

    name: str = Field(min_length=1)
    description: str | None = None

    currency: str = Field(default="USD", min_length=3, max_length=3, pattern=r"^[A-Z]{3}$")
    theme: Theme = Theme.LIGHT

    default_alert_threshold: int = Field(default=80, ge=1, le=100)
    analysis_months: int = Field(default=6, ge=1)  # Months shown in breakdowns

    storage_path: str = ".finboard/finboard.db"
    reports_dir: str = "reports"

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: str) -> str:
        """Only currencies with known display rules are accepted."""
        from finboard.core.currency import CURRENCIES

        if value not in CURRENCIES:
            raise ValueError(f"Unsupported currency: {value}")
        return value


# -----------------------------------------------------------------------------
# Aggregated Data Models (engine outputs)
# -----------------------------------------------------------------------------


class MonthlySummary(BaseModel):
    """Income, expenses and savings for one calendar month."""

    month: str  # "Jan 2024"
    period_start: date
    period_end: date  # Inclusive last day of month
    income: Decimal = Decimal(0)
    expenses: Decimal = Decimal(0)
    savings: Decimal = Decimal(0)  # income - expenses


class CategoryShare(BaseModel):
    """A category's total and its share of all filtered transactions."""

    category: str
    amount: Decimal
    percentage: Decimal = Decimal(0)


class FinancialMetrics(BaseModel):
    income: Decimal = Decimal(0)
    expenses: Decimal = Decimal(0)
    balance: Decimal = Decimal(0)
    savings_rate: Decimal = Decimal(0)
    transaction_count: int = 0


class BudgetUtilization(BaseModel):
    """Spending against a budget.

    ``time_progress`` is clamped to [0, 100] for display; ``days_passed``
    is the raw day count and may be negative (budget not started) or exceed
    ``total_days`` (budget ended).
    """

    budget: Budget
    spent_amount: Decimal = Decimal(0)
    utilization: Decimal = Decimal(0)
    remaining_amount: Decimal = Decimal(0)
    transaction_count: int = 0

    total_days: int = 0
    days_passed: int = 0
    days_remaining: int = 0
    time_progress: Decimal = Decimal(0)

    daily_budget: Decimal = Decimal(0)
    daily_spending: Decimal = Decimal(0)
    projected_spending: Decimal = Decimal(0)

    state: BudgetState = BudgetState.ON_TRACK

    @computed_field  # type: ignore[misc]
    @property
    def is_over_budget(self) -> bool:
        return self.state == BudgetState.OVER_BUDGET

    @computed_field  # type: ignore[misc]
    @property
    def projected_overspend(self) -> Decimal:
        """Amount by which the current pace would exceed the budget."""
        return max(Decimal(0), self.projected_spending - self.budget.budget_amount)


class BudgetOverview(BaseModel):
    total_budget: Decimal = Decimal(0)
    total_spent: Decimal = Decimal(0)
    remaining: Decimal = Decimal(0)
    overall_utilization: Decimal = Decimal(0)
    over_budget_count: int = 0
    near_limit_count: int = 0


class InvestmentMetrics(BaseModel):
    investment: Investment
    current_value: Decimal = Decimal(0)
    purchase_value: Decimal = Decimal(0)
    gain_loss: Decimal = Decimal(0)
    gain_loss_percent: Decimal = Decimal(0)
    portfolio_weight: Decimal = Decimal(0)
    days_since_purchase: int = 0
    annualized_return: Decimal = Decimal(0)


class PortfolioSummary(BaseModel):
    total_value: Decimal = Decimal(0)
    total_cost: Decimal = Decimal(0)
    gain_loss: Decimal = Decimal(0)
    percentage: Decimal = Decimal(0)
    holdings: list[InvestmentMetrics] = Field(default_factory=list)


class BillStatusInfo(BaseModel):
    bill: Bill
    days_until_due: int
    state: BillState

    @computed_field  # type: ignore[misc]
    @property
    def is_overdue(self) -> bool:
        return self.state == BillState.OVERDUE

    @computed_field  # type: ignore[misc]
    @property
    def is_due_soon(self) -> bool:
        return self.state == BillState.DUE_SOON


class GoalProgress(BaseModel):
    goal: Goal
    progress: Decimal = Decimal(0)
    remaining_amount: Decimal = Decimal(0)
    is_completed: bool = False


class Insight(BaseModel):
    """A structured observation derived from transaction statistics."""

    id: str = Field(default_factory=lambda: new_id("insight"))
    type: InsightType
    title: str
    description: str
    priority: Priority
    category: str | None = None
    actionable: bool = False
    action: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)


class AssistantContext(BaseModel):
    """Snapshot of records the assistant answers questions about."""

    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    investments: list[Investment] = Field(default_factory=list)
    bills: list[Bill] = Field(default_factory=list)
    today: date = Field(default_factory=date.today)
    currency: str = "USD"


# -----------------------------------------------------------------------------
# Dashboard Data Model
# -----------------------------------------------------------------------------


class DashboardData(BaseModel):
    """Complete data container for dashboard generation."""

    workspace_name: str
    currency: str
    theme: Theme = Theme.LIGHT
    generated_at: datetime
    today: date

    metrics: FinancialMetrics = Field(default_factory=FinancialMetrics)
    current_month: MonthlySummary | None = None
    monthly: list[MonthlySummary] = Field(default_factory=list)
    expense_categories: list[CategoryShare] = Field(default_factory=list)
    daily_pattern: dict[str, Decimal] = Field(default_factory=dict)

    budgets: list[BudgetUtilization] = Field(default_factory=list)
    budget_overview: BudgetOverview = Field(default_factory=BudgetOverview)
    portfolio: PortfolioSummary = Field(default_factory=PortfolioSummary)
    bills: list[BillStatusInfo] = Field(default_factory=list)
    goals: list[GoalProgress] = Field(default_factory=list)
    insights: list[Insight] = Field(default_factory=list)

    recent_transactions: list[Transaction] = Field(default_factory=list)
