"""Validated creation, update and deletion of records.

Each operation takes the current collection snapshot and returns a new
record (or a new collection) without mutating its input. Rules are checked
in a fixed order and the first violation is raised:

    1. required fields present and non-empty
    2. numeric fields positive and within bounds
    3. date constraints
    4. uniqueness within the collection

Updates validate only the supplied fields; cross-field rules are checked
against the merged (existing + patch) record. A blank value clears an
optional free-text field.
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import BaseModel

from finboard.core.exceptions import DuplicateError, NotFoundError, ValidationError
from finboard.core.models import (
    Bill,
    BillInput,
    Budget,
    BudgetInput,
    BudgetPeriod,
    Goal,
    GoalInput,
    Investment,
    InvestmentInput,
    Transaction,
    TransactionInput,
)

RecordT = TypeVar("RecordT", bound=BaseModel)

MAX_BILL_AMOUNT = Decimal("100000")
MAX_BUDGET_AMOUNT = Decimal("1000000")
MAX_GOAL_TARGET = Decimal("10000000")
DEFAULT_ALERT_THRESHOLD = 80


# -----------------------------------------------------------------------------
# Collection helpers
# -----------------------------------------------------------------------------


def find_record(collection: Sequence[RecordT], record_id: str, entity: str) -> RecordT:
    """Return the record with ``record_id``.

    Raises:
        NotFoundError: If no record has that id.
    """
    for record in collection:
        if record.id == record_id:  # type: ignore[attr-defined]
            return record
    raise NotFoundError(entity, record_id)


def insert_record(collection: Sequence[RecordT], record: RecordT) -> list[RecordT]:
    """New collection with ``record`` first (newest first)."""
    return [record, *collection]


def replace_record(collection: Sequence[RecordT], record: RecordT) -> list[RecordT]:
    """New collection with the record of the same id replaced."""
    return [record if r.id == record.id else r for r in collection]  # type: ignore[attr-defined]


def remove_record(collection: Sequence[RecordT], record_id: str, entity: str) -> list[RecordT]:
    """New collection without ``record_id``.

    Raises:
        NotFoundError: If no record has that id.
    """
    find_record(collection, record_id, entity)
    return [r for r in collection if r.id != record_id]  # type: ignore[attr-defined]


# -----------------------------------------------------------------------------
# Field checks
# -----------------------------------------------------------------------------


def _require(value: Any, message: str, field: str) -> None:
    if value is None:
        raise ValidationError(message, field)


def _require_text(value: str | None, message: str, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message, field)
    return value.strip()


def _require_positive(value: Decimal | None, message: str, field: str) -> None:
    if value is None or value <= 0:
        raise ValidationError(message, field)


def _check_max(value: Decimal, limit: Decimal, message: str, field: str) -> None:
    if value > limit:
        raise ValidationError(message, field)


def _clean(value: str | None) -> str | None:
    """Trim a free-text field; empty becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _same_name(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()


def _clamp_threshold(value: int) -> int:
    return max(1, min(100, value))


def _patch_fields(patch: BaseModel) -> dict[str, Any]:
    return patch.model_dump(exclude_unset=True)


def _not_cleared(fields: dict[str, Any], names: Sequence[str], messages: dict[str, str]) -> None:
    """Reject explicit ``None`` for fields that cannot be unset."""
    for name in names:
        if name in fields and fields[name] is None:
            raise ValidationError(messages.get(name, f"{name} cannot be empty"), name)


# -----------------------------------------------------------------------------
# Transactions
# -----------------------------------------------------------------------------


def create_transaction(
    transactions: Sequence[Transaction],
    candidate: TransactionInput,
) -> Transaction:
    """Validate a new transaction and return it with a fresh id.

    Raises:
        ValidationError: On the first violated rule.
    """
    _require(candidate.amount, "Amount is required", "amount")
    description = _require_text(candidate.description, "Description is required", "description")
    category = _require_text(candidate.category, "Category is required", "category")
    _require(candidate.date, "Date is required", "date")
    _require(candidate.type, "Valid transaction type is required", "type")

    _require_positive(candidate.amount, "Amount must be greater than 0", "amount")

    data = candidate.model_dump(exclude_none=True)
    data.update(
        description=description,
        category=category,
        merchant=_clean(candidate.merchant),
        location=_clean(candidate.location),
        notes=_clean(candidate.notes),
    )
    return Transaction(**data)


def update_transaction(
    transactions: Sequence[Transaction],
    record_id: str,
    patch: TransactionInput,
) -> Transaction:
    """Apply a partial update to a transaction.

    Raises:
        NotFoundError: If the transaction does not exist.
        ValidationError: On the first violated rule.
    """
    existing = find_record(transactions, record_id, "Transaction")
    fields = _patch_fields(patch)

    _not_cleared(
        fields,
        ("amount", "date", "type"),
        {"amount": "Amount must be greater than 0", "date": "Date is required",
         "type": "Valid transaction type is required"},
    )
    if "description" in fields:
        fields["description"] = _require_text(
            fields["description"], "Description cannot be empty", "description"
        )
    if "category" in fields:
        fields["category"] = _require_text(fields["category"], "Category cannot be empty", "category")
    if "amount" in fields:
        _require_positive(fields["amount"], "Amount must be greater than 0", "amount")

    for name in ("merchant", "location", "notes"):
        if name in fields:
            fields[name] = _clean(fields[name])

    return existing.model_copy(update=fields)


def delete_transaction(transactions: Sequence[Transaction], record_id: str) -> list[Transaction]:
    """Return the collection without the transaction."""
    return remove_record(transactions, record_id, "Transaction")


# -----------------------------------------------------------------------------
# Budgets
# -----------------------------------------------------------------------------


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive range overlap test."""
    return start_a <= end_b and start_b <= end_a


def _find_conflicting_budget(
    budgets: Sequence[Budget],
    category: str,
    period: BudgetPeriod,
    start: date,
    end: date,
    exclude_id: str | None = None,
) -> Budget | None:
    for budget in budgets:
        if budget.id == exclude_id:
            continue
        if (
            _same_name(budget.category, category)
            and budget.period == period
            and ranges_overlap(start, end, budget.start_date, budget.end_date)
        ):
            return budget
    return None


def create_budget(
    budgets: Sequence[Budget],
    candidate: BudgetInput,
    default_alert_threshold: int = DEFAULT_ALERT_THRESHOLD,
) -> Budget:
    """Validate a new budget and return it with a fresh id.

    The alert threshold is clamped into [1, 100] rather than rejected.

    Raises:
        ValidationError: On the first violated rule.
        DuplicateError: If a budget for the same category and period
            overlaps the date range.
    """
    category = _require_text(candidate.category, "Category is required", "category")
    _require(candidate.budget_amount, "Budget amount is required", "budget_amount")
    _require(candidate.start_date, "Start date is required", "start_date")
    _require(candidate.end_date, "End date is required", "end_date")

    _require_positive(candidate.budget_amount, "Budget amount must be greater than 0", "budget_amount")
    _check_max(
        candidate.budget_amount,  # type: ignore[arg-type]
        MAX_BUDGET_AMOUNT,
        "Budget amount cannot exceed 1,000,000",
        "budget_amount",
    )

    if candidate.start_date >= candidate.end_date:  # type: ignore[operator]
        raise ValidationError("End date must be after start date", "end_date")

    period = candidate.period or BudgetPeriod.MONTHLY
    conflict = _find_conflicting_budget(
        budgets, category, period, candidate.start_date, candidate.end_date  # type: ignore[arg-type]
    )
    if conflict is not None:
        raise DuplicateError(
            f"A budget for {category} already exists for this period", "category"
        )

    threshold = candidate.alert_threshold
    if not threshold:
        threshold = default_alert_threshold

    data = candidate.model_dump(exclude_none=True)
    data.update(
        category=category,
        period=period,
        alert_threshold=_clamp_threshold(threshold),
        spent_amount=Decimal(0),
    )
    return Budget(**data)


def update_budget(
    budgets: Sequence[Budget],
    record_id: str,
    patch: BudgetInput,
) -> Budget:
    """Apply a partial update to a budget.

    Raises:
        NotFoundError: If the budget does not exist.
        ValidationError: On the first violated rule.
        DuplicateError: If the merged budget overlaps another one.
    """
    existing = find_record(budgets, record_id, "Budget")
    fields = _patch_fields(patch)

    _not_cleared(
        fields,
        ("budget_amount", "period", "start_date", "end_date", "alert_threshold"),
        {"budget_amount": "Budget amount must be greater than 0",
         "start_date": "Start date is required", "end_date": "End date is required"},
    )
    if "category" in fields:
        fields["category"] = _require_text(fields["category"], "Category cannot be empty", "category")
    if "budget_amount" in fields:
        _require_positive(fields["budget_amount"], "Budget amount must be greater than 0", "budget_amount")
        _check_max(
            fields["budget_amount"], MAX_BUDGET_AMOUNT,
            "Budget amount cannot exceed 1,000,000", "budget_amount",
        )
    if "alert_threshold" in fields:
        fields["alert_threshold"] = _clamp_threshold(fields["alert_threshold"])

    merged = existing.model_copy(update=fields)
    if merged.start_date >= merged.end_date:
        raise ValidationError("End date must be after start date", "end_date")

    if {"category", "period", "start_date", "end_date"} & fields.keys():
        conflict = _find_conflicting_budget(
            budgets, merged.category, merged.period,
            merged.start_date, merged.end_date, exclude_id=record_id,
        )
        if conflict is not None:
            raise DuplicateError(
                f"A budget for {merged.category} already exists for this period", "category"
            )

    return merged


def delete_budget(budgets: Sequence[Budget], record_id: str) -> list[Budget]:
    """Return the collection without the budget. Transactions are untouched."""
    return remove_record(budgets, record_id, "Budget")


# -----------------------------------------------------------------------------
# Goals
# -----------------------------------------------------------------------------


def _find_goal_by_title(goals: Sequence[Goal], title: str, exclude_id: str | None = None) -> Goal | None:
    for goal in goals:
        if goal.id != exclude_id and goal.is_active and _same_name(goal.title, title):
            return goal
    return None


def create_goal(
    goals: Sequence[Goal],
    candidate: GoalInput,
    today: date | None = None,
) -> Goal:
    """Validate a new goal and return it with a fresh id.

    Raises:
        ValidationError: On the first violated rule.
        DuplicateError: If an active goal has the same title.
    """
    if today is None:
        today = date.today()

    title = _require_text(candidate.title, "Goal title is required", "title")
    _require(candidate.target_amount, "Target amount is required", "target_amount")
    _require(candidate.target_date, "Target date is required", "target_date")

    _require_positive(candidate.target_amount, "Target amount must be greater than 0", "target_amount")
    _check_max(
        candidate.target_amount,  # type: ignore[arg-type]
        MAX_GOAL_TARGET,
        "Target amount cannot exceed 10,000,000",
        "target_amount",
    )
    current = candidate.current_amount if candidate.current_amount is not None else Decimal(0)
    if current < 0:
        raise ValidationError("Current amount cannot be negative", "current_amount")
    if current > candidate.target_amount:  # type: ignore[operator]
        raise ValidationError("Current amount cannot exceed target amount", "current_amount")

    if candidate.target_date <= today:  # type: ignore[operator]
        raise ValidationError("Target date must be in the future", "target_date")

    if _find_goal_by_title(goals, title) is not None:
        raise DuplicateError("A goal with this title already exists", "title")

    data = candidate.model_dump(exclude_none=True)
    data.update(
        title=title,
        description=(candidate.description or "").strip(),
        current_amount=current,
        created_at=today,
    )
    return Goal(**data)


def update_goal(
    goals: Sequence[Goal],
    record_id: str,
    patch: GoalInput,
    today: date | None = None,
) -> Goal:
    """Apply a partial update to a goal.

    Raises:
        NotFoundError: If the goal does not exist.
        ValidationError: On the first violated rule.
        DuplicateError: If another active goal has the new title.
    """
    if today is None:
        today = date.today()

    existing = find_record(goals, record_id, "Goal")
    fields = _patch_fields(patch)

    _not_cleared(
        fields,
        ("target_amount", "current_amount", "target_date", "category", "priority", "is_active"),
        {"target_amount": "Target amount must be greater than 0",
         "current_amount": "Current amount cannot be negative",
         "target_date": "Target date is required"},
    )
    if "title" in fields:
        fields["title"] = _require_text(fields["title"], "Goal title cannot be empty", "title")
    if "description" in fields:
        fields["description"] = (fields["description"] or "").strip()
    if "target_amount" in fields:
        _require_positive(fields["target_amount"], "Target amount must be greater than 0", "target_amount")
        _check_max(
            fields["target_amount"], MAX_GOAL_TARGET,
            "Target amount cannot exceed 10,000,000", "target_amount",
        )
    if "current_amount" in fields and fields["current_amount"] < 0:
        raise ValidationError("Current amount cannot be negative", "current_amount")

    merged = existing.model_copy(update=fields)
    if {"target_amount", "current_amount"} & fields.keys():
        if merged.current_amount > merged.target_amount:
            raise ValidationError("Current amount cannot exceed target amount", "current_amount")

    if "target_date" in fields and merged.target_date <= today:
        raise ValidationError("Target date must be in the future", "target_date")

    if "title" in fields and _find_goal_by_title(goals, merged.title, exclude_id=record_id):
        raise DuplicateError("A goal with this title already exists", "title")

    return merged


def adjust_goal_progress(
    goals: Sequence[Goal],
    record_id: str,
    amount: Decimal,
) -> tuple[Goal, bool]:
    """Quick-add (or subtract) an amount to a goal's progress.

    The result may exceed the target; it is floored at 0.

    Returns:
        Tuple of (updated goal, True if this adjustment completed the goal).

    Raises:
        NotFoundError: If the goal does not exist.
        ValidationError: If amount is zero or not finite.
    """
    existing = find_record(goals, record_id, "Goal")
    if not amount.is_finite():
        raise ValidationError("Amount must be a finite number", "amount")
    if amount == 0:
        raise ValidationError("Amount cannot be zero", "amount")

    new_amount = max(Decimal(0), existing.current_amount + amount)
    just_completed = (
        new_amount >= existing.target_amount
        and existing.current_amount < existing.target_amount
    )
    return existing.model_copy(update={"current_amount": new_amount}), just_completed


def delete_goal(goals: Sequence[Goal], record_id: str) -> list[Goal]:
    """Return the collection without the goal."""
    return remove_record(goals, record_id, "Goal")


# -----------------------------------------------------------------------------
# Investments
# -----------------------------------------------------------------------------


def _find_investment_by_symbol(
    investments: Sequence[Investment],
    symbol: str,
    exclude_id: str | None = None,
) -> Investment | None:
    for inv in investments:
        if inv.id != exclude_id and _same_name(inv.symbol, symbol):
            return inv
    return None


def create_investment(
    investments: Sequence[Investment],
    candidate: InvestmentInput,
    today: date | None = None,
) -> Investment:
    """Validate a new investment and return it with a fresh id.

    The symbol is stored uppercased.

    Raises:
        ValidationError: On the first violated rule.
        DuplicateError: If the symbol already exists (case-insensitive).
    """
    if today is None:
        today = date.today()

    symbol = _require_text(candidate.symbol, "Symbol is required", "symbol")
    name = _require_text(candidate.name, "Investment name is required", "name")
    _require(candidate.shares, "Shares are required", "shares")
    _require(candidate.purchase_price, "Purchase price is required", "purchase_price")
    _require(candidate.current_price, "Current price is required", "current_price")
    _require(candidate.purchase_date, "Purchase date is required", "purchase_date")

    _require_positive(candidate.shares, "Shares must be greater than 0", "shares")
    _require_positive(candidate.purchase_price, "Purchase price must be greater than 0", "purchase_price")
    _require_positive(candidate.current_price, "Current price must be greater than 0", "current_price")

    if candidate.purchase_date > today:  # type: ignore[operator]
        raise ValidationError("Purchase date cannot be in the future", "purchase_date")

    if _find_investment_by_symbol(investments, symbol) is not None:
        raise DuplicateError(f"An investment with symbol {symbol.upper()} already exists", "symbol")

    data = candidate.model_dump(exclude_none=True)
    data.update(
        symbol=symbol.upper(),
        name=name,
        sector=_clean(candidate.sector),
        exchange=_clean(candidate.exchange),
        notes=_clean(candidate.notes),
    )
    return Investment(**data)


def update_investment(
    investments: Sequence[Investment],
    record_id: str,
    patch: InvestmentInput,
    today: date | None = None,
) -> Investment:
    """Apply a partial update to an investment.

    Raises:
        NotFoundError: If the investment does not exist.
        ValidationError: On the first violated rule.
        DuplicateError: If another holding already uses the new symbol.
    """
    if today is None:
        today = date.today()

    existing = find_record(investments, record_id, "Investment")
    fields = _patch_fields(patch)

    _not_cleared(
        fields,
        ("shares", "purchase_price", "current_price", "purchase_date", "type"),
        {"shares": "Shares must be greater than 0",
         "purchase_price": "Purchase price must be greater than 0",
         "current_price": "Current price must be greater than 0",
         "purchase_date": "Purchase date is required"},
    )
    if "symbol" in fields:
        fields["symbol"] = _require_text(fields["symbol"], "Symbol cannot be empty", "symbol").upper()
    if "name" in fields:
        fields["name"] = _require_text(fields["name"], "Investment name cannot be empty", "name")
    if "shares" in fields:
        _require_positive(fields["shares"], "Shares must be greater than 0", "shares")
    if "purchase_price" in fields:
        _require_positive(fields["purchase_price"], "Purchase price must be greater than 0", "purchase_price")
    if "current_price" in fields:
        _require_positive(fields["current_price"], "Current price must be greater than 0", "current_price")
    if "purchase_date" in fields and fields["purchase_date"] > today:
        raise ValidationError("Purchase date cannot be in the future", "purchase_date")

    if "symbol" in fields and _find_investment_by_symbol(investments, fields["symbol"], exclude_id=record_id):
        raise DuplicateError(f"An investment with symbol {fields['symbol']} already exists", "symbol")

    for name in ("sector", "exchange", "notes"):
        if name in fields:
            fields[name] = _clean(fields[name])

    return existing.model_copy(update=fields)


def delete_investment(investments: Sequence[Investment], record_id: str) -> list[Investment]:
    """Return the collection without the investment."""
    return remove_record(investments, record_id, "Investment")


# -----------------------------------------------------------------------------
# Bills
# -----------------------------------------------------------------------------


def _find_bill_by_name(bills: Sequence[Bill], name: str, exclude_id: str | None = None) -> Bill | None:
    for bill in bills:
        if bill.id != exclude_id and _same_name(bill.name, name):
            return bill
    return None


def create_bill(bills: Sequence[Bill], candidate: BillInput) -> Bill:
    """Validate a new bill and return it with a fresh id.

    Raises:
        ValidationError: On the first violated rule.
        DuplicateError: If a bill with the same name exists (case-insensitive,
            ignoring surrounding whitespace).
    """
    name = _require_text(candidate.name, "Bill name is required", "name")
    _require(candidate.amount, "Amount is required", "amount")
    _require(candidate.due_date, "Due date is required", "due_date")
    category = _require_text(candidate.category, "Category is required", "category")

    _require_positive(candidate.amount, "Amount must be greater than 0", "amount")
    _check_max(
        candidate.amount,  # type: ignore[arg-type]
        MAX_BILL_AMOUNT,
        "Amount cannot exceed 100,000",
        "amount",
    )

    if _find_bill_by_name(bills, name) is not None:
        raise DuplicateError("A bill with this name already exists", "name")

    data = candidate.model_dump(exclude_none=True)
    data.update(name=name, category=category, notes=_clean(candidate.notes))
    return Bill(**data)


def update_bill(bills: Sequence[Bill], record_id: str, patch: BillInput) -> Bill:
    """Apply a partial update to a bill.

    Raises:
        NotFoundError: If the bill does not exist.
        ValidationError: On the first violated rule.
        DuplicateError: If another bill already has the new name.
    """
    existing = find_record(bills, record_id, "Bill")
    fields = _patch_fields(patch)

    _not_cleared(
        fields,
        ("amount", "due_date", "is_paid", "is_recurring", "auto_pay_enabled"),
        {"amount": "Amount must be greater than 0", "due_date": "Due date is required"},
    )
    if "name" in fields:
        fields["name"] = _require_text(fields["name"], "Bill name cannot be empty", "name")
    if "category" in fields:
        fields["category"] = _require_text(fields["category"], "Category cannot be empty", "category")
    if "amount" in fields:
        _require_positive(fields["amount"], "Amount must be greater than 0", "amount")
        _check_max(fields["amount"], MAX_BILL_AMOUNT, "Amount cannot exceed 100,000", "amount")

    if "name" in fields and _find_bill_by_name(bills, fields["name"], exclude_id=record_id):
        raise DuplicateError("A bill with this name already exists", "name")

    if "notes" in fields:
        fields["notes"] = _clean(fields["notes"])

    return existing.model_copy(update=fields)


def mark_bill_paid(bills: Sequence[Bill], record_id: str) -> Bill:
    """Mark a bill as paid.

    Raises:
        NotFoundError: If the bill does not exist.
        ValidationError: If it is already paid.
    """
    existing = find_record(bills, record_id, "Bill")
    if existing.is_paid:
        raise ValidationError("Bill is already marked as paid", "is_paid")
    return existing.model_copy(update={"is_paid": True})


def mark_bill_unpaid(bills: Sequence[Bill], record_id: str) -> Bill:
    """Mark a bill as unpaid."""
    existing = find_record(bills, record_id, "Bill")
    return existing.model_copy(update={"is_paid": False})


def delete_bill(bills: Sequence[Bill], record_id: str) -> list[Bill]:
    """Return the collection without the bill."""
    return remove_record(bills, record_id, "Bill")
