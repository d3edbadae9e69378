"""Tests for workspace, storage and the persistence-backed ledger."""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from finboard.core.exceptions import (
    DuplicateError,
    FinboardError,
    NotFoundError,
    ValidationError,
    WorkspaceExistsError,
    WorkspaceNotFoundError,
)
from finboard.core.models import (
    BillInput,
    BudgetInput,
    GoalInput,
    InvestmentInput,
    Theme,
    TransactionInput,
    TransactionType,
)
from finboard.core.workspace import CONFIG_FILE, create_workspace, load_workspace
from finboard.db.storage import Storage
from finboard.engine.ledger import Ledger


@pytest.fixture
def ledger(tmp_path: Path) -> Ledger:
    return Ledger(Storage(tmp_path / "finboard.db"))


def grocery_input(amount: str = "100") -> TransactionInput:
    return TransactionInput(
        amount=Decimal(amount),
        description="Whole Foods",
        category="Groceries",
        date=date(2024, 1, 5),
        type=TransactionType.EXPENSE,
    )


class TestWorkspace:
    """Tests for workspace creation and loading."""

    def test_create_and_load(self, tmp_path: Path) -> None:
        """A created workspace can be loaded back."""
        root = tmp_path / "home"
        create_workspace(root, "Home", currency="eur", theme=Theme.DARK)

        ws = load_workspace(root)
        assert ws.name == "Home"
        assert ws.config.currency == "EUR"
        assert ws.config.theme == Theme.DARK
        assert ws.reports_dir.is_dir()
        assert (root / ".finboard" / "finboard.db").is_file()

    def test_config_is_json(self, tmp_path: Path) -> None:
        """The config file holds the workspace settings."""
        create_workspace(tmp_path, "Budget Book")
        data = json.loads((tmp_path / CONFIG_FILE).read_text())
        assert data["name"] == "Budget Book"
        assert data["default_alert_threshold"] == 80

    def test_exists(self, tmp_path: Path) -> None:
        """Creating twice in one directory fails."""
        create_workspace(tmp_path, "Home")
        with pytest.raises(WorkspaceExistsError):
            create_workspace(tmp_path, "Again")

    def test_unknown_currency(self, tmp_path: Path) -> None:
        """Unsupported currencies are rejected."""
        with pytest.raises(FinboardError):
            create_workspace(tmp_path / "x", "Home", currency="XYZ")
        assert not (tmp_path / "x" / CONFIG_FILE).exists()

    def test_not_found(self, tmp_path: Path) -> None:
        """A directory without config is not a workspace."""
        with pytest.raises(WorkspaceNotFoundError):
            load_workspace(tmp_path)

    def test_invalid_config(self, tmp_path: Path) -> None:
        """A broken config reports a FinboardError."""
        (tmp_path / CONFIG_FILE).write_text('{"name": ""}')
        with pytest.raises(FinboardError, match="Invalid finboard.json"):
            load_workspace(tmp_path)


class TestStorage:
    """Tests for the SQLite document storage."""

    def test_replace_keeps_order(self, tmp_path: Path) -> None:
        """Payloads come back in the order written."""
        storage = Storage(tmp_path / "db" / "test.db")
        storage.replace_collection("things", [("b", "{}"), ("a", "[]")])
        assert storage.load_payloads("things") == ["{}", "[]"]
        assert storage.load_payload("things", "a") == "[]"
        assert storage.load_payload("things", "zzz") is None
        assert storage.count("things") == 2

    def test_collections_isolated(self, tmp_path: Path) -> None:
        """Deleting one collection leaves others."""
        storage = Storage(tmp_path / "test.db")
        storage.replace_collection("one", [("1", "{}")])
        storage.replace_collection("two", [("1", "{}")])
        assert storage.delete_collection("one") == 1
        assert storage.count("one") == 0
        assert storage.count("two") == 1


class TestLedgerTransactions:
    """Tests for transaction persistence."""

    def test_add_persists_newest_first(self, ledger: Ledger) -> None:
        """Added records are stored with the newest first."""
        first = ledger.add_transaction(grocery_input("10"))
        second = ledger.add_transaction(grocery_input("20"))

        stored = ledger.transactions.get_all()
        assert [tx.id for tx in stored] == [second.id, first.id]
        assert stored[0].amount == Decimal(20)

    def test_reopen_round_trip(self, tmp_path: Path) -> None:
        """Records survive reopening the database."""
        db_path = tmp_path / "finboard.db"
        added = Ledger(Storage(db_path)).add_transaction(grocery_input("12.34"))

        reopened = Ledger(Storage(db_path)).transactions.get(added.id)
        assert reopened == added

    def test_rejected_leaves_storage_unchanged(self, ledger: Ledger) -> None:
        """A validation failure writes nothing."""
        ledger.add_transaction(grocery_input())
        with pytest.raises(ValidationError):
            ledger.add_transaction(TransactionInput(amount=Decimal(5)))
        assert ledger.transactions.count() == 1

    def test_update_and_delete(self, ledger: Ledger) -> None:
        """Updates are stored; deletes remove the record."""
        tx = ledger.add_transaction(grocery_input())
        ledger.update_transaction(tx.id, TransactionInput(description="Trader Joe's"))
        assert ledger.transactions.get(tx.id).description == "Trader Joe's"

        ledger.delete_transaction(tx.id)
        assert ledger.transactions.count() == 0
        with pytest.raises(NotFoundError):
            ledger.delete_transaction(tx.id)


class TestLedgerRecords:
    """Tests for budgets, goals, investments and bills."""

    def test_budget_default_threshold(self, tmp_path: Path) -> None:
        """The ledger passes its default alert threshold."""
        ledger = Ledger(Storage(tmp_path / "f.db"), default_alert_threshold=65)
        budget = ledger.add_budget(BudgetInput(
            category="Groceries",
            budget_amount=Decimal(400),
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
        ))
        assert budget.alert_threshold == 65

    def test_duplicate_bill(self, ledger: Ledger) -> None:
        """A duplicate bill name is rejected and not stored."""
        ledger.add_bill(BillInput(name="Rent", amount=Decimal(1200), due_date=date(2024, 2, 1), category="Rent"))
        with pytest.raises(DuplicateError):
            ledger.add_bill(BillInput(name=" rent", amount=Decimal(5), due_date=date(2024, 2, 1), category="Rent"))
        assert ledger.bills.count() == 1

    def test_bill_payment_cycle(self, ledger: Ledger) -> None:
        """Paying and unpaying a bill is persisted."""
        bill = ledger.add_bill(BillInput(
            name="Internet", amount=Decimal(60), due_date=date(2024, 2, 1), category="Utilities",
        ))
        ledger.mark_bill_paid(bill.id)
        assert ledger.bills.get(bill.id).is_paid
        ledger.mark_bill_unpaid(bill.id)
        assert not ledger.bills.get(bill.id).is_paid

    def test_goal_progress(self, ledger: Ledger) -> None:
        """Goal adjustments are persisted and report completion."""
        goal = ledger.add_goal(
            GoalInput(title="Bike", target_amount=Decimal(500), target_date=date(2025, 1, 1)),
            today=date(2024, 1, 1),
        )
        updated, completed = ledger.adjust_goal_progress(goal.id, Decimal(500))
        assert completed
        assert ledger.goals.get(goal.id).current_amount == Decimal(500)
        assert updated.progress == Decimal(100)

    def test_investment(self, ledger: Ledger) -> None:
        """Investments are stored with an uppercase symbol."""
        inv = ledger.add_investment(
            InvestmentInput(
                symbol="vti",
                name="Total Market",
                shares=Decimal(3),
                purchase_price=Decimal(200),
                current_price=Decimal(210),
                purchase_date=date(2023, 5, 1),
            ),
            today=date(2024, 1, 1),
        )
        assert ledger.investments.get(inv.id).symbol == "VTI"


class TestLedgerSnapshots:
    """Tests for context, counts and clear."""

    def test_context_and_clear(self, ledger: Ledger) -> None:
        """Context reflects storage; clear removes everything."""
        ledger.add_transaction(grocery_input())
        ledger.add_bill(BillInput(name="Water", amount=Decimal(30), due_date=date(2024, 2, 1), category="Utilities"))

        ctx = ledger.context(currency="EUR", today=date(2024, 1, 15))
        assert len(ctx.transactions) == 1
        assert len(ctx.bills) == 1
        assert ctx.currency == "EUR"
        assert ledger.counts()["transactions"] == 1

        assert ledger.clear() == 2
        assert sum(ledger.counts().values()) == 0
