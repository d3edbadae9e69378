"""Tests for the command line interface."""

import json
from datetime import date, timedelta
from pathlib import Path

import pytest
from typer.testing import CliRunner

from finboard import __version__
from finboard.cli.main import app
from finboard.core.workspace import load_workspace
from finboard.engine.ledger import Ledger

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "home"
    result = runner.invoke(app, ["init", "Home", "--path", str(root)])
    assert result.exit_code == 0, result.output
    return root


def ledger_for(root: Path) -> Ledger:
    return Ledger(load_workspace(root).storage)


class TestInit:
    """Tests for 'finboard init'."""

    def test_creates_workspace(self, tmp_path: Path) -> None:
        """Init writes the config file."""
        root = tmp_path / "books"
        result = runner.invoke(app, ["init", "Books", "--path", str(root), "--currency", "EUR"])
        assert result.exit_code == 0
        assert "Created workspace: Books" in result.output
        assert load_workspace(root).config.currency == "EUR"

    def test_existing(self, workspace: Path) -> None:
        """Init refuses to overwrite a workspace."""
        result = runner.invoke(app, ["init", "Home", "--path", str(workspace)])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_version(self) -> None:
        """--version prints the package version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestMissingWorkspace:
    """Commands outside a workspace fail cleanly."""

    def test_list_without_workspace(self, tmp_path: Path) -> None:
        """A directory without config is reported."""
        result = runner.invoke(app, ["tx", "list", "--workspace", str(tmp_path)])
        assert result.exit_code == 1
        assert "No workspace found" in result.output


class TestTransactions:
    """Tests for 'finboard tx'."""

    def test_add_with_suggested_category(self, workspace: Path) -> None:
        """Omitting --category suggests one from the description."""
        result = runner.invoke(app, [
            "tx", "add", "--amount", "100", "--description", "Whole Foods Market",
            "--date", "2024-01-05", "--workspace", str(workspace),
        ])
        assert result.exit_code == 0, result.output
        assert "Suggested category: Groceries" in result.output
        assert "Added expense: $100.00" in result.output

        stored = ledger_for(workspace).transactions.get_all()
        assert len(stored) == 1
        assert stored[0].category == "Groceries"
        assert stored[0].date == date(2024, 1, 5)

    def test_add_income(self, workspace: Path) -> None:
        """Income transactions keep their type."""
        result = runner.invoke(app, [
            "tx", "add", "-a", "2000", "-d", "Payroll ACME", "-t", "income",
            "--workspace", str(workspace),
        ])
        assert result.exit_code == 0, result.output
        assert ledger_for(workspace).transactions.get_all()[0].category == "Salary"

    def test_invalid_amount(self, workspace: Path) -> None:
        """Unparseable amounts exit with an error and store nothing."""
        result = runner.invoke(app, [
            "tx", "add", "--amount", "lots", "--description", "Coffee", "-c", "Dining Out",
            "--workspace", str(workspace),
        ])
        assert result.exit_code == 1
        assert "Error" in result.output
        assert ledger_for(workspace).transactions.count() == 0

    def test_non_positive_amount(self, workspace: Path) -> None:
        """Zero amounts are rejected by validation."""
        result = runner.invoke(app, [
            "tx", "add", "--amount", "0", "--description", "Coffee", "-c", "Dining Out",
            "--workspace", str(workspace),
        ])
        assert result.exit_code == 1
        assert "Amount must be greater than 0" in result.output

    def test_list_empty(self, workspace: Path) -> None:
        """An empty workspace has no transactions."""
        result = runner.invoke(app, ["tx", "list", "--workspace", str(workspace)])
        assert result.exit_code == 0
        assert "No transactions found" in result.output

    def test_delete(self, workspace: Path) -> None:
        """Deleting by id removes the record; a second delete fails."""
        runner.invoke(app, [
            "tx", "add", "-a", "5", "-d", "Coffee", "-c", "Dining Out", "--workspace", str(workspace),
        ])
        record_id = ledger_for(workspace).transactions.get_all()[0].id

        result = runner.invoke(app, ["tx", "delete", record_id, "--workspace", str(workspace)])
        assert result.exit_code == 0
        assert ledger_for(workspace).transactions.count() == 0

        result = runner.invoke(app, ["tx", "delete", record_id, "--workspace", str(workspace)])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestBills:
    """Tests for 'finboard bill'."""

    def add_rent(self, workspace: Path, name: str = "Rent"):
        return runner.invoke(app, [
            "bill", "add", "--name", name, "--amount", "1200", "--due", "2024-02-01",
            "--category", "Rent", "--workspace", str(workspace),
        ])

    def test_duplicate_rejected(self, workspace: Path) -> None:
        """A second bill with the same name fails with exit code 1."""
        assert self.add_rent(workspace).exit_code == 0
        result = self.add_rent(workspace, name="  rent ")
        assert result.exit_code == 1
        assert "A bill with this name already exists" in result.output
        assert ledger_for(workspace).bills.count() == 1

    def test_pay(self, workspace: Path) -> None:
        """Paying marks the bill; paying twice is an error."""
        self.add_rent(workspace)
        bill_id = ledger_for(workspace).bills.get_all()[0].id

        result = runner.invoke(app, ["bill", "pay", bill_id, "--workspace", str(workspace)])
        assert result.exit_code == 0
        assert "Paid: Rent" in result.output

        result = runner.invoke(app, ["bill", "pay", bill_id, "--workspace", str(workspace)])
        assert result.exit_code == 1


class TestGoals:
    """Tests for 'finboard goal'."""

    def test_progress_completes(self, workspace: Path) -> None:
        """Reaching the target prints a completion message."""
        target_date = (date.today() + timedelta(days=90)).isoformat()
        result = runner.invoke(app, [
            "goal", "add", "--title", "Bike", "--target", "500", "--date", target_date,
            "--workspace", str(workspace),
        ])
        assert result.exit_code == 0, result.output
        goal_id = ledger_for(workspace).goals.get_all()[0].id

        result = runner.invoke(app, ["goal", "progress", goal_id, "500", "--workspace", str(workspace)])
        assert result.exit_code == 0, result.output
        assert "Goal completed!" in result.output

    def test_progress_rejects_infinity(self, workspace: Path) -> None:
        """A non-finite amount exits with an error and leaves the goal readable."""
        target_date = (date.today() + timedelta(days=90)).isoformat()
        runner.invoke(app, [
            "goal", "add", "--title", "Bike", "--target", "500", "--date", target_date,
            "--workspace", str(workspace),
        ])
        goal_id = ledger_for(workspace).goals.get_all()[0].id

        for amount in ("Infinity", "NaN", "lots"):
            result = runner.invoke(app, ["goal", "progress", goal_id, amount, "--workspace", str(workspace)])
            assert result.exit_code == 1
            assert "Invalid amount" in result.output

        result = runner.invoke(app, ["goal", "list", "--workspace", str(workspace)])
        assert result.exit_code == 0, result.output
        assert ledger_for(workspace).goals.get_all()[0].current_amount == 0

    def test_past_date(self, workspace: Path) -> None:
        """Goals need a future target date."""
        result = runner.invoke(app, [
            "goal", "add", "--title", "Old", "--target", "50", "--date", "2000-01-01",
            "--workspace", str(workspace),
        ])
        assert result.exit_code == 1
        assert "Target date must be in the future" in result.output


class TestBudgets:
    """Tests for 'finboard budget'."""

    def test_overlap_rejected(self, workspace: Path) -> None:
        """Two budgets for one category in the same month conflict."""
        args = ["budget", "add", "--category", "Groceries", "--amount", "400", "--workspace", str(workspace)]
        assert runner.invoke(app, args).exit_code == 0
        result = runner.invoke(app, args)
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestAssistantCommands:
    """Tests for categorize, ask and insights."""

    def test_categorize(self) -> None:
        """Categorize needs no workspace."""
        result = runner.invoke(app, ["categorize", "Whole Foods Market"])
        assert result.exit_code == 0
        assert result.output.strip() == "Groceries"

    def test_ask(self, workspace: Path) -> None:
        """Ask answers from workspace records."""
        result = runner.invoke(app, ["ask", "what bills do I have", "--workspace", str(workspace)])
        assert result.exit_code == 0
        assert "You don't have any bills set up yet." in result.output

    def test_ask_without_question_greets(self, workspace: Path) -> None:
        """Asking nothing prints the greeting."""
        result = runner.invoke(app, ["ask", "--workspace", str(workspace)])
        assert result.exit_code == 0, result.output
        assert "Hello!" in result.output

    def test_insights_empty(self, workspace: Path) -> None:
        """No transactions means no insights."""
        result = runner.invoke(app, ["insights", "--workspace", str(workspace)])
        assert result.exit_code == 0
        assert "No insights yet" in result.output


class TestDataCommands:
    """Tests for 'finboard data'."""

    def test_clear_requires_confirm(self, workspace: Path) -> None:
        """Without --confirm nothing is deleted."""
        runner.invoke(app, ["tx", "add", "-a", "5", "-d", "Tea", "-c", "Dining Out", "--workspace", str(workspace)])

        result = runner.invoke(app, ["data", "clear", "--workspace", str(workspace)])
        assert result.exit_code == 0
        assert ledger_for(workspace).transactions.count() == 1

        result = runner.invoke(app, ["data", "clear", "--confirm", "--workspace", str(workspace)])
        assert result.exit_code == 0
        assert "Deleted: 1 records" in result.output
        assert ledger_for(workspace).transactions.count() == 0

    def test_clear_empty(self, workspace: Path) -> None:
        """Clearing an empty workspace is a no-op."""
        result = runner.invoke(app, ["data", "clear", "-y", "--workspace", str(workspace)])
        assert result.exit_code == 0
        assert "already empty" in result.output

    def test_export(self, workspace: Path, tmp_path: Path) -> None:
        """Export writes every collection as JSON."""
        runner.invoke(app, ["tx", "add", "-a", "5", "-d", "Tea", "-c", "Dining Out", "--workspace", str(workspace)])
        output = tmp_path / "snapshot.json"

        result = runner.invoke(app, ["data", "export", "-o", str(output), "--workspace", str(workspace)])
        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert len(data["transactions"]) == 1
        assert data["currency"] == "USD"


class TestReportAndStatus:
    """Tests for 'finboard report' and 'finboard status'."""

    def test_report(self, workspace: Path, tmp_path: Path) -> None:
        """The report command writes an HTML dashboard."""
        output = tmp_path / "dash.html"
        result = runner.invoke(app, ["report", "-o", str(output), "--workspace", str(workspace)])
        assert result.exit_code == 0, result.output
        assert "<html" in output.read_text()

    def test_status(self, workspace: Path) -> None:
        """Status summarizes the requested month."""
        runner.invoke(app, [
            "tx", "add", "-a", "2000", "-d", "Payroll", "-t", "income", "--date", "2024-01-02",
            "--workspace", str(workspace),
        ])
        result = runner.invoke(app, ["status", "--month", "2024-01", "--workspace", str(workspace)])
        assert result.exit_code == 0, result.output
        assert "Jan 2024" in result.output

    def test_status_bad_month(self, workspace: Path) -> None:
        """An invalid month is an error."""
        result = runner.invoke(app, ["status", "--month", "January", "--workspace", str(workspace)])
        assert result.exit_code == 1
