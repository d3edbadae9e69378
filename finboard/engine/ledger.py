"""Persistence-backed record operations.

The Ledger loads the current collection, runs the pure mutation from
``finboard.engine.mutations`` and writes the resulting collection back
only when the mutation succeeded. A rejected mutation raises and leaves
storage untouched.
"""

import logging
from datetime import date
from decimal import Decimal

from finboard.core.exceptions import FinboardError
from finboard.core.models import (
    AssistantContext,
    Bill,
    BillInput,
    Budget,
    BudgetInput,
    Goal,
    GoalInput,
    Investment,
    InvestmentInput,
    Transaction,
    TransactionInput,
)
from finboard.db.storage import Storage
from finboard.engine import mutations
from finboard.engine.mutations import DEFAULT_ALERT_THRESHOLD, insert_record, replace_record

logger = logging.getLogger(__name__)


class Ledger:
    """Validated record operations against a workspace's storage."""

    def __init__(self, storage: Storage, default_alert_threshold: int = DEFAULT_ALERT_THRESHOLD):
        self.storage = storage
        self.default_alert_threshold = default_alert_threshold

        self.transactions = storage.get_transaction_repository()
        self.budgets = storage.get_budget_repository()
        self.goals = storage.get_goal_repository()
        self.investments = storage.get_investment_repository()
        self.bills = storage.get_bill_repository()

    def _rejected(self, action: str, error: FinboardError) -> None:
        logger.debug("Rejected %s: %s", action, error)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def add_transaction(self, candidate: TransactionInput) -> Transaction:
        current = self.transactions.get_all()
        try:
            record = mutations.create_transaction(current, candidate)
        except FinboardError as e:
            self._rejected("add transaction", e)
            raise
        self.transactions.replace_all(insert_record(current, record))
        logger.info("Added transaction %s (%s %s)", record.id, record.type.value, record.amount)
        return record

    def update_transaction(self, record_id: str, patch: TransactionInput) -> Transaction:
        current = self.transactions.get_all()
        try:
            record = mutations.update_transaction(current, record_id, patch)
        except FinboardError as e:
            self._rejected("update transaction", e)
            raise
        self.transactions.replace_all(replace_record(current, record))
        logger.info("Updated transaction %s", record_id)
        return record

    def delete_transaction(self, record_id: str) -> None:
        remaining = mutations.delete_transaction(self.transactions.get_all(), record_id)
        self.transactions.replace_all(remaining)
        logger.info("Deleted transaction %s", record_id)

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    def add_budget(self, candidate: BudgetInput) -> Budget:
        current = self.budgets.get_all()
        try:
            record = mutations.create_budget(current, candidate, self.default_alert_threshold)
        except FinboardError as e:
            self._rejected("add budget", e)
            raise
        self.budgets.replace_all(insert_record(current, record))
        logger.info("Added budget %s for %s", record.id, record.category)
        return record

    def update_budget(self, record_id: str, patch: BudgetInput) -> Budget:
        current = self.budgets.get_all()
        try:
            record = mutations.update_budget(current, record_id, patch)
        except FinboardError as e:
            self._rejected("update budget", e)
            raise
        self.budgets.replace_all(replace_record(current, record))
        logger.info("Updated budget %s", record_id)
        return record

    def delete_budget(self, record_id: str) -> None:
        self.budgets.replace_all(mutations.delete_budget(self.budgets.get_all(), record_id))
        logger.info("Deleted budget %s", record_id)

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    def add_goal(self, candidate: GoalInput, today: date | None = None) -> Goal:
        current = self.goals.get_all()
        try:
            record = mutations.create_goal(current, candidate, today)
        except FinboardError as e:
            self._rejected("add goal", e)
            raise
        self.goals.replace_all(insert_record(current, record))
        logger.info("Added goal %s (%s)", record.id, record.title)
        return record

    def update_goal(self, record_id: str, patch: GoalInput, today: date | None = None) -> Goal:
        current = self.goals.get_all()
        try:
            record = mutations.update_goal(current, record_id, patch, today)
        except FinboardError as e:
            self._rejected("update goal", e)
            raise
        self.goals.replace_all(replace_record(current, record))
        logger.info("Updated goal %s", record_id)
        return record

    def adjust_goal_progress(self, record_id: str, amount: Decimal) -> tuple[Goal, bool]:
        """Add (or subtract) an amount from a goal's saved total.

        Returns:
            The updated goal and whether this adjustment completed it.
        """
        current = self.goals.get_all()
        try:
            record, completed = mutations.adjust_goal_progress(current, record_id, amount)
        except FinboardError as e:
            self._rejected("adjust goal progress", e)
            raise
        self.goals.replace_all(replace_record(current, record))
        logger.info("Adjusted goal %s by %s", record_id, amount)
        return record, completed

    def delete_goal(self, record_id: str) -> None:
        self.goals.replace_all(mutations.delete_goal(self.goals.get_all(), record_id))
        logger.info("Deleted goal %s", record_id)

    # -------------------------------------------------------------------------
    # Investments
    # -------------------------------------------------------------------------

    def add_investment(self, candidate: InvestmentInput, today: date | None = None) -> Investment:
        current = self.investments.get_all()
        try:
            record = mutations.create_investment(current, candidate, today)
        except FinboardError as e:
            self._rejected("add investment", e)
            raise
        self.investments.replace_all(insert_record(current, record))
        logger.info("Added investment %s (%s)", record.id, record.symbol)
        return record

    def update_investment(
        self,
        record_id: str,
        patch: InvestmentInput,
        today: date | None = None,
    ) -> Investment:
        current = self.investments.get_all()
        try:
            record = mutations.update_investment(current, record_id, patch, today)
        except FinboardError as e:
            self._rejected("update investment", e)
            raise
        self.investments.replace_all(replace_record(current, record))
        logger.info("Updated investment %s", record_id)
        return record

    def delete_investment(self, record_id: str) -> None:
        self.investments.replace_all(
            mutations.delete_investment(self.investments.get_all(), record_id)
        )
        logger.info("Deleted investment %s", record_id)

    # -------------------------------------------------------------------------
    # Bills
    # -------------------------------------------------------------------------

    def add_bill(self, candidate: BillInput) -> Bill:
        current = self.bills.get_all()
        try:
            record = mutations.create_bill(current, candidate)
        except FinboardError as e:
            self._rejected("add bill", e)
            raise
        self.bills.replace_all(insert_record(current, record))
        logger.info("Added bill %s (%s)", record.id, record.name)
        return record

    def update_bill(self, record_id: str, patch: BillInput) -> Bill:
        current = self.bills.get_all()
        try:
            record = mutations.update_bill(current, record_id, patch)
        except FinboardError as e:
            self._rejected("update bill", e)
            raise
        self.bills.replace_all(replace_record(current, record))
        logger.info("Updated bill %s", record_id)
        return record

    def mark_bill_paid(self, record_id: str) -> Bill:
        current = self.bills.get_all()
        try:
            record = mutations.mark_bill_paid(current, record_id)
        except FinboardError as e:
            self._rejected("mark bill paid", e)
            raise
        self.bills.replace_all(replace_record(current, record))
        logger.info("Marked bill %s as paid", record_id)
        return record

    def mark_bill_unpaid(self, record_id: str) -> Bill:
        current = self.bills.get_all()
        record = mutations.mark_bill_unpaid(current, record_id)
        self.bills.replace_all(replace_record(current, record))
        logger.info("Marked bill %s as unpaid", record_id)
        return record

    def delete_bill(self, record_id: str) -> None:
        self.bills.replace_all(mutations.delete_bill(self.bills.get_all(), record_id))
        logger.info("Deleted bill %s", record_id)

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def context(self, currency: str = "USD", today: date | None = None) -> AssistantContext:
        """Snapshot of every collection for read-only analysis."""
        return AssistantContext(
            transactions=self.transactions.get_all(),
            budgets=self.budgets.get_all(),
            goals=self.goals.get_all(),
            investments=self.investments.get_all(),
            bills=self.bills.get_all(),
            today=today or date.today(),
            currency=currency,
        )

    def counts(self) -> dict[str, int]:
        return {
            repo.collection: repo.count()
            for repo in (self.transactions, self.budgets, self.goals, self.investments, self.bills)
        }

    def clear(self) -> int:
        """Delete every record in every collection. Returns the number deleted."""
        deleted = sum(
            repo.delete_all()
            for repo in (self.transactions, self.budgets, self.goals, self.investments, self.bills)
        )
        logger.info("Cleared %d record(s)", deleted)
        return deleted
