"""Typed repositories over the records table."""

from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import BaseModel

from finboard.core.models import Bill, Budget, Goal, Investment, Transaction

if TYPE_CHECKING:
    from finboard.db.storage import Storage

RecordT = TypeVar("RecordT", bound=BaseModel)


class Repository(Generic[RecordT]):
    """One collection of pydantic records.

    Subclasses set ``collection`` and ``model``. Records must have an ``id``.
    """

    collection: str
    model: type[RecordT]

    def __init__(self, storage: "Storage"):
        self.storage = storage

    def get_all(self) -> list[RecordT]:
        """All records, newest first."""
        return [
            self.model.model_validate_json(payload)
            for payload in self.storage.load_payloads(self.collection)
        ]

    def get(self, record_id: str) -> RecordT | None:
        payload = self.storage.load_payload(self.collection, record_id)
        if payload is None:
            return None
        return self.model.model_validate_json(payload)

    def replace_all(self, records: list[RecordT]) -> None:
        """Persist the collection exactly as given, in a single transaction."""
        self.storage.replace_collection(
            self.collection,
            [(record.id, record.model_dump_json()) for record in records],  # type: ignore[attr-defined]
        )

    def count(self) -> int:
        return self.storage.count(self.collection)

    def delete_all(self) -> int:
        return self.storage.delete_collection(self.collection)


class TransactionRepository(Repository[Transaction]):
    collection = "transactions"
    model = Transaction


class BudgetRepository(Repository[Budget]):
    collection = "budgets"
    model = Budget


class GoalRepository(Repository[Goal]):
    collection = "goals"
    model = Goal


class InvestmentRepository(Repository[Investment]):
    collection = "investments"
    model = Investment


class BillRepository(Repository[Bill]):
    collection = "bills"
    model = Bill
