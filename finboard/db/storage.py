"""SQLite storage for workspace records.

Every collection lives in a single ``records`` table. A row holds the
record's id, its position within the collection (0 is the first item the
engine returns, i.e. the newest) and the record serialized as pydantic
JSON.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import closing, contextmanager
from pathlib import Path

from finboard.db.repositories import (
    BillRepository,
    BudgetRepository,
    GoalRepository,
    InvestmentRepository,
    TransactionRepository,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    position INTEGER NOT NULL,
    payload TEXT NOT NULL,
    PRIMARY KEY (collection, id)
);
CREATE INDEX IF NOT EXISTS idx_records_position ON records (collection, position);
"""


class Storage:
    """Document storage backed by one SQLite file.

    Connections are opened per operation; writes run inside a single
    transaction so a collection is replaced completely or not at all.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(str(self.db_path))) as conn:
            conn.row_factory = sqlite3.Row
            # Commits on success, rolls back on exception
            with conn:
                yield conn

    # -------------------------------------------------------------------------
    # Raw collection access
    # -------------------------------------------------------------------------

    def load_payloads(self, collection: str) -> list[str]:
        """Return serialized records of a collection in position order."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT payload FROM records WHERE collection = ? ORDER BY position",
                (collection,),
            ).fetchall()
        return [row["payload"] for row in rows]

    def load_payload(self, collection: str, record_id: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload FROM records WHERE collection = ? AND id = ?",
                (collection, record_id),
            ).fetchone()
        return row["payload"] if row else None

    def replace_collection(self, collection: str, rows: list[tuple[str, str]]) -> None:
        """Replace every record of a collection.

        Args:
            collection: Collection name.
            rows: (id, payload) pairs in the order they should be returned.
        """
        with self._connect() as conn:
            conn.execute("DELETE FROM records WHERE collection = ?", (collection,))
            conn.executemany(
                "INSERT INTO records (collection, id, position, payload) VALUES (?, ?, ?, ?)",
                [
                    (collection, record_id, position, payload)
                    for position, (record_id, payload) in enumerate(rows)
                ],
            )
        logger.debug("Wrote %d %s record(s) to %s", len(rows), collection, self.db_path)

    def count(self, collection: str) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM records WHERE collection = ?",
                (collection,),
            ).fetchone()
        return int(row["n"])

    def delete_collection(self, collection: str) -> int:
        """Delete all records of a collection. Returns the number deleted."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM records WHERE collection = ?", (collection,))
            deleted = cursor.rowcount
        logger.debug("Deleted %d %s record(s)", deleted, collection)
        return deleted

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------

    def get_transaction_repository(self) -> TransactionRepository:
        return TransactionRepository(self)

    def get_budget_repository(self) -> BudgetRepository:
        return BudgetRepository(self)

    def get_goal_repository(self) -> GoalRepository:
        return GoalRepository(self)

    def get_investment_repository(self) -> InvestmentRepository:
        return InvestmentRepository(self)

    def get_bill_repository(self) -> BillRepository:
        return BillRepository(self)
