"""Tracking-number pool storage.

Rows are inserted in bulk and consumed one at a time. Consumption is a
single ``DELETE ... RETURNING`` statement run under ``BEGIN IMMEDIATE``,
so two consumers can never receive the same row.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from fastapi import Depends

from shipdesk.models.shipment import ShipmentRecord, ShipmentRow
from shipdesk.storage.database import Database, get_database

logger = logging.getLogger(__name__)

_TAKE_ONE_SQL = """
    DELETE FROM shipments
     WHERE id = (
        SELECT id FROM shipments
         WHERE carrier = ? AND label_type = ?
         ORDER BY rowid
         LIMIT 1
     )
    RETURNING id, carrier, tracking, label_type, created_at
"""


class ShipmentStore:
    """Manages the shipment pool in SQLite."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize shipment store.

        Args:
            db: Database to use. Defaults to the process-wide database.
        """
        self.db = db or get_database()

    async def insert_many(self, rows: Iterable[ShipmentRow]) -> int:
        """Insert rows in one transaction.

        Either every row is stored or, on error, none is.

        Args:
            rows: Validated shipment rows

        Returns:
            Number of rows inserted
        """
        now = datetime.now(timezone.utc).isoformat()
        params = [
            (uuid.uuid4().hex, row.carrier, row.tracking, row.label_type, now)
            for row in rows
        ]
        if not params:
            return 0

        async with self.db.connection() as conn:
            await conn.executemany(
                """
                INSERT INTO shipments (id, carrier, tracking, label_type, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                params,
            )
            await conn.commit()

        return len(params)

    async def list_all(self) -> List[ShipmentRecord]:
        async with self.db.connection() as conn:
            cursor = await conn.execute("SELECT * FROM shipments ORDER BY rowid")
            rows = await cursor.fetchall()
        return [self._row_to_shipment(row) for row in rows]

    async def count(self, carrier: Optional[str] = None, label_type: Optional[str] = None) -> int:
        """Count rows, optionally restricted to one carrier/label type pair."""
        query = "SELECT COUNT(*) AS n FROM shipments"
        params: tuple = ()
        if carrier is not None and label_type is not None:
            query += " WHERE carrier = ? AND label_type = ?"
            params = (carrier, label_type)

        async with self.db.connection() as conn:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone()
        return int(row["n"])

    async def take_one(self, carrier: str, label_type: str) -> Optional[ShipmentRecord]:
        """Atomically remove and return one matching row.

        The oldest matching row is taken. Matching is exact and
        case-sensitive.

        Returns:
            The removed record, or None if nothing matched
        """
        async with self.db.connection() as conn:
            # Take the write lock up front so the select and delete see one snapshot
            await conn.execute("BEGIN IMMEDIATE")
            cursor = await conn.execute(_TAKE_ONE_SQL, (carrier, label_type))
            rows = await cursor.fetchall()
            await conn.commit()

        if not rows:
            return None
        return self._row_to_shipment(rows[0])

    def _row_to_shipment(self, row) -> ShipmentRecord:
        """Convert database row to ShipmentRecord object."""
        return ShipmentRecord(
            id=row["id"],
            carrier=row["carrier"],
            tracking=row["tracking"],
            label_type=row["label_type"],
            created_at=row["created_at"],
        )


def get_shipment_store(db: Database = Depends(get_database)) -> ShipmentStore:
    return ShipmentStore(db)
