"""Shipment pool: bulk ingestion and one-at-a-time consumption of tracking numbers."""

import logging
from typing import Any, List

from fastapi import Depends
from pydantic import ValidationError as PydanticValidationError

from shipdesk.errors import NotFound, ValidationError
from shipdesk.models.shipment import ShipmentRecord, ShipmentRow
from shipdesk.storage.shipment_store import ShipmentStore, get_shipment_store

logger = logging.getLogger(__name__)


class ShipmentPool:
    """Unordered multiset of tracking numbers keyed by (carrier, labelType)."""

    def __init__(self, store: ShipmentStore):
        self.store = store

    async def ingest(self, rows: Any) -> int:
        """Validate and store a batch of raw rows.

        Header spelling is normalized per row (``Carrier``, ``tracking``,
        ``labelType`` and their variants). If any row is malformed the
        whole batch is rejected and nothing is stored.

        Args:
            rows: List of row objects, typically parsed from a spreadsheet

        Returns:
            Number of records stored

        Raises:
            ValidationError: If rows is not a list or any row is malformed
        """
        if not isinstance(rows, list):
            raise ValidationError("No rows provided")

        parsed: List[ShipmentRow] = []
        problems = []
        for index, raw in enumerate(rows):
            try:
                parsed.append(ShipmentRow.model_validate(raw))
            except PydanticValidationError as e:
                problems.append({
                    "row": index,
                    "fields": [".".join(str(p) for p in err["loc"]) or "row" for err in e.errors()],
                })

        if problems:
            logger.warning(f"Rejected shipment batch: {len(problems)} of {len(rows)} rows invalid")
            raise ValidationError(
                f"{len(problems)} of {len(rows)} rows are missing carrier, tracking or labelType",
                details=problems,
            )

        count = await self.store.insert_many(parsed)
        logger.info(f"Stored {count} shipments")
        return count

    async def list_all(self) -> List[ShipmentRecord]:
        return await self.store.list_all()

    async def take_one(self, carrier: str, label_type: str) -> ShipmentRecord:
        """Remove and return one record matching carrier and label type.

        Raises:
            NotFound: If no record matches
        """
        shipment = await self.store.take_one(carrier, label_type)
        if shipment is None:
            raise NotFound("No matching shipment found")

        remaining = await self.store.count(carrier, label_type)
        logger.info(f"Pulled shipment {shipment.id} ({carrier}/{label_type}), {remaining} left")
        return shipment


def get_shipment_pool(store: ShipmentStore = Depends(get_shipment_store)) -> ShipmentPool:
    return ShipmentPool(store)
