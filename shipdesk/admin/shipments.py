"""Shipment pool endpoints.

- POST /upload-shipments - bulk insert rows parsed from a spreadsheet
- GET /read/shipts - list every tracking number in the pool
- POST /pull/shipts - atomically take one tracking number for a carrier/label type
"""

from typing import List

from fastapi import APIRouter, Depends

from shipdesk.models.shipment import (
    PullShipmentRequest,
    PullShipmentResponse,
    ShipmentRecord,
    UploadShipmentsRequest,
    UploadShipmentsResponse,
)
from shipdesk.services.shipment_pool import ShipmentPool, get_shipment_pool

router = APIRouter(tags=["Shipments"])


@router.post(
    "/upload-shipments",
    response_model=UploadShipmentsResponse,
    summary="Upload tracking numbers",
    description="Insert a batch of {Carrier, tracking, labelType} rows. A malformed row rejects the batch.",
)
async def upload_shipments(
    body: UploadShipmentsRequest,
    pool: ShipmentPool = Depends(get_shipment_pool),
) -> UploadShipmentsResponse:
    count = await pool.ingest(body.rows)
    return UploadShipmentsResponse(msg="Shipments saved successfully", count=count)


@router.get(
    "/read/shipts",
    response_model=List[ShipmentRecord],
    summary="List tracking numbers",
)
async def read_shipments(pool: ShipmentPool = Depends(get_shipment_pool)) -> List[ShipmentRecord]:
    return await pool.list_all()


@router.post(
    "/pull/shipts",
    response_model=PullShipmentResponse,
    summary="Take one tracking number",
    description="Remove and return one record matching carrier and labelType exactly.",
)
async def pull_shipment(
    body: PullShipmentRequest,
    pool: ShipmentPool = Depends(get_shipment_pool),
) -> PullShipmentResponse:
    shipment = await pool.take_one(body.carrier, body.label_type)
    return PullShipmentResponse(msg="Shipment retrieved and deleted successfully", shipment=shipment)
