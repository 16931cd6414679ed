"""Shipment pool models."""

import re
from typing import Any, Dict, List

from pydantic import Field, field_validator, model_validator

from shipdesk.models.base import CamelModel

# Spreadsheet exports spell headers many ways ("Carrier", "Tracking #",
# "label_type", ...). Keys are compared after lower-casing and dropping
# everything that is not a letter or digit.
FIELD_ALIASES: Dict[str, str] = {
    "carrier": "carrier",
    "tracking": "tracking",
    "trackingnumber": "tracking",
    "trackingno": "tracking",
    "trackingid": "tracking",
    "labeltype": "label_type",
    "label": "label_type",
}

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_row_keys(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map loosely spelled spreadsheet headers onto shipment field names.

    Unknown keys are dropped. When two headers map to the same field the
    first non-empty value wins.
    """
    normalized: Dict[str, Any] = {}
    for key, value in row.items():
        field = FIELD_ALIASES.get(_NON_ALNUM.sub("", str(key).lower()))
        if field is None:
            continue
        if normalized.get(field) in (None, ""):
            normalized[field] = value
    return normalized


class ShipmentRow(CamelModel):
    """One row of an upload, after header normalization."""

    carrier: str = Field(..., min_length=1)
    tracking: str = Field(..., min_length=1)
    label_type: str = Field(..., min_length=1)

    @model_validator(mode="before")
    @classmethod
    def normalize_headers(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            raise ValueError("row must be an object")
        return normalize_row_keys(value)

    @field_validator("carrier", "tracking", "label_type", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        # Tracking numbers often arrive as spreadsheet numbers
        if isinstance(value, bool) or value is None:
            return value
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, (int, float)):
            value = str(value)
        if isinstance(value, str):
            return value.strip()
        return value


class ShipmentRecord(CamelModel):
    """A tracking number held in the pool."""

    id: str
    carrier: str
    tracking: str
    label_type: str
    created_at: str


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================

class UploadShipmentsRequest(CamelModel):
    """Bulk upload body: ``{"rows": [...]}``.

    Rows are kept raw here so that a malformed row fails the whole batch
    with its index instead of a generic body error.
    """

    rows: List[Any]

    @model_validator(mode="before")
    @classmethod
    def require_rows(cls, value: Any) -> Any:
        if not isinstance(value, dict) or not isinstance(value.get("rows"), list):
            raise ValueError("No rows provided")
        return value


class UploadShipmentsResponse(CamelModel):
    msg: str
    count: int


class PullShipmentRequest(CamelModel):
    label_type: str
    carrier: str

    @model_validator(mode="before")
    @classmethod
    def require_both(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            raise ValueError("labelType and carrier are required")
        label_type = value.get("labelType", value.get("label_type"))
        carrier = value.get("carrier")
        if not isinstance(label_type, str) or not label_type or not isinstance(carrier, str) or not carrier:
            raise ValueError("labelType and carrier are required")
        return value


class PullShipmentResponse(CamelModel):
    msg: str
    shipment: ShipmentRecord
