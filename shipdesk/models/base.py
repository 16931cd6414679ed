"""Shared base model for camelCase JSON payloads."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model that reads and writes camelCase keys.

    Request bodies may use either camelCase (``availableBalance``) or the
    Python field name (``available_balance``).
    """

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
    }
