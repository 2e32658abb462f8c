"""
Common definitions and types.
"""

from .base_types import (
    Address,
    Bloom,
    Bytes,
    FixedSizeBytes,
    Hash,
    HexNumber,
    Number,
    PayloadID,
)
from .conversions import to_bytes, to_hex, to_number, to_quantity
from .json import to_json
from .pydantic import CamelModel, HiveBaseModel

__all__ = (
    "Address",
    "Bloom",
    "Bytes",
    "CamelModel",
    "FixedSizeBytes",
    "Hash",
    "HexNumber",
    "HiveBaseModel",
    "Number",
    "PayloadID",
    "to_bytes",
    "to_hex",
    "to_json",
    "to_number",
    "to_quantity",
)
