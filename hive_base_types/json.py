"""
JSON encoding of request parameters.
"""

from typing import Any, Sequence

from .base_types import Number
from .pydantic import HiveBaseModel


def to_json(input: Any) -> Any:
    """
    Convert a request parameter to its json data representation.

    Models are serialized by alias without `None` fields, sequences are converted
    element-wise and `None` stays `null`. Plain integers and raw bytes are hex encoded,
    every other value is converted using `str`, which yields the hex representation of
    the base types.
    """
    if input is None:
        return None
    if isinstance(input, HiveBaseModel):
        return input.serialize(mode="json", by_alias=True)
    if isinstance(input, (bool, dict)):
        return input
    if isinstance(input, int) and not isinstance(input, Number):
        return hex(input)
    if isinstance(input, bytes) and type(input) is bytes:
        return "0x" + input.hex()
    if isinstance(input, Sequence) and not isinstance(input, (str, bytes)):
        return [to_json(item) for item in input]
    return str(input)
