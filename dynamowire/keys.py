"""Types for DynamoDB keys.

Type aliases:
    KeyValue: The native types allowed as hash key or range key values.
        Includes str, bytes, int, float and Decimal.

Classes:
    Key: A hash key value plus an optional range key value. On the wire it
        becomes {"HashKeyElement": ..., "RangeKeyElement": ...}; a missing
        range key is left out rather than sent as null.
"""

from decimal import Decimal
from typing import NamedTuple, TypeAlias

KeyValue: TypeAlias = str | bytes | bytearray | int | float | Decimal


class Key(NamedTuple):
    """Primary key of an item.

    Attributes:
        hash_key: The hash key value. Always required.
        range_key: The range key value, for tables that have one.

    """

    hash_key: KeyValue
    range_key: KeyValue | None = None


__all__ = [
    "Key",
    "KeyValue",
]
