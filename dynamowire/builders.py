"""Request bodies for the DynamoDB_20111205 item operations.

Each builder is a pure function returning the JSON document for one
operation. Nothing here performs I/O or signing. Codec errors raised while
building propagate unchanged apart from having their operation attribute set.
"""

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from enum import Enum
from typing import Any

from pydantic_core import to_json

from dynamowire.attributes import encode_attribute
from dynamowire.conditions import RangeKeyCondition
from dynamowire.exceptions import CodecError
from dynamowire.items import Record, encode_item, encode_key, encode_updates
from dynamowire.keys import Key, KeyValue

SERVICE_VERSION = "DynamoDB_20111205"


class Operation(str, Enum):
    PUT_ITEM = "PutItem"
    GET_ITEM = "GetItem"
    QUERY = "Query"
    UPDATE_ITEM = "UpdateItem"
    DELETE_ITEM = "DeleteItem"

    @property
    def target(self) -> str:
        """Value of the X-Amz-Target header for this operation."""
        return f"{SERVICE_VERSION}.{self.value}"


@contextmanager
def _building(operation: Operation) -> Iterator[None]:
    try:
        yield
    except CodecError as exc:
        exc.operation = operation.value
        raise


def to_body(request: Mapping[str, Any]) -> bytes:
    """Serialize a request document to compact JSON bytes."""
    return to_json(request)


def build_put_item(
    table_name: str,
    item: Record,
    *,
    raw_binary: bool = False,
) -> dict[str, Any]:
    with _building(Operation.PUT_ITEM):
        return {
            "TableName": table_name,
            "Item": encode_item(item, raw_binary=raw_binary),
        }


def build_get_item(
    table_name: str,
    key: Key,
    *,
    consistent_read: bool = False,
    attributes_to_get: Sequence[str] | None = None,
    raw_binary: bool = False,
) -> dict[str, Any]:
    """Build a GetItem request.

    ConsistentRead is only sent when true; AttributesToGet only when given.

    """
    with _building(Operation.GET_ITEM):
        request: dict[str, Any] = {
            "TableName": table_name,
            "Key": encode_key(key, raw_binary=raw_binary),
        }

    if consistent_read:
        request["ConsistentRead"] = True
    if attributes_to_get:
        request["AttributesToGet"] = list(attributes_to_get)

    return request


def build_query(
    table_name: str,
    hash_key: KeyValue,
    *,
    limit: int | None = None,
    consistent_read: bool = False,
    scan_index_forward: bool = True,
    range_key_condition: RangeKeyCondition | None = None,
    exclusive_start_key: Key | None = None,
    attributes_to_get: Sequence[str] | None = None,
    raw_binary: bool = False,
) -> dict[str, Any]:
    """Build a Query request.

    Args:
        table_name: The table to query.
        hash_key: The hash key value whose items are returned.
        limit: Maximum number of items to evaluate. Not sent when 0 or None.
        consistent_read: Use strongly consistent reads. Only sent when true.
        scan_index_forward: Ascending range key order. The service default is
            ascending, so the flag is only sent (as false) for descending.
        range_key_condition: Optional condition on the range key.
        exclusive_start_key: The last_evaluated_key of a previous page.
        attributes_to_get: Only return these attributes.
        raw_binary: Send binary values without base64 encoding.

    Returns:
        The Query request document.

    """
    with _building(Operation.QUERY):
        request: dict[str, Any] = {
            "TableName": table_name,
            "HashKeyValue": encode_attribute(hash_key, raw_binary=raw_binary),
        }
        if range_key_condition is not None:
            request["RangeKeyCondition"] = range_key_condition.to_wire(raw_binary=raw_binary)
        if exclusive_start_key is not None:
            request["ExclusiveStartKey"] = encode_key(exclusive_start_key, raw_binary=raw_binary)

    if limit:
        request["Limit"] = limit
    if consistent_read:
        request["ConsistentRead"] = True
    if not scan_index_forward:
        request["ScanIndexForward"] = False
    if attributes_to_get:
        request["AttributesToGet"] = list(attributes_to_get)

    return request


def build_update_item(
    table_name: str,
    key: Key,
    updates: Mapping[str, Any],
    *,
    raw_binary: bool = False,
) -> dict[str, Any]:
    """Build an UpdateItem request.

    Old values of the updated attributes are always requested back.

    """
    with _building(Operation.UPDATE_ITEM):
        return {
            "TableName": table_name,
            "Key": encode_key(key, raw_binary=raw_binary),
            "AttributeUpdates": encode_updates(updates, raw_binary=raw_binary),
            "ReturnValues": "UPDATED_OLD",
        }


def build_delete_item(
    table_name: str,
    key: Key,
    *,
    raw_binary: bool = False,
) -> dict[str, Any]:
    with _building(Operation.DELETE_ITEM):
        return {
            "TableName": table_name,
            "Key": encode_key(key, raw_binary=raw_binary),
            "ReturnValues": "ALL_OLD",
        }


__all__ = [
    "SERVICE_VERSION",
    "Operation",
    "build_delete_item",
    "build_get_item",
    "build_put_item",
    "build_query",
    "build_update_item",
    "to_body",
]
