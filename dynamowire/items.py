"""Conversion between native records and DynamoDB items, keys and updates.

Records are plain mappings from field name to native value. Pydantic models
are accepted too and are dumped with model_dump() first; nested models or
containers inside them are rejected like any other unsupported value.

Every function here is fail-fast: the first field that cannot be converted
aborts the call, and the raised CodecError names that field.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeAlias

from pydantic import BaseModel

from dynamowire.attributes import AttributeValue, decode_attribute, encode_attribute
from dynamowire.exceptions import CodecError, EmptyUpdateError, ProtocolError
from dynamowire.keys import Key

Item: TypeAlias = dict[str, AttributeValue]
Record: TypeAlias = Mapping[str, Any] | BaseModel
AttributeUpdate: TypeAlias = dict[str, Any]
WireKey: TypeAlias = dict[str, AttributeValue]

HASH_KEY_ELEMENT = "HashKeyElement"
RANGE_KEY_ELEMENT = "RangeKeyElement"

PUT_ACTION = "PUT"
DELETE_ACTION = "DELETE"


@contextmanager
def _field(name: str) -> Iterator[None]:
    try:
        yield
    except CodecError as exc:
        if exc.field is None:
            exc.field = name
        raise


def _as_mapping(record: Record) -> Mapping[str, Any]:
    if isinstance(record, BaseModel):
        return record.model_dump()
    return record


def encode_item(record: Record, *, raw_binary: bool = False) -> Item:
    """Encode a record into a DynamoDB item.

    Fields set to None are left out of the item.

    Example:
        encode_item({"Text": "some text"})
        Returns {"Text": {"S": "some text"}}.

    """
    item: Item = {}
    for name, value in _as_mapping(record).items():
        if value is None:
            continue
        with _field(name):
            item[name] = encode_attribute(value, raw_binary=raw_binary)
    return item


def decode_item(item: Mapping[str, Any], *, raw_binary: bool = False) -> dict[str, Any]:
    """Decode a DynamoDB item into a plain dict of native values."""
    if not isinstance(item, Mapping):
        raise ProtocolError(f"Item must be an object, got {type(item).__name__}")

    record: dict[str, Any] = {}
    for name, attribute in item.items():
        with _field(name):
            record[name] = decode_attribute(attribute, raw_binary=raw_binary)
    return record


def encode_updates(
    updates: Mapping[str, Any],
    *,
    raw_binary: bool = False,
) -> dict[str, AttributeUpdate]:
    """Encode per-field update instructions for UpdateItem.

    A None value removes the field; any other value replaces it.

    Raises:
        EmptyUpdateError: If there is nothing to update.

    Example:
        encode_updates({"name": "Homer", "nickname": None})
        Returns {
            "name": {"Value": {"S": "Homer"}, "Action": "PUT"},
            "nickname": {"Action": "DELETE"},
        }.

    """
    if not updates:
        raise EmptyUpdateError()

    encoded: dict[str, AttributeUpdate] = {}
    for name, value in updates.items():
        if value is None:
            encoded[name] = {"Action": DELETE_ACTION}
            continue
        with _field(name):
            encoded[name] = {
                "Value": encode_attribute(value, raw_binary=raw_binary),
                "Action": PUT_ACTION,
            }
    return encoded


def encode_key(key: Key, *, raw_binary: bool = False) -> WireKey:
    with _field(HASH_KEY_ELEMENT):
        wire_key: WireKey = {
            HASH_KEY_ELEMENT: encode_attribute(key.hash_key, raw_binary=raw_binary),
        }
    if key.range_key is not None:
        with _field(RANGE_KEY_ELEMENT):
            wire_key[RANGE_KEY_ELEMENT] = encode_attribute(key.range_key, raw_binary=raw_binary)
    return wire_key


def decode_key(wire_key: Mapping[str, Any], *, raw_binary: bool = False) -> Key:
    """Decode a wire key, such as a LastEvaluatedKey, into a Key.

    Raises:
        ProtocolError: If the hash key element is missing.

    """
    if not isinstance(wire_key, Mapping) or HASH_KEY_ELEMENT not in wire_key:
        raise ProtocolError(f"Key has no {HASH_KEY_ELEMENT}: {wire_key!r}")

    with _field(HASH_KEY_ELEMENT):
        hash_key = decode_attribute(wire_key[HASH_KEY_ELEMENT], raw_binary=raw_binary)

    range_key = None
    if RANGE_KEY_ELEMENT in wire_key:
        with _field(RANGE_KEY_ELEMENT):
            range_key = decode_attribute(wire_key[RANGE_KEY_ELEMENT], raw_binary=raw_binary)

    return Key(hash_key, range_key)


__all__ = [
    "DELETE_ACTION",
    "HASH_KEY_ELEMENT",
    "PUT_ACTION",
    "RANGE_KEY_ELEMENT",
    "AttributeUpdate",
    "Item",
    "Record",
    "WireKey",
    "decode_item",
    "decode_key",
    "encode_item",
    "encode_key",
    "encode_updates",
]
