"""dynamowire: a typed client for the DynamoDB 2011-12-05 JSON API."""

from dynamowire.async_table import AsyncTable
from dynamowire.attributes import Float32, decode_attribute, encode_attribute
from dynamowire.conditions import BeginsWith, Between, Eq, Ge, Gt, Le, Lt, RangeKeyCondition
from dynamowire.credentials import Credentials
from dynamowire.exceptions import (
    CodecError,
    DynamoWireError,
    EmptyUpdateError,
    MalformedNumberError,
    MissingCredentialsError,
    ProtocolError,
    RequestError,
    UnknownRegionError,
    UnsupportedTypeError,
)
from dynamowire.items import decode_item, encode_item, encode_updates
from dynamowire.keys import Key
from dynamowire.regions import Region, get_region
from dynamowire.responses import GetItemResult, QueryResult, WriteResult
from dynamowire.sync_table import Table

__all__ = [
    "AsyncTable",
    "BeginsWith",
    "Between",
    "CodecError",
    "Credentials",
    "DynamoWireError",
    "EmptyUpdateError",
    "Eq",
    "Float32",
    "Ge",
    "GetItemResult",
    "Gt",
    "Key",
    "Le",
    "Lt",
    "MalformedNumberError",
    "MissingCredentialsError",
    "ProtocolError",
    "QueryResult",
    "RangeKeyCondition",
    "Region",
    "RequestError",
    "Table",
    "UnknownRegionError",
    "UnsupportedTypeError",
    "WriteResult",
    "decode_attribute",
    "decode_item",
    "encode_attribute",
    "encode_item",
    "encode_updates",
    "get_region",
]
