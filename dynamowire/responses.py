"""Parsing of DynamoDB_20111205 responses.

A response is first checked for status. Anything other than 200 becomes a
RequestError holding the status line and the body exactly as received; error
bodies never reach the codec. Successful bodies are validated against the
operation's response shape and their items decoded into native values.
"""

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from dynamowire.builders import Operation
from dynamowire.exceptions import CodecError, ProtocolError, RequestError
from dynamowire.items import decode_item, decode_key
from dynamowire.keys import Key


class RawResponse(NamedTuple):
    """What the transport hands back: status and undecoded body bytes."""

    status_code: int
    reason_phrase: str
    http_version: str
    body: bytes

    @property
    def status_line(self) -> str:
        parts = [self.http_version, str(self.status_code), self.reason_phrase]
        return " ".join(part for part in parts if part)


class WriteResult(NamedTuple):
    """Result of PutItem, UpdateItem and DeleteItem.

    Attributes:
        attributes: Old attribute values echoed back by the service, or None
            when it returned none (e.g. the item did not exist before).
        consumed_capacity: Capacity units consumed by the request.

    """

    attributes: dict[str, Any] | None
    consumed_capacity: float | None


class GetItemResult(NamedTuple):
    """Result of GetItem.

    Attributes:
        item: The decoded item, or None when no item has the key.
        consumed_capacity: Capacity units consumed by the request.

    """

    item: Any | None
    consumed_capacity: float | None

    @property
    def found(self) -> bool:
        return self.item is not None


class QueryResult(NamedTuple):
    """Result of a Query.

    Attributes:
        items: The decoded items of this page.
        count: Number of items the service reported.
        last_evaluated_key: Pass as exclusive_start_key to read the next
            page. None when this was the last page.
        consumed_capacity: Capacity units consumed by the request.

    """

    items: list[Any]
    count: int
    last_evaluated_key: Key | None
    consumed_capacity: float | None


class _ResponseBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    consumed_capacity_units: float | None = Field(default=None, alias="ConsumedCapacityUnits")


class _WriteResponseBody(_ResponseBody):
    attributes: dict[str, Any] | None = Field(default=None, alias="Attributes")


class _GetItemResponseBody(_ResponseBody):
    item: dict[str, Any] | None = Field(default=None, alias="Item")


class _QueryResponseBody(_ResponseBody):
    items: list[dict[str, Any]] = Field(default_factory=list, alias="Items")
    count: int = Field(default=0, alias="Count")
    last_evaluated_key: dict[str, Any] | None = Field(default=None, alias="LastEvaluatedKey")


def raise_for_status(response: RawResponse) -> None:
    """Raise RequestError unless the response status is 200."""
    if response.status_code != 200:
        raise RequestError(
            status_code=response.status_code,
            status_line=response.status_line,
            body=response.body.decode("utf-8", errors="replace"),
            raw_body=response.body,
        )


def _validate(model: type[_ResponseBody], operation: Operation, body: bytes) -> Any:
    try:
        return model.model_validate_json(body)
    except PydanticValidationError as exc:
        raise ProtocolError(f"Invalid {operation.value} response: {exc}") from exc


def parse_write(operation: Operation, body: bytes, *, raw_binary: bool = False) -> WriteResult:
    parsed: _WriteResponseBody = _validate(_WriteResponseBody, operation, body)
    attributes = None
    if parsed.attributes is not None:
        attributes = decode_item(parsed.attributes, raw_binary=raw_binary)
    return WriteResult(attributes=attributes, consumed_capacity=parsed.consumed_capacity_units)


def parse_get_item(body: bytes, *, raw_binary: bool = False) -> GetItemResult:
    parsed: _GetItemResponseBody = _validate(_GetItemResponseBody, Operation.GET_ITEM, body)
    item = None
    if parsed.item is not None:
        item = decode_item(parsed.item, raw_binary=raw_binary)
    return GetItemResult(item=item, consumed_capacity=parsed.consumed_capacity_units)


def parse_query(body: bytes, *, raw_binary: bool = False) -> QueryResult:
    parsed: _QueryResponseBody = _validate(_QueryResponseBody, Operation.QUERY, body)
    last_evaluated_key = None
    if parsed.last_evaluated_key is not None:
        last_evaluated_key = decode_key(parsed.last_evaluated_key, raw_binary=raw_binary)
    return QueryResult(
        items=[decode_item(item, raw_binary=raw_binary) for item in parsed.items],
        count=parsed.count,
        last_evaluated_key=last_evaluated_key,
        consumed_capacity=parsed.consumed_capacity_units,
    )


def parse_response(
    operation: Operation,
    response: RawResponse,
    *,
    raw_binary: bool = False,
) -> WriteResult | GetItemResult | QueryResult:
    """Check the status and decode the body of an operation's response.

    Raises:
        RequestError: If the status is not 200.
        ProtocolError: If the body is not valid JSON of the expected shape.
        UnsupportedTypeError: If an item holds an unsupported type tag.
        MalformedNumberError: If an item holds an unparseable number.

    """
    raise_for_status(response)

    try:
        if operation is Operation.GET_ITEM:
            return parse_get_item(response.body, raw_binary=raw_binary)
        if operation is Operation.QUERY:
            return parse_query(response.body, raw_binary=raw_binary)
        return parse_write(operation, response.body, raw_binary=raw_binary)
    except CodecError as exc:
        exc.operation = operation.value
        raise


__all__ = [
    "GetItemResult",
    "QueryResult",
    "RawResponse",
    "WriteResult",
    "parse_get_item",
    "parse_query",
    "parse_response",
    "parse_write",
    "raise_for_status",
]
