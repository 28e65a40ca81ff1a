"""Synchronous DynamoDB table client.

This module provides the primary public API: `Table`, a handle bound to one
table that runs PutItem, GetItem, Query, UpdateItem and DeleteItem over an
httpx client and returns decoded results.
"""

import logging
from collections.abc import Mapping, Sequence
from types import TracebackType
from typing import Any

import boto3
from pydantic import BaseModel
from typing_extensions import Self

from dynamowire.base import _TableBase
from dynamowire.builders import (
    Operation,
    build_delete_item,
    build_get_item,
    build_put_item,
    build_query,
    build_update_item,
)
from dynamowire.conditions import RangeKeyCondition
from dynamowire.credentials import Credentials
from dynamowire.items import Record
from dynamowire.keys import Key, KeyValue
from dynamowire.regions import Region
from dynamowire.responses import GetItemResult, QueryResult, WriteResult
from dynamowire.transport import DEFAULT_TIMEOUT, HttpTransport, Transport

logger = logging.getLogger(__name__)


class Table(_TableBase):
    """A DynamoDB table.

    Args:
        name: The table name.
        region: A Region, a region name, or None to use the boto3 session's
            region.
        credentials: Signing credentials, or None to resolve them from the
            boto3 session.
        endpoint_url: Send requests here instead of the region endpoint.
        transport: Transport to send requests with. Defaults to an
            HttpTransport created with `timeout` and `debug`.
        debug: Log a dump of every request. Only applies to the default
            transport; a transport passed in keeps its own setting.
        raw_binary: Send and read binary attributes without base64.
        timeout: Timeout in seconds for the default transport.
        session: boto3 session used to resolve region and credentials.

    Example:
        table = Table("users", "us-east-1", Credentials(access_key="...", secret_key="..."))

        table.put_item({"user_id": "user-123", "name": "Homer", "age": 39})

        result = table.get_item("user-123")
        if result.found:
            print(result.item["name"])

        table.update_item("user-123", updates={"age": 40, "nickname": None})

        table.delete_item("user-123")

    """

    def __init__(
        self,
        name: str,
        region: Region | str | None = None,
        credentials: Credentials | None = None,
        *,
        endpoint_url: str | None = None,
        transport: Transport | None = None,
        debug: bool = False,
        raw_binary: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        session: boto3.Session | None = None,
    ) -> None:
        super().__init__(
            name,
            region,
            credentials,
            endpoint_url=endpoint_url,
            raw_binary=raw_binary,
            session=session,
        )
        self._transport: Transport = (
            transport if transport is not None else HttpTransport(timeout=timeout, debug=debug)
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport, if this table created it."""
        self._transport.close()

    def _call(self, operation: Operation, request: dict[str, Any]) -> Any:
        url, headers, body = self._prepare(operation, request)
        logger.debug("Calling %s on %s", operation.value, self.name)
        response = self._transport.send(url, headers, body)
        return self._parse(operation, response)

    def put_item(self, item: Record) -> WriteResult:
        """Create or replace an item.

        Args:
            item: A mapping of attribute name to value, or a pydantic model.
                Attributes set to None are not written.

        Returns:
            WriteResult. The 2011-12-05 API returns no old values for
            PutItem, so `attributes` is None.

        """
        request = build_put_item(self.name, item, raw_binary=self.raw_binary)
        result: WriteResult = self._call(Operation.PUT_ITEM, request)
        return result

    def get_item(
        self,
        hash_key: KeyValue,
        range_key: KeyValue | None = None,
        *,
        consistent_read: bool = False,
        attributes_to_get: Sequence[str] | None = None,
        model: type[BaseModel] | None = None,
    ) -> GetItemResult:
        """Get an item by its key.

        Args:
            hash_key: The hash key value.
            range_key: The range key value, for tables with a range key.
            consistent_read: Whether to use strongly consistent reads.
            attributes_to_get: Only return these attributes.
            model: Validate the item into this pydantic model.

        Returns:
            GetItemResult whose item is None when no item has the key.

        """
        request = build_get_item(
            self.name,
            Key(hash_key, range_key),
            consistent_read=consistent_read,
            attributes_to_get=attributes_to_get,
            raw_binary=self.raw_binary,
        )
        result: GetItemResult = self._call(Operation.GET_ITEM, request)
        return self._validate_item(result, model)

    def query(
        self,
        hash_key: KeyValue,
        *,
        range_key_condition: RangeKeyCondition | None = None,
        limit: int | None = None,
        consistent_read: bool = False,
        scan_index_forward: bool = True,
        exclusive_start_key: Key | None = None,
        attributes_to_get: Sequence[str] | None = None,
        model: type[BaseModel] | None = None,
    ) -> QueryResult:
        """Query one page of items sharing a hash key.

        Args:
            hash_key: The hash key value to query.
            range_key_condition: Optional condition on the range key.
            limit: Maximum number of items to evaluate.
            consistent_read: Whether to use strongly consistent reads.
            scan_index_forward: False to return items in descending range
                key order.
            exclusive_start_key: Key to start after, for pagination.
            attributes_to_get: Only return these attributes.
            model: Validate each item into this pydantic model.

        Returns:
            QueryResult with items, count and last_evaluated_key.

        Example:
            result = table.query("user-123", range_key_condition=Gt(100))
            while result.last_evaluated_key is not None:
                result = table.query(
                    "user-123",
                    range_key_condition=Gt(100),
                    exclusive_start_key=result.last_evaluated_key,
                )

        """
        request = build_query(
            self.name,
            hash_key,
            limit=limit,
            consistent_read=consistent_read,
            scan_index_forward=scan_index_forward,
            range_key_condition=range_key_condition,
            exclusive_start_key=exclusive_start_key,
            attributes_to_get=attributes_to_get,
            raw_binary=self.raw_binary,
        )
        result: QueryResult = self._call(Operation.QUERY, request)
        return self._validate_items(result, model)

    def update_item(
        self,
        hash_key: KeyValue,
        range_key: KeyValue | None = None,
        *,
        updates: Mapping[str, Any],
    ) -> WriteResult:
        """Update attributes of an item.

        Args:
            hash_key: The hash key value.
            range_key: The range key value, for tables with a range key.
            updates: New attribute values. None removes the attribute.

        Returns:
            WriteResult with the old values of the updated attributes.

        Raises:
            EmptyUpdateError: If updates is empty.

        """
        request = build_update_item(
            self.name,
            Key(hash_key, range_key),
            updates,
            raw_binary=self.raw_binary,
        )
        result: WriteResult = self._call(Operation.UPDATE_ITEM, request)
        return result

    def delete_item(
        self,
        hash_key: KeyValue,
        range_key: KeyValue | None = None,
    ) -> WriteResult:
        """Delete an item by its key.

        Returns:
            WriteResult with the deleted item's attributes, or None if there
            was no such item.

        """
        request = build_delete_item(
            self.name,
            Key(hash_key, range_key),
            raw_binary=self.raw_binary,
        )
        result: WriteResult = self._call(Operation.DELETE_ITEM, request)
        return result


__all__ = [
    "Table",
]
