"""Async DynamoDB table client.

This module provides `AsyncTable`, the async version of `Table`. It builds
and parses requests exactly like Table and only awaits the transport.
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
from dynamowire.transport import DEFAULT_TIMEOUT, AsyncHttpTransport, AsyncTransport

logger = logging.getLogger(__name__)


class AsyncTable(_TableBase):
    """An async DynamoDB table.

    Takes the same arguments as Table; the default transport is an
    AsyncHttpTransport. Several operations can be awaited concurrently on one
    AsyncTable.

    Example:
        async with AsyncTable("users", "us-east-1") as table:
            await table.put_item({"user_id": "user-123", "name": "Homer"})
            result = await table.get_item("user-123")

    """

    def __init__(
        self,
        name: str,
        region: Region | str | None = None,
        credentials: Credentials | None = None,
        *,
        endpoint_url: str | None = None,
        transport: AsyncTransport | None = None,
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
        self._transport: AsyncTransport = (
            transport
            if transport is not None
            else AsyncHttpTransport(timeout=timeout, debug=debug)
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport, if this table created it."""
        await self._transport.aclose()

    async def _call(self, operation: Operation, request: dict[str, Any]) -> Any:
        url, headers, body = self._prepare(operation, request)
        logger.debug("Calling %s on %s", operation.value, self.name)
        response = await self._transport.send(url, headers, body)
        return self._parse(operation, response)

    async def put_item(self, item: Record) -> WriteResult:
        """Create or replace an item."""
        request = build_put_item(self.name, item, raw_binary=self.raw_binary)
        result: WriteResult = await self._call(Operation.PUT_ITEM, request)
        return result

    async def get_item(
        self,
        hash_key: KeyValue,
        range_key: KeyValue | None = None,
        *,
        consistent_read: bool = False,
        attributes_to_get: Sequence[str] | None = None,
        model: type[BaseModel] | None = None,
    ) -> GetItemResult:
        """Get an item by its key. See Table.get_item."""
        request = build_get_item(
            self.name,
            Key(hash_key, range_key),
            consistent_read=consistent_read,
            attributes_to_get=attributes_to_get,
            raw_binary=self.raw_binary,
        )
        result: GetItemResult = await self._call(Operation.GET_ITEM, request)
        return self._validate_item(result, model)

    async def query(
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
        """Query one page of items sharing a hash key. See Table.query."""
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
        result: QueryResult = await self._call(Operation.QUERY, request)
        return self._validate_items(result, model)

    async def update_item(
        self,
        hash_key: KeyValue,
        range_key: KeyValue | None = None,
        *,
        updates: Mapping[str, Any],
    ) -> WriteResult:
        """Update attributes of an item. None removes the attribute."""
        request = build_update_item(
            self.name,
            Key(hash_key, range_key),
            updates,
            raw_binary=self.raw_binary,
        )
        result: WriteResult = await self._call(Operation.UPDATE_ITEM, request)
        return result

    async def delete_item(
        self,
        hash_key: KeyValue,
        range_key: KeyValue | None = None,
    ) -> WriteResult:
        request = build_delete_item(
            self.name,
            Key(hash_key, range_key),
            raw_binary=self.raw_binary,
        )
        result: WriteResult = await self._call(Operation.DELETE_ITEM, request)
        return result


__all__ = [
    "AsyncTable",
]
