"""Shared base functionality for dynamowire tables.

This module provides _TableBase, which holds the configuration and the
request/response plumbing shared by the synchronous Table and the
asynchronous AsyncTable. Subclasses only add the transport call.
"""

import logging
from typing import Any

import boto3
from pydantic import BaseModel

from dynamowire.builders import Operation, to_body
from dynamowire.credentials import Credentials
from dynamowire.exceptions import UnknownRegionError
from dynamowire.regions import Region, get_region
from dynamowire.responses import (
    GetItemResult,
    QueryResult,
    RawResponse,
    parse_response,
)
from dynamowire.transport import JSON_CONTENT_TYPE, SigV4Signer

logger = logging.getLogger(__name__)


def _resolve_region(
    region: Region | str | None,
    endpoint_url: str | None,
    session: boto3.Session | None,
) -> Region:
    if isinstance(region, Region):
        if endpoint_url is None:
            return region
        return Region.custom(region.name, endpoint_url)

    name = region if region is not None else (session or boto3.Session()).region_name
    if name is None:
        raise UnknownRegionError("(not configured)")
    if endpoint_url is not None:
        return Region.custom(name, endpoint_url)
    return get_region(name)


class _TableBase:
    """Internal base class containing shared logic for Table and AsyncTable.

    This base class provides:
    - Resolution of region and credentials, falling back to a boto3 session
    - Signing of request bodies for an operation
    - Parsing of raw responses into results, optionally into pydantic models

    A table holds no per-request state. Instances can be shared between
    threads (Table) or tasks (AsyncTable) as long as their transport can.
    """

    def __init__(
        self,
        name: str,
        region: Region | str | None = None,
        credentials: Credentials | None = None,
        *,
        endpoint_url: str | None = None,
        raw_binary: bool = False,
        session: boto3.Session | None = None,
    ) -> None:
        self._name = name
        self._region = _resolve_region(region, endpoint_url, session)
        self._credentials = (
            credentials if credentials is not None else Credentials.from_session(session)
        )
        self._signer = SigV4Signer(self._credentials, self._region.name)
        self._raw_binary = raw_binary

    @property
    def name(self) -> str:
        return self._name

    @property
    def region(self) -> Region:
        return self._region

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def raw_binary(self) -> bool:
        return self._raw_binary

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, region={self._region.name!r})"

    def _prepare(
        self,
        operation: Operation,
        request: dict[str, Any],
    ) -> tuple[str, dict[str, str], bytes]:
        """Serialize and sign a request body.

        Returns:
            The URL, the signed headers and the body bytes.

        """
        body = to_body(request)
        headers = self._signer.sign(
            "POST",
            self._region.url,
            {"Content-Type": JSON_CONTENT_TYPE, "X-Amz-Target": operation.target},
            body,
        )
        # hop-by-hop, so kept out of the signature
        headers["Connection"] = "Keep-Alive"
        return self._region.url, headers, body

    def _parse(self, operation: Operation, response: RawResponse) -> Any:
        result = parse_response(operation, response, raw_binary=self._raw_binary)
        logger.debug(
            "%s on %s consumed %s capacity units",
            operation.value,
            self._name,
            result.consumed_capacity,
        )
        return result

    @staticmethod
    def _validate_item(result: GetItemResult, model: type[BaseModel] | None) -> GetItemResult:
        if model is None or result.item is None:
            return result
        return result._replace(item=model.model_validate(result.item))

    @staticmethod
    def _validate_items(result: QueryResult, model: type[BaseModel] | None) -> QueryResult:
        if model is None:
            return result
        return result._replace(items=[model.model_validate(item) for item in result.items])


__all__ = [
    "_TableBase",
]
