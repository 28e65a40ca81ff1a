"""In-memory fake of the DynamoDB 2011-12-05 item API.

DynamoDB Local and moto only speak the 2012-08-10 API, so end-to-end tests
run against this fake instead. It is served through httpx.MockTransport and
implements PutItem, GetItem, Query, UpdateItem and DeleteItem on tables with
a hash key and an optional range key. Errors are answered like the service
does: a 400 with a JSON body carrying __type and message.
"""

import base64
import json
from collections.abc import AsyncGenerator, Callable, Generator
from decimal import Decimal
from typing import Any

import httpx
from pytest import fixture
from pytest_asyncio import fixture as async_fixture

from dynamowire.async_table import AsyncTable
from dynamowire.credentials import Credentials
from dynamowire.sync_table import Table
from dynamowire.transport import AsyncHttpTransport, HttpTransport

ERROR_PREFIX = "com.amazonaws.dynamodb.v20111205#"

WireItem = dict[str, dict[str, str]]


def _native(attribute: dict[str, str]) -> Any:
    ((tag, payload),) = attribute.items()
    if tag == "N":
        return Decimal(payload)
    if tag == "B":
        return base64.b64decode(payload)
    return payload


def _storage_key(attribute: dict[str, str] | None) -> str:
    return json.dumps(attribute, sort_keys=True)


class FakeDynamoDB:
    def __init__(self) -> None:
        self.schemas: dict[str, tuple[str, str | None]] = {}
        self.tables: dict[str, dict[tuple[str, str], WireItem]] = {}
        self.targets: list[str] = []

    def create_table(self, name: str, hash_key: str, range_key: str | None = None) -> None:
        self.schemas[name] = (hash_key, range_key)
        self.tables[name] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if "Authorization" not in request.headers:
            return self._error("MissingAuthenticationTokenException", "Request is missing Authentication Token")

        version, _, operation = request.headers["X-Amz-Target"].partition(".")
        self.targets.append(operation)
        if version != "DynamoDB_20111205":
            return self._error("UnknownOperationException", f"Unknown version {version}")

        body = json.loads(request.content)
        if body.get("TableName") not in self.tables:
            return self._error("ResourceNotFoundException", "Requested resource not found")

        handlers: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
            "PutItem": self._put_item,
            "GetItem": self._get_item,
            "Query": self._query,
            "UpdateItem": self._update_item,
            "DeleteItem": self._delete_item,
        }
        if operation not in handlers:
            return self._error("UnknownOperationException", f"Unknown operation {operation}")
        return httpx.Response(200, content=json.dumps(handlers[operation](body)).encode())

    @staticmethod
    def _error(error_type: str, message: str) -> httpx.Response:
        payload = {"__type": f"{ERROR_PREFIX}{error_type}", "message": message}
        return httpx.Response(400, content=json.dumps(payload).encode())

    def _key_of(self, key: dict[str, Any]) -> tuple[str, str]:
        return (
            _storage_key(key["HashKeyElement"]),
            _storage_key(key.get("RangeKeyElement")),
        )

    def _key_of_item(self, table_name: str, item: WireItem) -> tuple[str, str]:
        hash_name, range_name = self.schemas[table_name]
        return (
            _storage_key(item[hash_name]),
            _storage_key(item[range_name] if range_name else None),
        )

    def _put_item(self, body: dict[str, Any]) -> dict[str, Any]:
        name = body["TableName"]
        self.tables[name][self._key_of_item(name, body["Item"])] = body["Item"]
        return {"ConsumedCapacityUnits": 1.0}

    def _get_item(self, body: dict[str, Any]) -> dict[str, Any]:
        name = body["TableName"]
        response: dict[str, Any] = {"ConsumedCapacityUnits": 1.0 if body.get("ConsistentRead") else 0.5}
        item = self.tables[name].get(self._key_of(body["Key"]))
        if item is not None:
            response["Item"] = self._project(item, body.get("AttributesToGet"))
        return response

    @staticmethod
    def _project(item: WireItem, attributes: list[str] | None) -> WireItem:
        if not attributes:
            return item
        return {name: value for name, value in item.items() if name in attributes}

    @staticmethod
    def _matches(value: Any, condition: dict[str, Any] | None) -> bool:
        if condition is None:
            return True
        operands = [_native(attribute) for attribute in condition["AttributeValueList"]]
        operator = condition["ComparisonOperator"]
        if operator == "EQ":
            return bool(value == operands[0])
        if operator == "LT":
            return bool(value < operands[0])
        if operator == "LE":
            return bool(value <= operands[0])
        if operator == "GT":
            return bool(value > operands[0])
        if operator == "GE":
            return bool(value >= operands[0])
        if operator == "BETWEEN":
            return bool(operands[0] <= value <= operands[1])
        if operator == "BEGINS_WITH":
            return bool(value.startswith(operands[0]))
        raise AssertionError(f"unexpected operator {operator}")

    def _query(self, body: dict[str, Any]) -> dict[str, Any]:
        name = body["TableName"]
        hash_name, range_name = self.schemas[name]
        assert range_name is not None

        hash_key = _storage_key(body["HashKeyValue"])
        candidates = [
            item
            for (item_hash, _), item in self.tables[name].items()
            if item_hash == hash_key
            and self._matches(_native(item[range_name]), body.get("RangeKeyCondition"))
        ]
        candidates.sort(
            key=lambda item: _native(item[range_name]),
            reverse=not body.get("ScanIndexForward", True),
        )

        start_key = body.get("ExclusiveStartKey")
        if start_key is not None:
            start = _storage_key(start_key["RangeKeyElement"])
            positions = [_storage_key(item[range_name]) for item in candidates]
            candidates = candidates[positions.index(start) + 1 :]

        response: dict[str, Any] = {"ConsumedCapacityUnits": 0.5}
        limit = body.get("Limit")
        if limit is not None and len(candidates) > limit:
            candidates = candidates[:limit]
            last = candidates[-1]
            response["LastEvaluatedKey"] = {
                "HashKeyElement": last[hash_name],
                "RangeKeyElement": last[range_name],
            }

        response["Items"] = [self._project(item, body.get("AttributesToGet")) for item in candidates]
        response["Count"] = len(candidates)
        return response

    def _update_item(self, body: dict[str, Any]) -> dict[str, Any]:
        name = body["TableName"]
        hash_name, range_name = self.schemas[name]
        storage_key = self._key_of(body["Key"])

        item = dict(self.tables[name].get(storage_key, {}))
        item[hash_name] = body["Key"]["HashKeyElement"]
        if range_name is not None:
            item[range_name] = body["Key"]["RangeKeyElement"]

        old: WireItem = {}
        for attribute, update in body["AttributeUpdates"].items():
            if attribute in item:
                old[attribute] = item[attribute]
            if update["Action"] == "DELETE":
                item.pop(attribute, None)
            else:
                item[attribute] = update["Value"]

        self.tables[name][storage_key] = item
        response: dict[str, Any] = {"ConsumedCapacityUnits": 1.0}
        if old and body.get("ReturnValues") == "UPDATED_OLD":
            response["Attributes"] = old
        return response

    def _delete_item(self, body: dict[str, Any]) -> dict[str, Any]:
        name = body["TableName"]
        old = self.tables[name].pop(self._key_of(body["Key"]), None)
        response: dict[str, Any] = {"ConsumedCapacityUnits": 1.0}
        if old is not None and body.get("ReturnValues") == "ALL_OLD":
            response["Attributes"] = old
        return response


# =============================================================================
# Fixtures
# =============================================================================


@fixture
def fake_dynamodb() -> FakeDynamoDB:
    fake = FakeDynamoDB()
    fake.create_table("users", hash_key="user_id")
    fake.create_table("events", hash_key="user_id", range_key="ts")
    return fake


def _sync_table(name: str, client: httpx.Client, credentials: Credentials) -> Table:
    return Table(name, "us-east-1", credentials, transport=HttpTransport(client))


@fixture
def fake_client(fake_dynamodb: FakeDynamoDB) -> Generator[httpx.Client, None, None]:
    with httpx.Client(transport=httpx.MockTransport(fake_dynamodb)) as client:
        yield client


@fixture
def users_table(fake_client: httpx.Client, credentials: Credentials) -> Table:
    return _sync_table("users", fake_client, credentials)


@fixture
def events_table(fake_client: httpx.Client, credentials: Credentials) -> Table:
    return _sync_table("events", fake_client, credentials)


@fixture
def missing_table(fake_client: httpx.Client, credentials: Credentials) -> Table:
    return _sync_table("missing", fake_client, credentials)


@async_fixture
async def async_events_table(
    fake_dynamodb: FakeDynamoDB,
    credentials: Credentials,
) -> AsyncGenerator[AsyncTable, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_dynamodb)) as client:
        yield AsyncTable(
            "events",
            "us-east-1",
            credentials,
            transport=AsyncHttpTransport(client),
        )
