"""Shared test fixtures.

This module provides:
- Fake AWS credentials in the environment, so boto3 session lookups resolve
- Explicit Credentials for tests that should not touch the environment
- Factories for tables whose transport is an httpx.MockTransport
"""

from collections.abc import AsyncGenerator, Callable, Generator
from os import environ

import httpx
from pytest import fixture
from pytest_asyncio import fixture as async_fixture

from dynamowire.async_table import AsyncTable
from dynamowire.credentials import Credentials
from dynamowire.sync_table import Table
from dynamowire.transport import AsyncHttpTransport, HttpTransport

Handler = Callable[[httpx.Request], httpx.Response]


# =============================================================================
# AWS Credentials Fixtures
# =============================================================================


@fixture(scope="session", autouse=True)
def aws_credentials() -> None:
    """Set up fake AWS credentials for boto3 session lookups."""
    environ["AWS_ACCESS_KEY_ID"] = "testing"
    environ["AWS_SECRET_ACCESS_KEY"] = "testing"  # noqa: S105
    environ["AWS_SECURITY_TOKEN"] = "testing"  # noqa: S105
    environ["AWS_SESSION_TOKEN"] = "testing"  # noqa: S105
    environ["AWS_DEFAULT_REGION"] = "us-east-1"


@fixture
def credentials() -> Credentials:
    return Credentials(access_key="AKIDEXAMPLE", secret_key="wJalrXUtnFEMI/K7MDENG")  # noqa: S106


# =============================================================================
# Table Fixtures
# =============================================================================


@fixture
def make_table(credentials: Credentials) -> Generator[Callable[..., Table], None, None]:
    """Build a Table named 'users' whose requests go to the given handler."""
    clients: list[httpx.Client] = []

    def factory(handler: Handler, **kwargs: object) -> Table:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return Table(
            "users",
            "us-east-1",
            credentials,
            transport=HttpTransport(client),
            **kwargs,  # type: ignore[arg-type]
        )

    yield factory

    for client in clients:
        client.close()


@async_fixture
async def make_async_table(
    credentials: Credentials,
) -> AsyncGenerator[Callable[..., AsyncTable], None]:
    """Build an AsyncTable named 'users' whose requests go to the given handler."""
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler, **kwargs: object) -> AsyncTable:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return AsyncTable(
            "users",
            "us-east-1",
            credentials,
            transport=AsyncHttpTransport(client),
            **kwargs,  # type: ignore[arg-type]
        )

    yield factory

    for client in clients:
        await client.aclose()
