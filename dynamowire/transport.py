"""Signing and sending requests.

SigV4Signer signs requests with botocore's Signature Version 4
implementation. HttpTransport and AsyncHttpTransport post signed requests
with httpx and hand back the status and body bytes untouched; deciding what
the status means is left to dynamowire.responses.

With debug enabled, a transport logs a dump of each outgoing request and the
status of its response at INFO level. The signature and session token are
redacted from the dump.
"""

import logging
import re
from collections.abc import Mapping
from typing import Protocol

import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials as BotocoreCredentials

from dynamowire.credentials import Credentials
from dynamowire.responses import RawResponse

logger = logging.getLogger(__name__)

SERVICE_NAME = "dynamodb"
JSON_CONTENT_TYPE = "application/x-amz-json-1.0"
DEFAULT_TIMEOUT = 30.0

_SIGNATURE_RE = re.compile(r"Signature=[0-9a-f]+")
_REDACTED_HEADERS = frozenset({"x-amz-security-token"})


class SigV4Signer:
    """Adds AWS Signature Version 4 headers to a request."""

    def __init__(
        self,
        credentials: Credentials,
        region_name: str,
        service_name: str = SERVICE_NAME,
    ) -> None:
        token = credentials.session_token
        self._auth = SigV4Auth(
            BotocoreCredentials(
                credentials.access_key,
                credentials.secret_key.get_secret_value(),
                token.get_secret_value() if token is not None else None,
            ),
            service_name,
            region_name,
        )

    def sign(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
    ) -> dict[str, str]:
        """Return the headers with X-Amz-Date and Authorization added."""
        request = AWSRequest(method=method, url=url, data=body, headers=dict(headers))
        self._auth.add_auth(request)
        return dict(request.headers.items())


class Transport(Protocol):
    def send(self, url: str, headers: Mapping[str, str], body: bytes) -> RawResponse: ...

    def close(self) -> None: ...


class AsyncTransport(Protocol):
    async def send(self, url: str, headers: Mapping[str, str], body: bytes) -> RawResponse: ...

    async def aclose(self) -> None: ...


def _redact(name: str, value: str) -> str:
    if name.lower() == "authorization":
        return _SIGNATURE_RE.sub("Signature=<redacted>", value)
    if name.lower() in _REDACTED_HEADERS:
        return "<redacted>"
    return value


def dump_request(url: str, headers: Mapping[str, str], body: bytes) -> str:
    """Render an outgoing request as text, with secrets redacted."""
    lines = [f"POST {url}"]
    lines.extend(f"{name}: {_redact(name, value)}" for name, value in headers.items())
    lines.append("")
    lines.append(body.decode("utf-8", errors="replace"))
    return "\n".join(lines)


def _to_raw_response(response: httpx.Response) -> RawResponse:
    return RawResponse(
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        http_version=response.http_version,
        body=response.content,
    )


class HttpTransport:
    """Sends signed requests with an httpx.Client.

    Args:
        client: Client to send with. When omitted, one is created with the
            given timeout and closed by close().
        timeout: Timeout in seconds for a created client.
        debug: Log a dump of every request and its response status.

    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
    ) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)
        self.debug = debug

    def send(self, url: str, headers: Mapping[str, str], body: bytes) -> RawResponse:
        if self.debug:
            logger.info("Sending request\n%s", dump_request(url, headers, body))

        response = _to_raw_response(self._client.post(url, headers=dict(headers), content=body))

        if self.debug:
            logger.info("Received %s (%d bytes)", response.status_line, len(response.body))
        return response

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class AsyncHttpTransport:
    """Sends signed requests with an httpx.AsyncClient.

    Takes the same arguments as HttpTransport.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
    ) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)
        self.debug = debug

    async def send(self, url: str, headers: Mapping[str, str], body: bytes) -> RawResponse:
        if self.debug:
            logger.info("Sending request\n%s", dump_request(url, headers, body))

        response = _to_raw_response(
            await self._client.post(url, headers=dict(headers), content=body),
        )

        if self.debug:
            logger.info("Received %s (%d bytes)", response.status_line, len(response.body))
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = [
    "DEFAULT_TIMEOUT",
    "JSON_CONTENT_TYPE",
    "SERVICE_NAME",
    "AsyncHttpTransport",
    "AsyncTransport",
    "HttpTransport",
    "SigV4Signer",
    "Transport",
    "dump_request",
]
