"""dynamowire exceptions.

This module defines the exception hierarchy for the dynamowire library.
All custom exceptions inherit from DynamoWireError, allowing users to catch
all library-specific errors with a single except clause.

Exception categories:
- DynamoWireError: Base exception for all dynamowire errors
- CodecError: A value could not be converted to or from the wire format
  - UnsupportedTypeError: Native type or wire tag has no mapping
  - MalformedNumberError: Wire number string does not parse
- ProtocolError: Response body is not what the service should send
- RequestError: The service answered with a non-200 status
- EmptyUpdateError: Update operation has no fields
- UnknownRegionError: Region name is not in the endpoint table
- MissingCredentialsError: No signing credentials could be found

Note: transport errors (httpx.TimeoutException, httpx.ConnectError, ...) are
intentionally not wrapped and come directly from httpx. Nothing in this
library retries; RequestError carries the status so callers can decide.
"""


class DynamoWireError(Exception):
    """Base exception for all dynamowire errors.

    Example:
        try:
            table.put_item({"id": "1"})
        except DynamoWireError as e:
            pass

    """


class CodecError(DynamoWireError):
    """Base class for errors raised while converting values.

    Attributes:
        field: Name of the item field being converted, if known.
        operation: Name of the operation being built or parsed, if known.

    """

    field: str | None = None
    operation: str | None = None

    def _describe(self) -> str:
        return super().__str__()

    def __str__(self) -> str:
        message = self._describe()
        if self.field is not None:
            message = f"{message} (field {self.field!r})"
        if self.operation is not None:
            message = f"{self.operation}: {message}"
        return message


class UnsupportedTypeError(CodecError):
    """Raised when a value or wire tag has no codec mapping.

    Raised on encode for native types outside str, int, float, Decimal and
    bytes (bool, None, lists, dicts, ...), and on decode for tags other than
    S, N and B. Not retryable: the call site has to change.

    Attributes:
        type_name: Name of the native type, or the unrecognized wire tag.
        wire: True when type_name is a wire tag rather than a Python type.

    Example:
        encode_attribute(True)
        Raises UnsupportedTypeError: Cannot encode value of type 'bool'

        decode_attribute({"X": "1"})
        Raises UnsupportedTypeError: DynamoDB type 'X' is currently unsupported

    """

    def __init__(self, type_name: str, *, wire: bool = False) -> None:
        self.type_name = type_name
        self.wire = wire
        super().__init__(type_name)

    def _describe(self) -> str:
        if self.wire:
            return f"DynamoDB type {self.type_name!r} is currently unsupported"
        return f"Cannot encode value of type {self.type_name!r}"


class MalformedNumberError(CodecError):
    """Raised when an N attribute does not parse as an integer or a float.

    Attributes:
        text: The offending wire string.

    """

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(text)

    def _describe(self) -> str:
        return f"Malformed number {self.text!r}"


class ProtocolError(DynamoWireError):
    """Raised when a response body does not have the expected structure."""


class RequestError(DynamoWireError):
    """Raised when DynamoDB answers with a status other than 200.

    The body is kept verbatim; it is never passed through the codec.

    Attributes:
        status_code: The HTTP status code.
        status_line: The full status line, e.g. "HTTP/1.1 400 Bad Request".
        body: The response body as text, used in the message.
        raw_body: The response body bytes exactly as received.

    """

    def __init__(
        self,
        *,
        status_code: int,
        status_line: str,
        body: str,
        raw_body: bytes | None = None,
    ) -> None:
        self.status_code = status_code
        self.status_line = status_line
        self.body = body
        self.raw_body = raw_body if raw_body is not None else body.encode("utf-8")
        super().__init__(f"{status_line}: {body}")


class EmptyUpdateError(DynamoWireError):
    """Raised when an update operation has no fields to update.

    Example:
        table.update_item("user-1", updates={})

    """

    def __init__(self) -> None:
        super().__init__("No updates provided")


class UnknownRegionError(DynamoWireError):
    """Raised when a region name is not in the endpoint table.

    Attributes:
        name: The region name that was looked up.

    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown region {name!r}")


class MissingCredentialsError(DynamoWireError):
    """Raised when no credentials were given and none could be resolved."""

    def __init__(self) -> None:
        super().__init__(
            "No AWS credentials provided and none found in the boto3 session",
        )


__all__ = [
    "CodecError",
    "DynamoWireError",
    "EmptyUpdateError",
    "MalformedNumberError",
    "MissingCredentialsError",
    "ProtocolError",
    "RequestError",
    "UnknownRegionError",
    "UnsupportedTypeError",
]
