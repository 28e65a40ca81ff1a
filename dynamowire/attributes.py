"""Conversion between native Python values and DynamoDB attribute values.

An attribute value is a single-key object whose key is the type tag:

- {"S": "text"} for strings
- {"N": "123.45"} for numbers, always sent as a decimal string so no
  precision is lost to JSON number handling
- {"B": "aGVsbG8="} for binary, base64 encoded

Numbers decode to float when the wire string contains a decimal point and to
int otherwise; integers must fit in a signed 64-bit integer. Python has no
native 32-bit float, so Float32 stands in for single precision values: it is
encoded with the shortest decimal that round-trips at single precision
instead of the longer double expansion.

Binary values are base64 encoded by default. Passing raw_binary=True keeps
the older behaviour, where the bytes are sent as the characters of a UTF-8
string and decoded without any base64 step. Use it only to read or write data
stored by clients that never base64 encoded.
"""

import base64
import binascii
import math
import re
import struct
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, TypeAlias

from dynamowire.exceptions import MalformedNumberError, ProtocolError, UnsupportedTypeError

STRING = "S"
NUMBER = "N"
BINARY = "B"

AttributeValue: TypeAlias = dict[str, str]
NativeValue: TypeAlias = str | int | float | bytes

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _to_single(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]  # type: ignore[no-any-return]


def _shortest_single(value: float) -> str:
    # 9 significant digits always identify a single precision value
    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        if _to_single(float(text)) == value:
            return text
    return f"{value:.9g}"


def _fixed_point(text: str) -> str:
    """Render a float's decimal text without exponent, keeping a decimal point."""
    result = format(Decimal(text), "f")
    if "." not in result:
        result += ".0"
    return result


class Float32(float):
    """A float rounded to IEEE-754 single precision.

    Example:
        encode_attribute(Float32(123.4567))
        Returns {"N": "123.4567"}.

        encode_attribute(float(Float32(123.4567)))
        Returns the full double expansion of the single precision value,
        with digits the original never had.

    """

    __slots__ = ()

    def __new__(cls, value: Any = 0.0) -> "Float32":
        return super().__new__(cls, _to_single(float(value)))

    def __repr__(self) -> str:
        return f"Float32({_shortest_single(self)})"


def format_number(value: int | float | Decimal) -> str:
    """Format a number as the decimal string DynamoDB expects.

    Integers are written in base 10 with no grouping. Floats use the shortest
    text that reads back as the same value, written without an exponent.

    Raises:
        UnsupportedTypeError: For bool and for NaN or infinite values.

    """
    if isinstance(value, bool):
        raise UnsupportedTypeError(type(value).__name__)
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedTypeError(f"{type(value).__name__} {value}")
        if isinstance(value, Float32):
            return _fixed_point(_shortest_single(value))
        return _fixed_point(repr(float(value)))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise UnsupportedTypeError(f"{type(value).__name__} {value}")
        return format(value, "f")
    raise UnsupportedTypeError(type(value).__name__)


def parse_number(text: str) -> int | float:
    """Parse an N attribute payload.

    Strings containing "." become floats (rounded to double precision),
    everything else must be a plain base 10 integer that fits in a signed
    64-bit integer.

    Raises:
        MalformedNumberError: If the string does not parse under the
            selected rule, or an integer is out of the 64-bit range.

    """
    if "." in text:
        if _FLOAT_RE.fullmatch(text) is None:
            raise MalformedNumberError(text)
        number = float(text)
        if math.isinf(number):
            raise MalformedNumberError(text)
        return number

    if _INTEGER_RE.fullmatch(text) is None:
        raise MalformedNumberError(text)
    try:
        integer = int(text)
    except ValueError as exc:
        raise MalformedNumberError(text) from exc
    if not _INT64_MIN <= integer <= _INT64_MAX:
        raise MalformedNumberError(text)
    return integer


def encode_binary(value: bytes, *, raw: bool = False) -> str:
    if raw:
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise UnsupportedTypeError("bytes (not valid UTF-8)") from exc
    return base64.b64encode(value).decode("ascii")


def decode_binary(text: str, *, raw: bool = False) -> bytes:
    if raw:
        return text.encode("utf-8")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ProtocolError(f"Invalid base64 in binary attribute: {text!r}") from exc


def encode_attribute(value: Any, *, raw_binary: bool = False) -> AttributeValue:
    """Convert a native value into a DynamoDB attribute value.

    Args:
        value: A str, int, float, Float32, Decimal, bytes, bytearray or
            memoryview.
        raw_binary: Send binary values without base64 encoding.

    Returns:
        A single-tag attribute value such as {"S": "text"}.

    Raises:
        UnsupportedTypeError: For any other type, including bool and None.

    Example:
        encode_attribute("some text")
        Returns {"S": "some text"}.

        encode_attribute(-42)
        Returns {"N": "-42"}.

    """
    if isinstance(value, str):
        return {STRING: value}
    if isinstance(value, (bytes, bytearray, memoryview)):
        return {BINARY: encode_binary(bytes(value), raw=raw_binary)}
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return {NUMBER: format_number(value)}
    raise UnsupportedTypeError(type(value).__name__)


def decode_attribute(attribute: Mapping[str, Any], *, raw_binary: bool = False) -> NativeValue:
    """Convert a DynamoDB attribute value into a native value.

    Args:
        attribute: A single-tag attribute value as found in a response.
        raw_binary: Read binary values without base64 decoding.

    Returns:
        str for S, int or float for N, bytes for B.

    Raises:
        UnsupportedTypeError: If the tag is not S, N or B, or missing.
        MalformedNumberError: If an N payload does not parse.
        ProtocolError: If the attribute is not a single-tag object holding
            a string.

    """
    if not isinstance(attribute, Mapping):
        raise ProtocolError(
            f"Attribute value must be an object, got {type(attribute).__name__}",
        )
    if not attribute:
        raise UnsupportedTypeError("(none)", wire=True)
    if len(attribute) > 1:
        raise ProtocolError(
            f"Attribute value must have exactly one type tag, got {sorted(attribute)}",
        )

    ((tag, payload),) = attribute.items()
    if tag not in (STRING, NUMBER, BINARY):
        raise UnsupportedTypeError(tag, wire=True)
    if not isinstance(payload, str):
        raise ProtocolError(
            f"{tag} attribute payload must be a string, got {type(payload).__name__}",
        )

    if tag == STRING:
        return payload
    if tag == NUMBER:
        return parse_number(payload)
    return decode_binary(payload, raw=raw_binary)


__all__ = [
    "BINARY",
    "NUMBER",
    "STRING",
    "AttributeValue",
    "Float32",
    "NativeValue",
    "decode_attribute",
    "decode_binary",
    "encode_attribute",
    "encode_binary",
    "format_number",
    "parse_number",
]
