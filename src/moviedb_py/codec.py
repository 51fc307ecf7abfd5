from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, DecimalException
from typing import Any

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from .errors import ValidationError

NUMBER = "N"
STRING = "S"

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def encode_number(value: int | Decimal) -> dict[str, Any]:
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise ValidationError(f"expected an int or Decimal, got {type(value).__name__}")
    try:
        return _serializer.serialize(value)
    except (DecimalException, TypeError) as err:
        raise ValidationError(f"number cannot be encoded: {value!r}") from err


def encode_string(value: str) -> dict[str, Any]:
    if not isinstance(value, str):
        raise ValidationError(f"expected a str, got {type(value).__name__}")
    return _serializer.serialize(value)


def encode_value(value: int | Decimal | str) -> dict[str, Any]:
    if isinstance(value, str):
        return encode_string(value)
    return encode_number(value)


def _tagged(av: Any, tag: str) -> Any:
    if not isinstance(av, Mapping) or len(av) != 1 or tag not in av:
        raise ValidationError(f"expected a {tag!r} attribute value, got {av!r}")
    return av[tag]


def decode_number(av: Any) -> Decimal:
    raw = _tagged(av, NUMBER)
    if not isinstance(raw, str):
        raise ValidationError(f"number must be transmitted as text, got {type(raw).__name__}")
    try:
        out = _deserializer.deserialize({NUMBER: raw})
    except (DecimalException, TypeError, ValueError) as err:
        raise ValidationError(f"not a number: {raw!r}") from err
    if not isinstance(out, Decimal) or not out.is_finite():
        raise ValidationError(f"not a number: {raw!r}")
    return out


def decode_integer(av: Any) -> int:
    value = decode_number(av)
    if value != value.to_integral_value():
        raise ValidationError(f"not an integer: {value}")
    return int(value)


def decode_string(av: Any) -> str:
    raw = _tagged(av, STRING)
    if not isinstance(raw, str):
        raise ValidationError(f"expected string text, got {type(raw).__name__}")
    return raw
