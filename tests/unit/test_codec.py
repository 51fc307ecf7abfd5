from __future__ import annotations

from decimal import Decimal

import pytest

from moviedb_py import ValidationError
from moviedb_py.codec import (
    decode_integer,
    decode_number,
    decode_string,
    encode_number,
    encode_string,
    encode_value,
)


def test_encode_number_uses_text_representation() -> None:
    assert encode_number(2013) == {"N": "2013"}
    assert encode_number(Decimal("-7")) == {"N": "-7"}


@pytest.mark.parametrize("value", [True, 1.5, "2013", None])
def test_encode_number_rejects_non_numbers(value: object) -> None:
    with pytest.raises(ValidationError):
        encode_number(value)  # type: ignore[arg-type]


def test_encode_number_rejects_non_finite_decimal() -> None:
    with pytest.raises(ValidationError, match="cannot be encoded"):
        encode_number(Decimal("Infinity"))


def test_encode_string_and_value() -> None:
    assert encode_string("Rush") == {"S": "Rush"}
    assert encode_value("Rush") == {"S": "Rush"}
    assert encode_value(3) == {"N": "3"}

    with pytest.raises(ValidationError, match="expected a str"):
        encode_string(3)  # type: ignore[arg-type]


def test_decode_number_and_integer() -> None:
    assert decode_number({"N": "1.25"}) == Decimal("1.25")
    assert decode_integer({"N": "2013"}) == 2013
    assert decode_integer({"N": "2.0E3"}) == 2000


@pytest.mark.parametrize(
    "av",
    [
        {"S": "2013"},
        {"N": 2013},
        {"N": "twenty"},
        {"N": "2013", "S": "x"},
        "2013",
        None,
    ],
)
def test_decode_number_rejects_malformed_values(av: object) -> None:
    with pytest.raises(ValidationError):
        decode_number(av)


def test_decode_integer_rejects_fractions() -> None:
    with pytest.raises(ValidationError, match="not an integer"):
        decode_integer({"N": "2013.5"})


def test_decode_string() -> None:
    assert decode_string({"S": "Rush"}) == "Rush"
    assert decode_string({"S": ""}) == ""

    with pytest.raises(ValidationError):
        decode_string({"N": "1"})
    with pytest.raises(ValidationError, match="expected string text"):
        decode_string({"S": 1})
