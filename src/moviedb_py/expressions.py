from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .codec import encode_number, encode_value
from .errors import ValidationError
from .keys import NameRef, merge_names, name_ref
from .model import KEY_ATTRIBUTES, TITLE, YEAR


@dataclass(frozen=True)
class Expression:
    text: str
    names: Mapping[str, str] = field(default_factory=dict)
    values: Mapping[str, Any] = field(default_factory=dict)


def _year_value(year: int) -> dict[str, Any]:
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValidationError(f"{YEAR} must be an int, got {type(year).__name__}")
    return encode_number(year)


def key_absent() -> Expression:
    year = name_ref(YEAR)
    title = name_ref(TITLE)
    return Expression(
        text=f"attribute_not_exists({year.expression}) AND attribute_not_exists({title.expression})",
        names=merge_names(year, title),
    )


def key_present() -> Expression:
    year = name_ref(YEAR)
    return Expression(text=f"attribute_exists({year.expression})", names=dict(year.names))


def partition_equals(year: int) -> Expression:
    ref = name_ref(YEAR)
    return Expression(
        text=f"{ref.expression} = :year",
        names=dict(ref.names),
        values={":year": _year_value(year)},
    )


def year_between(low: int, high: int) -> Expression:
    low_value = _year_value(low)
    high_value = _year_value(high)
    if low > high:
        raise ValidationError(f"range is empty: {low} > {high}")

    ref = name_ref(YEAR)
    return Expression(
        text=f"{ref.expression} BETWEEN :low AND :high",
        names=dict(ref.names),
        values={":low": low_value, ":high": high_value},
    )


def set_attributes(updates: Mapping[str, Any]) -> Expression:
    names: dict[str, str] = {}
    values: dict[str, Any] = {}
    parts: list[str] = []

    for attribute, value in updates.items():
        if attribute in KEY_ATTRIBUTES:
            raise ValidationError(f"cannot update key attribute: {attribute}")
        suffix = attribute.lower()
        names[f"#u_{suffix}"] = attribute
        values[f":u_{suffix}"] = encode_value(value)
        parts.append(f"#u_{suffix} = :u_{suffix}")

    if not parts:
        raise ValidationError("no updates provided")

    return Expression(text="SET " + ", ".join(parts), names=names, values=values)


def apply_expressions(req: dict[str, Any], **expressions: Expression) -> dict[str, Any]:
    names = merge_names(*(NameRef(expression=e.text, names=e.names) for e in expressions.values()))

    values: dict[str, Any] = {}
    for expr in expressions.values():
        for ref, value in expr.values.items():
            if ref in values and values[ref] != value:
                raise ValidationError(f"expression attribute value collision: {ref}")
            values[ref] = value

    for request_field, expr in expressions.items():
        req[request_field] = expr.text
    if names:
        req["ExpressionAttributeNames"] = names
    if values:
        req["ExpressionAttributeValues"] = values
    return req
