from __future__ import annotations

import re

from .errors import ValidationError

_TABLE_NAME = re.compile(r"^[a-zA-Z0-9_.-]+$")


def validate_table_name(name: str) -> None:
    if not isinstance(name, str):
        raise ValidationError(f"table name must be a str, got {type(name).__name__}")

    if not name:
        raise ValidationError("table name is required")

    if _TABLE_NAME.match(name) is None:
        raise ValidationError(f"table name contains invalid characters: {name!r}")


def validate_capacity(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive int, got {value!r}")
