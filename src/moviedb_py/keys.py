from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .codec import encode_number, encode_string
from .errors import ValidationError
from .model import TITLE, YEAR, Movie
from .reserved import RESERVED_WORDS

_PLAIN_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class NameRef:
    expression: str
    names: Mapping[str, str] = field(default_factory=dict)


def is_reserved_word(name: str) -> bool:
    return name.upper() in RESERVED_WORDS


def name_ref(attribute: str) -> NameRef:
    if not attribute:
        raise ValidationError("attribute name is required")

    if is_reserved_word(attribute) or _PLAIN_NAME.match(attribute) is None:
        placeholder = "#" + re.sub(r"[^a-z0-9_]", "_", attribute.lower())
        return NameRef(expression=placeholder, names={placeholder: attribute})

    return NameRef(expression=attribute)


def merge_names(*refs: NameRef) -> dict[str, str]:
    out: dict[str, str] = {}
    for ref in refs:
        for placeholder, attribute in ref.names.items():
            existing = out.get(placeholder)
            if existing is not None and existing != attribute:
                raise ValidationError(f"expression attribute name collision: {placeholder}")
            out[placeholder] = attribute
    return out


def validate_movie_key(movie: Movie) -> None:
    if not isinstance(movie, Movie):
        raise ValidationError(f"expected a Movie, got {type(movie).__name__}")
    if isinstance(movie.year, bool) or not isinstance(movie.year, int):
        raise ValidationError(f"{YEAR} must be an int, got {type(movie.year).__name__}")
    if not isinstance(movie.title, str):
        raise ValidationError(f"{TITLE} must be a str, got {type(movie.title).__name__}")
    if not movie.title:
        raise ValidationError(f"{TITLE} must not be empty")


def build_key(movie: Movie) -> dict[str, Any]:
    validate_movie_key(movie)
    return {YEAR: encode_number(movie.year), TITLE: encode_string(movie.title)}


def describe_key(movie: Movie) -> str:
    return f"({movie.year}, {movie.title!r})"
