from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import ValidationError
from .model import Movie


def _field(entry: Mapping[str, Any], name: str) -> Any:
    for key, value in entry.items():
        if isinstance(key, str) and key.lower() == name:
            return value
    return None


def _to_movie(position: int, entry: Any) -> Movie:
    if not isinstance(entry, Mapping):
        raise ValidationError(f"record {position}: expected an object, got {type(entry).__name__}")

    year = _field(entry, "year")
    title = _field(entry, "title")
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValidationError(f"record {position}: year must be an integer, got {year!r}")
    if not isinstance(title, str) or not title:
        raise ValidationError(f"record {position}: title must be a non-empty string, got {title!r}")
    return Movie(year=year, title=title)


def parse_movies_json(text: str) -> list[Movie]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as err:
        raise ValidationError(f"invalid JSON: {err}") from err

    if not isinstance(data, list):
        raise ValidationError("expected a JSON array of movie records")

    return [_to_movie(i, entry) for i, entry in enumerate(data)]


def read_movies_json(path: str | Path) -> list[Movie]:
    return parse_movies_json(Path(path).read_text(encoding="utf-8"))
