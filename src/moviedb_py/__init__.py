from __future__ import annotations

import json
import re
from importlib.resources import files
from typing import TYPE_CHECKING, Any

from .errors import (
    AlreadyExistsError,
    BatchInsertError,
    MoviedbPyError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from .mapper import DecodingFault, ReadResult
from .model import Movie, MovieInfo, MovieItem

if TYPE_CHECKING:
    from .keys import NameRef, build_key, is_reserved_word, name_ref
    from .runtime import (
        AwsCallMetric,
        ClientConfig,
        DynamoDBClient,
        create_dynamodb_client,
        instrument_client,
        log_call_metric,
    )
    from .schema import create_table, delete_table, describe_table, ensure_table, list_tables
    from .sources import parse_movies_json, read_movies_json
    from .store import MovieStore


def _read_repo_version() -> str:
    try:
        data = json.loads(files(__package__).joinpath("version.json").read_text(encoding="utf-8"))
    except Exception:
        return "0.0.0"

    version = data.get("version")
    return version if isinstance(version, str) and version else "0.0.0"


def _normalize_repo_version(repo_version: str) -> str:
    match = re.match(r"^(\d+\.\d+\.\d+)-rc\.?([0-9]+)$", repo_version)
    if match:
        return f"{match.group(1)}rc{match.group(2)}"
    return repo_version


__repo_version__ = _read_repo_version()
__version__ = _normalize_repo_version(__repo_version__)


def __getattr__(name: str) -> Any:
    if name == "MovieStore":
        from .store import MovieStore

        return MovieStore
    if name in {"create_table", "delete_table", "describe_table", "ensure_table", "list_tables"}:
        from . import schema

        return getattr(schema, name)
    if name in {"NameRef", "build_key", "is_reserved_word", "name_ref"}:
        from . import keys

        return getattr(keys, name)
    if name in {
        "AwsCallMetric",
        "ClientConfig",
        "DynamoDBClient",
        "create_dynamodb_client",
        "instrument_client",
        "log_call_metric",
    }:
        from . import runtime

        return getattr(runtime, name)
    if name in {"parse_movies_json", "read_movies_json"}:
        from . import sources

        return getattr(sources, name)
    raise AttributeError(name)


__all__ = [
    "AlreadyExistsError",
    "AwsCallMetric",
    "BatchInsertError",
    "build_key",
    "ClientConfig",
    "create_dynamodb_client",
    "create_table",
    "DecodingFault",
    "delete_table",
    "describe_table",
    "DynamoDBClient",
    "ensure_table",
    "instrument_client",
    "is_reserved_word",
    "list_tables",
    "log_call_metric",
    "Movie",
    "MovieInfo",
    "MovieItem",
    "MovieStore",
    "MoviedbPyError",
    "NameRef",
    "name_ref",
    "NotFoundError",
    "parse_movies_json",
    "ReadResult",
    "read_movies_json",
    "TransportError",
    "ValidationError",
    "__repo_version__",
    "__version__",
]
