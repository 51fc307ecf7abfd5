from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from .codec import decode_integer, decode_string
from .errors import ValidationError
from .model import PLOT, RANK, TITLE, YEAR, Movie, MovieItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodingFault:
    reason: str
    item: Mapping[str, Any]
    position: int | None = None


@dataclass(frozen=True)
class MappedItems[T]:
    records: list[T] = field(default_factory=list)
    faults: list[DecodingFault] = field(default_factory=list)


@dataclass(frozen=True)
class ReadResult[T]:
    items: list[T]
    faults: list[DecodingFault]
    count: int
    scanned_count: int
    truncated: bool = False

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)


def _required(raw: Mapping[str, Any], attribute: str) -> Any:
    if attribute not in raw:
        raise ValidationError(f"missing {attribute}")
    return raw[attribute]


def _key_fields(raw: Mapping[str, Any]) -> tuple[int, str]:
    try:
        year = decode_integer(_required(raw, YEAR))
    except ValidationError as err:
        raise ValidationError(f"{YEAR}: {err}") from err
    try:
        title = decode_string(_required(raw, TITLE))
    except ValidationError as err:
        raise ValidationError(f"{TITLE}: {err}") from err
    return year, title


def decode_movie(raw: Any) -> Movie | DecodingFault:
    if not isinstance(raw, Mapping):
        return DecodingFault(reason=f"item is not a map: {type(raw).__name__}", item={})
    try:
        year, title = _key_fields(raw)
    except ValidationError as err:
        return DecodingFault(reason=str(err), item=raw)
    return Movie(year=year, title=title)


def decode_movie_item(raw: Any) -> MovieItem | DecodingFault:
    if not isinstance(raw, Mapping):
        return DecodingFault(reason=f"item is not a map: {type(raw).__name__}", item={})
    try:
        year, title = _key_fields(raw)
        plot = decode_string(raw[PLOT]) if PLOT in raw else None
        rank = decode_integer(raw[RANK]) if RANK in raw else None
    except ValidationError as err:
        return DecodingFault(reason=str(err), item=raw)
    return MovieItem(year=year, title=title, plot=plot, rank=rank)


def map_items[T](
    raw_items: Iterable[Any],
    decode: Callable[[Any], T | DecodingFault],
) -> MappedItems[T]:
    out: MappedItems[T] = MappedItems()
    for position, raw in enumerate(raw_items):
        decoded = decode(raw)
        if isinstance(decoded, DecodingFault):
            fault = DecodingFault(reason=decoded.reason, item=decoded.item, position=position)
            logger.warning("dropping item %d: %s", position, fault.reason)
            out.faults.append(fault)
            continue
        out.records.append(decoded)
    return out


def read_result[T](
    resp: Mapping[str, Any],
    decode: Callable[[Any], T | DecodingFault],
) -> ReadResult[T]:
    mapped = map_items(resp.get("Items", []), decode)
    return ReadResult(
        items=mapped.records,
        faults=mapped.faults,
        count=int(resp.get("Count", len(mapped.records) + len(mapped.faults))),
        scanned_count=int(resp.get("ScannedCount", resp.get("Count", 0))),
        truncated=bool(resp.get("LastEvaluatedKey")),
    )
