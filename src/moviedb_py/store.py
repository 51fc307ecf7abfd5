from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from . import schema
from .aws_errors import map_store_error
from .codec import encode_value
from .errors import (
    AlreadyExistsError,
    BatchInsertError,
    MoviedbPyError,
    NotFoundError,
    ValidationError,
)
from .expressions import (
    apply_expressions,
    key_absent,
    key_present,
    partition_equals,
    set_attributes,
    year_between,
)
from .keys import build_key, describe_key
from .mapper import DecodingFault, ReadResult, decode_movie, decode_movie_item, read_result
from .model import PLOT, RANK, Movie, MovieInfo, MovieItem
from .runtime import ClientConfig, DynamoDBClient, create_dynamodb_client
from .validation import validate_table_name

logger = logging.getLogger(__name__)


def _info_attributes(info: MovieInfo | None) -> dict[str, Any]:
    if info is None:
        return {}
    if not isinstance(info, MovieInfo):
        raise ValidationError(f"expected a MovieInfo, got {type(info).__name__}")
    if info.is_empty():
        return {}

    out: dict[str, Any] = {}
    if info.plot is not None:
        if not isinstance(info.plot, str):
            raise ValidationError(f"{PLOT} must be a str, got {type(info.plot).__name__}")
        out[PLOT] = info.plot
    if info.rank is not None:
        if isinstance(info.rank, bool) or not isinstance(info.rank, int):
            raise ValidationError(f"{RANK} must be an int, got {type(info.rank).__name__}")
        out[RANK] = info.rank
    return out


class MovieStore:
    def __init__(self, *, client: DynamoDBClient | None = None, config: ClientConfig | None = None) -> None:
        self._client: DynamoDBClient = client or create_dynamodb_client(config)

    @property
    def client(self) -> DynamoDBClient:
        return self._client

    # Table administration

    def list_tables(self) -> list[str]:
        return schema.list_tables(client=self._client)

    def create_table(self, table_name: str, **kwargs: Any) -> None:
        schema.create_table(table_name, client=self._client, **kwargs)

    def ensure_table(self, table_name: str, **kwargs: Any) -> bool:
        return schema.ensure_table(table_name, client=self._client, **kwargs)

    def describe_table(self, table_name: str) -> dict[str, Any]:
        return schema.describe_table(table_name, client=self._client)

    def delete_table(self, table_name: str, **kwargs: Any) -> None:
        schema.delete_table(table_name, client=self._client, **kwargs)

    # Writes

    def put_item(self, table_name: str, movie: Movie, info: MovieInfo | None = None) -> None:
        validate_table_name(table_name)
        item = build_key(movie)
        for attribute, value in _info_attributes(info).items():
            item[attribute] = encode_value(value)

        req = apply_expressions({"TableName": table_name, "Item": item}, ConditionExpression=key_absent())
        logger.debug("put_item %s %s", table_name, describe_key(movie))
        self._call("put_item", req, condition_failed=AlreadyExistsError)
        logger.info("inserted %s into %s", describe_key(movie), table_name)

    def update_item(
        self,
        table_name: str,
        key: Movie,
        patch: MovieInfo,
        *,
        require_existing: bool = False,
    ) -> MovieItem:
        validate_table_name(table_name)
        expressions = {"UpdateExpression": set_attributes(_info_attributes(patch))}
        if require_existing:
            expressions["ConditionExpression"] = key_present()

        req = apply_expressions(
            {"TableName": table_name, "Key": build_key(key), "ReturnValues": "ALL_NEW"},
            **expressions,
        )
        logger.debug("update_item %s %s", table_name, describe_key(key))
        resp = self._call("update_item", req, condition_failed=NotFoundError)
        logger.info("updated %s in %s", describe_key(key), table_name)

        decoded = decode_movie_item(resp.get("Attributes") or {})
        if isinstance(decoded, DecodingFault):
            raise ValidationError(f"update returned an undecodable item: {decoded.reason}")
        return decoded

    def delete_item(self, table_name: str, key: Movie, *, require_existing: bool = False) -> None:
        validate_table_name(table_name)
        req: dict[str, Any] = {"TableName": table_name, "Key": build_key(key)}
        if require_existing:
            apply_expressions(req, ConditionExpression=key_present())

        self._call("delete_item", req, condition_failed=NotFoundError)
        logger.info("deleted %s from %s", describe_key(key), table_name)

    def batch_insert(
        self,
        table_name: str,
        records: Iterable[Movie],
        *,
        skip_existing: bool = False,
    ) -> int:
        attempted = 0
        committed = 0
        for movie in records:
            attempted += 1
            try:
                self.put_item(table_name, movie)
            except AlreadyExistsError as err:
                if not skip_existing:
                    raise BatchInsertError(table_name=table_name, processed=committed, cause=err) from err
                logger.warning("skipping existing %s in %s", describe_key(movie), table_name)
                continue
            except MoviedbPyError as err:
                raise BatchInsertError(table_name=table_name, processed=committed, cause=err) from err
            committed += 1

        logger.info("batch insert into %s: %d attempted, %d inserted", table_name, attempted, committed)
        return attempted

    # Reads

    def get_item(self, table_name: str, key: Movie, *, consistent_read: bool = False) -> MovieItem | None:
        validate_table_name(table_name)
        req = {"TableName": table_name, "Key": build_key(key), "ConsistentRead": consistent_read}
        resp = self._call("get_item", req)

        raw = resp.get("Item")
        if not raw:
            return None

        decoded = decode_movie_item(raw)
        if isinstance(decoded, DecodingFault):
            raise ValidationError(f"stored item {describe_key(key)} cannot be decoded: {decoded.reason}")
        return decoded

    def query_by_partition(self, table_name: str, year: int) -> ReadResult[Movie]:
        validate_table_name(table_name)
        req = apply_expressions(
            {"TableName": table_name, "ScanIndexForward": True},
            KeyConditionExpression=partition_equals(year),
        )
        resp = self._call("query", req)
        return read_result(resp, decode_movie)

    def scan_by_range(self, table_name: str, low_year: int, high_year: int) -> ReadResult[Movie]:
        """Scan the whole table for items with low_year <= Year <= high_year.

        This reads every item in the table and filters server side, so its cost
        grows with the table, not with the number of matches. Use
        query_by_partition when a single year is enough.
        """
        validate_table_name(table_name)
        req = apply_expressions({"TableName": table_name}, FilterExpression=year_between(low_year, high_year))
        logger.info("full-table scan of %s for years %d..%d", table_name, low_year, high_year)
        resp = self._call("scan", req)
        return read_result(resp, decode_movie)

    def list_all(self, table_name: str) -> ReadResult[Movie]:
        validate_table_name(table_name)
        logger.info("full-table scan of %s", table_name)
        resp = self._call("scan", {"TableName": table_name})
        return read_result(resp, decode_movie)

    def _call(
        self,
        operation: str,
        req: dict[str, Any],
        *,
        condition_failed: type[MoviedbPyError] = AlreadyExistsError,
    ) -> Any:
        method: Callable[..., Any] = getattr(self._client, operation)
        try:
            return method(**req)
        except (ClientError, BotoCoreError) as err:
            raise map_store_error(err, condition_failed=condition_failed) from err
