from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .aws_errors import error_code, map_store_error
from .errors import AlreadyExistsError, MoviedbPyError, NotFoundError, TransportError
from .model import TITLE, YEAR
from .runtime import DynamoDBClient
from .validation import validate_capacity, validate_table_name

logger = logging.getLogger(__name__)

DEFAULT_READ_CAPACITY = 5
DEFAULT_WRITE_CAPACITY = 5

_IN_USE = {"ResourceInUseException": AlreadyExistsError}
_MISSING = {"ResourceNotFoundException": NotFoundError}
_MESSAGES: dict[type[MoviedbPyError], str] = {
    AlreadyExistsError: "table already exists",
    NotFoundError: "table not found",
}


def _admin_call(
    client: DynamoDBClient,
    operation: str,
    table_name: str,
    *,
    translate: Mapping[str, type[MoviedbPyError]] | None = None,
    **req: Any,
) -> dict[str, Any]:
    try:
        return dict(getattr(client, operation)(**req))
    except ClientError as err:
        mapped = (translate or {}).get(error_code(err))
        if mapped is not None:
            raise mapped(f"{_MESSAGES[mapped]}: {table_name}") from err
        raise map_store_error(err) from err
    except BotoCoreError as err:
        raise map_store_error(err) from err


def list_tables(*, client: DynamoDBClient | None = None) -> list[str]:
    client = client or boto3.client("dynamodb")
    resp = _admin_call(client, "list_tables", "*")
    return [str(name) for name in resp.get("TableNames", [])]


def build_create_table_request(
    table_name: str,
    *,
    read_capacity: int = DEFAULT_READ_CAPACITY,
    write_capacity: int = DEFAULT_WRITE_CAPACITY,
) -> dict[str, Any]:
    validate_table_name(table_name)
    validate_capacity("read_capacity", read_capacity)
    validate_capacity("write_capacity", write_capacity)

    return {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": YEAR, "KeyType": "HASH"},
            {"AttributeName": TITLE, "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": TITLE, "AttributeType": "S"},
            {"AttributeName": YEAR, "AttributeType": "N"},
        ],
        "BillingMode": "PROVISIONED",
        "ProvisionedThroughput": {
            "ReadCapacityUnits": read_capacity,
            "WriteCapacityUnits": write_capacity,
        },
    }


def create_table(
    table_name: str,
    *,
    client: DynamoDBClient | None = None,
    read_capacity: int = DEFAULT_READ_CAPACITY,
    write_capacity: int = DEFAULT_WRITE_CAPACITY,
    wait_for_active: bool = True,
    wait_timeout_seconds: float = 300.0,
    poll_interval_seconds: float = 0.25,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    client = client or boto3.client("dynamodb")
    req = build_create_table_request(table_name, read_capacity=read_capacity, write_capacity=write_capacity)

    _admin_call(client, "create_table", table_name, translate=_IN_USE, **req)
    logger.info("created table %s", table_name)

    if wait_for_active:
        _poll(
            lambda: _table_status(client, table_name) == "ACTIVE",
            what=f"table ACTIVE: {table_name}",
            timeout_seconds=wait_timeout_seconds,
            poll_interval_seconds=poll_interval_seconds,
            sleep=sleep,
        )


def ensure_table(
    table_name: str,
    *,
    client: DynamoDBClient | None = None,
    read_capacity: int = DEFAULT_READ_CAPACITY,
    write_capacity: int = DEFAULT_WRITE_CAPACITY,
    wait_for_active: bool = True,
    wait_timeout_seconds: float = 300.0,
    poll_interval_seconds: float = 0.25,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    client = client or boto3.client("dynamodb")

    try:
        describe_table(table_name, client=client)
    except NotFoundError:
        try:
            create_table(
                table_name,
                client=client,
                read_capacity=read_capacity,
                write_capacity=write_capacity,
                wait_for_active=wait_for_active,
                wait_timeout_seconds=wait_timeout_seconds,
                poll_interval_seconds=poll_interval_seconds,
                sleep=sleep,
            )
        except AlreadyExistsError:
            logger.info("table %s was created concurrently", table_name)
        else:
            return True

    if wait_for_active:
        _poll(
            lambda: _table_status(client, table_name) == "ACTIVE",
            what=f"table ACTIVE: {table_name}",
            timeout_seconds=wait_timeout_seconds,
            poll_interval_seconds=poll_interval_seconds,
            sleep=sleep,
        )
    return False


def delete_table(
    table_name: str,
    *,
    client: DynamoDBClient | None = None,
    wait_for_delete: bool = True,
    wait_timeout_seconds: float = 300.0,
    poll_interval_seconds: float = 0.25,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    client = client or boto3.client("dynamodb")
    validate_table_name(table_name)

    _admin_call(client, "delete_table", table_name, translate=_MISSING, TableName=table_name)
    logger.info("deleted table %s", table_name)

    if wait_for_delete:
        _poll(
            lambda: _table_status(client, table_name) is None,
            what=f"table deletion: {table_name}",
            timeout_seconds=wait_timeout_seconds,
            poll_interval_seconds=poll_interval_seconds,
            sleep=sleep,
        )


def describe_table(table_name: str, *, client: DynamoDBClient | None = None) -> dict[str, Any]:
    client = client or boto3.client("dynamodb")
    validate_table_name(table_name)
    return _admin_call(client, "describe_table", table_name, translate=_MISSING, TableName=table_name)


def _table_status(client: DynamoDBClient, table_name: str) -> str | None:
    try:
        resp = describe_table(table_name, client=client)
    except NotFoundError:
        return None
    return str(resp.get("Table", {}).get("TableStatus", ""))


def _poll(
    done: Callable[[], bool],
    *,
    what: str,
    timeout_seconds: float,
    poll_interval_seconds: float,
    sleep: Callable[[float], None],
) -> None:
    deadline = time.monotonic() + timeout_seconds
    while time.monotonic() < deadline:
        if done():
            return
        sleep(poll_interval_seconds)

    raise TransportError(code="Timeout", message=f"timed out waiting for {what}")
