from __future__ import annotations

import pytest

from moviedb_py import AlreadyExistsError, NotFoundError, TransportError, ValidationError
from moviedb_py.mocks import FakeDynamoDBClient
from moviedb_py.schema import (
    build_create_table_request,
    create_table,
    delete_table,
    describe_table,
    ensure_table,
    list_tables,
)
from moviedb_py.testkit import client_error, no_sleep

_ACTIVE = {"Table": {"TableName": "movies", "TableStatus": "ACTIVE"}}


def test_build_create_table_request_uses_year_title_key() -> None:
    req = build_create_table_request("movies")

    assert req["TableName"] == "movies"
    assert req["KeySchema"] == [
        {"AttributeName": "Year", "KeyType": "HASH"},
        {"AttributeName": "Title", "KeyType": "RANGE"},
    ]
    assert req["AttributeDefinitions"] == [
        {"AttributeName": "Title", "AttributeType": "S"},
        {"AttributeName": "Year", "AttributeType": "N"},
    ]
    assert req["BillingMode"] == "PROVISIONED"
    assert req["ProvisionedThroughput"] == {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}


def test_build_create_table_request_validates_inputs() -> None:
    assert build_create_table_request("movies", read_capacity=10, write_capacity=2)[
        "ProvisionedThroughput"
    ] == {"ReadCapacityUnits": 10, "WriteCapacityUnits": 2}

    with pytest.raises(ValidationError, match="table name"):
        build_create_table_request("bad name")
    with pytest.raises(ValidationError, match="read_capacity"):
        build_create_table_request("movies", read_capacity=0)
    with pytest.raises(ValidationError, match="write_capacity"):
        build_create_table_request("movies", write_capacity=True)


def test_list_tables() -> None:
    client = FakeDynamoDBClient()
    client.expect("list_tables", response={"TableNames": ["movies", "shows"]})

    assert list_tables(client=client) == ["movies", "shows"]
    client.assert_no_pending()


def test_create_table_waits_until_active() -> None:
    client = FakeDynamoDBClient()
    client.expect("create_table", {"TableName": "movies", "BillingMode": "PROVISIONED"})
    client.expect("describe_table", {"TableName": "movies"}, response={"Table": {"TableStatus": "CREATING"}})
    client.expect("describe_table", {"TableName": "movies"}, response=_ACTIVE)

    create_table("movies", client=client, sleep=no_sleep)
    client.assert_no_pending()


def test_create_table_existing_table_raises_already_exists() -> None:
    client = FakeDynamoDBClient()
    client.expect("create_table", error=client_error("ResourceInUseException", "Table already exists"))

    with pytest.raises(AlreadyExistsError, match="movies"):
        create_table("movies", client=client, sleep=no_sleep)


def test_create_table_times_out() -> None:
    client = FakeDynamoDBClient()
    client.expect("create_table")

    with pytest.raises(TransportError) as excinfo:
        create_table("movies", client=client, wait_timeout_seconds=0.0, sleep=no_sleep)
    assert excinfo.value.code == "Timeout"


def test_ensure_table_creates_missing_table() -> None:
    client = FakeDynamoDBClient()
    client.expect("describe_table", error=client_error("ResourceNotFoundException"))
    client.expect("create_table", {"TableName": "movies"})
    client.expect("describe_table", response=_ACTIVE)

    assert ensure_table("movies", client=client, sleep=no_sleep) is True
    client.assert_no_pending()


def test_ensure_table_existing_table_is_noop() -> None:
    client = FakeDynamoDBClient()
    client.expect("describe_table", response=_ACTIVE)
    client.expect("describe_table", response=_ACTIVE)

    assert ensure_table("movies", client=client, sleep=no_sleep) is False
    client.assert_no_pending()


def test_ensure_table_tolerates_concurrent_create() -> None:
    client = FakeDynamoDBClient()
    client.expect("describe_table", error=client_error("ResourceNotFoundException"))
    client.expect("create_table", error=client_error("ResourceInUseException"))
    client.expect("describe_table", response=_ACTIVE)

    assert ensure_table("movies", client=client, sleep=no_sleep) is False
    client.assert_no_pending()


def test_describe_table_not_found() -> None:
    client = FakeDynamoDBClient()
    client.expect("describe_table", error=client_error("ResourceNotFoundException"))

    with pytest.raises(NotFoundError, match="movies"):
        describe_table("movies", client=client)


def test_delete_table_waits_until_gone() -> None:
    client = FakeDynamoDBClient()
    client.expect("delete_table", {"TableName": "movies"})
    client.expect("describe_table", response={"Table": {"TableStatus": "DELETING"}})
    client.expect("describe_table", error=client_error("ResourceNotFoundException"))

    delete_table("movies", client=client, sleep=no_sleep)
    client.assert_no_pending()


def test_delete_table_missing_table_raises_not_found() -> None:
    client = FakeDynamoDBClient()
    client.expect("delete_table", error=client_error("ResourceNotFoundException"))

    with pytest.raises(NotFoundError):
        delete_table("movies", client=client, sleep=no_sleep)


def test_delete_table_other_errors_are_transport_errors() -> None:
    client = FakeDynamoDBClient()
    client.expect("delete_table", error=client_error("ResourceInUseException", "table is being created"))

    with pytest.raises(TransportError) as excinfo:
        delete_table("movies", client=client, sleep=no_sleep)
    assert excinfo.value.code == "ResourceInUseException"


def test_create_table_short_name_is_left_to_the_store() -> None:
    client = FakeDynamoDBClient()
    client.expect("create_table", {"TableName": "t1"}, response={})
    client.expect("describe_table", {"TableName": "t1"}, response=_ACTIVE)
    create_table("t1", client=client, sleep=no_sleep)
    client.assert_no_pending()

    rejecting = FakeDynamoDBClient()
    rejecting.expect(
        "create_table", error=client_error("ValidationException", "TableName must be at least 3")
    )
    with pytest.raises(ValidationError, match="at least 3"):
        create_table("t1", client=rejecting, sleep=no_sleep)
