from __future__ import annotations

from typing import Any

from botocore.exceptions import ClientError

from .mocks import ANY, FakeDynamoDBClient


def client_error(code: str, message: str = "", operation: str = "Operation") -> ClientError:
    response: Any = {"Error": {"Code": code, "Message": message or code}}
    return ClientError(response, operation)


def raw_movie(year: Any, title: Any, **extra: Any) -> dict[str, Any]:
    item: dict[str, Any] = {"Year": {"N": str(year)}, "Title": {"S": title}}
    item.update(extra)
    return item


def no_sleep(_: float) -> None:
    return None


__all__ = [
    "ANY",
    "FakeDynamoDBClient",
    "client_error",
    "no_sleep",
    "raw_movie",
]
