from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, cast

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)


class DynamoDBClient(Protocol):
    def list_tables(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def create_table(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def describe_table(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def delete_table(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def put_item(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def update_item(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def get_item(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def delete_item(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def query(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def scan(self, **kwargs: Any) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class ClientConfig:
    region_name: str | None = None
    endpoint_url: str | None = None
    connect_timeout: float = 2.0
    read_timeout: float = 5.0
    max_attempts: int = 3


@dataclass(frozen=True)
class AwsCallMetric:
    service: str
    operation: str
    seconds: float
    ok: bool
    table_name: str | None = None


def create_boto3_config(config: ClientConfig) -> Config:
    return Config(
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
        retries={"max_attempts": config.max_attempts, "mode": "standard"},
    )


class _InstrumentedClient:
    def __init__(self, client: Any, service: str, on_call: Callable[[AwsCallMetric], None]) -> None:
        self._client = client
        self._service = service
        self._on_call = on_call

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._client, name)
        if name.startswith("_") or not callable(attr):
            return attr
        return self._timed(name, attr)

    def _timed(self, operation: str, method: Callable[..., Any]) -> Callable[..., Any]:
        def call(*args: Any, **req: Any) -> Any:
            table_name = req.get("TableName")
            ok = False
            start = time.monotonic()
            try:
                out = method(*args, **req)
                ok = True
                return out
            finally:
                self._on_call(
                    AwsCallMetric(
                        service=self._service,
                        operation=operation,
                        seconds=time.monotonic() - start,
                        ok=ok,
                        table_name=table_name if isinstance(table_name, str) else None,
                    )
                )

        return call


def instrument_client(
    client: Any,
    *,
    on_call: Callable[[AwsCallMetric], None],
    service: str = "dynamodb",
) -> Any:
    return _InstrumentedClient(client, service, on_call)


def log_call_metric(metric: AwsCallMetric) -> None:
    logger.debug(
        "%s.%s on %s took %.3fs (%s)",
        metric.service,
        metric.operation,
        metric.table_name or "-",
        metric.seconds,
        "ok" if metric.ok else "failed",
    )


def create_dynamodb_client(
    config: ClientConfig | None = None,
    *,
    session: Any | None = None,
    metrics: Callable[[AwsCallMetric], None] | None = None,
) -> Any:
    config = config or ClientConfig()
    sess = session or boto3.session.Session(region_name=config.region_name)

    kwargs: dict[str, Any] = {"config": create_boto3_config(config)}
    if config.region_name is not None:
        kwargs["region_name"] = config.region_name
    if config.endpoint_url is not None:
        kwargs["endpoint_url"] = config.endpoint_url

    client = cast(Any, sess).client("dynamodb", **kwargs)
    if metrics is not None:
        client = instrument_client(client, on_call=metrics)
    return client
