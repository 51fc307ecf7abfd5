from __future__ import annotations

import logging
import os
import sys
import uuid

from moviedb_py import (
    AlreadyExistsError,
    ClientConfig,
    Movie,
    MovieInfo,
    MovieStore,
    create_dynamodb_client,
    log_call_metric,
    read_movies_json,
)

logger = logging.getLogger("moviedb_py.examples")


def _store() -> MovieStore:
    config = ClientConfig(
        region_name=os.environ.get("AWS_REGION", "us-east-1"),
        endpoint_url=os.environ.get("DYNAMODB_ENDPOINT", "http://localhost:8000"),
    )
    return MovieStore(client=create_dynamodb_client(config, metrics=log_call_metric))


def main(argv: list[str]) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "dummy")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "dummy")

    store = _store()
    table_name = f"moviedb_py_example_{uuid.uuid4().hex[:12]}"
    store.create_table(table_name)

    try:
        records = read_movies_json(argv[0]) if argv else [
            Movie(2013, "Rush"),
            Movie(2013, "Turbo"),
            Movie(2014, "Noah"),
            Movie(1999, "The Matrix"),
        ]
        store.batch_insert(table_name, records, skip_existing=True)

        try:
            store.put_item(table_name, Movie(2013, "Rush"))
        except AlreadyExistsError:
            logger.info("duplicate insert rejected")

        store.update_item(table_name, Movie(2013, "Rush"), MovieInfo(plot="Formula One rivalry.", rank=2))
        print("get:", store.get_item(table_name, Movie(2013, "Rush")))
        print("query 2013:", store.query_by_partition(table_name, 2013).items)
        print("scan 2000-2014:", store.scan_by_range(table_name, 2000, 2014).items)
    finally:
        store.delete_table(table_name)


if __name__ == "__main__":
    main(sys.argv[1:])
