from __future__ import annotations


class MoviedbPyError(Exception):
    pass


class AlreadyExistsError(MoviedbPyError):
    pass


class NotFoundError(MoviedbPyError):
    pass


class ValidationError(MoviedbPyError):
    pass


class TransportError(MoviedbPyError):
    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class BatchInsertError(MoviedbPyError):
    def __init__(self, *, table_name: str, processed: int, cause: Exception) -> None:
        super().__init__(f"batch insert into {table_name} stopped after {processed} record(s): {cause}")
        self.table_name = table_name
        self.processed = processed
        self.cause = cause
