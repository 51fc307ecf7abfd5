from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError

from .errors import (
    AlreadyExistsError,
    MoviedbPyError,
    NotFoundError,
    TransportError,
    ValidationError,
)


def error_code(err: ClientError) -> str:
    return str(err.response.get("Error", {}).get("Code", ""))


def map_client_error(
    err: ClientError,
    *,
    condition_failed: type[MoviedbPyError] = AlreadyExistsError,
) -> Exception:
    code = error_code(err)
    message = str(err.response.get("Error", {}).get("Message", ""))

    if code == "ConditionalCheckFailedException":
        return condition_failed(message or "conditional check failed")
    if code == "ResourceNotFoundException":
        return NotFoundError(message or "resource not found")
    if code == "ValidationException":
        return ValidationError(message or "validation failed")

    return TransportError(code=code or "UnknownError", message=message or str(err))


def map_transport_error(err: BotoCoreError) -> TransportError:
    return TransportError(code=type(err).__name__, message=str(err))


def map_store_error(
    err: ClientError | BotoCoreError,
    *,
    condition_failed: type[MoviedbPyError] = AlreadyExistsError,
) -> Exception:
    if isinstance(err, ClientError):
        return map_client_error(err, condition_failed=condition_failed)
    return map_transport_error(err)
