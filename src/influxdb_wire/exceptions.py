"""Exceptions for influxdb_wire."""

from __future__ import annotations

from typing import Any, Optional


class InfluxDBError(Exception):
    """Base exception for request failures raised by influxdb_wire.

    When a batched write fails, ``points_sent`` is the number of points
    delivered by earlier batches of the same call.
    """

    points_sent: Optional[int] = None


class ServerError(InfluxDBError):
    """The server reported an internal failure (5xx).

    A successful response can be expected once the issue is resolved on the
    server side, so callers may retry.
    """


class ClientError(InfluxDBError):
    """The server rejected the request (4xx) or the query itself failed.

    The request has to be changed before it can succeed.
    """

    def __init__(self, message: str, request: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.request = request


class UnexpectedResponse(InfluxDBError):
    """The response did not have the shape this library expects.

    ``payload`` holds the relevant (possibly empty) part of the response body.
    """

    def __init__(
        self,
        message: str,
        request: Optional[Any] = None,
        payload: bytes = b"",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.request = request
        self.payload = payload


class TransportError(InfluxDBError):
    """Low-level communication failure (connection, TLS, timeout, socket)."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.cause = cause


class UnsafeOperationError(InfluxDBError):
    """Raised when a write is blocked by safety rules."""


# Programmer errors. These are intentionally outside the InfluxDBError tree.

class IdentifierError(ValueError):
    """An identifier was built from an empty or multi-line string."""


class NullFieldError(TypeError):
    """A null field value reached the write path."""
