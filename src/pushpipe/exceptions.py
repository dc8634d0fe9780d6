r"""Exceptions raised by authorized HTTP exchanges.

All errors raised by pushpipe derive from ``PushPipeError`` so callers can
catch the whole family at once, or branch on the concrete type:

- ``AuthenticationError``: the bearer token could not be obtained.
- ``HttpError``: the target API answered with a status code >= 400.
- ``SerializationError``: the response body could not be deserialized.
- ``RequestError``: the request never produced a response (network failure).
- ``ClientClosedError``: the client was used after it was closed.

Cancellation is not wrapped: ``asyncio.CancelledError`` propagates unchanged.
"""

from __future__ import annotations

__all__ = [
    "AuthenticationError",
    "CancelledError",
    "ClientClosedError",
    "HttpError",
    "PushPipeError",
    "RequestError",
    "SerializationError",
]

from asyncio import CancelledError
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class PushPipeError(Exception):
    """Base class for all pushpipe errors."""


class AuthenticationError(PushPipeError):
    """Raised when an access token cannot be obtained.

    This covers malformed service account credentials, assertions that
    cannot be signed, failed token exchanges and token responses
    without an ``access_token`` field.

    Args:
        message: Human readable description of the failure.
        status_code: Status code of the token endpoint response, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HttpError(PushPipeError):
    """Raised when the target API answers with an error status code.

    Args:
        status_code: The HTTP status code (>= 400).
        body: The raw response body.
        headers: The response headers.
        response: The ``httpx.Response`` that triggered the error.

    Example:
        ```pycon
        >>> from pushpipe.exceptions import HttpError
        >>> error = HttpError(status_code=404, body=b"not found")
        >>> error.status_code
        404
        >>> error.text
        'not found'

        ```
    """

    def __init__(
        self,
        status_code: int,
        body: bytes = b"",
        headers: httpx.Headers | dict[str, str] | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.headers = headers if headers is not None else {}
        self.response = response
        super().__init__(f"request failed with status {status_code}")

    @property
    def text(self) -> str:
        """The response body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")


class SerializationError(PushPipeError):
    """Raised when a response body cannot be turned into the expected
    result type."""


class RequestError(PushPipeError):
    """Raised when a request fails before a response is received.

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        cause: The underlying transport exception.
    """

    def __init__(self, method: str, url: str, cause: Exception) -> None:
        super().__init__(f"{method} request to {url} failed: {cause}")
        self.method = method
        self.url = url
        self.cause = cause


class ClientClosedError(PushPipeError, RuntimeError):
    """Raised when a client is used after ``aclose()``."""
