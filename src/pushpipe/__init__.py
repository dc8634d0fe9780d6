r"""pushpipe - Authorized, retried and validated async HTTP exchanges.

This package runs HTTP exchanges against JSON APIs protected by
service account credentials, such as push notification services. Built
on top of httpx and PyJWT, it takes care of the parts every such client
needs:

Key Features:
    - Bearer token acquisition through the OAuth2 JWT-bearer grant
    - Token caching shared by concurrent exchanges, renewed before expiry
    - Exponential backoff on transient responses (503 by default), bounded
      by a retry count and a total time span
    - Typed errors for authentication, HTTP and deserialization failures
    - before_send / after_receive / on_retry hooks for instrumentation
    - Async context manager API with idempotent shutdown

Example:
    ```pycon
    >>> import asyncio
    >>> from pushpipe import AsyncAuthorizedClient, ClientSettings, RequestBuilder
    >>> async def main():  # doctest: +SKIP
    ...     settings = ClientSettings.from_file("service-account.json")
    ...     async with AsyncAuthorizedClient(settings) as client:
    ...         builder = RequestBuilder("POST", "https://api.example.com/messages:send")
    ...         builder.set_string_content('{"message": {"topic": "news"}}')
    ...         return await client.send_json(builder)
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncAuthorizedClient",
    "AsyncTransport",
    "AuthenticationError",
    "BackoffPolicy",
    "BackoffSettings",
    "CancelledError",
    "ClientClosedError",
    "ClientSettings",
    "CredentialProvider",
    "ExponentialBackoff",
    "HttpError",
    "JsonSerializer",
    "PushPipeError",
    "RequestBuilder",
    "RequestDescriptor",
    "RequestError",
    "SerializationError",
    "ServiceAccountCredential",
    "__version__",
    "evaluate_response",
]

from importlib.metadata import PackageNotFoundError, version

from pushpipe.backoff import BackoffPolicy, ExponentialBackoff
from pushpipe.client import AsyncAuthorizedClient
from pushpipe.core.config import BackoffSettings, ClientSettings
from pushpipe.credentials import CredentialProvider, ServiceAccountCredential
from pushpipe.evaluator import evaluate_response
from pushpipe.exceptions import (
    AuthenticationError,
    CancelledError,
    ClientClosedError,
    HttpError,
    PushPipeError,
    RequestError,
    SerializationError,
)
from pushpipe.request import RequestBuilder, RequestDescriptor
from pushpipe.serializer import JsonSerializer
from pushpipe.transport import AsyncTransport

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
