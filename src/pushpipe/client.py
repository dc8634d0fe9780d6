r"""Asynchronous client running authorized, retried and validated
exchanges.

This module provides the AsyncAuthorizedClient class, the request
pipeline tying together the credential provider, the retrying
transport, the response evaluator and the serializer.
"""

from __future__ import annotations

__all__ = ["AsyncAuthorizedClient"]

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pushpipe.callbacks import LifecycleHooks
from pushpipe.core.config import ClientSettings
from pushpipe.credentials.provider import DEFAULT_EXPIRY_MARGIN, CredentialProvider
from pushpipe.evaluator import evaluate_response
from pushpipe.exceptions import ClientClosedError, SerializationError
from pushpipe.serializer import JsonSerializer
from pushpipe.transport import AsyncTransport

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType
    from typing import Self

    import httpx

    from pushpipe.callbacks import AfterReceiveHook, BeforeSendHook, RetryHook
    from pushpipe.credentials.signer import AssertionSigner
    from pushpipe.request import RequestBuilder
    from pushpipe.serializer import Serializer

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncAuthorizedClient:
    r"""Client for a JSON API protected by service account credentials.

    Each exchange goes through the same steps:

    1. obtain a bearer token (cached until it expires) and set it as the
       ``Authorization`` header of the request builder
    2. build the request and call the ``before_send`` hook
    3. send it, retrying transient responses (503 by default) with
       exponential backoff
    4. call the ``after_receive`` hook with the final response
    5. raise ``HttpError`` for status codes >= 400
    6. for ``send_json``, deserialize the response body

    One client can be shared by concurrent tasks. Cancelling a task
    aborts its exchange with ``asyncio.CancelledError`` at any suspension
    point (token exchange, send, backoff wait).

    Args:
        settings: The client settings.
        serializer: Serializer for response bodies. Defaults to
            ``JsonSerializer()``.
        client: Optional ``httpx.AsyncClient`` used for both the token
            exchange and API calls. It stays open after ``aclose()``
            unless ``owns_client`` is ``True``.
        owns_client: If ``True``, ``aclose()`` also closes ``client``.
        signer: Optional assertion signer for the token exchange.
        credential_provider: Optional provider replacing the one built
            from ``settings.credentials``.
        before_send: Optional hook called with each finalized request.
        after_receive: Optional hook called with each request and its
            final response.
        on_retry: Optional hook called before each backoff wait.
        expiry_margin: Seconds before expiry at which a token is renewed.

    Example:
        ```pycon
        >>> import asyncio
        >>> from pushpipe import AsyncAuthorizedClient, ClientSettings, RequestBuilder
        >>> async def main():  # doctest: +SKIP
        ...     settings = ClientSettings.from_file("service-account.json")
        ...     async with AsyncAuthorizedClient(settings) as client:
        ...         builder = RequestBuilder(
        ...             "POST", "https://fcm.googleapis.com/v1/projects/demo/messages:send"
        ...         ).set_string_content('{"message": {"topic": "news"}}')
        ...         return await client.send_json(builder, dict)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        settings: ClientSettings,
        *,
        serializer: Serializer | None = None,
        client: httpx.AsyncClient | None = None,
        owns_client: bool = False,
        signer: AssertionSigner | None = None,
        credential_provider: CredentialProvider | None = None,
        before_send: BeforeSendHook | None = None,
        after_receive: AfterReceiveHook | None = None,
        on_retry: RetryHook | None = None,
        expiry_margin: float = DEFAULT_EXPIRY_MARGIN,
    ) -> None:
        self._settings = settings
        self._serializer: Serializer = serializer if serializer is not None else JsonSerializer()
        self._hooks = LifecycleHooks(
            before_send=before_send, after_receive=after_receive, on_retry=on_retry
        )
        self._transport = AsyncTransport.from_settings(
            settings, client=client, owns_client=owns_client, on_retry=on_retry
        )
        self._credential_provider = (
            credential_provider
            if credential_provider is not None
            else CredentialProvider(
                settings.credentials,
                settings.scopes,
                self._transport.client,
                signer=signer,
                expiry_margin=expiry_margin,
            )
        )

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: Any) -> AsyncAuthorizedClient:
        """Create a client with default settings from a service account
        JSON file.

        Args:
            path: Path to the service account JSON file.
            **kwargs: Keyword arguments passed to the constructor.
        """
        return cls(ClientSettings.from_file(path), **kwargs)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def transport(self) -> AsyncTransport:
        return self._transport

    @property
    def credential_provider(self) -> CredentialProvider:
        return self._credential_provider

    @property
    def closed(self) -> bool:
        return self._transport.closed

    async def send_json(
        self, builder: RequestBuilder, result_type: type[T] | None = None, *, stream: bool = False
    ) -> T:
        """Run an exchange and deserialize the response body.

        Args:
            builder: The request builder. Its ``Authorization`` header is
                overwritten.
            result_type: The expected result type, passed to the
                serializer. ``None`` returns the parsed JSON value.
            stream: If ``True``, the transport returns as soon as the
                headers are received; the body is read afterwards.

        Returns:
            The deserialized response body.

        Raises:
            AuthenticationError: If no access token can be obtained.
            HttpError: If the final response status is >= 400.
            RequestError: If a send fails without a response.
            SerializationError: If the body cannot be deserialized.
            ClientClosedError: If the client was closed.
        """
        response = await self._exchange(builder, stream=stream)
        try:
            await response.aread()
        finally:
            await response.aclose()

        try:
            return self._serializer.deserialize(response.text, result_type)
        except SerializationError:
            raise
        except (TypeError, ValueError) as exc:
            msg = f"unable to deserialize response from {response.request.url}: {exc}"
            raise SerializationError(msg) from exc

    async def send(self, builder: RequestBuilder, *, stream: bool = False) -> None:
        """Run an exchange and discard the response body.

        Args:
            builder: The request builder. Its ``Authorization`` header is
                overwritten.
            stream: If ``True``, the response body is never downloaded
                for successful responses.

        Raises:
            AuthenticationError: If no access token can be obtained.
            HttpError: If the final response status is >= 400.
            RequestError: If a send fails without a response.
            ClientClosedError: If the client was closed.
        """
        response = await self._exchange(builder, stream=stream)
        await response.aclose()

    async def _exchange(self, builder: RequestBuilder, *, stream: bool) -> httpx.Response:
        self._ensure_open()

        token = await self._credential_provider.get_access_token()
        builder.add_header("Authorization", f"Bearer {token}")
        request = builder.build().to_httpx(self._transport.client)

        self._hooks.invoke_before_send(request)
        response = await self._transport.send(request, stream=stream)
        try:
            self._hooks.invoke_after_receive(request, response)
            if response.status_code >= 400:
                await response.aread()
            evaluate_response(response)
        except BaseException:
            await response.aclose()
            raise
        return response

    def _ensure_open(self) -> None:
        if self._transport.closed:
            msg = "AsyncAuthorizedClient is closed"
            raise ClientClosedError(msg)

    async def aclose(self) -> None:
        """Close the client and release the connections it owns.

        Calling it again has no effect.
        """
        if not self._transport.closed:
            logger.debug("Closing AsyncAuthorizedClient")
        await self._transport.aclose()

    async def __aenter__(self) -> Self:
        self._ensure_open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
