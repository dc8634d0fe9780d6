r"""HTTP transport with exponential backoff on transient responses.

This module provides the AsyncTransport class that owns the underlying
``httpx.AsyncClient`` and sends requests through an
``AsyncRetryExecutor``.
"""

from __future__ import annotations

__all__ = ["AsyncTransport", "reconcile_max_retries"]

import logging
from typing import TYPE_CHECKING

import httpx

from pushpipe.backoff.policy import BackoffPolicy
from pushpipe.core.config import DEFAULT_TIMEOUT, RETRY_STATUS_CODES
from pushpipe.core.validation import validate_max_attempts, validate_timeout
from pushpipe.exceptions import ClientClosedError
from pushpipe.retry.decider import RetryDecider
from pushpipe.retry.executor import AsyncRetryExecutor

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from pushpipe.callbacks import RetryHook
    from pushpipe.core.config import ClientSettings

logger: logging.Logger = logging.getLogger(__name__)


def reconcile_max_retries(policy_max_retries: int, max_attempts: int | None) -> int:
    """Reconcile the policy retry count with the transport attempt ceiling.

    The transport ceiling counts physical sends, so it allows
    ``max_attempts - 1`` retries. The stricter of the two limits is
    returned. A warning is logged when the two disagree, since one of
    the configured values then has no effect.

    Args:
        policy_max_retries: The backoff policy maximum number of retries.
        max_attempts: The transport ceiling on physical sends, or ``None``.

    Returns:
        The effective maximum number of retries.

    Example:
        ```pycon
        >>> from pushpipe.transport import reconcile_max_retries
        >>> reconcile_max_retries(3, None)
        3
        >>> reconcile_max_retries(10, 3)
        2
        >>> reconcile_max_retries(1, 5)
        1

        ```
    """
    validate_max_attempts(max_attempts)
    if max_attempts is None:
        return policy_max_retries
    transport_max_retries = max_attempts - 1
    if transport_max_retries != policy_max_retries:
        effective = min(transport_max_retries, policy_max_retries)
        logger.warning(
            f"Backoff max_retries={policy_max_retries} disagrees with transport "
            f"max_attempts={max_attempts} ({transport_max_retries} retries); "
            f"using {effective} retries"
        )
        return effective
    return policy_max_retries


class AsyncTransport:
    r"""Sends HTTP requests with automatic retries on transient responses.

    The transport sends through an ``httpx.AsyncClient`` (connection
    pooling and protocol handling are left to httpx). A client created by
    the transport is closed by ``aclose()``. A client passed in stays
    open unless ``owns_client`` is ``True``.

    Args:
        policy: The backoff policy.
        max_attempts: Optional ceiling on physical sends per exchange.
            Reconciled with ``policy.max_retries`` at construction.
        retry_status_codes: Status codes answered with a retry.
        client: Optional preconfigured ``httpx.AsyncClient``.
        owns_client: If ``True``, ``aclose()`` also closes ``client``.
            Ignored when the transport creates its own client.
        timeout: Timeout used when the transport creates its own client.
        on_retry: Optional hook invoked before each backoff wait.

    Example:
        ```pycon
        >>> import asyncio
        >>> from pushpipe.backoff import BackoffPolicy
        >>> from pushpipe.transport import AsyncTransport
        >>> async def main():  # doctest: +SKIP
        ...     policy = BackoffPolicy(max_retries=3, max_time_span=30.0)
        ...     async with AsyncTransport(policy) as transport:
        ...         request = transport.client.build_request("GET", "https://api.example.com")
        ...         return await transport.send(request)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        policy: BackoffPolicy,
        *,
        max_attempts: int | None = None,
        retry_status_codes: tuple[int, ...] = RETRY_STATUS_CODES,
        client: httpx.AsyncClient | None = None,
        owns_client: bool = False,
        timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
        on_retry: RetryHook | None = None,
    ) -> None:
        validate_timeout(timeout)
        self.max_retries = reconcile_max_retries(policy.max_retries, max_attempts)
        self._owns_client = owns_client or client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)
        self._executor = AsyncRetryExecutor(
            policy,
            RetryDecider(retry_status_codes),
            max_retries=self.max_retries,
            on_retry=on_retry,
        )
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        *,
        client: httpx.AsyncClient | None = None,
        owns_client: bool = False,
        on_retry: RetryHook | None = None,
    ) -> AsyncTransport:
        """Create a transport from client settings."""
        return cls(
            BackoffPolicy.from_settings(settings.backoff),
            max_attempts=settings.max_attempts,
            retry_status_codes=settings.retry_status_codes,
            client=client,
            owns_client=owns_client,
            timeout=settings.timeout,
            on_retry=on_retry,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """The underlying ``httpx.AsyncClient``."""
        return self._client

    @property
    def owns_client(self) -> bool:
        """``True`` if ``aclose()`` closes the underlying client."""
        return self._owns_client

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        """Send ``request``, retrying transient responses.

        Args:
            request: The finalized request. It is resent unchanged on
                every retry.
            stream: If ``True``, return as soon as the headers are
                received and leave reading the body to the caller.

        Returns:
            The last response received. Error statuses are returned, not
            raised.

        Raises:
            ClientClosedError: If the transport was closed.
            RequestError: If a send fails without a response.
        """
        if self._closed:
            msg = "AsyncTransport is closed"
            raise ClientClosedError(msg)
        return await self._executor.execute(request, self._client.send, stream=stream)

    async def aclose(self) -> None:
        """Mark the transport closed and close the client it owns.

        Calling it again has no effect.
        """
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            await self._client.aclose()
        else:
            logger.debug("AsyncTransport closed, leaving the injected client open")

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
