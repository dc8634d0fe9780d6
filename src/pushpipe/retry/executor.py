r"""Asynchronous retry executor for HTTP sends.

This module provides the AsyncRetryExecutor class that resends a
request while the server answers with a transient status code, waiting
between sends as dictated by a ``BackoffPolicy``.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import httpx

from pushpipe.callbacks import invoke_on_retry
from pushpipe.exceptions import RequestError
from pushpipe.retry.decider import RetryDecider

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pushpipe.backoff.policy import BackoffPolicy
    from pushpipe.callbacks import RetryHook

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    """Executes an HTTP send with retries on transient responses.

    The retry state (attempt counter and start time) lives in a single
    ``execute`` call and is never shared, so one executor can serve
    concurrent exchanges.

    Attributes:
        policy: The backoff policy computing delays and time limits.
        decider: Logic for deciding whether a response is retried.
        max_retries: The effective maximum number of retries. It never
            exceeds ``policy.max_retries``.
        on_retry: Optional hook invoked before each backoff wait.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from pushpipe.backoff import BackoffPolicy
        >>> from pushpipe.retry import AsyncRetryExecutor, RetryDecider
        >>> policy = BackoffPolicy(max_retries=3, max_time_span=30.0)
        >>> executor = AsyncRetryExecutor(policy, RetryDecider())
        >>> async def main():  # doctest: +SKIP
        ...     async with httpx.AsyncClient() as client:
        ...         request = client.build_request("GET", "https://api.example.com/data")
        ...         return await executor.execute(request, client.send)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        policy: BackoffPolicy,
        decider: RetryDecider | None = None,
        *,
        max_retries: int | None = None,
        on_retry: RetryHook | None = None,
    ) -> None:
        self.policy = policy
        self.decider: RetryDecider = decider if decider is not None else RetryDecider()
        self.max_retries = (
            policy.max_retries if max_retries is None else min(max_retries, policy.max_retries)
        )
        self.on_retry = on_retry

    async def execute(
        self,
        request: httpx.Request,
        send_func: Callable[..., Awaitable[httpx.Response]],
        *,
        stream: bool = False,
    ) -> httpx.Response:
        """Send ``request``, retrying transient responses.

        The same request object is resent on every attempt. A retry
        happens only if the response status is retryable, fewer than
        ``max_retries`` retries were made, and the elapsed time after the
        next wait would stay below ``policy.max_time_span``.

        When retrying stops, the last response is returned as-is: error
        classification is left to the caller.

        Args:
            request: The request to send.
            send_func: Coroutine function sending a request, typically
                ``httpx.AsyncClient.send``. It is called as
                ``send_func(request, stream=stream)``.
            stream: If ``True``, responses are returned before their body
                is read.

        Returns:
            The last response received.

        Raises:
            RequestError: If a send fails without a response.
            asyncio.CancelledError: If the calling task is cancelled,
                including during a backoff wait. No further send happens.
        """
        start_time = time.monotonic()
        attempt = 0

        while True:
            try:
                response = await send_func(request, stream=stream)
            except httpx.RequestError as exc:
                logger.debug(
                    f"{request.method} request to {request.url} encountered "
                    f"{type(exc).__name__} on attempt {attempt + 1}: {exc}"
                )
                raise RequestError(method=request.method, url=str(request.url), cause=exc) from exc

            if not self.decider.should_retry_response(response):
                return response

            if attempt >= self.max_retries:
                logger.debug(
                    f"{request.method} request to {request.url} still returns "
                    f"{response.status_code} after {attempt + 1} attempts, giving up"
                )
                return response

            delay = self.policy.next_delay(attempt)
            elapsed_time = time.monotonic() - start_time
            if not self.policy.should_retry(attempt, elapsed_time + delay):
                logger.debug(
                    f"{request.method} request to {request.url}: waiting {delay:.2f}s would "
                    f"exceed max_time_span={self.policy.max_time_span:.2f}s, giving up"
                )
                return response

            # the discarded response must release its connection
            await response.aclose()
            invoke_on_retry(
                self.on_retry,
                request=request,
                attempt=attempt,
                max_retries=self.max_retries,
                wait_time=delay,
                status_code=response.status_code,
            )
            logger.debug(
                f"{request.method} request to {request.url} returned {response.status_code}, "
                f"retry {attempt + 1}/{self.max_retries} in {delay:.2f}s"
            )
            await asyncio.sleep(delay)
            attempt += 1
