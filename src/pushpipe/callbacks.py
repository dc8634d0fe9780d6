r"""Lifecycle hooks for instrumentation of authorized exchanges.

Hooks are plain callables passed to ``AsyncAuthorizedClient`` at
construction time. They let callers add logging, metrics or tracing
without touching the send path:

- before_send: called with the finalized ``httpx.Request``
- after_receive: called with the request and the final ``httpx.Response``
- on_retry: called with a ``RetryInfo`` before each backoff wait

Hooks are invoked synchronously and should be fast. Exceptions raised
by a hook abort the exchange.

Example:
    ```pycon
    >>> from pushpipe.callbacks import RetryInfo
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"retry {info.attempt}/{info.max_retries} in {info.wait_time}s")
    ...
    >>> log_retry(RetryInfo("https://x", "POST", 1, 3, 0.25, 503))
    retry 1/3 in 0.25s

    ```
"""

from __future__ import annotations

__all__ = [
    "AfterReceiveHook",
    "BeforeSendHook",
    "LifecycleHooks",
    "RetryHook",
    "RetryInfo",
    "invoke_on_retry",
]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    import httpx


@dataclass
class RetryInfo:
    """Information passed to the on_retry hook.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The retry about to be made (1-indexed). The first retry
            is 1.
        max_retries: The effective maximum number of retries.
        wait_time: The delay in seconds before this retry.
        status_code: The status code that triggered the retry.
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    wait_time: float
    status_code: int


BeforeSendHook = Callable[["httpx.Request"], None]
AfterReceiveHook = Callable[["httpx.Request", "httpx.Response"], None]
RetryHook = Callable[[RetryInfo], None]


@dataclass
class LifecycleHooks:
    """Optional hooks invoked around each exchange.

    Attributes:
        before_send: Called with the request before it is sent.
        after_receive: Called with the request and the final response.
        on_retry: Called before each backoff wait.
    """

    before_send: BeforeSendHook | None = None
    after_receive: AfterReceiveHook | None = None
    on_retry: RetryHook | None = None

    def invoke_before_send(self, request: httpx.Request) -> None:
        if self.before_send is not None:
            self.before_send(request)

    def invoke_after_receive(self, request: httpx.Request, response: httpx.Response) -> None:
        if self.after_receive is not None:
            self.after_receive(request, response)


def invoke_on_retry(
    on_retry: RetryHook | None,
    *,
    request: httpx.Request,
    attempt: int,
    max_retries: int,
    wait_time: float,
    status_code: int,
) -> None:
    """Invoke the on_retry hook if provided.

    Args:
        on_retry: Optional hook to invoke.
        request: The request about to be resent.
        attempt: The retry index (0-indexed internally). The hook
            receives it as a 1-indexed value (attempt + 1).
        max_retries: The effective maximum number of retries.
        wait_time: The delay before the retry.
        status_code: The status code that triggered the retry.
    """
    if on_retry is not None:
        on_retry(
            RetryInfo(
                url=str(request.url),
                method=request.method,
                attempt=attempt + 1,
                max_retries=max_retries,
                wait_time=wait_time,
                status_code=status_code,
            )
        )
