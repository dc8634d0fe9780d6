r"""Retry decision logic for HTTP responses.

This module provides the RetryDecider class that decides whether a
response is a transient failure worth retrying.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

from typing import TYPE_CHECKING

from pushpipe.core.config import RETRY_STATUS_CODES

if TYPE_CHECKING:
    import httpx


class RetryDecider:
    """Decides whether a response should be retried.

    Only responses whose status code is listed in ``retry_status_codes``
    are retried. Every other response, error or not, is final and left
    to the response evaluator.

    Args:
        retry_status_codes: Status codes considered transient.

    Example:
        ```pycon
        >>> import httpx
        >>> from pushpipe.retry import RetryDecider
        >>> decider = RetryDecider()
        >>> decider.should_retry_response(httpx.Response(503))
        True
        >>> decider.should_retry_response(httpx.Response(401))
        False

        ```
    """

    def __init__(self, retry_status_codes: tuple[int, ...] = RETRY_STATUS_CODES) -> None:
        self.retry_status_codes = tuple(retry_status_codes)

    def should_retry_response(self, response: httpx.Response) -> bool:
        return response.status_code in self.retry_status_codes
