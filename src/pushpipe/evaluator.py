r"""Classification of HTTP responses into success and typed errors."""

from __future__ import annotations

__all__ = ["evaluate_response"]

import logging
from typing import TYPE_CHECKING

from pushpipe.exceptions import HttpError

if TYPE_CHECKING:
    import httpx

logger: logging.Logger = logging.getLogger(__name__)


def evaluate_response(response: httpx.Response | None) -> None:
    """Raise ``HttpError`` for error responses.

    A missing response is ignored and status 200 is accepted. Any status
    >= 400 raises. Other statuses (201, 204, 3xx, ...) are neither
    confirmed nor rejected; callers relying on them must inspect the
    response themselves.

    The response body must have been read before calling this function.

    Args:
        response: The response to evaluate, or ``None``.

    Raises:
        HttpError: If the status code is >= 400.

    Example:
        ```pycon
        >>> import httpx
        >>> from pushpipe.evaluator import evaluate_response
        >>> evaluate_response(httpx.Response(200))
        >>> evaluate_response(None)
        >>> evaluate_response(httpx.Response(404, content=b"missing"))
        Traceback (most recent call last):
        ...
        pushpipe.exceptions.HttpError: request failed with status 404

        ```
    """
    if response is None:
        return

    if response.status_code == 200:
        return

    if response.status_code >= 400:
        logger.debug(f"Request to {_url_of(response)} failed with status {response.status_code}")
        raise HttpError(
            status_code=response.status_code,
            body=response.content,
            headers=response.headers,
            response=response,
        )


def _url_of(response: httpx.Response) -> str:
    # responses built by hand in tests have no request attached
    try:
        return str(response.request.url)
    except RuntimeError:
        return "<unknown>"
