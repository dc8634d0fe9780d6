r"""Parameter validation utilities for retry and client settings.

This module provides validation functions shared by the settings
dataclasses and the backoff policy so that invalid values are rejected
once, at construction time.
"""

from __future__ import annotations

__all__ = ["validate_backoff_params", "validate_max_attempts", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from pushpipe.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_backoff_params(
    delta_backoff: float,
    max_retries: int,
    max_time_span: float,
    jitter_factor: float = 0.0,
) -> None:
    """Validate backoff parameters.

    Args:
        delta_backoff: Delay before the first retry in seconds. Must be >= 0.
        max_retries: Maximum number of retries. Must be >= 0. A value of 0
            disables retrying.
        max_time_span: Maximum total time in seconds spent on one logical
            request, retries included. Must be > 0.
        jitter_factor: Factor for random jitter added to each delay.
            Must be >= 0.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from pushpipe.core.validation import validate_backoff_params
        >>> validate_backoff_params(delta_backoff=0.25, max_retries=3, max_time_span=30.0)
        >>> validate_backoff_params(delta_backoff=0.25, max_retries=-1, max_time_span=30.0)  # doctest: +SKIP

        ```
    """
    if delta_backoff < 0:
        msg = f"delta_backoff must be >= 0, got {delta_backoff}"
        raise ValueError(msg)
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if max_time_span <= 0:
        msg = f"max_time_span must be > 0, got {max_time_span}"
        raise ValueError(msg)
    if jitter_factor < 0:
        msg = f"jitter_factor must be >= 0, got {jitter_factor}"
        raise ValueError(msg)


def validate_max_attempts(max_attempts: int | None) -> None:
    """Validate the transport-level physical attempt ceiling.

    Args:
        max_attempts: Maximum number of physical sends per exchange, the
            initial send included. ``None`` means no transport ceiling.

    Raises:
        ValueError: If max_attempts is < 1.
    """
    if max_attempts is not None and max_attempts < 1:
        msg = f"max_attempts must be >= 1, got {max_attempts}"
        raise ValueError(msg)
