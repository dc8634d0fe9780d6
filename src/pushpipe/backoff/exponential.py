r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from pushpipe.backoff.base import BaseBackoffStrategy
from pushpipe.core.config import DEFAULT_DELTA_BACKOFF


class ExponentialBackoff(BaseBackoffStrategy):
    """Doubles the wait after every retry.

    The wait before retry ``attempt`` (0-indexed) is
    ``delta_backoff * 2 ** attempt``: with the default ``delta_backoff``
    the waits are 0.25s, 0.5s, 1.0s, ... An optional ``max_delay`` caps a
    single wait; it cannot be smaller than the first wait.

    Args:
        delta_backoff: The wait before the first retry, in seconds.
        max_delay: Optional cap on a single wait, in seconds.

    Example:
        ```pycon
        >>> from pushpipe.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff()
        >>> [backoff.calculate(attempt) for attempt in range(4)]
        [0.25, 0.5, 1.0, 2.0]
        >>> ExponentialBackoff(1.0, max_delay=5.0).calculate(10)
        5.0

        ```
    """

    def __init__(
        self, delta_backoff: float = DEFAULT_DELTA_BACKOFF, max_delay: float | None = None
    ) -> None:
        if delta_backoff < 0:
            msg = f"delta_backoff must be >= 0, got {delta_backoff}"
            raise ValueError(msg)
        if max_delay is not None and max_delay < delta_backoff:
            msg = f"max_delay must be >= delta_backoff ({delta_backoff}), got {max_delay}"
            raise ValueError(msg)
        self.delta_backoff = delta_backoff
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(delta_backoff={self.delta_backoff}, "
            f"max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        if attempt < 0:
            msg = f"attempt must be >= 0, got {attempt}"
            raise ValueError(msg)
        delay = self.delta_backoff * 2.0**attempt
        return delay if self.max_delay is None else min(delay, self.max_delay)
