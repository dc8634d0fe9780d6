r"""Retry policy combining a backoff strategy with retry limits."""

from __future__ import annotations

__all__ = ["BackoffPolicy"]

import logging
import random
from typing import TYPE_CHECKING

from pushpipe.backoff.exponential import ExponentialBackoff
from pushpipe.core.validation import validate_backoff_params

if TYPE_CHECKING:
    from pushpipe.backoff.base import BaseBackoffStrategy
    from pushpipe.core.config import BackoffSettings

logger: logging.Logger = logging.getLogger(__name__)


class BackoffPolicy:
    """Decides whether to retry and how long to wait before retrying.

    The policy is a pure function of its inputs: it holds no per-request
    state, so one instance can be shared by concurrent exchanges. The
    attempt counter and elapsed time are supplied by the caller.

    Args:
        strategy: The backoff strategy computing raw delays.
            Defaults to ``ExponentialBackoff()``.
        max_retries: Maximum number of retries. 0 disables retrying.
        max_time_span: Maximum elapsed time in seconds after which no
            retry is attempted.
        jitter_factor: Factor for random jitter. The jitter added to a
            delay is ``random.uniform(0, jitter_factor) * delay``.

    Example:
        ```pycon
        >>> from pushpipe.backoff import BackoffPolicy, ExponentialBackoff
        >>> policy = BackoffPolicy(ExponentialBackoff(0.5), max_retries=2, max_time_span=10.0)
        >>> policy.next_delay(1)
        1.0
        >>> policy.should_retry(1, elapsed_time=2.0)
        True
        >>> policy.should_retry(2, elapsed_time=2.0)
        False
        >>> policy.should_retry(0, elapsed_time=10.0)
        False

        ```
    """

    def __init__(
        self,
        strategy: BaseBackoffStrategy | None = None,
        *,
        max_retries: int,
        max_time_span: float,
        jitter_factor: float = 0.0,
    ) -> None:
        self.strategy: BaseBackoffStrategy = (
            strategy if strategy is not None else ExponentialBackoff()
        )
        validate_backoff_params(
            delta_backoff=getattr(self.strategy, "delta_backoff", 0.0),
            max_retries=max_retries,
            max_time_span=max_time_span,
            jitter_factor=jitter_factor,
        )
        self.max_retries = max_retries
        self.max_time_span = max_time_span
        self.jitter_factor = jitter_factor

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(strategy={self.strategy!r}, "
            f"max_retries={self.max_retries}, max_time_span={self.max_time_span}, "
            f"jitter_factor={self.jitter_factor})"
        )

    @classmethod
    def from_settings(cls, settings: BackoffSettings) -> BackoffPolicy:
        """Create a policy with exponential backoff from settings.

        Args:
            settings: The backoff settings.

        Returns:
            The configured policy.
        """
        return cls(
            ExponentialBackoff(settings.delta_backoff),
            max_retries=settings.max_retries,
            max_time_span=settings.max_time_span,
            jitter_factor=settings.jitter_factor,
        )

    def next_delay(self, attempt: int) -> float:
        """Compute the delay before retry ``attempt``.

        Args:
            attempt: The retry index (0-indexed).

        Returns:
            The delay in seconds, jitter included.
        """
        delay = self.strategy.calculate(attempt)
        if self.jitter_factor > 0:
            jitter = random.uniform(0, self.jitter_factor) * delay  # noqa: S311
            logger.debug(f"Backoff delay {delay:.2f}s + jitter {jitter:.2f}s")
            delay += jitter
        return delay

    def should_retry(self, attempt: int, elapsed_time: float) -> bool:
        """Indicate whether retry ``attempt`` is allowed.

        Args:
            attempt: The number of retries already performed.
            elapsed_time: Seconds spent on the logical request so far.

        Returns:
            ``True`` if both the retry count and the time span allow
            another retry, otherwise ``False``.
        """
        return attempt < self.max_retries and elapsed_time < self.max_time_span
