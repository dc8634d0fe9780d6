r"""Retry execution for HTTP sends.

Public API:
    - RetryDecider: Logic for deciding whether a response is retried
    - AsyncRetryExecutor: Asynchronous retry loop driven by a BackoffPolicy
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "RetryDecider"]

from pushpipe.retry.decider import RetryDecider
from pushpipe.retry.executor import AsyncRetryExecutor
