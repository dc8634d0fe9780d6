r"""Backoff strategies and the retry policy built on top of them."""

from __future__ import annotations

__all__ = ["BackoffPolicy", "BaseBackoffStrategy", "ExponentialBackoff"]

from pushpipe.backoff.base import BaseBackoffStrategy
from pushpipe.backoff.exponential import ExponentialBackoff
from pushpipe.backoff.policy import BackoffPolicy
