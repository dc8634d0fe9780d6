r"""Configuration and validation shared by the transport and the
client."""

from __future__ import annotations

__all__ = [
    "DEFAULT_DELTA_BACKOFF",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_TIME_SPAN",
    "DEFAULT_SCOPE",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "BackoffSettings",
    "ClientSettings",
    "validate_backoff_params",
    "validate_max_attempts",
    "validate_timeout",
]

from pushpipe.core.config import (
    DEFAULT_DELTA_BACKOFF,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TIME_SPAN,
    DEFAULT_SCOPE,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
    BackoffSettings,
    ClientSettings,
)
from pushpipe.core.validation import (
    validate_backoff_params,
    validate_max_attempts,
    validate_timeout,
)
