r"""Cached OAuth2 access token."""

from __future__ import annotations

__all__ = ["AccessToken"]

from dataclasses import dataclass


@dataclass(frozen=True)
class AccessToken:
    """A bearer token with its expiry.

    Tokens are never edited: a refresh replaces the cached instance.

    Args:
        token: The bearer token string.
        expires_at: Expiry as a UNIX timestamp in seconds.

    Example:
        ```pycon
        >>> from pushpipe.credentials import AccessToken
        >>> token = AccessToken(token="ya29.abc", expires_at=1000.0)
        >>> token.is_expired(now=500.0)
        False
        >>> token.is_expired(now=500.0, margin=600.0)
        True

        ```
    """

    token: str
    expires_at: float

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(token='***', expires_at={self.expires_at})"

    def is_expired(self, now: float, margin: float = 0.0) -> bool:
        """Indicate whether the token expires within ``margin`` seconds of
        ``now``."""
        return now >= self.expires_at - margin
