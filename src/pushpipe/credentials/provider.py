r"""Access token acquisition and caching for service accounts.

This module provides the ``CredentialProvider`` class that exchanges a
signed JWT assertion for a bearer token and caches the token until it
expires.
"""

from __future__ import annotations

__all__ = ["DEFAULT_EXPIRY_MARGIN", "GRANT_TYPE", "CredentialProvider"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from pushpipe.credentials.signer import JwtAssertionSigner
from pushpipe.credentials.token import AccessToken
from pushpipe.exceptions import AuthenticationError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pushpipe.credentials.credential import ServiceAccountCredential
    from pushpipe.credentials.signer import AssertionSigner

logger: logging.Logger = logging.getLogger(__name__)

GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"

# Tokens are refreshed this many seconds before they actually expire
DEFAULT_EXPIRY_MARGIN = 300.0

# Used when the token endpoint omits expires_in
_DEFAULT_EXPIRES_IN = 3600.0


class CredentialProvider:
    """Obtains and caches bearer tokens for a service account.

    The cached token is the only mutable state and is replaced as a
    whole on refresh. There is no lock: concurrent callers that observe
    an absent or expired token may each run a token exchange, and each
    of them returns the fresh token it acquired. A cancelled exchange
    leaves the cache untouched.

    Args:
        credential: The service account.
        scopes: The scopes requested for the token.
        client: The HTTP client used for the token exchange. It is not
            closed by the provider.
        signer: The assertion signer. Defaults to ``JwtAssertionSigner()``.
        expiry_margin: Seconds before expiry at which a cached token is
            considered expired.
        clock: Function returning the current UNIX time.

    Example:
        ```pycon
        >>> import httpx
        >>> from pushpipe.credentials import CredentialProvider, ServiceAccountCredential
        >>> credential = ServiceAccountCredential(client_email="svc@example.com", private_key="...")
        >>> async def main():  # doctest: +SKIP
        ...     async with httpx.AsyncClient() as client:
        ...         provider = CredentialProvider(credential, ["scope"], client)
        ...         return await provider.get_access_token()
        ...

        ```
    """

    def __init__(
        self,
        credential: ServiceAccountCredential,
        scopes: Sequence[str],
        client: httpx.AsyncClient,
        *,
        signer: AssertionSigner | None = None,
        expiry_margin: float = DEFAULT_EXPIRY_MARGIN,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if expiry_margin < 0:
            msg = f"expiry_margin must be >= 0, got {expiry_margin}"
            raise ValueError(msg)
        self._credential = credential
        self._scopes = tuple(scopes)
        self._client = client
        self._signer: AssertionSigner = signer if signer is not None else JwtAssertionSigner()
        self._expiry_margin = expiry_margin
        self._clock = clock
        self._token: AccessToken | None = None

    @property
    def scopes(self) -> tuple[str, ...]:
        return self._scopes

    @property
    def token(self) -> AccessToken | None:
        """The cached token, or ``None`` if no token was acquired yet."""
        return self._token

    def invalidate(self) -> None:
        """Drop the cached token so the next call acquires a new one."""
        self._token = None

    async def get_access_token(self) -> str:
        """Return a valid bearer token, acquiring one if needed.

        Returns:
            The bearer token string.

        Raises:
            AuthenticationError: If a new token cannot be obtained.
        """
        cached = self._token
        if cached is not None and not cached.is_expired(self._clock(), self._expiry_margin):
            return cached.token
        token = await self._fetch_token()
        self._token = token
        return token.token

    async def _fetch_token(self) -> AccessToken:
        credential = self._credential
        issued_at = int(self._clock())
        assertion = self._signer.sign(credential, self._scopes, issued_at)

        logger.debug(f"Requesting access token for {credential.client_email}")
        try:
            response = await self._client.post(
                credential.token_uri,
                data={"grant_type": GRANT_TYPE, "assertion": assertion},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            msg = f"token request to {credential.token_uri} failed: {exc}"
            raise AuthenticationError(msg) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.is_success:
            detail = ""
            if isinstance(payload, dict):
                detail = payload.get("error_description") or payload.get("error") or ""
            msg = (
                f"token request to {credential.token_uri} failed with status "
                f"{response.status_code}{': ' + detail if detail else ''}"
            )
            raise AuthenticationError(msg, status_code=response.status_code)

        if not isinstance(payload, dict):
            msg = f"token response from {credential.token_uri} is not a JSON object"
            raise AuthenticationError(msg, status_code=response.status_code)

        access_token = payload.get("access_token")
        if not access_token:
            msg = f"token response from {credential.token_uri} has no access_token"
            raise AuthenticationError(msg, status_code=response.status_code)

        try:
            expires_in = float(payload.get("expires_in", _DEFAULT_EXPIRES_IN))
        except (TypeError, ValueError) as exc:
            msg = f"token response from {credential.token_uri} has an invalid expires_in"
            raise AuthenticationError(msg, status_code=response.status_code) from exc

        logger.debug(f"Obtained access token for {credential.client_email} (expires in {expires_in:.0f}s)")
        return AccessToken(token=access_token, expires_at=issued_at + expires_in)
