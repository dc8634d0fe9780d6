r"""Signers producing OAuth2 JWT-bearer assertions.

The assertion is a JWT signed with the service account private key, as
described in RFC 7523. Signing itself is delegated to PyJWT.
"""

from __future__ import annotations

__all__ = ["ASSERTION_LIFETIME", "AssertionSigner", "JwtAssertionSigner"]

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import jwt

from pushpipe.exceptions import AuthenticationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pushpipe.credentials.credential import ServiceAccountCredential

logger: logging.Logger = logging.getLogger(__name__)

# Lifetime of a signed assertion in seconds (maximum accepted by Google)
ASSERTION_LIFETIME = 3600


@runtime_checkable
class AssertionSigner(Protocol):
    """Produces a signed assertion for a token exchange."""

    def sign(
        self, credential: ServiceAccountCredential, scopes: Sequence[str], issued_at: int
    ) -> str:
        """Sign an assertion.

        Args:
            credential: The service account whose key signs the assertion.
            scopes: The requested scopes.
            issued_at: The issue time as a UNIX timestamp.

        Returns:
            The encoded assertion.

        Raises:
            AuthenticationError: If the assertion cannot be signed.
        """


class JwtAssertionSigner:
    """Sign assertions with RS256 using PyJWT.

    Args:
        lifetime: Validity of the assertion in seconds.
    """

    algorithm = "RS256"

    def __init__(self, lifetime: int = ASSERTION_LIFETIME) -> None:
        if lifetime <= 0:
            msg = f"lifetime must be > 0, got {lifetime}"
            raise ValueError(msg)
        self.lifetime = lifetime

    def sign(
        self, credential: ServiceAccountCredential, scopes: Sequence[str], issued_at: int
    ) -> str:
        claims = {
            "iss": credential.client_email,
            "scope": " ".join(scopes),
            "aud": credential.token_uri,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        headers = {"kid": credential.private_key_id} if credential.private_key_id else None
        try:
            return jwt.encode(
                claims, credential.private_key, algorithm=self.algorithm, headers=headers
            )
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            logger.debug(f"Unable to sign assertion for {credential.client_email}: {exc}")
            msg = f"unable to sign assertion for {credential.client_email}: {exc}"
            raise AuthenticationError(msg) from exc
