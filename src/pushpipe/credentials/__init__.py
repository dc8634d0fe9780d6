r"""Service account credentials and bearer token acquisition."""

from __future__ import annotations

__all__ = [
    "AccessToken",
    "AssertionSigner",
    "CredentialProvider",
    "JwtAssertionSigner",
    "ServiceAccountCredential",
]

from pushpipe.credentials.credential import ServiceAccountCredential
from pushpipe.credentials.provider import CredentialProvider
from pushpipe.credentials.signer import AssertionSigner, JwtAssertionSigner
from pushpipe.credentials.token import AccessToken
