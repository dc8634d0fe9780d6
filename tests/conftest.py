from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from pushpipe.core.config import BackoffSettings, ClientSettings
from pushpipe.credentials import ServiceAccountCredential
from tests.helpers import TOKEN_URI

if TYPE_CHECKING:
    from collections.abc import Generator

    from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture(scope="session")
def rsa_key() -> RSAPrivateKey:
    """Create an RSA key once per session, key generation is slow."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_key: RSAPrivateKey) -> str:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture
def service_account_info(private_key_pem: str) -> dict[str, str]:
    return {
        "type": "service_account",
        "project_id": "demo-project",
        "private_key_id": "key-1",
        "private_key": private_key_pem,
        "client_email": "svc@demo-project.iam.gserviceaccount.com",
        "token_uri": TOKEN_URI,
    }


@pytest.fixture
def credential(service_account_info: dict[str, str]) -> ServiceAccountCredential:
    return ServiceAccountCredential.from_info(service_account_info)


@pytest.fixture
def settings(credential: ServiceAccountCredential) -> ClientSettings:
    return ClientSettings(
        credentials=credential,
        backoff=BackoffSettings(delta_backoff=0.01, max_retries=3, max_time_span=30.0),
    )
