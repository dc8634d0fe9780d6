r"""Unit tests for BackoffSettings and ClientSettings."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from coola.equality import objects_are_equal

from pushpipe.core import (
    DEFAULT_DELTA_BACKOFF,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TIME_SPAN,
    DEFAULT_SCOPE,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
    BackoffSettings,
    ClientSettings,
)
from pushpipe.exceptions import AuthenticationError

if TYPE_CHECKING:
    from pathlib import Path

    from pushpipe.credentials import ServiceAccountCredential

#####################################
#     Tests for BackoffSettings     #
#####################################


def test_backoff_settings_defaults() -> None:
    settings = BackoffSettings()
    assert settings.delta_backoff == DEFAULT_DELTA_BACKOFF
    assert settings.max_retries == DEFAULT_MAX_RETRIES
    assert settings.max_time_span == DEFAULT_MAX_TIME_SPAN
    assert settings.jitter_factor == 0.0


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"delta_backoff": -0.1}, r"delta_backoff must be >= 0"),
        ({"max_retries": -1}, r"max_retries must be >= 0"),
        ({"max_time_span": 0}, r"max_time_span must be > 0"),
        ({"jitter_factor": -1.0}, r"jitter_factor must be >= 0"),
    ],
)
def test_backoff_settings_invalid(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        BackoffSettings(**kwargs)


def test_backoff_settings_zero_retries_allowed() -> None:
    assert BackoffSettings(max_retries=0).max_retries == 0


####################################
#     Tests for ClientSettings     #
####################################


def test_client_settings_defaults(credential: ServiceAccountCredential) -> None:
    settings = ClientSettings(credentials=credential)
    assert settings.scopes == (DEFAULT_SCOPE,)
    assert settings.backoff == BackoffSettings()
    assert settings.max_attempts is None
    assert settings.retry_status_codes == RETRY_STATUS_CODES
    assert settings.timeout == DEFAULT_TIMEOUT


def test_client_settings_invalid_max_attempts(credential: ServiceAccountCredential) -> None:
    with pytest.raises(ValueError, match=r"max_attempts must be >= 1"):
        ClientSettings(credentials=credential, max_attempts=0)


def test_client_settings_invalid_timeout(credential: ServiceAccountCredential) -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        ClientSettings(credentials=credential, timeout=0)


def test_client_settings_empty_scopes(credential: ServiceAccountCredential) -> None:
    with pytest.raises(ValueError, match=r"scopes must not be empty"):
        ClientSettings(credentials=credential, scopes=())


def test_client_settings_merge(credential: ServiceAccountCredential) -> None:
    settings = ClientSettings(credentials=credential, max_attempts=4)
    merged = settings.merge(max_attempts=2, timeout=None)
    assert merged.max_attempts == 2
    assert merged.timeout == DEFAULT_TIMEOUT
    assert settings.max_attempts == 4  # Original unchanged
    assert objects_are_equal(
        merged.merge(max_attempts=4).__dict__, settings.__dict__
    )


def test_client_settings_from_file(
    tmp_path: Path, service_account_info: dict[str, str]
) -> None:
    path = tmp_path / "service-account.json"
    path.write_text(json.dumps(service_account_info), encoding="utf-8")

    settings = ClientSettings.from_file(path, max_attempts=3)

    assert settings.credentials.client_email == service_account_info["client_email"]
    assert settings.credentials.project_id == "demo-project"
    assert settings.max_attempts == 3


def test_client_settings_from_missing_file(tmp_path: Path) -> None:
    with pytest.raises(AuthenticationError, match=r"unable to read service account file"):
        ClientSettings.from_file(tmp_path / "missing.json")
