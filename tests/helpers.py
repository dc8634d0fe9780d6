r"""Shared test helpers: a fake token endpoint and target API served
through ``httpx.MockTransport``."""

from __future__ import annotations

__all__ = [
    "API_URL",
    "TOKEN_URI",
    "FakeServer",
    "StaticSigner",
    "create_mock_response",
]

import json
from typing import TYPE_CHECKING, Any
from unittest.mock import Mock

import httpx

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pushpipe.credentials import ServiceAccountCredential

TOKEN_URI = "https://oauth2.example.com/token"
API_URL = "https://api.example.com/v1/projects/demo/messages:send"


def create_mock_response(status_code: int = 200, **kwargs: Any) -> Mock:
    """Create a mock httpx.Response with the given status code."""
    return Mock(spec=httpx.Response, status_code=status_code, **kwargs)


class StaticSigner:
    """Assertion signer returning a fixed string, no key needed."""

    def __init__(self, assertion: str = "signed-assertion") -> None:
        self.assertion = assertion
        self.calls = 0

    def sign(
        self, credential: ServiceAccountCredential, scopes: Sequence[str], issued_at: int
    ) -> str:
        self.calls += 1
        return self.assertion


class FakeServer:
    """Fake token endpoint and target API.

    Args:
        api_responses: ``(status_code, body)`` pairs returned in order by
            the target API. The last pair is repeated once exhausted.
            ``body`` is JSON encoded unless it is ``bytes``.
        token_payload: JSON body returned by the token endpoint.
        token_status: Status code returned by the token endpoint.
    """

    def __init__(
        self,
        api_responses: Sequence[tuple[int, Any]] = ((200, {"ok": True}),),
        *,
        token_payload: Any = None,
        token_status: int = 200,
    ) -> None:
        self.api_responses = list(api_responses)
        self.token_payload = (
            token_payload
            if token_payload is not None
            else {"access_token": "token-1", "expires_in": 3600, "token_type": "Bearer"}
        )
        self.token_status = token_status
        self.token_requests: list[httpx.Request] = []
        self.api_requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URI:
            self.token_requests.append(request)
            return _make_response(self.token_status, self.token_payload)
        self.api_requests.append(request)
        index = min(len(self.api_requests), len(self.api_responses)) - 1
        status_code, body = self.api_responses[index]
        return _make_response(status_code, body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def _make_response(status_code: int, body: Any) -> httpx.Response:
    if isinstance(body, bytes):
        return httpx.Response(status_code, content=body)
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode(),
        headers={"Content-Type": "application/json"},
    )
