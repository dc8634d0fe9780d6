r"""Request builder and the immutable request descriptor it produces.

A ``RequestBuilder`` is filled in by the caller and handed to
``AsyncAuthorizedClient``, which adds the ``Authorization`` header and
calls ``build()`` once per exchange.
"""

from __future__ import annotations

__all__ = ["RequestBuilder", "RequestDescriptor"]

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Self


@dataclass(frozen=True)
class RequestDescriptor:
    """An immutable HTTP request description.

    Args:
        method: The HTTP method, upper case.
        url: The target URL, query string included.
        headers: Read-only mapping of header names to values.
        content: Optional request body.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    content: bytes | None = None

    def to_httpx(self, client: httpx.AsyncClient | None = None) -> httpx.Request:
        """Convert the descriptor to an ``httpx.Request``.

        Args:
            client: Optional client whose defaults (timeout, base URL)
                are applied to the request.

        Returns:
            The request.
        """
        if client is not None:
            return client.build_request(
                self.method, self.url, headers=dict(self.headers), content=self.content
            )
        return httpx.Request(self.method, self.url, headers=dict(self.headers), content=self.content)


class RequestBuilder:
    """Mutable builder for ``RequestDescriptor``.

    Header names are case-insensitive and unique: adding a header that
    already exists replaces its value.

    Args:
        method: The HTTP method.
        url: The target URL.

    Example:
        ```pycon
        >>> from pushpipe.request import RequestBuilder
        >>> request = (
        ...     RequestBuilder("post", "https://api.example.com/send")
        ...     .add_header("X-Trace", "1")
        ...     .add_query_string("dry_run", "true")
        ...     .set_string_content('{"message": {}}')
        ...     .build()
        ... )
        >>> request.method
        'POST'
        >>> request.url
        'https://api.example.com/send?dry_run=true'
        >>> request.headers["Content-Type"]
        'application/json'

        ```
    """

    def __init__(self, method: str = "GET", url: str = "") -> None:
        self._method = method
        self._url = url
        self._headers: dict[str, str] = {}
        self._params: list[tuple[str, str]] = []
        self._content: bytes | None = None

    def set_method(self, method: str) -> Self:
        self._method = method
        return self

    def set_url(self, url: str) -> Self:
        self._url = url
        return self

    def add_header(self, name: str, value: str) -> Self:
        """Set a header, replacing any existing value for ``name``."""
        for existing in [key for key in self._headers if key.lower() == name.lower()]:
            del self._headers[existing]
        self._headers[name] = value
        return self

    def add_query_string(self, key: str, value: str) -> Self:
        self._params.append((key, value))
        return self

    def set_content(self, content: bytes, media_type: str | None = None) -> Self:
        """Set the raw request body and, optionally, its content type."""
        self._content = content
        if media_type is not None:
            self.add_header("Content-Type", media_type)
        return self

    def set_string_content(
        self, content: str, media_type: str = "application/json", encoding: str = "utf-8"
    ) -> Self:
        """Set a text request body encoded with ``encoding``."""
        return self.set_content(content.encode(encoding), media_type=media_type)

    def build(self) -> RequestDescriptor:
        """Create the immutable request descriptor.

        Raises:
            ValueError: If no URL was set.
        """
        if not self._url:
            msg = "url must be set before building the request"
            raise ValueError(msg)
        url = httpx.URL(self._url)
        if self._params:
            url = url.copy_merge_params(self._params)
        return RequestDescriptor(
            method=self._method.upper(),
            url=str(url),
            headers=MappingProxyType(dict(self._headers)),
            content=self._content,
        )
