r"""Unit tests for RequestBuilder and RequestDescriptor."""

from __future__ import annotations

import httpx
import pytest

from pushpipe import RequestBuilder, RequestDescriptor

#######################################
#     Tests for RequestDescriptor     #
#######################################


def test_descriptor_is_immutable() -> None:
    descriptor = RequestBuilder("GET", "https://api.example.com").add_header("A", "1").build()
    with pytest.raises(AttributeError):
        descriptor.method = "POST"  # type: ignore[misc]
    with pytest.raises(TypeError):
        descriptor.headers["A"] = "2"  # type: ignore[index]


def test_descriptor_to_httpx() -> None:
    descriptor = RequestDescriptor(
        method="POST",
        url="https://api.example.com/send",
        headers={"X-Trace": "1"},
        content=b"{}",
    )
    request = descriptor.to_httpx()
    assert isinstance(request, httpx.Request)
    assert request.method == "POST"
    assert str(request.url) == "https://api.example.com/send"
    assert request.headers["x-trace"] == "1"
    assert request.content == b"{}"


@pytest.mark.asyncio
async def test_descriptor_to_httpx_with_client() -> None:
    descriptor = RequestDescriptor(method="GET", url="/items")
    async with httpx.AsyncClient(base_url="https://api.example.com", timeout=7.0) as client:
        request = descriptor.to_httpx(client)
    assert str(request.url) == "https://api.example.com/items"
    assert request.extensions["timeout"]["read"] == 7.0


####################################
#     Tests for RequestBuilder     #
####################################


def test_builder_defaults() -> None:
    descriptor = RequestBuilder(url="https://api.example.com").build()
    assert descriptor.method == "GET"
    assert descriptor.url == "https://api.example.com"
    assert dict(descriptor.headers) == {}
    assert descriptor.content is None


def test_builder_upper_cases_method() -> None:
    descriptor = RequestBuilder("post", "https://api.example.com").build()
    assert descriptor.method == "POST"


def test_builder_setters_are_chainable() -> None:
    builder = RequestBuilder()
    assert builder.set_method("PUT") is builder
    assert builder.set_url("https://api.example.com/x") is builder
    assert builder.add_header("A", "1") is builder
    assert builder.add_query_string("k", "v") is builder
    assert builder.set_content(b"raw") is builder
    assert builder.set_string_content("text") is builder

    descriptor = builder.build()
    assert descriptor.method == "PUT"
    assert descriptor.url == "https://api.example.com/x?k=v"


def test_builder_add_header_replaces_case_insensitively() -> None:
    descriptor = (
        RequestBuilder("GET", "https://api.example.com")
        .add_header("Authorization", "Bearer old")
        .add_header("authorization", "Bearer new")
        .build()
    )
    assert dict(descriptor.headers) == {"authorization": "Bearer new"}


def test_builder_query_strings_merge_with_url() -> None:
    descriptor = (
        RequestBuilder("GET", "https://api.example.com/items?page=1")
        .add_query_string("limit", "10")
        .add_query_string("q", "a b")
        .build()
    )
    url = httpx.URL(descriptor.url)
    assert url.params["page"] == "1"
    assert url.params["limit"] == "10"
    assert url.params["q"] == "a b"


def test_builder_set_content_with_media_type() -> None:
    descriptor = (
        RequestBuilder("POST", "https://api.example.com")
        .set_content(b"\x00\x01", media_type="application/octet-stream")
        .build()
    )
    assert descriptor.content == b"\x00\x01"
    assert descriptor.headers["Content-Type"] == "application/octet-stream"


def test_builder_set_content_without_media_type() -> None:
    descriptor = RequestBuilder("POST", "https://api.example.com").set_content(b"x").build()
    assert "Content-Type" not in descriptor.headers


def test_builder_set_string_content() -> None:
    descriptor = (
        RequestBuilder("POST", "https://api.example.com")
        .set_string_content('{"name": "café"}')
        .build()
    )
    assert descriptor.content == '{"name": "café"}'.encode()
    assert descriptor.headers["Content-Type"] == "application/json"


def test_builder_set_string_content_custom_encoding() -> None:
    descriptor = (
        RequestBuilder("POST", "https://api.example.com")
        .set_string_content("café", media_type="text/plain", encoding="latin-1")
        .build()
    )
    assert descriptor.content == b"caf\xe9"
    assert descriptor.headers["Content-Type"] == "text/plain"


def test_builder_build_without_url() -> None:
    with pytest.raises(ValueError, match=r"url must be set before building the request"):
        RequestBuilder("GET").build()


def test_builder_build_snapshots_state() -> None:
    builder = RequestBuilder("GET", "https://api.example.com").add_header("A", "1")
    first = builder.build()
    builder.add_header("A", "2")
    assert first.headers["A"] == "1"
    assert builder.build().headers["A"] == "2"
