"""Tests for the default platform and the platform delegates."""

from __future__ import annotations

import asyncio

import httpx
import numpy as np
import pytest

from canonbuf.platform import DefaultPlatform, Platform, ensure_bytes
from canonbuf.util import fetch, is_typed_buffer, now


def _mock_platform(handler) -> DefaultPlatform:
    return DefaultPlatform(transport=httpx.MockTransport(handler))


def test_default_platform_satisfies_protocol() -> None:
    assert isinstance(DefaultPlatform(), Platform)


def test_now_is_monotonic_milliseconds() -> None:
    platform = DefaultPlatform()

    first = now(platform=platform)
    second = now(platform=platform)

    assert isinstance(first, float)
    assert second >= first


@pytest.mark.parametrize(
    "value, expected",
    [
        (np.zeros(2, dtype=np.float32), True),
        (np.zeros(2, dtype=np.int32), True),
        (np.zeros(2, dtype=np.uint8), True),
        (np.zeros(2, dtype=np.float64), False),
        (np.zeros(2, dtype=np.bool_), False),
        ([1.0, 2.0], False),
        (b"bytes", False),
    ],
)
def test_is_typed_buffer(value, expected: bool) -> None:
    assert is_typed_buffer(value) is expected


def test_fetch_performs_get_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"weights")

    platform = _mock_platform(handler)
    response = asyncio.run(fetch("https://example.test/model.bin", platform=platform))

    assert response.status_code == 200
    assert response.content == b"weights"
    assert seen[0].method == "GET"
    assert str(seen[0].url) == "https://example.test/model.bin"


def test_fetch_forwards_method_headers_and_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.headers["x-token"] == "abc"
        return httpx.Response(201, content=request.content)

    platform = _mock_platform(handler)
    options = {"method": "post", "headers": {"x-token": "abc"}, "body": b"payload"}
    response = asyncio.run(fetch("https://example.test/upload", options, platform=platform))

    assert response.status_code == 201
    assert response.content == b"payload"


def test_fetch_rejects_unknown_options() -> None:
    platform = _mock_platform(lambda request: httpx.Response(200))

    with pytest.raises(ValueError, match="mode"):
        asyncio.run(fetch("https://example.test/", {"mode": "cors"}, platform=platform))


@pytest.mark.parametrize(
    "payload, expected",
    [
        (b"bytes", b"bytes"),
        (bytearray(b"data"), b"data"),
        (memoryview(b"span"), b"span"),
        (np.array([104, 105], dtype=np.uint8), b"hi"),
        ([0, 255, 1], b"\x00\xff\x01"),
    ],
)
def test_ensure_bytes_handles_common_inputs(payload, expected: bytes) -> None:
    assert ensure_bytes(payload) == expected


def test_ensure_bytes_rejects_text_and_wide_buffers() -> None:
    with pytest.raises(TypeError):
        ensure_bytes("text")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        ensure_bytes(np.zeros(2, dtype=np.int32))
