"""Platform collaborator consumed by the conversion helpers.

The core never touches clocks, the network or codecs directly; it goes
through a :class:`Platform`.  :class:`DefaultPlatform` backs those calls with
the standard library, numpy and :mod:`httpx`.
"""

from __future__ import annotations

import time
from typing import Any, Iterable, Mapping, Optional, Protocol, Union, runtime_checkable

import httpx
import numpy as np

from .dtypes import TYPED_BUFFER_DTYPES

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray, Iterable[int]]

DEFAULT_FETCH_TIMEOUT_S = 30.0


@runtime_checkable
class Platform(Protocol):
    """Host services the core depends on."""

    def now(self) -> float:
        """Return monotonic time in milliseconds."""
        ...

    async def fetch(self, path: str, options: Optional[Mapping[str, Any]] = None) -> Any:
        """Retrieve ``path`` and return a response handle."""
        ...

    def encode(self, text: str, encoding: str) -> bytes:
        """Encode ``text`` with the named encoding."""
        ...

    def decode(self, data: BytesLike, encoding: str) -> str:
        """Decode ``data`` with the named encoding."""
        ...

    def is_typed_buffer(self, value: object) -> bool:
        """Return ``True`` when ``value`` is a homogeneous typed buffer."""
        ...


def ensure_bytes(value: BytesLike) -> bytes:
    """Coerce the provided value into a ``bytes`` instance."""

    if isinstance(value, bytes):
        return value
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, memoryview):
        return bytes(value.tobytes())
    if isinstance(value, np.ndarray):
        if value.dtype != np.uint8:
            raise TypeError(f"Expected a uint8 buffer, got dtype {value.dtype}")
        return value.tobytes()
    if isinstance(value, str):
        raise TypeError("Expected bytes, got str")
    return bytes(int(part) & 0xFF for part in value)


class DefaultPlatform:
    """Platform backed by ``time``, :mod:`httpx` and Python codecs."""

    def __init__(
        self,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_FETCH_TIMEOUT_S,
    ) -> None:
        self._transport = transport
        self._timeout = timeout

    def now(self) -> float:
        return time.monotonic_ns() / 1_000_000

    async def fetch(
        self, path: str, options: Optional[Mapping[str, Any]] = None
    ) -> httpx.Response:
        """Perform an HTTP request and return the fully read response.

        ``options`` mirrors a fetch request init: ``method``, ``headers``,
        ``body`` and ``timeout`` are recognised.
        """

        options = dict(options or {})
        method = str(options.pop("method", "GET")).upper()
        headers = options.pop("headers", None)
        body = options.pop("body", None)
        timeout = options.pop("timeout", self._timeout)
        if options:
            raise ValueError(f"Unsupported fetch options: {', '.join(sorted(options))}")
        async with httpx.AsyncClient(transport=self._transport, timeout=timeout) as client:
            response = await client.request(method, path, headers=headers, content=body)
            await response.aread()
        return response

    def encode(self, text: str, encoding: str) -> bytes:
        return text.encode(encoding)

    def decode(self, data: BytesLike, encoding: str) -> str:
        return ensure_bytes(data).decode(encoding)

    def is_typed_buffer(self, value: object) -> bool:
        return isinstance(value, np.ndarray) and value.dtype in TYPED_BUFFER_DTYPES

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"{type(self).__name__}(timeout={self._timeout!r})"


__all__ = [
    "BytesLike",
    "DEFAULT_FETCH_TIMEOUT_S",
    "DefaultPlatform",
    "Platform",
    "ensure_bytes",
]
