"""Text codec delegating to the active platform."""

from __future__ import annotations

from typing import Any, List, Optional

from .config import ConfigLike
from .environment import resolve_config, resolve_platform
from .flatten import flatten
from .platform import BytesLike, Platform, ensure_bytes


def _resolve_encoding(encoding: Optional[str], config: ConfigLike) -> str:
    return encoding or resolve_config(config).default_encoding


def encode_text(
    text: str,
    encoding: Optional[str] = "utf-8",
    *,
    config: ConfigLike = None,
    platform: Optional[Platform] = None,
) -> bytes:
    """Encode ``text`` into bytes using ``encoding`` (utf-8 when falsy)."""

    return resolve_platform(platform).encode(text, _resolve_encoding(encoding, config))


def decode_text(
    data: BytesLike,
    encoding: Optional[str] = "utf-8",
    *,
    config: ConfigLike = None,
    platform: Optional[Platform] = None,
) -> str:
    """Decode ``data`` into a string using ``encoding`` (utf-8 when falsy)."""

    return resolve_platform(platform).decode(data, _resolve_encoding(encoding, config))


def encode_scalar_text(
    value: Any,
    encoding: Optional[str] = "utf-8",
    *,
    config: ConfigLike = None,
    platform: Optional[Platform] = None,
) -> bytes:
    """Return the canonical text buffer for a single value."""

    if isinstance(value, str):
        return encode_text(value, encoding, config=config, platform=platform)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ensure_bytes(value)
    raise TypeError(f"Expected str or bytes for a string value, got {type(value).__name__}")


def encode_text_values(
    values: Any,
    encoding: Optional[str] = "utf-8",
    *,
    config: ConfigLike = None,
    platform: Optional[Platform] = None,
) -> List[bytes]:
    """Flatten nested text and encode every leaf, one byte string per value."""

    settings = resolve_config(config)
    platform = resolve_platform(platform)
    leaves = flatten(
        values,
        platform=platform,
        sparse_warning_threshold=settings.sparse_warning_threshold,
    )
    return [
        encode_scalar_text(leaf, encoding, config=settings, platform=platform)
        for leaf in leaves
    ]


__all__ = [
    "decode_text",
    "encode_scalar_text",
    "encode_text",
    "encode_text_values",
]
