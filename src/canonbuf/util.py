"""Thin delegates to the active platform."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .environment import resolve_platform
from .platform import Platform


def now(*, platform: Optional[Platform] = None) -> float:
    """Return the current monotonic time in milliseconds."""

    return resolve_platform(platform).now()


async def fetch(
    path: str,
    options: Optional[Mapping[str, Any]] = None,
    *,
    platform: Optional[Platform] = None,
) -> Any:
    """Retrieve ``path`` through the platform's network primitive."""

    return await resolve_platform(platform).fetch(path, options)


def is_typed_buffer(value: object, *, platform: Optional[Platform] = None) -> bool:
    return resolve_platform(platform).is_typed_buffer(value)


__all__ = ["fetch", "is_typed_buffer", "now"]
