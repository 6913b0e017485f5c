"""Exception types raised by the canonical buffer conversion helpers."""

from __future__ import annotations

from typing import Optional


class CanonBufError(Exception):
    """Base class for every failure raised by :mod:`canonbuf`."""


class UnsupportedTypeError(CanonBufError, TypeError):
    """Raised when text is requested from the numeric coercion path."""

    def __init__(self, dtype: object) -> None:
        self.dtype = dtype
        super().__init__(f"Cannot convert a {dtype} sequence to a typed buffer")


class UnknownTypeError(CanonBufError, ValueError):
    """Raised when a dtype falls outside the supported enumeration."""

    def __init__(self, dtype: object) -> None:
        self.dtype = dtype
        super().__init__(f"Unknown data type {dtype!r}")


class ConversionRangeError(CanonBufError, ValueError):
    """Raised in debug mode when a value cannot be stored in the target dtype."""

    def __init__(
        self,
        dtype: object,
        value: object,
        index: Optional[int] = None,
        reason: str = "contains",
    ) -> None:
        self.dtype = dtype
        self.value = value
        self.index = index
        location = "" if index is None else f" at index {index}"
        super().__init__(
            f"A buffer of type {dtype} being uploaded {reason} {value!r}{location}."
        )


__all__ = [
    "CanonBufError",
    "ConversionRangeError",
    "UnknownTypeError",
    "UnsupportedTypeError",
]
