"""Coerce nested numeric input into canonical typed buffers."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

import numpy as np

from .config import ConfigLike
from .dtypes import DTypeLike, ElementType, buffer_element_type, parse_dtype
from .environment import resolve_config, resolve_platform
from .errors import UnsupportedTypeError
from .flatten import InputKind, classify_input, flatten
from .platform import Platform
from .text import encode_scalar_text
from .validate import as_float64, check_conversion_for_errors

logger = logging.getLogger(__name__)

_UINT32_SPAN = float(2**32)
_INT32_SPAN = float(2**31)

CanonicalBuffer = Union[np.ndarray, bytes]


def no_conversion_needed(values: object, dtype: Optional[ElementType]) -> bool:
    """Return ``True`` when ``values`` already is the canonical buffer for ``dtype``."""

    native = buffer_element_type(values)
    if native is None or native is not dtype:
        return False
    return values.ndim == 1 and bool(values.flags["C_CONTIGUOUS"])  # type: ignore[union-attr]


def _to_float32(floats: np.ndarray) -> np.ndarray:
    with np.errstate(over="ignore"):
        return floats.astype(np.float32)


def _to_int32(floats: np.ndarray) -> np.ndarray:
    # ToInt32: non-finite -> 0, truncate, then wrap modulo 2**32 into the signed range.
    finite = np.where(np.isfinite(floats), floats, 0.0)
    wrapped = np.fmod(np.trunc(finite), _UINT32_SPAN)
    wrapped = np.where(wrapped < 0, wrapped + _UINT32_SPAN, wrapped)
    wrapped = np.where(wrapped >= _INT32_SPAN, wrapped - _UINT32_SPAN, wrapped)
    return wrapped.astype(np.int32)


def _to_bool(floats: np.ndarray) -> np.ndarray:
    # Round half up, then test for non-zero; NaN compares unequal and maps to 1.
    rounded = np.floor(floats + 0.5)
    return (rounded != 0).astype(np.uint8)


_CONVERTERS = {
    ElementType.FLOAT32: _to_float32,
    ElementType.COMPLEX64: _to_float32,
    ElementType.INT32: _to_int32,
    ElementType.BOOL: _to_bool,
}


def to_typed(
    values: Any,
    dtype: DTypeLike,
    *,
    config: ConfigLike = None,
    platform: Optional[Platform] = None,
) -> np.ndarray:
    """Convert ``values`` to a one-dimensional canonical buffer of ``dtype``.

    Nested input is flattened first.  A typed buffer that already matches
    ``dtype`` is returned as-is.  With ``debug`` enabled the values are
    validated before anything is allocated.
    """

    element_type = parse_dtype(dtype)
    if element_type is ElementType.STRING:
        raise UnsupportedTypeError(element_type)
    settings = resolve_config(config)
    platform = resolve_platform(platform)

    kind = classify_input(values, False, platform)
    if kind is not InputKind.TYPED_BUFFER:
        values = flatten(
            values,
            platform=platform,
            sparse_warning_threshold=settings.sparse_warning_threshold,
        )

    if settings.debug:
        check_conversion_for_errors(values, element_type)

    if no_conversion_needed(values, element_type):
        logger.debug("Reusing %s buffer of %d elements", element_type, len(values))
        return values

    target = element_type if element_type is not None else ElementType.FLOAT32
    converter = _CONVERTERS[target]
    buffer = converter(as_float64(values))
    logger.debug("Converted %d values to %s", buffer.size, target)
    return buffer


def create_scalar_value(
    value: Any,
    dtype: DTypeLike,
    *,
    config: ConfigLike = None,
    platform: Optional[Platform] = None,
) -> CanonicalBuffer:
    """Wrap a single value in the canonical buffer for ``dtype``.

    Text is encoded to bytes; every other type is a one-element typed buffer
    produced by :func:`to_typed`.
    """

    element_type = parse_dtype(dtype)
    if element_type is ElementType.STRING:
        return encode_scalar_text(value, config=config, platform=platform)
    return to_typed([value], element_type, config=config, platform=platform)


__all__ = [
    "CanonicalBuffer",
    "create_scalar_value",
    "no_conversion_needed",
    "to_typed",
]
