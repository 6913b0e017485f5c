"""Debug-mode checks run before numeric conversion."""

from __future__ import annotations

import decimal
import logging
import math
import numbers
import re
from typing import Any, Optional, Sequence, Union

import numpy as np

from .dtypes import FLOAT32_MAX, INT32_MAX, INT32_MIN, DTypeLike, ElementType, parse_dtype
from .errors import ConversionRangeError, UnsupportedTypeError
from .flatten import is_pending

logger = logging.getLogger(__name__)


# Decimal literal as accepted by a numeric cast of text: no underscores, no "inf"/"nan".
_DECIMAL_TEXT = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")
_RADIX_TEXT = re.compile(
    r"^0(?:[xX](?P<hex>[0-9a-fA-F]+)|[oO](?P<oct>[0-7]+)|[bB](?P<bin>[01]+))$"
)
_INFINITY_TEXT = re.compile(r"^(?P<sign>[+-]?)Infinity$")


def _real_to_float(value: Union[numbers.Real, decimal.Decimal]) -> float:
    try:
        return float(value)
    except OverflowError:
        # Integers and fractions beyond float64 saturate to an infinity.
        return math.inf if value > 0 else -math.inf


def _parse_numeric_text(text: str) -> float:
    text = text.strip()
    if not text:
        return 0.0
    if _DECIMAL_TEXT.match(text):
        return float(text)
    radix = _RADIX_TEXT.match(text)
    if radix:
        if radix.group("hex"):
            return _real_to_float(int(radix.group("hex"), 16))
        if radix.group("oct"):
            return _real_to_float(int(radix.group("oct"), 8))
        return _real_to_float(int(radix.group("bin"), 2))
    infinity = _INFINITY_TEXT.match(text)
    if infinity:
        return -math.inf if infinity.group("sign") == "-" else math.inf
    return math.nan


def to_number(value: object) -> float:
    """Read a single leaf as a float the way a numeric cast would.

    ``None`` reads as NaN and booleans as 0/1.  Text accepts decimal
    literals, ``0x``/``0o``/``0b`` integers and ``Infinity``; blank text
    reads as zero and anything else as NaN.  Integers too large for a
    float saturate to an infinity.  Pending values cannot be read.
    """

    if value is None:
        return math.nan
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return _parse_numeric_text(value)
    if is_pending(value):
        raise TypeError("Pending values must be resolved before numeric conversion")
    if isinstance(value, complex):
        raise TypeError(f"Cannot store complex value {value!r} in a real buffer")
    if isinstance(value, (numbers.Real, decimal.Decimal)):
        return _real_to_float(value)
    if isinstance(value, np.generic):
        return float(value)
    raise TypeError(f"Cannot read {type(value).__name__} as a number")


def as_float64(values: Any) -> np.ndarray:
    """Return ``values`` as a one-dimensional float64 array without mutating it."""

    if isinstance(values, np.ndarray):
        return np.asarray(values, dtype=np.float64).ravel()
    if not isinstance(values, (list, tuple)):
        values = list(values)
    if any(isinstance(value, (str, bytes, bytearray)) for value in values):
        # numpy parses text with float(), which differs from a numeric cast.
        return np.fromiter((to_number(value) for value in values), dtype=np.float64)
    try:
        return np.asarray(values, dtype=np.float64).ravel()
    except (TypeError, ValueError, OverflowError):
        # Mixed leaves (huge integers, pending values, ...) need per-item rules.
        return np.fromiter((to_number(value) for value in values), dtype=np.float64)


def _first_offender(mask: np.ndarray) -> Optional[int]:
    hits = np.flatnonzero(mask)
    return int(hits[0]) if hits.size else None


def check_conversion_for_errors(values: Sequence[Any], dtype: DTypeLike) -> None:
    """Raise :class:`ConversionRangeError` if a value cannot be represented.

    Every target rejects NaN and infinities.  int32 additionally rejects
    fractional values and values outside the 32-bit signed range; float32
    rejects finite values larger than the float32 maximum.
    """

    element_type = parse_dtype(dtype)
    if element_type is ElementType.STRING:
        raise UnsupportedTypeError(element_type)
    label = element_type if element_type is not None else ElementType.FLOAT32
    floats = as_float64(values)

    index = _first_offender(~np.isfinite(floats))
    if index is not None:
        raise ConversionRangeError(label, float(floats[index]), index)

    if element_type is ElementType.INT32:
        index = _first_offender(np.trunc(floats) != floats)
        if index is not None:
            raise ConversionRangeError(
                label, float(floats[index]), index, reason="contains non-integer"
            )
        index = _first_offender((floats < INT32_MIN) | (floats > INT32_MAX))
        if index is not None:
            raise ConversionRangeError(
                label, float(floats[index]), index, reason="contains out-of-range"
            )
    elif element_type in (None, ElementType.FLOAT32, ElementType.COMPLEX64):
        index = _first_offender(np.abs(floats) > FLOAT32_MAX)
        if index is not None:
            raise ConversionRangeError(
                label, float(floats[index]), index, reason="contains out-of-range"
            )
    logger.debug("Validated %d values for %s", floats.size, label)


__all__ = [
    "as_float64",
    "check_conversion_for_errors",
    "to_number",
]
