"""Element types understood by the canonical buffer layer."""

from __future__ import annotations

import enum
import importlib.util
from typing import Dict, Optional, Union

if importlib.util.find_spec("numpy") is None:  # pragma: no cover - deterministic import guard
    raise ModuleNotFoundError(
        "The numpy package is required by canonbuf. Install it with 'pip install numpy'."
    )
import numpy as np

from .errors import UnknownTypeError


class ElementType(str, enum.Enum):
    """Closed set of element types a canonical buffer may carry."""

    FLOAT32 = "float32"
    INT32 = "int32"
    BOOL = "bool"
    STRING = "string"
    # Stored as interleaved float32 (real, imag) pairs.
    COMPLEX64 = "complex64"

    def __str__(self) -> str:
        return self.value


DTypeLike = Union[ElementType, str, None]

# Storage dtype of the canonical buffer for every numeric element type.
NUMPY_DTYPES: Dict[ElementType, np.dtype] = {
    ElementType.FLOAT32: np.dtype(np.float32),
    ElementType.INT32: np.dtype(np.int32),
    ElementType.BOOL: np.dtype(np.uint8),
    ElementType.COMPLEX64: np.dtype(np.float32),
}

# Homogeneous buffer kinds and the element type each one already satisfies.
# complex64 is absent on purpose: a float32 buffer only matches FLOAT32.
TYPED_BUFFER_DTYPES: Dict[np.dtype, ElementType] = {
    np.dtype(np.float32): ElementType.FLOAT32,
    np.dtype(np.int32): ElementType.INT32,
    np.dtype(np.uint8): ElementType.BOOL,
}

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
FLOAT32_MAX = float(np.finfo(np.float32).max)


def parse_dtype(dtype: DTypeLike) -> Optional[ElementType]:
    """Return the :class:`ElementType` named by *dtype*.

    ``None`` is passed through and means "unspecified"; the numeric path
    treats it as float32.
    """

    if dtype is None or isinstance(dtype, ElementType):
        return dtype
    if isinstance(dtype, str):
        try:
            return ElementType(dtype)
        except ValueError:
            raise UnknownTypeError(dtype) from None
    raise UnknownTypeError(dtype)


def buffer_element_type(buffer: object) -> Optional[ElementType]:
    """Return the element type a typed buffer natively holds, if any."""

    if not isinstance(buffer, np.ndarray):
        return None
    return TYPED_BUFFER_DTYPES.get(buffer.dtype)


__all__ = [
    "DTypeLike",
    "ElementType",
    "FLOAT32_MAX",
    "INT32_MAX",
    "INT32_MIN",
    "NUMPY_DTYPES",
    "TYPED_BUFFER_DTYPES",
    "buffer_element_type",
    "parse_dtype",
]
