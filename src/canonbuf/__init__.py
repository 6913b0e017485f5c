"""Normalise nested numeric input into canonical typed buffers."""

from __future__ import annotations

from .coerce import CanonicalBuffer, create_scalar_value, no_conversion_needed, to_typed
from .config import CanonConfig, coerce_config
from .dtypes import ElementType, parse_dtype
from .environment import (
    Environment,
    get_environment,
    reset_environment,
    set_environment,
    set_platform,
)
from .errors import (
    CanonBufError,
    ConversionRangeError,
    UnknownTypeError,
    UnsupportedTypeError,
)
from .flatten import InputKind, classify_input, flatten, is_pending
from .platform import DefaultPlatform, Platform
from .text import decode_text, encode_text, encode_text_values
from .util import fetch, is_typed_buffer, now
from .validate import check_conversion_for_errors

__version__ = "0.1.0"

__all__ = [
    "CanonBufError",
    "CanonConfig",
    "CanonicalBuffer",
    "ConversionRangeError",
    "DefaultPlatform",
    "ElementType",
    "Environment",
    "InputKind",
    "Platform",
    "UnknownTypeError",
    "UnsupportedTypeError",
    "check_conversion_for_errors",
    "classify_input",
    "coerce_config",
    "create_scalar_value",
    "decode_text",
    "encode_text",
    "encode_text_values",
    "fetch",
    "flatten",
    "get_environment",
    "is_pending",
    "is_typed_buffer",
    "no_conversion_needed",
    "now",
    "parse_dtype",
    "reset_environment",
    "set_environment",
    "set_platform",
    "to_typed",
]
