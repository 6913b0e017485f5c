"""Runtime configuration for the conversion helpers."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union

DEBUG_ENV_VAR = "CANONBUF_DEBUG"
DEFAULT_ENCODING_ENV_VAR = "CANONBUF_DEFAULT_ENCODING"
SPARSE_WARNING_ENV_VAR = "CANONBUF_SPARSE_WARNING_THRESHOLD"

DEFAULT_ENCODING = "utf-8"
DEFAULT_SPARSE_WARNING_THRESHOLD = 1_000_000

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"", "0", "false", "no", "off"}


@dataclass(frozen=True)
class CanonConfig:
    """Options read by the coercion and text helpers on every call.

    ``debug`` enables the range validation pass before numeric conversion.
    ``sparse_warning_threshold`` bounds how many missing slots an array-like
    object may introduce during flattening before a warning is logged.
    """

    debug: bool = False
    default_encoding: str = DEFAULT_ENCODING
    sparse_warning_threshold: int = DEFAULT_SPARSE_WARNING_THRESHOLD

    def __post_init__(self) -> None:
        if not self.default_encoding:
            raise ValueError("default_encoding must be a non-empty string")
        if self.sparse_warning_threshold < 0:
            raise ValueError("sparse_warning_threshold must be non-negative")

    def replace(self, **changes: object) -> "CanonConfig":
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CanonConfig":
        """Build a configuration from ``CANONBUF_*`` environment variables."""

        environ = os.environ if environ is None else environ
        default = cls()
        debug = default.debug
        raw_debug = environ.get(DEBUG_ENV_VAR)
        if raw_debug is not None:
            debug = _parse_bool(DEBUG_ENV_VAR, raw_debug)
        encoding = environ.get(DEFAULT_ENCODING_ENV_VAR) or default.default_encoding
        threshold = default.sparse_warning_threshold
        raw_threshold = environ.get(SPARSE_WARNING_ENV_VAR)
        if raw_threshold:
            try:
                threshold = int(raw_threshold)
            except ValueError:
                raise ValueError(
                    f"{SPARSE_WARNING_ENV_VAR} must be an integer, got {raw_threshold!r}"
                ) from None
        return cls(
            debug=debug,
            default_encoding=encoding,
            sparse_warning_threshold=threshold,
        )


ConfigLike = Union[CanonConfig, Mapping[str, object], None]


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def coerce_config(value: ConfigLike, base: Optional[CanonConfig] = None) -> CanonConfig:
    """Return a :class:`CanonConfig` merging ``value`` over ``base``.

    Dictionaries only need to name the fields they override; unknown keys are
    rejected so typos do not silently fall back to defaults.
    """

    base = CanonConfig() if base is None else base
    if value is None:
        return base
    if isinstance(value, CanonConfig):
        return value
    if isinstance(value, Mapping):
        init_fields = {field.name for field in dataclasses.fields(CanonConfig) if field.init}
        unknown = sorted(str(key) for key in value if key not in init_fields)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return dataclasses.replace(base, **value)  # type: ignore[arg-type]
    raise TypeError(f"Expected CanonConfig or dict, got {type(value)!r}")


__all__ = [
    "CanonConfig",
    "ConfigLike",
    "DEBUG_ENV_VAR",
    "DEFAULT_ENCODING",
    "DEFAULT_ENCODING_ENV_VAR",
    "DEFAULT_SPARSE_WARNING_THRESHOLD",
    "SPARSE_WARNING_ENV_VAR",
    "coerce_config",
]
