"""Linearise arbitrarily nested input into an ordered list of leaves."""

from __future__ import annotations

import concurrent.futures
import enum
import inspect
import logging
import numbers
import re
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from .config import DEFAULT_SPARSE_WARNING_THRESHOLD
from .environment import resolve_platform
from .platform import Platform

logger = logging.getLogger(__name__)

# Non-negative integer without leading zeros.
_INDEX_KEY_PATTERN = re.compile(r"^(?:0|[1-9][0-9]*)$")

_LEAF_TYPES = (str, bytes, bytearray, bool, numbers.Number, np.generic)


class InputKind(enum.Enum):
    """Shape of a single node in a nested input tree."""

    LEAF = "leaf"
    TYPED_BUFFER = "typed_buffer"
    SEQUENCE = "sequence"
    ARRAY_LIKE = "array_like"


def is_pending(value: object) -> bool:
    """Return ``True`` for deferred values such as coroutines and futures."""

    return inspect.isawaitable(value) or isinstance(value, concurrent.futures.Future)


def classify_input(
    value: object,
    skip_typed_buffers: bool = False,
    platform: Optional[Platform] = None,
) -> InputKind:
    """Return the :class:`InputKind` of ``value``.

    Typed buffers classify as :attr:`InputKind.LEAF` when
    ``skip_typed_buffers`` is set, so callers can keep them whole.
    """

    if value is None or isinstance(value, _LEAF_TYPES) or is_pending(value):
        return InputKind.LEAF
    platform = resolve_platform(platform)
    if platform.is_typed_buffer(value):
        return InputKind.LEAF if skip_typed_buffers else InputKind.TYPED_BUFFER
    if isinstance(value, np.ndarray):
        return InputKind.LEAF if value.ndim == 0 else InputKind.SEQUENCE
    if isinstance(value, Mapping):
        return InputKind.ARRAY_LIKE
    # Any other iterable (range, deque, generators, array.array, ...) is walked
    # in iteration order.
    if isinstance(value, Iterable):
        return InputKind.SEQUENCE
    return InputKind.ARRAY_LIKE


def _index_keys(value: object) -> Tuple[Any, ...]:
    if isinstance(value, Mapping):
        return tuple(value.keys())
    attrs = getattr(value, "__dict__", None)
    return tuple(attrs.keys()) if isinstance(attrs, Mapping) else ()


def _as_index(key: object) -> Optional[int]:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, str) and _INDEX_KEY_PATTERN.match(key):
        return int(key)
    return None


def _lookup(value: object, index: int) -> object:
    if isinstance(value, Mapping):
        if index in value:
            return value[index]
        return value.get(str(index))
    return getattr(value, "__dict__", {}).get(str(index))


def array_like_length(value: object) -> Tuple[int, int]:
    """Return ``(dense_length, populated)`` for an array-like object.

    ``dense_length`` is one past the largest integer-like key; ``populated``
    counts the distinct integer-like keys actually present.
    """

    indices = {index for index in map(_as_index, _index_keys(value)) if index is not None}
    if not indices:
        return 0, 0
    return max(indices) + 1, len(indices)


def _iter_array_like(value: object, threshold: int) -> Iterator[object]:
    length, populated = array_like_length(value)
    if length - populated > threshold:
        logger.warning(
            "Array-like object with %d populated keys expands to %d dense slots",
            populated,
            length,
        )
    for index in range(length):
        yield _lookup(value, index)


def flatten(
    value: object,
    result: Optional[List[Any]] = None,
    skip_typed_buffers: bool = False,
    *,
    platform: Optional[Platform] = None,
    sparse_warning_threshold: int = DEFAULT_SPARSE_WARNING_THRESHOLD,
) -> List[Any]:
    """Flatten an arbitrarily nested value depth-first, left to right.

    Array-like objects are read densely up to their largest integer-like key
    and absent indices contribute ``None``.  Leaves are appended to
    ``result`` when it is given.
    """

    if result is None:
        result = []
    platform = resolve_platform(platform)

    # Each frame pairs an iterator with the id of the container it walks.
    stack: List[Tuple[Iterator[object], Optional[int]]] = [(iter((value,)), None)]
    active: set = set()
    while stack:
        iterator, owner = stack[-1]
        try:
            item = next(iterator)
        except StopIteration:
            stack.pop()
            if owner is not None:
                active.discard(owner)
            continue

        kind = classify_input(item, skip_typed_buffers, platform)
        if kind is InputKind.LEAF:
            result.append(item)
            continue
        if kind is InputKind.TYPED_BUFFER:
            result.extend(np.ravel(item).tolist())
            continue

        marker = id(item)
        if marker in active:
            raise ValueError("Cannot flatten a cyclic structure")
        active.add(marker)
        if kind is InputKind.SEQUENCE:
            stack.append((iter(item), marker))
        else:
            stack.append((_iter_array_like(item, sparse_warning_threshold), marker))
    return result


__all__ = [
    "InputKind",
    "array_like_length",
    "classify_input",
    "flatten",
    "is_pending",
]
