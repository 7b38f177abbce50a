# src/ndmatrix/buffers.py
from __future__ import annotations
from itertools import islice
from typing import Any, Iterable, Sequence
import numbers
import numpy as np

from .errors import InsufficientDataError

__all__ = [
    "allocate_flat", "fill_flat", "copy_flat", "require_flat", "carve_view",
]


def allocate_flat(size: int, dtype: np.dtype, default: Any = None) -> np.ndarray:
    """
    1D buffer of ``size`` elements holding the dtype default (zero),
    or ``default`` when given.
    """
    dtype = np.dtype(dtype)
    if default is None:
        return np.zeros(size, dtype=dtype)
    if dtype != np.dtype(object):
        return np.full(size, default, dtype=dtype)
    # np.full would try to broadcast sequence defaults
    a = np.empty(size, dtype=dtype)
    for i in range(size):
        a[i] = default
    return a


def _scalar_kind(v: Any) -> str:
    if isinstance(v, (bool, np.bool_)):
        return "b"
    if isinstance(v, numbers.Integral):
        return "i"
    if isinstance(v, numbers.Real):
        return "f"
    if isinstance(v, numbers.Complex):
        return "c"
    return "O"


def _infer_dtype(values: Sequence[Any]) -> np.dtype:
    """
    Native numeric dtype when every value is the same numeric kind;
    object otherwise, so values come back exactly as supplied.
    """
    if not values:
        return np.dtype("float64")
    kinds = {_scalar_kind(v) for v in values}
    if len(kinds) != 1 or "O" in kinds:
        return np.dtype(object)
    try:
        probe = np.asarray(values)
    except (ValueError, OverflowError):
        return np.dtype(object)
    if probe.ndim != 1 or probe.dtype.kind not in "biufc":
        return np.dtype(object)
    return probe.dtype


def _store(values: Sequence[Any], dtype: np.dtype | None) -> np.ndarray:
    if dtype is None:
        dtype = _infer_dtype(values)
    out = np.empty(len(values), dtype=dtype)
    for i, v in enumerate(values):
        out[i] = v
    return out


def fill_flat(source: Iterable[Any], size: int, dtype: np.dtype | None = None) -> np.ndarray:
    """
    Take exactly ``size`` values from ``source`` (possibly unbounded) in order.
    Raises InsufficientDataError when the source runs dry first.
    """
    values = list(islice(iter(source), size))
    if len(values) < size:
        raise InsufficientDataError(size, len(values))
    return _store(values, dtype)


def copy_flat(buffer: Sequence[Any], dtype: np.dtype | None = None) -> np.ndarray:
    """Owned 1D copy of an externally supplied flat buffer."""
    if isinstance(buffer, np.ndarray):
        target = buffer.dtype if dtype is None else dtype
        return require_flat(buffer, "buffer").astype(target, copy=True)
    return _store(list(buffer), dtype)


def require_flat(a: np.ndarray, name: str = "array") -> np.ndarray:
    """
    Ensure 'a' is a 1D numpy array. Raise TypeError/ValueError if not.
    (Guard only; not for hot loops.)
    """
    if not isinstance(a, np.ndarray):
        raise TypeError(f"{name} must be a numpy.ndarray")
    if a.ndim != 1:
        raise ValueError(f"{name} must be 1D; got shape {a.shape}")
    return a


def carve_view(a: np.ndarray, start: int, length: int) -> np.ndarray:
    """
    Return the view 'a[start:start+length]'.
    Guard that the slice is in bounds; raises ValueError if not.
    """
    if start < 0 or length < 0 or start + length > a.size:
        raise ValueError(f"slice out of bounds: start={start}, length={length}, size={a.size}")
    return a[start : start + length]
