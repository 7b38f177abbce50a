# src/ndmatrix/kernels.py
from __future__ import annotations

from enum import IntEnum
from typing import Callable
import numpy as np

from .jit import jit_compile

__all__ = [
    "Status", "OK", "DIM_MISMATCH", "OUT_OF_BOUNDS",
    "resolve_offsets", "broadcast_offsets",
    "configure_jit", "jit_enabled",
]


class Status(IntEnum):
    """Return codes of the offset kernels."""
    OK = 0
    DIM_MISMATCH = 1     # index width != rank
    OUT_OF_BOUNDS = 2    # some component outside [0, shape[i])

# Plain int constants for JIT friendliness in kernels
OK: int = int(Status.OK)
DIM_MISMATCH: int = int(Status.DIM_MISMATCH)
OUT_OF_BOUNDS: int = int(Status.OUT_OF_BOUNDS)


# ---- kernel bodies (numba-compatible; int64 arrays only) ---------------------

def _resolve_offsets_impl(
    shape: np.ndarray,      # int64[ndim]
    strides: np.ndarray,    # int64[ndim]
    indices: np.ndarray,    # int64[n, k]
    out: np.ndarray,        # int64[n]
    bad_row: np.ndarray,    # int64[1]
) -> int:
    ndim = shape.shape[0]
    if indices.shape[1] != ndim:
        bad_row[0] = 0
        return 1  # DIM_MISMATCH
    for r in range(indices.shape[0]):
        off = 0
        for i in range(ndim):
            v = indices[r, i]
            if v < 0 or v >= shape[i]:
                bad_row[0] = r
                return 2  # OUT_OF_BOUNDS
            off += v * strides[i]
        out[r] = off
    bad_row[0] = -1
    return 0


def _broadcast_offsets_impl(
    shape: np.ndarray,      # int64[ndim] combined shape
    strides_a: np.ndarray,  # int64[ndim]
    strides_b: np.ndarray,  # int64[ndim]
    out_a: np.ndarray,      # int64[size]
    out_b: np.ndarray,      # int64[size]
) -> None:
    # Walk the combined shape in row-major order with an odometer counter.
    ndim = shape.shape[0]
    total = out_a.shape[0]
    if total == 0:
        return
    counter = np.zeros(ndim, dtype=np.int64)
    off_a = 0
    off_b = 0
    for k in range(total):
        out_a[k] = off_a
        out_b[k] = off_b
        axis = ndim - 1
        while axis >= 0:
            counter[axis] += 1
            off_a += strides_a[axis]
            off_b += strides_b[axis]
            if counter[axis] < shape[axis]:
                break
            off_a -= strides_a[axis] * shape[axis]
            off_b -= strides_b[axis] * shape[axis]
            counter[axis] = 0
            axis -= 1


# Mutable bindings exported to callers; pure Python until configure_jit(True).
_resolve_offsets: Callable = _resolve_offsets_impl
_broadcast_offsets: Callable = _broadcast_offsets_impl
_JIT_ON = False


def configure_jit(enabled: bool) -> None:
    """Select Python or numba implementation of the kernels."""

    global _resolve_offsets, _broadcast_offsets, _JIT_ON
    if enabled:
        r = jit_compile(_resolve_offsets_impl, jit=True)
        b = jit_compile(_broadcast_offsets_impl, jit=True)
        _resolve_offsets, _broadcast_offsets = r.fn, b.fn
        _JIT_ON = r.jitted and b.jitted
    else:
        _resolve_offsets = _resolve_offsets_impl
        _broadcast_offsets = _broadcast_offsets_impl
        _JIT_ON = False


def jit_enabled() -> bool:
    return _JIT_ON


def _i64(a) -> np.ndarray:
    return np.ascontiguousarray(np.asarray(a, dtype=np.int64))


# ---- public wrappers -----------------------------------------------------------

def resolve_offsets(shape, strides, indices) -> tuple[int, np.ndarray, int]:
    """
    Validate and resolve a batch of multi-indices.

    Returns (status, offsets, bad_row). ``offsets`` is only meaningful when
    status == OK; ``bad_row`` is the first failing row otherwise.
    """
    idx = _i64(indices)
    if idx.ndim != 2:
        raise ValueError(f"indices must be 2D (n, ndim); got shape {idx.shape}")
    out = np.zeros(idx.shape[0], dtype=np.int64)
    bad_row = np.full(1, -1, dtype=np.int64)
    status = _resolve_offsets(_i64(shape), _i64(strides), idx, out, bad_row)
    return int(status), out, int(bad_row[0])


def broadcast_offsets(shape, strides_a, strides_b) -> tuple[np.ndarray, np.ndarray]:
    """Flat offsets of both operands for every combined index (row-major order)."""
    shp = _i64(shape)
    total = int(np.prod(shp)) if shp.size else 0
    out_a = np.zeros(total, dtype=np.int64)
    out_b = np.zeros(total, dtype=np.int64)
    _broadcast_offsets(shp, _i64(strides_a), _i64(strides_b), out_a, out_b)
    return out_a, out_b
