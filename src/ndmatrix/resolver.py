# src/ndmatrix/resolver.py
"""
Bounds validation and index -> physical offset translation.

Every indexed access in the package goes through ``physical_offset`` (single
index) or ``physical_offsets`` (batch). No offset is computed from an index
that has not been validated against the shape.
"""
from __future__ import annotations
from typing import Iterable, Sequence, Tuple
import numbers

import numpy as np

from .errors import DimError, OutOfBoundsError
from .kernels import DIM_MISMATCH, OK, resolve_offsets
from .layout import Layout
from .strides import derive_strides, shape_size

__all__ = [
    "as_index", "check_bounds", "physical_offset", "physical_offsets", "unravel_offset",
]


def as_index(index: int | Iterable[int]) -> Tuple[int, ...]:
    """Normalize an int or iterable of ints into an index tuple."""
    if isinstance(index, numbers.Integral):
        return (int(index),)
    out = []
    for i in index:
        if isinstance(i, bool) or not isinstance(i, numbers.Integral):
            raise TypeError(f"index components must be integers; got {type(i).__name__}")
        out.append(int(i))
    return tuple(out)


def check_bounds(shape: Sequence[int], index: int | Iterable[int]) -> None:
    """
    Raise DimError if the rank differs, OutOfBoundsError if any component
    lies outside [0, shape[i]). Returns None when the index is valid.
    """
    idx = as_index(index)
    if len(idx) != len(shape):
        raise DimError(idx, len(shape))
    for i, dim in zip(idx, shape):
        if i < 0 or i >= dim:
            raise OutOfBoundsError(idx, shape)


def physical_offset(
    shape: Sequence[int], strides: Sequence[int], index: int | Iterable[int]
) -> int:
    """Validated flat offset: sum(index[i] * strides[i])."""
    idx = as_index(index)
    check_bounds(shape, idx)
    return sum(i * s for i, s in zip(idx, strides))


def physical_offsets(
    shape: Sequence[int], strides: Sequence[int], indices
) -> np.ndarray:
    """
    Validated flat offsets for an (n, ndim) batch of indices.
    A 1D input is one index, resolved as a batch of a single row.
    Raises the error of the first invalid row; returns int64 offsets.
    """
    rows = np.asarray(indices, dtype=np.int64)
    if rows.size == 0 and rows.ndim < 2:
        return np.zeros(0, dtype=np.int64)
    if rows.ndim == 1:
        rows = rows.reshape(1, -1)
    elif rows.ndim != 2:
        raise DimError(rows.shape, len(shape))
    status, out, bad_row = resolve_offsets(shape, strides, rows)
    if status == OK:
        return out
    bad = tuple(int(v) for v in rows[bad_row]) if rows.shape[0] else ()
    if status == DIM_MISMATCH:
        raise DimError(bad, len(shape))
    raise OutOfBoundsError(bad, shape)


def unravel_offset(shape: Sequence[int], layout: Layout, offset: int) -> Tuple[int, ...]:
    """Inverse of ``physical_offset`` for buffers laid out by ``layout``."""
    size = shape_size(shape)
    if offset < 0 or offset >= size:
        raise OutOfBoundsError((offset,), (size,))
    strides = derive_strides(shape, layout)
    # Peel the largest strides first.
    order = sorted(range(len(shape)), key=lambda axis: strides[axis], reverse=True)
    idx = [0] * len(shape)
    rest = offset
    for axis in order:
        if shape[axis] <= 1:
            continue
        idx[axis], rest = divmod(rest, strides[axis])
    return tuple(idx)
