# src/ndmatrix/strides.py
from __future__ import annotations
from typing import Iterable, Tuple
import numbers

from .layout import Layout

__all__ = ["Shape", "Strides", "as_shape", "shape_size", "derive_strides"]

Shape = Tuple[int, ...]
Strides = Tuple[int, ...]


def as_shape(shape: int | Iterable[int]) -> Shape:
    """
    Normalize an int or iterable of ints into a validated shape tuple.
    Rank-0 shapes are not modeled.
    """
    if isinstance(shape, numbers.Integral):
        dims = (shape,)
    else:
        dims = tuple(shape)
    if not dims:
        raise ValueError("shape must have at least one dimension")
    out = []
    for axis, d in enumerate(dims):
        if isinstance(d, bool) or not isinstance(d, numbers.Integral):
            raise TypeError(f"shape[{axis}] must be an integer; got {type(d).__name__}")
        if d < 0:
            raise ValueError(f"shape[{axis}] must be non-negative; got {d}")
        out.append(int(d))
    return tuple(out)


def shape_size(shape: Iterable[int]) -> int:
    """Number of elements held by ``shape`` (product of its entries)."""
    n = 1
    for d in shape:
        n *= int(d)
    return n


def derive_strides(shape: Iterable[int], layout: Layout) -> Strides:
    """
    Per-dimension element strides for ``shape`` stored in ``layout``.

      ROW_MAJOR:    strides[-1] = 1, strides[i] = strides[i+1] * shape[i+1]
      COLUMN_MAJOR: strides[0]  = 1, strides[i] = strides[i-1] * shape[i-1]
    """
    dims = tuple(int(d) for d in shape)
    strides = [1] * len(dims)
    if layout is Layout.ROW_MAJOR:
        for i in range(len(dims) - 2, -1, -1):
            strides[i] = strides[i + 1] * dims[i + 1]
    elif layout is Layout.COLUMN_MAJOR:
        for i in range(1, len(dims)):
            strides[i] = strides[i - 1] * dims[i - 1]
    else:
        raise TypeError(f"layout must be a Layout; got {layout!r}")
    return tuple(strides)
